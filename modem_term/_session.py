import enum
import logging
import sys
import time

from modem_term import _exceptions
from modem_term import _history

log = logging.getLogger("modem_term.session")

TERMINATOR = "\r"


class SessionState(enum.Enum):
    AWAITING_INPUT = "awaiting input"
    TRANSMITTING = "transmitting"
    RECEIVING = "receiving"
    EXITING = "exiting"


def frame_line(line: str) -> str:
    """'line' with exactly one trailing carriage return"""

    return line.rstrip(TERMINATOR) + TERMINATOR


class DuplexSession:
    """Line-at-a-time terminal over one open serial channel.

    Each iteration waits for a line from the operator, transmits it with a
    carriage return, then polls the channel once and copies whatever came
    back to 'output'. Transport timeouts mean "nothing yet" and are silent;
    other I/O errors are logged and the loop carries on. Only an interrupt
    or end of input at the prompt ends the session.
    """

    def __init__(
        self,
        channel,
        history: _history.HistoryStore,
        *,
        prompt: str = "> ",
        read_line=None,
        output=None,
        delay: float | int = 0.05,
        read_size: int = 1024,
    ):
        self._channel = channel
        self._history = history
        self._prompt = prompt
        self._read_line = read_line or input
        self._output = output if output is not None else sys.stdout.buffer
        self._delay = delay
        self._read_size = read_size
        self.state = SessionState.AWAITING_INPUT

    def __repr__(self) -> str:
        return f"DuplexSession({self._channel!r}, {self.state.value})"

    def run(self) -> int:
        try:
            while self.state is not SessionState.EXITING:
                try:
                    self.submit(self._read_line(self._prompt))
                except (KeyboardInterrupt, EOFError):
                    self.state = SessionState.EXITING
        finally:
            self._save_history()
        return 0

    def submit(self, line: str) -> None:
        """Transmits one operator line and shows any response"""

        framed = frame_line(line)
        self._history.append(framed)

        self.state = SessionState.TRANSMITTING
        self._transmit(framed.encode("utf-8", "surrogateescape"))
        if self._delay > 0:
            time.sleep(self._delay)

        self.state = SessionState.RECEIVING
        self._receive()
        self.state = SessionState.AWAITING_INPUT

    def _transmit(self, data: bytes) -> None:
        try:
            self._channel.write(data)
        except _exceptions.SerialIoTimeout:
            log.debug("Write timeout on %s", self._channel.port_name)
        except _exceptions.SerialIoException as exc:
            log.error("Can't transmit %r (%s)", data, exc)

    def _receive(self) -> None:
        try:
            incoming = self._channel.read(self._read_size)
        except _exceptions.SerialIoTimeout:
            return
        except _exceptions.SerialIoException as exc:
            log.error("Can't receive (%s)", exc)
            return

        self._output.write(incoming)
        self._output.flush()

    def _save_history(self) -> None:
        try:
            self._history.save()
        except _exceptions.HistoryException as exc:
            log.error("%s", exc)
