import contextlib
import io
import ok_logging_setup
import os
import pty
import pytest
import typing

ok_logging_setup.install(
    {
        "OK_LOGGING_LEVEL": "modem_term=DEBUG,WARNING",
        "OK_LOGGING_OUTPUT": "stdout",
    }
)


class PseudoTtySerial(typing.NamedTuple):
    path: str
    control: io.FileIO
    simulated: io.FileIO


@pytest.fixture
def pty_serial():
    with contextlib.ExitStack() as cleanup:
        ctrl_fd, sim_fd = pty.openpty()
        path = os.ttyname(sim_fd)
        ctrl = cleanup.enter_context(os.fdopen(ctrl_fd, "r+b", buffering=0))
        sim = cleanup.enter_context(os.fdopen(sim_fd, "r+b", buffering=0))
        yield PseudoTtySerial(path=path, control=ctrl, simulated=sim)


class FakeChannel:
    """Scripted stand-in for SerialChannel"""

    def __init__(self, reads=(), write_error=None):
        self.port_name = "/dev/fake"
        self.written: list[bytes] = []
        self.reads = list(reads)
        self.write_error = write_error

    def write(self, data: bytes) -> int:
        self.written.append(data)
        if self.write_error:
            raise self.write_error
        return len(data)

    def read(self, max: int = 1024) -> bytes:
        result = self.reads.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result[:max]


@pytest.fixture
def fake_channel():
    return FakeChannel


def scripted_lines(*lines, end=EOFError):
    """A read_line() replacement that yields 'lines' then raises 'end'"""

    pending = list(lines)
    prompts = []

    def read_line(prompt):
        prompts.append(prompt)
        if not pending:
            raise end()
        return pending.pop(0)

    read_line.prompts = prompts
    return read_line


@pytest.fixture
def make_read_line():
    return scripted_lines
