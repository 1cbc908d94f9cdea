import contextlib
import errno
import logging
import serial
from typing import Literal

import pydantic

from modem_term import _exceptions

log = logging.getLogger("modem_term.channel")
data_log = logging.getLogger(log.name + ".data")


class SessionConfig(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True)

    port_name: str
    baud_rate: pydantic.PositiveInt = 115200
    data_bits: Literal[8] = 8
    stop_bits: Literal[1] = 1
    read_timeout: pydantic.PositiveFloat = 0.01


class SerialChannel(contextlib.AbstractContextManager):
    """An open serial port with short, bounded read and write timeouts"""

    def __init__(self, config: SessionConfig, pyserial: serial.Serial):
        self._config = config
        self._pyserial = pyserial

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SerialChannel({self._config.port_name!r})"

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def port_name(self) -> str:
        return self._config.port_name

    def close(self) -> None:
        if self._pyserial.is_open:
            self._pyserial.close()
            log.debug("Closed %s", self.port_name)

    def write(self, data: bytes) -> int:
        """Writes 'data', raising SerialIoTimeout if it didn't go in time"""

        port = self._check_open()
        try:
            written = self._pyserial.write(data)
        except serial.SerialTimeoutException as ex:
            message = "Serial write timeout"
            raise _exceptions.SerialIoTimeout(message, port) from ex
        except OSError as ex:
            message = f"Serial write error ({ex})"
            raise _exceptions.SerialIoException(message, port) from ex

        data_log.debug("Wrote %d/%db", written or 0, len(data))
        return written or 0

    def read(self, max: int = 1024) -> bytes:
        """Reads up to 'max' bytes, raising SerialIoTimeout if none came"""

        port = self._check_open()
        try:
            incoming = self._pyserial.read(size=max)
        except OSError as ex:
            message = f"Serial read error ({ex})"
            raise _exceptions.SerialIoException(message, port) from ex

        if not incoming:
            raise _exceptions.SerialIoTimeout("Serial read timeout", port)

        data_log.debug("Read %d/%db", len(incoming), max)
        return incoming

    def _check_open(self) -> str:
        if not self._pyserial.is_open:
            message = "Serial port was closed"
            raise _exceptions.SerialIoClosed(message, self.port_name)
        return self.port_name


@pydantic.validate_call
def open_channel(config: SessionConfig) -> SerialChannel:
    port = config.port_name
    log.debug("Opening %s (%s)", port, config)
    try:
        pyserial = serial.Serial(
            port=port,
            baudrate=config.baud_rate,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
            timeout=config.read_timeout,
            write_timeout=config.read_timeout,
            exclusive=True,
        )
    except OSError as ex:
        if ex.errno in (errno.EBUSY, errno.EAGAIN):
            message = f"Serial port busy ({ex})"
            raise _exceptions.SerialOpenBusy(message, port) from ex
        else:
            message = f"Serial port open error ({ex})"
            raise _exceptions.SerialOpenException(message, port) from ex

    log.info("Opened %s at %d baud", port, config.baud_rate)
    return SerialChannel(config, pyserial)
