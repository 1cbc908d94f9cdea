"""Exception hierarchy for modem_term"""


class SerialException(OSError):
    def __init__(
        self,
        message: str,
        port: str | None = None,
    ):
        super().__init__(f"{port}: {message}" if port else message)
        self.port = port


class SerialScanException(SerialException):
    pass


class ModemResolveException(SerialException):
    pass


class ModemAmbiguous(ModemResolveException):
    def __init__(self, message: str, candidates: list):
        super().__init__(message)
        self.candidates = candidates


class SerialOpenException(SerialException):
    pass


class SerialOpenBusy(SerialOpenException):
    pass


class SerialIoException(SerialException):
    pass


class SerialIoTimeout(SerialIoException):
    pass


class SerialIoClosed(SerialIoException):
    pass


class HistoryException(OSError):
    def __init__(self, message: str, path: str):
        super().__init__(f"{path}: {message}")
        self.path = path
