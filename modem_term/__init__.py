"""
Interactive serial terminal for modems: port discovery, modem resolution,
and a line-at-a-time duplex session with persistent command history.
"""

from beartype.claw import beartype_this_package as _beartype_me

# ruff: noqa: E402
_beartype_me()

from modem_term._channel import (
    SerialChannel,
    SessionConfig,
    open_channel,
)

from modem_term._exceptions import (
    HistoryException,
    ModemAmbiguous,
    ModemResolveException,
    SerialException,
    SerialIoClosed,
    SerialIoException,
    SerialIoTimeout,
    SerialOpenBusy,
    SerialOpenException,
    SerialScanException,
)

from modem_term._history import HistoryStore
from modem_term._resolving import (
    ManualModemInventory,
    ModemDescriptor,
    ModemInventory,
    UnavailableModemInventory,
    WmiModemInventory,
    choose_modem_port,
    format_modem,
    select_inventory,
)
from modem_term._scanning import (
    ConnectionKind,
    PortDescriptor,
    UsbInfo,
    format_port_listing,
    scan_serial_ports,
)
from modem_term._session import DuplexSession, SessionState, frame_line

__all__ = [n for n in dir() if not n.startswith("_")]
