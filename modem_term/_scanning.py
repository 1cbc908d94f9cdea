import enum
import logging
import natsort
import msgspec
from serial.tools import list_ports
from serial.tools import list_ports_common

from modem_term import _exceptions

log = logging.getLogger("modem_term.scanning")


class ConnectionKind(enum.Enum):
    USB = "USB"
    BLUETOOTH = "Bluetooth"
    PCI = "PCI"
    UNKNOWN = "Unknown"


class UsbInfo(msgspec.Struct, frozen=True):
    vendor_id: int
    product_id: int
    serial_number: str | None = None
    manufacturer: str | None = None
    product: str | None = None


class PortDescriptor(msgspec.Struct, frozen=True):
    """What we know about a potentially available serial port on the system"""

    name: str
    connection_kind: ConnectionKind = ConnectionKind.UNKNOWN
    usb_info: UsbInfo | None = None

    def __str__(self):
        return self.name


def scan_serial_ports() -> list[PortDescriptor]:
    """Returns a list of serial ports found on the current system"""

    try:
        ports = list_ports.comports()
    except OSError as ex:
        raise _exceptions.SerialScanException("Can't scan serial") from ex

    out = [_convert_port(p) for p in ports]
    out.sort(key=natsort.natsort_keygen(key=lambda p: p.name, alg=natsort.ns.P))
    log.debug("Found %d ports", len(out))
    return out


def format_port_listing(ports: list[PortDescriptor]) -> str:
    """Human-readable summary of 'ports', one detail block per port"""

    num = len(ports)
    if num == 0:
        return "No ports found."

    lines = ["Found 1 port:" if num == 1 else f"Found {num} ports:"]
    for port in ports:
        lines.append(f"  {port.name}")
        lines.append(f"    Type: {port.connection_kind.value}")
        if usb := port.usb_info:
            vid, pid = usb.vendor_id, usb.product_id
            lines.append(f"    VID:{vid:04x} PID:{pid:04x}")
            lines.append(f"     Serial Number: {usb.serial_number or ''}")
            lines.append(f"      Manufacturer: {usb.manufacturer or ''}")
            lines.append(f"           Product: {usb.product or ''}")
    return "\n".join(lines)


def _convert_port(p: list_ports_common.ListPortInfo) -> PortDescriptor:
    _NA = (None, "", "n/a")
    if p.vid is not None and p.pid is not None:
        usb = UsbInfo(
            vendor_id=p.vid,
            product_id=p.pid,
            serial_number=None if p.serial_number in _NA else p.serial_number,
            manufacturer=None if p.manufacturer in _NA else p.manufacturer,
            product=None if p.product in _NA else p.product,
        )
        return PortDescriptor(p.device, ConnectionKind.USB, usb)

    hwid = (p.hwid or "").upper()
    subsystem = getattr(p, "subsystem", None) or ""
    if "BTHENUM" in hwid or subsystem == "bluetooth":
        kind = ConnectionKind.BLUETOOTH
    elif (p.name or "").startswith("rfcomm"):
        kind = ConnectionKind.BLUETOOTH
    elif hwid.startswith("PCI") or subsystem == "pci":
        kind = ConnectionKind.PCI
    else:
        kind = ConnectionKind.UNKNOWN
    return PortDescriptor(p.device, kind)
