import abc
import logging
import subprocess
import sys

import msgspec

from modem_term import _exceptions

log = logging.getLogger("modem_term.resolving")

WMI_QUERY = (
    "Get-CimInstance -ClassName Win32_POTSModem"
    " | Select-Object Name,Status,AttachedTo"
    " | ConvertTo-Json -Compress"
)


class ModemDescriptor(msgspec.Struct, frozen=True):
    """A modem-class device from the host inventory"""

    name: str
    status: str
    attached_port: str


class _WmiModem(msgspec.Struct, rename="pascal"):
    name: str | None = None
    status: str | None = None
    attached_to: str | None = None


class ModemInventory(abc.ABC):
    """Source of modem descriptors for this host"""

    @abc.abstractmethod
    def find_modems(self) -> list[ModemDescriptor]:
        """Modems with their attached ports, or ModemResolveException"""


class WmiModemInventory(ModemInventory):
    """Windows device inventory (Win32_POTSModem) via PowerShell"""

    def __init__(self, timeout: float = 15.0):
        self._timeout = timeout

    def __repr__(self) -> str:
        return "WmiModemInventory()"

    def find_modems(self) -> list[ModemDescriptor]:
        command = ["powershell", "-NoProfile", "-NonInteractive", "-Command"]
        log.debug("Querying Win32_POTSModem")
        try:
            result = subprocess.run(
                command + [WMI_QUERY],
                capture_output=True,
                check=True,
                timeout=self._timeout,
            )
        except (OSError, subprocess.SubprocessError) as ex:
            message = "Can't query modem inventory (Win32_POTSModem)"
            raise _exceptions.ModemResolveException(message) from ex

        return parse_wmi_modems(result.stdout)


class ManualModemInventory(ModemInventory):
    """Operator-supplied port, no inventory lookup"""

    def __init__(self, port: str):
        self._port = port

    def __repr__(self) -> str:
        return f"ManualModemInventory({self._port!r})"

    def find_modems(self) -> list[ModemDescriptor]:
        return [ModemDescriptor(self._port, "manual", self._port)]


class UnavailableModemInventory(ModemInventory):
    """Hosts without a modem inventory"""

    def __repr__(self) -> str:
        return "UnavailableModemInventory()"

    def find_modems(self) -> list[ModemDescriptor]:
        message = f"No modem inventory on {sys.platform}, use --port"
        raise _exceptions.ModemResolveException(message)


def select_inventory(port: str | None = None) -> ModemInventory:
    if port:
        return ManualModemInventory(port)
    elif sys.platform == "win32":
        return WmiModemInventory()
    else:
        return UnavailableModemInventory()


def parse_wmi_modems(raw: bytes) -> list[ModemDescriptor]:
    """Converts ConvertTo-Json output (object, array or empty) to modems"""

    if not raw.strip():
        return []

    try:
        decoded = msgspec.json.decode(raw, type=list[_WmiModem] | _WmiModem)
    except msgspec.DecodeError as ex:
        message = "Bad modem inventory data"
        raise _exceptions.ModemResolveException(message) from ex

    out = []
    for wm in decoded if isinstance(decoded, list) else [decoded]:
        if not wm.attached_to:
            log.debug("Skipping %r (not attached to a port)", wm.name)
            continue
        out.append(
            ModemDescriptor(
                name=wm.name or "",
                status=wm.status or "",
                attached_port=wm.attached_to,
            )
        )

    log.debug("Found %d modems", len(out))
    return out


def choose_modem_port(modems: list[ModemDescriptor]) -> str:
    """The single port a modem is attached to, or an exception"""

    if not modems:
        raise _exceptions.ModemResolveException("No modems found")
    if len(modems) > 1:
        message = f"{len(modems)} modems found, pick one with --port"
        raise _exceptions.ModemAmbiguous(message, list(modems))
    return modems[0].attached_port


def format_modem(modem: ModemDescriptor) -> str:
    return f"{modem.attached_port}: {modem.name} (status={modem.status})"
