"""Unit tests for modem_term._resolving."""

import json
import subprocess
import sys

import pytest

import modem_term
from modem_term import ModemDescriptor
from modem_term import _resolving


def _completed(stdout: bytes) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout)


def test_parse_wmi_modems_shapes():
    one = {"Name": "Quectel USB Modem", "Status": "OK", "AttachedTo": "COM5"}
    two = {"Name": "Sierra Modem", "Status": "Error", "AttachedTo": "COM9"}
    detached = {"Name": "Ghost", "Status": "OK", "AttachedTo": None}

    assert _resolving.parse_wmi_modems(b"") == []
    assert _resolving.parse_wmi_modems(b"\r\n") == []
    assert _resolving.parse_wmi_modems(json.dumps(one).encode()) == [
        ModemDescriptor("Quectel USB Modem", "OK", "COM5")
    ]
    raw = json.dumps([one, detached, two]).encode()
    assert _resolving.parse_wmi_modems(raw) == [
        ModemDescriptor("Quectel USB Modem", "OK", "COM5"),
        ModemDescriptor("Sierra Modem", "Error", "COM9"),
    ]


def test_parse_wmi_modems_bad_data():
    with pytest.raises(modem_term.ModemResolveException):
        _resolving.parse_wmi_modems(b"Get-CimInstance : Invalid class")


def test_wmi_inventory_runs_powershell(mocker):
    modem = {"Name": "Telit LE910", "Status": "OK", "AttachedTo": "COM4"}
    run = mocker.patch("subprocess.run")
    run.return_value = _completed(json.dumps(modem).encode())

    modems = modem_term.WmiModemInventory().find_modems()
    assert modems == [ModemDescriptor("Telit LE910", "OK", "COM4")]

    (command,), kwargs = run.call_args
    assert command[0] == "powershell"
    assert "Win32_POTSModem" in command[-1]
    assert kwargs["check"] is True


@pytest.mark.parametrize(
    "error",
    [
        FileNotFoundError("powershell"),
        subprocess.CalledProcessError(1, "powershell"),
        subprocess.TimeoutExpired("powershell", 15),
    ],
)
def test_wmi_inventory_failure(mocker, error):
    mocker.patch("subprocess.run", side_effect=error)
    with pytest.raises(modem_term.ModemResolveException) as exc_info:
        modem_term.WmiModemInventory().find_modems()
    assert exc_info.value.__cause__ is error


def test_manual_inventory():
    inventory = modem_term.ManualModemInventory("/dev/ttyUSB2")
    (modem,) = inventory.find_modems()
    assert modem.attached_port == "/dev/ttyUSB2"


def test_unavailable_inventory():
    with pytest.raises(modem_term.ModemResolveException, match="--port"):
        modem_term.UnavailableModemInventory().find_modems()


def test_select_inventory(monkeypatch):
    chosen = modem_term.select_inventory("/dev/ttyACM0")
    assert isinstance(chosen, modem_term.ManualModemInventory)

    monkeypatch.setattr(sys, "platform", "win32")
    assert isinstance(
        modem_term.select_inventory(), modem_term.WmiModemInventory
    )

    monkeypatch.setattr(sys, "platform", "linux")
    assert isinstance(
        modem_term.select_inventory(), modem_term.UnavailableModemInventory
    )


def test_choose_modem_port():
    first = ModemDescriptor("Modem A", "OK", "COM3")
    second = ModemDescriptor("Modem B", "OK", "COM8")

    assert modem_term.choose_modem_port([first]) == "COM3"

    with pytest.raises(modem_term.ModemResolveException) as exc_info:
        modem_term.choose_modem_port([])
    assert not isinstance(exc_info.value, modem_term.ModemAmbiguous)

    with pytest.raises(modem_term.ModemAmbiguous) as exc_info:
        modem_term.choose_modem_port([first, second])
    assert exc_info.value.candidates == [first, second]


def test_format_modem():
    modem = ModemDescriptor("Quectel USB Modem", "OK", "COM5")
    expected = "COM5: Quectel USB Modem (status=OK)"
    assert modem_term.format_modem(modem) == expected


def test_inventory_interface_is_abstract():
    with pytest.raises(TypeError):
        modem_term.ModemInventory()

    class Incomplete(modem_term.ModemInventory):
        pass

    with pytest.raises(TypeError):
        Incomplete()
