#!/usr/bin/env python3

"""CLI tool to find a modem's serial port and talk to it"""

import argparse
import logging
import ok_logging_setup
import sys

import modem_term

ok_logging_setup.skip_traceback_for(modem_term.SerialScanException)
ok_logging_setup.skip_traceback_for(modem_term.ModemResolveException)
ok_logging_setup.skip_traceback_for(modem_term.SerialOpenException)

DEFAULT_HISTORY = "~/.modem_term_history"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Modem serial terminal.")
    parser.add_argument(
        "--port", "-p", help="serial port to use instead of modem lookup"
    )
    parser.add_argument(
        "--baud", "-b", default=115200, type=positive_int, help="baud rate"
    )
    parser.add_argument(
        "--history", default=DEFAULT_HISTORY, help="command history file"
    )
    parser.add_argument(
        "--delay",
        default=0.05,
        type=float,
        help="seconds to wait between sending a line and reading",
    )
    parser.add_argument(
        "--list",
        "-l",
        action="store_true",
        help="list serial ports and modems, then exit",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="log debug details"
    )

    args = parser.parse_args(argv)
    level = "debug" if args.verbose else "info"
    ok_logging_setup.install({"OK_LOGGING_LEVEL": level})

    print(modem_term.format_port_listing(list_ports()))

    inventory = modem_term.select_inventory(args.port)
    if args.list:
        try:
            modems = inventory.find_modems()
        except modem_term.ModemResolveException as exc:
            logging.warning("⚠️ %s", exc)
        else:
            for modem in modems:
                print(modem_term.format_modem(modem))
        return 0

    port = resolve_port(inventory)
    config = modem_term.SessionConfig(port_name=port, baud_rate=args.baud)
    try:
        channel = modem_term.open_channel(config)
    except modem_term.SerialOpenException as exc:
        ok_logging_setup.exit(f"❌ Can't open {port}: {exc.__cause__ or exc}")

    history = modem_term.HistoryStore(args.history)
    try:
        history.load()
    except modem_term.HistoryException as exc:
        logging.warning("⚠️ %s", exc)
    history.install_recall()

    logging.info("🔌 Connected to %s (Ctrl-C or Ctrl-D to quit)", port)
    with channel:
        session = modem_term.DuplexSession(
            channel, history, prompt=f"{port}> ", delay=args.delay
        )
        return session.run()


def positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def list_ports() -> list[modem_term.PortDescriptor]:
    """Scans serial ports; scan failure is logged and yields no ports"""

    try:
        return modem_term.scan_serial_ports()
    except modem_term.SerialScanException as exc:
        logging.error("Error listing serial ports: %s", exc.__cause__ or exc)
        return []


def resolve_port(inventory: modem_term.ModemInventory) -> str:
    try:
        modems = inventory.find_modems()
        port = modem_term.choose_modem_port(modems)
    except modem_term.ModemAmbiguous as exc:
        candidates = exc.candidates
        ok_logging_setup.exit(
            f"🚫 {exc}:"
            + "".join(f"\n  {modem_term.format_modem(m)}" for m in candidates)
        )
    except modem_term.ModemResolveException as exc:
        ok_logging_setup.exit(f"❌ {exc}")

    for modem in modems:
        logging.debug("Modem: %s", modem_term.format_modem(modem))
    return port


if __name__ == "__main__":
    sys.exit(main())
