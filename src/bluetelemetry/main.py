"""
bluetelemetry command line

Decodes weatronic DV4 / SkyNavigator telemetry from a live link, a captured
line log or the built-in simulator.
"""

import sys
import argparse
import logging
from datetime import tzinfo
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from PyQt6.QtCore import QCoreApplication

from . import __version__
from .communication.device_simulator import DeviceSimulator
from .communication.session import TelemetrySession
from .communication.transport import TelemetryReader, TransportFactory
from .errors import ConfigResolutionError
from .models.enums import Protocol
from .models.field_list import visible_field_names
from .utils.logger import setup_line_capture, setup_logger
from .utils.settings import AppSettings

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="bluetelemetry",
        description="Bluetooth Telemetry - DV4 / SkyNavigator telemetry decoder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s fields                             # List DV4 field names
  %(prog)s -p skynav fields --expand          # SkyNavigator fields incl. packet members
  %(prog)s replay capture.txt                 # Decode a captured line log
  %(prog)s simulate -n 20 --seed 1            # Decode simulated telemetry
  %(prog)s monitor --port /dev/rfcomm0        # Live decoding over a serial port
  %(prog)s monitor --port COM5 --capture log.txt  # ... and keep the raw lines
  %(prog)s monitor --address 00:11:22:33:44:55 --request "Tx Voltage" "Rx RSSI 1"
"""
    )

    parser.add_argument(
        "-p", "--protocol",
        choices=["dv4", "skynav"],
        help="Protocol variant (default: last used)"
    )

    parser.add_argument(
        "--tz",
        metavar="ZONE",
        help="Time zone for timestamps, e.g. UTC or Europe/Berlin (default: local)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    fields = sub.add_parser("fields", help="List field names")
    fields.add_argument("--expand", action="store_true",
                        help="Include the members of every composite field")

    replay = sub.add_parser("replay", help="Decode a file of captured lines")
    replay.add_argument("file", metavar="FILE", help="Text file, one message per line")

    simulate = sub.add_parser("simulate", help="Decode simulated telemetry")
    simulate.add_argument("-n", "--count", type=int, default=10,
                          help="Number of data lines (default: 10)")
    simulate.add_argument("--fields", type=int, default=10,
                          help="Number of random fields (default: 10)")
    simulate.add_argument("--seed", type=int, help="Random seed")

    monitor = sub.add_parser("monitor", help="Decode a live link")
    link = monitor.add_mutually_exclusive_group()
    link.add_argument("--port", help="Serial port (e.g. /dev/rfcomm0, COM5)")
    link.add_argument("--address", help="Bluetooth device address")
    monitor.add_argument("--baudrate", type=int, help="Serial baud rate")
    monitor.add_argument("--capture", metavar="FILE",
                         help="Append every received line to FILE (readable by replay)")
    monitor.add_argument("--request", nargs="+", metavar="NAME",
                         help="Field names to request from the device")

    return parser.parse_args(argv)


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown time zone {name!r}, using local time")
        return None


def print_values(session: TelemetrySession, field_ids: Optional[List[int]] = None):
    """Print name = value lines for the given (default: all active) fields."""
    ids = field_ids if field_ids is not None else session.active_field_ids
    for field_id in ids:
        field = session.registry.get_by_id(field_id)
        if field is None:
            continue
        if field.is_composite:
            for child in session.registry.children_of(field):
                print(f"{child.name:40s} {child.display_text}")
        else:
            print(f"{field.name:40s} {field.display_text}")


def capturing(session: TelemetrySession, capture: logging.Logger):
    """Line handler that records each line before decoding it."""
    def handle(line: str):
        capture.info(line)
        return session.process_line(line)
    return handle


def cmd_fields(session: TelemetrySession, args) -> int:
    if args.expand:
        for composite in session.registry.composites():
            composite.expanded = True
    for name in visible_field_names(session.registry):
        field = session.registry.get_by_name(name)
        print(f"{field.hex_id:>8s}  {name}")
    return 0


def cmd_replay(session: TelemetrySession, args) -> int:
    try:
        with open(args.file, "r", encoding="ascii", errors="replace") as f:
            for line in f:
                session.process_line(line.rstrip("\r\n"))
    except OSError as e:
        logger.error(f"Cannot read {args.file}: {e}")
        return 1

    print_values(session)
    stats = session.parser.stats
    logger.info(f"{stats.lines} lines: {stats.config} config, {stats.data} data, "
                f"{stats.malformed} malformed, {stats.ignored} ignored")
    return 0


def cmd_simulate(session: TelemetrySession, args) -> int:
    simulator = DeviceSimulator(session.registry, seed=args.seed)
    simulator.random_config(args.fields)
    for line in simulator.lines(args.count):
        logger.debug(f"< {line}")
        session.process_line(line)
    print_values(session)
    return 0


def cmd_monitor(session: TelemetrySession, settings: AppSettings, args) -> int:
    if args.address or (not args.port and settings.bluetooth_address and not settings.port):
        address = args.address or settings.bluetooth_address
        config = {"type": "Bluetooth", "address": address}
    else:
        port = args.port or settings.port
        if not port:
            logger.error("No serial port or Bluetooth address given")
            return 2
        config = {"type": "Serial", "port": port,
                  "baudrate": args.baudrate or settings.baudrate}

    transport = TransportFactory.create(config)
    if transport is None or not transport.connect():
        return 1

    if config["type"] == "Bluetooth":
        settings.bluetooth_address = config["address"]
    else:
        settings.port = config["port"]
        settings.baudrate = config["baudrate"]

    if args.request:
        try:
            session.request_fields(args.request, transport)
        except ConfigResolutionError as e:
            logger.error(str(e))
            transport.disconnect()
            return 2
        settings.last_fields = list(args.request)
    settings.save()

    session.subject.subscribe(lambda ids: print_values(session, ids))
    on_line = session.process_line
    if args.capture:
        on_line = capturing(session, setup_line_capture(args.capture))
    reader = TelemetryReader(transport, on_line)
    try:
        # Foreground loop; observers are called on this thread
        reader.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        reader.stop()
        transport.disconnect()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = parse_args(argv)

    setup_logger(logging.DEBUG if args.verbose else logging.INFO)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("BluetoothTelemetry")
    app.setOrganizationName("Weatronic")
    app.setApplicationVersion(__version__)

    settings = AppSettings.load()
    protocol = Protocol.from_name(args.protocol) if args.protocol else settings.protocol
    settings.protocol = protocol
    tz = resolve_timezone(args.tz if args.tz is not None else settings.timezone)

    logger.info(f"Starting bluetelemetry {__version__} ({protocol.label})")
    session = TelemetrySession(protocol, tz=tz)

    if args.command == "fields":
        return cmd_fields(session, args)
    if args.command == "replay":
        return cmd_replay(session, args)
    if args.command == "simulate":
        return cmd_simulate(session, args)
    return cmd_monitor(session, settings, args)


if __name__ == "__main__":
    sys.exit(main())
