"""
Device Random CLI

Command-line host for the random device driver. Bootstraps the driver
from a configuration file and a device profile, then runs read, write
and status commands against it.
"""

import argparse
import json
import logging
import sys
import time
from typing import List, Optional, Tuple

from colorama import Fore, Style, init

from . import __version__
from .config import ConfigError, DriverConfig, load_config
from .driver import RandomDriver
from .errors import DriverError
from .profile import DeviceProfile, ProfileError, ProfileParser, default_profile_path
from .status import status_handler
from .types import CommandValue


# Initialize colorama
init(autoreset=True)

logger = logging.getLogger(__name__)

EXIT_WORDS = ('exit', 'quit', 'done')


class UsageError(Exception):
    """Malformed command-line input"""
    pass


def setup_logging(verbose: bool, config: Optional[DriverConfig] = None):
    """
    Configure logging - WARNING on the console by default for cleaner output.

    The root level is the configured log_level (DEBUG with --verbose).

    Raises:
        OSError: If the configured log file cannot be opened
    """
    level = logging.DEBUG if verbose else getattr(logging, config.log_level if config else "INFO")

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handlers = [console]

    if config is not None and config.log_file:
        handlers.append(logging.FileHandler(config.log_file, mode="a", encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def print_header(config: DriverConfig):
    """Print CLI header"""
    print(f"\n{Fore.CYAN}{'=' * 70}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}{config.service_name} v{__version__}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}{'=' * 70}{Style.RESET_ALL}\n")


def print_reading(device_name: str, reading: CommandValue):
    """Print a single reading"""
    print(f"  {Fore.WHITE}{device_name}/{reading.resource:<20}{Style.RESET_ALL} "
          f"{Fore.GREEN}{reading.value:>12}{Style.RESET_ALL} "
          f"{Fore.LIGHTBLACK_EX}({reading.value_type.value}, origin={reading.origin}){Style.RESET_ALL}")


def format_error(error: Exception) -> str:
    """Error line for the console, tagged with the driver error code when there is one"""
    if isinstance(error, DriverError):
        return f"Error [{error.code.name}]: {error}"
    return f"Error: {error}"


def print_resources(profile: DeviceProfile):
    """Print the resources declared by a profile"""
    print(f"\n{Fore.GREEN}Resources in '{profile.name}' ({len(profile.resources)}):{Style.RESET_ALL}")
    print("-" * 60)

    for r in profile.resources:
        print(f"  {Fore.WHITE}{r.name:<22}{Style.RESET_ALL} "
              f"{r.value_type.value:<6} {Fore.YELLOW}[{r.read_write}]{Style.RESET_ALL}")
        if r.description:
            print(f"     {Fore.LIGHTBLACK_EX}{r.description[:55]}{Style.RESET_ALL}")

    print()


def parse_updates(pairs: List[str]) -> List[Tuple[str, int]]:
    """
    Parse ``FIELD=VALUE`` arguments into bound updates.

    Raises:
        UsageError: If a pair is malformed or the value is not an integer
    """
    updates = []
    for pair in pairs:
        if '=' not in pair:
            raise UsageError(f"Invalid update format: {pair} (expected FIELD=VALUE)")
        key, value = pair.split('=', 1)
        try:
            updates.append((key.strip(), int(value.strip())))
        except ValueError:
            raise UsageError(f"Value for {key.strip()} is not an integer: {value.strip()}")
    return updates


def read_target(
    driver: RandomDriver,
    profile: Optional[DeviceProfile],
    device_name: str,
    target: str,
) -> CommandValue:
    """Read a profile resource by name, or a bare value type such as ``Int8``"""
    if profile is not None and profile.get_resource(target) is not None:
        request = profile.read_request(target)
        return driver.handle_read_commands(device_name, [request])[0]
    return driver.read(device_name, target)


def cmd_status(args, driver: RandomDriver, profile: Optional[DeviceProfile]):
    """Print the service status"""
    print(f"{Fore.GREEN}{status_handler()}{Style.RESET_ALL}")
    return 0


def cmd_resources(args, driver: RandomDriver, profile: Optional[DeviceProfile]):
    """List profile resources"""
    if profile is None:
        raise UsageError("No device profile loaded")
    print_resources(profile)
    return 0


def cmd_read(args, driver: RandomDriver, profile: Optional[DeviceProfile]):
    """Read one or more values from a device"""
    count = max(1, args.count)

    for i in range(count):
        reading = read_target(driver, profile, args.device, args.target)
        if args.json:
            print(json.dumps(reading.to_dict()))
        else:
            print_reading(args.device, reading)
        if i + 1 < count and args.interval > 0:
            time.sleep(args.interval)

    return 0


def cmd_write(args, driver: RandomDriver, profile: Optional[DeviceProfile]):
    """Write bound updates to a device"""
    updates = parse_updates(args.updates)
    driver.write(args.device, updates)

    print(f"{Fore.GREEN}[OK]{Style.RESET_ALL} Updated {args.device}: "
          f"{', '.join(f'{k}={v}' for k, v in updates)}")
    return 0


def cmd_run(args, driver: RandomDriver, profile: Optional[DeviceProfile]):
    """Interactive session against a single device"""
    device_name = args.device

    print(f"\n{Fore.CYAN}Interactive session with {device_name}{Style.RESET_ALL}")
    print(f"{Fore.YELLOW}Commands: read <type|resource>, write FIELD=VALUE ..., "
          f"bounds, status. Type 'exit', 'quit', or 'done' to leave.{Style.RESET_ALL}\n")

    while True:
        try:
            line = input(f"{Fore.GREEN}[{device_name}]> {Style.RESET_ALL}").strip()
        except KeyboardInterrupt:
            print(f"\n{Fore.YELLOW}Interrupted.{Style.RESET_ALL}")
            break
        except EOFError:
            break

        if not line:
            continue
        if line.lower() in EXIT_WORDS:
            break

        run_line(driver, profile, device_name, line)

    return 0


def run_line(driver: RandomDriver, profile: Optional[DeviceProfile], device_name: str, line: str):
    """Execute one interactive command, reporting errors without leaving the session"""
    words = line.split()
    command, rest = words[0].lower(), words[1:]

    try:
        if command == 'read' and len(rest) == 1:
            print_reading(device_name, read_target(driver, profile, device_name, rest[0]))
        elif command == 'write' and rest:
            driver.write(device_name, parse_updates(rest))
            print(f"{Fore.GREEN}[OK]{Style.RESET_ALL}")
        elif command == 'bounds':
            device = driver.registry.get_or_create(device_name)
            for field_name, value in device.snapshot().items():
                print(f"  {field_name:<10} {value}")
        elif command == 'status':
            print(status_handler())
        else:
            print(f"{Fore.RED}Unknown command: {line}{Style.RESET_ALL}")
    except (DriverError, ProfileError, UsageError) as e:
        print(f"{Fore.RED}{format_error(e)}{Style.RESET_ALL}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='device-random',
        description='Random integer device service - generates bounded random readings',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Health check
  device-random status

  # Read five Int16 values, one per second
  device-random read Random-Device-01 Int16 --count 5 --interval 1

  # Narrow the Int8 range
  device-random write Random-Device-01 Min_Int8=-10 Max_Int8=10

  # Interactive session (state persists between commands)
  device-random run Random-Device-01
"""
    )

    # Global arguments
    parser.add_argument(
        '--config', '-c',
        help='Path to configuration JSON (or set DEVICE_RANDOM_CONFIG)'
    )
    parser.add_argument(
        '--profile', '-p',
        default=default_profile_path(),
        help='Path to device profile JSON (default: bundled profile)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    subparsers.add_parser('status', help='Print service status')
    subparsers.add_parser('resources', help='List device profile resources')

    read_parser = subparsers.add_parser('read', help='Read random values')
    read_parser.add_argument('device', help='Device name')
    read_parser.add_argument('target', help='Value type (Int8, Int16, Int32) or resource name')
    read_parser.add_argument(
        '--count', '-n',
        type=int,
        default=1,
        help='Number of readings (default: 1)'
    )
    read_parser.add_argument(
        '--interval', '-i',
        type=float,
        default=0.0,
        help='Seconds between readings (default: 0)'
    )
    read_parser.add_argument(
        '--json',
        action='store_true',
        help='Print each reading as a JSON object'
    )

    write_parser = subparsers.add_parser('write', help='Update device bounds')
    write_parser.add_argument('device', help='Device name')
    write_parser.add_argument('updates', nargs='+', help='FIELD=VALUE pairs, e.g. Min_Int8=-10')

    run_parser = subparsers.add_parser('run', help='Interactive session with one device')
    run_parser.add_argument('device', help='Device name')

    return parser


COMMANDS = {
    'status': cmd_status,
    'resources': cmd_resources,
    'read': cmd_read,
    'write': cmd_write,
    'run': cmd_run,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"{Fore.RED}Error loading config: {e}{Style.RESET_ALL}")
        return 1

    try:
        setup_logging(args.verbose, config)
    except OSError as e:
        print(f"{Fore.RED}Error loading config: cannot open log file {config.log_file}: {e}{Style.RESET_ALL}")
        return 1

    profile = None
    if args.profile:
        try:
            profile = ProfileParser.parse(args.profile)
        except ProfileError as e:
            print(f"{Fore.RED}Error loading profile: {e}{Style.RESET_ALL}")
            return 1

    if args.command == 'run':
        print_header(config)

    driver = RandomDriver(config)
    logger.info(f"Starting {config.service_name} v{__version__}")

    try:
        return COMMANDS[args.command](args, driver, profile)
    except (DriverError, ProfileError, UsageError) as e:
        print(f"{Fore.RED}{format_error(e)}{Style.RESET_ALL}")
        return 1
    finally:
        driver.stop(force=False)


if __name__ == '__main__':
    sys.exit(main())
