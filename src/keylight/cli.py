"""
Key Light command line - control a single Key Light from the terminal
"""

import argparse
import asyncio
import logging
from typing import List, Optional

from keylight import __version__
from keylight.config import ControllerConfig
from keylight.controller import KeyLightController
from keylight.core.settings_schema import ControllerSettings
from keylight.errors import KeyLightError
from keylight.utils.color_utils import elgato_to_kelvin


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='keylight', description='Key Light Controller')
    parser.add_argument('--version', action='version', version=f'Key Light Controller {__version__}')
    parser.add_argument('--debug', action='store_true', help='Enable debug output')

    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument('--ip', help='Device address as IP or IP:PORT')
    target.add_argument('--name', help='Advertised device name, e.g. "Key Light Left"')
    parser.add_argument('--timeout', type=float, default=None,
                        help='Seconds to wait for discovery when using --name')

    commands = parser.add_subparsers(dest='command', required=True)
    commands.add_parser('status', help='Show the current state')
    commands.add_parser('on', help='Turn the light on')
    commands.add_parser('off', help='Turn the light off')
    brightness = commands.add_parser('brightness', help='Set brightness (0-100)')
    brightness.add_argument('value', type=int)
    temperature = commands.add_parser('temperature', help='Set color temperature (2900-7000K)')
    temperature.add_argument('value', type=int)
    relative = commands.add_parser('relative', help='Change brightness by a fraction (-1.0 to 1.0)')
    relative.add_argument('value', type=float)
    return parser


async def run(args: argparse.Namespace, settings: ControllerSettings) -> None:
    # Single command per run, no need for the poll loop
    if args.ip:
        controller = await KeyLightController.from_ip(args.ip, args.ip, poll=False, settings=settings)
    else:
        controller = await KeyLightController.from_name(args.name, poll=False,
                                                        timeout=args.timeout, settings=settings)

    async with controller:
        if args.command == 'on':
            await controller.set_power(True)
        elif args.command == 'off':
            await controller.set_power(False)
        elif args.command == 'brightness':
            await controller.set_brightness(args.value)
        elif args.command == 'temperature':
            await controller.set_temperature(args.value)
        elif args.command == 'relative':
            average = await controller.set_relative_brightness(args.value)
            print(f"{controller.name}: brightness {average:.0f}%")
            return

        status = await controller.get_status()
        for index, light in enumerate(status.lights):
            state = 'on' if light.is_on else 'off'
            print(f"{controller.name} [{index}]: {state}, brightness {light.brightness}%, "
                  f"{elgato_to_kelvin(light.temperature)}K")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    settings = ControllerConfig().settings()

    level = logging.DEBUG if args.debug or settings.enable_debug_logging else logging.WARNING
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        asyncio.run(run(args, settings))
    except KeyLightError as e:
        print(f"Error: {e}")
        return 1
    return 0
