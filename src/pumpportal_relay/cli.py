#!/usr/bin/env python3
"""
Command-line interface for PumpPortal Relay.

This CLI runs the relay daemon, writes a default configuration file and
renders captured feed frames offline for checking message templates.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from .config import RelayConfig, create_default_config
from .formatting import format_history_listing
from .notifiers import LogNotifier
from .relay import PumpPortalRelay


def create_parser():
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="PumpPortal Relay - Command Line Interface",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s run                              # Relay events to Telegram
  %(prog)s --config relay.json run          # Run with a config file
  %(prog)s init-config relay.json           # Write default configuration
  %(prog)s show-config                      # Print effective configuration
  %(prog)s render frames.jsonl              # Render captured frames offline
        """
    )

    parser.add_argument(
        '--config', '-c',
        type=Path,
        help='Configuration file path'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Run command
    subparsers.add_parser('run', help='Run the relay daemon')

    # Init config command
    init_parser = subparsers.add_parser('init-config', help='Write default configuration file')
    init_parser.add_argument('path', type=Path, help='Where to write the JSON config')
    init_parser.add_argument('--force', action='store_true', help='Overwrite an existing file')

    # Show config command
    show_parser = subparsers.add_parser('show-config', help='Print effective configuration')
    show_parser.add_argument('--show-secrets', action='store_true', help='Do not mask the bot token')

    # Render command
    render_parser = subparsers.add_parser('render', help='Render JSON frames (one per line) offline')
    render_parser.add_argument('input', help="Frames file, or '-' for stdin")

    return parser


def load_config(args) -> RelayConfig:
    """Build the effective configuration from file, environment and flags."""
    if args.config:
        config = RelayConfig.load_from_file(args.config).apply_env()
    else:
        config = create_default_config()

    if args.verbose:
        config.log_level = "DEBUG"

    return config


async def run_relay(config: RelayConfig) -> None:
    """Build the relay on the running loop and serve until stopped."""
    relay = PumpPortalRelay(config=config)
    await relay.run_forever()


def cmd_run(args, config):
    """Handle run command."""
    print("Starting PumpPortal Relay...")
    print("Press Ctrl+C to stop")

    try:
        asyncio.run(run_relay(config))
    except KeyboardInterrupt:
        print("\nStopping relay...")
    except Exception as e:
        print(f"Relay error: {e}")
        return 1

    print("Relay stopped")


def cmd_init_config(args, config):
    """Handle init-config command."""
    if args.path.exists() and not args.force:
        print(f"Error: {args.path} already exists (use --force to overwrite)")
        return 1

    RelayConfig().save_to_file(args.path)
    print(f"Default configuration written to {args.path}")


def cmd_show_config(args, config):
    """Handle show-config command."""
    data = config.to_dict()
    if data['telegram'].get('bot_token') and not args.show_secrets:
        data['telegram']['bot_token'] = '***'
    print(json.dumps(data, indent=2, default=str))


async def render_frames(lines, config: RelayConfig) -> str:
    """Feed frames through an offline relay and return the /list view."""
    config.enable_health = False
    relay = PumpPortalRelay(config=config, notifier=LogNotifier(), setup_logging=False)

    await relay.context.dispatcher.start()
    try:
        for line in lines:
            line = line.strip()
            if line:
                relay.context.stream.handle_frame(line)
    finally:
        await relay.context.dispatcher.stop()

    return format_history_listing(relay.history)


def cmd_render(args, config):
    """Handle render command."""
    try:
        if args.input == '-':
            lines = sys.stdin.readlines()
        else:
            with open(args.input, 'r', encoding='utf-8') as f:
                lines = f.readlines()
    except OSError as e:
        print(f"Error reading frames: {e}")
        return 1

    print(asyncio.run(render_frames(lines, config)))


def main():
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    load_dotenv()

    try:
        config = load_config(args)

        if args.command == 'run':
            return cmd_run(args, config) or 0
        elif args.command == 'init-config':
            return cmd_init_config(args, config) or 0
        elif args.command == 'show-config':
            return cmd_show_config(args, config) or 0
        elif args.command == 'render':
            return cmd_render(args, config) or 0
        else:
            print(f"Unknown command: {args.command}")
            return 1

    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
