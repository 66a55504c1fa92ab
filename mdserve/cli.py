#!/usr/bin/env python
"""
Command-line interface for mdserve
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path

from mdserve.config import load_config, normalize_prefix
from mdserve.core.logging_config import setup_logging
from mdserve.version_info import __version__, __build_timestamp__, __build_type__

logger = logging.getLogger(__name__)


def print_version():
    """Print version information."""
    print(f"mdserve v{__version__}")
    print(f"Build: {__build_timestamp__}")
    print(f"Build Type: {__build_type__}")


def build_config(args):
    """Loaded configuration with command-line overrides applied."""
    config = load_config(args.config)
    if args.root is not None:
        config['root'] = args.root
    if args.prefix is not None:
        config['prefix'] = normalize_prefix(args.prefix)
    if args.middleware:
        config['middleware'] = True
    if args.debug:
        config['debug'] = True
    if args.log_level is not None:
        config['log_level'] = args.log_level
    if args.no_log_file:
        config['log_dir'] = None
    return config


def start_server(args):
    """Start the Flask server."""
    from mdserve.app import create_app

    config = build_config(args)
    log_file = setup_logging(config)

    app = create_app(config)
    host = args.host
    port = args.port or 8000

    print(f"Starting mdserve v{__version__}")
    print(f"Serving: {Path(config['root']).resolve()}")
    print(f"Documents: http://{host}:{port}{config['prefix']}")
    if log_file is not None:
        print(f"Log file: {log_file}")
    print("Press Ctrl+C to stop")
    print()

    app.run(host=host, port=port, debug=config['debug'], threaded=True)


def create_arg_parser():
    parser = argparse.ArgumentParser(
        description=f'mdserve v{__version__} - serve Markdown files as HTML',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mdserve --version                   Show version information
  mdserve                             Serve ./ under /docs/ on port 8000
  mdserve -r ./docs --prefix /        Serve ./docs at the site root
  mdserve start --port 8080 --debug   Start on port 8080 in debug mode
  mdserve --middleware                Render *.md, serve everything else as static files
        """
    )

    parser.add_argument('--version', '-v', action='store_true', help='Show version information')
    parser.add_argument('--host', type=str, default='127.0.0.1', help='Host to bind to (default: 127.0.0.1)')
    parser.add_argument('--port', '-p', type=int, default=8000, help='Port to bind to (default: 8000)')
    parser.add_argument('--debug', '-d', action='store_true', help='Run in debug mode')
    parser.add_argument('--root', '-r', type=str, default=None, help='Directory to serve (default: config or current directory)')
    parser.add_argument('--prefix', type=str, default=None, help='URL prefix for documents (default: /docs/)')
    parser.add_argument('--middleware', action='store_true', help='Render only *.md paths, serve other files unmodified')
    parser.add_argument('--config', '-c', type=str, default=None, help='Path to a JSON config file (default: ./mdserve.json)')
    parser.add_argument('--log-level', type=str, default=None, help='Console log level, e.g. WARNING (default: config or INFO)')
    parser.add_argument('--no-log-file', action='store_true', help='Log to the console only')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    subparsers.add_parser('start', help='Start the documentation server (default)')
    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = create_arg_parser()
    args = parser.parse_args(argv)

    if args.version:
        print_version()
        return 0

    if args.command in ('start', None):
        try:
            start_server(args)
            return 0
        except KeyboardInterrupt:
            print("\nServer stopped.")
            return 0
        except Exception as e:
            if args.debug:
                traceback.print_exc()
            logger.error(f"Error starting server: {e}")
            print(f"Error starting server: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
