"""Main CLI entry point for ecrpoll."""

import argparse
import json
import logging
import sys
from typing import Any, Dict

from .config.settings import Config
from .exceptions import PollerError
from .operations.poll import PollOperation
from .utils.logger import setup_logging


logger = logging.getLogger(__name__)


def print_json_output(data: Dict[str, Any]):
    """Print formatted JSON output."""
    print(json.dumps(data, indent=2))


def handle_poll(args):
    """Handle the poll run."""
    try:
        config = Config()
        poll_op = PollOperation(config, args.output_path)

        result = poll_op.poll_repositories(
            continue_on_error=args.continue_on_error,
            show_progress=not args.no_progress
        )

        output = {
            "Operation": "Poll",
            "Registry": result['registry'],
            "OutputPath": result['output_path'],
            "ColdStart": result['cold_start'],
            "Repositories": [
                {
                    "Name": repo['repository'],
                    "ImagesFound": repo['images_found'],
                    "ImagesAppended": repo['images_appended'],
                    "TotalImages": repo['total_images']
                }
                for repo in result['repositories']
            ]
        }

        if result['errors']:
            output["Errors"] = result['errors']

        print_json_output(output)

        if result['errors']:
            sys.exit(1)

    except PollerError as e:
        logger.error(f"Polling failed: {e}")
        print_json_output({
            "Operation": "Poll",
            "Status": "Failed",
            "ErrorType": type(e).__name__,
            "Error": str(e)
        })
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ecrpoll',
        description='Polls AWS ECR repositories for newly pushed images and appends '
                    'their details to a JSON results file.',
        epilog='Credentials, registry, region, repositories and LAST_FETCHED_TIME are '
               'read from the environment.'
    )

    parser.add_argument(
        '--output-path',
        help='Results file to create or append to (default: /output/results.json, '
             'or OUTPUT_PATH from POLLER_CONFIG)'
    )
    parser.add_argument(
        '--continue-on-error',
        action='store_true',
        help='Keep polling the remaining repositories when one fails'
    )
    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable the progress bar'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Set logging level (default: INFO)'
    )
    parser.add_argument(
        '--log-file',
        help='Log to file in addition to console'
    )
    parser.set_defaults(func=handle_poll)
    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_file)

    args.func(args)


if __name__ == '__main__':
    main()
