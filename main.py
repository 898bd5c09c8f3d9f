#!/usr/bin/env python3
"""
Airtable Client CLI
===================

Command-line entry point for the Airtable client.

Usage:
    python main.py get Users rec123
    python main.py filter Users "{Name} = 'Ada'"
    python main.py list Users
    python main.py create Users '{"Name": "Ada"}' '{"Name": "Grace"}'
    python main.py --help

Requires AIRTABLE_KEY and AIRTABLE_BASE in the environment.
AIRTABLE_HOST optionally overrides the API host.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is in path
sys.path.insert(0, str(Path(__file__).parent))

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from airtable import AirtableClient, AirtableRequest, filter_by_formula
from core.errors import AirtableError, ConfigurationError
from infra.config import LoggingSettings, load_logging_settings
from infra.logging import configure_logging, get_logger


console = Console()


def setup_logging(args: argparse.Namespace, settings: LoggingSettings) -> None:
    """Initialize process-wide logging once, before any client exists."""
    level_name = args.log_level or settings.level

    configure_logging(
        level=getattr(logging, level_name.upper(), logging.INFO),
        log_dir=args.log_dir or settings.log_dir,
        file=settings.to_file and not args.no_log_file,
    )


def build_request(client: AirtableClient, args: argparse.Namespace) -> AirtableRequest:
    """Turn parsed CLI arguments into a request."""
    if args.command == "get":
        return client.get_record_request(args.table, args.record_id)

    if args.command == "filter":
        return client.filter_record_request(args.table, filter_by_formula(args.formula))

    if args.command == "list":
        return client.create_request("GET", args.table)

    request = client.create_request("POST", args.table)
    for raw in args.fields:
        fields = json.loads(raw)
        if not isinstance(fields, dict):
            raise ValueError(f"Fields must be a JSON object: {raw}")
        request.add_record(request.new_record(fields))
    return request


def print_body(body: bytes) -> None:
    """Pretty-print a JSON response body."""
    text = body.decode("utf-8", errors="replace")
    try:
        text = json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except ValueError:
        console.print(text, markup=False)
        return
    console.print(Syntax(text, "json", word_wrap=True))


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Airtable Client - query and create records in one base"
    )
    parser.add_argument(
        "--config", "-c",
        default="airtable.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--log-level", "-l",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (overrides logging.level in the config file)"
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Directory for the JSON log file"
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Log to the console only"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    get_cmd = commands.add_parser("get", help="Fetch one record by id")
    get_cmd.add_argument("table")
    get_cmd.add_argument("record_id")

    filter_cmd = commands.add_parser("filter", help="Fetch records matching a formula")
    filter_cmd.add_argument("table")
    filter_cmd.add_argument("formula")

    list_cmd = commands.add_parser("list", help="Fetch the first page of a table")
    list_cmd.add_argument("table")

    create_cmd = commands.add_parser("create", help="Create records from JSON field maps")
    create_cmd.add_argument("table")
    create_cmd.add_argument("fields", nargs="+", help="JSON object per record")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = create_parser().parse_args(argv)

    settings = load_logging_settings(args.config)
    setup_logging(args, settings)
    logger = get_logger("main")

    try:
        with AirtableClient.from_env() as client:
            request = build_request(client, args)
            body = client.send(request)
        print_body(body)
        return 0

    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        return 2
    except AirtableError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1
    except ValueError as e:
        console.print(f"[bold red]Invalid input:[/bold red] {escape(str(e))}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130
    except Exception as e:
        logger.exception("Fatal error")
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
