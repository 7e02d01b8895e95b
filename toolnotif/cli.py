"""Command line for watching status files and running the notifier daemon."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from toolnotif.config import Config, ConfigError
from toolnotif.server import Server

CONFIG_FILE_NAME = "jp_tool_status.toml"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="toolnotif",
        description="CLI Tool to send juspay tool data to dashboard",
    )
    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    watch = commands.add_parser("watch", help="Add a repo/ status file to watch list")
    watch.add_argument("file_path")
    watch.add_argument("-r", "--repo-name", dest="repo_name", default=None)

    commands.add_parser("list-all", help="List all repos being watched")

    remove = commands.add_parser("remove", help="Remove a repo from being watched")
    remove.add_argument("repo_name")

    commands.add_parser(
        "start", help="Starts a server that hits the dashboard every 5 seconds"
    )
    commands.add_parser("stop", help="Stops the running server")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command line; return the exit status."""
    args = build_parser().parse_args(argv)
    home = Path.home()

    try:
        config = Config.create_or_load(home / CONFIG_FILE_NAME)
        if args.command == "watch":
            config.watch_file(Path(args.file_path).resolve(strict=True), args.repo_name)
        elif args.command == "list-all":
            config.list_all()
        elif args.command == "remove":
            config.remove(args.repo_name)
    except (ConfigError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1

    if args.command == "start":
        try:
            Server(config, home).start()
        except Exception as exc:
            print(f"Failed to start server: {exc}", file=sys.stderr)
            return 1
    elif args.command == "stop":
        try:
            Server(config, home).stop()
        except Exception as exc:
            print(f"Failed to stop server: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())