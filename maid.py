"""CLI for sorting and normalizing TOML files in place."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from colorama import Fore, Style, just_fix_windows_console

from toml_maid import CONFIG_FILE, Config, ConfigError, Maid
from toml_maid.driver import EXIT_CONFIG_ERROR
from toml_maid.logger import Logger, LoggerConfig

LOGGER_CONFIG: LoggerConfig = {"level": logging.INFO, "format": "%(message)s", "colored": True}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="toml-maid",
        description="Sort keys and normalize the layout of TOML files, keeping comments and blank-line sections.",
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help=(
            "TOML files to format. Without files and without --folder, the current directory "
            "is scanned recursively."
        ),
    )
    parser.add_argument(
        "--folder",
        action="append",
        default=[],
        help="Scan this folder recursively for .toml files (can be repeated).",
    )
    parser.add_argument(
        "-c",
        "--check",
        action="store_true",
        help="Only check the formatting; fail when a file is not formatted. Files are never written.",
    )
    parser.add_argument(
        "-s",
        "--silent",
        action="store_true",
        help="Disable verbose messages.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    just_fix_windows_console()
    verbose = not args.silent

    try:
        config, config_path = Config.discover()
    except ConfigError as exc:
        print(f"{Fore.RED}{exc}{Style.RESET_ALL}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if config_path is None and verbose:
        print(f"{Fore.YELLOW}No '{CONFIG_FILE}' in this directory and its parents, using default config.{Style.RESET_ALL}\n")

    # Configuration warnings go through the same handler as file outcomes.
    Logger(LOGGER_CONFIG)
    maid = Maid(config.process(), options={"logger": LOGGER_CONFIG})
    report = maid.run(
        files=[Path(name) for name in args.files],
        folders=[Path(name) for name in args.folder],
        check=args.check,
        verbose=verbose,
    )
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
