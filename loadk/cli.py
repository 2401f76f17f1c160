#!/usr/bin/env python3
"""
Command-line interface for loadk

Summarises and/or restores the contents of an AOS/VS DUMP_II or DUMP_III file.
"""

import argparse
import logging
import sys

from loadk import __version__, utils
from loadk.config import LoaderConfig
from loadk.errors import DumpError
from loadk.parser import DumpParser
from loadk.sources import open_dump_source


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loadk",
        description="LoadK - restore or summarise AOS/VS DUMP_II/DUMP_III files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Examples:\n"
               "  loadk --dumpfile=BACKUP.DMP --summary              # List what the dump holds\n"
               "  loadk --dumpfile=BACKUP.DMP --extract              # Restore into the current directory\n"
               "  loadk --dumpfile=BACKUP.DMP --extract --basedir=out --ignoreerrors\n"
               "  loadk --dumpfile=https://example.org/BACKUP.DMP --summary"
    )
    parser.add_argument(
        "--dumpfile",
        help="DUMP file to read (local path or http(s) URL)"
    )
    parser.add_argument(
        "--extract",
        action="store_true",
        default=None,
        help="Restore directories, files and links"
    )
    parser.add_argument(
        "--ignoreerrors",
        dest="ignore_errors",
        action="store_true",
        default=None,
        help="Report filesystem errors while restoring and carry on"
    )
    parser.add_argument(
        "--list",
        dest="list_entries",
        action="store_true",
        default=None,
        help="Print the path of every entry"
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        default=None,
        help="Summarise the contents of the dump"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=None,
        help="Very wordy output, including per-record tracing"
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show the LoadK version"
    )
    parser.add_argument(
        "--basedir",
        dest="base_dir",
        default=None,
        help="Directory to restore into (default: current directory); never ascended above"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config file (default: ~/.config/loadk/config.json)"
    )
    parser.add_argument(
        "--ascii",
        action="store_true",
        help="Use ASCII status symbols"
    )
    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    utils.setup_symbols(force_ascii=args.ascii)

    if args.verbose or args.version:
        print(f"LoadK version v{__version__}")
        if not args.verbose:
            return 0

    if not args.dumpfile:
        print(f"{utils.SYMBOL_ERROR} Must specify dump file name with --dumpfile=<dumpfile> option")
        parser.print_usage()
        return 1

    config = LoaderConfig.load(args.config).merge(
        extract=args.extract,
        ignore_errors=args.ignore_errors,
        summary=args.summary,
        verbose=args.verbose,
        list_entries=args.list_entries,
        base_dir=args.base_dir,
    )
    setup_logging(bool(config.verbose))
    options = config.to_parse_options()
    reporting = options.summary or options.verbose

    try:
        with open_dump_source(args.dumpfile, timeout=config.timeout) as stream:
            if reporting:
                print(f"Summary of DUMP file : {args.dumpfile}")
            result = DumpParser(stream, options).parse()
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except DumpError as e:
        print(f"\n{utils.SYMBOL_ERROR} ERROR: {e}")
        print("Giving up.")
        return 1
    except Exception as e:
        logging.exception("Unexpected error")
        print(f"\n{utils.SYMBOL_ERROR} Error: {e}")
        return 1

    if reporting:
        print(
            f"{utils.SYMBOL_CHECK} {result.directories} directories, {result.files} files, "
            f"{result.links} links, {utils.format_size(result.total_bytes)}"
        )
    if result.errors:
        print(f"{utils.SYMBOL_WARNING} {len(result.errors)} error(s) ignored:")
        for message in result.errors:
            print(f"  - {message}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
