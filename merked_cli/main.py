"""
merk - CLI Main Entry Point

Reads a file (or standard input), commits to it with a DAG and prints two
lines, each a JSON document:
    1. the metadata record {"n": ..., "l": [...], "r": ..., "s": ...}
    2. the padded shards as an array of hex strings

Usage:
    merk [FILE] [SLICE_SIZE] [--name NAME] [--hash ALGO] [--random-fill]
         [--config PATH] [--log-level LEVEL]

FILE defaults to "-" (standard input). SLICE_SIZE defaults to 512 bytes and
accepts the size shorthand (4K, 1M, 1KB, 1MB).

Environment Variables:
    MERKED_CLI_SLICE_SIZE   Default slice size for this tool (default: 512)
    MERKED_HASH_ALGORITHM   Hash algorithm (default: sha256)
    MERKED_RANDOM_FILL      Pad with random bytes (default: false)
    MERKED_LOG_LEVEL        Log level (default: INFO)
    MERKED_LOG_FILE         Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from merked.config.runtime import LOG_LEVELS, load_config
from merked.crypto.hashing import HASH_FUNCTIONS, get_hash_func, to_hex
from merked.dag.dag import DAG
from merked.schemas.errors import MerkedException
from merked_cli import __version__


logger = logging.getLogger("merked_cli")

# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1

STDIN_MARKER = "-"

COMPACT_JSON_SEPARATORS = (",", ":")


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="merk",
        description="Split a file into uniform shards and print its Merkle metadata and shards.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "file",
        nargs="?",
        default=STDIN_MARKER,
        help="Input file, or '-' to read standard input (default: -)",
    )
    parser.add_argument(
        "slice_size",
        nargs="?",
        default=None,
        help="Shard size in bytes, or shorthand like 4K or 1M (default: 512)",
    )
    parser.add_argument(
        "--name", "-n",
        type=str,
        default=None,
        help="Name stored in the metadata record (default: the FILE argument)",
    )
    parser.add_argument(
        "--hash",
        type=str,
        default=None,
        choices=sorted(HASH_FUNCTIONS),
        help="Hash algorithm (default: from config or sha256)",
    )
    parser.add_argument(
        "--random-fill",
        action="store_true",
        default=None,
        help="Pad shards with random bytes (output is not reproducible)",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./merked.yaml or ~/.config/merked/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=list(LOG_LEVELS),
        help="Log level (overrides config)",
    )
    return parser


def read_input(file_in: str) -> bytes:
    """Read the whole input into memory."""
    if file_in == STDIN_MARKER:
        return sys.stdin.buffer.read()
    return Path(file_in).read_bytes()


def merk_cmd(args: argparse.Namespace) -> int:
    """Build the DAG and print metadata and shards."""
    config = args.runtime_config

    slice_size = args.slice_size if args.slice_size is not None else config.cli.slice_size
    hash_func = get_hash_func(args.hash or config.dag.hash_algorithm)
    random_fill = config.dag.random_fill if args.random_fill is None else args.random_fill

    buffer = read_input(args.file)
    logger.debug("Read %d bytes from %s", len(buffer), args.file)

    graph = DAG.from_buffer(
        buffer,
        slice_size,
        hash_func=hash_func,
        random_fill=random_fill,
    )

    meta = graph.to_metadata(args.name or args.file)
    inputs = json.dumps(
        [to_hex(shard) for shard in graph.to_array()],
        separators=COMPACT_JSON_SEPARATORS,
    )

    print(meta)
    print(inputs)
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (MerkedException, OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.cli.log_level
    setup_logging(level=log_level, log_file=config.cli.log_file)

    args.runtime_config = config

    try:
        return merk_cmd(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (MerkedException, OSError) as e:
        logger.debug("merk failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
