"""
Shard Splitter
Partition a byte buffer into an ordered list of shards.

Three splitting modes, exactly one per call:
- lines:     groups of N LF-terminated lines per shard
- size:      N bytes per shard (the last shard may be shorter)
- line_size: split by single lines, then re-split each line by N bytes

Sizes accept plain integers or the shorthand units K (1024), M (1048576),
KB (1000) and MB (1000000), e.g. "4M" or "512K".

When a filename prefix is given, split_sync() also writes every shard to
its own file, named prefix + suffix + additional_suffix. Suffixes are
alphabetic ("aa", "ab", ...) or, with numeric_suffixes, zero-padded
decimals starting at that number.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from merked.schemas.errors import InvalidConfigurationException


logger = logging.getLogger(__name__)


# Largest integer a double represents exactly; sizes are kept below it so
# they stay portable to implementations that store them as doubles.
MAX_SAFE_INTEGER = 2 ** 53 - 1

SIZE_PATTERN = re.compile(r"(\d+)(KB|MB|K|M)", re.IGNORECASE | re.ASCII)

SIZE_UNITS: dict[str, int] = {
    "K": 1024,
    "M": 1048576,
    "KB": 1000,
    "MB": 1000000,
}

LF = b"\n"
ALPHABET = "abcdefghijklmnopqrstuvwxyz"
MIN_SUFFIX_LENGTH = 2


@dataclass(frozen=True)
class SplitOptions:
    """Validated splitting options. Exactly one of lines/size/line_size is set."""
    lines: int | None = None
    size: int | None = None
    line_size: int | None = None
    prefix: str | None = None
    suffix_length: int | None = None
    numeric_suffixes: int | None = None
    additional_suffix: str = ""

    @property
    def mode(self) -> str:
        if self.lines is not None:
            return "lines"
        if self.size is not None:
            return "size"
        return "line_size"


# =============================================================================
# Option Parsing
# =============================================================================

def _is_safe(number: int) -> bool:
    return -MAX_SAFE_INTEGER <= number <= MAX_SAFE_INTEGER


def _is_decimal(text: str) -> bool:
    # ASCII digits only; isdigit() is also true for "²"
    return text.isascii() and text.isdigit()


def _to_count(value: Any, option: str, minimum: int) -> int:
    """Floor a numeric option value and check it is safe and >= minimum."""
    if isinstance(value, bool):
        raise InvalidConfigurationException(f"Invalid {option}: {value!r}", option=option)

    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidConfigurationException(f"Invalid {option}: {value!r}", option=option)
        value = math.floor(value)
    elif isinstance(value, str) and _is_decimal(value.strip()):
        value = int(value.strip())

    if not isinstance(value, int) or not _is_safe(value) or value < minimum:
        raise InvalidConfigurationException(f"Invalid {option}: {value!r}", option=option)

    return value


def parse_size(value: Any, option: str = "size") -> int:
    """
    Parse a byte count: an integer, a float (floored), a digit string or
    a shorthand string such as "4M", "512K", "1MB", "10kb".

    Args:
        value: Size to parse
        option: Option name for error reporting

    Returns:
        Byte count >= 1

    Raises:
        InvalidConfigurationException: If the value is not a usable size
    """
    if isinstance(value, str):
        result = SIZE_PATTERN.fullmatch(value.strip())
        if result is not None:
            size = int(result.group(1)) * SIZE_UNITS[result.group(2).upper()]
            if not _is_safe(size) or size < 1:
                raise InvalidConfigurationException(
                    f"Invalid number of bytes: {value!r}", option=option
                )
            return size
        if not _is_decimal(value.strip()):
            raise InvalidConfigurationException(
                f"Invalid number of bytes: {value!r}", option=option
            )

    try:
        return _to_count(value, option, minimum=1)
    except InvalidConfigurationException:
        raise InvalidConfigurationException(
            f"Invalid number of bytes: {value!r}", option=option
        ) from None


def check_options(
    lines: Any = None,
    size: Any = None,
    line_size: Any = None,
    prefix: Any = None,
    suffix_length: Any = None,
    numeric_suffixes: Any = None,
    additional_suffix: Any = None,
) -> SplitOptions:
    """
    Validate splitting options.

    Raises:
        InvalidConfigurationException: If zero or several splitting modes
            are requested, or any numeric option is invalid
    """
    requested = [name for name, value in (
        ("lines", lines), ("size", size), ("line_size", line_size),
    ) if value is not None]

    if len(requested) > 1:
        raise InvalidConfigurationException(
            "Cannot split in more than one way",
            details={"requested": requested},
        )
    if not requested:
        raise InvalidConfigurationException("Splitting way is not specified")

    parsed_lines = None
    if lines is not None:
        try:
            parsed_lines = _to_count(lines, "lines", minimum=1)
        except InvalidConfigurationException:
            raise InvalidConfigurationException(
                f"Invalid number of lines: {lines!r}", option="lines"
            ) from None

    parsed_size = parse_size(size, "size") if size is not None else None
    parsed_line_size = parse_size(line_size, "line_size") if line_size is not None else None

    parsed_prefix = None
    parsed_suffix_length = None
    parsed_numeric = None
    parsed_additional = ""
    if prefix is not None:
        parsed_prefix = str(prefix)
        if suffix_length is not None:
            parsed_suffix_length = _to_count(suffix_length, "suffix_length", minimum=1)
        if numeric_suffixes is not None:
            parsed_numeric = _to_count(numeric_suffixes, "numeric_suffixes", minimum=0)
        if additional_suffix is not None:
            parsed_additional = str(additional_suffix)

    return SplitOptions(
        lines=parsed_lines,
        size=parsed_size,
        line_size=parsed_line_size,
        prefix=parsed_prefix,
        suffix_length=parsed_suffix_length,
        numeric_suffixes=parsed_numeric,
        additional_suffix=parsed_additional,
    )


# =============================================================================
# Splitting
# =============================================================================

def split_by_lines(buffer: bytes, lines: int) -> list[bytes]:
    """
    Group the buffer into shards of `lines` LF-terminated lines.

    Whatever follows the last complete group (fewer lines, or a tail
    without a final LF) becomes one final shard.
    """
    data = bytes(buffer)
    shards: list[bytes] = []
    begin = 0
    line_count = 0

    index = data.find(LF, begin)
    while index != -1:
        line_count += 1
        if line_count == lines:
            shards.append(data[begin:index + 1])
            begin = index + 1
            line_count = 0
        index = data.find(LF, index + 1)

    if begin < len(data):
        shards.append(data[begin:])

    return shards


def split_by_bytes(buffer: bytes, size: int) -> list[bytes]:
    """
    Cut the buffer into `size`-byte shards; the last one holds 1..size bytes.
    An empty buffer gives no shards.
    """
    data = bytes(buffer)
    return [data[begin:begin + size] for begin in range(0, len(data), size)]


def split_by_line_bytes(buffer: bytes, size: int) -> list[bytes]:
    """Split into single lines, then each line into shards of at most `size` bytes."""
    shards: list[bytes] = []
    for line in split_by_lines(buffer, 1):
        shards.extend(split_by_bytes(line, size))
    return shards


def split(buffer: bytes, options: SplitOptions) -> list[bytes]:
    """Split the buffer according to already validated options."""
    if options.lines is not None:
        shards = split_by_lines(buffer, options.lines)
    elif options.size is not None:
        shards = split_by_bytes(buffer, options.size)
    else:
        shards = split_by_line_bytes(buffer, options.line_size)

    logger.debug(
        "Split %d bytes by %s into %d shards", len(buffer), options.mode, len(shards)
    )
    return shards


def split_buffer(
    buffer: bytes,
    *,
    lines: Any = None,
    size: Any = None,
    line_size: Any = None,
) -> list[bytes]:
    """
    Validate a single splitting mode and split the buffer with it.

    Example:
        >>> split_buffer(b"abcde", size=2)
        [b'ab', b'cd', b'e']
    """
    options = check_options(lines=lines, size=size, line_size=line_size)
    return split(buffer, options)


# =============================================================================
# File Output
# =============================================================================

def _suffix_width(count: int, base: int) -> int:
    """Number of base-`base` digits needed to number `count` files from 0."""
    width = 1
    largest = max(count - 1, 0)
    while largest >= base:
        largest //= base
        width += 1
    return width


def _alphabetic_suffix(index: int, width: int) -> str:
    digits: list[str] = []
    for _ in range(width):
        index, remainder = divmod(index, len(ALPHABET))
        digits.append(ALPHABET[remainder])
    return "".join(reversed(digits))


def create_filenames(count: int, options: SplitOptions) -> list[str]:
    """
    Build one output filename per shard.

    Raises:
        InvalidConfigurationException: If the prefix is missing, or the
            requested suffix length cannot number `count` files
    """
    if options.prefix is None:
        raise InvalidConfigurationException(
            "A filename prefix is required to write shards", option="prefix"
        )

    numeric = options.numeric_suffixes is not None
    if numeric:
        last = options.numeric_suffixes + max(count - 1, 0)
        if not _is_safe(last):
            raise InvalidConfigurationException(
                "Numeric suffix out of range", option="numeric_suffixes"
            )
        needed = len(str(last))
    else:
        needed = _suffix_width(count, len(ALPHABET))

    if options.suffix_length is not None:
        if options.suffix_length < needed:
            raise InvalidConfigurationException(
                "output file suffixes exhausted",
                option="suffix_length",
                details={"count": count, "suffix_length": options.suffix_length},
            )
        width = options.suffix_length
    else:
        width = max(needed, MIN_SUFFIX_LENGTH)

    filenames: list[str] = []
    for i in range(count):
        if numeric:
            suffix = str(options.numeric_suffixes + i).zfill(width)
        else:
            suffix = _alphabetic_suffix(i, width)
        filenames.append(f"{options.prefix}{suffix}{options.additional_suffix}")

    return filenames


def split_sync(
    buffer: bytes,
    options: SplitOptions,
    directory: str | Path | None = None,
) -> list[bytes]:
    """
    Split the buffer and, when options.prefix is set, write each shard to
    its own file (relative to `directory` if given).

    Filenames are computed before anything is written, so an exhausted
    suffix space writes no files.

    Returns:
        The shards, in order
    """
    shards = split(buffer, options)

    if options.prefix is not None:
        base = Path(directory) if directory is not None else Path(".")
        filenames = create_filenames(len(shards), options)
        for filename, shard in zip(filenames, shards):
            (base / filename).write_bytes(shard)
        logger.debug("Wrote %d shard files with prefix %r", len(shards), options.prefix)

    return shards


__all__ = [
    "MAX_SAFE_INTEGER",
    "SIZE_UNITS",
    "SplitOptions",
    "parse_size",
    "check_options",
    "split_by_lines",
    "split_by_bytes",
    "split_by_line_bytes",
    "split",
    "split_buffer",
    "create_filenames",
    "split_sync",
]
