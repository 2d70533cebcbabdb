"""
merk - command line tool for merked.

Usage:
    merk <file> [slice_size]
    merk - 4K < data.bin
    python -m merked_cli report.pdf 1M --name report
"""

__version__ = "0.1.0"
