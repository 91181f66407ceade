"""Network utilities for downloading card data."""

from .network import (
    fetch_bytes,
    fetch_json,
    write_bytes_atomic,
    write_json_atomic,
)

__all__ = [
    "fetch_bytes",
    "fetch_json",
    "write_bytes_atomic",
    "write_json_atomic",
]
