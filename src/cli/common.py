from __future__ import annotations

import functools
import json
import os
import sys
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

import click

from core.logging import get_logger
from deck.models import Diagnostic
from errors import DeckToolError
from net.network import write_bytes_atomic

logger = get_logger(__name__)

STDIN_MARKER = "-"


def _json_dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def resolve_output_path(path_value: str | Path | None) -> Path | None:
    if path_value is None or str(path_value) == STDIN_MARKER:
        return None
    return Path(path_value).expanduser().resolve()


def ensure_paths_exist(paths: Iterable[Path | None]) -> None:
    for path in paths:
        if path is None:
            continue
        path.parent.mkdir(parents=True, exist_ok=True)


def read_input_text(input_value: str | Path | None, *, keep_bom: bool = False) -> str:
    """Read a deck list from a path, or from stdin for "-".

    Neither source gets newline translation, so "\\r\\n" survives. stdin is
    read as bytes for the same reason.
    """
    encoding = "utf-8" if keep_bom else "utf-8-sig"
    if input_value is None or str(input_value) == STDIN_MARKER:
        data = click.get_binary_stream("stdin").read()
        try:
            return data.decode(encoding)
        except UnicodeDecodeError as error:
            raise click.ClickException(f"Could not decode stdin as UTF-8: {error}") from error

    path = Path(input_value)
    try:
        with open(path, "r", encoding=encoding, newline="") as handle:
            return handle.read()
    except FileNotFoundError as error:
        raise click.ClickException(f"Deck file not found: {path}") from error
    except OSError as error:
        raise click.ClickException(
            f"Could not read deck file '{path}': {error}"
        ) from error


def write_output_text(text: str, out_path: str | Path | None = None) -> Path | None:
    """Write text to a file (atomically) or to stdout when no path is given."""
    out_resolved = resolve_output_path(out_path)
    if out_resolved is None:
        stream = click.get_binary_stream("stdout")
        stream.write(text.encode("utf-8"))
        stream.flush()
        return None

    ensure_paths_exist([out_resolved])
    write_bytes_atomic(out_resolved, text.encode("utf-8"))
    logger.info("Wrote {}", out_resolved)
    return out_resolved


def write_json_outputs(
    *,
    payload: Any,
    out_path: str | Path | None = None,
    emit_stdout: bool = False,
) -> Path | None:
    out_resolved = resolve_output_path(out_path)

    if out_resolved is not None:
        ensure_paths_exist([out_resolved])
        write_bytes_atomic(out_resolved, _json_dump(payload).encode("utf-8"))
        logger.info("Wrote {}", out_resolved)

    if emit_stdout or out_resolved is None:
        click.echo(_json_dump(payload).rstrip(os.linesep))

    return out_resolved


def render_diagnostics(diagnostics: Iterable[Diagnostic]) -> None:
    """Send diagnostics returned by the core to the logger."""
    for diagnostic in diagnostics:
        logger.log(diagnostic.level.upper(), diagnostic.message)


def exit_with_message(message: str, *, code: int = 0) -> None:
    stream = sys.stderr if code else sys.stdout
    stream.write(message + os.linesep)
    stream.flush()
    raise SystemExit(code)


def handle_errors(func: Callable) -> Callable:
    """Turn DeckToolError into an error message on stderr and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DeckToolError as error:
            logger.debug("{} failed: {}", func.__name__, type(error).__name__)
            exit_with_message(f"Error: {error}", code=1)

    return wrapper


def optional_path(value: Optional[str]) -> Optional[Path]:
    return Path(value).expanduser() if value else None
