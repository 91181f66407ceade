"""HTTP helpers for downloading card database snapshots.

This module provides:
- Single-attempt downloads (a failed fetch falls back to a stale cache upstream)
- JSON decoding with a clear error for non-JSON payloads
- Atomic file writes (temp file + rename) so readers never see a partial cache
"""

import json
from pathlib import Path
from typing import Any, Optional

import requests

from errors import NetworkError

DEFAULT_USER_AGENT = "deck-tools/1.0"
DEFAULT_TIMEOUT = 30


def fetch_bytes(
    url: str,
    *,
    headers: Optional[dict[str, str]] = None,
    timeout: Optional[float] = None,
    user_agent: str = DEFAULT_USER_AGENT,
) -> bytes:
    """Fetch URL content as bytes.

    Args:
        url: URL to fetch
        headers: Optional HTTP headers
        timeout: Request timeout in seconds (defaults to DEFAULT_TIMEOUT)
        user_agent: User-Agent header value

    Returns:
        Response body as bytes

    Raises:
        NetworkError: If the request fails or returns a non-2XX status
    """
    request_headers = {"User-Agent": user_agent, "Accept": "application/json, */*"}
    if headers:
        request_headers.update(headers)

    try:
        response = requests.get(
            url, headers=request_headers, timeout=timeout or DEFAULT_TIMEOUT
        )
        # Check for 2XX response code
        response.raise_for_status()
    except requests.RequestException as error:
        raise NetworkError(f"Failed to fetch {url}: {error}") from error

    return response.content


def fetch_json(
    url: str,
    *,
    headers: Optional[dict[str, str]] = None,
    timeout: Optional[float] = None,
    user_agent: str = DEFAULT_USER_AGENT,
) -> Any:
    """Fetch URL content as JSON.

    Args:
        url: URL to fetch
        headers: Optional HTTP headers
        timeout: Request timeout in seconds
        user_agent: User-Agent header value

    Returns:
        Parsed JSON payload

    Raises:
        NetworkError: If the request fails or the body is not valid JSON
    """
    content = fetch_bytes(url, headers=headers, timeout=timeout, user_agent=user_agent)
    try:
        return json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise NetworkError(f"{url} did not return valid JSON: {error}") from error


def write_bytes_atomic(destination: Path, content: bytes) -> None:
    """Write bytes to destination via a temp file and an atomic rename.

    Args:
        destination: Destination file path
        content: Bytes to write
    """
    destination.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = destination.with_suffix(destination.suffix + ".part")
    try:
        tmp_path.write_bytes(content)
        tmp_path.replace(destination)
    finally:
        # Clean up temp file if the rename did not happen
        if tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                pass


def write_json_atomic(destination: Path, data: Any) -> None:
    """Serialize data as indented JSON and write it atomically."""
    payload = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    write_bytes_atomic(destination, payload.encode("utf-8"))
