"""Card database snapshots: download, cache on disk, merge overrides.

Each remote source is cached as a JSON array of raw upstream card objects.
A cache younger than the max age is used as-is; otherwise it is downloaded
again. When a download fails or returns something other than a card list,
and a cache exists, the stale cache is used and a warning is logged instead
of failing the run.
"""

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from core.logging import get_logger
from errors import CardDataError, NetworkError
from net import fetch_json, write_json_atomic
from net.network import DEFAULT_USER_AGENT

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class CardSource:
    """One remote card snapshot and where it is cached."""

    name: str
    url: str
    cache_path: Path


def cache_is_fresh(
    path: Path, max_age_days: float, now: Optional[float] = None
) -> bool:
    """True when the cache exists and is younger than max_age_days.

    A max age of 0 means the cache is never fresh.
    """
    if max_age_days <= 0 or not path.exists():
        return False
    age = (now if now is not None else time.time()) - path.stat().st_mtime
    return age < max_age_days * SECONDS_PER_DAY


def extract_card_list(payload: Any) -> Optional[List[Any]]:
    """Pull the card array out of a payload: a bare list, {data} or {cards}."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("data", "cards"):
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return None


def read_cached_cards(path: Path) -> List[Any]:
    """Read a cache file written by load_card_payload.

    Raises:
        CardDataError: If the file is not a JSON array
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
        raise CardDataError(
            f"Card cache {path} is unreadable ({error}). Delete it and run again.",
            path=path,
        ) from error

    if not isinstance(data, list):
        raise CardDataError(
            f"Card cache {path} does not contain a JSON array. Delete it and run again.",
            path=path,
        )
    return data


def load_card_payload(
    source: CardSource,
    *,
    refresh: bool = False,
    max_age_days: float = 7.0,
    timeout: Optional[float] = None,
    user_agent: Optional[str] = None,
) -> List[Any]:
    """Return raw card objects for a source, using the cache when fresh.

    Args:
        source: Source URL and cache path
        refresh: Download even when the cache is fresh
        max_age_days: Cache lifetime; 0 always downloads
        timeout: HTTP timeout in seconds
        user_agent: User-Agent header value

    Returns:
        List of raw upstream card objects

    Raises:
        NetworkError: If the download fails and there is no cache to fall back to
        CardDataError: If the cache is malformed or cannot be written, or the
            payload has no card list and there is no cache
    """
    cache_path = source.cache_path

    if not refresh and cache_is_fresh(cache_path, max_age_days):
        logger.debug("Using cached {} from {}", source.name, cache_path)
        return read_cached_cards(cache_path)

    try:
        logger.info("Downloading {} card data from {}", source.name, source.url)
        payload = fetch_json(
            source.url, timeout=timeout, user_agent=user_agent or DEFAULT_USER_AGENT
        )
    except NetworkError as error:
        if cache_path.exists():
            logger.warning(
                "Could not refresh {} ({}); using stale cache {}",
                source.name,
                error,
                cache_path,
            )
            return read_cached_cards(cache_path)
        raise

    cards = extract_card_list(payload)
    if cards is None:
        message = f"{source.url} returned an unexpected payload (expected a list of cards)"
        if cache_path.exists():
            logger.warning("{}; using stale cache {}", message, cache_path)
            return read_cached_cards(cache_path)
        raise CardDataError(message)

    try:
        write_json_atomic(cache_path, cards)
    except OSError as error:
        raise CardDataError(
            f"Could not write card cache {cache_path}: {error}", path=cache_path
        ) from error
    logger.debug("Cached {} {} cards at {}", len(cards), source.name, cache_path)
    return cards


def load_override_cards(path: Path) -> List[Any]:
    """Load a local override file: an array of cards or {"cards": [...]}.

    Raises:
        CardDataError: If the file cannot be read or has another shape
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
        raise CardDataError(
            f"Could not read card data file {path}: {error}", path=path
        ) from error

    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("cards"), list):
        return data["cards"]

    raise CardDataError(
        f'Card data file must contain an array of cards (or {{"cards": [...]}}): {path}',
        path=path,
    )
