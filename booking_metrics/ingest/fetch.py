from __future__ import annotations

import logging
import time
from pathlib import Path

import requests

"""Source reader for the jobs export.

HTTP(S) sources are fetched with a cache-busting query parameter so every
load sees the current export. Anything else is treated as a local file path.
One attempt only; a failure aborts the run.
"""

__all__ = [
    "FetchError",
    "decode_export",
    "read_source",
]

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class FetchError(Exception):
    """Raised when the export cannot be read from its source."""


def decode_export(data: bytes) -> str:
    """Decode export bytes as UTF-8, dropping a byte-order mark."""
    return data.decode("utf-8-sig", errors="replace")


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def _fetch_url(url: str, timeout: float | None) -> bytes:
    params = {"cachebust": str(int(time.time() * 1000))}
    try:
        resp = requests.get(url, params=params, headers=NO_CACHE_HEADERS, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(f"request failed: {e}") from e
    if not resp.ok:
        raise FetchError(f"HTTP {resp.status_code} from {url}")
    return resp.content


def read_source(source: str, timeout: float | None = 30.0) -> str:
    """Read the raw export text from a URL or a local path.

    Args:
        source: ``http(s)://`` URL or filesystem path
        timeout: Seconds to wait for the HTTP response (ignored for files)

    Returns:
        Decoded export text

    Raises:
        FetchError: On network errors, non-success status, or missing file
    """
    if _is_url(source):
        logger.debug(f"fetching export from {source}")
        return decode_export(_fetch_url(source, timeout))

    path = Path(source)
    if not path.is_file():
        raise FetchError(f"export file not found: {path}")
    logger.debug(f"reading export from {path}")
    try:
        return decode_export(path.read_bytes())
    except OSError as e:
        raise FetchError(f"cannot read {path}: {e}") from e
