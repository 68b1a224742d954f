"""Loading of the metadata documents from disk or over HTTP.

Every failure except a missing local file surfaces as ``JSONLoaderError``
chained to the underlying exception.
"""

import json
from pathlib import Path
from typing import Any, NoReturn
from urllib.parse import urljoin, urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30


class JSONLoaderError(Exception):
    """A metadata document could not be read or decoded."""

    pass


def _fail(message: str, cause: Exception | None = None) -> NoReturn:
    logger.error(message)
    raise JSONLoaderError(message) from cause


def load_json_from_file(file_path: str | Path) -> Any:
    """Parse one JSON document from disk.

    Raises:
        FileNotFoundError: The file does not exist.
        JSONLoaderError: The file is unreadable or not valid JSON.
    """
    path = Path(file_path)
    if not path.is_file():
        logger.error(f"Metadata file missing: {path}")
        raise FileNotFoundError(f"File not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        _fail(f"Cannot read {path}: {e}", e)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        _fail(f"Invalid JSON in {path}: line {e.lineno}, column {e.colno}: {e.msg}", e)

    logger.debug(f"Read {path}")
    return data


def load_json_from_url(url: str, timeout: int = DEFAULT_TIMEOUT) -> Any:
    """Fetch one JSON document with an HTTP GET.

    Raises:
        JSONLoaderError: Malformed URL, transport failure, non-2xx status or
            an undecodable body.
    """
    parsed = urlparse(url)
    if not (parsed.scheme and parsed.netloc):
        _fail(f"Invalid URL: {url}")

    logger.debug(f"GET {url} (timeout {timeout}s)")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        _fail(f"Request timeout after {timeout}s: {url}", e)
    except requests.exceptions.ConnectionError as e:
        _fail(f"Connection error for {url}: {e}", e)
    except requests.exceptions.HTTPError as e:
        _fail(f"HTTP error {e.response.status_code} for {url}", e)
    except requests.exceptions.RequestException as e:
        _fail(f"Request to {url} failed: {e}", e)

    try:
        # requests raises a ValueError subclass for undecodable bodies
        return response.json()
    except ValueError as e:
        _fail(f"Invalid JSON response from {url}: {e}", e)


def load_metadata_document(
    name: str,
    directory: str | Path | None = None,
    base_url: str | None = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> Any:
    """Load ``name`` from exactly one of a local directory or a base URL."""
    if (directory is None) == (not base_url):
        raise JSONLoaderError("Give exactly one of a metadata directory or a base URL")

    if directory is not None:
        return load_json_from_file(Path(directory) / name)

    return load_json_from_url(urljoin(base_url.rstrip("/") + "/", name), timeout)
