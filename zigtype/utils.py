"""Loading serialized type graphs.

Type graphs are plain JSON documents (see
:func:`zigtype.codegen.core.typegraph.type_graph_from_dict`) read from a
local file, a URL or a text stream. Every loader returns a
``(source, data)`` pair so error messages can name where the graph came from.
"""

import json
from pathlib import Path
from typing import Any, TextIO
from urllib.parse import urlparse

import requests

from .codegen.core.typegraph import TypeGraph, TypeGraphError, type_graph_from_dict
from .logging_config import get_logger

logger = get_logger(__name__)

Loaded = tuple[str, Any]


class JSONLoaderError(Exception):
    """Raised when a JSON document cannot be loaded."""

    pass


def _parse(text: str, source: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise JSONLoaderError(f"Invalid JSON in {source}: {e}") from e


def load_json_from_file(file_path: str | Path) -> Loaded:
    """Read and parse a local JSON file.

    Raises:
        JSONLoaderError: If the file is missing, unreadable or not valid JSON.
    """
    path = Path(file_path)
    logger.debug("Reading type graph file %s", path)

    if not path.is_file():
        raise JSONLoaderError(f"File not found: {path}")
    if path.suffix.lower() != ".json":
        logger.warning("%s has no .json extension, parsing anyway", path)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise JSONLoaderError(f"Cannot read {path}: {e}") from e

    data = _parse(text, f"file {path}")
    logger.info("Loaded %s", path)
    return str(path), data


def load_json_from_url(url: str, timeout: int = 30) -> Loaded:
    """GET a JSON document over HTTP(S).

    A response whose content type does not mention JSON is still parsed;
    only a warning is logged.

    Raises:
        JSONLoaderError: On a non-HTTP URL, any request failure, or a body
            that is not JSON.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise JSONLoaderError(f"Invalid URL: {url}")

    logger.debug("Fetching type graph from %s (timeout %ss)", url, timeout)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        content_type = response.headers.get("content-type", "").lower()
        if "json" not in content_type and not parsed.path.endswith(".json"):
            logger.warning("%s answered with content type %r", url, content_type)
        data = response.json()
    # JSONDecodeError subclasses RequestException, so it has to come first
    except requests.exceptions.JSONDecodeError as e:
        raise JSONLoaderError(f"Invalid JSON response from URL {url}: {e}") from e
    except requests.exceptions.Timeout as e:
        raise JSONLoaderError(f"Request timeout after {timeout}s for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        raise JSONLoaderError(f"Could not connect to {url}") from e
    except requests.exceptions.HTTPError as e:
        raise JSONLoaderError(f"HTTP error {e.response.status_code} for URL: {url}") from e
    except requests.exceptions.RequestException as e:
        raise JSONLoaderError(f"Request to {url} failed: {e}") from e

    logger.info("Loaded %s", url)
    return url, data


def load_json_from_stream(stream: TextIO, name: str = "<stdin>") -> Loaded:
    """Parse JSON from an open text stream."""
    return name, _parse(stream.read(), name)


def load_json(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> Loaded:
    """Load from exactly one of ``file_path`` or ``url``.

    Raises:
        JSONLoaderError: If neither or both sources are given, or loading fails.
    """
    if bool(file_path) == bool(url):
        raise JSONLoaderError(
            "Cannot specify both file_path and url"
            if file_path
            else "Either file_path or url must be provided"
        )
    return load_json_from_file(file_path) if file_path else load_json_from_url(url, timeout)


def to_type_graph(source: str, data: Any) -> TypeGraph:
    """Convert loaded JSON into a TypeGraph, naming the source on failure."""
    try:
        return type_graph_from_dict(data)
    except TypeGraphError as e:
        raise JSONLoaderError(f"Invalid type graph in {source}: {e}") from e


def load_type_graph(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, TypeGraph]:
    """Load and convert a serialized type graph from a file or URL."""
    source, data = load_json(file_path, url, timeout)
    return source, to_type_graph(source, data)
