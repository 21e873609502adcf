"""
LSP Utilities.

Conversions between LSP document URIs and local paths.
"""

import urllib.parse
from pathlib import Path


def uri_to_path(uri: str) -> Path:
    """
    Convert an LSP URI to a local file system path.

    Handles decoding (e.g., %20 -> space) and file:// stripping. Plain paths
    are accepted unchanged.

    Args:
        uri: The URI string (e.g., 'file:///Users/ana/dbt/models/my%20model.sql').

    Returns:
        Path: The corresponding absolute Path object.
    """
    parsed = urllib.parse.urlparse(uri)
    if parsed.scheme and parsed.scheme != "file":
        raise ValueError(f"Unsupported URI scheme: {parsed.scheme}")
    path_str = urllib.parse.unquote(parsed.path)
    return Path(path_str).resolve()


def path_to_uri(path: str) -> str:
    """Convert a local path to a file:// URI."""
    return Path(path).resolve().as_uri()
