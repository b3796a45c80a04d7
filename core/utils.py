"""
Core utility functions.

Connection string handling and the import source location shared by
the resolver, the routines and the host.

Exports:
    parse_connection_string: Split `Key=Value;...` into a lower-cased dict
    mask_connection_string: Loggable form with secrets removed
    resolve_import_path: `<contentRoot>/<environment>/import`, created if absent
"""

import os
from pathlib import Path
from typing import Dict

from config.defaults import SeedingDefaults


_SECRET_KEYS = {"accountkey", "sharedaccesssignature", "sharedaccesskey"}


def parse_connection_string(value: str) -> Dict[str, str]:
    """
    Parse an Azure style connection string.

    Keys are lower-cased; values are kept verbatim (account keys contain
    '=' padding, so only the first '=' splits).

    Example:
        >>> parse_connection_string("AccountEndpoint=https://x/;AccountKey=abc==")
        {'accountendpoint': 'https://x/', 'accountkey': 'abc=='}
    """
    parts: Dict[str, str] = {}
    for segment in value.split(";"):
        segment = segment.strip()
        if not segment or "=" not in segment:
            continue
        key, _, val = segment.partition("=")
        parts[key.strip().lower()] = val.strip()
    return parts


def mask_connection_string(value: str) -> str:
    """
    Replace secret segments of a connection string with '***MASKED***'.

    Only meant for DEBUG output; INFO and above log `ConnectionTarget.redacted()`.
    """
    masked = []
    for segment in value.split(";"):
        if not segment.strip():
            continue
        key, sep, val = segment.partition("=")
        if key.strip().lower() in _SECRET_KEYS:
            masked.append(f"{key}{sep}***MASKED***")
        else:
            masked.append(segment)
    return ";".join(masked)


def resolve_import_path(content_root: str, environment_name: str) -> Path:
    """
    Build the import source location and create it if absent.

    The path is lower-cased and used only as partition key and log context;
    nothing is read from it.

    Args:
        content_root: Host content root
        environment_name: Environment name (dev, test, ...)

    Returns:
        Path to `<contentRoot>/<environmentName>/import`
    """
    path = Path(os.path.join(
        content_root.lower(),
        environment_name.lower(),
        SeedingDefaults.IMPORT_DIRECTORY
    ))
    path.mkdir(parents=True, exist_ok=True)
    return path
