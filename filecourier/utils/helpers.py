"""
Helper utilities for filecourier.

Common functions used across modules.
"""

from typing import Dict


def is_hidden_name(name: str) -> bool:
    """Check if a file name is hidden (starts with dot)."""
    return name.startswith('.')


def parse_mapping(raw: str) -> Dict[str, str]:
    """
    Parse a ``key=value,key2=value2`` string into a dict.

    Blank entries are skipped; an entry without ``=`` raises ValueError.
    An empty key is allowed and addresses files directly under the root.

    Args:
        raw: Comma separated pairs

    Returns:
        Dict of stripped keys to stripped values
    """
    mapping: Dict[str, str] = {}

    for entry in raw.split(','):
        entry = entry.strip()
        if not entry:
            continue
        if '=' not in entry:
            raise ValueError(f"expected key=value, got {entry!r}")
        key, value = entry.split('=', 1)
        mapping[key.strip().strip('/')] = value.strip()

    return mapping


def format_bytes(bytes_count: int) -> str:
    """Format bytes as human-readable string."""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes_count < 1024.0:
            return f"{bytes_count:.1f} {unit}"
        bytes_count /= 1024.0
    return f"{bytes_count:.1f} PB"
