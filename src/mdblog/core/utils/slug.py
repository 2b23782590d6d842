"""Slug derivation for content files"""

from pathlib import Path


def slug_from_path(path: Path) -> str:
    """Return the file stem, or '' when the name is not representable as UTF-8."""
    stem = path.stem
    try:
        stem.encode('utf-8')
    except UnicodeEncodeError:
        return ''
    return stem
