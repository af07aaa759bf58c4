from pathlib import Path

from godocfriend.parsers.base import BaseParser
from godocfriend.parsers.go_parser import GoParser

SOURCE_SUFFIXES = (".go",)


def is_source_file(path: Path) -> bool:
    """Return whether a path names a Go source file (suffix is case-insensitive)."""
    return path.suffix.lower() in SOURCE_SUFFIXES


def get_parser_for_file(path: Path) -> BaseParser | None:
    """Get the parser able to handle a file, or None if the type is unsupported."""
    if is_source_file(path):
        return GoParser()
    return None


__all__ = ["BaseParser", "GoParser", "get_parser_for_file", "is_source_file"]
