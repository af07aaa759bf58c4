"""Exceptions raised while assembling a documentation model."""

from pathlib import Path


class GodocError(Exception):
    """Base class for all godocfriend failures."""


class ParseError(GodocError):
    """Raised when a source file cannot be parsed.

    Attributes:
        file_name: Name of the offending file
        line: 1-indexed line of the first syntax error, if known
    """

    def __init__(self, file_name: str, line: int | None = None, detail: str = "syntax error"):
        self.file_name = file_name
        self.line = line
        location = f"{file_name}:{line}" if line is not None else file_name
        super().__init__(f"{location}: {detail}")


class SourceReadError(GodocError):
    """Raised when a file or directory cannot be stat'ed, read or listed."""

    def __init__(self, path: Path | str, reason: str):
        self.path = str(path)
        super().__init__(f"unreadable source {self.path!r}: {reason}")


class ResolutionError(GodocError):
    """Raised when a package's canonical import path or URL cannot be determined."""

    def __init__(self, directory: Path | str, reason: str):
        self.directory = str(directory)
        super().__init__(f"bad import path for {self.directory}: {reason}")


class NoPackageError(GodocError):
    """Raised when a scan root contains no Go package at all."""

    def __init__(self, directory: Path | str):
        self.directory = str(directory)
        super().__init__(f"no Go package found in {self.directory}")
