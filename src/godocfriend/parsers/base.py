from abc import ABC, abstractmethod

from godocfriend.syntax import SourceFile


class BaseParser(ABC):
    """Abstract base class for language-specific declaration parsers."""

    @abstractmethod
    def parse_file(self, source_code: str, file_name: str) -> SourceFile:
        """Parse one source file into its declarations.

        Args:
            source_code: The source code to parse
            file_name: Base name of the file (for SourceFile.name and errors)

        Returns:
            SourceFile describing the file's package clause and declarations

        Raises:
            ParseError: If the source contains syntax errors
        """
        pass
