"""Recursive assembly of Package trees from directories of Go source files."""

import logging
import re
from pathlib import Path

from godocfriend.coverage import recalc_totals
from godocfriend.errors import SourceReadError
from godocfriend.extractor import FileExtractor
from godocfriend.models import File, Package
from godocfriend.parsers import GoParser, is_source_file
from godocfriend.parsers.base import BaseParser
from godocfriend.resolver import GoModuleResolver, ImportPathResolver
from godocfriend.syntax import SourceFile

logger = logging.getLogger(__name__)

_BLANK_OR_COMMENT_LINE = re.compile(r"^\s*(?://.*)?$")

EXTERNAL_TEST_SUFFIX = "_test"


def count_lines(text: str) -> tuple[int, int]:
    """Count all lines and source lines (neither blank nor only a // comment).

    Args:
        text: File contents

    Returns:
        (line_count, source_line_count)
    """
    lines = text.splitlines()
    source_lines = sum(1 for line in lines if not _BLANK_OR_COMMENT_LINE.match(line))
    return len(lines), source_lines


def package_name_for(sources: list[SourceFile]) -> str:
    """Pick the package name shared by a directory's files.

    External test packages (``foo_test``) fold into the package they test.
    """
    names = [source.package_name for source in sources if source.package_name]
    for name in names:
        if not name.endswith(EXTERNAL_TEST_SUFFIX):
            return name
    return names[0].removesuffix(EXTERNAL_TEST_SUFFIX) if names else ""


def sort_objects(package: Package) -> None:
    """Sort a package's per-kind lists by name (stable, case-sensitive)."""
    package.files.sort(key=lambda f: f.name)
    package.constants.sort(key=lambda v: v.name)
    package.variables.sort(key=lambda v: v.name)
    package.functions.sort(key=lambda m: m.name)
    package.examples.sort(key=lambda m: m.name)
    package.tests.sort(key=lambda m: m.name)


class PackageAssembler:
    """Builds a Package tree by walking a directory depth-first.

    Every failure (parse, I/O, import path resolution) aborts the whole walk;
    there is no partial result.
    """

    def __init__(
        self,
        resolver: ImportPathResolver | None = None,
        parser: BaseParser | None = None,
        ignore_dirs: list[str] | tuple[str, ...] = ("testdata",),
    ):
        self.resolver = resolver if resolver is not None else GoModuleResolver()
        self.parser = parser if parser is not None else GoParser()
        self.ignore_dirs = set(ignore_dirs)

    def load_package(self, directory: Path) -> Package | None:
        """Assemble the package in ``directory`` and all packages below it.

        Args:
            directory: Root directory of the tree

        Returns:
            The root Package, or None if the directory holds no Go source

        Raises:
            ParseError: If any file fails to parse
            SourceReadError: If any file or directory cannot be read
            ResolutionError: If a package's import path cannot be resolved
        """
        root = Path(directory)
        return self._load(root, root, parent_name="")

    def _load(self, directory: Path, root: Path, parent_name: str) -> Package | None:
        logger.info(f"load package from: {directory}")

        source_paths = self._source_files(directory)
        if not source_paths:
            return None

        parsed = []
        for path in source_paths:
            size, text = self._read_source(path)
            parsed.append((path, size, text, self.parser.parse_file(text, path.name)))

        sources = [source for _, _, _, source in parsed]
        package = Package(
            name=package_name_for(sources),
            synopsis="\n".join(source.package_doc for source in sources if source.package_doc),
            parent_package=parent_name,
        )
        self._resolve(package, directory, root)

        extractors = []
        for path, size, text, source in parsed:
            line_count, source_line_count = count_lines(text)
            file = File(
                name=path.name,
                size=size,
                line_count=line_count,
                source_line_count=source_line_count,
            )
            package.files.append(file)
            extractors.append(FileExtractor(source, file, package))

        # types first, so that constructors in any file find their type
        for extractor in extractors:
            extractor.extract_types()
        for extractor in extractors:
            extractor.extract_declarations()

        for subdirectory in self._subdirectories(directory):
            subpackage = self._load(subdirectory, root, package.import_path)
            if subpackage is not None:
                package.packages.append(subpackage)

        sort_objects(package)
        recalc_totals(package)

        return package

    def _resolve(self, package: Package, directory: Path, root: Path) -> None:
        relative = directory.relative_to(root).as_posix()
        package.import_path = package.name if relative == "." else relative
        package.canonical_import_path = self.resolver.canonical_import_path(directory)
        package.url = self.resolver.repository_url(package.canonical_import_path)

    @staticmethod
    def _list_directory(directory: Path) -> list[Path]:
        try:
            return sorted(directory.iterdir(), key=lambda entry: entry.name)
        except OSError as e:
            raise SourceReadError(directory, str(e)) from e

    def _source_files(self, directory: Path) -> list[Path]:
        return [
            entry for entry in self._list_directory(directory)
            if entry.is_file() and is_source_file(entry)
        ]

    def _subdirectories(self, directory: Path) -> list[Path]:
        return [
            entry for entry in self._list_directory(directory)
            if entry.is_dir()
            and not entry.is_symlink()
            and not entry.name.startswith((".", "_"))
            and entry.name not in self.ignore_dirs
        ]

    @staticmethod
    def _read_source(path: Path) -> tuple[int, str]:
        """Stat and read one source file."""
        try:
            size = path.stat().st_size
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(path, str(e)) from e
        return size, text


def load_package(directory: Path, resolver: ImportPathResolver | None = None) -> Package | None:
    """Assemble the Package tree rooted at ``directory`` with default settings."""
    return PackageAssembler(resolver=resolver).load_package(directory)
