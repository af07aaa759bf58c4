"""Resolution of canonical import paths and repository URLs for package directories."""

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path

from godocfriend.errors import ResolutionError

logger = logging.getLogger(__name__)

# Hosts whose repository root is always the first three path segments.
KNOWN_HOSTS = ("github.com", "gitlab.com", "bitbucket.org")

_MODULE_DIRECTIVE = re.compile(r'^\s*module\s+"?([^\s"]+)"?', re.MULTILINE)


class ImportPathResolver(ABC):
    """Maps package directories to import paths and repository URLs."""

    @abstractmethod
    def canonical_import_path(self, directory: Path) -> str:
        """Return the canonical import path of the package in ``directory``.

        Raises:
            ResolutionError: If no import path can be determined
        """
        pass

    @abstractmethod
    def repository_url(self, import_path: str) -> str:
        """Return the URL of the repository hosting ``import_path``, or an empty string."""
        pass


def find_go_module(directory: Path) -> tuple[Path, str] | None:
    """Find the nearest go.mod at or above a directory.

    Args:
        directory: Absolute directory to start from

    Returns:
        (module root directory, module path), or None if there is no go.mod

    Raises:
        ResolutionError: If a go.mod exists but is unreadable or has no module directive
    """
    for candidate in (directory, *directory.parents):
        go_mod = candidate / "go.mod"
        if not go_mod.is_file():
            continue

        try:
            content = go_mod.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ResolutionError(directory, f"cannot read {go_mod}: {e}") from e

        match = _MODULE_DIRECTIVE.search(content)
        if match is None:
            raise ResolutionError(directory, f"{go_mod} has no module directive")
        return candidate, match.group(1)

    return None


def locate_source_root(directory: Path) -> Path | None:
    """Find the nearest GOPATH-style ``src`` directory at or above a directory."""
    for candidate in (directory, *directory.parents):
        if candidate.name == "src":
            return candidate
    return None


def _join(base: str, relative: Path) -> str:
    rel = relative.as_posix()
    return base if rel == "." else f"{base}/{rel}"


class GoModuleResolver(ImportPathResolver):
    """Resolves import paths offline from go.mod files or a GOPATH layout.

    Lookup order: an explicit ``import_base`` for ``base_dir`` (and the
    directories below it), the nearest go.mod, then the nearest ``src``
    ancestor.
    """

    def __init__(self, import_base: str | None = None, base_dir: Path | None = None):
        self.import_base = import_base.strip("/") if import_base else None
        self.base_dir = base_dir.resolve() if base_dir is not None else None

    def canonical_import_path(self, directory: Path) -> str:
        directory = directory.resolve()

        if self.import_base:
            base_dir = self.base_dir if self.base_dir is not None else directory
            try:
                return _join(self.import_base, directory.relative_to(base_dir))
            except ValueError as e:
                raise ResolutionError(directory, f"not inside {base_dir}") from e

        module = find_go_module(directory)
        if module is not None:
            module_root, module_path = module
            return _join(module_path, directory.relative_to(module_root))

        src_root = locate_source_root(directory)
        if src_root is not None and src_root != directory:
            return directory.relative_to(src_root).as_posix()

        raise ResolutionError(directory, "no go.mod found and not inside a GOPATH src directory")

    def repository_url(self, import_path: str) -> str:
        segments = import_path.split("/")
        host = segments[0]

        if host in KNOWN_HOSTS:
            if len(segments) < 3:
                raise ResolutionError(import_path, f"incomplete {host} repository path")
            return "https://" + "/".join(segments[:3])

        # paths without a dotted host are local and have no remote
        if "." not in host:
            logger.debug(f"no repository host in import path {import_path}")
            return ""

        return "https://" + import_path
