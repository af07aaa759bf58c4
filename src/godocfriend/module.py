"""Scanning a source tree into a Module."""

import logging

from godocfriend import __version__
from godocfriend.assembler import PackageAssembler
from godocfriend.config import ScanOptions
from godocfriend.errors import NoPackageError
from godocfriend.models import Metadata, Module, Package, PackageSummary
from godocfriend.resolver import GoModuleResolver

logger = logging.getLogger(__name__)


def module_version(package: Package, options: ScanOptions) -> str:
    """Return the configured version, else the root package's version constant."""
    if options.version:
        return options.version

    for constant in package.constants:
        if constant.name == options.version_const_name:
            return constant.value or ""
    return ""


def package_list(module: Module) -> list[PackageSummary]:
    """Summaries of every package in a module, sorted by import path."""
    summaries = []
    module.walk(lambda pkg: summaries.append(pkg.summary()))
    return sorted(summaries, key=lambda summary: summary.import_path)


def scan_directory(options: ScanOptions | None = None) -> Module:
    """Assemble the package tree under ``options.start_dir`` into a Module.

    Args:
        options: Scan options; defaults scan the current directory

    Returns:
        Module wrapping the root package

    Raises:
        NoPackageError: If the start directory holds no Go source
        GodocError: If parsing, reading or import path resolution fails
    """
    if options is None:
        options = ScanOptions()

    resolver = GoModuleResolver(
        import_base=options.import_base or None,
        base_dir=options.start_dir,
    )
    assembler = PackageAssembler(resolver=resolver, ignore_dirs=options.ignore_dirs)

    package = assembler.load_package(options.start_dir)
    if package is None:
        raise NoPackageError(options.start_dir)

    source_path = package.url or package.canonical_import_path
    module = Module(
        metadata=Metadata(
            title=source_path.rstrip("/").rsplit("/", 1)[-1],
            version=module_version(package, options),
            generator_version=__version__,
            url=package.url,
        ),
        package=package,
    )
    module.package_list = package_list(module)

    logger.info(f"scanned {len(module.package_list)} package(s) under {options.start_dir}")
    return module
