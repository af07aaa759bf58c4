"""Configuration management for godocfriend scans."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

CONFIG_FILE_NAME = ".godocfriend"


@dataclass
class ScanOptions:
    """Options controlling a scan of a source tree.

    Attributes:
        start_dir: Directory holding the root package.
        version: Module version to report. If empty, the literal value of
            the root package constant named ``version_const_name`` is used.
        version_const_name: Name of the constant holding the module version.
        import_base: Import path of ``start_dir``, overriding go.mod and
            GOPATH detection.
        ignore_dirs: Subdirectory names never descended into, in addition
            to names starting with "." or "_".
    """
    start_dir: Path = field(default_factory=lambda: Path("."))
    version: str = ""
    version_const_name: str = "Version"
    import_base: str = ""
    ignore_dirs: list[str] = field(default_factory=lambda: ["testdata"])


def load_scan_options(start_dir: Path | None = None) -> ScanOptions:
    """Load scan options from the .godocfriend file in the scan root.

    Args:
        start_dir: Directory to scan. If None, uses current directory.

    Returns:
        ScanOptions with loaded or default values.

    Notes:
        If .godocfriend doesn't exist or can't be parsed, returns default options.
        Expected YAML structure:

        ```yaml
        scan:
          version: 1.2.0
          version_const_name: Version
          import_base: github.com/example/project
          ignore_dirs: [testdata, examples]
        ```
    """
    if start_dir is None:
        start_dir = Path.cwd()

    defaults = ScanOptions(start_dir=start_dir)
    config_path = start_dir / CONFIG_FILE_NAME

    if not config_path.is_file():
        return defaults

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            return defaults

        scan_config = data.get("scan", {})
        if not isinstance(scan_config, dict):
            return defaults

        ignore_dirs = scan_config.get("ignore_dirs", defaults.ignore_dirs)
        if not isinstance(ignore_dirs, list):
            return defaults

        return ScanOptions(
            start_dir=start_dir,
            version=str(scan_config.get("version", defaults.version) or ""),
            version_const_name=str(scan_config.get("version_const_name", defaults.version_const_name)),
            import_base=str(scan_config.get("import_base", defaults.import_base) or ""),
            ignore_dirs=[str(name) for name in ignore_dirs],
        )
    except (yaml.YAMLError, OSError, KeyError, TypeError, ValueError):
        # Return default options on any parsing errors
        return defaults
