"""godocfriend - documentation models for Go source trees."""

try:
    from importlib.metadata import version

    __version__ = version("godocfriend")
except Exception:
    __version__ = "0.0.0.dev0+local"  # Fallback for development
