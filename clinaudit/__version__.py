"""Version information for ClinAudit."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("clinaudit")
except PackageNotFoundError:
    # Source tree that was never installed
    __version__ = "0.0.0"
