"""Version of the installed exprcalc distribution."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version

# Reported when running from a source tree that was never installed
UNKNOWN_VERSION = "0.0.0+unknown"


def get_version() -> str:
    try:
        return _metadata_version("exprcalc")
    except PackageNotFoundError:
        return UNKNOWN_VERSION
