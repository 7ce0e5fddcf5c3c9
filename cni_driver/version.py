"""Version information for the driver.

Read from the VERSION file shipped next to the package first, then from the
installed distribution metadata.
"""

from importlib import metadata
from pathlib import Path

DISTRIBUTION = "cni-driver"


def get_version() -> str:
    """Get the driver version.

    Returns:
        Version string (e.g., "0.2.0"), "0.0.0-dev" when nothing is known
    """
    version_file = Path(__file__).parent / "VERSION"
    if version_file.exists():
        version = version_file.read_text().strip()
        if version:
            return version.removeprefix("v")

    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "0.0.0-dev"


__version__ = get_version()
