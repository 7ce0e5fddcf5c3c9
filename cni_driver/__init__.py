"""CNI driver - per-host CNI configuration and wrapper provisioning."""

from cni_driver.version import __version__

__all__ = ["__version__"]
