"""
Error taxonomy.

Callers react to these differently:
MetadataUnavailable aborts the run before anything is written.
ConfigWriteError and WrapperInstallError are fatal for the network being set up.
NoEligibleNetwork means the run finished but nothing on this host matched.
"""

from __future__ import annotations

from pathlib import Path


class CNIDriverError(Exception):
    """Base class for all cni driver exceptions."""


class MetadataUnavailable(CNIDriverError):
    """Raised when the metadata service cannot be reached or returns bad data."""


class ConfigWriteError(CNIDriverError):
    """Raised when one or more CNI config files for a network could not be written.

    errors holds every failure recorded while processing the network, the
    message describes the last one.
    """

    def __init__(
        self,
        message: str,
        network: str | None = None,
        path: Path | None = None,
        errors: list[Exception] | None = None,
    ) -> None:
        super().__init__(message)
        self.network = network
        self.path = path
        self.errors = list(errors or [])


class ConfigDirectoryError(ConfigWriteError):
    """Raised when the per-network config directory cannot be created."""


class WrapperInstallError(CNIDriverError):
    """Raised when the nsenter wrapper binary cannot be installed."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ProvisionError(CNIDriverError):
    """Raised when provisioning a single network fails."""

    def __init__(self, message: str, network: str | None = None) -> None:
        super().__init__(message)
        self.network = network


class NoEligibleNetwork(CNIDriverError):
    """Raised when no network was configured on this host."""
