"""Provisioning pass.

Purpose
Fetch networks and the local host from metadata, then for every local
CNI network:
- write its config directory (and managed.d when it is the default)
- install the nsenter wrapper for its plugin type

Networks are processed one at a time. The first network that fails aborts
the pass. A pass that configures nothing is a failure too.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from cni_driver.cni_config import CNIConfigWriter
from cni_driver.config import Settings, settings as default_settings
from cni_driver.errors import (
    ConfigWriteError,
    NoEligibleNetwork,
    ProvisionError,
    WrapperInstallError,
)
from cni_driver.metadata import MetadataClient
from cni_driver.metrics import networks_configured, provision_errors
from cni_driver.schemas import Host, Network
from cni_driver.selector import plugin_type, select_networks
from cni_driver.wrapper import WrapperProvisioner

logger = logging.getLogger(__name__)


class MetadataSource(Protocol):
    """What the provisioner needs from the metadata service."""

    def get_networks(self) -> list[Network]:
        """Return every network known to the environment."""

    def get_self_host(self) -> Host:
        """Return the host the driver runs on."""


@dataclass
class ProvisionResult:
    """Outcome of a successful pass."""

    configured: list[str] = field(default_factory=list)
    config_dirs: list[Path] = field(default_factory=list)
    wrappers: list[Path] = field(default_factory=list)


class Provisioner:
    """Runs a provisioning pass against injected collaborators."""

    def __init__(
        self,
        metadata: MetadataSource,
        config_writer: CNIConfigWriter,
        wrapper: WrapperProvisioner,
        ppid: int | None = None,
    ) -> None:
        self._metadata = metadata
        self._config_writer = config_writer
        self._wrapper = wrapper
        self._ppid = ppid

    def run(self) -> ProvisionResult:
        """Provision every local CNI network.

        Raises:
            MetadataUnavailable: Networks or host could not be fetched
            ProvisionError: A network's config or wrapper failed
            NoEligibleNetwork: No network was configured
        """
        networks = self._metadata.get_networks()
        host = self._metadata.get_self_host()

        result = ProvisionResult()
        for network in select_networks(networks, host):
            binary_name = plugin_type(network, host)

            logger.info(f"setting up CNI config file for network {network.name}")
            try:
                conf_dir = self._config_writer.write(network, host)
            except ConfigWriteError as e:
                provision_errors.labels(stage="config").inc()
                raise ProvisionError(
                    f"failed to setup cni config for network {network.name}: {e}",
                    network=network.name,
                ) from e

            if not binary_name:
                provision_errors.labels(stage="wrapper").inc()
                raise ProvisionError(
                    f"network {network.name} declares no CNI plugin type",
                    network=network.name,
                )

            logger.info(f"setting up CNI wrapper binary {binary_name} for network {network.name}")
            try:
                wrapper_path = self._wrapper.write(host, binary_name, ppid=self._ppid)
            except WrapperInstallError as e:
                provision_errors.labels(stage="wrapper").inc()
                raise ProvisionError(
                    f"failed to setup cni binary for network {network.name}: {e}",
                    network=network.name,
                ) from e

            networks_configured.inc()
            result.configured.append(network.name)
            result.config_dirs.append(conf_dir)
            result.wrappers.append(wrapper_path)

        if not result.configured:
            raise NoEligibleNetwork(
                f"no setup happened: no CNI network found for environment {host.environment_uuid}"
            )

        logger.info(f"success, configured: {', '.join(result.configured)}")
        return result


def provision(metadata_address: str, settings: Settings | None = None) -> ProvisionResult:
    """Wait for metadata at metadata_address and run one provisioning pass."""
    settings = settings or default_settings
    with MetadataClient.connect(
        metadata_address,
        timeout=settings.metadata_timeout,
        interval=settings.metadata_wait_interval,
        max_attempts=settings.metadata_wait_attempts or None,
    ) as client:
        provisioner = Provisioner(
            metadata=client,
            config_writer=CNIConfigWriter(settings.cni_config_root),
            wrapper=WrapperProvisioner(settings.cni_bin_dir, nsenter_path=settings.nsenter_path),
        )
        return provisioner.run()
