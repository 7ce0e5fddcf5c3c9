"""Select the networks this host should configure."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from cni_driver.keywords import substitute
from cni_driver.schemas import Host, Network

logger = logging.getLogger(__name__)


def select_networks(networks: Iterable[Network], host: Host) -> Iterator[Network]:
    """Yield networks in the host's environment that carry a CNI config.

    Networks from other environments and networks without a cniConfig
    mapping are not errors, they are skipped.
    """
    for network in networks:
        if network.environment_uuid != host.environment_uuid:
            logger.debug(f"{network.uuid or network.name} is not local to this environment")
            continue
        if network.cni_config is None:
            logger.debug(f"network {network.name} is not a CNI network")
            continue
        yield network


def plugin_type(network: Network, host: Host) -> str | None:
    """Return the CNI plugin binary name declared by a network.

    Every entry of the config set is substituted and inspected for a string
    "type" field. When several entries declare one, the last entry wins.
    """
    found: str | None = None
    for file_name, config in (network.cni_config or {}).items():
        props = substitute(config, host)
        if not isinstance(props, dict):
            continue
        candidate = props.get("type")
        if not isinstance(candidate, str) or not candidate:
            continue
        if found is not None and found != candidate:
            logger.warning(
                f"network {network.name}: {file_name} declares plugin type "
                f"'{candidate}', overriding '{found}'"
            )
        found = candidate
    return found
