"""CNI config file writer.

Each CNI network gets its own directory under the config root:

    <root>/<network>.d/<file>   one JSON document per cniConfig entry
    <root>/managed.d            symlink to the default network's directory

The container runtime reads managed.d, so the default network's directory
is what new containers get attached with.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from cni_driver.errors import ConfigDirectoryError, ConfigWriteError
from cni_driver.fsutil import makedirs_private, write_private
from cni_driver.keywords import substitute
from cni_driver.metrics import config_files_written
from cni_driver.schemas import Host, Network

logger = logging.getLogger(__name__)

MANAGED_DIR_NAME = "managed.d"
DIR_MODE = 0o700
FILE_MODE = 0o600


def render_config(config: object, host: Host) -> str:
    """Substitute host placeholders and render a config document as JSON.

    Keys are sorted so identical input always renders identical bytes.

    Raises:
        TypeError, ValueError: config holds a value JSON cannot represent
    """
    return json.dumps(substitute(config, host), indent=2, sort_keys=True) + "\n"


class CNIConfigWriter:
    """Writes per-network CNI config directories under a config root."""

    def __init__(self, config_root: Path | str):
        self.config_root = Path(config_root)

    @property
    def managed_dir(self) -> Path:
        return self.config_root / MANAGED_DIR_NAME

    def config_dir(self, network: Network) -> Path:
        return self.config_root / network.config_dir_name

    def write(self, network: Network, host: Host) -> Path:
        """Write every config file of a network and relink managed.d if default.

        A file that fails to render or write does not stop its siblings from
        being written; all failures are collected and raised together once
        the network has been fully processed.

        Args:
            network: Network whose cniConfig should be written
            host: Local host used for placeholder substitution

        Returns:
            The network's config directory

        Raises:
            ConfigDirectoryError: The config directory could not be created
            ConfigWriteError: One or more files, or the managed link, failed
        """
        conf_dir = self.config_dir(network)
        try:
            makedirs_private(conf_dir, DIR_MODE)
        except OSError as e:
            raise ConfigDirectoryError(
                f"cannot create config directory {conf_dir} for network {network.name}: {e}",
                network=network.name,
                path=conf_dir,
                errors=[e],
            ) from e

        errors: list[tuple[Path, Exception]] = []
        for file_name, config in (network.cni_config or {}).items():
            path = conf_dir / file_name
            try:
                if not file_name or os.sep in file_name or file_name in (".", ".."):
                    raise ValueError(f"invalid config file name {file_name!r}")
                content = render_config(config, host)
                logger.debug(f"Writing {path}: {content}")
                write_private(path, content, FILE_MODE)
                config_files_written.inc()
            except (TypeError, ValueError, OSError) as e:
                logger.error(f"Failed to write CNI config {path}: {e}")
                errors.append((path, e))

        if network.default:
            try:
                self._link_managed(network, conf_dir)
            except OSError as e:
                logger.error(f"Failed to link {self.managed_dir} to {conf_dir}: {e}")
                errors.append((self.managed_dir, e))

        if errors:
            path, last = errors[-1]
            raise ConfigWriteError(
                f"network {network.name}: {len(errors)} error(s), last at {path}: {last}",
                network=network.name,
                path=path,
                errors=[e for _, e in errors],
            ) from last

        return conf_dir

    def _link_managed(self, network: Network, conf_dir: Path) -> None:
        """Point managed.d at conf_dir unless it already resolves there."""
        managed = self.managed_dir
        try:
            if os.path.samefile(managed, conf_dir):
                logger.debug(f"{managed} already points at {conf_dir}")
                return
        except OSError:
            # Missing or dangling link, replaced below
            pass

        logger.info(f"Linking {managed} to {network.config_dir_name}")
        if managed.is_dir() and not managed.is_symlink():
            # Only an empty directory is removed, anything else is reported
            managed.rmdir()
        else:
            managed.unlink(missing_ok=True)
        managed.symlink_to(network.config_dir_name)
