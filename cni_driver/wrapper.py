"""nsenter wrapper binaries for CNI plugins.

The container runtime calls CNI plugins by name from the driver's bin
directory. Each name resolves to a small shell script that jumps into the
namespaces of the driver's parent process (the host side when the driver
runs with pid:host) and re-executes itself there, where the real plugin
binary of the same name lives:

    #!/bin/sh
    exec /usr/bin/nsenter -m -u -i -n -p -t <ppid> -- $0 "$@"

The parent PID changes whenever the supervising process restarts, so the
script is rewritten on every run.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from cni_driver.errors import WrapperInstallError
from cni_driver.fsutil import makedirs_private, write_private
from cni_driver.schemas import Host

logger = logging.getLogger(__name__)

DEFAULT_NSENTER = "/usr/bin/nsenter"
DIR_MODE = 0o700
BINARY_MODE = 0o700

SCRIPT_TEMPLATE = """#!/bin/sh
exec {nsenter} -m -u -i -n -p -t {ppid} -- $0 "$@"
"""


class WrapperProvisioner:
    """Installs nsenter wrapper scripts into a bin directory."""

    def __init__(self, bin_dir: Path | str, nsenter_path: str = DEFAULT_NSENTER):
        self.bin_dir = Path(bin_dir)
        self.nsenter_path = nsenter_path

    def render(self, ppid: int) -> str:
        return SCRIPT_TEMPLATE.format(nsenter=self.nsenter_path, ppid=ppid)

    def write(self, host: Host, plugin_name: str, ppid: int | None = None) -> Path:
        """Install the wrapper for plugin_name.

        The script is written to a temp file next to the target and renamed
        over it, so the target is either the previous version or the new one.

        Args:
            host: Local host, used for log context
            plugin_name: CNI plugin type, becomes the file name
            ppid: PID whose namespaces to enter, defaults to our parent

        Returns:
            Path of the installed wrapper

        Raises:
            WrapperInstallError: The wrapper could not be installed
        """
        if not plugin_name or os.sep in plugin_name or plugin_name in (".", ".."):
            raise WrapperInstallError(f"invalid CNI plugin name {plugin_name!r}")

        try:
            makedirs_private(self.bin_dir, DIR_MODE)
        except OSError as e:
            raise WrapperInstallError(
                f"cannot create bin directory {self.bin_dir}: {e}", path=self.bin_dir
            ) from e

        if ppid is None:
            ppid = os.getppid()
        logger.debug(f"ppid: {ppid}")

        path = self.bin_dir / plugin_name
        tmp_path = self.bin_dir / f"{plugin_name}.tmp"
        content = self.render(ppid)
        logger.debug(f"Writing {path} for host {host.hostname or host.uuid}:\n{content}")

        try:
            write_private(tmp_path, content, BINARY_MODE)
        except OSError as e:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                pass
            logger.error(f"Error creating cni binary file {tmp_path}: {e}")
            raise WrapperInstallError(f"cannot write {tmp_path}: {e}", path=tmp_path) from e

        try:
            # Docker may create a bind mount target as a directory before the
            # file exists; an empty directory there blocks the rename
            if path.is_dir() and not path.is_symlink():
                logger.info(f"{path} is a dir, removing it")
                try:
                    path.rmdir()
                except OSError as e:
                    logger.error(f"Error removing directory created with binary name {path}: {e}")
                    raise WrapperInstallError(
                        f"cannot remove directory {path}: {e}", path=path
                    ) from e

            try:
                os.replace(tmp_path, path)
            except OSError as e:
                logger.error(f"Error renaming tmp binary file {tmp_path}: {e}")
                raise WrapperInstallError(
                    f"cannot rename {tmp_path} to {path}: {e}", path=path
                ) from e
        except WrapperInstallError:
            tmp_path.unlink(missing_ok=True)
            raise

        return path
