"""cni-driver command line entry point.

Runs a single provisioning pass and exits non-zero if it failed.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from cni_driver import metrics
from cni_driver.config import settings
from cni_driver.errors import CNIDriverError
from cni_driver.logging_config import setup_logging
from cni_driver.provision import provision
from cni_driver.version import __version__

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cni-driver",
        description="Write CNI configs and nsenter wrappers for this host's networks.",
    )
    parser.add_argument(
        "--metadata-address",
        default=settings.metadata_address,
        help="metadata address to use (env: RANCHER_METADATA_ADDRESS)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.debug,
        help="Turn on debug logging",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)

    start = time.monotonic()
    try:
        provision(args.metadata_address, settings)
    except CNIDriverError as e:
        logger.error(f"failed to setup CNI: {e}")
        metrics.last_run_success.set(0)
        return 1
    else:
        metrics.last_run_success.set(1)
        return 0
    finally:
        metrics.provision_duration.observe(time.monotonic() - start)
        if settings.metrics_textfile:
            metrics.write_textfile(settings.metrics_textfile)


if __name__ == "__main__":
    sys.exit(main())
