"""Prometheus metrics for a provisioning pass.

The driver is a one-shot process, so metrics are not served over HTTP.
They are collected in a private registry and, when a textfile path is
configured, dumped for the node-exporter textfile collector.
"""
from __future__ import annotations

import logging

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, write_to_textfile

logger = logging.getLogger(__name__)

registry = CollectorRegistry()

networks_configured = Counter(
    "cni_driver_networks_configured_total",
    "Networks whose config and wrapper were provisioned",
    registry=registry,
)

config_files_written = Counter(
    "cni_driver_config_files_written_total",
    "CNI config files written",
    registry=registry,
)

provision_errors = Counter(
    "cni_driver_provision_errors_total",
    "Provisioning failures by stage",
    ["stage"],
    registry=registry,
)

last_run_success = Gauge(
    "cni_driver_last_run_success",
    "1 if the last provisioning pass succeeded, 0 otherwise",
    registry=registry,
)

provision_duration = Histogram(
    "cni_driver_provision_duration_seconds",
    "Duration of a provisioning pass",
    buckets=(0.1, 0.5, 1, 2, 5, 10, 30, 60, 300, float("inf")),
    registry=registry,
)


def write_textfile(path: str) -> None:
    """Write the registry in Prometheus text format to path.

    Failures are logged and not raised.
    """
    try:
        write_to_textfile(path, registry)
    except OSError as e:
        logger.warning(f"Failed to write metrics to {path}: {e}")
