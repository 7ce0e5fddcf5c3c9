from __future__ import annotations

import pytest

from cni_driver.config import settings
from cni_driver.schemas import Host, Network


@pytest.fixture(autouse=True)
def _isolate_roots(monkeypatch, tmp_path):
    """Point every on-disk root at a temp directory so tests never touch /opt."""
    monkeypatch.setattr(settings, "cni_config_root", str(tmp_path / "cni"))
    monkeypatch.setattr(settings, "cni_bin_dir", str(tmp_path / "cni" / "bin"))
    monkeypatch.setattr(settings, "metrics_textfile", "")
    monkeypatch.setattr(settings, "metadata_wait_interval", 0.0)
    monkeypatch.setattr(settings, "metadata_wait_attempts", 3)
    yield


@pytest.fixture
def host() -> Host:
    return Host(
        uuid="h-1",
        name="node1",
        hostname="node1.example",
        agent_ip="10.0.0.5",
        environment_uuid="e1",
        labels={"io.rancher.network.mtu": "1450"},
        properties={"CNI_SUBNET": "10.42.0.0/16"},
    )


def _build_network(
    name: str = "ipsec",
    environment_uuid: str = "e1",
    default: bool = False,
    cni_config: dict | None = None,
    **metadata,
) -> Network:
    if cni_config is not None:
        metadata["cniConfig"] = cni_config
    return Network(
        name=name,
        uuid=f"uuid-{name}",
        environment_uuid=environment_uuid,
        default=default,
        metadata=metadata,
    )


@pytest.fixture
def make_network():
    """Factory for Network records in the test host's environment."""
    return _build_network


@pytest.fixture
def ipsec_network() -> Network:
    return _build_network(
        default=True,
        cni_config={"10-ipsec.conf": {"type": "rancher-bridge", "subnet": "$CNI_SUBNET"}},
    )
