from __future__ import annotations

import logging

from cni_driver.selector import plugin_type, select_networks


def test_select_networks_filters_environment_and_cni_config(host, make_network):
    local = make_network("local", cni_config={"a.conf": {"type": "bridge"}})
    other_env = make_network("remote", environment_uuid="e2", cni_config={"a.conf": {"type": "bridge"}})
    no_cni = make_network("plain")
    bad_cni = make_network("bad", cniConfig="not-a-mapping")

    selected = list(select_networks([other_env, local, no_cni, bad_cni], host))

    assert [n.name for n in selected] == ["local"]


def test_select_networks_preserves_order(host, make_network):
    networks = [make_network(name, cni_config={}) for name in ("b", "a", "c")]
    assert [n.name for n in select_networks(networks, host)] == ["b", "a", "c"]


def test_select_networks_empty(host):
    assert list(select_networks([], host)) == []


def test_plugin_type_reads_type_field(host, ipsec_network):
    assert plugin_type(ipsec_network, host) == "rancher-bridge"


def test_plugin_type_is_substituted(host, make_network):
    network = make_network(cni_config={"a.conf": {"type": "$PLUGIN"}})
    host = host.model_copy(update={"properties": {"PLUGIN": "macvlan"}})
    assert plugin_type(network, host) == "macvlan"


def test_plugin_type_last_entry_wins(host, caplog, make_network):
    network = make_network(
        cni_config={
            "10-a.conf": {"type": "bridge"},
            "20-b.conf": {"name": "no type here"},
            "30-c.conf": {"type": "macvlan"},
        }
    )

    with caplog.at_level(logging.WARNING, logger="cni_driver.selector"):
        assert plugin_type(network, host) == "macvlan"

    assert "overriding 'bridge'" in caplog.text


def test_plugin_type_none_when_absent(host, make_network):
    network = make_network(cni_config={"a.conf": {"name": "x"}, "b.conf": ["list"], "c.conf": 3})
    assert plugin_type(network, host) is None
