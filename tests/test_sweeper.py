"""Tests for removing obsolete virtual-server records."""

import logging

import pytest
from kubernetes.client.rest import ApiException

from bigip_ipam_operator.sweeper import sweep_orphans


def _record(cluster, name, namespace="default", labels=None):
    cluster.config_maps[(namespace, name)] = {
        "metadata": {
            "name": name,
            "namespace": namespace,
            "resourceVersion": "1",
            "labels": {"f5type": "virtual-server"} if labels is None else labels,
        },
        "data": {},
    }


def test_deletes_unwanted_ports_only(cluster):
    for name in ["bigip-web-80", "bigip-web-443", "bigip-web-8080"]:
        _record(cluster, name)

    deleted = sweep_orphans(cluster, "default", "web", {443})

    assert sorted(deleted) == ["bigip-web-80", "bigip-web-8080"]
    assert cluster.record_names() == {"bigip-web-443"}


def test_leaves_other_services_alone(cluster):
    # Services whose names share a prefix or contain the separator
    for name in ["bigip-web-80", "bigip-web-api-80", "bigip-webapp-80", "bigip-my-web-80"]:
        _record(cluster, name)

    deleted = sweep_orphans(cluster, "default", "web", set())

    assert deleted == ["bigip-web-80"]
    assert cluster.record_names() == {"bigip-web-api-80", "bigip-webapp-80", "bigip-my-web-80"}


def test_hyphenated_service_name(cluster):
    _record(cluster, "bigip-web-api-80")
    _record(cluster, "bigip-web-api-443")

    deleted = sweep_orphans(cluster, "default", "web-api", {443})

    assert deleted == ["bigip-web-api-80"]


def test_ignores_other_namespaces(cluster):
    _record(cluster, "bigip-web-80", namespace="other")

    assert sweep_orphans(cluster, "default", "web", set()) == []
    assert cluster.record_names("other") == {"bigip-web-80"}


def test_ignores_unlabelled_configmaps(cluster):
    _record(cluster, "bigip-web-80", labels={"app": "web"})

    assert sweep_orphans(cluster, "default", "web", set()) == []
    assert cluster.record_names() == {"bigip-web-80"}


def test_skips_malformed_names(cluster, caplog):
    _record(cluster, "bigip-web-http")
    _record(cluster, "bigip-web-80")

    with caplog.at_level(logging.WARNING):
        deleted = sweep_orphans(cluster, "default", "web", set())

    assert deleted == ["bigip-web-80"]
    assert cluster.record_names() == {"bigip-web-http"}
    assert "bigip-web-http" in caplog.text


def test_delete_error_propagates(cluster):
    _record(cluster, "bigip-web-80")
    cluster.failures[("delete", "ConfigMap")] = ApiException(status=500, reason="Internal")

    with pytest.raises(ApiException):
        sweep_orphans(cluster, "default", "web", set())
