"""Shared fixtures: an in-memory cluster and simulators for the other controllers."""

import copy
from typing import Any, Optional

import pytest
from kubernetes.client.rest import ApiException

from bigip_ipam_operator.allocation import AllocationGateway
from bigip_ipam_operator.constants import LABEL_F5_TYPE, LABEL_F5_TYPE_VIRTUAL_SERVER
from bigip_ipam_operator.models.annotations import Annotation
from bigip_ipam_operator.reconciler import Reconciler

PARTITION = "kubernetes"


class FakeCluster:
    """Stands in for ClusterStore.

    Objects are copied in and out, resource versions are enforced on replace,
    and every write made through the store API is recorded in ``writes``.
    Changes made by the simulated allocator and k8s-bigip-ctlr are not.
    """

    def __init__(self):
        self.services: dict[tuple[str, str], dict[str, Any]] = {}
        self.config_maps: dict[tuple[str, str], dict[str, Any]] = {}
        self.ip_addresses: dict[tuple[str, str], dict[str, Any]] = {}
        self.events: list[dict[str, Any]] = []
        self.writes: list[tuple[str, str, str]] = []
        self.failures: dict[tuple[str, str], ApiException] = {}
        self._version = 0

    # Internals

    def _next_version(self) -> str:
        self._version += 1
        return str(self._version)

    def _fail(self, verb: str, kind: str) -> None:
        error = self.failures.pop((verb, kind), None)
        if error is not None:
            raise error

    @staticmethod
    def _key(obj: dict[str, Any]) -> tuple[str, str]:
        return obj["metadata"]["namespace"], obj["metadata"]["name"]

    def _create(self, bucket: dict, obj: dict[str, Any], kind: str) -> dict[str, Any]:
        self._fail("create", kind)
        key = self._key(obj)
        if key in bucket:
            raise ApiException(status=409, reason="AlreadyExists")
        stored = copy.deepcopy(obj)
        stored["metadata"]["resourceVersion"] = self._next_version()
        stored["metadata"].setdefault("uid", f"uid-{kind.lower()}-{key[1]}")
        bucket[key] = stored
        self.writes.append(("create", kind, key[1]))
        return copy.deepcopy(stored)

    def _replace(self, bucket: dict, obj: dict[str, Any], kind: str) -> dict[str, Any]:
        self._fail("replace", kind)
        key = self._key(obj)
        if key not in bucket:
            raise ApiException(status=404, reason="NotFound")
        version = obj["metadata"].get("resourceVersion")
        if version and version != bucket[key]["metadata"]["resourceVersion"]:
            raise ApiException(status=409, reason="Conflict")
        stored = copy.deepcopy(obj)
        stored["metadata"]["resourceVersion"] = self._next_version()
        stored["metadata"].setdefault("uid", bucket[key]["metadata"].get("uid"))
        bucket[key] = stored
        self.writes.append(("replace", kind, key[1]))
        return copy.deepcopy(stored)

    def _touch(self, bucket: dict, key: tuple[str, str]) -> dict[str, Any]:
        """Return a stored object for in-place modification by a simulator."""
        obj = bucket[key]
        obj["metadata"]["resourceVersion"] = self._next_version()
        return obj

    # ClusterStore API

    def get_service(self, namespace: str, name: str) -> Optional[dict[str, Any]]:
        return copy.deepcopy(self.services.get((namespace, name)))

    def replace_service(self, service: dict[str, Any]) -> dict[str, Any]:
        return self._replace(self.services, service, "Service")

    def get_config_map(self, namespace: str, name: str) -> Optional[dict[str, Any]]:
        self._fail("get", "ConfigMap")
        return copy.deepcopy(self.config_maps.get((namespace, name)))

    def list_virtual_server_config_maps(self, namespace: str) -> list[dict[str, Any]]:
        return [
            copy.deepcopy(cm)
            for (ns, _), cm in sorted(self.config_maps.items())
            if ns == namespace
            and (cm["metadata"].get("labels") or {}).get(LABEL_F5_TYPE)
            == LABEL_F5_TYPE_VIRTUAL_SERVER
        ]

    def create_config_map(self, config_map: dict[str, Any]) -> dict[str, Any]:
        return self._create(self.config_maps, config_map, "ConfigMap")

    def replace_config_map(self, config_map: dict[str, Any]) -> dict[str, Any]:
        return self._replace(self.config_maps, config_map, "ConfigMap")

    def delete_config_map(self, namespace: str, name: str) -> bool:
        self._fail("delete", "ConfigMap")
        if self.config_maps.pop((namespace, name), None) is None:
            return False
        self.writes.append(("delete", "ConfigMap", name))
        return True

    def get_ip_address(self, namespace: str, name: str) -> Optional[dict[str, Any]]:
        self._fail("get", "IpAddress")
        return copy.deepcopy(self.ip_addresses.get((namespace, name)))

    def create_ip_address(self, ip_address: dict[str, Any]) -> dict[str, Any]:
        return self._create(self.ip_addresses, ip_address, "IpAddress")

    def create_event(
        self, involved: dict[str, Any], reason: str, message: str, warning: bool = False
    ) -> None:
        self._fail("create", "Event")
        self.events.append(
            {
                "name": involved["metadata"]["name"],
                "reason": reason,
                "message": message,
                "type": "Warning" if warning else "Normal",
            }
        )

    # Test helpers

    def add_service(
        self,
        name: str,
        ports: list[Any],
        annotations: Optional[dict[str, str]] = None,
        namespace: str = "default",
    ) -> dict[str, Any]:
        service = {
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": {
                "name": name,
                "namespace": namespace,
                "uid": f"uid-{name}",
                "resourceVersion": self._next_version(),
                "annotations": dict(annotations or {}),
            },
            "spec": {"type": "NodePort", "ports": _ports(ports)},
        }
        self.services[(namespace, name)] = service
        return copy.deepcopy(service)

    def set_ports(self, name: str, ports: list[Any], namespace: str = "default") -> None:
        self._touch(self.services, (namespace, name))["spec"]["ports"] = _ports(ports)

    def set_annotation(
        self, name: str, annotation: Annotation, value: str, namespace: str = "default"
    ) -> None:
        service = self._touch(self.services, (namespace, name))
        service["metadata"].setdefault("annotations", {})[annotation.value] = value

    def delete_service(self, name: str, namespace: str = "default") -> None:
        del self.services[(namespace, name)]

    def annotations(self, name: str, namespace: str = "default") -> dict[str, str]:
        return self.services[(namespace, name)]["metadata"].get("annotations") or {}

    def record_names(self, namespace: str = "default") -> set[str]:
        return {name for (ns, name) in self.config_maps if ns == namespace}

    def simulate_ipam(self) -> None:
        """Assign addresses to unassigned IpAddresses, like the IPAM controller."""
        statuses = [ip.get("status") or {} for ip in self.ip_addresses.values()]
        assigned = [s for s in statuses if s.get("address")]
        i = len(assigned) + 1
        for key in sorted(self.ip_addresses):
            if not (self.ip_addresses[key].get("status") or {}).get("address"):
                self._touch(self.ip_addresses, key)["status"] = {"address": f"10.0.0.{i}"}
                i += 1

    def reassign_address(self, name: str, address: str, namespace: str = "default") -> None:
        self._touch(self.ip_addresses, (namespace, name))["status"] = {"address": address}

    def simulate_bigip_ctlr(self) -> None:
        """Program every requested VIP that has no status yet, like k8s-bigip-ctlr."""
        requested = Annotation.RECORD_REQUESTED_VIP.value
        status = Annotation.RECORD_STATUS_VIP.value
        for key in sorted(self.config_maps):
            annotations = self.config_maps[key]["metadata"].get("annotations") or {}
            if annotations.get(requested) and not annotations.get(status):
                self._touch(self.config_maps, key)["metadata"]["annotations"][status] = (
                    annotations[requested]
                )


def _ports(ports: list[Any]) -> list[dict[str, Any]]:
    """Accept plain port numbers or (port, protocol) tuples."""
    result = []
    for port in ports:
        if isinstance(port, tuple):
            number, protocol = port
        else:
            number, protocol = port, "TCP"
        result.append({"port": number, "protocol": protocol, "targetPort": number})
    return result


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def gateway(cluster: FakeCluster) -> AllocationGateway:
    return AllocationGateway(cluster)


@pytest.fixture
def reconciler(cluster: FakeCluster, gateway: AllocationGateway) -> Reconciler:
    return Reconciler(cluster, gateway, PARTITION)


@pytest.fixture
def converge(cluster: FakeCluster, reconciler: Reconciler):
    """Run a Service through allocation and device programming."""

    def _converge(name: str, namespace: str = "default"):
        reconciler.reconcile(namespace, name)
        cluster.simulate_ipam()
        reconciler.reconcile(namespace, name)
        cluster.simulate_bigip_ctlr()
        return reconciler.reconcile(namespace, name)

    return _converge
