"""Convergence of a Service, its IpAddress and its virtual-server records.

A reconcile always starts from what is currently stored in the cluster and
never from the event that triggered it, so it can run any number of times, in
any order relative to the allocator and k8s-bigip-ctlr, and produces no writes
once everything has converged.
"""

import logging
from typing import Any

from kubernetes.client.rest import ApiException

from .allocation import AllocationGateway
from .constants import EVENT_REASON_READY
from .diff import diff_record
from .models.annotations import Annotation
from .models.status import ReconcilePhase, ReconcileResult
from .resources.service import get_annotation, service_key, set_annotation, wanted_ports
from .resources.virtual_server import (
    build_virtual_server_configmap,
    frontend_port_for,
    virtual_server_options,
)
from .sweeper import sweep_orphans
from .utils.kubernetes import ClusterStore
from .utils.validation import validate_service

logger = logging.getLogger(__name__)


class Reconciler:
    """Drives one Service at a time towards an active VIP."""

    def __init__(self, store: ClusterStore, gateway: AllocationGateway, partition: str):
        self.store = store
        self.gateway = gateway
        self.partition = partition

    def reconcile(self, namespace: str, name: str) -> ReconcileResult:
        """Reconcile the Service with the given key.

        Raises:
            ApiException: on any failed read or write; the caller retries
            AllocationError: if the VIP could not be requested
        """
        service = self.store.get_service(namespace, name)
        if service is None:
            # Owner references normally cascade; clean up anyway
            logger.debug(f"service '{namespace}/{name}' is gone, removing its records")
            deleted = sweep_orphans(self.store, namespace, name, ())
            return ReconcileResult(
                key=f"{namespace}/{name}",
                phase=ReconcilePhase.DELETED.value,
                deleted=deleted,
            )
        return self.reconcile_service(service)

    def reconcile_service(self, service: dict[str, Any]) -> ReconcileResult:
        key = service_key(service)
        namespace = service["metadata"]["namespace"]
        name = service["metadata"]["name"]
        result = ReconcileResult(key=key)
        logger.debug(f"processing service '{key}'")

        if not self.gateway.handles(service):
            logger.debug(f"service '{key}' belongs to another controller, skipping")
            result.phase = ReconcilePhase.SKIPPED.value
            return result

        for warning in validate_service(service):
            logger.warning(f"service '{key}': {warning}")

        allocation = self.gateway.ensure_vip(service)
        service = allocation.service
        needs_update = allocation.needs_service_update

        if not allocation.has_address:
            if needs_update:
                self.store.replace_service(service)
            result.phase = ReconcilePhase.WAITING.value
            return result

        mode, ssl = virtual_server_options(service)
        assigned_vip = get_annotation(service, Annotation.ASSIGNED_VIP)

        # Frontend port -> Service port. In http mode several Service ports
        # share one frontend port; the first one wins.
        wanted: dict[int, int] = {}
        for port in wanted_ports(service):
            frontend = frontend_port_for(mode, ssl, port)
            if frontend in wanted:
                logger.warning(
                    f"service '{key}' port {port} maps to frontend port {frontend} "
                    f"already used by port {wanted[frontend]}, ignoring it"
                )
                continue
            wanted[frontend] = port

        active = 0
        for frontend, port in wanted.items():
            desired = build_virtual_server_configmap(service, self.partition, mode, ssl, port)
            record_name = desired["metadata"]["name"]
            observed = self.store.get_config_map(namespace, record_name)

            if observed is None:
                self.store.create_config_map(desired)
                result.created.append(record_name)
                logger.info(
                    f"created configmap '{namespace}/{record_name}' "
                    f"for service '{key}' port {port}"
                )
                continue

            diff = diff_record(desired, observed)
            if diff.needs_write:
                logger.info(f"updating configmap '{namespace}/{record_name}' ({diff.reason})")
                payload = diff.desired
                payload["metadata"]["resourceVersion"] = observed["metadata"].get(
                    "resourceVersion"
                )
                self.store.replace_config_map(payload)
                result.updated.append(record_name)
            elif diff.up_to_date:
                active += 1
            else:
                logger.debug(f"configmap '{namespace}/{record_name}': {diff.reason}")

        result.activePorts = active
        result.wantedPorts = len(wanted)

        if active == len(wanted) and get_annotation(service, Annotation.ACTIVE_VIP) != assigned_vip:
            set_annotation(service, Annotation.ACTIVE_VIP, assigned_vip)
            service = self.store.replace_service(service)
            needs_update = False
            result.promoted = True
            message = (
                f"Loadbalancing with virtual IP '{assigned_vip}' is ready "
                f"with {len(wanted)} service port(s)"
            )
            logger.info(f"service '{key}': {message}")
            self._post_event(service, message)

        result.deleted = sweep_orphans(self.store, namespace, name, set(wanted))

        if needs_update:
            self.store.replace_service(service)

        if active == len(wanted):
            result.phase = ReconcilePhase.READY.value
        else:
            result.phase = ReconcilePhase.PROGRESSING.value
        return result

    def _post_event(self, service: dict[str, Any], message: str) -> None:
        try:
            self.store.create_event(service, EVENT_REASON_READY, message)
        except ApiException as e:
            logger.warning(f"failed to post event for service '{service_key(service)}': {e}")
