"""BIG-IP IPAM Operator - kopf handlers.

Watches Services, IpAddresses and virtual-server ConfigMaps. Every event is
reduced to the key of the Service it concerns and put on a work queue; a pool
of workers reconciles the queued Services.
"""

import asyncio
import logging
from typing import Any

import kopf

from .allocation import AllocationGateway
from .constants import (
    IPAM_API_GROUP,
    IPAM_API_VERSION,
    IPAM_PLURAL,
    LABEL_F5_TYPE,
    LABEL_F5_TYPE_VIRTUAL_SERVER,
)
from .models.settings import OperatorSettings
from .reconciler import Reconciler
from .router import keys_for_ip_address, keys_for_service, keys_for_virtual_server
from .utils.kubernetes import ClusterStore, get_k8s_client
from .utils.log import configure_logging
from .utils.validation import validate_settings
from .workqueue import WorkQueue, split_key, worker

logger = logging.getLogger(__name__)


@kopf.on.startup()
async def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Configure operator settings and start the reconcile workers."""
    settings.watching.connect_timeout = 60
    settings.watching.server_timeout = 300

    operator_settings = OperatorSettings.from_env()
    configure_logging(operator_settings.logLevel)

    errors = validate_settings(operator_settings)
    if errors:
        raise kopf.PermanentError(f"Invalid settings: {'; '.join(errors)}")

    store = ClusterStore(get_k8s_client())
    gateway = AllocationGateway(
        store,
        controller_tag=operator_settings.controllerTag,
        require_tag=operator_settings.requireTag,
    )
    memo.reconciler = Reconciler(store, gateway, operator_settings.partition)
    memo.queue = WorkQueue(
        base_delay=operator_settings.retryBaseDelay,
        max_delay=operator_settings.retryMaxDelay,
    )

    async def handle(key: str) -> None:
        namespace, name = split_key(key)
        result = await asyncio.to_thread(memo.reconciler.reconcile, namespace, name)
        if result.changed or result.promoted:
            logger.info(f"service '{key}' {result.summary()}")
        else:
            logger.debug(f"service '{key}' {result.summary()}")

    memo.workers = [
        asyncio.create_task(worker(memo.queue, handle), name=f"reconcile-worker-{i}")
        for i in range(operator_settings.workers)
    ]

    logger.info(
        f"BIG-IP IPAM Operator started (partition={operator_settings.partition}, "
        f"tag={operator_settings.controllerTag}, requireTag={operator_settings.requireTag}, "
        f"workers={operator_settings.workers})"
    )


@kopf.on.cleanup()
async def shutdown(memo: kopf.Memo, **_: Any) -> None:
    """Stop accepting work and let in-flight reconciles finish."""
    queue = getattr(memo, "queue", None)
    if queue is None:
        return
    queue.shutdown()
    await asyncio.gather(*memo.workers, return_exceptions=True)
    logger.info("BIG-IP IPAM Operator stopped")


def _enqueue(memo: kopf.Memo, keys: list[str]) -> None:
    """Queue keys. Must run on the event loop that owns the queue."""
    queue = getattr(memo, "queue", None)
    if queue is None:
        return
    for key in keys:
        queue.add(key)


@kopf.on.event("", "v1", "services")
async def service_event(body: kopf.Body, type: str, memo: kopf.Memo, **_: Any) -> None:
    """Services: created, updated, deleted or listed on resync."""
    keys = keys_for_service(body)
    if type == "DELETED":
        logger.debug(f"processing deleted service '{keys[0]}'")
    _enqueue(memo, keys)


@kopf.on.event(IPAM_API_GROUP, IPAM_API_VERSION, IPAM_PLURAL)
async def ip_address_event(body: kopf.Body, type: str, memo: kopf.Memo, **_: Any) -> None:
    """IpAddresses: the allocator assigned or released an address.

    A deleted IpAddress wakes up its Service as well, which requests a new one.
    """
    keys = keys_for_ip_address(body)
    logger.debug(f"processing address '{keys[0]}' ({type})")
    _enqueue(memo, keys)


@kopf.on.event("", "v1", "configmaps", labels={LABEL_F5_TYPE: LABEL_F5_TYPE_VIRTUAL_SERVER})
async def virtual_server_event(body: kopf.Body, memo: kopf.Memo, **_: Any) -> None:
    """Virtual-server ConfigMaps: k8s-bigip-ctlr reported a programmed VIP."""
    _enqueue(memo, keys_for_virtual_server(body))
