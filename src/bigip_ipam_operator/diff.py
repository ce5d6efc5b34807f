"""Comparison of desired and observed virtual-server records."""

from dataclasses import dataclass
from typing import Any

from .constants import DATA_CONFIG_KEY, LABEL_F5_TYPE, LABEL_F5_TYPE_VIRTUAL_SERVER
from .models.annotations import Annotation


@dataclass(frozen=True)
class RecordDiff:
    """Result of comparing a desired record with the observed one.

    ``up_to_date`` means the record carries the desired configuration and
    k8s-bigip-ctlr reports the assigned VIP as programmed. ``needs_write``
    means the observed record is stale and must be replaced by ``desired``.
    A record that is only waiting for k8s-bigip-ctlr is neither.
    """

    up_to_date: bool
    desired: dict[str, Any]
    reason: str
    needs_write: bool


def _annotations(record: dict[str, Any]) -> dict[str, str]:
    return record.get("metadata", {}).get("annotations") or {}


def diff_record(desired: dict[str, Any], observed: dict[str, Any]) -> RecordDiff:
    """Compare a desired virtual-server record with the observed one.

    Args:
        desired: Record built from the current Service
        observed: Record read from the cluster

    Returns:
        The comparison, with ``desired`` as the replacement payload
    """
    reasons = []
    needs_write = False

    wanted_vip = _annotations(desired).get(Annotation.RECORD_REQUESTED_VIP.value, "")
    requested_vip = _annotations(observed).get(Annotation.RECORD_REQUESTED_VIP.value, "")
    status_vip = _annotations(observed).get(Annotation.RECORD_STATUS_VIP.value, "")

    if (observed.get("data") or {}).get(DATA_CONFIG_KEY) != desired["data"][DATA_CONFIG_KEY]:
        reasons.append("f5Config changed")
        needs_write = True

    labels = observed.get("metadata", {}).get("labels") or {}
    if labels.get(LABEL_F5_TYPE) != LABEL_F5_TYPE_VIRTUAL_SERVER:
        reasons.append("label missing")
        needs_write = True

    if requested_vip != wanted_vip:
        reasons.append(f"requested vip changes from {requested_vip} to {wanted_vip}")
        needs_write = True

    if status_vip != wanted_vip:
        if status_vip:
            # Programmed with an old VIP; rewriting clears the status
            reasons.append(f"vip changes from {status_vip} to {wanted_vip}")
            needs_write = True
        else:
            reasons.append(f"waiting for virtual server on {wanted_vip}")

    return RecordDiff(
        up_to_date=not reasons,
        desired=desired,
        reason=", ".join(reasons),
        needs_write=needs_write,
    )
