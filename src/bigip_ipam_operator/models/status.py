"""Outcome of a single reconcile."""

from enum import Enum

from pydantic import BaseModel, Field


class ReconcilePhase(str, Enum):
    """Where a Service stands after a reconcile."""

    SKIPPED = "Skipped"
    WAITING = "Waiting"
    PROGRESSING = "Progressing"
    READY = "Ready"
    DELETED = "Deleted"


class ReconcileResult(BaseModel):
    """What a reconcile observed and changed."""

    key: str
    phase: str = ReconcilePhase.WAITING.value
    created: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)
    activePorts: int = Field(default=0, alias="active_ports")
    wantedPorts: int = Field(default=0, alias="wanted_ports")
    promoted: bool = False

    class Config:
        populate_by_name = True

    @property
    def changed(self) -> bool:
        """True if any virtual-server record was written or removed."""
        return bool(self.created or self.updated or self.deleted)

    def summary(self) -> str:
        return (
            f"{self.phase}: {self.activePorts}/{self.wantedPorts} active, "
            f"created={self.created} updated={self.updated} deleted={self.deleted}"
        )
