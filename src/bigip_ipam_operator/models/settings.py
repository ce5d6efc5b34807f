"""Operator settings read from the environment."""

import os
from collections.abc import Mapping
from typing import Optional

from pydantic import BaseModel, Field

from ..constants import (
    DEFAULT_CONTROLLER_TAG,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PARTITION,
    DEFAULT_RETRY_BASE_DELAY,
    DEFAULT_RETRY_MAX_DELAY,
    DEFAULT_WORKERS,
)


class OperatorSettings(BaseModel):
    """Process wide configuration.

    None of these values take part in convergence except ``partition``, which
    is written into every virtual-server record.
    """

    partition: str = Field(default=DEFAULT_PARTITION, min_length=1)
    controllerTag: str = Field(default=DEFAULT_CONTROLLER_TAG, alias="controller_tag")
    requireTag: bool = Field(default=False, alias="require_tag")
    logLevel: str = Field(default=DEFAULT_LOG_LEVEL, alias="log_level")
    workers: int = Field(default=DEFAULT_WORKERS, ge=1)
    retryBaseDelay: float = Field(default=DEFAULT_RETRY_BASE_DELAY, alias="retry_base_delay", gt=0)
    retryMaxDelay: float = Field(default=DEFAULT_RETRY_MAX_DELAY, alias="retry_max_delay", gt=0)

    class Config:
        populate_by_name = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OperatorSettings":
        """Build settings from environment variables.

        Unset or empty variables keep their defaults. ``REQUIRE_TAG`` is
        enabled by any non-empty value.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {"requireTag": bool(env.get("REQUIRE_TAG"))}

        for var, field in [
            ("F5_PARTITION", "partition"),
            ("CONTROLLER_TAG", "controllerTag"),
            ("LOG_LEVEL", "logLevel"),
            ("WORKERS", "workers"),
            ("RETRY_BASE_DELAY", "retryBaseDelay"),
            ("RETRY_MAX_DELAY", "retryMaxDelay"),
        ]:
            if env.get(var):
                values[field] = env[var]

        return cls.model_validate(values)
