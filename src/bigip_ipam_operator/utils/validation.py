"""Validation utilities for settings and Service annotations."""

import re
from typing import Any

from ..constants import SSL_PROFILE_SEPARATOR
from ..models.annotations import Annotation
from ..models.settings import OperatorSettings
from ..models.virtual_server import F5Mode
from ..resources.service import get_annotation

_PARTITION_PATTERN = re.compile(r"^[A-Za-z0-9_][-A-Za-z0-9_.]*$")


def validate_settings(settings: OperatorSettings) -> list[str]:
    """Validate operator settings.

    Args:
        settings: Parsed settings

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if not _PARTITION_PATTERN.match(settings.partition):
        errors.append(f"F5_PARTITION is not a valid partition name, got '{settings.partition}'")

    if not settings.controllerTag:
        errors.append("CONTROLLER_TAG must not be empty")

    if settings.retryMaxDelay < settings.retryBaseDelay:
        errors.append(
            f"RETRY_MAX_DELAY ({settings.retryMaxDelay}) must not be lower than "
            f"RETRY_BASE_DELAY ({settings.retryBaseDelay})"
        )

    return errors


def validate_service(service: dict[str, Any]) -> list[str]:
    """Check the user-written annotations of a Service.

    Problems found here never stop a reconcile; the builder falls back to its
    defaults. They are returned so they can be logged.
    """
    warnings = []

    mode = get_annotation(service, Annotation.VIP_MODE)
    if mode and mode not in [m.value for m in F5Mode]:
        warnings.append(
            f"annotation {Annotation.VIP_MODE.value} must be 'http' or 'tcp', "
            f"got '{mode}', using 'tcp'"
        )

    profiles = get_annotation(service, Annotation.SSL_PROFILES)
    if profiles and any(not p for p in profiles.split(SSL_PROFILE_SEPARATOR)):
        warnings.append(
            f"annotation {Annotation.SSL_PROFILES.value} contains an empty profile name: "
            f"'{profiles}'"
        )

    return warnings
