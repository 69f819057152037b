"""Location permission and request models."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

# Request code attached to fine-location permission requests
LOCATION_PERMISSION_REQUEST = 1001

# Location request interval in milliseconds
LOCATION_REQ_INTERVAL = 10000


class PermissionState(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    UNDETERMINED = "undetermined"


class Priority(str, Enum):
    HIGH_ACCURACY = "high_accuracy"


@dataclass(frozen=True)
class LocationRequest:
    """Parameters for a continuous location subscription."""

    priority: Priority = Priority.HIGH_ACCURACY
    interval_millis: int = LOCATION_REQ_INTERVAL


class RequestStatus(str, Enum):
    PENDING = "pending"
    GRANTED = "granted"
    DENIED = "denied"


class PermissionRequest:
    """One permission request/response exchange.

    Starts pending and moves to granted or denied exactly once; the
    callback fires on that transition. Later resolutions are ignored.
    """

    def __init__(self, request_code: int, callback: Callable[[bool], None]) -> None:
        self.request_code = request_code
        self.status = RequestStatus.PENDING
        self._callback = callback

    @property
    def pending(self) -> bool:
        return self.status is RequestStatus.PENDING

    def resolve(self, granted: bool) -> None:
        if not self.pending:
            logger.debug("Permission request %d already %s", self.request_code, self.status.value)
            return
        self.status = RequestStatus.GRANTED if granted else RequestStatus.DENIED
        self._callback(granted)
