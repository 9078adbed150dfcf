"""
==============================================================================
Scanner Models Module
==============================================================================

Value types shared by the scanner and its session manager.

==============================================================================
"""

from __future__ import annotations

import enum
import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StatusKind(str, enum.Enum):
    """Scanner status categories."""

    SCANNING = "scanning"
    SUCCESS = "success"
    ERROR = "error"


# Font Awesome icon per status kind
STATUS_ICONS = {
    StatusKind.SCANNING: "fa-search",
    StatusKind.SUCCESS: "fa-check-circle",
    StatusKind.ERROR: "fa-exclamation-circle",
}


class CameraDevice(BaseModel):
    """
    Camera found while probing device indices.

    Attributes:
        id: OpenCV device index
        label: Display label (defaults to "Camera N")
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=0, description="OpenCV device index")
    label: str = Field(..., description="Display label")


class ScannerStatus(BaseModel):
    """Status line shown above the scanner viewport."""

    model_config = ConfigDict(frozen=True)

    message: str
    kind: StatusKind

    @property
    def icon(self) -> str:
        """Icon class for the status kind."""
        return STATUS_ICONS[self.kind]

    def to_dict(self) -> dict:
        """Serialize with the icon included."""
        return {
            "message": self.message,
            "kind": self.kind.value,
            "icon": self.icon,
        }


class ScannerError(BaseModel):
    """Error dialog content."""

    model_config = ConfigDict(frozen=True)

    title: str
    message: str


class ScanTimer:
    """
    Elapsed-time counter for a scan session.

    Example:
        >>> timer = ScanTimer()
        >>> timer.start()
        >>> timer.display
        '00:00'
    """

    def __init__(self, clock=time.monotonic) -> None:
        self._clock = clock
        self._started_at: Optional[float] = None
        self._stopped_at: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._started_at is not None and self._stopped_at is None

    def start(self) -> None:
        self._started_at = self._clock()
        self._stopped_at = None

    def stop(self) -> None:
        if self.running:
            self._stopped_at = self._clock()

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds since start, frozen once stopped."""
        if self._started_at is None:
            return 0
        end = self._stopped_at if self._stopped_at is not None else self._clock()
        return max(0, int(end - self._started_at))

    @property
    def display(self) -> str:
        """Elapsed time formatted as MM:SS."""
        minutes, seconds = divmod(self.elapsed_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"
