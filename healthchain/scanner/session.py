"""
==============================================================================
Scanner Session Module
==============================================================================

Holds the single active scanner and the last scanned identifier.

Only one scan session is active at a time: opening a session cleans up the
current scanner and replaces it with a new one. Holders of a replaced
scanner can detect it with is_active() and must not close the session that
replaced theirs; release() only closes the scanner it is given.

Closing the session drops the scanner but keeps the last scanned value so it
can still be used to fill a form.

The manager is shared by the event loop (WebSocket scans) and worker threads
(camera scans), so every state change happens under a lock.

==============================================================================
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .core import QRScanner


# Module logger
logger = logging.getLogger(__name__)


class ScannerSessionManager:
    """
    Owner of the global scanner instance.

    Example:
        >>> session = get_scanner_session()
        >>> scanner = session.open()
        >>> ...
        >>> identifier = session.use_scanned_data()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._scanner: Optional[QRScanner] = None
        self._last_scanned: Optional[str] = None

    @property
    def scanner(self) -> Optional[QRScanner]:
        """Active scanner, if any."""
        return self._scanner

    @property
    def is_open(self) -> bool:
        return self._scanner is not None

    @property
    def last_scanned(self) -> Optional[str]:
        """Last identifier recorded by any scan."""
        return self._last_scanned

    def is_active(self, scanner: Optional[QRScanner]) -> bool:
        """True while the given scanner is the session's active one."""
        return scanner is not None and self._scanner is scanner

    def open(self) -> QRScanner:
        """Replace any active scanner with a new one and return it."""
        with self._lock:
            if self._scanner is not None:
                logger.info("🔁 Replacing active scanner session")
                self._close_locked()
            self._scanner = QRScanner()
            logger.info("📱 Scanner session opened")
            return self._scanner

    def close(self) -> None:
        """Clean up and drop the active scanner."""
        with self._lock:
            self._close_locked()

    def release(self, scanner: QRScanner) -> None:
        """Close the session if the given scanner is still the active one."""
        with self._lock:
            if self._scanner is scanner:
                self._close_locked()
            else:
                scanner.cleanup()

    def record(self, identifier: str) -> None:
        """Remember a scanned identifier."""
        with self._lock:
            self._last_scanned = identifier

    def use_scanned_data(self) -> Optional[str]:
        """Hand the last scanned identifier to a form and close the session."""
        with self._lock:
            identifier = self._last_scanned
            self._close_locked()
            return identifier

    def reset(self) -> None:
        """Close the session and forget the last scanned value."""
        with self._lock:
            self._close_locked()
            self._last_scanned = None

    def _close_locked(self) -> None:
        if self._scanner is not None:
            self._scanner.cleanup()
            self._scanner = None
            logger.info("✅ Scanner session closed")


_session: Optional[ScannerSessionManager] = None


def get_scanner_session() -> ScannerSessionManager:
    """Get the global scanner session (created on first use)."""
    global _session
    if _session is None:
        _session = ScannerSessionManager()
    return _session
