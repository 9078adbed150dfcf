"""
==============================================================================
Scanner Package - QR Identifier Detection
==============================================================================

QR scanning with OpenCV and pyzbar.

Classes:
--------
- QRScanner: Camera handling, frame decoding and identifier matching
- ScannerSessionManager: Single active scanner and last scanned value

==============================================================================
"""

from .core import QRScanner, decode_frame_payload
from .models import CameraDevice, ScannerError, ScannerStatus, ScanTimer, StatusKind
from .session import ScannerSessionManager, get_scanner_session

__all__ = [
    "QRScanner",
    "decode_frame_payload",
    "CameraDevice",
    "ScannerError",
    "ScannerStatus",
    "ScanTimer",
    "StatusKind",
    "ScannerSessionManager",
    "get_scanner_session",
]
