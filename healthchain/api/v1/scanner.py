"""
==============================================================================
Scanner Endpoints
==============================================================================

REST access to the QR scanner.

- POST /scanner/decode        one base64 frame, one-shot decode
- GET  /scanner/cameras       cameras visible to the portal host
- POST /scanner/camera-scan   scan with a camera attached to the portal host
- GET  /scanner/last          last scanned identifier
- POST /scanner/use           hand the last identifier to a form, close session

Live scanning from a browser camera goes through the /ws/scan WebSocket.

==============================================================================
"""

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from healthchain.core import exceptions
from healthchain.scanner import QRScanner, decode_frame_payload, get_scanner_session
from healthchain.schemas.portal import FrameRequest, LastScannedResponse, ScanResultResponse


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scanner", tags=["Scanner"])


class CameraScanRequest(BaseModel):
    """Scan with a camera attached to the portal host."""
    camera_id: Optional[int] = Field(default=None, ge=0)
    duration_seconds: int = Field(default=30, ge=1, le=300)


class ScannerController:
    """Controller for scanner operations."""

    def __init__(self):
        self._session = get_scanner_session()

    def decode(self, payload: str) -> dict:
        """Decode a single pushed frame."""
        frame = decode_frame_payload(payload)
        if frame is None:
            raise exceptions.invalid_frame()

        scanner = QRScanner()
        scanner.begin_session()
        identifier = scanner.process_frame(frame)
        scanner.cleanup()

        if identifier:
            self._session.record(identifier)

        return {
            "success": True,
            "identifier": identifier,
            "display": scanner.display_text
        }

    def list_cameras(self) -> dict:
        """Probe cameras without starting one."""
        cameras = QRScanner().probe_cameras()
        return {
            "success": True,
            "total": len(cameras),
            "cameras": [camera.model_dump() for camera in cameras]
        }

    def camera_scan(self, request: CameraScanRequest) -> dict:
        """Blocking camera scan, run in a worker thread."""
        scanner = self._session.open()

        try:
            started = scanner.initialize()
            if started and request.camera_id is not None and request.camera_id != scanner.camera_id:
                started = scanner.select_camera(request.camera_id)

            identifier = None
            if started and scanner.scanning:
                identifier = scanner.scan_camera_live(
                    duration_seconds=request.duration_seconds
                )

            if identifier:
                self._session.record(identifier)

            return {
                "success": identifier is not None,
                "identifier": identifier,
                "display": scanner.display_text,
                "elapsed": scanner.timer.display,
                "status": scanner.status.to_dict() if scanner.status else None,
                "error": scanner.last_error.model_dump() if scanner.last_error else None
            }
        finally:
            self._session.release(scanner)


@router.post("/decode", response_model=ScanResultResponse)
async def decode_frame(request: FrameRequest):
    """Decode one base64 encoded frame."""
    controller = ScannerController()
    return await run_in_threadpool(controller.decode, request.frame)


@router.get("/cameras")
async def list_cameras():
    """List cameras attached to the portal host."""
    controller = ScannerController()
    return await run_in_threadpool(controller.list_cameras)


@router.post("/camera-scan")
async def camera_scan(request: CameraScanRequest):
    """Scan a QR code with a camera attached to the portal host."""
    controller = ScannerController()
    return await run_in_threadpool(controller.camera_scan, request)


@router.get("/last", response_model=LastScannedResponse)
async def last_scanned():
    """Last scanned identifier."""
    return LastScannedResponse(identifier=get_scanner_session().last_scanned)


@router.post("/use", response_model=LastScannedResponse)
async def use_scanned_data():
    """Return the last scanned identifier and close the scanner session."""
    identifier = get_scanner_session().use_scanned_data()
    return LastScannedResponse(identifier=identifier)
