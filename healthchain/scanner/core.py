"""
==============================================================================
QR Scanner Core Module
==============================================================================

Camera-based QR scanner that extracts a 12-digit identifier.

Features:
---------
- Camera probing and selection (OpenCV)
- QR decoding inside a square scan region (pyzbar)
- Ordered identifier patterns, first 12-digit match wins
- Status line and elapsed timer for the scanner modal
- Frames pushed by a client (base64 images) or read from a local camera

Lifecycle:
----------
    initialize() -> load_cameras() -> start_camera()
        -> process_frame() ... -> on_scan_success() -> stop_camera()

Decoded text that does not yield an identifier is scan noise: the scan
simply continues.

==============================================================================
"""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Callable, List, Optional

import cv2
import numpy as np
from pyzbar.pyzbar import ZBarSymbol, decode

from healthchain.config import get_settings
from healthchain.utils.validators import extract_identifier

from .models import (
    CameraDevice,
    ScannerError,
    ScannerStatus,
    ScanTimer,
    StatusKind,
)


# Module logger
logger = logging.getLogger(__name__)


# BGR colours for the scan region overlay
REGION_COLOR = (255, 255, 255)
DETECTED_COLOR = (0, 255, 0)


def decode_frame_payload(payload: str) -> Optional[np.ndarray]:
    """
    Decode a base64 encoded JPEG/PNG into an OpenCV frame.

    A "data:image/...;base64," prefix is accepted.

    Args:
        payload: Base64 image string

    Returns:
        BGR frame, or None if the payload is not an image
    """
    if not payload:
        return None

    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]

    try:
        img_data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None

    nparr = np.frombuffer(img_data, np.uint8)
    if nparr.size == 0:
        return None

    return cv2.imdecode(nparr, cv2.IMREAD_COLOR)


class QRScanner:
    """
    QR scanner with camera and pushed-frame support.

    Attributes:
        camera_id: Selected camera index
        cameras: Cameras found by load_cameras()
        scanning: True while a camera session is active
        status: Current status line
        last_error: Last error shown to the user
        result: Identifier extracted by the last successful scan

    Example:
        >>> scanner = QRScanner()
        >>> identifier = scanner.process_frame(frame)
        >>> scanner.display_text
        'Aadhaar: 123456789012'
    """

    def __init__(
        self,
        fps: Optional[int] = None,
        box_size: Optional[int] = None,
        probe_limit: Optional[int] = None,
        capture_factory: Optional[Callable[[int], "cv2.VideoCapture"]] = None
    ) -> None:
        """
        Initialize scanner instance.

        Args:
            fps: Camera frame rate (defaults to settings)
            box_size: Side of the square scan region (defaults to settings)
            probe_limit: Camera indices probed (defaults to settings)
            capture_factory: Opens a camera by index (defaults to cv2.VideoCapture)
        """
        settings = get_settings()

        self._fps = fps or settings.scanner_fps
        self._box_size = box_size or settings.scanner_box_size
        self._probe_limit = probe_limit or settings.camera_probe_limit
        self._capture_factory = capture_factory or cv2.VideoCapture

        self._cap = None
        self.camera_id: Optional[int] = None
        self.cameras: List[CameraDevice] = []
        self.scanning = False
        self.timer = ScanTimer()
        self.status: Optional[ScannerStatus] = None
        self.last_error: Optional[ScannerError] = None
        self.result: Optional[str] = None

        logger.debug(f"QR scanner created (fps={self._fps}, box={self._box_size})")

    # =========================================================================
    # CAMERA METHODS
    # =========================================================================

    def initialize(self) -> bool:
        """
        Check camera access, then load cameras and start the first one.

        Returns:
            True if the camera could be accessed
        """
        try:
            cap = self._capture_factory(0)
            try:
                if not cap.isOpened():
                    raise RuntimeError("Default camera could not be opened")
            finally:
                cap.release()
        except Exception as e:
            logger.error(f"Camera init error: {e}")
            self.show_error(
                "Camera Permission Required",
                "Please allow camera access in your browser settings."
            )
            return False

        self.load_cameras()
        return True

    def probe_cameras(self) -> List[CameraDevice]:
        """Open each device index in turn and keep those that respond."""
        devices = []

        for index in range(self._probe_limit):
            cap = self._capture_factory(index)
            try:
                if cap.isOpened():
                    devices.append(CameraDevice(id=index, label=f"Camera {index + 1}"))
            finally:
                cap.release()

        return devices

    def load_cameras(self) -> List[CameraDevice]:
        """
        Enumerate cameras, select the first one and start it.

        Returns:
            Cameras found (empty on error)
        """
        try:
            devices = self.probe_cameras()
            if not devices:
                raise RuntimeError("No cameras found")
        except Exception as e:
            logger.error(f"Load camera error: {e}")
            self.show_error("Camera Error", str(e))
            return []

        self.cameras = devices
        self.camera_id = devices[0].id
        logger.info(f"📷 Found {len(devices)} camera(s)")

        self.start_camera()
        return devices

    def select_camera(self, camera_id: int) -> bool:
        """Switch to another camera: stop, select, start."""
        self.stop_camera()
        self.camera_id = camera_id
        return self.start_camera()

    def start_camera(self) -> bool:
        """
        Open the selected camera and start the scan timer.

        Returns:
            True if the camera started
        """
        try:
            if self.camera_id is None:
                raise RuntimeError("No camera selected")

            cap = self._capture_factory(self.camera_id)
            if not cap.isOpened():
                cap.release()
                raise RuntimeError(f"Cannot open camera {self.camera_id}")

            cap.set(cv2.CAP_PROP_FPS, self._fps)
            self._cap = cap

        except Exception as e:
            logger.error(f"Start camera error: {e}")
            self.show_error("Camera Start Failed", str(e))
            return False

        self.begin_session()
        return True

    def begin_session(self) -> None:
        """Mark the scanner as scanning without opening a local camera."""
        self.scanning = True
        self.result = None
        self.timer.start()
        self.update_status("Scanning...", StatusKind.SCANNING)

    def stop_camera(self) -> None:
        """Stop scanning; a no-op when not scanning."""
        if not self.scanning:
            return

        if self._cap is not None:
            self._cap.release()
            self._cap = None

        self.scanning = False
        self.timer.stop()

    # =========================================================================
    # FRAME PROCESSING METHODS
    # =========================================================================

    def scan_region(self, frame: np.ndarray) -> np.ndarray:
        """Crop the centred square scan region (clamped to the frame)."""
        height, width = frame.shape[:2]
        size = min(self._box_size, height, width)

        top = (height - size) // 2
        left = (width - size) // 2

        return frame[top:top + size, left:left + size]

    def decode_texts(self, frame: np.ndarray) -> List[str]:
        """
        Decode QR symbols in the scan region.

        Decoder failures and non-UTF-8 payloads are ignored.
        """
        if frame is None or frame.size == 0:
            return []

        try:
            symbols = decode(self.scan_region(frame), symbols=[ZBarSymbol.QRCODE])
        except Exception as e:
            logger.debug(f"Decode error: {e}")
            return []

        texts = []
        for symbol in symbols:
            try:
                texts.append(symbol.data.decode("utf-8"))
            except UnicodeDecodeError:
                continue

        return texts

    def process_frame(self, frame: np.ndarray) -> Optional[str]:
        """
        Process a single frame.

        Args:
            frame: OpenCV image (numpy array)

        Returns:
            Identifier if this frame completed the scan, else None
        """
        for text in self.decode_texts(frame):
            identifier = self.on_scan_success(text)
            if identifier:
                return identifier

        return None

    def on_scan_success(self, text: str) -> Optional[str]:
        """
        Handle decoded text.

        Text without an identifier is ignored and scanning continues.
        """
        identifier = extract_identifier(text)
        if not identifier:
            return None

        self.stop_camera()
        self.result = identifier
        self.update_status("QR Code Detected", StatusKind.SUCCESS)

        logger.info(f"✅ Identifier scanned: {identifier[:4]}********")
        return identifier

    @property
    def display_text(self) -> Optional[str]:
        """Result line shown under the viewport."""
        if not self.result:
            return None
        return f"Aadhaar: {self.result}"

    def scan_image(self, image_path: Path) -> Optional[str]:
        """Scan a static image file."""
        if not image_path.exists():
            logger.error(f"Image not found: {image_path}")
            return None

        frame = cv2.imread(str(image_path))
        if frame is None:
            logger.error(f"Could not read image: {image_path}")
            return None

        return self.process_frame(frame)

    def scan_camera_live(
        self,
        duration_seconds: int = 30,
        window_name: Optional[str] = None
    ) -> Optional[str]:
        """
        Read frames from the open camera until an identifier is found.

        Args:
            duration_seconds: Give up after this long (0 = indefinite)
            window_name: Show frames in an OpenCV window when given

        Returns:
            Scanned identifier or None
        """
        if not self.scanning or self._cap is None:
            if not self.initialize() or not self.scanning:
                return None

        logger.info("📷 Starting live scan")

        try:
            while self.scanning:
                cap = self._cap
                if cap is None:
                    break

                ret, frame = cap.read()
                if not ret:
                    logger.warning("Failed to read frame")
                    break

                identifier = self.process_frame(frame)

                if window_name:
                    self._draw_region(frame, identifier is not None)
                    cv2.imshow(window_name, frame)
                    if cv2.waitKey(1) & 0xFF == ord("q"):
                        logger.info("User pressed 'q' - stopping scan")
                        break

                if identifier:
                    return identifier

                if duration_seconds > 0 and self.timer.elapsed_seconds >= duration_seconds:
                    logger.info(f"Duration {duration_seconds}s reached")
                    break
        finally:
            self.stop_camera()
            if window_name:
                cv2.destroyAllWindows()

        return None

    def _draw_region(self, frame: np.ndarray, detected: bool) -> None:
        """Outline the scan region on the frame."""
        height, width = frame.shape[:2]
        size = min(self._box_size, height, width)
        top = (height - size) // 2
        left = (width - size) // 2
        color = DETECTED_COLOR if detected else REGION_COLOR

        cv2.rectangle(frame, (left, top), (left + size, top + size), color, 2)

    # =========================================================================
    # STATUS METHODS
    # =========================================================================

    def show_error(self, title: str, message: str) -> None:
        """Record an error dialog and mirror it in the status line."""
        self.last_error = ScannerError(title=title, message=message)
        self.update_status(title, StatusKind.ERROR)

    def update_status(self, message: str, kind: StatusKind) -> None:
        """Set the status line."""
        self.status = ScannerStatus(message=message, kind=kind)

    def cleanup(self) -> None:
        """Release the camera."""
        self.stop_camera()
        if self._cap is not None:
            self._cap.release()
            self._cap = None
        logger.debug("Scanner closed")
