"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides a fake demo backend, a test client and scanner fakes.

The backend is served by httpx.MockTransport; the camera and the QR decoder
are replaced by small fakes so no device or zbar input is needed.

==============================================================================
"""

import base64
from types import SimpleNamespace
from typing import Dict, Generator, List, Optional

import cv2
import httpx
import numpy as np
import pytest
from fastapi.testclient import TestClient

from healthchain.main import app
from healthchain.client.backend import BackendClient, get_backend_client
from healthchain.scanner import core as scanner_core
from healthchain.scanner import get_scanner_session


DEMO_IDENTIFIER = "123456789012"
BACKEND_URL = "http://backend.test"


# ============================================================================
# BACKEND PAYLOADS
# ============================================================================

def emergency_payload() -> dict:
    return {
        "emergency_data": {
            "name": "Ravi Kumar",
            "blood_type": "O+",
            "warning": "Severe penicillin allergy",
            "allergies": ["Penicillin", "Sulfa"],
            "conditions": ["Type 2 Diabetes"],
        },
        "restricted": {
            "govt_data": "Government records hidden from hospital staff",
            "financial_data": "Financial records hidden from hospital staff",
        },
    }


def form_payload() -> dict:
    return {
        "auto_filled": {
            "name": "Ravi Kumar",
            "dob": "1985-04-12",
            "address": "12 MG Road, Bengaluru",
        },
        "time_saved": "15 minutes",
    }


def vault_payload() -> dict:
    return {
        "name": "Ravi Kumar",
        "aadhaar": DEMO_IDENTIFIER,
        "data_vaults": {
            "medical": {
                "status": "🔒 Encrypted",
                "last_accessed": "2 hours ago",
                "data_includes": ["Prescriptions", "Lab reports"],
            },
            "government": {
                "status": "🔒 Encrypted",
                "last_accessed": "3 days ago",
                "data_includes": ["PAN", "Voter ID"],
            },
            "financial": {
                "status": "🔒 Encrypted",
                "last_accessed": "1 week ago",
                "data_includes": ["Bank accounts"],
            },
        },
        "privacy_note": "Each vault is isolated and access is logged",
    }


class FakeBackend:
    """
    In-memory stand-in for the demo backend.

    Attributes:
        requests: Every request received
        offline: Raise a connection error for every request
        payloads: Per-endpoint payload overrides
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.offline = False
        self.payloads: Dict[str, dict] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.offline:
            raise httpx.ConnectError("Connection refused", request=request)

        parts = request.url.path.strip("/").split("/")
        endpoint = parts[0]

        if endpoint == "health":
            return httpx.Response(200, json={"status": "healthy"})

        identifier = parts[1] if len(parts) > 1 else ""
        if identifier != DEMO_IDENTIFIER:
            return httpx.Response(200, json={"error": "Patient not found"})

        if endpoint == "emergency":
            if request.url.params.get("hospital_key") != "HOSPITAL123":
                return httpx.Response(200, json={"error": "Invalid hospital key"})
            return httpx.Response(200, json=self.payloads.get("emergency", emergency_payload()))

        if endpoint == "forms":
            return httpx.Response(200, json=self.payloads.get("forms", form_payload()))

        if endpoint == "vault":
            return httpx.Response(200, json=self.payloads.get("vault", vault_payload()))

        return httpx.Response(404, json={"detail": "Not Found"})

    @property
    def last_request(self) -> Optional[httpx.Request]:
        return self.requests[-1] if self.requests else None


# ============================================================================
# BACKEND FIXTURES
# ============================================================================

@pytest.fixture
def backend() -> FakeBackend:
    """Fake demo backend."""
    return FakeBackend()


@pytest.fixture
def backend_client(backend: FakeBackend) -> BackendClient:
    """Backend client wired to the fake backend."""
    return BackendClient(
        base_url=BACKEND_URL,
        transport=httpx.MockTransport(backend.handler),
    )


@pytest.fixture
def client(backend_client: BackendClient) -> Generator[TestClient, None, None]:
    """Create test client with the backend client override."""
    app.dependency_overrides[get_backend_client] = lambda: backend_client

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# SCANNER FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def reset_scanner_session() -> Generator[None, None, None]:
    """Start every test without a scanner session or last scanned value."""
    get_scanner_session().reset()
    yield
    get_scanner_session().reset()


def qr_symbol(text) -> SimpleNamespace:
    """Object shaped like a pyzbar Decoded result."""
    data = text if isinstance(text, bytes) else text.encode("utf-8")
    return SimpleNamespace(data=data, type="QRCODE")


class FakeDecoder:
    """
    Replacement for pyzbar's decode.

    Each call pops the next list of texts; once exhausted, nothing is found.
    """

    def __init__(self) -> None:
        self.queue: List[list] = []
        self.calls = 0

    def returns(self, *texts) -> None:
        self.queue.append([qr_symbol(t) for t in texts])

    def __call__(self, image, symbols=None):
        self.calls += 1
        if self.queue:
            return self.queue.pop(0)
        return []


@pytest.fixture
def decoder(monkeypatch) -> FakeDecoder:
    """Patch the scanner's QR decoder."""
    fake = FakeDecoder()
    monkeypatch.setattr(scanner_core, "decode", fake)
    return fake


class FakeCapture:
    """Stand-in for cv2.VideoCapture."""

    def __init__(self, index: int, opened: bool, frames: List[np.ndarray]) -> None:
        self.index = index
        self._opened = opened
        self._frames = frames
        self.released = False
        self.props: Dict[int, float] = {}

    def isOpened(self) -> bool:
        return self._opened and not self.released

    def release(self) -> None:
        self.released = True

    def set(self, prop: int, value: float) -> bool:
        self.props[prop] = value
        return True

    def read(self):
        if self._frames:
            return True, self._frames.pop(0)
        return False, None


class CameraRig:
    """Set of fake cameras keyed by device index."""

    def __init__(self, available=(0,)) -> None:
        self.available = set(available)
        self.frames: List[np.ndarray] = []
        self.opened: List[FakeCapture] = []

    def open(self, index: int) -> FakeCapture:
        capture = FakeCapture(index, index in self.available, self.frames)
        self.opened.append(capture)
        return capture


@pytest.fixture
def camera_rig() -> CameraRig:
    """Two fake cameras."""
    return CameraRig(available=(0, 1))


@pytest.fixture
def host_cameras(monkeypatch, camera_rig: CameraRig) -> CameraRig:
    """Fake cameras used by every scanner created with the default capture."""
    monkeypatch.setattr(scanner_core.cv2, "VideoCapture", camera_rig.open)
    return camera_rig


# ============================================================================
# FRAME HELPERS
# ============================================================================

def blank_frame(height: int = 300, width: int = 300) -> np.ndarray:
    return np.full((height, width, 3), 255, dtype=np.uint8)


def encode_frame(frame: np.ndarray) -> str:
    ok, buffer = cv2.imencode(".png", frame)
    assert ok
    return base64.b64encode(buffer.tobytes()).decode("ascii")


@pytest.fixture
def frame_b64() -> str:
    """Base64 PNG of a blank frame."""
    return encode_frame(blank_frame())
