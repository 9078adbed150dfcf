"""
==============================================================================
Scanner WebSocket Module
==============================================================================

Live QR scanning via WebSocket connection.

Protocol:
---------
1. Client connects; server replies with a "status" message (Scanning...)
   and starts sending a "timer" message every second
2. Client sends frames: {"type": "frame", "frame": "<base64 image>"}
3. On the first frame holding an identifier the server sends "detected"
   and a "success" status, then stops the timer
4. Client sends {"type": "use"} to receive the identifier and close, or
   {"type": "stop"} to close without using it

Frames that cannot be decoded, or whose QR text holds no identifier, are
ignored. When another scan session opens (a second WebSocket or a camera
scan), this one is replaced: the next message other than "use" gets a
SESSION_REPLACED error and the connection ends.

==============================================================================
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool

from healthchain.core import exceptions
from healthchain.rendering import cards
from healthchain.scanner import QRScanner, decode_frame_payload, get_scanner_session


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter()

TIMER_INTERVAL_SECONDS = 1.0


class ScannerWebSocketHandler:
    """
    Handler for one scan session over WebSocket.

    Manages the lifecycle of a scanning session including:
    - Scanner session open/close
    - Elapsed timer ticks
    - Frame processing
    - Handing the identifier back to the page
    """

    def __init__(self, websocket: WebSocket):
        self._websocket = websocket
        self._session = get_scanner_session()
        self._scanner: Optional[QRScanner] = None
        self._timer_task: Optional[asyncio.Task] = None

    async def send_status(self) -> None:
        """Send the scanner status line."""
        status = self._scanner.status
        if status is None:
            return
        await self._websocket.send_json({
            "type": "status",
            **status.to_dict(),
            "html": cards.render_scanner_status(status)
        })

    @property
    def replaced(self) -> bool:
        """True once another session has taken over the scanner."""
        return not self._session.is_active(self._scanner)

    async def send_error(self, message: str, code: str = "ERROR") -> None:
        """Send error message to client."""
        await self._websocket.send_json({
            "type": "error",
            "code": code,
            "message": message
        })

    # =========================================================================
    # TIMER
    # =========================================================================

    async def _timer_loop(self) -> None:
        """Send the elapsed time every second while scanning."""
        try:
            while self._scanner is not None and self._scanner.scanning:
                await self._websocket.send_json({
                    "type": "timer",
                    "display": self._scanner.timer.display
                })
                await asyncio.sleep(TIMER_INTERVAL_SECONDS)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.debug(f"Timer stopped: {e}")

    def start_timer(self) -> None:
        if self._timer_task is None or self._timer_task.done():
            self._timer_task = asyncio.create_task(self._timer_loop())

    async def stop_timer(self) -> None:
        if self._timer_task and not self._timer_task.done():
            self._timer_task.cancel()
            try:
                await self._timer_task
            except asyncio.CancelledError:
                pass
        self._timer_task = None

    # =========================================================================
    # MESSAGES
    # =========================================================================

    async def handle_frame(self, data: dict) -> bool:
        """
        Handle a frame message.

        Returns:
            True once an identifier has been detected
        """
        if not self._scanner.scanning:
            return self._scanner.result is not None

        frame = await run_in_threadpool(decode_frame_payload, data.get("frame", ""))
        if frame is None:
            return False

        identifier = await run_in_threadpool(self._scanner.process_frame, frame)
        if not identifier:
            return False

        self._session.record(identifier)
        await self.stop_timer()

        await self._websocket.send_json({
            "type": "detected",
            "identifier": identifier,
            "display": self._scanner.display_text
        })
        await self.send_status()
        return True

    async def run(self) -> None:
        """Main handler loop."""
        await self._websocket.accept()
        logger.info("📱 Scanner WebSocket connected")

        # A new session replaces any previous one
        self._scanner = self._session.open()
        self._scanner.begin_session()

        try:
            await self.send_status()
            self.start_timer()

            while True:
                data = await self._websocket.receive_json()
                message_type = data.get("type")

                if self.replaced and message_type != "use":
                    logger.info("🔁 Scan session replaced by another scanner")
                    await self.send_error(
                        "Scan session was replaced by another scanner", "SESSION_REPLACED"
                    )
                    break

                if message_type == "frame":
                    await self.handle_frame(data)

                elif message_type == "use":
                    await self._websocket.send_json({
                        "type": "use",
                        "identifier": self._session.last_scanned
                    })
                    break

                elif message_type == "stop":
                    logger.info("🛑 Client requested stop")
                    break

                else:
                    await self.send_error(
                        f"Unknown message type: {message_type}", "UNKNOWN_MESSAGE"
                    )

        except WebSocketDisconnect:
            logger.info("📱 Client disconnected")
        except Exception as e:
            logger.error(f"WebSocket error: {e}")
            error = exceptions.internal_error()
            try:
                await self.send_error(error.message, error.code)
            except Exception:
                pass
        finally:
            await self.stop_timer()
            self._session.release(self._scanner)
            logger.info("✅ Scanner WebSocket closed")


@router.websocket("/ws/scan")
async def websocket_scan(websocket: WebSocket):
    """Live QR scanning via WebSocket."""
    handler = ScannerWebSocketHandler(websocket)
    await handler.run()
