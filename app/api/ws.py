"""
WebSocket manager for dashboard change notifications
"""

import json
import logging
from datetime import datetime
from typing import Dict, List, Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.services.event_service import revalidation_paths
from app.utils.security import caller_from_id_token

logger = logging.getLogger(__name__)

EVENT_DELETED = "event_deleted"

class WebSocketManager:
    """Manages WebSocket connections per user"""

    def __init__(self):
        # user uid -> list of websockets
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, uid: str):
        """Accept WebSocket connection and add it to the user's channel"""
        await websocket.accept()

        if uid not in self.active_connections:
            self.active_connections[uid] = []

        self.active_connections[uid].append(websocket)
        logger.info(f"WebSocket connected for user {uid}. Total connections: {len(self.active_connections[uid])}")

    def disconnect(self, websocket: WebSocket, uid: str):
        """Remove WebSocket connection from the user's channel"""
        connections = self.active_connections.get(uid)
        if connections and websocket in connections:
            connections.remove(websocket)
            logger.info(f"WebSocket disconnected for user {uid}. Remaining connections: {len(connections)}")

            # Clean up empty channels
            if not connections:
                del self.active_connections[uid]

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send message to specific WebSocket"""
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            logger.error(f"Error sending personal message: {e}")

    async def broadcast_to_user(self, uid: str, message: dict):
        """Broadcast message to all WebSockets of one user"""
        if uid not in self.active_connections:
            logger.debug(f"No active connections for user {uid}")
            return

        # Copy so disconnects during the loop are safe
        connections = self.active_connections[uid].copy()

        disconnected = []
        for websocket in connections:
            try:
                await websocket.send_text(json.dumps(message))
            except Exception as e:
                logger.error(f"Error broadcasting to websocket: {e}")
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, uid)

    async def notify_change(self, uid: str, change_type: str, event_id: Optional[str] = None):
        """Tell a user's open dashboards which views to refresh"""
        message = {
            "type": change_type,
            "event_id": event_id,
            "revalidate": revalidation_paths(None if change_type == EVENT_DELETED else event_id),
            "timestamp": datetime.utcnow().isoformat()
        }
        await self.broadcast_to_user(uid, message)

    def get_connection_count(self, uid: str) -> int:
        """Get number of active connections for a user"""
        return len(self.active_connections.get(uid, []))

# Global WebSocket manager instance
websocket_manager = WebSocketManager()

# Router for WebSocket endpoints
router = APIRouter()

@router.websocket("/dashboard")
async def dashboard_websocket(websocket: WebSocket, token: str = ""):
    """WebSocket endpoint for dashboard change notifications"""

    caller = caller_from_id_token(token) if token else None
    if caller is None:
        await websocket.close(code=4401, reason="Not authenticated")
        return

    await websocket_manager.connect(websocket, caller.uid)

    try:
        welcome_message = {
            "type": "connection",
            "message": "Connected to dashboard updates",
            "connection_count": websocket_manager.get_connection_count(caller.uid)
        }
        await websocket_manager.send_personal_message(welcome_message, websocket)

        # Keep connection alive and answer heartbeats
        while True:
            data = await websocket.receive_text()
            try:
                client_message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received from WebSocket: {data}")
                continue

            if isinstance(client_message, dict) and client_message.get("type") == "ping":
                pong_message = {
                    "type": "pong",
                    "timestamp": client_message.get("timestamp")
                }
                await websocket_manager.send_personal_message(pong_message, websocket)

    except WebSocketDisconnect:
        pass
    finally:
        websocket_manager.disconnect(websocket, caller.uid)
