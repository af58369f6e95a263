# ------------------------------------------------------------
# live.py — 리뷰 실시간 브로드캐스트용 WebSocket 허브
# ------------------------------------------------------------
# 단일 프로세스 안에서 연결된 모든 클라이언트에게 같은 메시지를 보낸다.
# (여러 워커/서버 간 전파는 하지 않음)

import logging
from typing import Any, List, Set

from fastapi import WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)


class ReviewHub:
    def __init__(self):
        self._connections: Set[WebSocket] = set()

    @property
    def active(self) -> int:
        return len(self._connections)

    async def connect(self, ws: WebSocket):
        self._connections.add(ws)
        await ws.accept()
        logger.info("review socket connected (total=%d)", self.active)

    async def disconnect(self, ws: WebSocket):
        self._connections.discard(ws)
        logger.info("review socket disconnected (total=%d)", self.active)

    async def send(self, ws: WebSocket, event: str, data: Any = None, **extra):
        await ws.send_json(jsonable_encoder({"event": event, "data": data, **extra}))

    async def broadcast(self, event: str, data: Any = None):
        """연결된 모든 클라이언트에게 전송. 전송에 실패한 연결은 정리한다."""
        payload = jsonable_encoder({"event": event, "data": data})
        dead: List[WebSocket] = []
        for ws in list(self._connections):
            try:
                await ws.send_json(payload)
            except (WebSocketDisconnect, RuntimeError, OSError) as e:
                logger.warning("dropping review socket: %s", e)
                dead.append(ws)
        for ws in dead:
            self._connections.discard(ws)


review_hub = ReviewHub()
