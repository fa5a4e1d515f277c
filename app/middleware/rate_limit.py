# app/middleware/rate_limit.py
import time
import logging
from typing import Dict, List, Optional
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Limitation du nombre de requêtes par IP sur une fenêtre glissante"""

    EXCLUDED_PREFIXES = ("/docs", "/redoc", "/openapi.json", "/health")

    def __init__(self, app, request_limit: int = 100, window_seconds: int = 60):
        super().__init__(app)
        self.request_limit = request_limit
        self.window_seconds = window_seconds
        self.clients: Dict[str, List[float]] = {}
        self._last_purge = 0.0

    def purge(self, now: float) -> None:
        """Oublie les IP sans requête dans la fenêtre courante"""
        expired = [
            ip for ip, timestamps in self.clients.items()
            if not timestamps or now - timestamps[-1] >= self.window_seconds
        ]
        for ip in expired:
            del self.clients[ip]
        self._last_purge = now

    def hit(self, ip: str, now: float) -> Optional[int]:
        """Enregistre une requête, renvoie le délai d'attente si la limite est atteinte"""
        if now - self._last_purge >= self.window_seconds:
            self.purge(now)

        # Nettoyer les anciennes requêtes
        recent = [
            timestamp for timestamp in self.clients.get(ip, [])
            if now - timestamp < self.window_seconds
        ]

        if len(recent) >= self.request_limit:
            self.clients[ip] = recent
            return max(1, int(self.window_seconds - (now - recent[0])))

        recent.append(now)
        self.clients[ip] = recent
        return None

    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith(self.EXCLUDED_PREFIXES):
            return await call_next(request)

        ip = request.client.host if request.client else "unknown"
        retry_after = self.hit(ip, time.time())

        if retry_after is not None:
            logger.warning(f"Rate limit atteint pour {ip} sur {request.url.path}")
            return JSONResponse(
                status_code=429,
                content={
                    "detail": "Trop de requêtes. Veuillez réessayer plus tard.",
                    "error": "TooManyRequestsError",
                    "retry_after": retry_after,
                },
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)
