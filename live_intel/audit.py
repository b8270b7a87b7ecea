"""
Live Intel - Audit Log.

============================================================
PURPOSE
============================================================
Forwards orchestrator events (one per run) to the codex
audit service:

    POST {codex_url}/codex/records
    {"type": ..., "module": ..., "data": ..., "actor": ...}

Writes are best-effort: failures are logged and the call
returns None.

============================================================
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

import aiohttp

from .exceptions import AuditLogError


logger = logging.getLogger(__name__)


class AuditLog(ABC):
    """Outbound audit-log collaborator."""

    @abstractmethod
    async def log_event(
        self,
        event_type: str,
        module: str,
        payload: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """Record an event; returns the stored record or None."""
        pass

    async def close(self) -> None:
        return None


class NullAuditLog(AuditLog):
    """Audit log that records events in memory only."""

    def __init__(self) -> None:
        self.events: List[Dict[str, Any]] = []

    async def log_event(
        self,
        event_type: str,
        module: str,
        payload: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        self.events.append({"type": event_type, "module": module, "data": payload})
        return None


class CodexAuditLog(AuditLog):
    """
    HTTP client for the codex audit service.

    Usage:
        audit = CodexAuditLog("http://localhost:3001")
        record = await audit.log_event("LIVE_INTEL_UPDATE", "LIVE_INTEL", {...})
        await audit.close()
    """

    def __init__(
        self,
        base_url: str,
        actor: str = "live-intel",
        timeout_seconds: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._actor = actor
        self._timeout = timeout_seconds
        self._session = session
        self._owns_session = session is None

    @property
    def records_url(self) -> str:
        return f"{self._base_url}/codex/records"

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def _post(self, body: Dict[str, Any]) -> Dict[str, Any]:
        session = await self._get_session()
        try:
            async with session.post(self.records_url, json=body) as response:
                if response.status >= 400:
                    text = await response.text()
                    raise AuditLogError(body["type"], f"HTTP {response.status}: {text[:200]}")
                return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise AuditLogError(body["type"], str(e) or type(e).__name__, original_exception=e) from e

    async def log_event(
        self,
        event_type: str,
        module: str,
        payload: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        body = {
            "type": event_type,
            "module": module,
            "data": payload,
            "actor": self._actor,
        }
        try:
            record = await self._post(body)
        except AuditLogError as e:
            logger.error(f"Codex log failed: {e.message}")
            return None

        logger.debug(f"Codex record created: {record}")
        return record

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
