# services/api_client.py

"""
Async client for the study backend REST API (aiohttp).

The page itself works against the local store only; this client lets the
terminal front end run against a deployed backend instead.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from models.state import ExamState
from models.task import Task

logger = logging.getLogger(__name__)

# ===== EXCEPTIONS =====

class ApiError(Exception):
    """Non-success answer from the backend"""

    def __init__(self, status: int, reason: str):
        super().__init__(f"{status} {reason}")
        self.status = status
        self.reason = reason

class ApiValidationError(ApiError):
    """400: request rejected, ``reason`` carries the backend code"""
    pass

class ApiNotFoundError(ApiError):
    """404: the addressed task does not exist"""
    pass

class ApiConnectionError(ApiError):
    """Backend could not be reached"""

    def __init__(self, message: str):
        super().__init__(0, message)

class StudyApiClient:
    """
    Usage::

        async with StudyApiClient("http://localhost:3000") as api:
            task = await api.create_task("Revise calc")
    """

    def __init__(
        self,
        base_url: str,
        api_prefix: str = "/api",
        timeout: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "StudyApiClient":
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    def _url(self, path: str, prefixed: bool = True) -> str:
        prefix = self.api_prefix if prefixed else ""
        return f"{self.base_url}{prefix}/{path.lstrip('/')}"

    async def _request(self, method: str, path: str, json: Any = None, prefixed: bool = True) -> Any:
        if self._session is None:
            raise RuntimeError("StudyApiClient must be used as an async context manager")

        url = self._url(path, prefixed)
        try:
            async with self._session.request(method, url, json=json) as response:
                payload = await self._read_payload(response)
                if response.status >= 400:
                    raise self._error_for(response.status, payload)
                return payload
        except aiohttp.ClientConnectionError as e:
            logger.error(f"❌ Backend unreachable at {url}: {e}")
            raise ApiConnectionError(str(e)) from e
        except asyncio.TimeoutError as e:
            logger.error(f"❌ Backend timed out at {url}")
            raise ApiConnectionError("timeout") from e

    @staticmethod
    async def _read_payload(response: aiohttp.ClientResponse) -> Any:
        if response.content_type == "application/json":
            return await response.json()
        return await response.text()

    @staticmethod
    def _error_for(status: int, payload: Any) -> ApiError:
        reason = payload.get("error", "unknown_error") if isinstance(payload, dict) else str(payload)
        if status == 400:
            return ApiValidationError(status, reason)
        if status == 404:
            return ApiNotFoundError(status, reason)
        return ApiError(status, reason)

    # ===== ENDPOINTS =====

    async def health(self) -> Dict[str, Any]:
        return await self._request("GET", "/health", prefixed=False)

    async def list_tasks(self) -> List[Task]:
        rows = await self._request("GET", "/tasks")
        return [Task.from_dict(row) for row in rows]

    async def create_task(self, title: str) -> Task:
        row = await self._request("POST", "/tasks", json={"title": title})
        return Task.from_dict(row)

    async def set_task_done(self, task_id: str, done: bool) -> None:
        await self._request("PATCH", f"/tasks/{task_id}", json={"done": done})

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")

    async def get_state(self) -> Dict[str, Any]:
        data = await self._request("GET", "/state")
        return {
            "notes": data.get("notes", "") if isinstance(data.get("notes"), str) else "",
            "exam": ExamState.from_dict(data.get("exam")),
        }

    async def save_notes(self, notes: str) -> None:
        await self._request("PUT", "/notes", json={"notes": notes})

    async def save_exam(self, label: str, date: str) -> None:
        await self._request("PUT", "/exam", json={"label": label, "date": date})
