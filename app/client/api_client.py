"""
Async client for the learning platform API with offline fallbacks.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from app.client.config import client_settings
from app.client.errors import ApiError, AuthenticationRequired
from app.client.offline_store import KIND_GAME_SCORE, KIND_PROGRESS, OfflineStore, QueuedRequest

logger = logging.getLogger(__name__)

OFFLINE_NO_CACHE = {"error": "Offline and no cached data available", "offline": True}

PRELOAD_ENDPOINTS = ["/students/subjects", "/students/achievements", "/games"]


class LearningApiClient:
    """
    Wraps every API route.

    GET responses are cached in the offline store. While offline, GETs are
    answered from that cache and progress/score submissions are queued for
    the sync agent instead of being sent.
    """

    def __init__(
        self,
        store: OfflineStore,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        online: bool = True,
        cache_ttl: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.store = store
        self.token = token
        self.online = online
        self.cache_ttl = cache_ttl if cache_ttl is not None else client_settings.CACHE_TTL_SECONDS
        self._http = httpx.AsyncClient(
            base_url=base_url or client_settings.LEARNING_API_URL,
            transport=transport,
            timeout=timeout or client_settings.REQUEST_TIMEOUT_SECONDS,
        )

    async def __aenter__(self) -> "LearningApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def set_token(self, token: Optional[str]) -> None:
        self.token = token

    # ---- transport ----

    def _headers(self, include_auth: bool = True, token: Optional[str] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        bearer = token or self.token
        if include_auth and bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    async def _send(
        self,
        method: str,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        include_auth: bool = True,
        token: Optional[str] = None,
    ) -> Any:
        """
        Send one request and decode the JSON body.

        Raises:
            AuthenticationRequired: 401; the stored token is cleared first
                when it was the bearer that got rejected
            ApiError: Any other error status
            httpx.TransportError: The server could not be reached
        """
        response = await self._http.request(
            method, endpoint, json=json, params=params, headers=self._headers(include_auth, token)
        )
        if response.status_code == 401:
            if token is None or token == self.token:
                self.token = None
            raise AuthenticationRequired(_error_message(response))
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET with cache write-through and offline fallback.

        Offline, or when the server cannot be reached, returns the cached
        response if it is younger than the cache TTL, else an offline marker.
        """
        params = {key: value for key, value in (params or {}).items() if value is not None}
        cache_key = f"{endpoint}?{urlencode(params)}" if params else endpoint

        if self.online:
            try:
                data = await self._send("GET", endpoint, params=params)
            except httpx.TransportError as exc:
                logger.warning(f"GET {endpoint} failed ({exc}); using cached data")
            else:
                self.store.cache_response(cache_key, data)
                return data

        cached = self.store.cached_response(cache_key, self.cache_ttl)
        if cached is None:
            return dict(OFFLINE_NO_CACHE)
        return cached

    async def post(self, endpoint: str, data: Dict[str, Any]) -> Any:
        return await self._send("POST", endpoint, json=data)

    async def put(self, endpoint: str, data: Dict[str, Any]) -> Any:
        return await self._send("PUT", endpoint, json=data)

    async def _post_or_queue(self, kind: str, endpoint: str, data: Dict[str, Any], label: str) -> Any:
        if self.online:
            try:
                return await self.post(endpoint, data)
            except httpx.TransportError as exc:
                logger.warning(f"POST {endpoint} failed ({exc}); queueing offline")
        self.store.enqueue(kind, endpoint, data, self.token)
        return {"message": f"{label} saved offline", "offline": True}

    async def replay(self, item: QueuedRequest) -> Any:
        """Send a queued mutation with the token captured when it was queued."""
        return await self._send("POST", item.endpoint, json=item.payload, token=item.token)

    # ---- auth ----

    async def login(self, email: str, password: str) -> Any:
        response = await self._send(
            "POST", "/auth/login", json={"email": email, "password": password}, include_auth=False
        )
        if response.get("token"):
            self.set_token(response["token"])
        return response

    async def register(self, user_data: Dict[str, Any]) -> Any:
        response = await self._send("POST", "/auth/register", json=user_data, include_auth=False)
        if response.get("token"):
            self.set_token(response["token"])
        return response

    async def get_profile(self) -> Any:
        return await self.get("/auth/profile")

    async def update_profile(self, data: Dict[str, Any]) -> Any:
        return await self.put("/auth/profile", data)

    async def validate_token(self) -> Any:
        return await self.get("/auth/validate")

    # ---- students ----

    async def get_student_dashboard(self) -> Any:
        return await self.get("/students/dashboard")

    async def get_subjects(self) -> Any:
        return await self.get("/students/subjects")

    async def get_subject_details(self, subject: str) -> Any:
        return await self.get(f"/students/subjects/{subject}")

    async def update_progress(self, progress_data: Dict[str, Any]) -> Any:
        return await self._post_or_queue(KIND_PROGRESS, "/students/progress", progress_data, "Progress")

    async def get_achievements(self) -> Any:
        return await self.get("/students/achievements")

    async def get_leaderboard(self, subject: Optional[str] = None, limit: int = 10) -> Any:
        return await self.get("/students/leaderboard", params={"subject": subject, "limit": limit})

    async def get_user_points(self) -> Any:
        return await self.get("/students/points")

    # ---- games ----

    async def get_games(self, subject: Optional[str] = None) -> Any:
        return await self.get("/games", params={"subject": subject})

    async def get_game_config(self, subject: str, game_id: str) -> Any:
        return await self.get(f"/games/{subject}/{game_id}")

    async def submit_game_score(self, subject: str, game_id: str, score_data: Dict[str, Any]) -> Any:
        return await self._post_or_queue(
            KIND_GAME_SCORE, f"/games/{subject}/{game_id}/score", score_data, "Score"
        )

    async def get_game_leaderboard(self, subject: str, game_id: str, limit: int = 10) -> Any:
        return await self.get(f"/games/{subject}/{game_id}/leaderboard", params={"limit": limit})

    async def get_game_stats(self, subject: Optional[str] = None) -> Any:
        return await self.get("/games/stats", params={"subject": subject})

    # ---- teachers ----

    async def get_teacher_dashboard(self) -> Any:
        return await self.get("/teachers/dashboard")

    async def get_teacher_classes(self) -> Any:
        return await self.get("/teachers/classes")

    async def create_class(self, class_data: Dict[str, Any]) -> Any:
        return await self.post("/teachers/classes", class_data)

    async def get_class_students(self, class_id: int) -> Any:
        return await self.get(f"/teachers/classes/{class_id}/students")

    async def enroll_student(self, class_id: int, student_id: int) -> Any:
        return await self.post(f"/teachers/classes/{class_id}/students", {"student_id": student_id})

    async def get_student_analytics(self, subject: Optional[str] = None, timeframe: int = 30) -> Any:
        return await self.get("/teachers/analytics/students", params={"subject": subject, "timeframe": timeframe})

    async def get_subject_analytics(self) -> Any:
        return await self.get("/teachers/analytics/subjects")

    async def get_engagement_analytics(self, days: int = 30) -> Any:
        return await self.get("/teachers/analytics/engagement", params={"days": days})

    async def get_student_progress(self, student_id: int) -> Any:
        return await self.get(f"/teachers/students/{student_id}/progress")

    # ---- admin ----

    async def create_achievement(self, achievement_data: Dict[str, Any]) -> Any:
        return await self.post("/admin/achievements", achievement_data)

    async def preload_content(self) -> int:
        """Warm the request cache with the essentials. Returns how many endpoints were cached."""
        cached = 0
        for endpoint in PRELOAD_ENDPOINTS:
            try:
                data = await self.get(endpoint)
            except ApiError as exc:
                logger.error(f"Failed to cache {endpoint}: {exc}")
                continue
            if not (isinstance(data, dict) and data.get("offline")):
                cached += 1
        return cached


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        if isinstance(detail, str):
            return detail
        if detail is not None:
            return str(detail)
    return f"HTTP {response.status_code}"
