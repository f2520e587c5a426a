"""
Python client for the learning platform API with offline queueing and sync.
"""
from .api_client import LearningApiClient
from .config import ClientSettings, client_settings
from .errors import ApiError, AuthenticationRequired, ClientError
from .offline_store import OfflineStore, QueuedRequest
from .sync_agent import OfflineSyncAgent, SyncReport

__all__ = [
    "ApiError",
    "AuthenticationRequired",
    "ClientError",
    "ClientSettings",
    "LearningApiClient",
    "OfflineStore",
    "OfflineSyncAgent",
    "QueuedRequest",
    "SyncReport",
    "client_settings",
]
