"""Analytics persistence."""

from .analytics import AnalyticsRecorder, AnalyticsStats, UserInfo
from .session import create_engine, create_session_factory, init_db

__all__ = [
    "AnalyticsRecorder",
    "AnalyticsStats",
    "UserInfo",
    "create_engine",
    "create_session_factory",
    "init_db",
]
