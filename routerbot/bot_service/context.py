"""Shared dependencies passed into handler setup functions."""

from __future__ import annotations

from dataclasses import dataclass

from aiogram.types import User

from routerbot.config.settings import Settings
from routerbot.db import AnalyticsRecorder, UserInfo
from routerbot.logic import AssistantLogic


@dataclass(slots=True)
class BotContext:
    """Container for objects shared across handlers."""

    settings: Settings
    logic: AssistantLogic
    analytics: AnalyticsRecorder | None = None


def user_info(user: User | None) -> UserInfo:
    """Reduce an aiogram user to the fields the logic layer needs."""

    if user is None:
        return UserInfo(id=0)
    return UserInfo(
        id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
    )
