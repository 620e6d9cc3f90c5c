"""Custom aiogram filters used by the bot."""

from __future__ import annotations

from typing import Any

from aiogram.filters import BaseFilter
from aiogram.types import Message

from routerbot.bot_service.keyboards import MenuAction
from routerbot.config.settings import Settings


class AdminFilter(BaseFilter):
    """Matches messages sent by one of the configured admin users."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def __call__(self, message: Message) -> bool:
        return message.from_user is not None and self._settings.is_admin(message.from_user.id)


class MenuFilter(BaseFilter):
    """Matches reply-keyboard button presses and passes the parsed action on."""

    async def __call__(self, message: Message) -> bool | dict[str, Any]:
        action = MenuAction.from_text(message.text)
        if action is None:
            return False
        return {"action": action}
