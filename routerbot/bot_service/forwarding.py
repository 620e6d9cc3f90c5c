"""Delivery of escalated messages to the action group chat."""

from __future__ import annotations

import logging

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from routerbot.bot_service.context import BotContext
from routerbot.db import UserInfo
from routerbot.metrics.prometheus_exporter import messages_forwarded_total
from routerbot.nlp import Priority

logger = logging.getLogger(__name__)


async def forward_to_group(
    bot: Bot,
    context: BotContext,
    user: UserInfo,
    original_text: str,
    summary: str,
    reason: str,
    priority: Priority,
) -> bool:
    """Send ``summary`` to the action group; return whether it was delivered.

    Delivery is best effort: a failed send is logged and not retried.
    """

    settings = context.settings
    if not settings.forwarding_enabled:
        logger.info("Forwarding disabled; %s from user %s logged only: %s", reason, user.id, original_text)
        return False

    try:
        await bot.send_message(settings.action_group_chat_id, summary)
    except TelegramAPIError:
        logger.exception("Failed to forward %s from user %s", reason, user.id)
        return False

    messages_forwarded_total.labels(priority.value).inc()
    if context.analytics is not None:
        await context.analytics.log_forward(
            user.id,
            original_text,
            settings.action_group_chat_id,
            reason,
            priority.value,
        )
    logger.info("Message forwarded for user %s, reason: %s", user.id, reason)
    return True
