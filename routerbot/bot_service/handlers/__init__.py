"""Register message and command handlers."""

from __future__ import annotations

from aiogram import Router

from routerbot.bot_service.context import BotContext

from . import faq, messages, start, web3


def setup_handlers(router: Router, context: BotContext) -> None:
    """Attach all handler groups to the provided router."""

    start.setup(router, context)
    web3.setup(router, context)
    faq.setup(router, context)
    messages.setup(router, context)
