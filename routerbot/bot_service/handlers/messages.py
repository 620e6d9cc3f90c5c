"""Handlers for keyboard buttons and free-form text."""

from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.types import Message

from routerbot.bot_service.context import BotContext, user_info
from routerbot.bot_service.filters import MenuFilter
from routerbot.bot_service.forwarding import forward_to_group
from routerbot.bot_service.keyboards import MENU_RESPONSES, MenuAction, main_keyboard, web3_keyboard
from routerbot.logic import GENERIC_ERROR
from routerbot.nlp import CategoryAnalysis, CategoryMatch, Priority

logger = logging.getLogger(__name__)


def setup(router: Router, context: BotContext) -> None:
    """Register menu and free-text handlers; must be attached after commands."""

    @router.message(MenuFilter())
    async def handle_menu(message: Message, action: MenuAction) -> None:
        user = user_info(message.from_user)
        category = action.escalation
        if category is not None:
            reason = f"{category.value}_request"
            analysis = CategoryAnalysis(
                matches=[CategoryMatch(category=category, matched_keywords=[], confidence_score=0.0)],
                priority=Priority.HIGH,
                should_forward=True,
            )
            summary = context.logic.build_forward_summary(message.text, user, analysis, reason)
            await forward_to_group(message.bot, context, user, message.text, summary, reason, Priority.HIGH)

        if action is MenuAction.WEB3_FAQS:
            text, keyboard = context.logic.list_reply(), main_keyboard()
        elif action is MenuAction.TRENDING_TOKENS:
            text, keyboard = await context.logic.trending_reply(user), web3_keyboard()
        elif action is MenuAction.GAS_TRACKER:
            text, keyboard = await context.logic.gas_reply(user), web3_keyboard()
        elif action in (MenuAction.CRYPTO_DATA, MenuAction.LIVE_PRICES, MenuAction.WALLET_QUERY):
            text, keyboard = MENU_RESPONSES[action], web3_keyboard()
        else:
            text, keyboard = MENU_RESPONSES[action], main_keyboard()

        await message.answer(text, reply_markup=keyboard)
        if context.analytics is not None:
            await context.analytics.log_interaction(user, "keyboard_button", action.value, "button_response")

    @router.message(F.text)
    async def handle_text(message: Message) -> None:
        user = user_info(message.from_user)
        try:
            reply = await context.logic.handle_text(message.text, user)
        except Exception:  # pragma: no cover
            logger.exception("Error handling message from user %s", user.id)
            await message.answer(GENERIC_ERROR)
            return

        await message.answer(reply.text)
        if reply.forward_text:
            await forward_to_group(
                message.bot,
                context,
                user,
                message.text,
                reply.forward_text,
                reply.forward_reason or "request",
                reply.priority,
            )
