"""FAQ administration handlers."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from routerbot.bot_service.context import BotContext, user_info
from routerbot.bot_service.filters import AdminFilter

ACCESS_DENIED = "Access denied. Admin privileges required."


def setup(router: Router, context: BotContext) -> None:
    """Register /addfaq, /listfaqs, /searchfaq and /stats handlers."""

    admin = AdminFilter(context.settings)

    @router.message(Command("addfaq"), admin)
    async def handle_add_faq(message: Message, command: CommandObject) -> None:
        reply = await context.logic.add_faq(command.args or "", user_info(message.from_user))
        await message.answer(reply)

    @router.message(Command("stats"), admin)
    async def handle_stats(message: Message) -> None:
        if context.analytics is None:
            await message.answer("Analytics are not enabled.")
            return
        stats = await context.analytics.get_stats()
        if stats is None:
            await message.answer("Analytics are unavailable right now. Check the logs for details.")
            return
        await message.answer(stats.format())
        await context.analytics.log_admin_action(message.from_user.id, "view_stats")

    @router.message(Command("addfaq", "stats"))
    async def handle_denied(message: Message) -> None:
        await message.answer(ACCESS_DENIED)

    @router.message(Command("listfaqs"))
    async def handle_list(message: Message) -> None:
        await message.answer(context.logic.list_reply())

    @router.message(Command("searchfaq"))
    async def handle_search(message: Message, command: CommandObject) -> None:
        await message.answer(context.logic.search_reply(command.args or ""))
