"""Crypto data and project command handlers."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from routerbot.bot_service.context import BotContext, user_info
from routerbot.projects import PROJECTS


def setup(router: Router, context: BotContext) -> None:
    """Register price, trending, gas, wallet, NFT, token and project handlers."""

    @router.message(Command("price"))
    async def handle_price(message: Message, command: CommandObject) -> None:
        reply = await context.logic.price_reply(command.args or "", user_info(message.from_user))
        await message.answer(reply)

    @router.message(Command("trending"))
    async def handle_trending(message: Message) -> None:
        await message.answer(await context.logic.trending_reply(user_info(message.from_user)))

    @router.message(Command("gas"))
    async def handle_gas(message: Message) -> None:
        await message.answer(await context.logic.gas_reply(user_info(message.from_user)))

    @router.message(Command("checkbalance"))
    async def handle_balance(message: Message, command: CommandObject) -> None:
        reply = await context.logic.balance_reply(command.args or "", user_info(message.from_user))
        await message.answer(reply)

    @router.message(Command("nfts"))
    async def handle_nfts(message: Message, command: CommandObject) -> None:
        reply = await context.logic.nfts_reply(command.args or "", user_info(message.from_user))
        await message.answer(reply)

    @router.message(Command("tokens"))
    async def handle_tokens(message: Message, command: CommandObject) -> None:
        reply = await context.logic.tokens_reply(command.args or "", user_info(message.from_user))
        await message.answer(reply)

    @router.message(Command(*PROJECTS))
    async def handle_project(message: Message, command: CommandObject) -> None:
        await message.answer(context.logic.project_reply(command.command))
        if context.analytics is not None:
            await context.analytics.log_interaction(
                user_info(message.from_user),
                "project_command",
                f"/{command.command}",
                "project_info",
            )
