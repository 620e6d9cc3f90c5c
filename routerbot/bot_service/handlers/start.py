"""Start and help command handlers."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from routerbot.bot_service.context import BotContext, user_info
from routerbot.bot_service.keyboards import main_keyboard

HELP_TEXT = (
    "Available commands:\n\n"
    "• /price <symbol> - Real-time crypto prices (e.g., ETH, BTC)\n"
    "• /trending - Top trending tokens\n"
    "• /gas - Ethereum gas prices\n"
    "• /checkbalance <address> - Wallet ETH balance\n"
    "• /tokens <address> - Wallet ERC-20 balances\n"
    "• /nfts <address> - NFT holdings\n"
    "• /uniswap, /aave, /layerzero, /ethena, /sushi - Audited project profiles\n"
    "• /listfaqs - Browse the FAQ\n"
    "• /searchfaq <term> - Search the FAQ\n"
    "• /addfaq <question> | <answer> - Add an FAQ (admin)\n"
    "• /stats - Usage analytics (admin)\n\n"
    "You can also just ask a question, type \"ETH price\", or use the keyboard below. "
    "Messages that mention urgent, media or audit topics are passed to our team."
)


def setup(router: Router, context: BotContext) -> None:
    """Register /start and /help handlers."""

    @router.message(CommandStart())
    async def handle_start(message: Message) -> None:
        user = user_info(message.from_user)
        await message.answer(
            f"Welcome, {message.from_user.first_name if message.from_user else 'there'}! "
            "I can answer Web3 questions, show live crypto data, or escalate urgent requests to our team.\n\n"
            "How can I assist you today?",
            reply_markup=main_keyboard(),
        )
        if context.analytics is not None:
            await context.analytics.log_interaction(user, "start_command", "/start", "welcome_message")

    @router.message(Command("help"))
    async def handle_help(message: Message) -> None:
        await message.answer(HELP_TEXT, reply_markup=main_keyboard())
        if context.analytics is not None:
            await context.analytics.log_interaction(user_info(message.from_user), "help_command", "/help", "help_message")
