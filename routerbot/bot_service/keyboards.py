"""Reply keyboards and the menu actions behind their buttons."""

from __future__ import annotations

from enum import Enum

from aiogram.types import KeyboardButton, ReplyKeyboardMarkup

from routerbot.nlp import Category


class MenuAction(str, Enum):
    """Every button the bot shows; the value is the button label."""

    URGENT_REQUEST = "Urgent Request"
    MEDIA_INQUIRY = "Media Inquiry"
    AUDIT_REQUEST = "Audit Request"
    WEB3_FAQS = "Web3 FAQs"
    CRYPTO_DATA = "Crypto Data"
    CONTACT_SUPPORT = "Contact Support"
    LIVE_PRICES = "Live Prices"
    TRENDING_TOKENS = "Trending Tokens"
    GAS_TRACKER = "Gas Tracker"
    WALLET_QUERY = "Wallet Query"
    BACK_TO_MAIN = "Back to Main"

    @classmethod
    def from_text(cls, text: str | None) -> "MenuAction | None":
        if not text:
            return None
        try:
            return cls(text.strip())
        except ValueError:
            return None

    @property
    def escalation(self) -> Category | None:
        """Category a button press is forwarded under, if any."""

        return _ESCALATIONS.get(self)


_ESCALATIONS = {
    MenuAction.URGENT_REQUEST: Category.URGENT,
    MenuAction.MEDIA_INQUIRY: Category.MEDIA,
    MenuAction.AUDIT_REQUEST: Category.AUDIT,
}

MENU_RESPONSES = {
    MenuAction.URGENT_REQUEST: (
        "Your urgent request has been noted and our team has been notified. "
        "Please describe the issue in as much detail as you can."
    ),
    MenuAction.MEDIA_INQUIRY: (
        "Media inquiry received. Our team will review your request and respond promptly."
    ),
    MenuAction.AUDIT_REQUEST: (
        "Audit request forwarded to our security team. Please provide project details for a "
        "comprehensive security review."
    ),
    MenuAction.CRYPTO_DATA: (
        "Access real-time crypto data:\n\n• /price <symbol> - Current prices\n• /trending - Top trending tokens\n"
        "• /gas - Ethereum gas prices\n• /checkbalance <address> - Wallet balance\n• /nfts <address> - NFT holdings\n\n"
        "Select an option below:"
    ),
    MenuAction.CONTACT_SUPPORT: (
        "For professional support, describe your issue here and mark it as urgent, "
        "or use the Urgent Request button to reach the team directly."
    ),
    MenuAction.LIVE_PRICES: (
        "Get live cryptocurrency prices with /price <symbol>, for example:\n• /price ETH\n• /price BTC\n"
        "• /price USDC\n\nYou can also just type \"ETH price\" or \"$BTC\"."
    ),
    MenuAction.WALLET_QUERY: (
        "Query wallet information:\n• /checkbalance <address> - ETH balance\n"
        "• /tokens <address> - ERC-20 balances\n• /nfts <address> - NFT holdings"
    ),
    MenuAction.BACK_TO_MAIN: "Returned to main menu. Select an option or ask a question about Web3 security.",
}


def _keyboard(rows: list[list[MenuAction]]) -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[[KeyboardButton(text=action.value) for action in row] for row in rows],
        resize_keyboard=True,
        one_time_keyboard=False,
    )


def main_keyboard() -> ReplyKeyboardMarkup:
    return _keyboard(
        [
            [MenuAction.URGENT_REQUEST, MenuAction.MEDIA_INQUIRY],
            [MenuAction.AUDIT_REQUEST, MenuAction.WEB3_FAQS],
            [MenuAction.CRYPTO_DATA, MenuAction.CONTACT_SUPPORT],
        ],
    )


def web3_keyboard() -> ReplyKeyboardMarkup:
    return _keyboard(
        [
            [MenuAction.LIVE_PRICES, MenuAction.TRENDING_TOKENS],
            [MenuAction.GAS_TRACKER, MenuAction.WALLET_QUERY],
            [MenuAction.BACK_TO_MAIN],
        ],
    )
