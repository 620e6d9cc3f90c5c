"""High-level business logic for the assistant bot."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from routerbot.api import Web3Client, Web3RequestError
from routerbot.config.settings import Settings
from routerbot.db import AnalyticsRecorder, UserInfo
from routerbot.metrics.prometheus_exporter import (
    faq_entries_added_total,
    messages_classified_total,
    provider_requests_total,
)
from routerbot.nlp import (
    Action,
    Category,
    CategoryAnalysis,
    Decision,
    IntentClassifier,
    KnowledgeStore,
    Priority,
    ValidationError,
)
from routerbot.nlp.categories import extract_contacts
from routerbot.projects import get_project
from routerbot.storage import PersistenceError

logger = logging.getLogger(__name__)

GENERIC_ERROR = "I encountered an error processing your request. Please try again or contact support."

CONFIRMATIONS = {
    Category.URGENT: (
        "Your urgent request has been passed to our team. Someone will get back to you shortly; "
        "feel free to add any details here."
    ),
    Category.MEDIA: "Media inquiry received. Our team will review your request and respond promptly.",
    Category.AUDIT: (
        "Audit request forwarded to our security team. Please share project details "
        "(repository, scope, timeline) for a comprehensive review."
    ),
}
SUPPORT_NOTE = "It sounds like something is wrong, so I've also notified our support team."


@dataclass(slots=True)
class Reply:
    """What the transport should send back, and optionally forward."""

    text: str
    decision: Decision | None = None
    forward_text: str | None = None
    forward_reason: str | None = None
    priority: Priority = Priority.NORMAL


def format_large_number(value: float | None) -> str:
    if value is None:
        return "n/a"
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if abs(value) >= threshold:
            return f"{value / threshold:.2f}{suffix}"
    return f"{value:.2f}"


class AssistantLogic:
    """Turns classifier decisions and provider data into replies."""

    def __init__(
        self,
        settings: Settings,
        classifier: IntentClassifier,
        store: KnowledgeStore,
        client: Web3Client,
        analytics: AnalyticsRecorder | None = None,
    ) -> None:
        self._settings = settings
        self._classifier = classifier
        self._store = store
        self._client = client
        self._analytics = analytics

    async def handle_text(self, text: str, user: UserInfo) -> Reply:
        """Classify a free-text message and build the reply for it."""

        decision = self._classifier.classify(text)
        messages_classified_total.labels(decision.action.value).inc()

        if decision.action is Action.PRICE:
            reply = Reply(text=await self.price_reply(decision.symbol or "", user), decision=decision)
        elif decision.action is Action.FORWARD:
            reply = self._forward_reply(decision, user)
        elif decision.action is Action.ANSWER:
            reply = await self._answer_reply(decision, user)
        else:
            reply = await self._fallback_reply(decision, user)

        if self._analytics is not None:
            confidence = decision.match.confidence if decision.match else None
            await self._analytics.log_interaction(user, "text_message", text, decision.action.value, confidence)
        return reply

    def _forward_reply(self, decision: Decision, user: UserInfo) -> Reply:
        analysis = decision.analysis
        category = analysis.primary
        reason = f"{category.value}_request"
        return Reply(
            text=CONFIRMATIONS.get(category, CONFIRMATIONS[Category.URGENT]),
            decision=decision,
            forward_text=self.build_forward_summary(decision.text, user, analysis, reason),
            forward_reason=reason,
            priority=analysis.priority,
        )

    async def _answer_reply(self, decision: Decision, user: UserInfo) -> Reply:
        match = decision.match
        entry = match.entry
        reference = self._store.project_reference(entry)
        text = entry.answer
        if reference:
            text = f"{text}\n\nReferenced projects: {reference}"
        logger.info(
            "FAQ match for user %s: %s (%s, %.2f)",
            user.id,
            entry.id,
            match.match_type.value,
            match.confidence,
        )
        if self._analytics is not None:
            await self._analytics.log_faq_query(
                user.id,
                decision.text,
                entry.id,
                match.match_type.value,
                match.confidence,
                reference,
            )
        return Reply(text=text, decision=decision)

    async def _fallback_reply(self, decision: Decision, user: UserInfo) -> Reply:
        logger.info("No FAQ match for user %s", user.id)
        if self._analytics is not None:
            await self._analytics.log_faq_query(user.id, decision.text, None, "fallback", 0.0)
        if not decision.should_forward:
            return Reply(text=decision.response or self._store.fallback_response(), decision=decision)
        reason = "support_request"
        return Reply(
            text=f"{decision.response}\n\n{SUPPORT_NOTE}",
            decision=decision,
            forward_text=self.build_forward_summary(decision.text, user, decision.analysis, reason),
            forward_reason=reason,
            priority=decision.priority,
        )

    def build_forward_summary(
        self,
        text: str,
        user: UserInfo,
        analysis: CategoryAnalysis | None,
        reason: str,
    ) -> str:
        """Summary posted to the action group for an escalated message."""

        username = f"@{user.username}" if user.username else "Not set"
        lines = [
            f"🚨 {reason.replace('_', ' ').upper()}",
            f"👤 From: {user.display_name}",
            f"🆔 User ID: {user.id}",
            f"📱 Username: {username}",
            f"⏰ Time: {datetime.now(timezone.utc):%Y-%m-%d %H:%M UTC}",
        ]
        if analysis is not None:
            if analysis.priority is not Priority.NORMAL:
                lines.append(f"Priority: {analysis.priority.value.upper()}")
            if analysis.has(Category.URGENT):
                lines.append("🔥 URGENT MESSAGE")
            if analysis.has(Category.MEDIA):
                lines.append("📺 Media request")
            if analysis.has(Category.AUDIT):
                lines.append("📊 Audit request")
        lines.extend(["", "📝 Message:", text])

        contacts = extract_contacts(text)
        if contacts.phone_numbers:
            lines.append(f"📞 Phone numbers: {', '.join(contacts.phone_numbers)}")
        if contacts.emails:
            lines.append(f"📧 Emails: {', '.join(contacts.emails)}")
        if contacts.handles:
            lines.append(f"💬 Handles: {', '.join(contacts.handles)}")
        return "\n".join(lines)

    async def _timed(
        self,
        kind: str,
        params: str | None,
        user: UserInfo | None,
        call: Callable[[], Awaitable[Any]],
    ) -> Any:
        started = time.perf_counter()
        success = False
        try:
            result = await call()
            success = True
            return result
        finally:
            provider_requests_total.labels(kind, "ok" if success else "error").inc()
            if self._analytics is not None and user is not None:
                elapsed = int((time.perf_counter() - started) * 1000)
                await self._analytics.log_web3_query(user.id, kind, params, success, elapsed)

    async def price_reply(self, symbol: str, user: UserInfo | None = None) -> str:
        symbol = symbol.strip().lstrip("$")
        if not symbol:
            return "Please provide a token symbol (e.g., /price ETH)."
        try:
            quote = await self._timed("price", symbol, user, lambda: self._client.get_price(symbol))
        except Web3RequestError as exc:
            logger.error("Price lookup for %s failed: %s", symbol, exc)
            return f"Sorry, I couldn't fetch the price for {symbol.upper()}. {exc}"

        lines = [f"{quote.symbol}: ${quote.price:,.2f}"]
        if quote.change_24h is not None:
            sign = "+" if quote.change_24h >= 0 else ""
            lines[0] += f" ({sign}{quote.change_24h:.2f}%)"
        if quote.market_cap is not None:
            lines.append(f"Market cap: ${format_large_number(quote.market_cap)}")
        if quote.volume_24h is not None:
            lines.append(f"24h volume: ${format_large_number(quote.volume_24h)}")
        return "\n".join(lines)

    async def trending_reply(self, user: UserInfo | None = None) -> str:
        try:
            tokens = await self._timed("trending", None, user, self._client.get_trending)
        except Web3RequestError as exc:
            logger.error("Trending lookup failed: %s", exc)
            return f"Sorry, I couldn't fetch trending tokens. {exc}"
        if not tokens:
            return "No trending tokens right now."
        rows = [
            f"{index}. {token.name} ({token.symbol})"
            + (f" - Rank #{token.market_cap_rank}" if token.market_cap_rank else "")
            for index, token in enumerate(tokens, start=1)
        ]
        return "Trending on CoinGecko:\n\n" + "\n".join(rows)

    async def gas_reply(self, user: UserInfo | None = None) -> str:
        try:
            gas = await self._timed("gas", None, user, self._client.get_gas_prices)
        except Web3RequestError as exc:
            logger.error("Gas lookup failed: %s", exc)
            return f"Sorry, I couldn't fetch gas prices. {exc}"
        title = "Ethereum Gas Prices (Gwei) - Estimated" if gas.estimated else "Ethereum Gas Prices (Gwei)"
        text = (
            f"{title}:\n\n• Safe: {gas.safe:g}\n• Standard: {gas.standard:g}\n"
            f"• Fast: {gas.fast:g}\n• Fastest: {gas.fastest:g}"
        )
        if gas.estimated:
            text += "\n\nThese are estimates; live data needs an Etherscan API key."
        return text

    async def balance_reply(self, address: str, user: UserInfo | None = None) -> str:
        address = address.strip()
        if not address:
            return "Please provide a wallet address (e.g., /checkbalance 0x123...)."
        try:
            balance = await self._timed(
                "balance",
                address,
                user,
                lambda: self._client.get_wallet_balance(address),
            )
        except Web3RequestError as exc:
            logger.error("Balance lookup for %s failed: %s", address, exc)
            return f"Sorry, I couldn't fetch that wallet balance. {exc}"
        return f"ETH Balance: {balance.balance_eth:.4f} ETH\nAddress: {balance.address}"

    async def nfts_reply(self, address: str, user: UserInfo | None = None) -> str:
        address = address.strip()
        if not address:
            return "Please provide a wallet address (e.g., /nfts 0x123...)."
        try:
            holdings = await self._timed("nfts", address, user, lambda: self._client.get_nfts(address))
        except Web3RequestError as exc:
            logger.error("NFT lookup for %s failed: %s", address, exc)
            return f"Sorry, I couldn't fetch NFT holdings. {exc}"

        lines = [f"NFT Holdings: {holdings.count} NFTs"]
        if holdings.demo:
            lines.append("\nThis is a demo response; live NFT data needs a Moralis API key.")
        if holdings.nfts:
            lines.append("")
            lines.extend(f"• {nft.name} (ID: {nft.token_id})" for nft in holdings.nfts[:5])
            if holdings.count > 5:
                lines.append("... and more")
        return "\n".join(lines)

    async def tokens_reply(self, address: str, user: UserInfo | None = None) -> str:
        address = address.strip()
        if not address:
            return "Please provide a wallet address (e.g., /tokens 0x123...)."
        try:
            tokens = await self._timed("tokens", address, user, lambda: self._client.get_token_balances(address))
        except Web3RequestError as exc:
            logger.error("Token balance lookup for %s failed: %s", address, exc)
            return f"Sorry, I couldn't fetch token balances. {exc}"
        if not tokens:
            return f"No ERC-20 token balances found for {address}."
        rows = [f"• {token.symbol}: {token.balance:,.6f} ({token.name})" for token in tokens[:10]]
        return f"ERC-20 balances for {address}:\n\n" + "\n".join(rows)

    def project_reply(self, name: str) -> str:
        project = get_project(name)
        if project is None:
            return "Project not found in our audited portfolio."
        return project.format()

    async def add_faq(self, raw: str, user: UserInfo) -> str:
        """Handle ``/addfaq question | answer``."""

        if "|" not in raw:
            return "Usage: /addfaq <question> | <answer>"
        question, answer = (part.strip() for part in raw.split("|", 1))
        try:
            entry = await self._store.add_entry(question, answer)
        except ValidationError as exc:
            return str(exc)
        except PersistenceError:
            faq_entries_added_total.inc()
            if self._analytics is not None:
                await self._analytics.log_admin_action(
                    user.id,
                    "add_faq",
                    {"question": question, "persisted": False},
                )
            return (
                "FAQ added for this session, but saving it failed. "
                "It will be lost on restart unless another change is saved."
            )
        faq_entries_added_total.inc()
        if self._analytics is not None:
            await self._analytics.log_admin_action(user.id, "add_faq", {"faq_id": entry.id, "question": question})
        return f"FAQ added successfully:\n\nQ: {entry.question}\nA: {entry.answer}\nKeywords: {', '.join(entry.keywords)}"

    def list_reply(self) -> str:
        questions = self._store.list_all()
        if not questions:
            return "No FAQs yet. Use /addfaq <question> | <answer> to add one."
        rows = []
        for index, entry in enumerate(self._store.entries, start=1):
            reference = self._store.project_reference(entry)
            rows.append(f"{index}. {entry.question}" + (f" ({reference})" if reference else ""))
        return (
            f"Available FAQs ({len(questions)}):\n\n" + "\n".join(rows)
            + "\n\nUse /addfaq <question> | <answer> to add new FAQs."
        )

    def search_reply(self, term: str) -> str:
        term = term.strip()
        if not term:
            return "Please provide a search term (e.g., /searchfaq wallet)."
        results = self._store.search(term)
        if results:
            rows = [f"Q: {entry.question}\nA: {entry.answer}" for entry in results]
            return f"Found {len(results)} FAQ(s) for '{term}':\n\n" + "\n\n".join(rows)

        match = self._store.find_best_match(term)
        if match.entry is None:
            return "No matching FAQ found. Try rephrasing or use /listfaqs to see available FAQs."
        return (
            f"Closest FAQ ({match.confidence * 100:.1f}% {match.match_type.value} match):\n\n"
            f"Q: {match.entry.question}\nA: {match.entry.answer}"
        )
