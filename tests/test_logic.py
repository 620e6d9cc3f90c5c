"""Tests for reply building in the assistant logic."""

from __future__ import annotations

from pathlib import Path

import pytest

from routerbot.api import GasPrices, NFTHoldings, NFTItem, PriceQuote, TokenBalance, Web3Client, Web3RequestError
from routerbot.config.settings import Settings
from routerbot.db import AnalyticsRecorder, UserInfo
from routerbot.logic import SUPPORT_NOTE, AssistantLogic, format_large_number
from routerbot.nlp import Action, IntentClassifier, KnowledgeStore, Priority
from routerbot.storage import FAQRepository, PersistenceError

USER = UserInfo(id=42, username="alice", first_name="Alice", last_name="Doe")


@pytest.fixture
def client(mocker):
    return mocker.AsyncMock(spec=Web3Client)


@pytest.fixture
def analytics(mocker):
    return mocker.AsyncMock(spec=AnalyticsRecorder)


@pytest.fixture
def logic(settings: Settings, classifier: IntentClassifier, store: KnowledgeStore, client, analytics) -> AssistantLogic:
    return AssistantLogic(settings, classifier, store, client, analytics)


def test_format_large_number() -> None:
    assert format_large_number(3.0e11) == "300.00B"
    assert format_large_number(1_500) == "1.50K"
    assert format_large_number(12.345) == "12.35"
    assert format_large_number(None) == "n/a"


@pytest.mark.asyncio
async def test_price_message(logic: AssistantLogic, client, analytics) -> None:
    client.get_price.return_value = PriceQuote(
        symbol="ETH",
        coin_id="ethereum",
        price=2500.0,
        change_24h=2.5,
        market_cap=3.0e11,
        volume_24h=1.2e10,
    )

    reply = await logic.handle_text("ETH price", USER)

    client.get_price.assert_awaited_once_with("eth")
    assert reply.decision.action is Action.PRICE
    assert reply.text.splitlines() == [
        "ETH: $2,500.00 (+2.50%)",
        "Market cap: $300.00B",
        "24h volume: $12.00B",
    ]
    assert reply.forward_text is None
    analytics.log_web3_query.assert_awaited_once()
    assert analytics.log_web3_query.await_args.args[:4] == (42, "price", "eth", True)
    analytics.log_interaction.assert_awaited_once()


@pytest.mark.asyncio
async def test_price_failure_is_reported(logic: AssistantLogic, client) -> None:
    client.get_price.side_effect = Web3RequestError("Token ZZZ not found.", status_code=404)

    text = await logic.price_reply("$zzz", USER)

    assert text == "Sorry, I couldn't fetch the price for ZZZ. Token ZZZ not found."


@pytest.mark.asyncio
async def test_price_without_symbol(logic: AssistantLogic, client) -> None:
    assert "/price ETH" in await logic.price_reply("  ")
    client.get_price.assert_not_awaited()


@pytest.mark.asyncio
async def test_urgent_message_is_forwarded(logic: AssistantLogic) -> None:
    reply = await logic.handle_text("Urgent! Our server is down, call +44 7911123456", USER)

    assert reply.decision.action is Action.FORWARD
    assert reply.forward_reason == "urgent_request"
    assert reply.priority is Priority.HIGH
    assert "urgent request" in reply.text
    summary = reply.forward_text.splitlines()
    assert summary[0] == "🚨 URGENT REQUEST"
    assert "👤 From: Alice Doe" in summary
    assert "📱 Username: @alice" in summary
    assert "Priority: HIGH" in summary
    assert "🔥 URGENT MESSAGE" in summary
    assert "📞 Phone numbers: +44 7911123456" in summary


@pytest.mark.asyncio
async def test_faq_answer_mentions_projects(logic: AssistantLogic, analytics) -> None:
    reply = await logic.handle_text("What is DeFi?", USER)

    assert reply.decision.action is Action.ANSWER
    assert reply.text.endswith("Referenced projects: Uniswap, Aave")
    assert reply.forward_text is None
    analytics.log_faq_query.assert_awaited_once_with(
        42,
        "What is DeFi?",
        "defi_explanation",
        "direct",
        1.0,
        "Uniswap, Aave",
    )


@pytest.mark.asyncio
async def test_unknown_message_gets_fallback(logic: AssistantLogic, analytics) -> None:
    reply = await logic.handle_text("xyz123 unrelated", USER)

    assert reply.text in ("Sorry, I did not get that.", "Could you rephrase?")
    assert reply.forward_text is None
    analytics.log_faq_query.assert_awaited_once_with(42, "xyz123 unrelated", None, "fallback", 0.0)


@pytest.mark.asyncio
async def test_problem_report_fallback_is_escalated(logic: AssistantLogic) -> None:
    reply = await logic.handle_text("help error broken failed crash bug", USER)

    assert reply.text.endswith(SUPPORT_NOTE)
    assert reply.forward_reason == "support_request"
    assert reply.priority is Priority.MEDIUM
    assert "Priority: MEDIUM" in reply.forward_text


@pytest.mark.asyncio
async def test_gas_reply_marks_estimates(logic: AssistantLogic, client) -> None:
    client.get_gas_prices.return_value = GasPrices(safe=20, standard=25, fast=30, fastest=35, estimated=True)

    text = await logic.gas_reply(USER)

    assert text.startswith("Ethereum Gas Prices (Gwei) - Estimated")
    assert "• Standard: 25" in text


@pytest.mark.asyncio
async def test_trending_failure(logic: AssistantLogic, client) -> None:
    client.get_trending.side_effect = Web3RequestError("Rate limit exceeded. Please try again later.", 429)

    text = await logic.trending_reply(USER)

    assert text.startswith("Sorry, I couldn't fetch trending tokens.")


@pytest.mark.asyncio
async def test_add_faq_usage(logic: AssistantLogic) -> None:
    assert await logic.add_faq("no separator here", USER) == "Usage: /addfaq <question> | <answer>"
    assert await logic.add_faq("Question | ", USER) == "Answer cannot be empty."


@pytest.mark.asyncio
async def test_add_faq_persists_and_logs(
    tmp_path: Path,
    settings: Settings,
    classifier: IntentClassifier,
    client,
    analytics,
) -> None:
    repository = FAQRepository(tmp_path / "faq.json", seed=None)
    store = KnowledgeStore(repository=repository)
    logic = AssistantLogic(settings, classifier, store, client, analytics)

    text = await logic.add_faq("What is a DAO? | A member-run organisation.", USER)

    assert text.startswith("FAQ added successfully:")
    assert "Q: What is a DAO?" in text
    assert (await repository.load()).faqs[0].question == "What is a DAO?"
    assert analytics.log_admin_action.await_args.args[:2] == (42, "add_faq")


@pytest.mark.asyncio
async def test_add_faq_reports_save_failure(
    mocker,
    settings: Settings,
    classifier: IntentClassifier,
    client,
    analytics,
) -> None:
    repository = mocker.Mock(spec=FAQRepository)
    repository.save = mocker.AsyncMock(side_effect=PersistenceError("read-only"))
    store = KnowledgeStore(repository=repository)
    logic = AssistantLogic(settings, classifier, store, client, analytics)

    text = await logic.add_faq("What is a DAO? | A member-run organisation.", USER)

    assert text.startswith("FAQ added for this session")
    assert store.list_all() == ["What is a DAO?"]
    analytics.log_admin_action.assert_awaited_once_with(
        42,
        "add_faq",
        {"question": "What is a DAO?", "persisted": False},
    )


def test_search_reply(logic: AssistantLogic) -> None:
    assert logic.search_reply("wallet").startswith("Found 1 FAQ(s) for 'wallet'")
    assert logic.search_reply("secure crypto storage").startswith("Closest FAQ (")
    assert logic.search_reply("qqq").startswith("No matching FAQ found")
    assert "/searchfaq" in logic.search_reply("")


def test_list_reply(logic: AssistantLogic) -> None:
    text = logic.list_reply()

    assert text.startswith("Available FAQs (2):")
    assert "1. What is DeFi? (Uniswap, Aave)" in text
    assert "2. How do I secure my crypto wallet?" in text


@pytest.mark.asyncio
async def test_nfts_reply_lists_first_five(logic: AssistantLogic, client) -> None:
    client.get_nfts.return_value = NFTHoldings(
        address="0xabc",
        nfts=[NFTItem(name=f"Ape {index}", token_id=str(index), contract_address="0x1") for index in range(7)],
    )

    text = await logic.nfts_reply("0xabc", USER)

    lines = text.splitlines()
    assert lines[0] == "NFT Holdings: 7 NFTs"
    assert "• Ape 4 (ID: 4)" in lines
    assert "• Ape 5 (ID: 5)" not in lines
    assert lines[-1] == "... and more"


@pytest.mark.asyncio
async def test_nfts_reply_demo(logic: AssistantLogic, client) -> None:
    client.get_nfts.return_value = NFTHoldings(address="0xabc", demo=True)

    text = await logic.nfts_reply("0xabc", USER)

    assert text.startswith("NFT Holdings: 0 NFTs")
    assert "demo response" in text


@pytest.mark.asyncio
async def test_nfts_reply_requires_address(logic: AssistantLogic, client) -> None:
    assert "/nfts 0x123" in await logic.nfts_reply(" ")
    client.get_nfts.assert_not_awaited()


@pytest.mark.asyncio
async def test_tokens_reply(logic: AssistantLogic, client) -> None:
    client.get_token_balances.return_value = [
        TokenBalance(token_address="0x1", name="USD Coin", symbol="USDC", balance=2.5),
    ]

    text = await logic.tokens_reply("0xabc", USER)

    assert text == "ERC-20 balances for 0xabc:\n\n• USDC: 2.500000 (USD Coin)"


@pytest.mark.asyncio
async def test_tokens_reply_failure(logic: AssistantLogic, client) -> None:
    client.get_token_balances.side_effect = Web3RequestError("Wallet queries are disabled on this bot.")

    text = await logic.tokens_reply("0xabc", USER)

    assert text == "Sorry, I couldn't fetch token balances. Wallet queries are disabled on this bot."


@pytest.mark.parametrize("name", ["uniswap", "AAVE", "layerzero", "ethena", "sushi"])
def test_project_reply(logic: AssistantLogic, name: str) -> None:
    text = logic.project_reply(name)

    assert "Pashov Audit Group" in text
    assert "TVL: $" in text


def test_project_reply_unknown(logic: AssistantLogic) -> None:
    assert logic.project_reply("compound") == "Project not found in our audited portfolio."
