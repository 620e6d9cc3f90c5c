"""Tests for the FAQ knowledge store."""

from __future__ import annotations

import random

import pytest

from routerbot.nlp.knowledge import DEFAULT_FALLBACK, FAQEntry, KnowledgeStore, MatchType, ValidationError
from routerbot.storage import FAQRepository, PersistenceError

FRUITS = ["apple", "banana", "cherry", "grape", "lemon", "mango", "melon", "olive", "peach", "plum"]


def test_direct_match_wins_over_keyword_overlap() -> None:
    store = KnowledgeStore(
        [
            FAQEntry(id="first", question="Wallet tips", answer="a", keywords=["secure", "wallet"]),
            FAQEntry(id="second", question="How do I secure my wallet?", answer="b", keywords=["unrelated"]),
        ],
    )

    result = store.find_best_match("how do I secure my WALLET")

    assert result.entry.id == "second"
    assert result.match_type is MatchType.DIRECT
    assert result.confidence == 1.0


def test_keyword_match_at_threshold() -> None:
    store = KnowledgeStore([FAQEntry(id="fruit", question="Fruit basket", answer="a", keywords=FRUITS)])

    result = store.find_best_match(" ".join(FRUITS[:9]))

    assert result.match_type is MatchType.KEYWORD
    assert result.confidence == pytest.approx(0.9)


def test_keyword_overlap_just_below_threshold_falls_through() -> None:
    store = KnowledgeStore([FAQEntry(id="fruit", question="Fruit basket", answer="a", keywords=FRUITS[:9])])

    result = store.find_best_match(" ".join(FRUITS[:8]))

    assert result.match_type is not MatchType.KEYWORD
    assert result.entry is None


def test_fuzzy_match_tolerates_typos() -> None:
    store = KnowledgeStore(
        [
            FAQEntry(
                id="gas",
                question="What are the current gas fees on Ethereum?",
                answer="Use /gas.",
                keywords=["gas", "fees", "current", "ethereum"],
            ),
        ],
    )

    result = store.find_best_match("what are the current gas fees on ethereun")

    assert result.match_type is MatchType.FUZZY
    assert result.entry.id == "gas"
    assert result.confidence >= 0.9


def test_partial_match_uses_question_words() -> None:
    store = KnowledgeStore(
        [FAQEntry(id="wallet", question="How do I secure my crypto wallet?", answer="a", keywords=["hardware"])],
    )

    result = store.find_best_match("secure crypto storage")

    assert result.match_type is MatchType.PARTIAL
    assert result.confidence == pytest.approx(2 / 3)


def test_ties_keep_the_earliest_entry() -> None:
    store = KnowledgeStore(
        [
            FAQEntry(id="one", question="What is staking?", answer="a", keywords=["staking"]),
            FAQEntry(id="two", question="Staking rewards", answer="b", keywords=["staking"]),
        ],
    )

    assert store.find_best_match("tell me about staking").entry.id == "one"


def test_faq_scenarios(store: KnowledgeStore) -> None:
    direct = store.find_best_match("What is DeFi?")
    paraphrase = store.find_best_match("tell me about defi and decentralized finance")
    unknown = store.find_best_match("xyz123 unrelated")

    assert (direct.entry.id, direct.match_type, direct.confidence) == ("defi_explanation", MatchType.DIRECT, 1.0)
    assert paraphrase.entry.id == "defi_explanation"
    assert paraphrase.confidence >= 0.5
    assert unknown.entry is None
    assert unknown.match_type is MatchType.FALLBACK
    assert unknown.confidence == 0.0


@pytest.mark.parametrize("question", ["", "   ", "?!?"])
def test_blank_questions_fall_back(store: KnowledgeStore, question: str) -> None:
    result = store.find_best_match(question)

    assert result.entry is None
    assert result.match_type is MatchType.FALLBACK


def test_empty_keywords_never_match() -> None:
    store = KnowledgeStore([FAQEntry(id="empty", question="Something", answer="a", keywords=["", "!!"])])

    assert store.find_best_match("anything at all").entry is None


def test_fallback_response_is_seeded() -> None:
    responses = ["one", "two", "three"]
    store = KnowledgeStore(fallback_responses=responses, rng=random.Random(42))

    assert store.fallback_response() == random.Random(42).choice(responses)


def test_fallback_response_default_when_list_empty() -> None:
    assert KnowledgeStore().fallback_response() == DEFAULT_FALLBACK


@pytest.mark.asyncio
@pytest.mark.parametrize(("question", "answer"), [("", "answer"), ("  ", "answer"), ("question", ""), ("q", "   ")])
async def test_add_entry_rejects_blank_fields(question: str, answer: str) -> None:
    store = KnowledgeStore()

    with pytest.raises(ValidationError):
        await store.add_entry(question, answer)

    assert len(store) == 0


@pytest.mark.asyncio
async def test_add_entry_derives_keywords_and_persists(tmp_path) -> None:
    repository = FAQRepository(tmp_path / "faq.json", seed=tmp_path / "missing.json")
    store = KnowledgeStore(repository=repository)

    entry = await store.add_entry("  How do I revoke token approvals?  ", " Use revoke.cash. ")

    assert entry.id.startswith("faq_")
    assert entry.question == "How do I revoke token approvals?"
    assert entry.answer == "Use revoke.cash."
    assert entry.keywords == ["revoke", "token", "approvals"]
    assert store.find_best_match("How do I revoke token approvals?").entry is entry

    reloaded = await repository.load()
    assert [record.id for record in reloaded.faqs] == [entry.id]


@pytest.mark.asyncio
async def test_add_entry_keeps_explicit_keywords() -> None:
    store = KnowledgeStore()

    entry = await store.add_entry("What is a DAO?", "A member-run organisation.", [" dao ", "", "governance"])

    assert entry.keywords == ["dao", "governance"]


@pytest.mark.asyncio
async def test_add_entry_keeps_entry_when_save_fails(mocker) -> None:
    repository = mocker.Mock(spec=FAQRepository)
    repository.save = mocker.AsyncMock(side_effect=PersistenceError("disk full"))
    store = KnowledgeStore(repository=repository)

    with pytest.raises(PersistenceError):
        await store.add_entry("What is a DAO?", "A member-run organisation.")

    assert store.list_all() == ["What is a DAO?"]


def test_search_is_case_insensitive(store: KnowledgeStore) -> None:
    assert [entry.id for entry in store.search("WALLET")] == ["wallet_security"]
    assert [entry.id for entry in store.search("seed phrase")] == ["wallet_security"]
    assert store.search("") == []
    assert store.search("nothing like this") == []


def test_list_all_preserves_order(store: KnowledgeStore) -> None:
    assert store.list_all() == ["What is DeFi?", "How do I secure my crypto wallet?"]


def test_project_reference_lists_mentioned_projects(store: KnowledgeStore, defi_entry: FAQEntry) -> None:
    assert store.project_reference(defi_entry) == "Uniswap, Aave"
    assert store.project_reference(store.entries[1]) is None


@pytest.mark.asyncio
async def test_add_entry_short_question_still_gets_keywords() -> None:
    store = KnowledgeStore()

    entry = await store.add_entry("Q?", "A.")

    assert entry.keywords == ["q"]
    assert store.find_best_match("q").entry is entry
