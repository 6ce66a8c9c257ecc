from datetime import datetime

import pytest

from idea_validator.errors import IdeaNotFoundError, UnknownStorageKeyError
from idea_validator.storage import ChatMessage, MemoryStore, SQLStore, ValidatedIdea
from idea_validator.storage.repository import IdeaRepository


def make_idea(idea_id, score=60, analysis="market growth"):
    return ValidatedIdea(
        id=idea_id,
        summary=f"Idea {idea_id}",
        market_analysis=analysis,
        score=score,
        timestamp=datetime(2025, 1, 1, 12, 0, 0),
    )


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    if request.param == "memory":
        return IdeaRepository(MemoryStore())
    return IdeaRepository(SQLStore("sqlite:///:memory:"))


def test_empty_history(repo):
    assert repo.list_ideas() == []
    assert repo.bubbles() == []


def test_add_idea_prepends(repo):
    repo.add_idea(make_idea("first"))
    repo.add_idea(make_idea("second"))

    assert [idea.id for idea in repo.list_ideas()] == ["second", "first"]


def test_history_is_capped():
    repo = IdeaRepository(MemoryStore(), history_limit=3)
    for i in range(5):
        repo.add_idea(make_idea(f"idea-{i}"))

    assert [idea.id for idea in repo.list_ideas()] == ["idea-4", "idea-3", "idea-2"]


def test_re_adding_an_idea_moves_it_to_front(repo):
    repo.add_idea(make_idea("a"))
    repo.add_idea(make_idea("b"))
    repo.add_idea(make_idea("a", score=90))

    ideas = repo.list_ideas()
    assert [idea.id for idea in ideas] == ["a", "b"]
    assert ideas[0].score == 90


def test_get_and_delete_idea(repo):
    repo.add_idea(make_idea("a"))

    assert repo.get_idea("a").summary == "Idea a"
    assert repo.delete_idea("a") is True
    assert repo.delete_idea("a") is False

    with pytest.raises(IdeaNotFoundError):
        repo.get_idea("a")


def test_bubbles_follow_history_order(repo):
    repo.add_idea(make_idea("old", score=20))
    repo.add_idea(make_idea("new", score=80))

    bubbles = repo.bubbles()

    assert [b.id for b in bubbles] == ["new", "old"]
    assert bubbles[0].entry_difficulty == 20
    assert bubbles[1].entry_difficulty == 80


def test_bubbles_are_recomputed_after_changes(repo):
    repo.add_idea(make_idea("a"))
    assert len(repo.bubbles()) == 1

    repo.add_idea(make_idea("b"))
    assert len(repo.bubbles()) == 2


def test_loads_browser_format_single_object():
    store = MemoryStore(
        {
            "validated_ideas": {
                "summary": "Legacy",
                "marketAnalysis": "crowded market",
                "score": 45,
                "timestamp": "2025-01-01T10:00:00.000Z",
            }
        }
    )
    repo = IdeaRepository(store)

    ideas = repo.list_ideas()

    assert len(ideas) == 1
    assert ideas[0].market_analysis == "crowded market"
    # Generated id is persisted so it stays stable
    assert repo.list_ideas()[0].id == ideas[0].id
    assert store.get("validated_ideas")[0]["id"] == ideas[0].id


def test_skips_invalid_stored_entries():
    store = MemoryStore({"validated_ideas": [{"id": "ok", "score": 10}, "garbage", {"score": "x"}]})
    repo = IdeaRepository(store)

    assert [idea.id for idea in repo.list_ideas()] == ["ok"]


def test_stored_ideas_use_camel_case_keys(repo):
    repo.add_idea(make_idea("a"))

    stored = repo.store.get("validated_ideas")[0]

    assert stored["marketAnalysis"] == "market growth"
    assert "market_analysis" not in stored


def test_chat_history(repo):
    repo.append_chat(ChatMessage(role="user", content="Who are the main competitors?"))
    repo.append_chat(
        ChatMessage(
            role="assistant",
            content="Acme and Globex",
            sources=[{"id": 1, "url": "https://example.test", "title": "Source 1"}],
        )
    )

    history = repo.chat_history()

    assert [m.role for m in history] == ["user", "assistant"]
    assert history[1].sources[0].url == "https://example.test"

    repo.clear_chat()
    assert repo.chat_history() == []


def test_api_keys(repo):
    assert repo.get_api_key("perplexity") is None

    repo.set_api_key("perplexity", "pplx-1")
    repo.set_api_key("anthropic", "sk-ant-1")

    assert repo.get_api_key("perplexity") == "pplx-1"
    assert repo.store.get("anthropic_api_key") == "sk-ant-1"


def test_unknown_provider_is_rejected(repo):
    with pytest.raises(UnknownStorageKeyError):
        repo.set_api_key("openai", "sk-1")


def test_login_accepts_any_credentials(repo):
    assert repo.is_authenticated() is False

    assert repo.login("someone@example.test", "wrong") is True
    assert repo.is_authenticated() is True

    repo.logout()
    assert repo.is_authenticated() is False


def test_reports(repo):
    repo.save_report("tam_calculator", {"tam": "12B"})

    assert repo.get_report("tam_calculator") == {"tam": "12B"}
    assert repo.get_report("trend_radar") is None

    with pytest.raises(ValueError):
        repo.save_report("unknown_tool", {})


def test_reset_clears_everything(repo):
    repo.add_idea(make_idea("a"))
    repo.set_api_key("perplexity", "pplx-1")

    repo.reset()

    assert repo.list_ideas() == []
    assert repo.get_api_key("perplexity") is None


def test_dashboard_stats_empty(repo):
    assert repo.dashboard_stats() == {"total_ideas": 0, "average_score": 0, "unicorns": 0}


def test_dashboard_average_rounds_half_up(repo):
    repo.add_idea(make_idea("a", score=70))
    repo.add_idea(make_idea("b", score=71))

    stats = repo.dashboard_stats()

    assert stats["total_ideas"] == 2
    assert stats["average_score"] == 71


@pytest.mark.parametrize("score,expected", [(89, 0), (90, 1), (100, 1)])
def test_unicorns_start_at_90(repo, score, expected):
    repo.add_idea(make_idea("a", score=score))
    repo.add_idea(make_idea("b", score=40))

    assert repo.dashboard_stats()["unicorns"] == expected
