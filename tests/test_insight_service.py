from datetime import date

import pytest

from tafa.services.insight_service import (
    FALLBACK_INSIGHTS,
    FALLBACK_WEEKLY_SUMMARY,
    PLACEHOLDER_REPORT_ACHIEVEMENTS,
    QUERY_FALLBACK,
    VOICE_FALLBACK,
    InsightGateway,
    build_query_prompt,
    filter_suggestions,
    match_voice_command,
    week_bounds,
)
from tafa.services.llm_gateway import LLMGateway
from tests.conftest import FakeProvider

HABITS = [
    {"id": "1", "name": "Run", "category": "Health & Fitness", "streak": 4, "completed": True},
    {"id": "2", "name": "Read", "category": "Learning", "streak": 9, "completed": False},
]
GOALS = [
    {"id": "g1", "title": "Marathon", "progress": 100, "status": "completed"},
    {"id": "g2", "title": "Spanish", "progress": 30, "status": "active"},
]


def _gateway(**kw):
    return InsightGateway(LLMGateway(FakeProvider(**kw)))


@pytest.mark.asyncio
async def test_insights_success_is_single_recommendation():
    result = await _gateway(text="You run best on Mondays.").generate_insights(HABITS, GOALS)
    assert result["fallback"] is False
    assert len(result["insights"]) == 1
    insight = result["insights"][0]
    assert insight["title"] == "AI Analysis Complete"
    assert insight["type"] == "recommendation"
    assert insight["priority"] == "medium"
    assert insight["content"] == "You run best on Mondays."


@pytest.mark.asyncio
async def test_insights_failure_returns_three_fallbacks():
    result = await _gateway(error="quota exceeded").generate_insights(HABITS, GOALS)
    assert result["fallback"] is True
    assert [i["title"] for i in result["insights"]] == [i["title"] for i in FALLBACK_INSIGHTS]


@pytest.mark.asyncio
async def test_provider_exception_and_missing_provider_fall_back():
    assert (await _gateway(raises=True).generate_insights([], []))["fallback"] is True
    gateway = InsightGateway(LLMGateway(provider=None))
    assert (await gateway.query("how am I doing?", [], []))["response"] == QUERY_FALLBACK


@pytest.mark.asyncio
async def test_empty_model_text_counts_as_failure():
    result = await _gateway(text="").query("anything", [], [])
    assert result == {"response": QUERY_FALLBACK, "fallback": True}


@pytest.mark.asyncio
async def test_query_caps_reply_at_300_tokens():
    provider = FakeProvider(text="Keep going!")
    result = await InsightGateway(LLMGateway(provider)).query("streaks?", HABITS, GOALS)
    assert result["response"] == "Keep going!"
    assert provider.calls[0]["max_tokens"] == 300


def test_query_prompt_renders_history():
    prompt = build_query_prompt("and goals?", [], [], [
        {"type": "user", "content": "How are my habits?"},
        {"type": "ai", "content": "Pretty good."},
    ])
    assert "User: How are my habits?" in prompt
    assert "AI: Pretty good." in prompt


def test_week_bounds_start_on_sunday():
    start, end = week_bounds(date(2026, 10, 21))
    assert start.date() == date(2026, 10, 18)
    assert end.date() == date(2026, 10, 24)
    start, _ = week_bounds(date(2026, 10, 18))
    assert start.date() == date(2026, 10, 18)


@pytest.mark.asyncio
async def test_weekly_report_placeholders_and_fallback():
    ok = await _gateway(text="Solid week.").weekly_report(HABITS, GOALS, today=date(2026, 10, 21))
    assert ok["report"]["summary"] == "Solid week."
    assert ok["report"]["achievements"] == PLACEHOLDER_REPORT_ACHIEVEMENTS
    assert ok["placeholderLists"] is True
    assert ok["report"]["weekStart"].startswith("2026-10-18")

    failed = await _gateway(error="boom").weekly_report(HABITS, GOALS)
    assert failed["fallback"] is True
    assert failed["report"]["summary"] == FALLBACK_WEEKLY_SUMMARY
    assert len(failed["report"]["recommendations"]) == 3


@pytest.mark.asyncio
async def test_smart_suggestions_return_catalog_with_narrative():
    result = await _gateway(text="Try stretching.").smart_suggestions(HABITS, GOALS)
    assert len(result["suggestions"]) == 5
    assert result["narrative"] == "Try stretching."

    failed = await _gateway(error="down").smart_suggestions(HABITS, GOALS, category="health")
    assert [s["title"] for s in failed["suggestions"]] == ["Morning Energy Boost"]
    assert failed["narrative"] is None


def test_filter_suggestions_by_difficulty():
    assert [s.title for s in filter_suggestions(difficulty="medium")] == ["Learning Sprint", "Digital Detox Hour"]
    assert len(filter_suggestions("all", "all")) == 5


def test_voice_command_matching():
    assert match_voice_command("Please GO TO HABITS now")["action"] == "navigate:habits"
    assert match_voice_command("go to ai insights")["action"] == "navigate:insights"
    assert match_voice_command("sing me a song") is None


@pytest.mark.asyncio
async def test_voice_progress_answers_locally():
    provider = FakeProvider()
    result = await InsightGateway(LLMGateway(provider)).voice_command("what's my progress", HABITS, GOALS)
    assert result["source"] == "local"
    assert result["response"] == (
        "Your progress: 1 out of 2 habits completed today, and 1 out of 2 goals completed."
    )
    assert provider.calls == []


@pytest.mark.asyncio
async def test_voice_streaks_answers_locally():
    result = await _gateway().voice_command("show my streaks", HABITS, GOALS)
    assert result["response"] == "Your longest current streak is 9 days. Keep up the great work!"
    empty = await _gateway().voice_command("show my streaks", [], [])
    assert "0 days" in empty["response"]


@pytest.mark.asyncio
async def test_voice_streaks_tolerate_malformed_snapshot():
    habits = [{"streak": "5"}, {"streak": 3}, {"streak": "n/a"}, {"streak": None}, {}]
    result = await _gateway().voice_command("show my streaks", habits, [])
    assert result["response"] == "Your longest current streak is 5 days. Keep up the great work!"


@pytest.mark.asyncio
async def test_unmatched_voice_command_asks_model():
    result = await _gateway(text="Sure, let's plan your evening.").voice_command("plan my evening", [], [])
    assert result == {"response": "Sure, let's plan your evening.", "action": None, "source": "model"}

    failed = await _gateway(error="down").voice_command("plan my evening", [], [])
    assert failed["response"] == VOICE_FALLBACK


def test_text_to_speech_acknowledges():
    result = InsightGateway.text_to_speech("hello")
    assert result["success"] is True
    assert result["text"] == "hello"
