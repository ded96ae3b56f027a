"""Tests for follow-up question suggestions."""

import random

import pytest

from lodge_analytics import generate_suggestions, get_suggestions_by_response
from lodge_analytics.suggestions import (
    DEFAULT_QUESTION,
    EXPLORABLE_TOPICS,
    TOPIC_QUESTIONS,
    RecentTopicWindow,
    SuggestionEngine,
)


@pytest.fixture
def engine():
    return SuggestionEngine(rng=random.Random(7))


def _texts(suggestions):
    return [s["text"] for s in suggestions]


@pytest.mark.parametrize("text,topic", [
    ("What is our RevPAR forecast for next quarter?", "predictions"),
    ("I can only assist with hotel management related questions.", "off-topic"),
    ("Occupancy is at 82% this week", "occupancy"),
    ("Revenue rose to $12,000 yesterday", "revenue"),
    ("We received 12 new reservations", "bookings"),
    ("Guest satisfaction scores are stable", "customers"),
    ("Your KPI dashboard is ready", "analytics"),
    ("Compared with last year we are ahead", "comparison"),
    ("Housekeeping staff hours went up", "operational"),
    ("Hello there", "default"),
    ("", "default"),
])
def test_classify(engine, text, topic):
    assert engine.classify(text) == topic


def test_normalize_topic():
    assert SuggestionEngine.normalize_topic("Booking") == "bookings"
    assert SuggestionEngine.normalize_topic(" REVENUE ") == "revenue"
    assert SuggestionEngine.normalize_topic("weather") == "default"
    assert SuggestionEngine.normalize_topic(None) == "default"


def test_every_topic_has_unique_questions():
    questions = [q for qs in TOPIC_QUESTIONS.values() for q in qs]
    assert len(questions) == len(set(questions))
    assert all(len(qs) >= 4 for qs in TOPIC_QUESTIONS.values())


@pytest.mark.parametrize("topic", list(TOPIC_QUESTIONS))
def test_four_distinct_suggestions(engine, topic):
    suggestions = engine.generate(topic)
    assert len(suggestions) == 4
    assert all(set(s) == {"text"} for s in suggestions)
    assert len(set(_texts(suggestions))) == 4


def test_base_questions_included(engine):
    texts = _texts(engine.generate("revenue"))
    assert set(TOPIC_QUESTIONS["revenue"][:2]) <= set(texts)


def test_diverse_questions_from_related_topics(engine):
    texts = _texts(engine.generate("revenue"))
    diverse = [t for t in texts if t not in TOPIC_QUESTIONS["revenue"]]
    assert len(diverse) == 2
    assert any(t in TOPIC_QUESTIONS["occupancy"] for t in diverse)
    assert any(t in TOPIC_QUESTIONS["comparison"] for t in diverse)


def test_recent_topics_are_avoided(engine):
    engine.generate("revenue")
    engine.generate("occupancy")
    texts = _texts(engine.generate("analytics"))

    recent = set(TOPIC_QUESTIONS["revenue"]) | set(TOPIC_QUESTIONS["occupancy"])
    assert not recent & set(texts)
    assert any(t in TOPIC_QUESTIONS["predictions"] for t in texts)


def test_default_question_when_nothing_left_to_explore():
    engine = SuggestionEngine(rng=random.Random(3), window_size=len(TOPIC_QUESTIONS))
    for topic in EXPLORABLE_TOPICS:
        engine.generate(topic)

    texts = _texts(engine.generate("off-topic"))
    assert len(texts) == 4
    assert DEFAULT_QUESTION in texts
    assert set(TOPIC_QUESTIONS["off-topic"][:2]) <= set(texts)


def test_repeated_calls_vary():
    engine = SuggestionEngine(rng=random.Random(11))
    results = {tuple(_texts(engine.generate("analytics"))) for _ in range(10)}
    assert len(results) > 1


def test_seeded_engines_agree():
    first = SuggestionEngine(rng=random.Random(5))
    second = SuggestionEngine(rng=random.Random(5))
    for topic in ("revenue", "bookings", "predictions"):
        assert first.generate(topic) == second.generate(topic)


def test_suggestions_by_response(engine):
    texts = _texts(engine.get_suggestions_by_response("Predict occupancy for next month"))
    assert set(TOPIC_QUESTIONS["predictions"][:2]) <= set(texts)
    assert engine.recent_topics.topics() == ["predictions"]


def test_module_level_helpers():
    assert len(generate_suggestions("customers")) == 4
    assert len(get_suggestions_by_response("What is the ADR?")) == 4


def test_window_evicts_oldest():
    window = RecentTopicWindow(3)
    for topic in ("revenue", "occupancy", "bookings", "customers"):
        window.record(topic)

    assert window.topics() == ["occupancy", "bookings", "customers"]
    assert "revenue" not in window
    assert len(window) == 3


def test_window_rerecord_keeps_position():
    window = RecentTopicWindow(3)
    for topic in ("revenue", "occupancy", "revenue"):
        window.record(topic)
    assert window.topics() == ["revenue", "occupancy"]


def test_window_rerecord_does_not_delay_eviction():
    window = RecentTopicWindow(3)
    for topic in ("revenue", "occupancy", "bookings", "revenue", "customers"):
        window.record(topic)
    assert window.topics() == ["occupancy", "bookings", "customers"]
