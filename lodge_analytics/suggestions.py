"""Follow-up question suggestions for the analytics chat assistant.

Usage:
    engine = SuggestionEngine(rng=random.Random(7))
    engine.get_suggestions_by_response("Occupancy is at 82% this week")
    # -> [{"text": "..."}, ...]  (4 items)
"""

import logging
import random
from collections import deque

logger = logging.getLogger(__name__)

SUGGESTION_COUNT = 4
BASE_QUESTION_COUNT = 2
DIVERSE_QUESTION_COUNT = 2
RECENT_TOPIC_LIMIT = 3

DEFAULT_TOPIC = "default"
DEFAULT_QUESTION = "Show me business performance overview"

TOPIC_QUESTIONS = {
    "analytics": [
        "Show me our key performance indicators",
        "What is our current revenue growth rate?",
        "Compare this month's performance with last month",
        "What are our top performing room types?",
    ],
    "revenue": [
        "What is our monthly revenue trend?",
        "Which room type generates the most revenue?",
        "Show me revenue per available room (RevPAR)",
        "What is our average daily rate (ADR)?",
    ],
    "occupancy": [
        "What is our current occupancy rate?",
        "Show me occupancy trends by room type",
        "Which days have the highest occupancy?",
        "Predict next month's occupancy rate",
    ],
    "bookings": [
        "What is our booking pace?",
        "Show me booking patterns by season",
        "What is our cancellation rate?",
        "Which channels drive most bookings?",
    ],
    "customers": [
        "What is our customer retention rate?",
        "Show me guest satisfaction metrics",
        "What is our repeat booking rate?",
        "Which customer segments are most profitable?",
    ],
    "predictions": [
        "What is the occupancy forecast for next month?",
        "Forecast our revenue for next quarter",
        "Which upcoming months will see peak demand?",
        "How confident is the current forecast?",
    ],
    "operational": [
        "How efficient are our daily operations?",
        "What is our cost per available room?",
        "How many rooms are under maintenance?",
        "Where can we reduce operating costs?",
    ],
    "comparison": [
        "Compare this month with the same month last year",
        "How do we compare to the market average?",
        "Compare room types by RevPAR",
        "How does this quarter compare to last quarter?",
    ],
    "off-topic": [
        "What hotel metrics can you analyze?",
        "Give me a summary of today's operations",
        "Which report should I look at first?",
        "How are we performing this week?",
    ],
    "default": [
        DEFAULT_QUESTION,
        "What are our current market trends?",
        "Identify areas for improvement",
        "Compare performance with targets",
    ],
}

# Complementary topics to steer the conversation somewhere new
DIVERSE_CONTEXTS = {
    "analytics": ["revenue", "predictions"],
    "revenue": ["occupancy", "comparison"],
    "occupancy": ["bookings", "predictions"],
    "bookings": ["customers", "revenue"],
    "customers": ["bookings", "analytics"],
    "predictions": ["occupancy", "revenue"],
    "operational": ["analytics", "occupancy"],
    "comparison": ["analytics", "revenue"],
    "off-topic": ["analytics", "occupancy"],
    "default": ["analytics", "revenue"],
}

EXPLORABLE_TOPICS = [t for t in TOPIC_QUESTIONS if t not in (DEFAULT_TOPIC, "off-topic")]

TOPIC_ALIASES = {
    "booking": "bookings",
    "customer": "customers",
    "prediction": "predictions",
    "operations": "operational",
    "off_topic": "off-topic",
    "offtopic": "off-topic",
}

# Checked in this order before the keyword table; first match wins.
OFF_TOPIC_PHRASES = (
    "only assist with hotel",
    "only help with hotel",
    "hotel management related",
    "not related to hotel",
    "outside my scope",
    "off-topic",
)
PREDICTION_KEYWORDS = ("forecast", "predict", "projection", "projected",
                       "next month", "next quarter", "next year")
COMPARISON_KEYWORDS = ("compare", "comparison", "versus", " vs ", "vs.",
                       "last year", "benchmark")
OPERATIONAL_KEYWORDS = ("operation", "efficiency", "staff", "housekeeping",
                        "maintenance", "cost")

TOPIC_KEYWORDS = {
    "analytics": ["performance", "kpi", "metrics", "growth", "trend"],
    "revenue": ["revenue", "earnings", "revpar", "adr", "sales"],
    "occupancy": ["occupancy", "vacant", "filled", "capacity"],
    "bookings": ["booking", "reservation", "cancellation", "pace"],
    "customers": ["customer", "guest", "satisfaction", "retention"],
}


class RecentTopicWindow:
    """Recently used topics in first-use order, bounded to `capacity`.

    Re-recording a topic already in the window leaves its position alone.
    """

    def __init__(self, capacity: int = RECENT_TOPIC_LIMIT):
        self.capacity = capacity
        self._topics = deque()

    def record(self, topic: str):
        if topic in self._topics:
            return
        self._topics.append(topic)
        while len(self._topics) > self.capacity:
            self._topics.popleft()

    def topics(self) -> list[str]:
        return list(self._topics)

    def __contains__(self, topic) -> bool:
        return topic in self._topics

    def __len__(self) -> int:
        return len(self._topics)


class SuggestionEngine:
    """Classify assistant responses and sample diverse follow-up questions."""

    def __init__(self, rng: random.Random = None, window_size: int = RECENT_TOPIC_LIMIT):
        self.rng = rng or random.Random()
        self.recent_topics = RecentTopicWindow(window_size)

    @staticmethod
    def normalize_topic(topic) -> str:
        key = str(topic or "").strip().lower()
        key = TOPIC_ALIASES.get(key, key)
        return key if key in TOPIC_QUESTIONS else DEFAULT_TOPIC

    def classify(self, response_text: str) -> str:
        text = (response_text or "").lower()

        if any(phrase in text for phrase in OFF_TOPIC_PHRASES):
            return "off-topic"
        if any(keyword in text for keyword in PREDICTION_KEYWORDS):
            return "predictions"
        if any(keyword in text for keyword in COMPARISON_KEYWORDS):
            return "comparison"
        if any(keyword in text for keyword in OPERATIONAL_KEYWORDS):
            return "operational"

        for topic, keywords in TOPIC_KEYWORDS.items():
            if any(keyword in text for keyword in keywords):
                return topic
        return DEFAULT_TOPIC

    def _diverse_questions(self, topic: str) -> list[str]:
        picked = []
        used = {topic}

        for context in DIVERSE_CONTEXTS[topic]:
            if len(picked) >= DIVERSE_QUESTION_COUNT:
                break
            if context in used or context in self.recent_topics:
                continue
            picked.append(self.rng.choice(TOPIC_QUESTIONS[context]))
            used.add(context)

        # Back-fill from topics not explored recently
        if len(picked) < DIVERSE_QUESTION_COUNT:
            unexplored = [t for t in EXPLORABLE_TOPICS
                          if t not in used and t not in self.recent_topics]
            self.rng.shuffle(unexplored)
            for context in unexplored[:DIVERSE_QUESTION_COUNT - len(picked)]:
                picked.append(self.rng.choice(TOPIC_QUESTIONS[context]))

        return picked

    def generate(self, topic) -> list[dict]:
        """Four follow-up questions for a topic, shuffled."""
        topic = self.normalize_topic(topic)
        self.recent_topics.record(topic)

        questions = TOPIC_QUESTIONS[topic]
        pool = questions[:BASE_QUESTION_COUNT]
        diverse = self._diverse_questions(topic)
        pool += diverse

        if not diverse and DEFAULT_QUESTION not in pool:
            pool.append(DEFAULT_QUESTION)

        for question in questions[BASE_QUESTION_COUNT:]:
            if len(pool) >= SUGGESTION_COUNT:
                break
            if question not in pool:
                pool.append(question)

        self.rng.shuffle(pool)
        logger.debug(f"Suggestions for '{topic}' (recent: {self.recent_topics.topics()})")
        return [{"text": question} for question in pool[:SUGGESTION_COUNT]]

    def generate_suggestions(self, topic) -> list[dict]:
        return self.generate(topic)

    def get_suggestions_by_response(self, response_text: str) -> list[dict]:
        return self.generate(self.classify(response_text))


_default_engine = SuggestionEngine()


def generate_suggestions(topic) -> list[dict]:
    return _default_engine.generate(topic)


def get_suggestions_by_response(response_text: str) -> list[dict]:
    return _default_engine.get_suggestions_by_response(response_text)
