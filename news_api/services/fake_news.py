"""
Synthetic news records for seeding and load testing.
"""

import random
import uuid
from datetime import datetime, timedelta, timezone

from news_api.schemas.news import NewsCreate

HEADLINES = [
    "Parliament passes revised budget after late-night session",
    "Central bank holds interest rates steady",
    "Election turnout reaches record high in coastal districts",
    "Storm warning issued as heavy rain moves north",
    "Tech giants face new scrutiny over data practices",
    "Local team clinches title in dramatic final",
    "Researchers report breakthrough in battery storage",
    "City council approves new public transport plan",
    "Markets rally as inflation cools",
    "Health officials urge caution ahead of flu season",
    "Startup raises funding to expand renewable grid",
    "Museum reopens after two-year renovation",
    "Trade talks resume between neighbouring states",
    "Housing prices dip for third consecutive month",
    "Airport strike disrupts holiday travel",
]

SENTENCES = [
    "Officials said the decision followed weeks of negotiation.",
    "Analysts expect the impact to be felt well into next year.",
    "Critics argued the measures do not go far enough.",
    "The announcement was welcomed by industry groups.",
    "Further details are expected to be published next week.",
    "Residents gathered outside the building to hear the result.",
    "The figures were higher than most forecasts had predicted.",
    "A spokesperson declined to comment on the timeline.",
    "Several committees will review the proposal before a final vote.",
    "Observers described the atmosphere as tense but orderly.",
]

FIRST_NAMES = ["Anna", "Ben", "Chloe", "David", "Elena", "Farid", "Grace", "Hugo", "Ines", "Jonas", "Kira", "Liam"]
LAST_NAMES = ["Novak", "Okafor", "Petrov", "Quinn", "Rossi", "Sato", "Tanaka", "Umar", "Varga", "Weber", "Young"]

SOURCES = [
    "Daily Ledger", "Morning Courier", "Global Wire", "Harbor Times", "Northern Gazette",
    "Capital Report", "Evening Standard Review", "Metro Dispatch",
]

DOMAINS = ["example.com", "news.example.org", "press.example.net", "daily.example.io"]


def _slug(text: str) -> str:
    return "-".join(text.lower().replace(",", "").split()[:6])


def _paragraphs(count: int) -> str:
    return "\n\n".join(" ".join(random.sample(SENTENCES, k=4)) for _ in range(count))


def generate_fake_news() -> NewsCreate:
    """One random, valid record. Urls are unique per call."""
    title = random.choice(HEADLINES)
    domain = random.choice(DOMAINS)
    source = random.choice(SOURCES)
    published = datetime.now(timezone.utc) - timedelta(
        days=random.randint(0, 365), seconds=random.randint(0, 86399)
    )
    return NewsCreate(
        title=title,
        content=_paragraphs(3),
        author=f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}",
        url=f"https://{domain}/{_slug(title)}-{uuid.uuid4().hex[:12]}",
        url_to_image=f"https://images.{domain}/{uuid.uuid4().hex}.jpg",
        published_at=published,
        description=" ".join(random.sample(SENTENCES, k=2)),
        source_id=str(uuid.uuid4()),
        source_name=source,
    )
