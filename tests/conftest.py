"""Shared test fixtures.

The scenario store holds:

- category "Development" (column 1) and "Design" (column 2)
- multi-root domain "webdev": with-code (order 1) and no-code (order 2),
  each with a child "youtube-channel"
- single-root domain "gdesign": synthetic root with youtube-channel and
  client-management (India only)
- domain "india-only" targeted at IN, and an unpublished domain "drafts"
"""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from domainnav.config import (
    Config,
    CountriesConfig,
    LiveReloadConfig,
    NavigationConfig,
    ServerConfig,
    StoreConfig,
)
from domainnav.core.models import (
    AddressingMode,
    Category,
    ContentType,
    Domain,
    Page,
    SectionConfig,
)
from domainnav.core.types import ROOT_SLUG, CountryCode, DomainId, PageId
from domainnav.services.reader import ContentReader
from domainnav.services.writer import ContentWriter
from domainnav.store.memory import MemoryStore

EPOCH = datetime(2025, 1, 1, tzinfo=UTC)


def _page(
    page_id: str,
    domain_id: str,
    slug: str,
    title: str,
    parent_id: str | None = None,
    *,
    order: int = 0,
    content_type: ContentType = ContentType.NARRATIVE,
    countries: tuple[str, ...] = ("ALL",),
    sections: tuple[SectionConfig, ...] | None = None,
    minute: int = 0,
) -> Page:
    return Page(
        id=PageId(page_id),
        domain_id=DomainId(domain_id),
        slug=slug,
        title=title,
        parent_id=PageId(parent_id) if parent_id else None,
        content_type=content_type,
        order=order,
        target_countries=frozenset(CountryCode(c) for c in countries),
        sections=sections,
        created_at=EPOCH + timedelta(minutes=minute),
    )


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration with a tmp_path data file."""
    return Config(
        server=ServerConfig(),
        store=StoreConfig(data_file=tmp_path / "content.json"),
        countries=CountriesConfig(),
        navigation=NavigationConfig(),
        live_reload=LiveReloadConfig(enabled=False),
    )


@pytest.fixture
def categories() -> list[Category]:
    return [
        Category(id="cat-dev", name="Development", slug="development", column_position=1),
        Category(id="cat-design", name="Design", slug="design", column_position=2),
    ]


@pytest.fixture
def domains() -> list[Domain]:
    return [
        Domain(
            id=DomainId("d-webdev"),
            slug="webdev",
            name="Web Development",
            addressing_mode=AddressingMode.MULTI_ROOT,
            order_in_category=1,
            category_id="cat-dev",
        ),
        Domain(
            id=DomainId("d-gdesign"),
            slug="gdesign",
            name="Graphic Design",
            addressing_mode=AddressingMode.SINGLE_ROOT,
            order_in_category=1,
            category_id="cat-design",
        ),
        Domain(
            id=DomainId("d-india"),
            slug="india-only",
            name="India Only",
            order_in_category=2,
            target_countries=frozenset({CountryCode("IN")}),
            category_id="cat-dev",
        ),
        Domain(
            id=DomainId("d-drafts"),
            slug="drafts",
            name="Drafts",
            published=False,
        ),
    ]


@pytest.fixture
def pages() -> list[Page]:
    return [
        _page("w-with", "d-webdev", "with-code", "With Code", order=1),
        _page("w-no", "d-webdev", "no-code", "No Code", order=2),
        _page("w-with-yt", "d-webdev", "youtube-channel", "YouTube Channel", "w-with", order=1),
        _page("w-no-yt", "d-webdev", "youtube-channel", "YouTube Channel", "w-no", order=1),
        _page(
            "g-root",
            "d-gdesign",
            ROOT_SLUG,
            "Graphic Design",
            content_type=ContentType.SECTION_BASED,
        ),
        _page("g-yt", "d-gdesign", "youtube-channel", "YouTube Channel", "g-root", order=1),
        _page(
            "g-cm",
            "d-gdesign",
            "client-management",
            "Client Management",
            "g-root",
            order=2,
            countries=("IN",),
        ),
        _page("i-home", "d-india", "home", "Home", order=1),
        _page("x-home", "d-drafts", "home", "Home", order=1),
    ]


@pytest.fixture
def scenario_store(
    categories: list[Category], domains: list[Domain], pages: list[Page]
) -> MemoryStore:
    """In-memory store seeded with the scenario data."""
    return MemoryStore(categories, domains, pages)


@pytest.fixture
def reader(scenario_store: MemoryStore) -> ContentReader:
    return ContentReader(scenario_store)


@pytest.fixture
def writer(scenario_store: MemoryStore) -> ContentWriter:
    return ContentWriter(scenario_store)
