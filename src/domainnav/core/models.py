"""Domain, page, section and category entities.

Entities are immutable dataclasses. Mutations go through the writer
service which stores modified copies built with ``dataclasses.replace``.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, NotRequired, TypedDict

from domainnav.core.errors import ValidationError
from domainnav.core.types import ALL_COUNTRIES, ROOT_SLUG, CountryCode, DomainId, PageId

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")

DEFAULT_SUPPORTED_COUNTRIES = ("IN", "US", "GB", "AU", "CA")


def _require_object(data: object, kind: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(f"Each {kind} must be an object, got {type(data).__name__}")
    return data


def _stored_countries(raw: object) -> frozenset[CountryCode]:
    """Target countries as read back from storage.

    Codes are not checked against the supported list, which is deployment
    configuration, but the shape must be a list of strings.
    """
    if raw is None:
        return frozenset({ALL_COUNTRIES})
    if not isinstance(raw, list) or not all(isinstance(c, str) for c in raw):
        raise ValidationError(f"targetCountries must be a list of strings, got {raw!r}")
    codes = frozenset(CountryCode(c.strip().upper()) for c in raw)
    if not codes or ALL_COUNTRIES in codes:
        return frozenset({ALL_COUNTRIES})
    return codes


class AddressingMode(StrEnum):
    """How top-level pages attach to their domain."""

    SINGLE_ROOT = "single-root"
    MULTI_ROOT = "multi-root"


class ContentType(StrEnum):
    """Page rendering type."""

    NARRATIVE = "narrative"
    SECTION_BASED = "section_based"
    SUBCATEGORY_LIST = "subcategory_list"
    TABLE = "table"
    RICH_TEXT = "rich_text"
    MIXED_CONTENT = "mixed_content"


class SectionConfigDict(TypedDict):
    """Serialized section configuration."""

    title: str
    column: int
    order: int
    pageIds: list[str]


class DomainDict(TypedDict):
    """Serialized domain."""

    id: str
    slug: str
    name: str
    addressingMode: str
    orderInCategory: int
    published: bool
    targetCountries: list[str]
    categoryId: NotRequired[str | None]


class PageDict(TypedDict):
    """Serialized page."""

    id: str
    domainId: str
    parentId: str | None
    slug: str
    title: str
    contentType: str
    order: int
    targetCountries: list[str]
    createdAt: NotRequired[str]
    sections: NotRequired[list[SectionConfigDict] | None]


@dataclass(frozen=True)
class SectionConfig:
    """Named, column-assigned, ordered subset of a page's children."""

    title: str
    column: int
    order: int
    page_ids: tuple[PageId, ...] = ()

    def to_dict(self) -> SectionConfigDict:
        return {
            "title": self.title,
            "column": self.column,
            "order": self.order,
            "pageIds": list(self.page_ids),
        }

    @classmethod
    def from_dict(cls, data: object) -> SectionConfig:
        """Parse and validate a raw section configuration.

        Raises:
            ValidationError: If any field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValidationError("Each section must be an object")

        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Each section must have a title")

        column = data.get("column")
        if isinstance(column, bool) or not isinstance(column, int) or column not in (1, 2, 3):
            raise ValidationError("Each section must have a valid column (1, 2, or 3)")

        order = data.get("order")
        if isinstance(order, bool) or not isinstance(order, int):
            raise ValidationError("Each section must have a numeric order")

        page_ids = data.get("pageIds")
        if not isinstance(page_ids, list):
            raise ValidationError("Each section must have a pageIds array")
        for page_id in page_ids:
            if not isinstance(page_id, str):
                raise ValidationError("Section pageIds items must be strings")

        return cls(
            title=title.strip(),
            column=column,
            order=order,
            page_ids=tuple(PageId(p) for p in page_ids),
        )


@dataclass(frozen=True)
class Category:
    """Groups domains for top-level navigation."""

    id: str
    name: str
    slug: str
    column_position: int = 1
    category_order: int = 0
    is_active: bool = True
    icon: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "icon": self.icon,
            "description": self.description,
            "columnPosition": self.column_position,
            "categoryOrder": self.category_order,
            "isActive": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: object) -> Category:
        data = _require_object(data, "category")
        return cls(
            id=data["id"],
            name=data["name"],
            slug=data["slug"],
            column_position=data.get("columnPosition", 1),
            category_order=data.get("categoryOrder", 0),
            is_active=data.get("isActive", True),
            icon=data.get("icon"),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class Domain:
    """Top-level content area with its own slug namespace."""

    id: DomainId
    slug: str
    name: str
    addressing_mode: AddressingMode = AddressingMode.MULTI_ROOT
    order_in_category: int = 0
    published: bool = True
    target_countries: frozenset[CountryCode] = frozenset({ALL_COUNTRIES})
    category_id: str | None = None

    @property
    def is_single_root(self) -> bool:
        return self.addressing_mode == AddressingMode.SINGLE_ROOT

    def to_dict(self) -> DomainDict:
        return {
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "addressingMode": self.addressing_mode.value,
            "orderInCategory": self.order_in_category,
            "published": self.published,
            "targetCountries": sorted(self.target_countries),
            "categoryId": self.category_id,
        }

    @classmethod
    def from_dict(cls, data: object) -> Domain:
        data = _require_object(data, "domain")
        return cls(
            id=DomainId(data["id"]),
            slug=data["slug"],
            name=data["name"],
            addressing_mode=AddressingMode(data.get("addressingMode", "multi-root")),
            order_in_category=data.get("orderInCategory", 0),
            published=data.get("published", True),
            target_countries=_stored_countries(data.get("targetCountries")),
            category_id=data.get("categoryId"),
        )


@dataclass(frozen=True)
class Page:
    """Content page stored with a parent pointer."""

    id: PageId
    domain_id: DomainId
    slug: str
    title: str
    parent_id: PageId | None = None
    content_type: ContentType = ContentType.NARRATIVE
    order: int = 0
    target_countries: frozenset[CountryCode] = frozenset({ALL_COUNTRIES})
    sections: tuple[SectionConfig, ...] | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_synthetic_root(self) -> bool:
        """Whether this is the hidden root page of a single-root domain."""
        return self.slug == ROOT_SLUG

    def to_dict(self) -> PageDict:
        return {
            "id": self.id,
            "domainId": self.domain_id,
            "parentId": self.parent_id,
            "slug": self.slug,
            "title": self.title,
            "contentType": self.content_type.value,
            "order": self.order,
            "targetCountries": sorted(self.target_countries),
            "createdAt": self.created_at.isoformat(),
            "sections": (
                [s.to_dict() for s in self.sections] if self.sections is not None else None
            ),
        }

    @classmethod
    def from_dict(cls, data: object) -> Page:
        data = _require_object(data, "page")
        raw_sections = data.get("sections")
        sections = (
            tuple(SectionConfig.from_dict(s) for s in raw_sections)
            if raw_sections is not None
            else None
        )
        created_at_raw = data.get("createdAt")
        created_at = (
            datetime.fromisoformat(created_at_raw)
            if created_at_raw
            else datetime(1970, 1, 1, tzinfo=UTC)
        )
        parent_id = data.get("parentId")
        return cls(
            id=PageId(data["id"]),
            domain_id=DomainId(data["domainId"]),
            slug=data["slug"],
            title=data["title"],
            parent_id=PageId(parent_id) if parent_id else None,
            content_type=ContentType(data.get("contentType", "narrative")),
            order=data.get("order", 0),
            target_countries=_stored_countries(data.get("targetCountries")),
            sections=sections,
            created_at=created_at,
        )


def new_id() -> str:
    """Generate a fresh entity id."""
    return uuid.uuid4().hex


def normalize_slug(slug: str) -> str:
    """Trim, lower-case and validate a page or domain slug.

    Raises:
        ValidationError: If the slug is empty, malformed or reserved
    """
    normalized = slug.strip().lower()
    if not normalized:
        raise ValidationError("Slug is required")
    if normalized == ROOT_SLUG:
        raise ValidationError(f'Slug "{ROOT_SLUG}" is reserved')
    if not SLUG_PATTERN.match(normalized):
        raise ValidationError("Slug must contain only lowercase letters, numbers, and hyphens")
    return normalized


def normalize_target_countries(
    countries: Iterable[str] | None,
    supported: Iterable[str] = DEFAULT_SUPPORTED_COUNTRIES,
) -> frozenset[CountryCode]:
    """Normalize a target-country list to either ``{ALL}`` or explicit codes.

    Missing or empty input means everyone. ``ALL`` mixed with explicit codes
    collapses to ``{ALL}``.

    Raises:
        ValidationError: If a code is not a supported country
    """
    if countries is None:
        return frozenset({ALL_COUNTRIES})
    if isinstance(countries, str) or not isinstance(countries, Iterable):
        raise ValidationError("Target countries must be a list")

    valid = set(supported)
    codes: set[CountryCode] = set()
    for raw in countries:
        if not isinstance(raw, str):
            raise ValidationError("Each target country must be a string")
        code = raw.strip().upper()
        if code == ALL_COUNTRIES:
            return frozenset({ALL_COUNTRIES})
        if code not in valid:
            allowed = ", ".join([ALL_COUNTRIES, *sorted(valid)])
            raise ValidationError(f"Invalid country code: {raw}. Valid codes are: {allowed}")
        codes.add(CountryCode(code))

    if not codes:
        return frozenset({ALL_COUNTRIES})
    return frozenset(codes)
