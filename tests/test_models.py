"""Tests for entity models and input normalization."""

from datetime import UTC, datetime

import pytest
from domainnav.core.errors import ValidationError
from domainnav.core.models import (
    AddressingMode,
    ContentType,
    Domain,
    Page,
    SectionConfig,
    normalize_slug,
    normalize_target_countries,
)
from domainnav.core.types import ALL_COUNTRIES, ROOT_SLUG, DomainId, PageId


class TestNormalizeSlug:
    """Tests for normalize_slug()."""

    def test__mixed_case_with_spaces__trimmed_and_lowercased(self) -> None:
        """Trim surrounding whitespace and lower-case."""
        assert normalize_slug("  With-Code ") == "with-code"

    def test__empty__raises(self) -> None:
        """Reject empty slugs."""
        with pytest.raises(ValidationError, match="required"):
            normalize_slug("   ")

    def test__reserved_root_slug__raises(self) -> None:
        """Reject the synthetic root slug."""
        with pytest.raises(ValidationError, match="reserved"):
            normalize_slug(ROOT_SLUG)

    @pytest.mark.parametrize("slug", ["with code", "with_code", "ümlaut", "a/b"])
    def test__invalid_characters__raises(self, slug: str) -> None:
        """Reject characters outside [a-z0-9-]."""
        with pytest.raises(ValidationError, match="lowercase letters"):
            normalize_slug(slug)


class TestNormalizeTargetCountries:
    """Tests for normalize_target_countries()."""

    def test__none__means_all(self) -> None:
        """Missing input targets everyone."""
        assert normalize_target_countries(None) == frozenset({ALL_COUNTRIES})

    def test__empty_list__means_all(self) -> None:
        """Empty input targets everyone."""
        assert normalize_target_countries([]) == frozenset({ALL_COUNTRIES})

    def test__all_mixed_with_codes__collapses_to_all(self) -> None:
        """ALL is exclusive with explicit codes."""
        assert normalize_target_countries(["IN", "all", "US"]) == frozenset({ALL_COUNTRIES})

    def test__codes__uppercased(self) -> None:
        """Lower-case codes are accepted and upper-cased."""
        assert normalize_target_countries(["in", " us "]) == frozenset({"IN", "US"})

    def test__unsupported_code__raises(self) -> None:
        """Reject codes outside the supported list."""
        with pytest.raises(ValidationError, match="Invalid country code: FR"):
            normalize_target_countries(["FR"])

    def test__custom_supported_list__accepts_its_codes(self) -> None:
        """Honor a configured supported list."""
        assert normalize_target_countries(["FR"], ["FR", "DE"]) == frozenset({"FR"})

    def test__bare_string__raises(self) -> None:
        """A string is not a list of codes."""
        with pytest.raises(ValidationError, match="must be a list"):
            normalize_target_countries("IN")


class TestSectionConfig:
    """Tests for SectionConfig.from_dict()."""

    def test__valid__parses(self) -> None:
        """Parse a well-formed section."""
        config = SectionConfig.from_dict(
            {"title": " Tools ", "column": 2, "order": 1, "pageIds": ["p1", "p3"]}
        )

        assert config == SectionConfig(title="Tools", column=2, order=1, page_ids=("p1", "p3"))

    @pytest.mark.parametrize("column", [0, 4, "2", 2.0, True])
    def test__invalid_column__raises(self, column: object) -> None:
        """Columns must be the integers 1, 2 or 3."""
        with pytest.raises(ValidationError, match="valid column"):
            SectionConfig.from_dict({"title": "T", "column": column, "order": 1, "pageIds": []})

    def test__missing_title__raises(self) -> None:
        """Sections need a non-empty title."""
        with pytest.raises(ValidationError, match="title"):
            SectionConfig.from_dict({"title": "", "column": 1, "order": 1, "pageIds": []})

    def test__non_string_page_id__raises(self) -> None:
        """Member ids must be strings."""
        with pytest.raises(ValidationError, match="strings"):
            SectionConfig.from_dict({"title": "T", "column": 1, "order": 1, "pageIds": [1]})

    def test__not_an_object__raises(self) -> None:
        """Each section must be a JSON object."""
        with pytest.raises(ValidationError, match="object"):
            SectionConfig.from_dict(["Tools"])


class TestSerialization:
    """Tests for entity to_dict()/from_dict()."""

    def test__page__survives_json_shape(self) -> None:
        """A page read back from its dict equals the original."""
        page = Page(
            id=PageId("p1"),
            domain_id=DomainId("d1"),
            slug="tools",
            title="Tools",
            parent_id=PageId("p0"),
            content_type=ContentType.SECTION_BASED,
            order=3,
            target_countries=frozenset({"IN", "US"}),
            sections=(SectionConfig(title="A", column=1, order=1, page_ids=("p2",)),),
            created_at=datetime(2025, 2, 1, 12, 0, tzinfo=UTC),
        )

        assert Page.from_dict(dict(page.to_dict())) == page

    def test__page_without_created_at__uses_epoch(self) -> None:
        """Legacy rows without a timestamp sort first."""
        page = Page.from_dict(
            {"id": "p1", "domainId": "d1", "slug": "a", "title": "A", "parentId": None}
        )

        assert page.created_at == datetime(1970, 1, 1, tzinfo=UTC)
        assert page.target_countries == frozenset({ALL_COUNTRIES})

    def test__domain__defaults_to_multi_root(self) -> None:
        """Missing addressing mode means multi-root."""
        domain = Domain.from_dict({"id": "d1", "slug": "webdev", "name": "Web"})

        assert domain.addressing_mode == AddressingMode.MULTI_ROOT
        assert not domain.is_single_root
        assert domain.published

    def test__string_target_countries__raises(self) -> None:
        """A bare string is not read as a sequence of country codes."""
        with pytest.raises(ValidationError, match="list of strings"):
            Domain.from_dict({"id": "d1", "slug": "s", "name": "S", "targetCountries": "IN"})

    def test__stored_countries__normalized(self) -> None:
        """Stored codes are upper-cased and an empty list means everyone."""
        page = Page.from_dict(
            {"id": "p1", "domainId": "d1", "slug": "a", "title": "A", "targetCountries": ["in"]}
        )
        domain = Domain.from_dict({"id": "d1", "slug": "s", "name": "S", "targetCountries": []})

        assert page.target_countries == frozenset({"IN"})
        assert domain.target_countries == frozenset({ALL_COUNTRIES})

    def test__entry_not_an_object__raises(self) -> None:
        """Entities must be JSON objects."""
        with pytest.raises(ValidationError, match="page must be an object"):
            Page.from_dict("oops")

    def test__root_page__is_synthetic(self) -> None:
        """The reserved slug flags the synthetic root."""
        page = Page(id=PageId("r"), domain_id=DomainId("d"), slug=ROOT_SLUG, title="Root")

        assert page.is_synthetic_root
