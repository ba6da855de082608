"""Tests for URL resolution and path parsing."""

import pytest
from domainnav.core.errors import UnresolvedPath
from domainnav.core.models import Domain, Page
from domainnav.core.paths import ParsedPath, domain_url, parse_path, resolve_url
from domainnav.core.site import build_tree


class TestResolveUrl:
    """Tests for resolve_url()."""

    def test__multi_root__includes_every_slug(
        self, domains: list[Domain], pages: list[Page]
    ) -> None:
        """Top-level and nested pages of a multi-root domain."""
        webdev = domains[0]
        tree = build_tree(pages, webdev)

        with_code = tree.get("w-with")
        nested = tree.get("w-with-yt")
        assert with_code is not None and nested is not None
        assert resolve_url(webdev, with_code) == "/domain/webdev/with-code"
        assert resolve_url(webdev, nested) == "/domain/webdev/with-code/youtube-channel"

    def test__single_root__root_never_appears(
        self, domains: list[Domain], pages: list[Page]
    ) -> None:
        """The synthetic root is elided from child URLs and is the bare domain URL."""
        gdesign = domains[1]
        tree = build_tree(pages, gdesign)

        root = tree.get("g-root")
        youtube = tree.get("g-yt")
        assert root is not None and youtube is not None
        assert resolve_url(gdesign, youtube) == "/domain/gdesign/youtube-channel"
        assert resolve_url(gdesign, root) == "/domain/gdesign"

    def test__every_url__round_trips_through_parse(
        self, domains: list[Domain], pages: list[Page]
    ) -> None:
        """Parsing a resolved URL finds the same node again."""
        for domain in domains:
            tree = build_tree(pages, domain)
            for node in tree.walk():
                if node.is_synthetic_root:
                    continue
                parsed = parse_path(resolve_url(domain, node))

                assert parsed.domain_slug == domain.slug
                found = tree.find(parsed.page_slugs)
                assert found is not None
                assert found.id == node.id

    def test__domain_url(self, domains: list[Domain]) -> None:
        """Bare domain address."""
        assert domain_url(domains[0]) == "/domain/webdev"


class TestParsePath:
    """Tests for parse_path()."""

    def test__domain_and_pages(self) -> None:
        """Split into domain slug and page slugs."""
        assert parse_path("/domain/webdev/with-code/youtube-channel") == ParsedPath(
            domain_slug="webdev", page_slugs=("with-code", "youtube-channel")
        )

    def test__trailing_and_double_slashes__ignored(self) -> None:
        """Empty segments are dropped."""
        assert parse_path("/domain//webdev/") == ParsedPath(domain_slug="webdev")

    def test__domains_index(self) -> None:
        """The index itself names no domain."""
        assert parse_path("/domain") == ParsedPath(domain_slug=None)

    @pytest.mark.parametrize("path", ["/", "", "/docs/webdev", "/domains/webdev"])
    def test__outside_domain_prefix__raises(self, path: str) -> None:
        """Only /domain/... paths are addressable."""
        with pytest.raises(UnresolvedPath):
            parse_path(path)

