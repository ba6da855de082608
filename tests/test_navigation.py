"""Tests for navigation views."""

import pytest
from domainnav.core.models import Category, ContentType, Domain, Page, SectionConfig
from domainnav.core.navigation import (
    build_domain_layout,
    build_header,
    build_navigation,
    build_page_sidebar,
    build_section_layout,
    build_sidebar,
)
from domainnav.core.site import PageTree, build_tree
from domainnav.core.types import ROOT_SLUG, DomainId, PageId


@pytest.fixture
def trees(domains: list[Domain], pages: list[Page]) -> dict[str, PageTree]:
    return {domain.id: build_tree(pages, domain) for domain in domains}


class TestBuildNavigation:
    """Tests for build_navigation()."""

    def test__multi_root__nested_items(self, trees: dict[str, PageTree]) -> None:
        """Roots with their children and resolved paths."""
        items = build_navigation(trees["d-webdev"])

        assert [i.title for i in items] == ["With Code", "No Code"]
        assert items[0].children[0].path == "/domain/webdev/with-code/youtube-channel"

    def test__single_root__root_elided(self, trees: dict[str, PageTree]) -> None:
        """The synthetic root's children appear at the top."""
        items = build_navigation(trees["d-gdesign"])

        assert [i.path for i in items] == [
            "/domain/gdesign/youtube-channel",
            "/domain/gdesign/client-management",
        ]

    def test__max_depth__limits_levels(self, trees: dict[str, PageTree]) -> None:
        """Depth 1 yields only the first level."""
        items = build_navigation(trees["d-webdev"], max_depth=1)

        assert all(item.children == [] for item in items)

    def test__to_dict__omits_empty_children(self, trees: dict[str, PageTree]) -> None:
        """Leaves have no children key."""
        leaf = build_navigation(trees["d-webdev"])[0].children[0]

        assert leaf.to_dict() == {
            "id": "w-with-yt",
            "title": "YouTube Channel",
            "path": "/domain/webdev/with-code/youtube-channel",
            "contentType": "narrative",
        }


class TestBuildHeader:
    """Tests for build_header()."""

    def test__domains_grouped_into_columns(
        self, domains: list[Domain], categories: list[Category]
    ) -> None:
        """Categories land in their column with domains by order_in_category."""
        header = build_header(domains[:3], categories)

        column_data = header["columnData"]
        assert isinstance(column_data, dict)
        assert [d["slug"] for d in column_data["1"][0]["domains"]] == ["webdev", "india-only"]
        assert [d["slug"] for d in column_data["2"][0]["domains"]] == ["gdesign"]
        assert column_data["3"] == []
        assert header["totalDomains"] == 3
        assert header["totalCategories"] == 2

    def test__uncategorized__grouped_last(
        self, domains: list[Domain], categories: list[Category]
    ) -> None:
        """Domains without a known category fall into Other Domains."""
        header = build_header(domains, categories)

        column_data = header["columnData"]
        assert isinstance(column_data, dict)
        last = column_data["1"][-1]
        assert last["category"]["name"] == "Other Domains"
        assert [d["slug"] for d in last["domains"]] == ["drafts"]

    def test__inactive_category__skipped(self, domains: list[Domain]) -> None:
        """Inactive categories do not appear; their domains are uncategorized."""
        categories = [
            Category(id="cat-dev", name="Development", slug="development", is_active=False)
        ]

        header = build_header(domains[:1], categories)

        column_data = header["columnData"]
        assert isinstance(column_data, dict)
        assert [g["category"]["id"] for g in column_data["1"]] == ["uncategorized"]
        assert header["totalCategories"] == 0


class TestBuildSidebar:
    """Tests for build_sidebar()."""

    def test__multi_root_lists_roots_single_root_lists_nothing(
        self,
        domains: list[Domain],
        categories: list[Category],
        trees: dict[str, PageTree],
    ) -> None:
        """Single-root domains are entered through their domain URL."""
        entries = build_sidebar(domains[:2], categories, trees)

        by_slug = {e.domain.slug: e for e in entries}
        assert [p.title for p in by_slug["webdev"].pages] == ["With Code", "No Code"]
        assert by_slug["webdev"].pages[0].children == []
        assert by_slug["gdesign"].pages == []
        assert by_slug["gdesign"].to_dict()["url"] == "/domain/gdesign"

    def test__switched_to_multi_root__lists_former_root_children(
        self, categories: list[Category]
    ) -> None:
        """Pages left under an old synthetic root are still first-level entries."""
        domain = Domain(id=DomainId("d"), slug="d", name="D")
        pages = [
            Page(id=PageId("r"), domain_id=domain.id, slug=ROOT_SLUG, title="D"),
            Page(id=PageId("a"), domain_id=domain.id, slug="a", title="A", parent_id=PageId("r")),
            Page(id=PageId("b"), domain_id=domain.id, slug="b", title="B", order=5),
        ]

        entries = build_sidebar([domain], categories, {domain.id: build_tree(pages, domain)})

        assert [p.path for p in entries[0].pages] == ["/domain/d/a", "/domain/d/b"]


class TestSectionLayout:
    """Tests for build_section_layout() and build_domain_layout()."""

    def test__subcategory_list__expands_one_level(self) -> None:
        """Members of type subcategory_list carry their own children."""
        domain = Domain(id=DomainId("d1"), slug="d", name="D")
        tree = build_tree(
            [
                Page(id=PageId("hub"), domain_id=domain.id, slug="hub", title="Hub"),
                Page(
                    id=PageId("sub"),
                    domain_id=domain.id,
                    slug="sub",
                    title="Sub",
                    parent_id=PageId("hub"),
                    content_type=ContentType.SUBCATEGORY_LIST,
                ),
                Page(
                    id=PageId("leaf"),
                    domain_id=domain.id,
                    slug="leaf",
                    title="Leaf",
                    parent_id=PageId("sub"),
                ),
            ],
            domain,
        )
        hub = tree.get("hub")
        assert hub is not None

        layout = build_section_layout(tree, hub)

        member = layout[0]["pages"][0]
        assert member["hasChildren"] is True
        assert [c["url"] for c in member["children"]] == ["/domain/d/hub/sub/leaf"]
        assert member["children"][0]["children"] == []

    def test__single_root__uses_root_sections(
        self, domains: list[Domain], pages: list[Page]
    ) -> None:
        """The synthetic root's configuration drives the domain layout."""
        root = next(p for p in pages if p.id == "g-root")
        configured = [
            p
            if p.id != "g-root"
            else Page(
                id=root.id,
                domain_id=root.domain_id,
                slug=root.slug,
                title=root.title,
                content_type=root.content_type,
                sections=(
                    SectionConfig(title="Start", column=2, order=1, page_ids=(PageId("g-yt"),)),
                ),
            )
            for p in pages
        ]
        tree = build_tree(configured, domains[1])

        layout = build_domain_layout(tree)

        assert [(s["title"], s["column"]) for s in layout] == [("Start", 2)]
        assert [p["url"] for p in layout[0]["pages"]] == ["/domain/gdesign/youtube-channel"]

    def test__multi_root__fallback_section(self, trees: dict[str, PageTree]) -> None:
        """Multi-root domains list their roots in the fallback section."""
        layout = build_domain_layout(trees["d-webdev"], fallback_title="All")

        assert [s["title"] for s in layout] == ["All"]
        assert [p["slug"] for p in layout[0]["pages"]] == ["with-code", "no-code"]


class TestBuildPageSidebar:
    """Tests for build_page_sidebar()."""

    def test__single_root__root_sections(self, trees: dict[str, PageTree]) -> None:
        """Single-root domains always show the root's sections."""
        sidebar = build_page_sidebar(trees["d-gdesign"], ["youtube-channel"])

        assert sidebar is not None
        assert sidebar["type"] == "single_root_domain"

    def test__multi_root__anchored_on_first_level_page(
        self, trees: dict[str, PageTree]
    ) -> None:
        """Multi-root sidebars come from the first page on the path."""
        sidebar = build_page_sidebar(trees["d-webdev"], ["no-code", "youtube-channel"])

        assert sidebar is not None
        assert sidebar["type"] == "multi_root_page"
        assert sidebar["page"] == {"name": "No Code", "slug": "no-code"}

    def test__multi_root_landing__none(self, trees: dict[str, PageTree]) -> None:
        """The bare multi-root domain URL has no page sidebar."""
        assert build_page_sidebar(trees["d-webdev"], []) is None
