"""Navigation views built from page trees.

Navigation is a view layer over the domain hierarchy: the header grid of
domains by category, the domain sidebar, the nested tree of one domain and
the sectioned page sidebar. All URLs come from ``resolve_url``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TypedDict

from domainnav.core.models import Category, ContentType, Domain
from domainnav.core.paths import domain_url, resolve_url
from domainnav.core.sections import (
    COLUMNS,
    DEFAULT_FALLBACK_TITLE,
    Section,
    iter_sections,
    organize_sections,
)
from domainnav.core.site import PageNode, PageTree
from domainnav.core.types import URLPath

UNCATEGORIZED = Category(
    id="uncategorized",
    name="Other Domains",
    slug="other",
    column_position=1,
    category_order=999,
    description="Miscellaneous domains",
)


class NavItemDict(TypedDict, total=False):
    """Dictionary representation of a navigation item."""

    id: str
    title: str
    path: str
    contentType: str
    children: list[NavItemDict]


@dataclass
class NavItem:
    """Navigation item with children for UI tree."""

    id: str
    title: str
    path: URLPath
    content_type: str
    children: list[NavItem] = field(default_factory=list)

    def to_dict(self) -> NavItemDict:
        """Convert to dictionary for JSON serialization."""
        result: NavItemDict = {
            "id": self.id,
            "title": self.title,
            "path": self.path,
            "contentType": self.content_type,
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


def build_navigation(tree: PageTree, *, max_depth: int | None = None) -> list[NavItem]:
    """Build the nested navigation tree of one domain.

    The synthetic root is never emitted; its children appear at the top.

    Args:
        tree: Visibility-filtered page tree
        max_depth: Number of levels to include (None for all)

    Returns:
        List of NavItem trees for navigation UI
    """
    return [_build_nav_item(tree, node, 1, max_depth) for node in tree.top_level()]


def _build_nav_item(
    tree: PageTree, node: PageNode, level: int, max_depth: int | None
) -> NavItem:
    """Recursively build NavItem from node."""
    children: list[NavItem] = []
    if max_depth is None or level < max_depth:
        children = [
            _build_nav_item(tree, child, level + 1, max_depth)
            for child in tree.children_of(node)
            if not child.is_synthetic_root
        ]
    return NavItem(
        id=node.id,
        title=node.page.title,
        path=resolve_url(tree.domain, node),
        content_type=node.page.content_type.value,
        children=children,
    )


@dataclass
class SidebarDomain:
    """Domain entry of the main sidebar."""

    domain: Domain
    category: Category
    pages: list[NavItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.domain.id,
            "name": self.domain.name,
            "slug": self.domain.slug,
            "addressingMode": self.domain.addressing_mode.value,
            "url": domain_url(self.domain),
            "categoryId": self.domain.category_id,
            "categoryOrder": self.category.category_order,
            "columnPosition": self.category.column_position,
            "pages": [page.to_dict() for page in self.pages],
        }


def _group_by_category(
    domains: Sequence[Domain], categories: Sequence[Category]
) -> list[tuple[Category, list[Domain]]]:
    """Pair active categories with their domains, uncategorized last."""
    active = sorted(
        (c for c in categories if c.is_active),
        key=lambda c: (c.column_position, c.category_order),
    )
    known = {c.id for c in active}
    groups: list[tuple[Category, list[Domain]]] = []
    for category in active:
        members = sorted(
            (d for d in domains if d.category_id == category.id),
            key=lambda d: d.order_in_category,
        )
        groups.append((category, members))

    leftover = [d for d in domains if d.category_id not in known]
    if leftover:
        groups.append((UNCATEGORIZED, sorted(leftover, key=lambda d: d.order_in_category)))
    return groups


def build_header(
    domains: Sequence[Domain], categories: Sequence[Category]
) -> dict[str, object]:
    """Domains grouped by category into the three header columns.

    Args:
        domains: Visible, published domains
        categories: All categories (inactive ones are skipped)

    Returns:
        Header payload with "columnData", "totalDomains", "totalCategories"
    """
    column_data: dict[int, list[dict[str, object]]] = {column: [] for column in COLUMNS}
    groups = _group_by_category(domains, categories)
    for category, members in groups:
        column = category.column_position if category.column_position in COLUMNS else 1
        column_data[column].append(
            {
                "category": category.to_dict(),
                "domains": [
                    {"id": d.id, "name": d.name, "slug": d.slug, "url": domain_url(d)}
                    for d in members
                ],
            }
        )
    return {
        "columnData": {str(column): entries for column, entries in column_data.items()},
        "totalDomains": len(domains),
        "totalCategories": sum(1 for c in categories if c.is_active),
    }


def build_sidebar(
    domains: Sequence[Domain],
    categories: Sequence[Category],
    trees: Mapping[str, PageTree],
) -> list[SidebarDomain]:
    """Main sidebar: every domain with its first level of pages.

    Multi-root domains list their root-level pages. Single-root domains
    list nothing; their entry point is the domain URL itself.

    Args:
        domains: Visible, published domains
        categories: All categories
        trees: Visibility-filtered trees keyed by domain id

    Returns:
        SidebarDomain entries in category order
    """
    entries: list[SidebarDomain] = []
    for category, members in _group_by_category(domains, categories):
        for domain in members:
            pages: list[NavItem] = []
            tree = trees.get(domain.id)
            if not domain.is_single_root and tree is not None:
                pages = [_build_nav_item(tree, node, 1, 1) for node in tree.top_level()]
            entries.append(SidebarDomain(domain=domain, category=category, pages=pages))
    return entries


class SectionPageDict(TypedDict):
    id: str
    title: str
    slug: str
    contentType: str
    parentId: str | None
    order: int
    url: str
    hasChildren: bool
    children: list[SectionPageDict]


class SectionDict(TypedDict):
    title: str
    column: int
    order: int
    pages: list[SectionPageDict]


def _section_page(tree: PageTree, node: PageNode, *, expand: bool) -> SectionPageDict:
    children: list[SectionPageDict] = []
    if expand and node.page.content_type == ContentType.SUBCATEGORY_LIST:
        children = [
            _section_page(tree, child, expand=False) for child in tree.children_of(node)
        ]
    return {
        "id": node.id,
        "title": node.page.title,
        "slug": node.page.slug,
        "contentType": node.page.content_type.value,
        "parentId": node.page.parent_id,
        "order": node.page.order,
        "url": resolve_url(tree.domain, node),
        "hasChildren": bool(children),
        "children": children,
    }


def build_section_layout(
    tree: PageTree,
    node: PageNode,
    *,
    fallback_title: str = DEFAULT_FALLBACK_TITLE,
) -> list[SectionDict]:
    """Sectioned listing of a node's children with resolved URLs.

    ``subcategory_list`` members carry their own visible children one level
    deep.

    Args:
        tree: Visibility-filtered page tree
        node: Page whose children are laid out
        fallback_title: Title of the synthesized section when unconfigured

    Returns:
        Sections in column then order sequence
    """
    return _layout(
        tree,
        organize_sections(
            node.page.sections,
            tree.children_of(node),
            fallback_title=fallback_title,
        ),
    )


def build_domain_layout(
    tree: PageTree, *, fallback_title: str = DEFAULT_FALLBACK_TITLE
) -> list[SectionDict]:
    """Sectioned listing of a domain's first-level pages.

    Single-root domains use the synthetic root's configuration. Multi-root
    domains have nowhere to store one and always get the fallback section.
    """
    root = tree.synthetic_root()
    if root is not None:
        return build_section_layout(tree, root, fallback_title=fallback_title)
    return _layout(
        tree,
        organize_sections(None, tree.top_level(), fallback_title=fallback_title),
    )


def _layout(tree: PageTree, columns: dict[int, list[Section]]) -> list[SectionDict]:
    return [
        {
            "title": section.title,
            "column": section.column,
            "order": section.order,
            "pages": [_section_page(tree, page, expand=True) for page in section.pages],
        }
        for section in iter_sections(columns)
    ]


def build_page_sidebar(
    tree: PageTree,
    page_slugs: Sequence[str],
    *,
    fallback_title: str = DEFAULT_FALLBACK_TITLE,
) -> dict[str, object] | None:
    """Sectioned sidebar for a page inside a domain.

    Single-root domains always show the synthetic root's sections. Multi-root
    domains show the sections of the first-level page on the path.

    Args:
        tree: Visibility-filtered page tree
        page_slugs: Page part of the current path
        fallback_title: Title of the synthesized section when unconfigured

    Returns:
        Page sidebar payload, or None when there is nothing to show
    """
    domain = tree.domain
    if domain.is_single_root:
        root = tree.synthetic_root()
        if root is None:
            return None
        return {
            "type": "single_root_domain",
            "domain": {"name": domain.name, "slug": domain.slug},
            "sections": build_section_layout(tree, root, fallback_title=fallback_title),
        }

    if not page_slugs:
        return None
    anchor = tree.find(page_slugs[:1])
    if anchor is None:
        return None
    return {
        "type": "multi_root_page",
        "domain": {"name": domain.name, "slug": domain.slug},
        "page": {"name": anchor.page.title, "slug": anchor.page.slug},
        "sections": build_section_layout(tree, anchor, fallback_title=fallback_title),
    }
