"""Read path: visibility-filtered trees, page views and navigation.

Every read fetches a fresh snapshot from the store, filters it for the
viewer's country and only then builds trees. Nothing is cached between
calls.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from domainnav.core.breadcrumbs import (
    DEFAULT_COLLAPSE_THRESHOLD,
    BreadcrumbTrail,
    build_breadcrumbs,
)
from domainnav.core.errors import UnresolvedPath
from domainnav.core.models import Domain
from domainnav.core.navigation import (
    NavItemDict,
    SectionDict,
    build_domain_layout,
    build_header,
    build_navigation,
    build_page_sidebar,
    build_section_layout,
    build_sidebar,
)
from domainnav.core.paths import domain_url, parse_path, resolve_url
from domainnav.core.sections import DEFAULT_FALLBACK_TITLE
from domainnav.core.site import PageNode, PageTree, build_tree
from domainnav.core.types import URLPath
from domainnav.core.visibility import filter_visible, filter_visible_pages, is_visible
from domainnav.store.base import EntityStore

logger = logging.getLogger(__name__)


@dataclass
class PageView:
    """Everything needed to render one addressable location in a domain.

    ``node`` is None for the domain landing page of a multi-root domain.
    """

    tree: PageTree
    node: PageNode | None
    url: URLPath
    breadcrumbs: BreadcrumbTrail
    children: list[PageNode] = field(default_factory=list)
    sections: list[SectionDict] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        domain = self.tree.domain
        page = None
        if self.node is not None and not self.node.is_synthetic_root:
            page = {
                "id": self.node.id,
                "title": self.node.page.title,
                "slug": self.node.page.slug,
                "contentType": self.node.page.content_type.value,
                "depth": self.node.depth,
            }
        return {
            "domain": {
                "id": domain.id,
                "name": domain.name,
                "slug": domain.slug,
                "addressingMode": domain.addressing_mode.value,
            },
            "page": page,
            "url": self.url,
            "breadcrumbs": self.breadcrumbs.to_dict(),
            "children": [
                {
                    "id": child.id,
                    "title": child.page.title,
                    "slug": child.page.slug,
                    "contentType": child.page.content_type.value,
                    "url": resolve_url(domain, child),
                }
                for child in self.children
            ],
            "sections": self.sections,
        }


class ContentReader:
    """Country-aware read operations over an entity store."""

    def __init__(
        self,
        store: EntityStore,
        *,
        collapse_threshold: int = DEFAULT_COLLAPSE_THRESHOLD,
        fallback_title: str = DEFAULT_FALLBACK_TITLE,
    ) -> None:
        """Initialize reader.

        Args:
            store: Entity store to read from
            collapse_threshold: Breadcrumb trails longer than this collapse
            fallback_title: Title of the section synthesized for unconfigured pages
        """
        self._store = store
        self._threshold = collapse_threshold
        self._fallback_title = fallback_title

    async def load_tree(self, domain_slug: str, country: str) -> PageTree:
        """Build the visible page tree of a domain.

        Raises:
            UnresolvedPath: If the domain is unknown, unpublished or hidden
        """
        tree = await self._visible_tree(domain_slug, country)
        if tree is None:
            raise UnresolvedPath(f"/domain/{domain_slug}")
        return tree

    async def resolve_page(
        self, domain_slug: str, slug_path: Sequence[str], country: str
    ) -> PageView:
        """Locate a page by its slug path and assemble its view.

        An empty slug path addresses the domain itself.

        Raises:
            UnresolvedPath: If the domain or page does not exist or is hidden
                from ``country``; the two cases are indistinguishable
        """
        tree = await self.load_tree(domain_slug, country)
        domain = tree.domain

        if not slug_path:
            url = domain_url(domain)
            root = tree.synthetic_root()
            return PageView(
                tree=tree,
                node=root,
                url=url,
                breadcrumbs=build_breadcrumbs(url, tree, threshold=self._threshold),
                children=tree.top_level(),
                sections=build_domain_layout(tree, fallback_title=self._fallback_title),
            )

        node = tree.find(slug_path)
        if node is None:
            raise UnresolvedPath(f"{domain_url(domain)}/{'/'.join(slug_path)}")

        url = resolve_url(domain, node)
        return PageView(
            tree=tree,
            node=node,
            url=url,
            breadcrumbs=build_breadcrumbs(url, tree, threshold=self._threshold),
            children=tree.children_of(node),
            sections=build_section_layout(tree, node, fallback_title=self._fallback_title),
        )

    async def navigation(self, country: str) -> dict[str, object]:
        """Header grid and main sidebar for a viewer.

        Returns:
            Payload with "header" and "sidebar"
        """
        domains = await self._visible_domains(country)
        categories = await self._store.list_categories()

        trees: dict[str, PageTree] = {}
        for domain in domains:
            if not domain.is_single_root:
                trees[domain.id] = await self._build(domain, country)

        return {
            "header": build_header(domains, categories),
            "sidebar": [entry.to_dict() for entry in build_sidebar(domains, categories, trees)],
        }

    async def page_context(self, path: str, country: str) -> dict[str, object]:
        """Breadcrumbs, page sidebar and current page for an absolute path.

        Unresolvable segments still produce best-effort breadcrumbs; only
        the current page is None.

        Raises:
            UnresolvedPath: If the path is not under the domains index
        """
        parsed = parse_path(path)
        tree = None
        if parsed.domain_slug is not None:
            tree = await self._visible_tree(parsed.domain_slug, country)

        trail = build_breadcrumbs(path, tree, threshold=self._threshold)

        page_sidebar = None
        current_page = None
        if tree is not None:
            page_sidebar = build_page_sidebar(
                tree, parsed.page_slugs, fallback_title=self._fallback_title
            )
            node = tree.find(parsed.page_slugs) if parsed.page_slugs else None
            if node is not None:
                current_page = {
                    "id": node.id,
                    "title": node.page.title,
                    "slug": node.page.slug,
                    "contentType": node.page.content_type.value,
                    "url": resolve_url(tree.domain, node),
                }

        context = await self.navigation(country)
        context.update(
            {
                "breadcrumbs": trail.to_dict(),
                "pageSidebar": page_sidebar,
                "currentPage": current_page,
            }
        )
        return context

    async def domain_navigation(
        self, domain_slug: str, country: str, *, max_depth: int | None = None
    ) -> list[NavItemDict]:
        """Nested navigation tree of one domain.

        Raises:
            UnresolvedPath: If the domain is unknown, unpublished or hidden
        """
        tree = await self.load_tree(domain_slug, country)
        return [item.to_dict() for item in build_navigation(tree, max_depth=max_depth)]

    async def check(self, domain_slug: str | None = None) -> dict[str, dict[str, object]]:
        """Unfiltered structural diagnostics for operators.

        Args:
            domain_slug: Restrict to one domain (default: all domains)

        Returns:
            Mapping of domain slug to its anomalies; domains without any
            anomaly are omitted

        Raises:
            UnresolvedPath: If ``domain_slug`` names no domain
        """
        domains = await self._store.list_domains()
        if domain_slug is not None:
            domains = [d for d in domains if d.slug == domain_slug]
            if not domains:
                raise UnresolvedPath(f"/domain/{domain_slug}")

        report: dict[str, dict[str, object]] = {}
        for domain in domains:
            pages = await self._store.list_pages(domain.id)
            tree = build_tree(pages, domain)
            known = {p.id for p in pages}
            orphans = [
                p.id for p in pages if p.parent_id is not None and p.parent_id not in known
            ]
            roots = [p.id for p in pages if p.is_synthetic_root]

            findings: dict[str, object] = {}
            if tree.anomalies:
                findings["cycles"] = [str(a) for a in tree.anomalies]
            if orphans:
                findings["orphans"] = orphans
            if tree.collisions:
                findings["collisions"] = [list(pair) for pair in tree.collisions]
            if len(roots) > 1:
                findings["duplicateRoots"] = roots
            if findings:
                report[domain.slug] = findings

        logger.debug(f"Checked {len(domains)} domains, {len(report)} with anomalies")
        return report

    async def _visible_domains(self, country: str) -> list[Domain]:
        domains = [d for d in await self._store.list_domains() if d.published]
        return filter_visible(domains, country)

    async def _visible_tree(self, domain_slug: str, country: str) -> PageTree | None:
        domain = await self._store.get_domain_by_slug(domain_slug)
        if domain is None or not domain.published or not is_visible(domain, country):
            return None
        return await self._build(domain, country)

    async def _build(self, domain: Domain, country: str) -> PageTree:
        pages = filter_visible_pages(await self._store.list_pages(domain.id), country)
        return build_tree(pages, domain)
