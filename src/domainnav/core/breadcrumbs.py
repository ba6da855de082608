"""Breadcrumb trails for domain paths.

Walks the requested slug sequence top-down through an already
visibility-filtered page tree. Each segment is looked up within the scope
of the previous one, because slugs are only unique per parent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import NotRequired, TypedDict

from domainnav.core.paths import DOMAINS_INDEX_URL, domain_url, parse_path, resolve_url
from domainnav.core.site import PageTree
from domainnav.core.types import URLPath

DEFAULT_COLLAPSE_THRESHOLD = 3

ROOT_LABEL = "Domains"


class CrumbKind(StrEnum):
    ROOT = "root"
    DOMAIN = "domain"
    PAGE = "page"


class BreadcrumbItemDict(TypedDict):
    """Dictionary representation of a breadcrumb item."""

    label: str
    url: str
    type: str
    contentType: NotRequired[str]


class CollapsedTrailDict(TypedDict):
    first: BreadcrumbItemDict
    collapsed: list[BreadcrumbItemDict]
    last: BreadcrumbItemDict


class BreadcrumbTrailDict(TypedDict):
    items: list[BreadcrumbItemDict]
    shouldCollapse: bool
    visibleItems: CollapsedTrailDict | None


@dataclass(frozen=True)
class BreadcrumbItem:
    """Breadcrumb navigation item."""

    label: str
    url: URLPath
    kind: CrumbKind
    content_type: str | None = None

    def to_dict(self) -> BreadcrumbItemDict:
        """Convert to dictionary for JSON serialization."""
        result: BreadcrumbItemDict = {
            "label": self.label,
            "url": self.url,
            "type": self.kind.value,
        }
        if self.content_type is not None:
            result["contentType"] = self.content_type
        return result


@dataclass(frozen=True)
class CollapsedTrail:
    """Collapsed "first ... last" view of a long trail."""

    first: BreadcrumbItem
    collapsed: list[BreadcrumbItem]
    last: BreadcrumbItem

    def to_dict(self) -> CollapsedTrailDict:
        return {
            "first": self.first.to_dict(),
            "collapsed": [item.to_dict() for item in self.collapsed],
            "last": self.last.to_dict(),
        }


@dataclass(frozen=True)
class BreadcrumbTrail:
    """Ordered breadcrumb items plus the derived collapsed view."""

    items: list[BreadcrumbItem] = field(default_factory=list)
    threshold: int = DEFAULT_COLLAPSE_THRESHOLD

    @property
    def should_collapse(self) -> bool:
        return len(self.items) > max(self.threshold, 2)

    def collapsed(self) -> CollapsedTrail | None:
        """Collapsed view, or None when the trail fits under the threshold."""
        if not self.should_collapse:
            return None
        return CollapsedTrail(
            first=self.items[0],
            collapsed=self.items[1:-1],
            last=self.items[-1],
        )

    def to_dict(self) -> BreadcrumbTrailDict:
        view = self.collapsed()
        return {
            "items": [item.to_dict() for item in self.items],
            "shouldCollapse": view is not None,
            "visibleItems": view.to_dict() if view is not None else None,
        }


def humanize_slug(slug: str) -> str:
    """Readable label for a slug that did not resolve ("no-code" -> "No Code")."""
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-") if word)


def build_breadcrumbs(
    path: str,
    tree: PageTree | None,
    *,
    threshold: int = DEFAULT_COLLAPSE_THRESHOLD,
) -> BreadcrumbTrail:
    """Build the breadcrumb trail for an absolute path.

    Always starts with the domains index crumb. When ``tree`` is None the
    domain is unknown or hidden from the viewer and nothing more is
    emitted. Segments that do not resolve to a visible page still get a
    best-effort crumb labelled from the raw slug.

    Args:
        path: Absolute path (e.g., "/domain/webdev/with-code")
        tree: Visibility-filtered tree of the domain named in the path
        threshold: Trails longer than this expose a collapsed view

    Returns:
        BreadcrumbTrail for the path

    Raises:
        UnresolvedPath: If the path is not under the domains index
    """
    parsed = parse_path(path)
    items = [BreadcrumbItem(label=ROOT_LABEL, url=DOMAINS_INDEX_URL, kind=CrumbKind.ROOT)]

    if parsed.domain_slug is None or tree is None or tree.domain.slug != parsed.domain_slug:
        return BreadcrumbTrail(items=items, threshold=threshold)

    domain = tree.domain
    current_url = domain_url(domain)
    items.append(BreadcrumbItem(label=domain.name, url=current_url, kind=CrumbKind.DOMAIN))

    scope: tuple[str, ...] | None = ()
    for slug in parsed.page_slugs:
        node = tree.find((*scope, slug)) if scope is not None else None
        if node is not None:
            scope = node.path_segments
            current_url = resolve_url(domain, node)
            items.append(
                BreadcrumbItem(
                    label=node.page.title,
                    url=current_url,
                    kind=CrumbKind.PAGE,
                    content_type=node.page.content_type.value,
                )
            )
        else:
            # once a segment misses, everything below it is unresolvable too
            scope = None
            current_url = URLPath(f"{current_url}/{slug}")
            items.append(
                BreadcrumbItem(label=humanize_slug(slug), url=current_url, kind=CrumbKind.PAGE)
            )

    return BreadcrumbTrail(items=items, threshold=threshold)
