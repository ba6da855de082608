"""URL formatting and parsing for domain pages.

``resolve_url`` is the only place a page URL is formatted. Breadcrumbs,
sidebars and API payloads all go through it so that what a link shows
and where it points cannot drift apart.
"""

from dataclasses import dataclass

from domainnav.core.errors import UnresolvedPath
from domainnav.core.models import Domain
from domainnav.core.site import PageNode
from domainnav.core.types import DOMAIN_PREFIX, URLPath

DOMAINS_INDEX_URL = URLPath(f"/{DOMAIN_PREFIX}")


@dataclass(frozen=True)
class ParsedPath:
    """Absolute path split into its addressing parts."""

    domain_slug: str | None
    page_slugs: tuple[str, ...] = ()


def domain_url(domain: Domain) -> URLPath:
    """Bare domain URL, also the address of the synthetic root."""
    return URLPath(f"{DOMAINS_INDEX_URL}/{domain.slug}")


def resolve_url(domain: Domain, node: PageNode) -> URLPath:
    """Externally addressable URL of a page node.

    Args:
        domain: Owning domain
        node: Node from the domain's page tree

    Returns:
        URL such as "/domain/webdev/with-code/youtube-channel"; the
        synthetic root resolves to the bare domain URL
    """
    base = domain_url(domain)
    if not node.path_segments:
        return base
    return URLPath(f"{base}/{'/'.join(node.path_segments)}")


def parse_path(path: str) -> ParsedPath:
    """Split "/domain/{slug}/{page}/..." into domain and page slugs.

    Raises:
        UnresolvedPath: If the path is not under the domains index
    """
    segments = [s for s in path.split("/") if s]
    if not segments or segments[0] != DOMAIN_PREFIX:
        raise UnresolvedPath(path)
    if len(segments) == 1:
        return ParsedPath(domain_slug=None)
    return ParsedPath(domain_slug=segments[1], page_slugs=tuple(segments[2:]))
