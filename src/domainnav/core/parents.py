"""Effective parent assignment for page creates and moves.

Runs only on the write path. Single-root domains force parentless pages
under the synthetic root, which is materialized here on first use.
"""

import logging

from domainnav.core.errors import InvalidParent
from domainnav.core.models import ContentType, Domain, Page, new_id
from domainnav.core.types import ROOT_SLUG, PageId
from domainnav.store.base import EntityStore

logger = logging.getLogger(__name__)


def synthetic_root_for(domain: Domain) -> Page:
    """Build (but do not store) the hidden root page of a domain."""
    return Page(
        id=PageId(new_id()),
        domain_id=domain.id,
        slug=ROOT_SLUG,
        title=domain.name,
        parent_id=None,
        content_type=ContentType.SECTION_BASED,
        order=0,
    )


async def ensure_root(store: EntityStore, domain: Domain) -> Page:
    """Get the domain's synthetic root, creating it if absent.

    Must be called inside ``store.transaction()``: the existence check and
    the insert have to be atomic so concurrent creates share one root.

    Args:
        store: Entity store
        domain: Single-root domain

    Returns:
        The existing or newly stored root page
    """
    root = await store.find_root(domain.id)
    if root is not None:
        return root

    root = await store.insert_page(synthetic_root_for(domain))
    logger.info(f"Materialized synthetic root {root.id} for domain {domain.slug}")
    return root


async def validate_parent(
    store: EntityStore, domain: Domain, parent_id: PageId
) -> Page:
    """Check that a requested parent exists in the same domain.

    Raises:
        InvalidParent: If the parent is missing or belongs to another domain
    """
    parent = await store.get_page(parent_id)
    if parent is None:
        raise InvalidParent(parent_id, "page does not exist")
    if parent.domain_id != domain.id:
        raise InvalidParent(parent_id, "page belongs to a different domain")
    return parent


async def resolve_parent(
    store: EntityStore,
    domain: Domain,
    requested_parent_id: PageId | None,
) -> PageId | None:
    """Determine the parent id to store for a new or moved page.

    Multi-root domains keep a null request as-is (top-level page). Single-root
    domains redirect a null request to the synthetic root. An explicit parent
    is validated in both modes and returned unchanged.

    Must be called inside ``store.transaction()``.

    Args:
        store: Entity store
        domain: Domain of the page
        requested_parent_id: Parent requested by the caller

    Returns:
        Effective parent id

    Raises:
        InvalidParent: If an explicit parent is missing or in another domain
    """
    if requested_parent_id is not None:
        parent = await validate_parent(store, domain, requested_parent_id)
        return parent.id

    if not domain.is_single_root:
        return None

    root = await ensure_root(store, domain)
    return root.id


async def check_move(
    store: EntityStore, page: Page, new_parent_id: PageId | None
) -> None:
    """Reject a move that would make a page its own ancestor.

    Walks up from the new parent through stored parent pointers. The walk
    stops on an already-visited id so corrupt chains cannot loop forever.

    Raises:
        InvalidParent: If the new parent is the page or one of its descendants
    """
    if new_parent_id is None:
        return
    if new_parent_id == page.id:
        raise InvalidParent(new_parent_id, "a page cannot be its own parent")

    seen: set[PageId] = set()
    current_id: PageId | None = new_parent_id
    while current_id is not None and current_id not in seen:
        if current_id == page.id:
            raise InvalidParent(new_parent_id, "page is a descendant of the moved page")
        seen.add(current_id)
        current = await store.get_page(current_id)
        if current is None:
            return
        current_id = current.parent_id
