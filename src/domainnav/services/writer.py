"""Write path: domain and page mutations.

Every check-then-act sequence (parent resolution, slug uniqueness, default
ordering) runs inside one store transaction.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from enum import Enum, auto

from domainnav.core.errors import EntityNotFound, SlugConflict, ValidationError
from domainnav.core.models import (
    DEFAULT_SUPPORTED_COUNTRIES,
    AddressingMode,
    ContentType,
    Domain,
    Page,
    new_id,
    normalize_slug,
    normalize_target_countries,
)
from domainnav.core.parents import check_move, ensure_root, resolve_parent
from domainnav.core.sections import parse_section_configs
from domainnav.core.types import DomainId, PageId
from domainnav.store.base import EntityStore

logger = logging.getLogger(__name__)


class _Unset(Enum):
    UNSET = auto()


UNSET = _Unset.UNSET


def _require_text(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


class ContentWriter:
    """Validated mutations over an entity store."""

    def __init__(
        self,
        store: EntityStore,
        *,
        supported_countries: Iterable[str] = DEFAULT_SUPPORTED_COUNTRIES,
    ) -> None:
        """Initialize writer.

        Args:
            store: Entity store to mutate
            supported_countries: Country codes accepted in target lists
        """
        self._store = store
        self._supported = tuple(supported_countries)

    async def create_domain(
        self,
        name: str,
        slug: str,
        addressing_mode: AddressingMode = AddressingMode.MULTI_ROOT,
        *,
        category_id: str | None = None,
        order_in_category: int | None = None,
        published: bool = False,
        target_countries: Iterable[str] | None = None,
    ) -> Domain:
        """Create a domain, with its synthetic root when single-root.

        Args:
            name: Display name
            slug: Globally unique slug
            addressing_mode: Single-root or multi-root
            category_id: Owning category
            order_in_category: Position in the category (default: last + 1)
            published: Whether the domain is visible on read paths
            target_countries: Country codes, or None for everyone

        Returns:
            The stored domain

        Raises:
            ValidationError: If name, slug or countries are invalid
            SlugConflict: If the slug is taken by another domain
        """
        name = _require_text(name, "Name")
        slug = normalize_slug(slug)
        countries = normalize_target_countries(target_countries, self._supported)

        async with self._store.transaction():
            if await self._store.get_domain_by_slug(slug) is not None:
                raise SlugConflict(slug, None, kind="domain")

            if order_in_category is None:
                siblings = [
                    d.order_in_category
                    for d in await self._store.list_domains()
                    if d.category_id == category_id
                ]
                order_in_category = max(siblings, default=0) + 1

            domain = await self._store.insert_domain(
                Domain(
                    id=DomainId(new_id()),
                    slug=slug,
                    name=name,
                    addressing_mode=addressing_mode,
                    order_in_category=order_in_category,
                    published=published,
                    target_countries=countries,
                    category_id=category_id,
                )
            )
            if domain.is_single_root:
                await ensure_root(self._store, domain)

        logger.info(f"Created {domain.addressing_mode} domain {domain.slug} ({domain.id})")
        return domain

    async def update_domain(
        self,
        domain_id: str,
        *,
        name: str | None = None,
        slug: str | None = None,
        addressing_mode: AddressingMode | None = None,
        category_id: str | None | _Unset = UNSET,
        order_in_category: int | None = None,
        published: bool | None = None,
        target_countries: Iterable[str] | None | _Unset = UNSET,
    ) -> Domain:
        """Update domain fields; None (or UNSET) leaves a field unchanged.

        Switching to single-root leaves existing top-level pages where they
        are. The synthetic root is created by the next page create.

        Raises:
            EntityNotFound: If the domain does not exist
            ValidationError: If a new value is invalid
            SlugConflict: If the new slug is taken by another domain
        """
        async with self._store.transaction():
            domain = await self._get_domain(domain_id)
            changes: dict[str, object] = {}
            if name is not None:
                changes["name"] = _require_text(name, "Name")
            if slug is not None:
                changes["slug"] = normalize_slug(slug)
            if addressing_mode is not None:
                changes["addressing_mode"] = addressing_mode
            if category_id is not UNSET:
                changes["category_id"] = category_id
            if order_in_category is not None:
                changes["order_in_category"] = order_in_category
            if published is not None:
                changes["published"] = published
            if target_countries is not UNSET:
                changes["target_countries"] = normalize_target_countries(
                    target_countries, self._supported
                )

            updated = await self._store.update_domain(replace(domain, **changes))

            if updated.name != domain.name:
                root = await self._store.find_root(updated.id)
                if root is not None:
                    await self._store.update_page(replace(root, title=updated.name))

        if updated.addressing_mode != domain.addressing_mode:
            logger.info(
                f"Domain {updated.slug} switched from {domain.addressing_mode} "
                f"to {updated.addressing_mode}; existing pages were not reparented"
            )
        return updated

    async def delete_domain(self, domain_id: str) -> int:
        """Delete a domain together with all of its pages.

        Returns:
            Number of deleted pages

        Raises:
            EntityNotFound: If the domain does not exist
        """
        async with self._store.transaction():
            domain = await self._get_domain(domain_id)
            pages = await self._store.list_pages(domain.id)
            deleted = await self._store.delete_pages([p.id for p in pages]) if pages else 0
            await self._store.delete_domain(domain.id)

        logger.info(f"Deleted domain {domain.slug} ({domain.id}) with {deleted} pages")
        return deleted

    async def create_page(
        self,
        domain_id: str,
        title: str,
        slug: str,
        content_type: ContentType = ContentType.NARRATIVE,
        *,
        parent_id: PageId | None = None,
        target_countries: Iterable[str] | None = None,
        order: int | None = None,
    ) -> Page:
        """Create a page under its effective parent.

        Args:
            domain_id: Owning domain
            title: Page title
            slug: Slug, unique among its siblings
            content_type: Rendering type
            parent_id: Requested parent (None for top level)
            target_countries: Country codes, or None for everyone
            order: Position among siblings (default: last + 1)

        Returns:
            The stored page

        Raises:
            EntityNotFound: If the domain does not exist
            InvalidParent: If the parent is missing or in another domain
            SlugConflict: If a sibling already uses the slug
            ValidationError: If title, slug or countries are invalid
        """
        title = _require_text(title, "Title")
        slug = normalize_slug(slug)
        countries = normalize_target_countries(target_countries, self._supported)

        async with self._store.transaction():
            domain = await self._get_domain(domain_id)
            effective_parent = await resolve_parent(self._store, domain, parent_id)

            if await self._store.find_page(domain.id, effective_parent, slug) is not None:
                raise SlugConflict(slug, effective_parent)

            if order is None:
                order = await self._next_order(domain.id, effective_parent)

            page = await self._store.insert_page(
                Page(
                    id=PageId(new_id()),
                    domain_id=domain.id,
                    slug=slug,
                    title=title,
                    parent_id=effective_parent,
                    content_type=content_type,
                    order=order,
                    target_countries=countries,
                )
            )

        logger.info(f"Created page {page.id} ({slug}) in domain {domain.slug}")
        return page

    async def update_page(
        self,
        page_id: str,
        *,
        title: str | None = None,
        slug: str | None = None,
        content_type: ContentType | None = None,
        parent_id: PageId | None | _Unset = UNSET,
        target_countries: Iterable[str] | None | _Unset = UNSET,
        order: int | None = None,
    ) -> Page:
        """Update or move a page.

        Passing ``parent_id`` moves the page. A None parent means top level,
        which in a single-root domain is the synthetic root.

        Raises:
            EntityNotFound: If the page does not exist
            InvalidParent: If the new parent is missing, in another domain,
                or is the page itself or one of its descendants
            SlugConflict: If a sibling in the target scope uses the slug
            ValidationError: If a new value is invalid, or the synthetic root
                would be moved, renamed or country-restricted
        """
        async with self._store.transaction():
            page = await self._get_page(page_id)
            domain = await self._get_domain(page.domain_id)

            changes: dict[str, object] = {}
            if title is not None:
                changes["title"] = _require_text(title, "Title")
            if content_type is not None:
                changes["content_type"] = content_type
            if order is not None:
                changes["order"] = order
            if target_countries is not UNSET:
                changes["target_countries"] = normalize_target_countries(
                    target_countries, self._supported
                )

            if page.is_synthetic_root:
                if slug is not None or parent_id is not UNSET:
                    raise ValidationError("The domain root page cannot be moved or renamed")
                if target_countries is not UNSET:
                    raise ValidationError("The domain root page is visible wherever its domain is")
                return await self._store.update_page(replace(page, **changes))

            new_slug = normalize_slug(slug) if slug is not None else page.slug
            new_parent = page.parent_id
            if parent_id is not UNSET and parent_id != page.parent_id:
                await check_move(self._store, page, parent_id)
                new_parent = await resolve_parent(self._store, domain, parent_id)

            if new_slug != page.slug or new_parent != page.parent_id:
                clash = await self._store.find_page(domain.id, new_parent, new_slug)
                if clash is not None and clash.id != page.id:
                    raise SlugConflict(new_slug, new_parent)

            updated = await self._store.update_page(
                replace(page, slug=new_slug, parent_id=new_parent, **changes)
            )

        if updated.parent_id != page.parent_id:
            logger.info(f"Moved page {page.id} from {page.parent_id} to {updated.parent_id}")
        return updated

    async def delete_page(self, page_id: str) -> int:
        """Delete a page and all of its descendants.

        Returns:
            Number of deleted pages

        Raises:
            EntityNotFound: If the page does not exist
            ValidationError: If the page is the synthetic root
        """
        async with self._store.transaction():
            page = await self._get_page(page_id)
            if page.is_synthetic_root:
                raise ValidationError("The domain root page cannot be deleted")

            children: dict[PageId | None, list[PageId]] = {}
            for p in await self._store.list_pages(page.domain_id):
                children.setdefault(p.parent_id, []).append(p.id)

            # breadth-first, then reversed so the deepest pages go first
            doomed = [page.id]
            seen = {page.id}
            for current in doomed:
                for child_id in children.get(current, []):
                    if child_id not in seen:
                        seen.add(child_id)
                        doomed.append(child_id)
            doomed.reverse()

            deleted = await self._store.delete_pages(doomed)

        logger.info(f"Deleted page {page.id} with {deleted - 1} descendants")
        return deleted

    async def update_sections(self, page_id: str, sections: object) -> Page:
        """Replace the section configuration of a section-based page.

        Args:
            page_id: Page whose children are laid out
            sections: Decoded JSON list of sections, or None to clear

        Returns:
            The updated page

        Raises:
            EntityNotFound: If the page does not exist
            ValidationError: If the page is not section-based, the payload is
                malformed, or a section references a non-child page
        """
        async with self._store.transaction():
            page = await self._get_page(page_id)
            if page.content_type != ContentType.SECTION_BASED:
                raise ValidationError("Sections can only be configured on section_based pages")

            configs = None
            if sections is not None:
                pages = await self._store.list_pages(page.domain_id)
                child_ids = [p.id for p in pages if p.parent_id == page.id]
                configs = parse_section_configs(sections, child_ids)

            updated = await self._store.update_page(replace(page, sections=configs))

        logger.info(f"Updated sections of page {page.id}")
        return updated

    async def _get_domain(self, domain_id: str) -> Domain:
        domain = await self._store.get_domain(domain_id)
        if domain is None:
            raise EntityNotFound("Domain", domain_id)
        return domain

    async def _get_page(self, page_id: str) -> Page:
        page = await self._store.get_page(page_id)
        if page is None:
            raise EntityNotFound("Page", page_id)
        return page

    async def _next_order(self, domain_id: DomainId, parent_id: PageId | None) -> int:
        orders = [
            p.order for p in await self._store.list_pages(domain_id) if p.parent_id == parent_id
        ]
        return max(orders, default=0) + 1
