"""In-memory entity store."""

import asyncio
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

from domainnav.core.errors import EntityNotFound, SlugConflict
from domainnav.core.models import Category, Domain, Page
from domainnav.core.types import ROOT_SLUG, DomainId, PageId


class MemoryStore:
    """Dictionary-backed store.

    Enforces the same uniqueness constraints a database would: domain slugs
    are global, page slugs are unique per (domain, parent). A single
    asyncio lock serializes transactions; it is not re-entrant.
    """

    def __init__(
        self,
        categories: Iterable[Category] = (),
        domains: Iterable[Domain] = (),
        pages: Iterable[Page] = (),
    ) -> None:
        self._lock = asyncio.Lock()
        self._categories: dict[str, Category] = {}
        self._domains: dict[str, Domain] = {}
        self._pages: dict[str, Page] = {}
        self._load(categories, domains, pages)

    def _load(
        self,
        categories: Iterable[Category],
        domains: Iterable[Domain],
        pages: Iterable[Page],
    ) -> None:
        """Replace all contents without constraint checks (trusted seed data)."""
        self._categories = {c.id: c for c in categories}
        self._domains = {d.id: d for d in domains}
        self._pages = {p.id: p for p in pages}

    def _changed(self) -> None:
        """Hook invoked after every successful write."""

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        async with self._lock:
            yield

    async def list_categories(self) -> list[Category]:
        return list(self._categories.values())

    async def insert_category(self, category: Category) -> Category:
        self._categories[category.id] = category
        self._changed()
        return category

    async def list_domains(self) -> list[Domain]:
        return list(self._domains.values())

    async def get_domain(self, domain_id: str) -> Domain | None:
        return self._domains.get(domain_id)

    async def get_domain_by_slug(self, slug: str) -> Domain | None:
        for domain in self._domains.values():
            if domain.slug == slug:
                return domain
        return None

    async def insert_domain(self, domain: Domain) -> Domain:
        existing = await self.get_domain_by_slug(domain.slug)
        if existing is not None:
            raise SlugConflict(domain.slug, None, kind="domain")
        self._domains[domain.id] = domain
        self._changed()
        return domain

    async def update_domain(self, domain: Domain) -> Domain:
        if domain.id not in self._domains:
            raise EntityNotFound("Domain", domain.id)
        existing = await self.get_domain_by_slug(domain.slug)
        if existing is not None and existing.id != domain.id:
            raise SlugConflict(domain.slug, None, kind="domain")
        self._domains[domain.id] = domain
        self._changed()
        return domain

    async def delete_domain(self, domain_id: str) -> None:
        if self._domains.pop(domain_id, None) is None:
            raise EntityNotFound("Domain", domain_id)
        self._changed()

    async def list_pages(self, domain_id: DomainId) -> list[Page]:
        return [p for p in self._pages.values() if p.domain_id == domain_id]

    async def get_page(self, page_id: str) -> Page | None:
        return self._pages.get(page_id)

    async def find_page(
        self, domain_id: DomainId, parent_id: PageId | None, slug: str
    ) -> Page | None:
        for page in self._pages.values():
            if page.domain_id == domain_id and page.parent_id == parent_id and page.slug == slug:
                return page
        return None

    async def find_root(self, domain_id: DomainId) -> Page | None:
        roots = [
            p
            for p in self._pages.values()
            if p.domain_id == domain_id and p.slug == ROOT_SLUG and p.parent_id is None
        ]
        if not roots:
            return None
        return min(roots, key=lambda p: p.created_at)

    async def insert_page(self, page: Page) -> Page:
        if await self.find_page(page.domain_id, page.parent_id, page.slug) is not None:
            raise SlugConflict(page.slug, page.parent_id)
        self._pages[page.id] = page
        self._changed()
        return page

    async def update_page(self, page: Page) -> Page:
        if page.id not in self._pages:
            raise EntityNotFound("Page", page.id)
        clash = await self.find_page(page.domain_id, page.parent_id, page.slug)
        if clash is not None and clash.id != page.id:
            raise SlugConflict(page.slug, page.parent_id)
        self._pages[page.id] = page
        self._changed()
        return page

    async def delete_pages(self, page_ids: list[PageId]) -> int:
        deleted = 0
        for page_id in page_ids:
            if self._pages.pop(page_id, None) is not None:
                deleted += 1
        if deleted:
            self._changed()
        return deleted
