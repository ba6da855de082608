"""Entity store contract consumed by the reader and writer services."""

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from domainnav.core.models import Category, Domain, Page
from domainnav.core.types import DomainId, PageId


class EntityStore(Protocol):
    """Persistent storage for categories, domains and pages.

    Writes that depend on a prior read (check-then-act) must run inside
    ``transaction()`` so concurrent callers are serialized.
    """

    def transaction(self) -> AbstractAsyncContextManager[None]: ...

    async def list_categories(self) -> list[Category]: ...

    async def list_domains(self) -> list[Domain]: ...

    async def get_domain(self, domain_id: str) -> Domain | None: ...

    async def get_domain_by_slug(self, slug: str) -> Domain | None: ...

    async def insert_domain(self, domain: Domain) -> Domain: ...

    async def update_domain(self, domain: Domain) -> Domain: ...

    async def delete_domain(self, domain_id: str) -> None: ...

    async def list_pages(self, domain_id: DomainId) -> list[Page]: ...

    async def get_page(self, page_id: str) -> Page | None: ...

    async def find_page(
        self, domain_id: DomainId, parent_id: PageId | None, slug: str
    ) -> Page | None: ...

    async def find_root(self, domain_id: DomainId) -> Page | None: ...

    async def insert_page(self, page: Page) -> Page: ...

    async def update_page(self, page: Page) -> Page: ...

    async def delete_pages(self, page_ids: list[PageId]) -> int: ...
