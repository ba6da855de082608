"""Per-country visibility filtering.

Applied to domains and pages at fetch time, before any tree is built, so a
hidden node can never surface as an ancestor, sibling or child count.
"""

from collections.abc import Iterable
from typing import Protocol, TypeVar

from domainnav.core.types import ALL_COUNTRIES


class Targeted(Protocol):
    """Anything carrying a target-country set."""

    @property
    def target_countries(self) -> frozenset[str]: ...


class VisiblePage(Targeted, Protocol):
    """Targeted entity with a parent pointer."""

    @property
    def id(self) -> str: ...

    @property
    def parent_id(self) -> str | None: ...


T = TypeVar("T", bound=Targeted)
P = TypeVar("P", bound=VisiblePage)


def is_visible(entity: Targeted, viewer_country: str) -> bool:
    """Check whether an entity is visible to a viewer.

    An empty target set is legacy data and counts as visible to all.
    """
    targets = entity.target_countries
    if not targets or ALL_COUNTRIES in targets:
        return True
    return viewer_country in targets


def filter_visible(entities: Iterable[T], viewer_country: str) -> list[T]:
    """Return the entities visible to ``viewer_country``, preserving order."""
    return [entity for entity in entities if is_visible(entity, viewer_country)]


def filter_visible_pages(pages: Iterable[P], viewer_country: str) -> list[P]:
    """Visible pages whose whole ancestor chain is visible too.

    A page under a hidden parent is dropped with it, so it cannot be
    re-rooted by the hierarchy builder. Parents that do not exist at all
    are left for the builder to treat as orphans.
    """
    pages = list(pages)
    by_id = {page.id: page for page in pages}
    verdicts: dict[str, bool] = {}

    def reachable(page: P) -> bool:
        chain: list[str] = []
        current: P | None = page
        verdict = True
        while current is not None:
            known = verdicts.get(current.id)
            if known is not None:
                verdict = known
                break
            if current.id in chain or not is_visible(current, viewer_country):
                # a cycle is the builder's problem; a hidden link hides the chain
                verdict = current.id in chain
                break
            chain.append(current.id)
            parent_id = current.parent_id
            current = by_id.get(parent_id) if parent_id is not None else None
        for page_id in chain:
            verdicts[page_id] = verdict
        return verdict

    return [page for page in pages if reachable(page)]
