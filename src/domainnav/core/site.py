"""Page tree for one domain.

Reconstructs the parent/children hierarchy from flat, parent-pointer based
page rows. Nodes live in a flat arena and reference each other by index,
so the tree is trivially serializable and has no ownership cycles even
when the stored data does.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from domainnav.core.errors import CycleDetected
from domainnav.core.models import Domain, Page
from domainnav.core.types import PageId

logger = logging.getLogger(__name__)


@dataclass
class PageNode:
    """Page placed in the tree.

    ``parent`` and ``children`` are arena indices into the owning
    :class:`PageTree`.
    """

    page: Page
    index: int
    depth: int = 0
    path_segments: tuple[str, ...] = ()
    parent: int | None = None
    children: list[int] = field(default_factory=list)

    @property
    def id(self) -> PageId:
        return self.page.id

    @property
    def is_synthetic_root(self) -> bool:
        return self.page.is_synthetic_root


def _sort_key(page: Page) -> tuple[int, float]:
    return (page.order, page.created_at.timestamp())


class PageTree:
    """Domain page hierarchy with O(1) id and path lookups.

    Roots and every children list are sorted by ``order`` then creation
    time. Path lookups go through ``path_segments``, where the synthetic
    root contributes nothing.
    """

    __slots__ = (
        "_anomalies",
        "_collisions",
        "_domain",
        "_id_index",
        "_nodes",
        "_path_index",
        "_roots",
    )

    def __init__(
        self,
        domain: Domain,
        nodes: list[PageNode],
        roots: list[int],
        anomalies: list[CycleDetected],
    ) -> None:
        """Initialize tree structure.

        Args:
            domain: Domain the pages belong to
            nodes: Flat arena of all nodes
            roots: Indices of root nodes
            anomalies: Cycles broken while building
        """
        self._domain = domain
        self._nodes = nodes
        self._roots = roots
        self._anomalies = anomalies
        self._id_index = {node.id: node.index for node in nodes}
        self._collisions: list[tuple[PageId, PageId]] = []
        self._path_index: dict[tuple[str, ...], int] = {}
        for node in self.walk():
            if node.is_synthetic_root:
                continue
            existing = self._path_index.get(node.path_segments)
            if existing is not None:
                # first in tree order keeps the URL
                logger.warning(
                    f"URL collision in domain {domain.slug}: page {node.id} shadowed "
                    f"by {self._nodes[existing].id} at /{'/'.join(node.path_segments)}"
                )
                self._collisions.append((self._nodes[existing].id, node.id))
                continue
            self._path_index[node.path_segments] = node.index

    @property
    def domain(self) -> Domain:
        return self._domain

    @property
    def anomalies(self) -> list[CycleDetected]:
        """Cycles that were broken while building the tree."""
        return list(self._anomalies)

    @property
    def collisions(self) -> list[tuple[PageId, PageId]]:
        """(kept, shadowed) page id pairs that resolve to the same URL."""
        return list(self._collisions)

    @property
    def roots(self) -> list[PageNode]:
        """Root-level nodes (synthetic root included when present)."""
        return [self._nodes[i] for i in self._roots]

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, page_id: str) -> PageNode | None:
        """Get node by page id."""
        idx = self._id_index.get(PageId(page_id))
        if idx is None:
            return None
        return self._nodes[idx]

    def find(self, segments: Sequence[str]) -> PageNode | None:
        """Get node by its URL path segments.

        Args:
            segments: Slug sequence (e.g., ["with-code", "youtube-channel"])

        Returns:
            Matching node, or None. An empty sequence never matches; use
            :meth:`synthetic_root` for the bare domain address.
        """
        idx = self._path_index.get(tuple(segments))
        if idx is None:
            return None
        return self._nodes[idx]

    def synthetic_root(self) -> PageNode | None:
        """Get the hidden root of a single-root domain, if present."""
        for i in self._roots:
            if self._nodes[i].is_synthetic_root:
                return self._nodes[i]
        return None

    def parent_of(self, node: PageNode) -> PageNode | None:
        if node.parent is None:
            return None
        return self._nodes[node.parent]

    def children_of(self, node: PageNode) -> list[PageNode]:
        return [self._nodes[i] for i in node.children]

    def top_level(self) -> list[PageNode]:
        """Addressable first-level pages.

        Children of the synthetic root plus any genuine root pages, merged
        in tree order.
        """
        result: list[PageNode] = []
        for node in self.roots:
            if node.is_synthetic_root:
                result.extend(self.children_of(node))
            else:
                result.append(node)
        result.sort(key=lambda n: _sort_key(n.page))
        return result

    def ancestors(self, node: PageNode) -> list[PageNode]:
        """Ancestors from the outermost root down to the direct parent."""
        chain: list[PageNode] = []
        current = self.parent_of(node)
        while current is not None:
            chain.append(current)
            current = self.parent_of(current)
        chain.reverse()
        return chain

    def descendants(self, node: PageNode) -> list[PageNode]:
        """All nodes below ``node`` in depth-first order."""
        result: list[PageNode] = []
        stack = list(reversed(node.children))
        while stack:
            child = self._nodes[stack.pop()]
            result.append(child)
            stack.extend(reversed(child.children))
        return result

    def walk(self) -> Iterator[PageNode]:
        """Iterate all nodes depth-first in tree order."""
        stack = list(reversed(self._roots))
        while stack:
            node = self._nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))


class PageTreeBuilder:
    """Builder for constructing PageTree instances."""

    def __init__(self, domain: Domain) -> None:
        self._domain = domain
        self._nodes: list[PageNode] = []
        self._parent_ids: list[PageId | None] = []
        self._id_index: dict[PageId, int] = {}

    def add_page(self, page: Page) -> int:
        """Add a page to the arena.

        Parents may be added before or after their children. A repeated
        page id is ignored and the first occurrence wins.

        Args:
            page: Page row

        Returns:
            Arena index of the page
        """
        existing = self._id_index.get(page.id)
        if existing is not None:
            logger.warning(f"Duplicate page id {page.id} in domain {self._domain.slug}")
            return existing

        idx = len(self._nodes)
        self._nodes.append(PageNode(page=page, index=idx))
        self._parent_ids.append(page.parent_id)
        self._id_index[page.id] = idx
        return idx

    def build(self) -> PageTree:
        """Link parents, break cycles, sort siblings and assign paths."""
        roots: list[int] = []
        anomalies: list[CycleDetected] = []

        for node in self._nodes:
            parent_id = self._parent_ids[node.index]
            parent_idx = self._id_index.get(parent_id) if parent_id is not None else None
            if parent_idx is None:
                if parent_id is not None:
                    logger.debug(f"Orphan page {node.id} (parent {parent_id}) treated as root")
                roots.append(node.index)
            elif parent_idx == node.index:
                anomaly = CycleDetected(node.id, [node.id, node.id])
                logger.warning(f"{anomaly}; treating page {node.id} as root")
                anomalies.append(anomaly)
                roots.append(node.index)
            else:
                node.parent = parent_idx
                self._nodes[parent_idx].children.append(node.index)

        anomalies.extend(self._break_cycles(roots))

        roots.sort(key=lambda i: _sort_key(self._nodes[i].page))
        for node in self._nodes:
            node.children.sort(key=lambda i: _sort_key(self._nodes[i].page))

        self._assign_paths(roots)

        logger.debug(
            f"Built tree for domain {self._domain.slug}: "
            f"{len(self._nodes)} pages, {len(roots)} roots"
        )
        return PageTree(self._domain, self._nodes, roots, anomalies)

    def _break_cycles(self, roots: list[int]) -> list[CycleDetected]:
        """Promote one node of every parent cycle to a root.

        Nodes not reachable from a root are walked up their parent chain in
        sort order, so the break point does not depend on fetch order.
        """
        resolved = set(roots)
        anomalies: list[CycleDetected] = []
        candidates = sorted(
            (node.index for node in self._nodes if node.index not in resolved),
            key=lambda i: _sort_key(self._nodes[i].page),
        )
        for start in candidates:
            on_path: list[int] = []
            current: int | None = start
            while current is not None and current not in resolved:
                if current in on_path:
                    anomalies.append(self._detach(current, on_path))
                    roots.append(current)
                    break
                on_path.append(current)
                current = self._nodes[current].parent
            resolved.update(on_path)
        return anomalies

    def _detach(self, idx: int, on_path: list[int]) -> CycleDetected:
        node = self._nodes[idx]
        loop = on_path[on_path.index(idx) :]
        anomaly = CycleDetected(node.id, [self._nodes[i].id for i in loop] + [node.id])
        logger.warning(f"{anomaly}; treating page {node.id} as root")

        if node.parent is not None:
            self._nodes[node.parent].children.remove(idx)
        node.parent = None
        return anomaly

    def _assign_paths(self, roots: list[int]) -> None:
        """Assign depth and path segments top-down.

        The synthetic root contributes no segment of its own.
        """
        for idx in roots:
            root = self._nodes[idx]
            root.depth = 0
            root.path_segments = () if root.is_synthetic_root else (root.page.slug,)

        stack = list(roots)
        while stack:
            node = self._nodes[stack.pop()]
            for child_idx in node.children:
                child = self._nodes[child_idx]
                child.depth = node.depth + 1
                if child.is_synthetic_root:
                    child.path_segments = node.path_segments
                else:
                    child.path_segments = (*node.path_segments, child.page.slug)
                stack.append(child_idx)


def build_tree(pages: Sequence[Page], domain: Domain) -> PageTree:
    """Build the page tree for one domain.

    ``pages`` must already be visibility-filtered. Rows belonging to other
    domains are skipped.

    Args:
        pages: Flat page rows in any order
        domain: Owning domain

    Returns:
        PageTree with depth and path segments assigned to every node
    """
    builder = PageTreeBuilder(domain)
    for page in pages:
        if page.domain_id == domain.id:
            builder.add_page(page)
    return builder.build()
