"""Three-column section layout for a page's children."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from domainnav.core.errors import ValidationError
from domainnav.core.models import SectionConfig
from domainnav.core.site import PageNode
from domainnav.core.types import PageId

COLUMNS = (1, 2, 3)

DEFAULT_FALLBACK_TITLE = "Pages"


@dataclass
class Section:
    """Configured section resolved against the current children."""

    title: str
    column: int
    order: int
    pages: list[PageNode] = field(default_factory=list)


def organize_sections(
    configs: Sequence[SectionConfig] | None,
    children: Sequence[PageNode],
    *,
    fallback_title: str = DEFAULT_FALLBACK_TITLE,
) -> dict[int, list[Section]]:
    """Bucket a page's children into columns of ordered sections.

    Member ids that no longer resolve among ``children`` (deleted or hidden
    pages) are dropped silently. A page listed more than once keeps only its
    first placement in column/order sequence. Without any configuration a
    single fallback section in column 1 holds all children in tree order.

    Args:
        configs: Section configuration of the parent page
        children: Visible direct children of the parent page, in tree order
        fallback_title: Title of the synthesized section

    Returns:
        Mapping of column number (1..3) to sections sorted by order
    """
    columns: dict[int, list[Section]] = {column: [] for column in COLUMNS}

    if not configs:
        columns[1].append(
            Section(title=fallback_title, column=1, order=1, pages=list(children))
        )
        return columns

    by_id = {child.id: child for child in children}
    placed: set[PageId] = set()

    # stable sort keeps configuration order for equal (column, order)
    for config in sorted(configs, key=lambda c: (c.column, c.order)):
        pages: list[PageNode] = []
        for page_id in config.page_ids:
            node = by_id.get(page_id)
            if node is None or page_id in placed:
                continue
            placed.add(page_id)
            pages.append(node)
        columns.setdefault(config.column, []).append(
            Section(title=config.title, column=config.column, order=config.order, pages=pages)
        )

    return columns


def iter_sections(columns: dict[int, list[Section]]) -> Iterable[Section]:
    """Sections in column then order sequence."""
    for column in sorted(columns):
        yield from columns[column]


def parse_section_configs(
    raw: object, child_ids: Iterable[str]
) -> tuple[SectionConfig, ...]:
    """Validate a raw section configuration for a page.

    Every referenced page must be one of the page's structural children.

    Args:
        raw: Decoded JSON list of sections
        child_ids: Ids of the page's direct children

    Returns:
        Parsed section configs

    Raises:
        ValidationError: If the payload is malformed or references a page
            outside the page's children
    """
    if not isinstance(raw, list):
        raise ValidationError("Sections must be an array")

    configs = tuple(SectionConfig.from_dict(item) for item in raw)

    allowed = set(child_ids)
    for config in configs:
        for page_id in config.page_ids:
            if page_id not in allowed:
                raise ValidationError(f"Page ID {page_id} is not a child of this page")

    return configs
