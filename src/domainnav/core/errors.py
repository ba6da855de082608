"""Error taxonomy for navigation resolution and content mutations."""


class DomainNavError(Exception):
    """Base class for all domainnav errors."""


class ValidationError(DomainNavError):
    """Input data failed validation (slug format, section config, countries)."""


class EntityNotFound(DomainNavError):
    """A domain or page looked up by id does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id


class InvalidParent(DomainNavError):
    """Requested parent is missing, in another domain, or would create a cycle."""

    def __init__(self, parent_id: str, reason: str) -> None:
        super().__init__(f"Invalid parent page {parent_id}: {reason}")
        self.parent_id = parent_id
        self.reason = reason


class SlugConflict(DomainNavError):
    """A sibling with the same slug already exists in the same scope."""

    def __init__(self, slug: str, parent_id: str | None, *, kind: str = "page") -> None:
        if kind == "domain":
            message = f'A domain with slug "{slug}" already exists'
        else:
            context = "under the same parent" if parent_id else "at the root level"
            message = f'A {kind} with slug "{slug}" already exists {context}'
        super().__init__(message)
        self.slug = slug
        self.parent_id = parent_id
        self.kind = kind


class UnresolvedPath(DomainNavError):
    """Requested path matches no visible node.

    Raised the same way whether the target does not exist or is hidden
    from the viewer, so restricted content cannot be probed.
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"Path not found: {path}")
        self.path = path


class CycleDetected(DomainNavError):
    """Parent chain loops back on itself.

    Never raised by the hierarchy builder. Instances are recorded on the
    built tree and logged, and the offending node is promoted to a root.
    """

    def __init__(self, page_id: str, chain: list[str]) -> None:
        super().__init__(f"Cycle detected at page {page_id}: {' -> '.join(chain)}")
        self.page_id = page_id
        self.chain = chain
