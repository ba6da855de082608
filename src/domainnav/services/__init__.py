"""Read and write services over the entity store."""

from domainnav.services.reader import ContentReader, PageView
from domainnav.services.writer import UNSET, ContentWriter

__all__ = ["UNSET", "ContentReader", "ContentWriter", "PageView"]
