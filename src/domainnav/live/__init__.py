"""Live reload of the content data file."""

from domainnav.live.reload import DataReloader

__all__ = ["DataReloader"]
