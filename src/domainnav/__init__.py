"""Domainnav - hierarchical content addressing and navigation."""

__version__ = "0.1.0"
