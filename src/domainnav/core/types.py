"""Core type definitions."""

from typing import NewType

# URL path for routing (e.g., "/domain/webdev/with-code")
URLPath = NewType("URLPath", str)

PageId = NewType("PageId", str)
DomainId = NewType("DomainId", str)

# ISO 3166-1 alpha-2 code, upper-case (e.g., "IN")
CountryCode = NewType("CountryCode", str)

# Special target country meaning "visible everywhere"
ALL_COUNTRIES = CountryCode("ALL")

# Reserved slug of the hidden root page in single-root domains
ROOT_SLUG = "__main__"

# First segment of every domain URL
DOMAIN_PREFIX = "domain"
