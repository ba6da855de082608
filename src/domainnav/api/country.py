"""Viewer country resolution for incoming requests."""

from aiohttp import web

from domainnav.app_keys import countries_key


def get_viewer_country(request: web.Request) -> str:
    """Resolve the viewer's country code.

    Checks the country cookie, then the country header, then falls back to
    the configured default. Unsupported values fall back as well.
    """
    countries = request.app[countries_key]
    for raw in (
        request.cookies.get(countries.cookie_name),
        request.headers.get(countries.header_name),
    ):
        if raw:
            code = raw.strip().upper()
            if code in countries.supported:
                return code
    return countries.default
