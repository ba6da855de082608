"""Pages API endpoint.

Resolves a slug path inside a domain and returns the page view with
breadcrumbs, children and section layout.
"""

from aiohttp import web

from domainnav.api.country import get_viewer_country
from domainnav.app_keys import reader_key
from domainnav.core.errors import UnresolvedPath


def create_pages_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/pages/{domain}", get_page),
        web.get("/api/pages/{domain}/{path:.*}", get_page),
    ]


async def get_page(request: web.Request) -> web.Response:
    domain_slug = request.match_info["domain"]
    path = request.match_info.get("path", "")
    slugs = [segment for segment in path.split("/") if segment]
    reader = request.app[reader_key]

    try:
        view = await reader.resolve_page(domain_slug, slugs, get_viewer_country(request))
    except UnresolvedPath:
        # same response whether the page is missing or hidden from this viewer
        return web.json_response(
            {"error": "Page not found", "path": "/".join([domain_slug, *slugs])},
            status=404,
        )

    return web.json_response(view.to_dict(), headers={"Vary": "Cookie"})
