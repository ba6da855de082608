"""Navigation API endpoints.

Provides the header/sidebar payload, the per-path page context and the
nested tree of one domain.
"""

from aiohttp import web

from domainnav.api.country import get_viewer_country
from domainnav.app_keys import reader_key
from domainnav.core.errors import UnresolvedPath


def create_navigation_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/navigation", get_navigation),
        web.get("/api/page-context", get_page_context),
        web.get("/api/domains/{slug}/tree", get_domain_tree),
    ]


async def get_navigation(request: web.Request) -> web.Response:
    reader = request.app[reader_key]
    payload = await reader.navigation(get_viewer_country(request))
    return web.json_response(payload, headers={"Vary": "Cookie"})


async def get_page_context(request: web.Request) -> web.Response:
    path = request.query.get("path", "")
    reader = request.app[reader_key]
    try:
        payload = await reader.page_context(path, get_viewer_country(request))
    except UnresolvedPath:
        return web.json_response(
            {"error": "Path not found", "path": path},
            status=404,
        )
    return web.json_response(payload, headers={"Vary": "Cookie"})


async def get_domain_tree(request: web.Request) -> web.Response:
    slug = request.match_info["slug"]
    reader = request.app[reader_key]

    max_depth = None
    if "depth" in request.query:
        try:
            max_depth = int(request.query["depth"])
        except ValueError:
            return web.json_response({"error": "depth must be an integer"}, status=400)
        if max_depth < 1:
            return web.json_response({"error": "depth must be at least 1"}, status=400)

    try:
        items = await reader.domain_navigation(
            slug, get_viewer_country(request), max_depth=max_depth
        )
    except UnresolvedPath:
        return web.json_response(
            {"error": "Domain not found", "path": f"/domain/{slug}"},
            status=404,
        )
    return web.json_response({"items": items}, headers={"Vary": "Cookie"})
