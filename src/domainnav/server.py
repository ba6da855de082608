"""aiohttp server for domainnav.

Application factory and route registration.
"""

from aiohttp import web

from domainnav.api.admin import create_admin_routes
from domainnav.api.navigation import create_navigation_routes
from domainnav.api.pages import create_pages_routes
from domainnav.app_keys import (
    countries_key,
    reader_key,
    reloader_key,
    store_key,
    writer_key,
)
from domainnav.config import Config
from domainnav.live.reload import DataReloader, create_live_reload_routes
from domainnav.services.reader import ContentReader
from domainnav.services.writer import ContentWriter
from domainnav.store.json_file import JsonFileStore
from domainnav.store.memory import MemoryStore


def create_app(config: Config, *, store: MemoryStore | None = None) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        store: Store to serve (default: JSON file store at store.data_file)

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    if store is None:
        store = JsonFileStore(config.store.data_file)

    app[store_key] = store
    app[reader_key] = ContentReader(
        store,
        collapse_threshold=config.navigation.breadcrumb_collapse_threshold,
        fallback_title=config.navigation.fallback_section_title,
    )
    app[writer_key] = ContentWriter(store, supported_countries=config.countries.supported)
    app[countries_key] = config.countries

    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_pages_routes())
    app.router.add_routes(create_admin_routes())

    if config.live_reload.enabled and isinstance(store, JsonFileStore):
        reloader = DataReloader(store)
        app[reloader_key] = reloader
        app.router.add_routes(create_live_reload_routes(reloader))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    return app


async def _start_live_reload(app: web.Application) -> None:
    """Start live reload on application startup."""
    await app[reloader_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    """Stop live reload on application cleanup."""
    await app[reloader_key].stop()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
