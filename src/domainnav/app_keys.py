"""Application keys for type-safe app configuration access."""

from aiohttp import web

from domainnav.config import CountriesConfig
from domainnav.live.reload import DataReloader
from domainnav.services.reader import ContentReader
from domainnav.services.writer import ContentWriter
from domainnav.store.memory import MemoryStore

store_key = web.AppKey("store", MemoryStore)
reader_key = web.AppKey("reader", ContentReader)
writer_key = web.AppKey("writer", ContentWriter)
countries_key = web.AppKey("countries", CountriesConfig)
reloader_key = web.AppKey("reloader", DataReloader)
