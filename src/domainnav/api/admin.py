"""Administrative mutation endpoints.

Authentication is handled in front of these routes. Request bodies use
the same camelCase keys as the stored JSON document.
"""

import json
from typing import Any

from aiohttp import web

from domainnav.api.errors import error_response
from domainnav.app_keys import writer_key
from domainnav.core.errors import DomainNavError, ValidationError
from domainnav.core.models import AddressingMode, ContentType
from domainnav.core.types import PageId
from domainnav.services.writer import UNSET


def create_admin_routes() -> list[web.RouteDef]:
    return [
        web.post("/api/admin/domains", create_domain),
        web.put("/api/admin/domains/{id}", update_domain),
        web.patch("/api/admin/domains/{id}", update_domain),
        web.delete("/api/admin/domains/{id}", delete_domain),
        web.post("/api/admin/pages", create_page),
        web.put("/api/admin/pages/{id}", update_page),
        web.delete("/api/admin/pages/{id}", delete_page),
        web.put("/api/admin/sections/{id}", update_sections),
    ]


async def _read_body(request: web.Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON body: {e.msg}") from e
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _string(body: dict[str, Any], key: str, *, required: bool = False) -> str | None:
    value = body.get(key)
    if value is None:
        if required:
            raise ValidationError(f"{key} is required")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def _integer(body: dict[str, Any], key: str) -> int | None:
    value = body.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{key} must be an integer")
    return value


def _content_type(body: dict[str, Any]) -> ContentType | None:
    value = _string(body, "contentType")
    if value is None:
        return None
    try:
        return ContentType(value)
    except ValueError as e:
        allowed = ", ".join(t.value for t in ContentType)
        raise ValidationError(f"Invalid content type {value}. Valid types are: {allowed}") from e


def _addressing_mode(body: dict[str, Any]) -> AddressingMode | None:
    value = _string(body, "addressingMode")
    if value is None:
        return None
    try:
        return AddressingMode(value)
    except ValueError as e:
        raise ValidationError(
            f"Invalid addressing mode {value}. Valid modes are: single-root, multi-root"
        ) from e


async def create_domain(request: web.Request) -> web.Response:
    writer = request.app[writer_key]
    try:
        body = await _read_body(request)
        published = body.get("published", False)
        if not isinstance(published, bool):
            raise ValidationError("published must be a boolean")
        domain = await writer.create_domain(
            _string(body, "name", required=True) or "",
            _string(body, "slug", required=True) or "",
            _addressing_mode(body) or AddressingMode.MULTI_ROOT,
            category_id=_string(body, "categoryId"),
            order_in_category=_integer(body, "orderInCategory"),
            published=published,
            target_countries=body.get("targetCountries"),
        )
    except DomainNavError as e:
        return error_response(e)
    return web.json_response({"domain": domain.to_dict()}, status=201)


async def update_domain(request: web.Request) -> web.Response:
    domain_id = request.match_info["id"]
    writer = request.app[writer_key]
    try:
        body = await _read_body(request)
        published = body.get("published")
        if published is not None and not isinstance(published, bool):
            raise ValidationError("published must be a boolean")
        domain = await writer.update_domain(
            domain_id,
            name=_string(body, "name"),
            slug=_string(body, "slug"),
            addressing_mode=_addressing_mode(body),
            category_id=_string(body, "categoryId") if "categoryId" in body else UNSET,
            order_in_category=_integer(body, "orderInCategory"),
            published=published,
            target_countries=body["targetCountries"] if "targetCountries" in body else UNSET,
        )
    except DomainNavError as e:
        return error_response(e, id=domain_id)
    return web.json_response({"domain": domain.to_dict()})


async def delete_domain(request: web.Request) -> web.Response:
    domain_id = request.match_info["id"]
    writer = request.app[writer_key]
    try:
        deleted = await writer.delete_domain(domain_id)
    except DomainNavError as e:
        return error_response(e, id=domain_id)
    return web.json_response({"deletedPages": deleted})


async def create_page(request: web.Request) -> web.Response:
    writer = request.app[writer_key]
    try:
        body = await _read_body(request)
        parent_id = _string(body, "parentId")
        page = await writer.create_page(
            _string(body, "domainId", required=True) or "",
            _string(body, "title", required=True) or "",
            _string(body, "slug", required=True) or "",
            _content_type(body) or ContentType.NARRATIVE,
            parent_id=PageId(parent_id) if parent_id else None,
            target_countries=body.get("targetCountries"),
            order=_integer(body, "order"),
        )
    except DomainNavError as e:
        return error_response(e)
    return web.json_response({"page": page.to_dict()}, status=201)


async def update_page(request: web.Request) -> web.Response:
    page_id = request.match_info["id"]
    writer = request.app[writer_key]
    try:
        body = await _read_body(request)
        parent_id = UNSET
        if "parentId" in body:
            raw_parent = _string(body, "parentId")
            parent_id = PageId(raw_parent) if raw_parent else None
        page = await writer.update_page(
            page_id,
            title=_string(body, "title"),
            slug=_string(body, "slug"),
            content_type=_content_type(body),
            parent_id=parent_id,
            target_countries=body["targetCountries"] if "targetCountries" in body else UNSET,
            order=_integer(body, "order"),
        )
    except DomainNavError as e:
        return error_response(e, id=page_id)
    return web.json_response({"page": page.to_dict()})


async def delete_page(request: web.Request) -> web.Response:
    page_id = request.match_info["id"]
    writer = request.app[writer_key]
    try:
        deleted = await writer.delete_page(page_id)
    except DomainNavError as e:
        return error_response(e, id=page_id)
    return web.json_response({"deleted": deleted})


async def update_sections(request: web.Request) -> web.Response:
    page_id = request.match_info["id"]
    writer = request.app[writer_key]
    try:
        body = await _read_body(request)
        if "sections" not in body:
            raise ValidationError("sections is required")
        page = await writer.update_sections(page_id, body["sections"])
    except DomainNavError as e:
        return error_response(e, id=page_id)
    return web.json_response({"page": page.to_dict()})
