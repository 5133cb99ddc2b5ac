from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..config import SizeSettings, load_settings
from ..logging import get_logger
from ..sizes import (
    UnitCategory,
    convert_size,
    find_closest_size,
    format_price_per_unit,
    get_locale,
    group_by_category,
    parse_size,
    price_per_unit,
    rank_by_price_per_unit,
    rank_by_value,
    suggest_standard_size,
)


LOG = get_logger("sizes-api")


async def _json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Request body must be JSON") from exc
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return body


def _required_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{name} must be a string")
    return value


def _str_list(value: Any, name: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise HTTPException(status_code=400, detail=f"{name} must be a list of strings")
    return value


def _parse_float(value: Optional[str], name: str) -> float:
    try:
        parsed = float(value) if value is not None else math.nan
    except (TypeError, ValueError):
        parsed = math.nan
    if not math.isfinite(parsed):
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return parsed


def create_app(
    settings: Optional[SizeSettings] = None,
    *,
    allow_origins: Optional[List[str]] = None,
) -> Starlette:
    """Create a Starlette app exposing the size engine as a JSON API."""

    cfg = settings or load_settings()
    locale = get_locale(cfg.locale_code)
    LOG.info("Sizes API using locale=%s tolerance=%.2f", locale.code, cfg.tolerance)

    async def health(_: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "locale": locale.code})

    async def parse(request: Request) -> JSONResponse:
        size = request.query_params.get("size")
        if size is None:
            raise HTTPException(status_code=400, detail="size is required")
        parsed = parse_size(size, locale=locale)
        return JSONResponse({"parsed": parsed.to_dict() if parsed else None})

    async def convert(request: Request) -> JSONResponse:
        qp = request.query_params
        size = qp.get("size")
        unit = qp.get("unit")
        if size is None or unit is None:
            raise HTTPException(status_code=400, detail="size and unit are required")
        return JSONResponse({"converted": convert_size(size, unit, locale=locale)})

    async def unit_price(request: Request) -> JSONResponse:
        qp = request.query_params
        size = qp.get("size")
        if size is None:
            raise HTTPException(status_code=400, detail="size is required")
        price = _parse_float(qp.get("price"), "price")
        ppu = price_per_unit(price, size, locale=locale)
        formatted = None
        if ppu is not None:
            parsed = parse_size(size, locale=locale)
            formatted = format_price_per_unit(ppu, parsed.category, locale=locale)
        return JSONResponse({"pricePerUnit": ppu, "formatted": formatted})

    async def match(request: Request) -> JSONResponse:
        body = await _json_body(request)
        target = _required_str(body.get("target"), "target")
        candidates = _str_list(body.get("candidates"), "candidates")
        tolerance = body.get("tolerance", cfg.tolerance)
        if isinstance(tolerance, bool) or not isinstance(tolerance, (int, float)):
            raise HTTPException(status_code=400, detail="tolerance must be a number")
        result = find_closest_size(target, candidates, tolerance, locale=locale)
        return JSONResponse(result.to_dict())

    async def rank(request: Request) -> JSONResponse:
        body = await _json_body(request)
        sizes = _str_list(body.get("sizes"), "sizes")
        return JSONResponse(
            {
                "ranked": rank_by_value(sizes, locale=locale),
                "groups": group_by_category(sizes, locale=locale),
            }
        )

    async def suggest(request: Request) -> JSONResponse:
        body = await _json_body(request)
        sizes = _str_list(body.get("sizes"), "sizes")
        category = body.get("category")
        if category is not None:
            try:
                category = UnitCategory(category)
            except ValueError as exc:
                raise HTTPException(status_code=400, detail="Invalid category") from exc
        return JSONResponse({"suggested": suggest_standard_size(sizes, category, locale=locale)})

    async def best_value(request: Request) -> JSONResponse:
        body = await _json_body(request)
        offers = body.get("offers")
        if not isinstance(offers, list) or not all(isinstance(o, dict) for o in offers):
            raise HTTPException(status_code=400, detail="offers must be a list of objects")
        pairs = [(_required_str(o.get("size"), "offers[].size"), o.get("price")) for o in offers]
        rows = rank_by_price_per_unit(pairs, locale=locale)
        return JSONResponse({"items": [r.to_dict() for r in rows]})

    routes = [
        Route("/api/health", health, methods=["GET"]),
        Route("/api/sizes/parse", parse, methods=["GET"]),
        Route("/api/sizes/convert", convert, methods=["GET"]),
        Route("/api/sizes/price-per-unit", unit_price, methods=["GET"]),
        Route("/api/sizes/match", match, methods=["POST"]),
        Route("/api/sizes/rank", rank, methods=["POST"]),
        Route("/api/sizes/suggest", suggest, methods=["POST"]),
        Route("/api/sizes/best-value", best_value, methods=["POST"]),
    ]

    app = Starlette(debug=False, routes=routes)

    origins = list(allow_origins or cfg.allow_origins)
    if "*" in origins:
        cors_allow_origins = ["*"]
    else:
        cors_allow_origins = origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


__all__ = ["create_app"]
