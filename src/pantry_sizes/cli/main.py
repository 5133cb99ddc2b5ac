from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Sequence

from ..config import load_settings
from ..logging import get_logger
from ..sizes import (
    UnitCategory,
    convert_size,
    find_closest_size,
    format_price_per_unit,
    get_locale,
    parse_size,
    price_per_unit,
    suggest_standard_size,
)

LOG = get_logger("cli-main")


def _emit(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False))


def main(argv: Sequence[str] | None = None) -> int:
    provided = list(argv) if argv is not None else sys.argv[1:]
    LOG.debug(f"CLI invoked with arguments: {provided}")

    settings = load_settings()
    locale = get_locale(settings.locale_code)

    parser = argparse.ArgumentParser(
        prog="pantry-sizes",
        description="Parse, price and match grocery product sizes.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse one or more size strings.")
    parse_cmd.add_argument("sizes", nargs="+")

    def _parse(ns: argparse.Namespace) -> int:
        results = [parse_size(s, locale=locale) for s in ns.sizes]
        _emit([r.to_dict() if r else None for r in results])
        return 0 if all(results) else 1

    parse_cmd.set_defaults(handler=_parse)

    convert_cmd = subparsers.add_parser("convert", help="Convert a size to another unit of the same kind.")
    convert_cmd.add_argument("size")
    convert_cmd.add_argument("unit")

    def _convert(ns: argparse.Namespace) -> int:
        converted = convert_size(ns.size, ns.unit, locale=locale)
        if converted is None:
            LOG.error(f"Cannot convert '{ns.size}' to '{ns.unit}'")
            return 1
        print(converted)
        return 0

    convert_cmd.set_defaults(handler=_convert)

    price_cmd = subparsers.add_parser("price", help="Price per 100ml / 100g / item.")
    price_cmd.add_argument("price", type=float)
    price_cmd.add_argument("size")

    def _price(ns: argparse.Namespace) -> int:
        ppu = price_per_unit(ns.price, ns.size, locale=locale)
        if ppu is None:
            LOG.error(f"No unit price for '{ns.size}'")
            return 1
        parsed = parse_size(ns.size, locale=locale)
        _emit({"pricePerUnit": ppu, "formatted": format_price_per_unit(ppu, parsed.category, locale=locale)})
        return 0

    price_cmd.set_defaults(handler=_price)

    match_cmd = subparsers.add_parser("match", help="Find the closest size among candidates.")
    match_cmd.add_argument("target")
    match_cmd.add_argument("candidates", nargs="+")
    match_cmd.add_argument("--tolerance", type=float, default=settings.tolerance)

    def _match(ns: argparse.Namespace) -> int:
        result = find_closest_size(ns.target, ns.candidates, ns.tolerance, locale=locale)
        _emit(result.to_dict())
        return 0 if result.best_match else 1

    match_cmd.set_defaults(handler=_match)

    suggest_cmd = subparsers.add_parser("suggest", help="Pick the most standard-looking size.")
    suggest_cmd.add_argument("sizes", nargs="+")
    suggest_cmd.add_argument("--category", choices=[c.value for c in UnitCategory])

    def _suggest(ns: argparse.Namespace) -> int:
        suggested = suggest_standard_size(ns.sizes, ns.category, locale=locale)
        if suggested is None:
            return 1
        print(suggested)
        return 0

    suggest_cmd.set_defaults(handler=_suggest)

    serve_cmd = subparsers.add_parser("serve", help="Run the sizes JSON API.")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=8002)
    serve_cmd.add_argument("--reload", action="store_true", help="Enable auto-reload (development only)")
    serve_cmd.add_argument("--log-level", default="info")
    serve_cmd.add_argument(
        "--allow-origin",
        action="append",
        dest="allow_origins",
        help="Allowed CORS origin (can be provided multiple times, use '*' for any).",
    )

    def _serve(ns: argparse.Namespace) -> int:
        from ..api import create_app
        import uvicorn

        if ns.reload:
            # reload needs an import string; origins come from settings
            uvicorn.run(
                "pantry_sizes.api.app:create_app",
                factory=True,
                host=ns.host,
                port=ns.port,
                reload=True,
                log_level=ns.log_level,
            )
            return 0
        app = create_app(settings, allow_origins=ns.allow_origins)
        uvicorn.run(app, host=ns.host, port=ns.port, log_level=ns.log_level)
        return 0

    serve_cmd.set_defaults(handler=_serve)

    args = parser.parse_args(provided)
    code = args.handler(args)
    LOG.debug(f"Subcommand '{args.command}' finished with exit code {code}.")
    return code


if __name__ == "__main__":
    sys.exit(main())
