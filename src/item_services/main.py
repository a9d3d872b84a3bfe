from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime

from item_services.api import StaticItemsAPI
from item_services.composition import ItemServices, build_item_services
from item_services.config import RuntimeConfig
from item_services.dispatch import load_result
from item_services.models import Card, Friend, LoadResult, Transfer
from item_services.tracing import configure_tracing, traceable


def demo_api(failures: int = 0) -> StaticItemsAPI:
    """Small fixed data set for trying the wiring without a backend."""
    return StaticItemsAPI(
        friends=[
            Friend(id="f1", name="Ada Lovelace", phone="+44 20 7946 0001"),
            Friend(id="f2", name="Alan Turing", phone="+44 20 7946 0002"),
        ],
        cards=[Card(id="c1", number="**** **** **** 4242", holder="Ada Lovelace")],
        transfers=[
            Transfer(
                id="t1",
                description="Dinner",
                amount=42.5,
                currency_code="GBP",
                sender="Ada Lovelace",
                recipient="Alan Turing",
                is_sender=True,
                date=datetime(2024, 5, 1, 19, 30),
            ),
            Transfer(
                id="t2",
                description="Books",
                amount=18.0,
                currency_code="GBP",
                sender="Alan Turing",
                recipient="Ada Lovelace",
                is_sender=False,
                date=datetime(2024, 5, 3, 9, 15),
            ),
        ],
        failures=failures,
    )


@traceable(name="load_all_items", run_type="chain")
async def load_all(services: ItemServices) -> dict[str, LoadResult]:
    """Load every list concurrently; each list resolves to its own result."""
    named = services.as_dict()
    results = await asyncio.gather(*(load_result(service) for service in named.values()))
    await services.flush()
    return dict(zip(named.keys(), results))


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Load friends, transfers and cards lists")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--base-url", default=None, help="Items API base URL (default: ITEM_SERVICES_API_BASE_URL)")
    parser.add_argument("--premium", action="store_true", help="Enable friends caching and cache fallback")
    parser.add_argument("--cache-path", default=None, help="Persist the friends cache to this JSON file")
    parser.add_argument("--demo", action="store_true", help="Use built-in sample data instead of the HTTP API")
    parser.add_argument(
        "--demo-failures",
        type=int,
        default=0,
        help="With --demo, fail this many calls per endpoint before succeeding",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def _config_from_args(args: argparse.Namespace) -> RuntimeConfig:
    config = RuntimeConfig.from_env()
    if args.base_url:
        config.api_base_url = args.base_url
    if args.premium:
        config.premium = True
    if args.cache_path:
        config.cache_path = args.cache_path
    return config


def _summary_line(name: str, result: LoadResult) -> str:
    if result.error is not None:
        return f"{name}: failed ({type(result.error).__name__}: {result.error})"
    return f"{name}: {len(result.items or ())} items"


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    configure_tracing()

    config = _config_from_args(args)
    if args.demo:
        api = demo_api(failures=args.demo_failures)
        services = build_item_services(config, friends_api=api, card_api=api, transfers_api=api)
    else:
        services = build_item_services(config)

    results = asyncio.run(load_all(services))

    if args.json:
        print(json.dumps({name: result.to_dict() for name, result in results.items()}, indent=2))
    else:
        for name, result in results.items():
            print(_summary_line(name, result))

    return 1 if all(not result.ok for result in results.values()) else 0


if __name__ == "__main__":
    sys.exit(main())
