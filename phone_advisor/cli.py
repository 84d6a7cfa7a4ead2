from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from config import LOG_LEVEL, USE_REASONER
from .formatting import format_price, monthly_payment
from .models import PreferenceProfile, ProfileValidationError, RecommendationResult
from .services import (
    BEST_UPGRADE_CATEGORIES,
    CatalogError,
    InMemoryCatalog,
    NoAffordableDeviceError,
    RecommendationService,
    best_upgrades,
    estimate_trade_in,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Recommend a phone upgrade from a catalog, with optional trade-in estimate."
    )
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level (default: %(default)s)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    rec = subparsers.add_parser("recommend", help="Recommend a phone upgrade")
    rec.add_argument("--budget", type=int, required=True, help="Maximum price in USD")
    rec.add_argument(
        "--usage",
        default="moderate",
        help="Usage type: light, moderate, heavy or professional (default: moderate)",
    )
    rec.add_argument(
        "--priority",
        action="append",
        default=[],
        help="Priority (camera, gaming, battery, display, design); repeat for several",
    )
    rec.add_argument("--current-phone", default="", help="Current phone model, e.g. 'Samsung Galaxy S22'")
    rec.add_argument("--current-storage", default="", help="Current storage tier, e.g. 256GB")
    rec.add_argument("--trade-in", action="store_true", help="Include trade-in value of the current phone")
    rec.add_argument("--condition", default="good", help="Condition of the current phone (default: good)")
    rec.add_argument("--catalog", type=Path, help="Path to a JSON catalog (default: built-in sample)")
    rec.add_argument("--no-reasoner", action="store_true", help="Skip the LLM and use rule-based ranking")
    rec.add_argument("--json", action="store_true", help="Print the result as JSON")

    trade = subparsers.add_parser("trade-in", help="Estimate the trade-in value of a phone")
    trade.add_argument("model", help="Phone model, e.g. 'Samsung Galaxy S24 Ultra'")
    trade.add_argument("--storage", default="", help="Storage tier, e.g. 512GB")
    trade.add_argument("--condition", default="good", help="excellent, good, fair or poor (default: good)")
    trade.add_argument("--json", action="store_true", help="Print the quote as JSON")

    cat = subparsers.add_parser("catalog", help="List the devices in the catalog")
    cat.add_argument("--catalog", type=Path, help="Path to a JSON catalog (default: built-in sample)")

    best = subparsers.add_parser("best-upgrades", help="List curated upgrade picks for a category")
    best.add_argument("category", choices=BEST_UPGRADE_CATEGORIES, help="Upgrade category")
    best.add_argument("--catalog", type=Path, help="Path to a JSON catalog (default: built-in sample)")

    return parser.parse_args(argv)


def _load_catalog(path: Path | None) -> InMemoryCatalog:
    if path is None:
        return InMemoryCatalog()
    try:
        return InMemoryCatalog.from_json(path)
    except CatalogError as e:
        raise SystemExit(str(e)) from e


def _print_result(result: RecommendationResult) -> None:
    for label, candidate in [("Best match", result.best_match)] + [
        (f"Alternative {i}", alt) for i, alt in enumerate(result.alternatives, start=1)
    ]:
        device = candidate.device
        print(f"{label}: {device.model} ({candidate.match_score}% match)")
        print(f"   {format_price(device.price)} or {monthly_payment(device.price)}")
        for reason in candidate.reasons:
            print(f"   - {reason}")
        if candidate.trade_in_value is not None:
            net = max(0, device.price - candidate.trade_in_value)
            print(f"   Trade-in: {format_price(candidate.trade_in_value)} (you pay {format_price(net)})")
        print()
    if result.source == "fallback":
        print("(ranked by built-in rules)")


def _run_recommend(args: argparse.Namespace) -> None:
    try:
        profile = PreferenceProfile(
            usage_type=args.usage,
            budget=args.budget,
            priorities=args.priority,
            current_phone=args.current_phone,
            current_storage=args.current_storage,
            include_trade_in=args.trade_in,
            trade_in_condition=args.condition,
        )
    except ProfileValidationError as e:
        raise SystemExit(str(e)) from e

    catalog = _load_catalog(args.catalog)
    service = RecommendationService(use_reasoner=USE_REASONER and not args.no_reasoner)

    try:
        result = service.recommend(profile, catalog.list_devices())
    except NoAffordableDeviceError as e:
        raise SystemExit(str(e)) from e

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result)


def _run_trade_in(args: argparse.Namespace) -> None:
    quote = estimate_trade_in(args.model, args.storage, args.condition)
    if args.json:
        print(json.dumps(quote.to_dict(), indent=2))
        return
    print(f"{quote.model} ({quote.storage_tier or 'base storage'}, {quote.condition.value})")
    print(f"Estimated trade-in value: {format_price(quote.value)}")


def _run_catalog(args: argparse.Namespace) -> None:
    for device in _load_catalog(args.catalog).list_devices():
        print(f"[{device.id}] {device.model:<20} {format_price(device.price):>8}  {device.processor}")


def _run_best_upgrades(args: argparse.Namespace) -> None:
    devices = best_upgrades(_load_catalog(args.catalog).list_devices(), args.category)
    if not devices:
        print(f"No devices in the {args.category} category")
    for device in devices:
        print(f"[{device.id}] {device.model:<20} {format_price(device.price):>8}  {device.main_camera}")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "recommend":
        _run_recommend(args)
    elif args.command == "trade-in":
        _run_trade_in(args)
    elif args.command == "best-upgrades":
        _run_best_upgrades(args)
    else:
        _run_catalog(args)


if __name__ == "__main__":
    main()
