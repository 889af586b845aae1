"""CLI entry point for the label scanner."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict, replace

from dotenv import load_dotenv

from .alerts import collect_alerts
from .config import load_config
from .db import ProductDB
from .lookup import BarcodeLookup
from .ocr import ScanResult, barcode_format, has_valid_check_digit, process_text
from .recognition import create_recognizer
from .service import LabelScanner


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="shelfwatch",
        description="Track product expiry dates by scanning package labels",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the config file (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # parse
    parse_parser = sub.add_parser(
        "parse", help="Extract barcode and expiry date from recognized text"
    )
    parse_parser.add_argument(
        "text", nargs="?", default=None, help="Label text (read from stdin if omitted)"
    )
    parse_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # scan
    scan_parser = sub.add_parser("scan", help="Recognize label images and extract facts")
    scan_parser.add_argument("image", type=str, nargs="+", help="Label image files")
    scan_parser.add_argument("--json", action="store_true", help="Output as JSON")
    scan_parser.add_argument(
        "--lookup", action="store_true", help="Look up product details for the barcode"
    )
    scan_parser.add_argument(
        "--add", action="store_true", help="Store scanned products in the inventory"
    )
    scan_parser.add_argument("--name", type=str, default=None, help="Product name to store")
    scan_parser.add_argument(
        "--barcode", type=str, default=None, help="Barcode to use instead of the recognized one"
    )

    # lookup
    lookup_parser = sub.add_parser("lookup", help="Look up product details by barcode")
    lookup_parser.add_argument("barcode", type=str)
    lookup_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # list
    list_parser = sub.add_parser("list", help="List active products")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # expiring
    exp_parser = sub.add_parser("expiring", help="List products expiring soon")
    exp_parser.add_argument("--days", type=int, default=None, help="Look-ahead in days")
    exp_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # alerts
    alerts_parser = sub.add_parser("alerts", help="Show due expiry reminders")
    alerts_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # schedule
    sub.add_parser("schedule", help="Run the expiry sweep and reminder jobs")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    load_dotenv()
    config = load_config(args.config)

    match args.command:
        case "parse":
            _cmd_parse(args)
        case "scan":
            asyncio.run(_cmd_scan(config, args))
        case "lookup":
            _cmd_lookup(config, args)
        case "list":
            _cmd_list(config, args)
        case "expiring":
            _cmd_expiring(config, args)
        case "alerts":
            _cmd_alerts(config, args)
        case "schedule":
            try:
                asyncio.run(_cmd_schedule(config))
            except KeyboardInterrupt:
                print("Scheduler stopped.")


def _print_result(result: ScanResult, label: str | None = None) -> None:
    if label:
        print(f"📷 {label}")
    if result.empty:
        print("  No text recognized.")
        if not result.barcode:
            return
    else:
        print(f"  Text:        {result.text}")
    if result.barcode:
        fmt = barcode_format(result.barcode) or "unknown format"
        check = "check digit ok" if has_valid_check_digit(result.barcode) else "check digit mismatch"
        print(f"  Barcode:     {result.barcode} ({fmt}, {check})")
    else:
        print("  Barcode:     not found")
    print(f"  Expiry date: {result.expiry_date or 'not found'}")


def _cmd_parse(args) -> None:
    text = args.text if args.text is not None else sys.stdin.read()
    result = process_text(text)
    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_result(result)


async def _cmd_scan(config, args) -> None:
    if args.barcode is not None and not args.barcode.isdigit():
        print(f"Invalid barcode: {args.barcode}", file=sys.stderr)
        sys.exit(1)

    try:
        recognizer = create_recognizer(config)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    scanner = LabelScanner(recognizer)
    print("🔍 Reading labels...", file=sys.stderr)
    results = await scanner.scan_images(args.image)
    if args.barcode:
        results = [replace(r, barcode=args.barcode) for r in results]

    lookup = BarcodeLookup(
        timeout=config.lookup.timeout, use_network=config.lookup.enabled
    )
    products = []
    for result in results:
        if args.lookup and result.barcode:
            products.append(lookup.lookup(result.barcode))
        else:
            products.append(None)

    if args.add:
        db = ProductDB(config.database.path)
        try:
            for path, result, product in zip(args.image, results, products):
                if result.empty and not result.barcode:
                    continue
                product_id = db.add_from_scan(
                    result, product=product, name=args.name, image_path=path
                )
                print(f"   Stored product #{product_id}", file=sys.stderr)
        finally:
            db.close()

    if args.json:
        data = []
        for path, result, product in zip(args.image, results, products):
            entry = {"image": path, **result.to_dict()}
            if args.lookup:
                entry["product"] = asdict(product) if product else None
            data.append(entry)
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    for path, result, product in zip(args.image, results, products):
        _print_result(result, label=path)
        if product:
            print(f"  Product:     {product.name} / {product.brand} [{product.source}]")


def _cmd_lookup(config, args) -> None:
    lookup = BarcodeLookup(
        timeout=config.lookup.timeout, use_network=config.lookup.enabled
    )
    product = lookup.lookup(args.barcode)
    if args.json:
        print(json.dumps(asdict(product), ensure_ascii=False, indent=2))
        return
    print(f"{product.name}")
    print(f"  Brand:    {product.brand}")
    print(f"  Category: {product.category}")
    if product.description:
        print(f"  About:    {product.description}")
    print(f"  Source:   {product.source}")


def _print_products(products: list[dict], as_json: bool, empty_message: str) -> None:
    if as_json:
        print(json.dumps(products, ensure_ascii=False, indent=2))
        return
    if not products:
        print(empty_message)
        return
    for p in products:
        expiry = p["expiry_date"] or "no date"
        print(f"  #{p['id']:<4} {p['name']:<30} {expiry:<10}  [{p['category']}]")


def _cmd_list(config, args) -> None:
    db = ProductDB(config.database.path)
    try:
        products = db.get_active()
    finally:
        db.close()
    _print_products(products, args.json, "No active products.")


def _cmd_expiring(config, args) -> None:
    days = args.days if args.days is not None else config.alerts.expiring_days
    db = ProductDB(config.database.path)
    try:
        products = db.get_expiring_soon(days)
    finally:
        db.close()
    _print_products(products, args.json, f"Nothing expires within {days} days.")


def _cmd_alerts(config, args) -> None:
    db = ProductDB(config.database.path)
    try:
        products = db.get_active() + db.get_expired()
    finally:
        db.close()

    alerts = collect_alerts(products)
    if args.json:
        data = [{**asdict(a), "level": a.level.value} for a in alerts]
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return
    if not alerts:
        print("No reminders due.")
        return
    for a in alerts:
        print(f"  [{a.level.value}] {a.message} ({a.expiry_date})")


async def _cmd_schedule(config) -> None:
    from .scheduler import ExpiryScheduler

    scheduler = ExpiryScheduler(config)
    scheduler.start()
    for job in scheduler.get_jobs():
        print(f"  {job['id']}: next run {job['next_run']}")
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.stop()
