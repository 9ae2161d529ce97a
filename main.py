"""
Console entry point for exercising the booking core against MyTime.

Usage:
    Catalog view:    python main.py catalog
    Dry-run spa:     python main.py compile --pet 2499475 --type spa --start 2026-01-06T11:00:00Z \
                         --spa-primary Bath --addon Nails --addon "Teeth brushing"
    Daycare today:   python main.py book --pet 2499475 --type daycare --date 2026-01-06
    Boarding:        python main.py compile --pet 2499475 --type boarding --service 91404079 \
                         --date 2026-01-06 --checkout-date 2026-01-09
    Explicit ids:    python main.py compile --pet 2499475 --service 99860007 --start 2026-01-06T11:00:00Z
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import date, datetime

from quicker_checker.booking import (
    build_boarding_request,
    build_daycare_request,
    build_evaluation_request,
    build_spa_request,
    fallback_daycare_window,
    select_spa_services,
)
from quicker_checker.catalog.cache import CatalogCache
from quicker_checker.clients.mytime import build_appointment_payload
from quicker_checker.config import AppConfig, settings
from quicker_checker.errors import BookingError
from quicker_checker.factory import build_booking_stack
from quicker_checker.schemas.booking_schema import BookingRequest
from quicker_checker.schemas.catalog_schema import ServiceFamily

logger = logging.getLogger(__name__)


def _parse_instant(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def build_request(
    args: argparse.Namespace, catalog: CatalogCache, config: AppConfig
) -> BookingRequest:
    """
    Turn console arguments into a BookingRequest.

    Explicit ``--service`` ids are booked as given. Without them, daycare
    picks the weekday/Saturday/Sunday variation (and the default open
    window when only ``--date`` is given), evaluation uses the configured
    evaluation service, and spa resolves ``--spa-primary``/``--addon``
    names through the catalog. Boarding with ``--date`` uses the default
    check-in and checkout hours.

    Raises:
        ValueError: If the arguments do not describe a bookable request.
    """
    family = ServiceFamily(args.type) if args.type else None
    start_at = _parse_instant(args.start) if args.start else None
    service_map = config.service_map
    tz = config.booking.tz

    if family is ServiceFamily.BOARDING and args.date:
        if not args.service:
            raise ValueError("Boarding needs --service to pick the room type")
        checkout = date.fromisoformat(args.checkout_date) if args.checkout_date else None
        request = build_boarding_request(
            args.pet,
            args.service[0],
            date.fromisoformat(args.date),
            checkout,
            client_id=args.client,
            booking_config=config.booking,
        )
    elif family is ServiceFamily.DAYCARE and not args.service:
        if start_at is None:
            if not args.date:
                raise ValueError("Daycare needs --start or --date")
            window = fallback_daycare_window(date.fromisoformat(args.date), tz)
            if window is None:
                raise ValueError(f"Daycare is closed for the rest of {args.date}")
            start_at = window["begin_at"]
        request = build_daycare_request(args.pet, start_at, service_map, client_id=args.client, tz=tz)
    elif family is ServiceFamily.EVALUATION and not args.service:
        if start_at is None:
            raise ValueError("Evaluation needs --start")
        request = build_evaluation_request(args.pet, start_at, service_map, client_id=args.client)
    elif family is ServiceFamily.SPA and not args.service and (args.spa_primary or args.addon):
        if start_at is None:
            raise ValueError("Spa needs --start")
        await catalog.refresh(force=False)
        service_ids = select_spa_services(args.spa_primary, args.addon or [], catalog, service_map)
        request = build_spa_request(args.pet, start_at, service_ids, client_id=args.client)
    else:
        if start_at is None:
            raise ValueError("--start is required")
        request = BookingRequest(
            service_type=family,
            service_ids=args.service or [],
            start_at=start_at,
            end_at=_parse_instant(args.end) if args.end else None,
            pet_id=args.pet,
            client_id=args.client,
        )

    if args.resource:
        request = request.model_copy(update={"resource_id": args.resource})
    return request


async def _show_catalog() -> int:
    stack = build_booking_stack(settings)
    try:
        cache = stack.service.compiler.catalog
        await cache.refresh(force=True)
        if cache.last_error:
            logger.error("Catalog unavailable: %s", cache.last_error)
            return 1
        for variation in sorted(cache.all(), key=lambda v: v.name):
            sys.stdout.write(
                f"{variation.id:>12}  {cache.resolve_duration(variation.id):>6} min  "
                f"${variation.unit_price:>8.2f}  {'add-on ' if variation.is_add_on else ''}"
                f"{variation.name}\n"
            )
        return 0
    finally:
        await stack.aclose()


async def _compile(args: argparse.Namespace) -> int:
    stack = build_booking_stack(settings)
    try:
        request = await build_request(args, stack.service.compiler.catalog, settings)
        appointment = await stack.service.compiler.compile(request)
    except ValueError as exc:
        logger.error("Invalid request: %s", exc)
        return 2
    except BookingError as exc:
        logger.error("Compile failed at %s: %s", exc.stage, exc.message)
        return 1
    finally:
        await stack.aclose()
    sys.stdout.write(json.dumps(build_appointment_payload(appointment), indent=2) + "\n")
    return 0


async def _book(args: argparse.Namespace) -> int:
    stack = build_booking_stack(settings)
    try:
        request = await build_request(args, stack.service.compiler.catalog, settings)
        result = await stack.service.book(request)
    except ValueError as exc:
        logger.error("Invalid request: %s", exc)
        return 2
    finally:
        await stack.aclose()
    sys.stdout.write(result.model_dump_json(indent=2) + "\n")
    return 0 if result.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Quicker Checker booking console.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("catalog", help="Refresh and print the merged service catalog.")
    for name, help_text in [
        ("compile", "Compile a booking and print the payload without submitting."),
        ("book", "Compile, submit and (for same-day daycare) check in."),
    ]:
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("--pet", required=True, help="Pet (child) id.")
        cmd.add_argument("--type", choices=[f.value for f in ServiceFamily], default=None)
        cmd.add_argument("--service", action="append", help="Service id; repeat for add-ons.")
        cmd.add_argument("--start", default=None, help="Start instant, ISO-8601.")
        cmd.add_argument("--end", default=None, help="Boarding checkout instant, ISO-8601.")
        cmd.add_argument("--date", default=None, help="Daycare day or boarding check-in day, YYYY-MM-DD.")
        cmd.add_argument("--checkout-date", default=None, help="Boarding checkout day, YYYY-MM-DD.")
        cmd.add_argument("--spa-primary", default=None, help="Spa service name, e.g. Bath.")
        cmd.add_argument("--addon", action="append", help="Spa add-on name; repeatable.")
        cmd.add_argument("--client", default=None, help="Client id.")
        cmd.add_argument("--resource", default=None, help="Explicit staff/resource id.")
    return parser


def main() -> None:
    args = build_parser().parse_args()

    if args.command == "catalog":
        code = asyncio.run(_show_catalog())
    elif args.command == "compile":
        code = asyncio.run(_compile(args))
    else:
        code = asyncio.run(_book(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
