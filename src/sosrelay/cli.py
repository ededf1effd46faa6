"""
SOS Relay CLI entrypoint.

This CLI is intended for quick local checks without running the API:
- `resolve`: show which district (and provenance) a coordinate resolves to.
- `slugify`: show how free text normalizes to a district slug.
- `test-alert`: send the canned test alert through the real dispatch path.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from sosrelay.alerts.dispatcher import FirebasePublisher, NotificationDispatcher
from sosrelay.alerts.normalizer import topic_for
from sosrelay.alerts.service import AlertService, build_test_alert
from sosrelay.config.settings import Settings, get_settings
from sosrelay.core.geo import GeoPoint
from sosrelay.core.logging import configure_logging
from sosrelay.core.slug import slugify
from sosrelay.domain.errors import DeliveryError, RequestValidationError
from sosrelay.resolver.base import DistrictQuery
from sosrelay.resolver.factory import build_resolver


def _settings_for(args: argparse.Namespace) -> Settings:
    settings = get_settings()
    strategy = getattr(args, "strategy", None)
    if not strategy:
        return settings
    resolver = settings.resolver.model_copy(update={"strategy": strategy})
    return settings.model_copy(update={"resolver": resolver})


def _cmd_resolve(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    resolver = build_resolver(settings)
    try:
        resolution = resolver.resolve(
            DistrictQuery(location=GeoPoint(lat=float(args.lat), lon=float(args.lon)), asserted_district=args.district)
        )
    except RequestValidationError as e:
        print(json.dumps(e.as_response(), ensure_ascii=False))
        return 2
    out = {
        "strategy": resolver.name,
        "district": resolution.district,
        "provenance": resolution.provenance,
        "degraded": resolution.degraded,
        "topic": topic_for(resolution.district, settings.messaging.topic_prefix),
    }
    if args.json:
        print(json.dumps(out, ensure_ascii=False, indent=2))
    else:
        print(f"{out['district']} ({out['provenance']}) -> {out['topic']}")
    return 0


def _cmd_slugify(args: argparse.Namespace) -> int:
    for text in args.text:
        print(slugify(text))
    return 0


def _cmd_test_alert(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    messaging = settings.messaging
    if args.dry_run:
        messaging = messaging.model_copy(update={"dry_run": True})

    service = AlertService(
        build_resolver(settings),
        NotificationDispatcher(FirebasePublisher(messaging)),
        topic_prefix=messaging.topic_prefix,
    )
    try:
        outcome = service.handle_body(build_test_alert(settings.test_alert))
    except RequestValidationError as e:
        print(json.dumps(e.as_response(), ensure_ascii=False))
        return 2
    except DeliveryError as e:
        print(f"Delivery failed: {e.message}")
        return 1

    print(f"Sent {outcome.request.sos_id} to {outcome.topic} (message_id={outcome.message_id})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the SOS Relay CLI."""
    parser = argparse.ArgumentParser(prog="sosrelay")
    sub = parser.add_subparsers(dest="command", required=True)

    res = sub.add_parser("resolve", help="Resolve a coordinate to a district.")
    res.add_argument("--lat", required=True, type=float)
    res.add_argument("--lon", required=True, type=float)
    res.add_argument("--strategy", choices=["static", "geocode", "asserted"], default=None)
    res.add_argument("--district", default=None, help="Client-asserted district (asserted strategy).")
    res.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    res.set_defaults(func=_cmd_resolve)

    slug = sub.add_parser("slugify", help="Normalize place names to district slugs.")
    slug.add_argument("text", nargs="+")
    slug.set_defaults(func=_cmd_slugify)

    test = sub.add_parser("test-alert", help="Send the canned test alert via Firebase.")
    test.add_argument("--strategy", choices=["static", "geocode", "asserted"], default=None)
    test.add_argument("--dry-run", action="store_true", help="Validate with FCM without delivering.")
    test.set_defaults(func=_cmd_test_alert)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m sosrelay.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
