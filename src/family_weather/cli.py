import argparse
import asyncio
import os

from family_weather.client.family import FamilySettings, JsonFileStore
from family_weather.client.location import IpGeolocationSource, LocationResolver, StaticLocationSource
from family_weather.client.relay import RelayClient
from family_weather.client.render import render_view
from family_weather.client.session import WeatherSession
from family_weather.core import settings
from family_weather.core.logger import setup_logging


def _serve(args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run("family_weather.server:app", host=args.host, port=args.port, reload=args.reload)


def _show(args: argparse.Namespace) -> None:
    if (args.lat is None) != (args.lng is None):
        print("❌ --lat 와 --lng 는 함께 지정해야 합니다")
        raise SystemExit(2)

    source = StaticLocationSource(args.lat, args.lng) if args.lat is not None else IpGeolocationSource()
    session = WeatherSession(
        RelayClient(args.api, args.token),
        LocationResolver(source),
        FamilySettings(JsonFileStore(args.store)),
        timezone=args.tz,
        hours=args.hours,
    )
    view = asyncio.run(session.refresh())
    print(render_view(view))


def _family(args: argparse.Namespace) -> None:
    family = FamilySettings(JsonFileStore(args.store))
    if args.text is None:
        print(family.family or "(not set)")
        return
    family.set_family(args.text)
    print("✅ 저장 완료")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="family-weather", description="Family-friendly weather cards and clothing tips")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the API server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=_serve)

    show = sub.add_parser("show", help="print cards and advice for the current location")
    show.add_argument("--lat", type=float)
    show.add_argument("--lng", type=float)
    show.add_argument("--api", default=settings.RELAY_BASE_URL)
    show.add_argument("--token", default=os.getenv("FAMILY_WEATHER_TOKEN"))
    show.add_argument("--tz", default=settings.CLIENT_TZ)
    show.add_argument("--hours", type=int, default=settings.DEFAULT_FORECAST_HOURS)
    show.add_argument("--store", default=settings.FAMILY_STORE_PATH)
    show.set_defaults(func=_show)

    family = sub.add_parser("family", help="show or set family / clothing preferences")
    family.add_argument("text", nargs="?")
    family.add_argument("--store", default=settings.FAMILY_STORE_PATH)
    family.set_defaults(func=_family)

    return parser


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
