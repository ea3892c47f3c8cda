import asyncio
import json
from typing import TextIO

import click

from ..api import ApiClient
from ..config import DEFAULT_API_BASE, DEFAULT_POLL_INTERVAL
from ..evaluator import Classification, ContainmentPolicy
from ..exceptions import InvalidPointError
from ..geo import Point, as_point
from ..monitor import Monitor
from ..provider import LocationProvider, ScriptedLocationProvider, StaticLocationProvider
from .common import describe, load_configured_zones, policy_option, zones_file_option
from .logging_provider import LoggingLocationProvider


def _load_route(path: str) -> list[Point]:
    try:
        with open(path) as f:
            records = json.load(f)
        return [as_point(record) for record in records]
    except (OSError, ValueError, TypeError) as e:
        raise click.ClickException("Failed to load route {}: {}".format(path, e))


@click.command(help="Track a subject and print every zone transition")
@click.option("--lat", type=float)
@click.option("--lon", type=float)
@click.option(
    "--route",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON array of points to replay, one per poll",
)
@click.option("--loop-route/--no-loop-route", default=False)
@click.option("--subject-id", default="local")
@click.option("--interval", type=float, default=DEFAULT_POLL_INTERVAL, show_default=True)
@click.option("--api-base", default=DEFAULT_API_BASE, envvar="SAFEZONE_API_BASE")
@click.option("--report/--no-report", default=False, help="Report positions upstream")
@click.option("--logfile", type=click.Path(), help="Append acquired positions to file")
@zones_file_option
@policy_option
def watch(
    lat: float | None,
    lon: float | None,
    route: str | None,
    loop_route: bool,
    subject_id: str,
    interval: float,
    api_base: str,
    report: bool,
    logfile: str | None,
    zones_file: str | None,
    policy: str,
) -> None:
    zone_config = load_configured_zones(zones_file)

    # A non-looping route ends after one poll per point.
    polls: int | None = None
    provider: LocationProvider
    if route is not None:
        points = _load_route(route)
        if not points:
            raise click.ClickException("Route {} is empty".format(route))
        provider = ScriptedLocationProvider(points, loop=loop_route)
        if not loop_route:
            polls = len(points)
    elif lat is not None and lon is not None:
        try:
            provider = StaticLocationProvider(Point(latitude=lat, longitude=lon))
        except InvalidPointError as e:
            raise click.BadParameter(str(e))
    else:
        raise click.UsageError("Provide either --lat and --lon, or --route")

    if logfile is not None:
        log_fp: TextIO = open(logfile, "a")
        provider = LoggingLocationProvider(provider, log_fp)

    async def _run() -> None:
        api = ApiClient(base_url=api_base) if report else None
        monitor = Monitor(
            provider=provider,
            subject_id=subject_id,
            zones=zone_config,
            api=api,
            update_interval=interval,
            policy=ContainmentPolicy(policy),
        )

        @monitor.on_classification_change
        def on_classification_change(
            subject: str, classification: Classification, previous: Classification
        ) -> None:
            print(
                "{}: {} -> {}".format(
                    subject, previous.zone_type.value, describe(classification)
                )
            )

        try:
            if polls is None:
                await monitor.keepalive()
            else:
                for i in range(polls):
                    if i:
                        await asyncio.sleep(interval)
                    await monitor.poll()
        finally:
            await monitor.close()
            if api is not None:
                await api.close()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        pass
