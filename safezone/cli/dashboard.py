import asyncio

import click

from ..api import ApiClient
from ..config import DEFAULT_API_BASE, DEFAULT_DASHBOARD_INTERVAL
from ..dashboard import Dashboard
from ..evaluator import Classification, ContainmentPolicy
from .common import describe, load_configured_zones, policy_option, zones_file_option


@click.command(help="Monitor every tourist known to the API")
@click.option("--api-base", default=DEFAULT_API_BASE, envvar="SAFEZONE_API_BASE")
@click.option(
    "--interval", type=float, default=DEFAULT_DASHBOARD_INTERVAL, show_default=True
)
@zones_file_option
@policy_option
def dashboard(api_base: str, interval: float, zones_file: str | None, policy: str) -> None:
    zone_config = load_configured_zones(zones_file)

    async def _run() -> None:
        api = ApiClient(base_url=api_base)
        board = Dashboard(
            api=api,
            zones=zone_config,
            policy=ContainmentPolicy(policy),
        )

        @board.on_classification_change
        def on_classification_change(
            tourist_id: str, classification: Classification, previous: Classification
        ) -> None:
            print(
                "Tourist {}: {} -> {}".format(
                    tourist_id, previous.zone_type.value, describe(classification)
                )
            )

        seen: set[str] = set()
        try:
            while True:
                if await board.refresh():
                    for alert in board.alerts:
                        if alert.id not in seen:
                            print("[{}] {}: {}".format(
                                alert.type.upper(), alert.tourist_name, alert.message
                            ))
                    seen = {alert.id for alert in board.alerts}
                await asyncio.sleep(interval)
        finally:
            await board.close()
            await api.close()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        pass
