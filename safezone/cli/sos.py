import asyncio

import click

from ..api import ApiClient
from ..config import DEFAULT_API_BASE
from ..exceptions import ApiError, InvalidPointError
from ..geo import Point
from ..sos import maps_link, sms_link


@click.command(
    help="Send an SOS for a tourist and print the emergency SMS link",
    epilog="Pass -- before the coordinates when either is negative.",
)
@click.option("--api-base", default=DEFAULT_API_BASE, envvar="SAFEZONE_API_BASE")
@click.option("--name", default="a tourist")
@click.option("--contact", help="Emergency contact phone number")
@click.argument("tourist_id")
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
def sos(
    api_base: str,
    name: str,
    contact: str | None,
    tourist_id: str,
    latitude: float,
    longitude: float,
) -> None:
    try:
        point = Point(latitude=latitude, longitude=longitude)
    except InvalidPointError as e:
        raise click.BadParameter(str(e))

    async def _send() -> None:
        api = ApiClient(base_url=api_base)
        try:
            await api.send_sos(tourist_id, point)
        finally:
            await api.close()

    try:
        asyncio.run(_send())
    except ApiError as e:
        raise click.ClickException(
            "SOS failed, call emergency services directly: {}".format(e)
        )

    print("SOS sent. Location: {}".format(maps_link(point)))
    if contact:
        print(sms_link(contact, name, point))
