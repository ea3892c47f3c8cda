import click

from ..evaluator import ContainmentPolicy, ZoneEvaluator
from ..exceptions import InvalidPointError
from ..geo import Point
from .common import describe, load_configured_zones, policy_option, zones_file_option


@click.command(help="List the configured zones in evaluation order")
@zones_file_option
def zones(zones_file: str | None) -> None:
    for index, zone in enumerate(load_configured_zones(zones_file)):
        print("{:>3}. {}".format(index + 1, zone))


@click.command(
    help="Classify a single point against the configured zones",
    epilog="Pass -- before the coordinates when either is negative.",
)
@zones_file_option
@policy_option
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
def classify(
    zones_file: str | None, policy: str, latitude: float, longitude: float
) -> None:
    evaluator = ZoneEvaluator(
        load_configured_zones(zones_file), policy=ContainmentPolicy(policy)
    )
    try:
        point = Point(latitude=latitude, longitude=longitude)
    except InvalidPointError as e:
        raise click.BadParameter(str(e))

    print(describe(evaluator.classify(point)))
