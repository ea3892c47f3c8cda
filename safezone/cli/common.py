import click

from ..evaluator import Classification, ContainmentPolicy
from ..exceptions import ConfigurationError
from ..zone import Zone, default_zones, load_zones_file

zones_file_option = click.option(
    "--zones-file",
    type=click.Path(dir_okay=False),
    envvar="SAFEZONE_ZONES_FILE",
    help="JSON array of zone records, replaces the built-in zones",
)

policy_option = click.option(
    "--policy",
    type=click.Choice([p.value for p in ContainmentPolicy]),
    default=ContainmentPolicy.FIRST_MATCH.value,
    show_default=True,
)


def load_configured_zones(zones_file: str | None) -> tuple[Zone, ...]:
    try:
        if zones_file is None:
            return default_zones()
        return load_zones_file(zones_file)
    except ConfigurationError as e:
        raise click.ClickException(str(e))


def describe(classification: Classification) -> str:
    if classification.zone is None:
        return "{} ({}, no zone)".format(
            classification.zone_type.value, classification.status.value
        )
    return "{} ({}, zone: {})".format(
        classification.zone_type.value,
        classification.status.value,
        classification.zone_name or "unnamed",
    )
