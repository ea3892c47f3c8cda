import asyncio

from safezone import Classification, Monitor, Point
from safezone.provider import ScriptedLocationProvider

# Walks from outside the campus into the red zone around the open-air theatre.
ROUTE = [
    Point(latitude=28.7450, longitude=77.1170),
    Point(latitude=28.7480, longitude=77.1172),
    Point(latitude=28.7499, longitude=77.1175),
    Point(latitude=28.7500, longitude=77.1175),
]


async def main() -> None:
    provider = ScriptedLocationProvider(ROUTE)
    monitor = Monitor(provider=provider, subject_id="demo", update_interval=1)

    @monitor.on_classification_change
    def on_classification_change(
        subject_id: str, classification: Classification, previous: Classification
    ) -> None:
        print(
            "{}: {} -> {} ({})".format(
                subject_id,
                previous.zone_type.value,
                classification.zone_type.value,
                classification.zone_name,
            )
        )

    for _ in ROUTE:
        await monitor.poll()
    await monitor.close()


if __name__ == "__main__":
    asyncio.run(main())
