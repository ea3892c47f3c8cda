import asyncio

from safezone import ApiClient, Dashboard


async def main() -> None:
    api = ApiClient(base_url="http://127.0.0.1:8000")
    dashboard = Dashboard(api=api, update_interval=10)

    @dashboard.on_classification_change
    def on_classification_change(tourist_id, classification, previous) -> None:
        print("Tourist {} is now {}".format(tourist_id, classification.status.value))

    try:
        await dashboard.keepalive()
    finally:
        await dashboard.close()
        await api.close()


if __name__ == "__main__":
    asyncio.run(main())
