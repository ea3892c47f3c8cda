import asyncio

from safezone import ApiClient, Point, TouristDetails
from safezone.sos import sms_link


async def main() -> None:
    api = ApiClient(base_url="http://127.0.0.1:8000")
    details = TouristDetails(
        name="Asha",
        age="29",
        id_proof="P1234567",
        emergency_contact="+911234567890",
        itinerary="Delhi, Agra, Jaipur",
    )
    try:
        tourist = await api.register_tourist(details)
        print("Registered tourist", tourist.id)

        location = Point(latitude=28.6129, longitude=77.2295)
        await api.report_location(tourist.id, location)
        await api.send_sos(tourist.id, location)
        print("Open to notify your contact:", sms_link(
            details.emergency_contact, details.name, location
        ))
    finally:
        await api.close()


if __name__ == "__main__":
    asyncio.run(main())
