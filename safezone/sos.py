"""Builds the emergency message a tourist sends to their emergency contact."""

from urllib.parse import quote

from .geo import Point


def maps_link(point: Point) -> str:
    return "https://maps.google.com/?q={},{}".format(point.latitude, point.longitude)


def sos_message(name: str, point: Point) -> str:
    return "\U0001f6a8 SOS! This is {}. I need help!\nMy location: {}".format(
        name, maps_link(point)
    )


def sms_link(contact: str, name: str, point: Point) -> str:
    """
    Build an ``sms:`` URI that opens a pre-filled SOS text.

    The body is percent-encoded with the same reserved set as JavaScript's
    ``encodeURIComponent`` so the link behaves identically in browsers.
    """
    if not contact or not contact.strip():
        raise ValueError("An emergency contact is required to build an SMS link")
    body = quote(sos_message(name, point), safe="-_.!~*'()")
    return "sms:{}?body={}".format(contact.strip(), body)
