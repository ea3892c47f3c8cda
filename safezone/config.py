"""Built-in defaults: the embedded zone configuration, API endpoint and intervals."""

DEFAULT_API_BASE = "https://trek-safe-backend.onrender.com"

# Seconds between location polls on the tourist side.
DEFAULT_POLL_INTERVAL = 5.0

# Seconds a single location fix may take before the poll gives up.
DEFAULT_LOCATE_TIMEOUT = 30.0

# Polls allowed in flight at once; further ticks are skipped.
DEFAULT_MAX_PENDING_POLLS = 2

# Seconds between refreshes of the police dashboard.
DEFAULT_DASHBOARD_INTERVAL = 10.0

# Zone order is significant: with the first-match policy the earliest
# containing zone wins for overlapping zones.
DEFAULT_ZONE_RECORDS = [
    {
        "name": "DTU OAT",
        "lat": 28.749952086016066,
        "lng": 77.11751671585728,
        "radius": 45,
        "type": "red",
    },
    {
        "name": "Los Angeles",
        "lat": 34.0522,
        "lng": -118.2437,
        "radius": 1200,
        "type": "yellow",
    },
    {
        "name": "London",
        "lat": 51.5074,
        "lng": -0.1278,
        "radius": 800,
        "type": "restricted",
    },
]
