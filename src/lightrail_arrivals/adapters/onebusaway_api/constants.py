"""Constants for the OneBusAway REST API.

API Documentation: https://developer.onebusaway.org/api/where
"""

ROUTES_FOR_AGENCY_PATH = "routes-for-agency/{agency_id}"
STOPS_FOR_ROUTE_PATH = "stops-for-route/{route_id}"
ARRIVALS_FOR_STOP_PATH = "arrivals-and-departures-for-stop/{stop_id}"

# Envelope "code" for a successful response
OK_CODE = 200

# OneBusAway reports "no real-time prediction" as 0 instead of omitting the field
NO_PREDICTION = 0
