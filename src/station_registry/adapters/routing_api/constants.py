"""Constants for the Google routing API adapters.

Routes API: https://developers.google.com/maps/documentation/routes
Distance Matrix API: https://developers.google.com/maps/documentation/distance-matrix
"""

ROUTES_URL = "https://routes.googleapis.com/directions/v2:computeRoutes"
DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"

# Only distance and duration are billed and returned
ROUTES_FIELD_MASK = "routes.distanceMeters,routes.duration"

# Distance Matrix element statuses meaning "no drivable route"
NO_ROUTE_ELEMENT_STATUSES = {"ZERO_RESULTS", "NOT_FOUND"}
RATE_LIMITED_STATUSES = {"OVER_QUERY_LIMIT", "OVER_DAILY_LIMIT"}

HTTP_TOO_MANY_REQUESTS = 429
