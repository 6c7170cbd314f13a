"""Collection names (schema-in-code).

The document store has no DDL: collections exist once a document is written.
These constants are the single source of truth for collection names.
"""

STATIONS = "stations"
PROVINCES = "provinces"
COMMUNES = "communes"
BRANDS = "marques"
MANAGERS = "gerants"
OWNERS = "proprietaires"
INDIVIDUAL_OWNERS = "proprietaires_physiques"
CORPORATE_OWNERS = "proprietaires_morales"
AUTHORIZATIONS = "autorisations"
STORAGE_CAPACITIES = "capacites_stockage"
ANALYSES = "analyses"
COUNTERS = "counters"
API_USAGE = "api_usage"

# Document in COUNTERS holding the last allocated station display code
STATION_CODE_COUNTER = "stations"
