"""Station submission: the flat form a user submits to create or edit a station."""

from dataclasses import dataclass, field

from station_registry.domain.models.authorization import AuthorizationType
from station_registry.domain.models.owner import OwnerKind


@dataclass(frozen=True)
class AuthorizationEntry:
    """One authorization line of a submission. Empty number means "no entry"."""

    type: AuthorizationType | None = None
    number: str = ""
    date: str = ""  # YYYY-MM-DD or empty


@dataclass(frozen=True)
class StationSubmission:
    """Flat station form data.

    Numeric fields arrive as strings and are parsed by the writer. Text
    fields are trimmed at use.
    """

    name: str
    address: str
    latitude: str
    longitude: str
    type: str
    brand: str
    brand_legal_name: str
    province: str
    commune: str
    manager_first_name: str
    manager_last_name: str
    manager_national_id: str
    manager_phone: str = ""
    gerance_type: str = ""
    status: str = "active"
    dispenser_count: str = ""
    comments: str = ""
    owner_kind: OwnerKind = OwnerKind.INDIVIDUAL
    owner_first_name: str = ""
    owner_last_name: str = ""
    owner_company_name: str = ""
    authorizations: list[AuthorizationEntry] = field(default_factory=list)
    diesel_capacity: str = ""
    premium_capacity: str = ""
