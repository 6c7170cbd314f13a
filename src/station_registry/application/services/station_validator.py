"""Validation of station submissions, run before any write."""

import re

from station_registry.application.services.parsing import clean, parse_decimal
from station_registry.domain.models.owner import OwnerKind
from station_registry.domain.models.station_submission import StationSubmission
from station_registry.domain.models.validation_result import ValidationResult

REQUIRED_FIELDS = (
    "name",
    "address",
    "latitude",
    "longitude",
    "type",
    "brand",
    "brand_legal_name",
    "commune",
    "province",
    "manager_last_name",
    "manager_first_name",
    "manager_national_id",
    "manager_phone",
)

PHONE_PATTERN = re.compile(r"^\+?\d{9,15}$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

SUBMIT_FIELD = "submit"
REQUIRED_MESSAGE = "Required field"


def _in_range(value: str, bound: float) -> bool:
    number = parse_decimal(value)
    return number is not None and -bound <= number <= bound


class StationValidator:
    """Checks a StationSubmission field by field."""

    def validate(self, submission: StationSubmission) -> ValidationResult:
        """Return every field error found, plus a submit summary when there is any."""
        errors: dict[str, str] = {}

        for name in REQUIRED_FIELDS:
            if not clean(getattr(submission, name)):
                errors[name] = REQUIRED_MESSAGE

        if not _in_range(submission.latitude, 90):
            errors["latitude"] = "Invalid latitude (between -90 and 90)"
        if not _in_range(submission.longitude, 180):
            errors["longitude"] = "Invalid longitude (between -180 and 180)"

        for name, label in (("diesel_capacity", "Diesel"), ("premium_capacity", "Premium")):
            raw = getattr(submission, name)
            if clean(raw):
                liters = parse_decimal(raw)
                if liters is None or liters < 0:
                    errors[name] = f"Invalid {label} capacity"

        self._validate_owner(submission, errors)
        self._validate_authorizations(submission, errors)

        phone = clean(submission.manager_phone)
        if phone and not PHONE_PATTERN.match(phone):
            errors["manager_phone"] = "Invalid phone number (9 to 15 digits, optional +)"

        if errors:
            errors[SUBMIT_FIELD] = "Please fix the errors in the form before submitting."
        return ValidationResult(errors)

    @staticmethod
    def _validate_owner(submission: StationSubmission, errors: dict[str, str]) -> None:
        try:
            kind = OwnerKind(submission.owner_kind)
        except ValueError:
            errors["owner_kind"] = "Owner kind must be individual or corporate"
            return

        # An owner is optional, but a partially filled one is rejected.
        if kind == OwnerKind.INDIVIDUAL:
            last_name = clean(submission.owner_last_name)
            first_name = clean(submission.owner_first_name)
            if last_name and not first_name:
                errors["owner_first_name"] = "Owner first name is required for an individual"
            if first_name and not last_name:
                errors["owner_last_name"] = "Owner last name is required when a first name is given"

    @staticmethod
    def _validate_authorizations(submission: StationSubmission, errors: dict[str, str]) -> None:
        for index, entry in enumerate(submission.authorizations, start=1):
            number = clean(entry.number)
            if number and not entry.type:
                errors["authorizations"] = f"Authorization type is required for authorization {index}"
            if entry.type and not number:
                errors["authorizations"] = f"Authorization number is required for authorization {index}"
            entry_date = clean(entry.date)
            if entry_date and not DATE_PATTERN.match(entry_date):
                errors["authorizations"] = (
                    f"Invalid date format for authorization {index} (YYYY-MM-DD)"
                )
