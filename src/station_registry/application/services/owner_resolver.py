"""Polymorphic owner resolution.

An owner row carries only its kind. Its name lives in exactly one detail row
in the collection matching the kind. This resolver never changes the kind of
an existing owner: a submission with another kind resolves (or creates) a
different owner.
"""

import logging

from station_registry.application.services.parsing import clean
from station_registry.domain.models import collections
from station_registry.domain.models.owner import CorporateOwner, IndividualOwner, OwnerKind
from station_registry.domain.models.station_submission import StationSubmission
from station_registry.domain.models.write_batch import WriteBatch
from station_registry.domain.ports.entity_store import EntityStore

logger = logging.getLogger(__name__)


class OwnerResolver:
    """Finds the owner matching a submission's owner fields, or stages a new one."""

    def __init__(self, store: EntityStore) -> None:
        """Initialize with the entity store."""
        self._store = store

    async def resolve(self, submission: StationSubmission, batch: WriteBatch) -> str | None:
        """Resolve the submission's owner.

        Returns:
            The owner id, or None when the submission names no owner for its kind.
        """
        if submission.owner_kind == OwnerKind.INDIVIDUAL:
            first_name = clean(submission.owner_first_name)
            last_name = clean(submission.owner_last_name)
            if not last_name:
                return None
            return await self._resolve_detail(
                OwnerKind.INDIVIDUAL,
                collections.INDIVIDUAL_OWNERS,
                {"first_name": first_name, "last_name": last_name},
                batch,
            )

        company_name = clean(submission.owner_company_name)
        if not company_name:
            return None
        return await self._resolve_detail(
            OwnerKind.CORPORATE,
            collections.CORPORATE_OWNERS,
            {"company_name": company_name},
            batch,
        )

    async def _resolve_detail(
        self,
        kind: OwnerKind,
        detail_collection: str,
        name_fields: dict[str, str],
        batch: WriteBatch,
    ) -> str:
        matches = await self._store.find_equal(detail_collection, name_fields)
        for detail in matches:
            owner_id = detail.get("owner_id")
            if owner_id:
                return str(owner_id)

        owner_id = self._store.new_id()
        batch.set(collections.OWNERS, owner_id, {"kind": kind.value})
        detail: IndividualOwner | CorporateOwner
        if kind == OwnerKind.INDIVIDUAL:
            detail = IndividualOwner(owner_id, name_fields["first_name"], name_fields["last_name"])
        else:
            detail = CorporateOwner(owner_id, name_fields["company_name"])
        batch.set(detail_collection, self._store.new_id(), detail.to_fields())
        logger.debug(f"Staged new {kind.value} owner {owner_id}")
        return owner_id
