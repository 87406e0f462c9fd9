"""Reference checks run against other collections before a write."""
from typing import Any, Mapping

from ..db.store import DocumentStore
from ..exceptions import ReferenceNotFoundError
from ..logging import get_logger
from ..metrics import catalog_reference_failures_total
from .resources import RESOURCES, Resource

logger = get_logger(__name__)


class ReferenceResolver:
    """Checks that every id a record points at exists in its target collection."""

    def __init__(self, store: DocumentStore):
        """Initialize resolver with the document store."""
        self.store = store

    async def resolve(self, resource: Resource, record: Mapping[str, Any]) -> None:
        """Raise ReferenceNotFoundError for the first reference field that does not resolve.

        Expects a record that already passed field validation, so every id is
        well-formed. A many-reference fails as a whole when any id is missing.
        """
        for reference in resource.references:
            target = RESOURCES[reference.target]
            value = record.get(reference.field)

            if reference.many:
                ids = list(value or [])
                if not ids:
                    continue
                found = {doc["id"] for doc in await self.store.find_by_ids(target.collection, ids)}
                missing = [item for item in ids if item not in found]
                if missing:
                    self._reject(resource, reference.field, missing)
                    raise ReferenceNotFoundError(
                        f"One or more {target.name} IDs do not exist",
                        error=f"Invalid {target.collection}",
                        details=missing,
                    )
                continue

            if value is None:
                continue
            if await self.store.find_by_id(target.collection, value) is None:
                self._reject(resource, reference.field, [value])
                raise ReferenceNotFoundError(
                    f"The specified {target.name} does not exist",
                    error=f"{target.label} not found",
                )

    @staticmethod
    def _reject(resource: Resource, field: str, missing: list) -> None:
        catalog_reference_failures_total.labels(resource=resource.collection).inc()
        logger.warning("reference_not_found", resource=resource.collection, field=field, missing=missing)
