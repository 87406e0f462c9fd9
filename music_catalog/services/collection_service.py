"""Generic CRUD orchestration for one catalog collection.

Writes run through the same stages for every entity kind:
field validation, reference resolution, uniqueness check, store operation.
The first failing stage raises and nothing is persisted.
"""
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence, Tuple

from ..db.base import canonical_object_id, is_valid_object_id, utcnow
from ..db.query import ASCENDING, Equals, EqualsIgnoreCase, FindOptions, NotEquals, StoreQuery
from ..db.store import DocumentStore
from ..exceptions import (
    CatalogError,
    DeleteBlockedError,
    DuplicateEntityError,
    MalformedIdentifierError,
    NotFoundError,
    ValidationFailedError,
)
from ..logging import get_logger
from ..metrics import catalog_validation_failures_total, catalog_writes_total
from .query_builder import QueryBuilder, pagination_meta
from .references import ReferenceResolver
from .resources import RESOURCES, EntityKind, Resource
from .validation import normalize, validate

logger = get_logger(__name__)

INSERTION_ORDER: Tuple[Tuple[str, int], ...] = (("created_at", ASCENDING), ("id", ASCENDING))


class CollectionService:
    """Service for listing, reading and writing the records of one resource."""

    def __init__(self, store: DocumentStore, resource: Resource, enforce_unique_on_update: bool = True):
        """Initialize service with the document store and the resource it manages."""
        self.store = store
        self.resource = resource
        self.enforce_unique_on_update = enforce_unique_on_update
        self.queries = QueryBuilder(resource)
        self.references = ReferenceResolver(store)

    # -- reads ---------------------------------------------------------------

    async def list(self, params: Mapping[str, str]) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """Return one page of records matching the filters, plus pagination metadata."""
        options = self.queries.build_options(params)
        query = self.queries.build_query(params)

        records = await self.store.find(self.resource.collection, query, options)
        total = await self.store.count(self.resource.collection, query)

        logger.info(
            "retrieved_records",
            resource=self.resource.collection,
            count=len(records),
            total=total,
            skip=options.skip,
            limit=options.limit,
        )
        return records, pagination_meta(options, total)

    async def get(self, record_id: str) -> Dict[str, Any]:
        """Get a record by ID."""
        record_id = self.require_id(record_id)
        record = await self.store.find_by_id(self.resource.collection, record_id)
        if record is None:
            logger.warning("record_not_found", resource=self.resource.collection, record_id=record_id)
            raise self.not_found()
        return record

    async def list_by(
        self,
        field: str,
        parent_kind: EntityKind,
        parent_id: str,
        sort: Sequence[Tuple[str, int]] = INSERTION_ORDER,
    ) -> List[Dict[str, Any]]:
        """List every record whose ``field`` equals parent_id, unpaginated.

        A well-formed id that matches nothing yields an empty list.
        """
        parent_id = self.require_id(parent_id, RESOURCES[parent_kind].label)
        records = await self.store.find(
            self.resource.collection,
            StoreQuery([Equals(field, parent_id)]),
            FindOptions(sort=list(sort)),
        )
        logger.info(
            "retrieved_related_records",
            resource=self.resource.collection,
            field=field,
            parent_id=parent_id,
            count=len(records),
        )
        return records

    # -- writes --------------------------------------------------------------

    async def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate, check references and uniqueness, insert, and return the stored record."""
        async with self._track("create"):
            record = self._validated(payload)
            await self.references.resolve(self.resource, record)
            await self._ensure_unique(record)

            now = utcnow()
            record["created_at"] = now
            record["updated_at"] = now
            record_id = await self.store.insert_one(self.resource.collection, record)

        logger.info("record_created", resource=self.resource.collection, record_id=record_id)
        return await self.store.find_by_id(self.resource.collection, record_id)

    async def update(self, record_id: str, payload: Mapping[str, Any]) -> None:
        """Replace every declared field of an existing record."""
        async with self._track("update"):
            record_id = self.require_id(record_id)
            record = self._validated(payload)
            await self.references.resolve(self.resource, record)
            if self.enforce_unique_on_update:
                await self._ensure_unique(record, exclude_id=record_id)

            record["updated_at"] = utcnow()
            if not await self.store.replace_one(self.resource.collection, record_id, record):
                raise self.not_found()

        logger.info("record_updated", resource=self.resource.collection, record_id=record_id)

    async def delete(self, record_id: str) -> None:
        """Delete a record unless a delete guard finds dependents."""
        async with self._track("delete"):
            record_id = self.require_id(record_id)
            for guard in self.resource.delete_guards:
                dependent = RESOURCES[guard.dependent]
                count = await self.store.count(dependent.collection, StoreQuery([Equals(guard.field, record_id)]))
                if count > 0:
                    raise DeleteBlockedError(
                        f"{self.resource.label} has {count} {dependent.name}(s) associated. "
                        f"Please delete {dependent.collection} first.",
                        error=f"Cannot delete {self.resource.name}",
                    )

            if not await self.store.delete_one(self.resource.collection, record_id):
                raise self.not_found()

        logger.info("record_deleted", resource=self.resource.collection, record_id=record_id)

    # -- helpers -------------------------------------------------------------

    def require_id(self, value: str, label: Optional[str] = None) -> str:
        """Return value in canonical form, or raise MalformedIdentifierError if it is not a well-formed id."""
        if not is_valid_object_id(value):
            raise MalformedIdentifierError(label or self.resource.label)
        return canonical_object_id(value)

    def not_found(self, label: Optional[str] = None) -> NotFoundError:
        label = label or self.resource.label
        return NotFoundError(
            f"No {label.lower()} exists with the provided ID",
            error=f"{label} not found",
        )

    def _validated(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        record = normalize(self.resource.kind, payload)
        errors = validate(self.resource.kind, record)
        if errors:
            catalog_validation_failures_total.labels(resource=self.resource.collection).inc()
            logger.info("validation_failed", resource=self.resource.collection, errors=errors)
            raise ValidationFailedError(errors)
        return record

    async def _ensure_unique(self, record: Mapping[str, Any], exclude_id: Optional[str] = None) -> None:
        for key in self.resource.unique_keys:
            value = record.get(key.field)
            if value is None:
                continue

            query = StoreQuery()
            if key.case_insensitive:
                query.add(EqualsIgnoreCase(key.field, value))
            else:
                query.add(Equals(key.field, value))
            for scope_field in key.scope:
                query.add(Equals(scope_field, record.get(scope_field)))
            if exclude_id is not None:
                query.add(NotEquals("id", exclude_id))

            if await self.store.find_one(self.resource.collection, query) is not None:
                logger.info("duplicate_record", resource=self.resource.collection, field=key.field, value=value)
                raise DuplicateEntityError(key.message, error=key.error)

    @asynccontextmanager
    async def _track(self, operation: str) -> AsyncIterator[None]:
        """Count the outcome of a write operation."""
        outcome = "success"
        try:
            yield
        except CatalogError as exc:
            outcome = type(exc).__name__
            raise
        except Exception:
            outcome = "error"
            raise
        finally:
            catalog_writes_total.labels(
                resource=self.resource.collection, operation=operation, outcome=outcome
            ).inc()
