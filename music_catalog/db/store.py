"""Collection-level document store over SQLAlchemy asyncio.

Each collection maps to one table. Documents go in and come out as plain
dicts; list and object fields live in JSON columns.
"""
import json
from functools import partial
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type

from sqlalchemy import JSON, String, column, delete, event, exists, func, literal, select, text, update
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..logging import get_logger
from ..models import COLLECTIONS
from .base import Base
from .query import DESCENDING, Contains, Equals, EqualsIgnoreCase, FindOptions, NotEquals, Range, StoreQuery

logger = get_logger(__name__)


class DocumentStore:
    """Async find/insert/update/delete operations keyed by collection name."""

    def __init__(self, engine: AsyncEngine, collections: Optional[Mapping[str, Type[Base]]] = None):
        """Initialize store with an engine and a collection-name to model mapping."""
        self.engine = engine
        self.collections = dict(collections or COLLECTIONS)
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        if self.is_sqlite:
            event.listen(engine.sync_engine, "connect", _register_sqlite_functions)

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False, **engine_kwargs: Any) -> "DocumentStore":
        """Build a store with its own engine for the given database URL."""
        engine_kwargs.setdefault("json_serializer", partial(json.dumps, ensure_ascii=False))
        return cls(create_async_engine(database_url, echo=echo, **engine_kwargs))

    @property
    def is_sqlite(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    async def connect(self) -> None:
        """Verify connectivity and create missing tables. Raises on failure."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await self.ping()
        logger.info("document_store_connected", url=self.engine.url.render_as_string(hide_password=True))

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("document_store_closed")

    # -- reads ---------------------------------------------------------------

    async def find(
        self,
        collection: str,
        query: Optional[StoreQuery] = None,
        options: Optional[FindOptions] = None,
    ) -> List[Dict[str, Any]]:
        """Return documents matching query, honouring sort/skip/limit."""
        model = self._model(collection)
        options = options or FindOptions()
        statement = select(model).where(*self._compile(model, query))

        for field_name, direction in options.sort:
            column = getattr(model, field_name)
            ordering = column.desc() if direction == DESCENDING else column.asc()
            statement = statement.order_by(ordering.nulls_last())
        if options.skip:
            statement = statement.offset(options.skip)
        if options.limit is not None:
            statement = statement.limit(options.limit)

        async with self._session_factory() as session:
            result = await session.execute(statement)
            return [row.to_document() for row in result.scalars().all()]

    async def find_one(self, collection: str, query: StoreQuery) -> Optional[Dict[str, Any]]:
        documents = await self.find(collection, query, FindOptions(limit=1))
        return documents[0] if documents else None

    async def find_by_id(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        model = self._model(collection)
        async with self._session_factory() as session:
            row = await session.get(model, document_id)
            return row.to_document() if row is not None else None

    async def find_by_ids(self, collection: str, document_ids: Iterable[str]) -> List[Dict[str, Any]]:
        """Return the documents whose ids are in document_ids, in no particular order."""
        ids = list(dict.fromkeys(document_ids))
        if not ids:
            return []
        model = self._model(collection)
        async with self._session_factory() as session:
            result = await session.execute(select(model).where(model.id.in_(ids)))
            return [row.to_document() for row in result.scalars().all()]

    async def count(self, collection: str, query: Optional[StoreQuery] = None) -> int:
        model = self._model(collection)
        statement = select(func.count()).select_from(model).where(*self._compile(model, query))
        async with self._session_factory() as session:
            result = await session.execute(statement)
            return int(result.scalar_one())

    # -- writes --------------------------------------------------------------

    async def insert_one(self, collection: str, document: Mapping[str, Any]) -> str:
        """Insert a document and return its generated id."""
        model = self._model(collection)
        row = model(**document)
        async with self._session_factory() as session:
            session.add(row)
            await session.commit()
            logger.debug("document_inserted", collection=collection, document_id=row.id)
            return row.id

    async def replace_one(self, collection: str, document_id: str, document: Mapping[str, Any]) -> bool:
        """Overwrite the given fields of a document. Returns False if nothing matched."""
        model = self._model(collection)
        statement = (
            update(model)
            .where(model.id == document_id)
            .values(**document)
            .execution_options(synchronize_session=False)
        )
        async with self._session_factory() as session:
            result = await session.execute(statement)
            await session.commit()
            return result.rowcount > 0

    async def delete_one(self, collection: str, document_id: str) -> bool:
        """Delete a document by id. Returns False if nothing matched."""
        model = self._model(collection)
        statement = delete(model).where(model.id == document_id).execution_options(synchronize_session=False)
        async with self._session_factory() as session:
            result = await session.execute(statement)
            await session.commit()
            return result.rowcount > 0

    async def push(
        self,
        collection: str,
        document_id: str,
        field_name: str,
        value: Any,
        set_fields: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """Append value to a list field. Returns False if nothing matched."""
        return await self._modify_list(
            collection, document_id, field_name, lambda items: items + [value], set_fields
        )

    async def pull(
        self,
        collection: str,
        document_id: str,
        field_name: str,
        value: Any,
        set_fields: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """Remove every occurrence of value from a list field. Returns False if nothing matched."""
        return await self._modify_list(
            collection, document_id, field_name, lambda items: [item for item in items if item != value], set_fields
        )

    async def _modify_list(self, collection, document_id, field_name, change, set_fields) -> bool:
        model = self._model(collection)
        async with self._session_factory() as session:
            row = await session.get(model, document_id)
            if row is None:
                return False
            setattr(row, field_name, change(list(getattr(row, field_name) or [])))
            for key, value in (set_fields or {}).items():
                setattr(row, key, value)
            await session.commit()
            return True

    # -- helpers -------------------------------------------------------------

    def _model(self, collection: str) -> Type[Base]:
        try:
            return self.collections[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    def _compile(self, model: Type[Base], query: Optional[StoreQuery]) -> list:
        """Translate StoreQuery conditions into SQLAlchemy where-clauses."""
        clauses = []
        for condition in (query.conditions if query is not None else []):
            field_column = getattr(model, condition.field)
            if isinstance(condition, Equals):
                clauses.append(field_column == condition.value)
            elif isinstance(condition, NotEquals):
                clauses.append(field_column != condition.value)
            elif isinstance(condition, EqualsIgnoreCase):
                clauses.append(func.lower(field_column) == condition.value.lower())
            elif isinstance(condition, Contains):
                if isinstance(model.__table__.c[condition.field].type, JSON):
                    clauses.append(self._any_element_contains(field_column, condition.value))
                else:
                    clauses.append(field_column.icontains(condition.value, autoescape=True))
            elif isinstance(condition, Range):
                if condition.gte is not None:
                    clauses.append(field_column >= condition.gte)
                if condition.lte is not None:
                    clauses.append(field_column <= condition.lte)
            else:
                raise TypeError(f"Unsupported condition: {condition!r}")
        return clauses

    def _any_element_contains(self, list_column, value: str):
        """EXISTS clause matching value as a substring of any single list element."""
        expand = func.json_each if self.is_sqlite else func.json_array_elements_text
        elements = expand(list_column).table_valued(column("value", String)).alias("elements")
        return exists(
            select(literal(1))
            .select_from(elements)
            .where(elements.c.value.icontains(value, autoescape=True))
        )


def _unicode_lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection, connection_record) -> None:
    """Replace SQLite's ASCII-only lower() with Python's Unicode case mapping."""
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
