"""Base repository for database operations."""

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from hashlib import sha1
from typing import TYPE_CHECKING, Any, cast
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from inkwell.configs import CacheConfig
from inkwell.db import is_cache_stale, mark_cache_stale
from inkwell.errors import DuplicateEntryError, RepositoryError
from inkwell.managers.metrics import metrics_manager
from inkwell.monitoring import get_logger
from inkwell.utils.cache_serializer import serialize

if TYPE_CHECKING:
    from inkwell.managers.cache_manager import CacheManager

logger = get_logger(__name__)

type FilterValue = str | int | float | bool | UUID | datetime | None
type SortSpec = Sequence[tuple[str, bool]]


@dataclass
class QueryResult[ModelT: SQLModel]:
    """One page of query results and the total number of pages."""

    results: list[ModelT]
    page_count: int


class BaseRepository[ModelT: SQLModel]:
    """
    Base repository implementing common CRUD operations.

    Results of ``query`` are cached in the cache manager under a namespace
    per table while ``cache_enabled`` is set. A write only marks that
    namespace stale on the session: ``atomic``/``transaction`` clear it after
    the commit, and the writing session reads around the cache until then.
    Transactions belong to the caller (see ``inkwell.db.atomic``); the
    repository only flushes.

    Attributes:
        model: The SQLModel database model type.
        id_field: The name of the primary key field (default: "id").
    """

    model: type[ModelT]
    id_field: str = "id"

    def __init__(self, session: AsyncSession, cache: "CacheManager | None" = None) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session
            cache: Cache manager for query results; no caching when omitted
        """
        self.session = session
        self.cache = cache
        self.cache_enabled = cache is not None
        self.query_ttl = CacheConfig().query_ttl

    @property
    def cache_namespace(self) -> str:
        return f"repo:{self.model.__tablename__}"

    @contextmanager
    def cache_disabled(self) -> Iterator["BaseRepository[ModelT]"]:
        """
        Bypass the query cache for the duration of the block.

        The previous setting is restored on every exit path, including errors.

        Example:
            ```python
            with article_repo.cache_disabled():
                result = await article_repo.query(...)
            ```
        """
        previous = self.cache_enabled
        self.cache_enabled = False
        try:
            yield self
        finally:
            self.cache_enabled = previous

    async def get_by_id(self, record_id: UUID | str) -> ModelT | None:
        """
        Get a record by its ID.

        Raises:
            RepositoryError: If the lookup fails
        """
        try:
            return await self.session.get(self.model, record_id)
        except SQLAlchemyError as e:
            raise self._wrap(e, "get") from e

    async def get_by_field(self, field_name: str, value: FilterValue) -> ModelT | None:
        """
        Get the first record whose ``field_name`` equals ``value``.

        Raises:
            RepositoryError: If the lookup fails
        """
        field = getattr(self.model, field_name)
        statement = select(self.model).where(field == value).limit(1)
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise self._wrap(e, "get_by_field") from e
        return result.scalar_one_or_none()

    async def add(self, record: ModelT) -> ModelT:
        """
        Insert a record and flush it.

        Returns:
            ModelT: The record, with generated values populated

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            RepositoryError: For other database errors
        """
        try:
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
        except SQLAlchemyError as e:
            raise self._wrap(e, "add") from e
        self._invalidate()
        return record

    async def update(self, record: ModelT) -> ModelT:
        """
        Write ``record`` over the stored row with the same id.

        Inserts the row when it does not exist yet, so singleton records can
        be overwritten unconditionally. Detached instances (e.g. rebuilt from
        the query cache) are accepted.

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            RepositoryError: For other database errors
        """
        try:
            merged = await self.session.merge(record)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise self._wrap(e, "update") from e
        self._invalidate()
        return merged

    async def remove(self, record_id: UUID | str) -> bool:
        """
        Delete a record by ID.

        Returns:
            bool: True if a record was deleted, False if none existed

        Raises:
            RepositoryError: If the delete fails
        """
        record = await self.get_by_id(record_id)
        if record is None:
            return False
        try:
            await self.session.delete(record)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise self._wrap(e, "remove") from e
        self._invalidate()
        return True

    async def query(
        self,
        filters: Mapping[str, FilterValue] | None = None,
        sort: SortSpec = (),
        page: int = 1,
        page_size: int = 20,
    ) -> QueryResult[ModelT]:
        """
        Filter by field equality, sort and paginate.

        Args:
            filters: Field name to required value
            sort: ``(field, descending)`` pairs, applied in order
            page: 1-based page number
            page_size: Records per page

        Returns:
            QueryResult: The requested page and the total page count

        Raises:
            RepositoryError: If the query fails
        """
        filters = dict(filters or {})
        use_cache = (
            self.cache_enabled
            and self.cache is not None
            and not is_cache_stale(self.session, self.cache_namespace)
        )
        cache_key = self._query_key(filters, sort, page, page_size)

        if use_cache:
            cached = await cast("CacheManager", self.cache).get(cache_key, self.cache_namespace)
            if cached is not None:
                metrics_manager.record_cache_hit(self.model.__tablename__)
                return QueryResult(
                    results=[self.model.model_validate(row) for row in cached["results"]],
                    page_count=cached["page_count"],
                )
            metrics_manager.record_cache_miss(self.model.__tablename__)

        conditions = [getattr(self.model, name) == value for name, value in filters.items()]
        statement = select(self.model).where(*conditions)
        for name, descending in sort:
            column = getattr(self.model, name)
            statement = statement.order_by(column.desc() if descending else column.asc())
        statement = statement.offset((page - 1) * page_size).limit(page_size)
        count_statement = select(func.count()).select_from(self.model).where(*conditions)

        try:
            total = (await self.session.execute(count_statement)).scalar() or 0
            rows = list((await self.session.execute(statement)).scalars().all())
        except SQLAlchemyError as e:
            raise self._wrap(e, "query") from e

        result = QueryResult(results=rows, page_count=-(-total // page_size))
        if use_cache:
            await cast("CacheManager", self.cache).set(
                cache_key,
                {
                    "results": [row.model_dump(mode="json") for row in rows],
                    "page_count": result.page_count,
                },
                ttl=self.query_ttl,
                namespace=self.cache_namespace,
            )
        return result

    async def get_all(self, sort: SortSpec = ()) -> list[ModelT]:
        """Every record, sorted. Never cached."""
        statement = select(self.model)
        for name, descending in sort:
            column = getattr(self.model, name)
            statement = statement.order_by(column.desc() if descending else column.asc())
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise self._wrap(e, "get_all") from e
        return list(result.scalars().all())

    async def count(self) -> int:
        statement = select(func.count()).select_from(self.model)
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise self._wrap(e, "count") from e
        return result.scalar() or 0

    def _query_key(
        self,
        filters: dict[str, Any],
        sort: SortSpec,
        page: int,
        page_size: int,
    ) -> str:
        raw = serialize(
            {
                "filters": sorted(filters.items()),
                "sort": list(sort),
                "page": page,
                "size": page_size,
            },
        )
        return sha1(raw.encode("utf-8"), usedforsecurity=False).hexdigest()

    def _invalidate(self) -> None:
        if self.cache is not None:
            mark_cache_stale(self.session, self.cache, self.cache_namespace)

    def _wrap(self, error: SQLAlchemyError, operation: str) -> RepositoryError:
        table = self.model.__tablename__
        logger.warning("Repository operation failed", table=table, operation=operation, error=str(error))
        if isinstance(error, IntegrityError):
            message = str(error.orig) if error.orig else str(error)
            if "unique" in message.lower() or "duplicate" in message.lower():
                return DuplicateEntryError(detail=message)
        return RepositoryError(detail=f"{operation} on {table} failed: {error}")
