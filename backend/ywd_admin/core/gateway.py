# ywd_admin/core/gateway.py
"""
Graph-style access layer over Tortoise ORM.

Nodes are addressed by table name + primary key, relations by relation table
name + (source, target). Workflows talk to the database through one
``GraphGateway`` created at startup and injected into request handlers.

Failures are translated into the application taxonomy:
  - connection problems -> TransportError
  - anything else the ORM rejects -> QueryError
The gateway never retries; callers decide.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable

from tortoise import Tortoise, connections, fields
from tortoise.exceptions import BaseORMException, DBConnectionError
from tortoise.models import Model
from tortoise.transactions import in_transaction

from ywd_admin.core import db as db_module
from ywd_admin.core.errors import AppError, QueryError, TransportError

logger = logging.getLogger("uvicorn.error")


def parse_ref(ref: Any, table: str | None = None) -> str:
    """
    Accept both bare ids ("3f2c...") and table-qualified references
    ("users:3f2c..."). A prefix is only stripped when it names ``table``
    (or any table when ``table`` is None).
    """
    raw = str(ref or "").strip()
    if ":" in raw:
        prefix, _, rest = raw.partition(":")
        if table is None or prefix == table:
            return rest
    return raw


class GraphGateway:
    """
    Holder of the shared database session.

    ``ensure_connected`` is idempotent: it initializes Tortoise on first use,
    and keeps retrying on later calls if a previous attempt failed.
    """

    def __init__(self, config: dict | None = None):
        self._config = config
        self._connected = False
        self._tables: dict[str, type[Model]] = {}

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------
    @property
    def connected(self) -> bool:
        return self._connected and Tortoise._inited

    async def ensure_connected(self) -> None:
        if self.connected:
            return
        try:
            if not Tortoise._inited:
                await Tortoise.init(config=self._config or db_module.TORTOISE_ORM)
        except (DBConnectionError, ConnectionError, OSError) as exc:
            self._connected = False
            logger.error("[gateway] database connection failed: %s", exc)
            raise TransportError() from exc
        self._connected = True
        self._tables = {}
        logger.info("[gateway] connected to database")

    async def close(self) -> None:
        if Tortoise._inited:
            await Tortoise.close_connections()
        self._connected = False

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """Run the enclosed workflow steps in one database transaction."""
        await self.ensure_connected()
        async with self._guard("transaction"):
            async with in_transaction():
                yield

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    @asynccontextmanager
    async def _guard(self, what: str) -> AsyncIterator[None]:
        try:
            yield
        except AppError:
            raise
        except (DBConnectionError, ConnectionError) as exc:
            logger.error("[gateway] %s: transport failure: %s", what, exc)
            raise TransportError() from exc
        except BaseORMException as exc:
            logger.error("[gateway] %s: query failed: %s", what, exc)
            raise QueryError() from exc

    def model(self, kind: str) -> type[Model]:
        """Resolve a table name ("users", "has_car", ...) to its model class."""
        if not self._tables:
            for app_models in Tortoise.apps.values():
                for model in app_models.values():
                    self._tables[model._meta.db_table] = model
        try:
            return self._tables[kind]
        except KeyError:
            raise QueryError(code="DB_UNKNOWN_TABLE") from None

    @staticmethod
    def _coerce_pk(model: type[Model], raw: Any) -> Any | None:
        """Convert an external id to the model's pk type; None if it can't be one."""
        if raw is None:
            return None
        pk_field = model._meta.pk
        try:
            if isinstance(pk_field, fields.UUIDField):
                return raw if isinstance(raw, uuid.UUID) else uuid.UUID(parse_ref(raw, model._meta.db_table))
            if isinstance(pk_field, fields.IntField):
                return int(parse_ref(raw, model._meta.db_table))
        except (TypeError, ValueError):
            return None
        return raw

    # ------------------------------------------------------------------
    # Node primitives
    # ------------------------------------------------------------------
    async def query(self, sql: str, params: list | None = None) -> list[dict]:
        """Run a raw statement on the default connection."""
        await self.ensure_connected()
        async with self._guard("query"):
            return await connections.get("default").execute_query_dict(sql, params or [])

    async def create(self, kind: str, data: dict) -> Model:
        await self.ensure_connected()
        async with self._guard(f"create {kind}"):
            return await self.model(kind).create(**data)

    async def select(self, kind: str, record_id: Any) -> Model | None:
        await self.ensure_connected()
        model = self.model(kind)
        pk = self._coerce_pk(model, record_id)
        if pk is None:
            return None
        async with self._guard(f"select {kind}"):
            return await model.get_or_none(pk=pk)

    async def find(self, kind: str, *, order_by: Iterable[str] = (), limit: int | None = None, **filters) -> list:
        """
        Select nodes by field filters. Filters may traverse relations through
        reverse names, e.g. ``find("plan_history", of_cadet_out__target_id=cid)``.
        """
        await self.ensure_connected()
        async with self._guard(f"find {kind}"):
            qs = self.model(kind).filter(**filters)
            if order_by:
                qs = qs.order_by(*order_by)
            if limit is not None:
                qs = qs.limit(limit)
            return await qs

    async def find_one(self, kind: str, *, order_by: Iterable[str] = (), **filters) -> Model | None:
        rows = await self.find(kind, order_by=order_by, limit=1, **filters)
        return rows[0] if rows else None

    async def merge(self, kind: str, record_id: Any, data: dict) -> Model | None:
        """Overwrite the given fields of a node; None when the node is absent."""
        record = await self.select(kind, record_id)
        if record is None:
            return None
        async with self._guard(f"merge {kind}"):
            record.update_from_dict(data)
            await record.save(update_fields=list(data.keys()) or None)
        return record

    async def delete(self, kind: str, record_id: Any) -> int:
        """Delete one node (and, through the schema, its relations). Absent is a no-op."""
        return await self.delete_many(kind, [record_id])

    async def delete_many(self, kind: str, record_ids: Iterable[Any]) -> int:
        await self.ensure_connected()
        model = self.model(kind)
        pks = [pk for pk in (self._coerce_pk(model, r) for r in record_ids) if pk is not None]
        if not pks:
            return 0
        async with self._guard(f"delete {kind}"):
            return await model.filter(**{f"{model._meta.pk_attr}__in": pks}).delete()

    # ------------------------------------------------------------------
    # Relation primitives
    # ------------------------------------------------------------------
    async def relate(self, edge: str, source: Any, target: Any) -> Model:
        await self.ensure_connected()
        async with self._guard(f"relate {edge}"):
            return await self.model(edge).create(source_id=source, target_id=target)

    async def unrelate(self, edge: str, *, source: Any = None, target: Any = None) -> int:
        """Remove relations matching the given endpoint(s); returns how many were removed."""
        if source is None and target is None:
            raise QueryError(code="DB_UNBOUNDED_DELETE")
        await self.ensure_connected()
        filters = {}
        if source is not None:
            filters["source_id"] = source
        if target is not None:
            filters["target_id"] = target
        async with self._guard(f"unrelate {edge}"):
            return await self.model(edge).filter(**filters).delete()

    async def edges(self, edge: str, **filters) -> list[tuple]:
        """All ``(source_id, target_id)`` pairs of a relation, optionally filtered."""
        await self.ensure_connected()
        async with self._guard(f"edges {edge}"):
            return await (
                self.model(edge).filter(**filters).order_by("id").values_list("source_id", "target_id")
            )

    async def targets(self, edge: str, source: Any) -> list:
        """Follow ``source -> edge -> ?`` and return target ids in creation order."""
        await self.ensure_connected()
        async with self._guard(f"traverse {edge}"):
            return await (
                self.model(edge).filter(source_id=source).order_by("id").values_list("target_id", flat=True)
            )

    async def sources(self, edge: str, target: Any) -> list:
        """Follow ``? -> edge -> target`` and return source ids in creation order."""
        await self.ensure_connected()
        async with self._guard(f"traverse {edge}"):
            return await (
                self.model(edge).filter(target_id=target).order_by("id").values_list("source_id", flat=True)
            )

    async def first_target(self, edge: str, source: Any) -> Any | None:
        ids = await self.targets(edge, source)
        return ids[0] if ids else None

    async def first_source(self, edge: str, target: Any) -> Any | None:
        ids = await self.sources(edge, target)
        return ids[0] if ids else None
