import logging
from typing import Any

from pydantic import BaseModel, Field
from sqlalchemy import MetaData, Table, delete, insert, select
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker

from database.models import Base

logger = logging.getLogger(__name__)


class StoreConfigurationError(RuntimeError):
    """Не хватает настроек для подключения к выбранному хранилищу."""


class StoreError(BaseModel):
    """Ошибка, которую хранилище вернуло в ответе на запрос."""

    message: str
    code: str | None = None
    details: str | None = None
    hint: str | None = None

    def __str__(self) -> str:
        text = self.message
        if self.code:
            text = f"[{self.code}] {text}"
        if self.details:
            text = f"{text} ({self.details})"
        return text


class StoreResponse(BaseModel):
    data: list[dict[str, Any]] = Field(default_factory=list)
    error: StoreError | None = None


class TableQuery:
    """
    Построитель запроса к одной таблице в стиле PostgREST:
    store.table("exercises").delete().neq("id", value).execute()

    Ошибки самого запроса (нет таблицы/колонки, нарушение ограничений)
    возвращаются в StoreResponse.error, ошибки соединения пробрасываются.
    """

    def __init__(self, session_pool: async_sessionmaker, metadata: MetaData, name: str):
        self.session_pool = session_pool
        self.metadata = metadata
        self.name = name
        self._action = "select"
        self._columns = "*"
        self._payload: list[dict[str, Any]] = []
        self._filters: list[tuple[str, str, Any]] = []
        self._order: tuple[str, bool] | None = None
        self._limit: int | None = None

    def select(self, columns: str = "*") -> "TableQuery":
        self._action = "select"
        self._columns = columns
        return self

    def delete(self) -> "TableQuery":
        self._action = "delete"
        return self

    def insert(self, payload: dict[str, Any] | list[dict[str, Any]]) -> "TableQuery":
        self._action = "insert"
        self._payload = payload if isinstance(payload, list) else [payload]
        return self

    def eq(self, column: str, value: Any) -> "TableQuery":
        self._filters.append(("eq", column, value))
        return self

    def neq(self, column: str, value: Any) -> "TableQuery":
        self._filters.append(("neq", column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "TableQuery":
        self._order = (column, desc)
        return self

    def limit(self, count: int) -> "TableQuery":
        self._limit = count
        return self

    def _build(self, table: Table):
        conditions = []
        for op, column, value in self._filters:
            if op == "eq":
                conditions.append(table.c[column] == value)
            else:
                conditions.append(table.c[column] != value)

        if self._action == "delete":
            return delete(table).where(*conditions).returning(*table.c)

        if self._action == "insert":
            return insert(table).values(self._payload).returning(*table.c)

        if self._columns.strip() == "*":
            columns = list(table.c)
        else:
            columns = [table.c[c.strip()] for c in self._columns.split(",") if c.strip()]
        stmt = select(*columns).where(*conditions)
        if self._order:
            column, desc = self._order
            stmt = stmt.order_by(table.c[column].desc() if desc else table.c[column])
        if self._limit is not None:
            stmt = stmt.limit(self._limit)
        return stmt

    async def execute(self) -> StoreResponse:
        table = self.metadata.tables.get(self.name)
        if table is None:
            return StoreResponse(
                error=StoreError(
                    message=f'relation "{self.name}" does not exist', code="42P01"
                )
            )

        try:
            stmt = self._build(table)
        except KeyError as e:
            return StoreResponse(
                error=StoreError(
                    message=f"column {e.args[0]} of relation \"{self.name}\" does not exist",
                    code="42703",
                )
            )

        async with self.session_pool() as session:
            try:
                result = await session.execute(stmt)
                rows = [dict(row) for row in result.mappings().all()]
                await session.commit()
            except DBAPIError as e:
                # OperationalError/InterfaceError: база недоступна или соединение оборвалось
                if e.connection_invalidated or isinstance(e, (OperationalError, InterfaceError)):
                    raise
                await session.rollback()
                logger.debug(f"Запрос к '{self.name}' отклонен базой: {e}")
                return StoreResponse(
                    error=StoreError(
                        message=str(e.orig),
                        code=type(e.orig).__name__,
                        details=str(e.statement),
                    )
                )

        return StoreResponse(data=rows)


class SqlAlchemyStore:
    """Хранилище поверх пула асинхронных сессий SQLAlchemy."""

    def __init__(self, session_pool: async_sessionmaker, metadata: MetaData = Base.metadata):
        self.session_pool = session_pool
        self.metadata = metadata

    def table(self, name: str) -> TableQuery:
        return TableQuery(self.session_pool, self.metadata, name)
