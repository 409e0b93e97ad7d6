import logging
from typing import Any

from postgrest.exceptions import APIError
from supabase import AsyncClient

from database.store import StoreError, StoreResponse

logger = logging.getLogger(__name__)


class SupabaseQuery:
    """Обертка над построителем запросов supabase, возвращающая StoreResponse."""

    def __init__(self, builder: Any, name: str):
        self.builder = builder
        self.name = name

    def _wrap(self, builder: Any) -> "SupabaseQuery":
        self.builder = builder
        return self

    def select(self, columns: str = "*") -> "SupabaseQuery":
        return self._wrap(self.builder.select(columns))

    def delete(self) -> "SupabaseQuery":
        return self._wrap(self.builder.delete())

    def insert(self, payload: dict[str, Any] | list[dict[str, Any]]) -> "SupabaseQuery":
        return self._wrap(self.builder.insert(payload))

    def eq(self, column: str, value: Any) -> "SupabaseQuery":
        return self._wrap(self.builder.eq(column, value))

    def neq(self, column: str, value: Any) -> "SupabaseQuery":
        return self._wrap(self.builder.neq(column, value))

    def order(self, column: str, desc: bool = False) -> "SupabaseQuery":
        return self._wrap(self.builder.order(column, desc=desc))

    def limit(self, count: int) -> "SupabaseQuery":
        return self._wrap(self.builder.limit(count))

    async def execute(self) -> StoreResponse:
        try:
            response = await self.builder.execute()
        except APIError as e:
            logger.debug(f"PostgREST вернул ошибку для '{self.name}': {e}")
            return StoreResponse(
                error=StoreError(
                    message=e.message or str(e),
                    code=e.code,
                    details=str(e.details) if e.details else None,
                    hint=str(e.hint) if e.hint else None,
                )
            )
        return StoreResponse(data=response.data or [])


class SupabaseStore:
    """Хранилище поверх асинхронного клиента Supabase."""

    def __init__(self, client: AsyncClient):
        self.client = client

    def table(self, name: str) -> SupabaseQuery:
        return SupabaseQuery(self.client.table(name), name)
