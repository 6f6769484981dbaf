import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from churchorg.data.base import StoreAdapter, StoreError

logger = logging.getLogger(__name__)


class SupabaseAdapter(StoreAdapter):
    """Supabase adapter for querying the PostgREST tables of a hosted project."""

    def __init__(self, client: AsyncClient):
        self._client = client

    @property
    def client(self) -> AsyncClient:
        return self._client

    @staticmethod
    def _condition_value(value):
        if isinstance(value, bool):
            return 'true' if value else 'false'
        return value

    def _apply_conditions(self, query, conditions: Optional[Dict[str, Any]]):
        for key, value in (conditions or {}).items():
            if value is None:
                query = query.is_(key, 'null')
            elif isinstance(value, (list, tuple, set)):
                query = query.in_(key, [self._condition_value(v) for v in value])
            else:
                query = query.eq(key, self._condition_value(value))
        return query

    async def _execute(self, action: str, query):
        """Runs a built query, translating store and transport failures into StoreError."""
        try:
            return await query.execute()
        except APIError as e:
            logger.error("Store rejected %s: %s", action, e.message)
            raise StoreError(action, e.message or str(e)) from e
        except httpx.HTTPError as e:
            logger.error("Store unreachable during %s: %s", action, e)
            raise StoreError(action, str(e)) from e

    async def get_many(self, table: str, conditions: Dict[str, Any] = None, sort: List[Tuple[str, str]] = None,
                       limit: Optional[int] = None, columns: str = '*',
                       like: Dict[str, str] = None) -> List[Dict[str, Any]]:
        query = self._apply_conditions(self._client.table(table).select(columns), conditions)
        for column, pattern in (like or {}).items():
            query = query.ilike(column, pattern)
        for column, direction in sort or []:
            query = query.order(column, desc=direction.upper() == 'DESC')
        if limit is not None:
            query = query.limit(limit)

        response = await self._execute(f"select from {table}", query)
        return response.data or []

    async def get_count(self, table: str, conditions: Dict[str, Any] = None) -> int:
        query = self._apply_conditions(
            self._client.table(table).select('*', count='exact', head=True), conditions)
        response = await self._execute(f"count {table}", query)
        return response.count or 0

    async def insert(self, table: str, data: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._execute(f"insert into {table}", self._client.table(table).insert(data))
        return response.data[0] if response.data else {}

    async def update(self, table: str, data: Dict[str, Any], conditions: Dict[str, Any]) -> List[Dict[str, Any]]:
        query = self._apply_conditions(self._client.table(table).update(data), conditions)
        response = await self._execute(f"update {table}", query)
        return response.data or []

    async def delete(self, table: str, conditions: Dict[str, Any]) -> None:
        if not conditions:
            # PostgREST refuses unfiltered deletes; fail before the round-trip.
            raise StoreError(f"delete from {table}", "refusing to delete without conditions")
        query = self._apply_conditions(self._client.table(table).delete(), conditions)
        await self._execute(f"delete from {table}", query)


async def create_supabase_client(config) -> AsyncClient:
    """Creates the async Supabase client described by a validated StoreConfig."""
    return await acreate_client(config.supabase_url, config.supabase_key)


async def create_supabase_adapter(config) -> SupabaseAdapter:
    return SupabaseAdapter(await create_supabase_client(config))
