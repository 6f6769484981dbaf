"""
A change feed over Supabase Realtime `postgres_changes` channels.
"""
import logging
from typing import Any, Callable, Dict, Optional

from supabase import AsyncClient

from churchorg.data.base import StoreError

from . import ChangeFeed, Subscription

logger = logging.getLogger(__name__)


class SupabaseChangeFeed(ChangeFeed):
    """Subscribes to row changes of a Supabase project, one channel per subscription."""

    def __init__(self, client: AsyncClient, schema: str = 'public'):
        """
        Args:
            client (AsyncClient): The async Supabase client.
            schema (str): The database schema whose tables are watched.
        """
        self._client = client
        self._schema = schema

    @staticmethod
    def _build_filter(conditions: Optional[Dict[str, Any]]) -> Optional[str]:
        """Realtime accepts a single `column=eq.value` filter."""
        if not conditions:
            return None
        if len(conditions) > 1:
            raise ValueError("Realtime subscriptions support a single filter condition.")
        ((column, value),) = conditions.items()
        return f"{column}=eq.{value}"

    async def subscribe(self, table: str, callback_function: Callable[[dict], Any],
                        conditions: Optional[Dict[str, Any]] = None) -> Subscription:
        realtime_filter = self._build_filter(conditions)
        topic = f"{table}-sync:{realtime_filter or '*'}"

        def _on_change(payload):
            logger.info("Change on %s (%s)", table, realtime_filter or 'all rows')
            try:
                callback_function(payload)
            except Exception:  # pylint: disable=W0718
                logger.exception("Error processing change notification...")

        channel = self._client.channel(topic)
        channel.on_postgres_changes(
            "*",
            callback=_on_change,
            table=table,
            schema=self._schema,
            filter=realtime_filter,
        )
        try:
            await channel.subscribe()
        except Exception as e:
            logger.error("Could not subscribe to %s: %s", topic, e)
            raise StoreError(f"subscribe to {table}", str(e)) from e
        logger.info("Subscribed to %s", topic)

        return Subscription(table=table, conditions=dict(conditions or {}), channel=channel)

    async def unsubscribe(self, subscription: Subscription):
        if not subscription.active:
            return
        subscription.active = False
        await self._client.remove_channel(subscription.channel)
        logger.info("Unsubscribed from %s", subscription.table)
