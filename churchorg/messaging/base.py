"""
    An abstract change feed that enforces the implementation
    of the 'subscribe' and 'unsubscribe' methods.
"""
from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional


@dataclass
class Subscription:
    """Handle returned by ChangeFeed.subscribe; pass it back to unsubscribe."""

    table: str
    conditions: Dict[str, Any] = field(default_factory=dict)
    channel: Any = None
    active: bool = True


class ChangeFeed:
    """Abstract class for a realtime feed of row changes."""

    @abstractmethod
    async def subscribe(self, table: str, callback_function: Callable[[dict], Any],
                        conditions: Optional[Dict[str, Any]] = None) -> Subscription:
        """
        Starts delivering insert/update/delete notifications for rows of `table`.

        Args:
            table (str): The table to watch.
            callback_function (callable): Called with the change payload on every notification.
            conditions (dict): Equality filter scoping the notifications, e.g. {"org_unit_id": "..."}.
        """

    @abstractmethod
    async def unsubscribe(self, subscription: Subscription):
        """
        Stops the notifications of a subscription. Unsubscribing twice is a no-op.

        Args:
            subscription (Subscription): The handle returned by subscribe.
        """
