"""
base repository for churchorg
"""
import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from churchorg.data.base import StoreAdapter
from churchorg.models.base_model import BaseModel

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    BaseRepository class
    """

    def __init__(
        self,
        adapter: StoreAdapter,
        model: Type[BaseModel],
        table_name: str
    ):
        self.adapter = adapter
        self.model = model
        self.table_name = table_name

    async def get_one(
        self,
        conditions: Dict[str, Any]
    ) -> Optional[BaseModel]:
        """
        Fetches a single record from the table based on given conditions.

        :param conditions: filter conditions
        :return: a model instance if found, None otherwise
        """
        records = await self.adapter.get_many(self.table_name, conditions, limit=1)
        if not records:
            return None
        return self.model.from_dict(records[0])

    async def get_many(
        self,
        conditions: Dict[str, Any] = None,
        sort: List[Tuple[str, str]] = None,
        limit: Optional[int] = None
    ) -> List[BaseModel]:
        """
        Fetches multiple records from the table based on given conditions.

        :param conditions: filter conditions
        :param sort: sort order
        :param limit: maximum number of records to return
        :return: list of model instances
        """
        records = await self.adapter.get_many(self.table_name, conditions, sort, limit)
        return [self.model.from_dict(record) for record in records]

    async def get_count(self, conditions: Dict[str, Any] = None) -> int:
        return await self.adapter.get_count(self.table_name, conditions)

    async def create(self, instance: BaseModel) -> BaseModel:
        """
        Validates and inserts a model instance.

        :param instance: The model instance to insert.
        :return: The row as stored, with its generated id.
        """
        instance.validate()
        row = await self.adapter.insert(self.table_name, instance.get_for_db())
        logger.info("Created %s %s", self.table_name, row.get('id'))
        return self.model.from_dict(row) if row else instance

    async def update(
        self,
        conditions: Dict[str, Any],
        fields: Dict[str, Any]
    ) -> List[BaseModel]:
        """
        Updates the given columns of every record matching the conditions.

        :param conditions: filter conditions
        :param fields: columns to change
        :return: the updated records
        """
        records = await self.adapter.update(self.table_name, fields, conditions)
        return [self.model.from_dict(record) for record in records]

    async def delete(self, conditions: Dict[str, Any]) -> None:
        """
        Physically deletes every record matching the conditions.
        """
        await self.adapter.delete(self.table_name, conditions)
        logger.info("Deleted from %s where %s", self.table_name, conditions)
