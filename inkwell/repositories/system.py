"""Repositories for the singleton statistic and preference rows."""

from inkwell.configs import PREFERENCE_ID, STATISTIC_ID
from inkwell.models.system import PreferenceDB, StatisticDB
from inkwell.repositories.base import BaseRepository


class StatisticRepository(BaseRepository[StatisticDB]):
    model = StatisticDB

    async def get_statistic(self) -> StatisticDB | None:
        return await self.get_by_id(STATISTIC_ID)


class PreferenceRepository(BaseRepository[PreferenceDB]):
    model = PreferenceDB

    async def get_preference(self) -> PreferenceDB | None:
        return await self.get_by_id(PREFERENCE_ID)
