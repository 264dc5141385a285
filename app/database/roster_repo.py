from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence, Optional
from app.schemas.turma import Turma, TurmaMembro


class RosterRepo(ABC):
    @abstractmethod
    async def find_turma(self, turma_id: str) -> Optional[Turma]:
        raise NotImplementedError

    @abstractmethod
    async def active_members(self, turma_id: str) -> Sequence[TurmaMembro]:
        """Membri con ativo = true, letti una sola volta al momento della chiamata."""
        raise NotImplementedError

    @abstractmethod
    async def is_active_member(self, turma_id: str, user_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def count_active_members(self, turma_id: str) -> int:
        raise NotImplementedError
