from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence, Optional
from app.schemas.assignment import Atribuicao, AtribuicaoStatus

class AssignmentRepo(ABC):
    @abstractmethod
    async def create(self, atribuicao: Atribuicao) -> str:
        """Inserisce un'atribuicao (ID già generato nel service) e ritorna l'ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, atribuicao_id: str) -> Optional[Atribuicao]:
        """Ritorna un'atribuicao per ID, oppure None se non esiste."""
        raise NotImplementedError

    @abstractmethod
    async def find_for_turma(self, turma_id: str) -> Sequence[Atribuicao]:
        """Ritorna le atribuicoes di una turma, le più recenti prima."""
        raise NotImplementedError

    @abstractmethod
    async def find_many(self, atribuicao_ids: Sequence[str]) -> Sequence[Atribuicao]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, atribuicao_id: str) -> bool:
        """Cancella un'atribuicao. Ritorna True se qualcosa è stato cancellato."""
        raise NotImplementedError

    @abstractmethod
    async def create_statuses(self, statuses: Sequence[AtribuicaoStatus]) -> int:
        """Fan-out: inserisce le righe di status, ritorna quante."""
        raise NotImplementedError

    @abstractmethod
    async def find_statuses(self, atribuicao_id: str) -> Sequence[AtribuicaoStatus]:
        raise NotImplementedError

    @abstractmethod
    async def find_statuses_for_student(self, aluno_id: str) -> Sequence[AtribuicaoStatus]:
        """Status di un alunno, aggiornati più di recente prima."""
        raise NotImplementedError

    @abstractmethod
    async def upsert_status(self, status: AtribuicaoStatus) -> AtribuicaoStatus:
        raise NotImplementedError

    @abstractmethod
    async def delete_statuses(self, atribuicao_id: str) -> int:
        raise NotImplementedError
