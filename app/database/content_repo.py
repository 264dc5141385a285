from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence, Optional
from app.schemas.content import Folder, StudyList, Flashcard


class ContentRepo(ABC):
    @abstractmethod
    async def find_folder(self, folder_id: str) -> Optional[Folder]:
        """Ritorna una pasta per ID, oppure None se non esiste."""
        raise NotImplementedError

    @abstractmethod
    async def find_list(self, list_id: str) -> Optional[StudyList]:
        """Ritorna una lista per ID, oppure None se non esiste."""
        raise NotImplementedError

    @abstractmethod
    async def find_lists_in_folder(self, folder_id: str) -> Sequence[StudyList]:
        """Ritorna le liste contenute in una pasta, in ordine di order_index."""
        raise NotImplementedError

    @abstractmethod
    async def find_flashcards(self, list_id: str) -> Sequence[Flashcard]:
        raise NotImplementedError

    @abstractmethod
    async def count_flashcards(self, list_ids: Sequence[str]) -> int:
        raise NotImplementedError

    @abstractmethod
    async def create_folder(self, folder: Folder) -> str:
        """Inserisce una pasta (ID già generato) e ritorna l'ID."""
        raise NotImplementedError

    @abstractmethod
    async def create_list(self, study_list: StudyList) -> str:
        raise NotImplementedError

    @abstractmethod
    async def create_flashcard(self, card: Flashcard) -> str:
        raise NotImplementedError

    @abstractmethod
    async def delete_flashcards(self, list_id: str) -> int:
        """Cancella tutte le flashcard di una lista, ritorna quante."""
        raise NotImplementedError

    @abstractmethod
    async def delete_list(self, list_id: str, class_id: str) -> bool:
        """Cancella la lista solo se è una copia della turma class_id."""
        raise NotImplementedError

    @abstractmethod
    async def delete_folder(self, folder_id: str, class_id: str) -> bool:
        """Cancella la pasta solo se è una copia della turma class_id."""
        raise NotImplementedError
