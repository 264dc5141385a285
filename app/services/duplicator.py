"""
Copia profonda di paste e liste per le atribuicoes.

Le copie non sono transazionali (niente transazioni cross-collection su un
Mongo standalone): la creazione della radice è fatale, le foglie fallite
vengono saltate e riportate come LeafWarning.
"""
import logging
import uuid
from typing import List, Optional

from app.core.config import settings
from app.database.content_repo import ContentRepo
from app.schemas.assignment import CopyResult, LeafWarning
from app.schemas.content import (
    FLASHCARD_CONTENT_FIELDS,
    FOLDER_CONTENT_FIELDS,
    LIST_CONTENT_FIELDS,
    Flashcard,
    Folder,
    StudyList,
)
from app.services.errors import CopyFailed, SourceNotFound

logger = logging.getLogger("assignment.duplicator")


def new_id() -> str:
    return str(uuid.uuid4())


def _prefixed(title: str) -> str:
    return f"{settings.copy_title_prefix} {title}"


def _pick(model, fields) -> dict:
    return {f: getattr(model, f) for f in fields}


class ContentDuplicator:

    @staticmethod
    async def duplicate_list(
        source_list_id: str,
        turma_id: str,
        teacher_id: str,
        content: ContentRepo,
        destination_folder_id: Optional[str] = None,
    ) -> CopyResult:
        """
        Copia una lista e le sue flashcard in una nuova lista della turma.

        Con destination_folder_id la copia fa parte di una copia di pasta:
        il titolo resta invariato e la lista viene agganciata alla nuova pasta.
        Una lista copiata da sola riceve il prefisso nel titolo.
        """
        source = await content.find_list(source_list_id)
        if source is None:
            raise SourceNotFound(f"Lista {source_list_id} não encontrada")

        inside_folder = destination_folder_id is not None
        copy = StudyList(
            id=new_id(),
            folder_id=destination_folder_id,
            owner_id=teacher_id,
            title=source.title if inside_folder else _prefixed(source.title),
            visibility="class",
            class_id=turma_id,
            **_pick(source, LIST_CONTENT_FIELDS),
        )
        try:
            new_list_id = await content.create_list(copy)
        except Exception as e:
            logger.exception("Creazione copia lista fallita (sorgente %s)", source_list_id)
            raise CopyFailed(f"Erro ao copiar lista {source_list_id}") from e

        warnings: List[LeafWarning] = []
        try:
            cards = await content.find_flashcards(source_list_id)
        except Exception as e:
            logger.warning("Lettura flashcard di %s fallita: %s", source_list_id, e)
            warnings.append(LeafWarning(
                kind="copy", entity="list", entity_id=source_list_id,
                message=f"flashcards not readable: {e}",
            ))
            cards = []

        copied = 0
        for card in cards:
            try:
                await content.create_flashcard(Flashcard(
                    id=new_id(),
                    list_id=new_list_id,
                    user_id=teacher_id,
                    **_pick(card, FLASHCARD_CONTENT_FIELDS),
                ))
                copied += 1
            except Exception as e:
                # PartialCopyWarning
                logger.warning("Copia flashcard %s -> lista %s fallita: %s", card.id, new_list_id, e)
                warnings.append(LeafWarning(
                    kind="copy", entity="flashcard", entity_id=card.id, message=str(e),
                ))

        logger.info(
            "Lista %s copiata in %s (%d/%d flashcard)", source_list_id, new_list_id, copied, len(cards)
        )
        return CopyResult(root_id=new_list_id, warnings=warnings)

    @staticmethod
    async def duplicate_folder(
        source_folder_id: str,
        turma_id: str,
        teacher_id: str,
        content: ContentRepo,
    ) -> CopyResult:
        source = await content.find_folder(source_folder_id)
        if source is None:
            raise SourceNotFound(f"Pasta {source_folder_id} não encontrada")

        copy = Folder(
            id=new_id(),
            owner_id=teacher_id,
            title=_prefixed(source.title),
            visibility="class",
            class_id=turma_id,
            **_pick(source, FOLDER_CONTENT_FIELDS),
        )
        try:
            new_folder_id = await content.create_folder(copy)
        except Exception as e:
            logger.exception("Creazione copia pasta fallita (sorgente %s)", source_folder_id)
            raise CopyFailed(f"Erro ao copiar pasta {source_folder_id}") from e

        warnings: List[LeafWarning] = []
        try:
            lists = await content.find_lists_in_folder(source_folder_id)
        except Exception as e:
            logger.warning("Lettura liste di %s fallita: %s", source_folder_id, e)
            warnings.append(LeafWarning(
                kind="copy", entity="folder", entity_id=source_folder_id,
                message=f"lists not readable: {e}",
            ))
            lists = []

        failed = 0
        for child in lists:
            try:
                result = await ContentDuplicator.duplicate_list(
                    child.id, turma_id, teacher_id, content, destination_folder_id=new_folder_id
                )
                warnings.extend(result.warnings)
            except Exception as e:
                failed += 1
                logger.warning("Copia lista %s nella pasta %s fallita: %s", child.id, new_folder_id, e)
                warnings.append(LeafWarning(
                    kind="copy", entity="list", entity_id=child.id, message=str(e),
                ))

        logger.info(
            "Pasta %s copiata in %s (%d liste, %d fallite)",
            source_folder_id, new_folder_id, len(lists), failed,
        )
        return CopyResult(root_id=new_folder_id, warnings=warnings)
