"""
Cancellazione a cascata di un'atribuicao: status, contenuto copiato, riga.

Idempotente: un'atribuicao già cancellata è un successo. Solo righe con
class_id uguale alla turma dell'atribuicao vengono toccate, quindi il
contenuto originale del professore non viene mai rimosso.
"""
import logging
from typing import List

from app.database.assignment_repo import AssignmentRepo
from app.database.content_repo import ContentRepo
from app.database.roster_repo import RosterRepo
from app.schemas.assignment import DeleteReport, LeafWarning
from app.services.errors import DeleteFailed
from app.services.guards import assert_turma_owner

logger = logging.getLogger("assignment.cascade")


def _leaf(warnings: List[LeafWarning], entity: str, entity_id: str, message: str):
    logger.warning("Cancellazione %s %s: %s", entity, entity_id, message)
    warnings.append(LeafWarning(kind="delete", entity=entity, entity_id=entity_id, message=message))


class CascadeDeleter:

    @staticmethod
    async def remove_list_copy(list_id: str, turma_id: str, content: ContentRepo) -> List[LeafWarning]:
        warnings: List[LeafWarning] = []
        try:
            study_list = await content.find_list(list_id)
        except Exception as e:
            _leaf(warnings, "list", list_id, f"lookup failed: {e}")
            return warnings
        if study_list is None:
            # riga già sparita: restano da togliere le flashcard orfane della copia
            try:
                await content.delete_flashcards(list_id)
            except Exception as e:
                _leaf(warnings, "flashcards", list_id, str(e))
            return warnings
        if study_list.class_id != turma_id:
            _leaf(warnings, "list", list_id, "not a copy of this turma, left untouched")
            return warnings

        try:
            await content.delete_flashcards(list_id)
        except Exception as e:
            _leaf(warnings, "flashcards", list_id, str(e))
        try:
            await content.delete_list(list_id, turma_id)
        except Exception as e:
            _leaf(warnings, "list", list_id, str(e))
        return warnings

    @staticmethod
    async def remove_folder_copy(folder_id: str, turma_id: str, content: ContentRepo) -> List[LeafWarning]:
        warnings: List[LeafWarning] = []
        try:
            folder = await content.find_folder(folder_id)
        except Exception as e:
            _leaf(warnings, "folder", folder_id, f"lookup failed: {e}")
            return warnings
        if folder is not None and folder.class_id != turma_id:
            _leaf(warnings, "folder", folder_id, "not a copy of this turma, left untouched")
            return warnings

        try:
            lists = await content.find_lists_in_folder(folder_id)
        except Exception as e:
            _leaf(warnings, "folder", folder_id, f"lists not readable: {e}")
            lists = []
        for child in lists:
            warnings.extend(await CascadeDeleter.remove_list_copy(child.id, turma_id, content))

        if folder is None:
            return warnings
        try:
            await content.delete_folder(folder_id, turma_id)
        except Exception as e:
            _leaf(warnings, "folder", folder_id, str(e))
        return warnings

    @staticmethod
    async def remove_copy(fonte_tipo: str, fonte_id: str, turma_id: str, content: ContentRepo) -> List[LeafWarning]:
        if fonte_tipo == "pasta":
            return await CascadeDeleter.remove_folder_copy(fonte_id, turma_id, content)
        return await CascadeDeleter.remove_list_copy(fonte_id, turma_id, content)

    @staticmethod
    async def delete_assignment(
        atribuicao_id: str,
        teacher_id: str,
        roster: RosterRepo,
        content: ContentRepo,
        repo: AssignmentRepo,
    ) -> DeleteReport:
        atribuicao = await repo.find_one(atribuicao_id)
        if atribuicao is None:
            logger.info("Atribuicao %s già cancellata", atribuicao_id)
            return DeleteReport(atribuicao_id=atribuicao_id, existed=False)

        await assert_turma_owner(atribuicao.turma_id, teacher_id, roster)

        warnings: List[LeafWarning] = []

        # 1) status degli alunni
        try:
            removed = await repo.delete_statuses(atribuicao_id)
            logger.info("Atribuicao %s: %d status cancellati", atribuicao_id, removed)
        except Exception as e:
            _leaf(warnings, "atribuicao_status", atribuicao_id, str(e))

        # 2) contenuto copiato
        warnings.extend(await CascadeDeleter.remove_copy(
            atribuicao.fonte_tipo, atribuicao.fonte_id, atribuicao.turma_id, content
        ))

        # 3) la riga stessa: unico passo che può fallire verso il chiamante
        try:
            await repo.delete(atribuicao_id)
        except Exception as e:
            logger.exception("Cancellazione atribuicao %s fallita", atribuicao_id)
            raise DeleteFailed("Erro ao deletar atribuição") from e

        logger.info("Atribuicao deletada: %s (%d avvisi)", atribuicao_id, len(warnings))
        return DeleteReport(atribuicao_id=atribuicao_id, existed=True, warnings=warnings)
