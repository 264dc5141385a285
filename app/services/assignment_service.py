import logging
from typing import List, Sequence, Tuple
from app.core.config import settings
from app.schemas.assignment import (
    FONTE_TIPOS,
    STATUS_TIPOS,
    AlunoProgresso,
    Atribuicao,
    AtribuicaoCreate,
    AtribuicaoOverview,
    AtribuicaoStatus,
    CopyResult,
    CreateResult,
    LeafWarning,
    MinhaAtribuicao,
    ProgressoStats,
    StatusUpdate,
)
from app.schemas.context import UserContext
from app.database.assignment_repo import AssignmentRepo
from app.database.content_repo import ContentRepo
from app.database.roster_repo import RosterRepo
from app.services.cascade import CascadeDeleter
from app.services.duplicator import ContentDuplicator, new_id
from app.services.errors import CopyFailed, Forbidden, InvalidInput, NotFound, SourceNotFound
from app.services.guards import assert_turma_access, assert_turma_owner

logger = logging.getLogger("assignment.registry")


async def _assert_source_usable(fonte_tipo: str, fonte_id: str, caller_id: str, content: ContentRepo):
    """La sorgente deve esistere ed essere del chiamante, oppure condivisa (non private)."""
    if fonte_tipo == "pasta":
        source = await content.find_folder(fonte_id)
    else:
        source = await content.find_list(fonte_id)
    if source is None:
        raise SourceNotFound("Conteúdo de origem não encontrado")
    if source.owner_id != caller_id and source.visibility == "private":
        raise Forbidden("Conteúdo de origem não pertence ao professor")


async def _card_count(atribuicao: Atribuicao, content: ContentRepo) -> int:
    if atribuicao.fonte_tipo == "lista":
        return await content.count_flashcards([atribuicao.fonte_id])
    lists = await content.find_lists_in_folder(atribuicao.fonte_id)
    return await content.count_flashcards([l.id for l in lists])


class AssignmentService:

    @staticmethod
    async def create_assignment(
        data: AtribuicaoCreate,
        user: UserContext,
        roster: RosterRepo,
        content: ContentRepo,
        repo: AssignmentRepo,
    ) -> CreateResult:
        if not data.turma_id:
            raise InvalidInput("Campos obrigatórios faltando")

        # il controllo del proprietario viene prima della validazione del resto
        await assert_turma_owner(data.turma_id, user.user_id, roster)

        titulo = (data.titulo or "").strip()
        if not titulo or not data.fonte_tipo or not data.fonte_id:
            raise InvalidInput("Campos obrigatórios faltando")
        if data.fonte_tipo not in FONTE_TIPOS:
            raise InvalidInput("fonte_tipo deve ser 'lista' ou 'pasta'")
        if data.pontos_vale is not None and data.pontos_vale < 0:
            raise InvalidInput("pontos_vale não pode ser negativo")

        await _assert_source_usable(data.fonte_tipo, data.fonte_id, user.user_id, content)

        if data.fonte_tipo == "lista":
            copy: CopyResult = await ContentDuplicator.duplicate_list(
                data.fonte_id, data.turma_id, user.user_id, content
            )
        else:
            copy = await ContentDuplicator.duplicate_folder(
                data.fonte_id, data.turma_id, user.user_id, content
            )
        warnings: List[LeafWarning] = list(copy.warnings)

        # fonte_id punta sempre alla copia, mai all'originale
        atribuicao = Atribuicao(
            id=new_id(),
            turma_id=data.turma_id,
            titulo=titulo,
            descricao=(data.descricao or "").strip() or None,
            fonte_tipo=data.fonte_tipo,
            fonte_id=copy.root_id,
            data_limite=data.data_limite,
            pontos_vale=settings.default_pontos_vale if data.pontos_vale is None else data.pontos_vale,
        )
        try:
            await repo.create(atribuicao)
        except Exception as e:
            logger.exception("Inserimento atribuicao fallito, rimuovo la copia %s", copy.root_id)
            await CascadeDeleter.remove_copy(data.fonte_tipo, copy.root_id, data.turma_id, content)
            raise CopyFailed("Erro ao criar atribuição") from e

        # fan-out: solo i membri attivi adesso, chi entra dopo non riceve lo status
        status_count = 0
        try:
            members = await roster.active_members(data.turma_id)
            statuses = [
                AtribuicaoStatus(atribuicao_id=atribuicao.id, aluno_id=m.user_id)
                for m in members
            ]
            status_count = await repo.create_statuses(statuses)
        except Exception as e:
            logger.warning("Fan-out status per %s fallito: %s", atribuicao.id, e)
            warnings.append(LeafWarning(
                kind="fanout", entity="atribuicao_status", entity_id=atribuicao.id, message=str(e),
            ))

        logger.info(
            "Atribuicao %s creata (turma=%s, fonte %s %s -> %s, %d alunni, %d avvisi)",
            atribuicao.id, data.turma_id, data.fonte_tipo, data.fonte_id,
            copy.root_id, status_count, len(warnings),
        )
        return CreateResult(atribuicao=atribuicao, status_count=status_count, warnings=warnings)

    @staticmethod
    async def list_for_turma(
        turma_id: str,
        user: UserContext,
        roster: RosterRepo,
        content: ContentRepo,
        repo: AssignmentRepo,
    ) -> Sequence[AtribuicaoOverview]:
        if not turma_id:
            raise InvalidInput("turma_id é obrigatório")
        is_owner = await assert_turma_access(turma_id, user.user_id, roster)

        atribuicoes = await repo.find_for_turma(turma_id)
        total = await roster.count_active_members(turma_id)

        result = []
        for a in atribuicoes:
            statuses = await repo.find_statuses(a.id)
            concluidas = sum(1 for s in statuses if s.status == "concluida")
            em_andamento = sum(1 for s in statuses if s.status == "em_andamento")
            mine = None if is_owner else next((s for s in statuses if s.aluno_id == user.user_id), None)
            result.append(AtribuicaoOverview(
                **a.model_dump(),
                progresso=ProgressoStats(
                    total_alunos=total,
                    concluidas=concluidas,
                    em_andamento=em_andamento,
                    pendentes=max(total - concluidas - em_andamento, 0),
                ),
                card_count=await _card_count(a, content),
                meu_status=mine.status if mine else "pendente",
                meu_progresso=mine.progresso if mine else 0,
            ))
        return result

    @staticmethod
    async def list_mine(user: UserContext, repo: AssignmentRepo) -> Sequence[MinhaAtribuicao]:
        statuses = await repo.find_statuses_for_student(user.user_id)
        by_id = {a.id: a for a in await repo.find_many([s.atribuicao_id for s in statuses])}
        return [
            MinhaAtribuicao(**by_id[s.atribuicao_id].model_dump(), status=s.status, progresso=s.progresso)
            for s in statuses
            if s.atribuicao_id in by_id
        ]

    @staticmethod
    async def update_status(
        data: StatusUpdate,
        user: UserContext,
        roster: RosterRepo,
        repo: AssignmentRepo,
    ) -> Tuple[AtribuicaoStatus, Atribuicao]:
        """
        Aggiorna lo status del chiamante. aluno_id viene sempre dal token,
        mai dal body.
        """
        if not data.atribuicao_id or not data.status:
            raise InvalidInput("atribuicao_id e status são obrigatórios")
        if data.status not in STATUS_TIPOS:
            raise InvalidInput("status inválido")
        progresso = data.progresso if data.progresso is not None else 0
        if not 0 <= progresso <= 100:
            raise InvalidInput("progresso deve estar entre 0 e 100")

        atribuicao = await repo.find_one(data.atribuicao_id)
        if atribuicao is None:
            raise NotFound("Atribuição não encontrada")
        if not await roster.is_active_member(atribuicao.turma_id, user.user_id):
            raise Forbidden("Você não é membro desta turma")

        saved = await repo.upsert_status(AtribuicaoStatus(
            atribuicao_id=atribuicao.id,
            aluno_id=user.user_id,
            status=data.status,
            progresso=progresso,
        ))
        logger.info("Status %s di %s -> %s (%d%%)", atribuicao.id, user.user_id, saved.status, saved.progresso)
        return saved, atribuicao

    @staticmethod
    async def student_progress(
        atribuicao_id: str,
        user: UserContext,
        roster: RosterRepo,
        repo: AssignmentRepo,
    ) -> Sequence[AlunoProgresso]:
        if not atribuicao_id:
            raise InvalidInput("atribuicao_id é obrigatório")
        atribuicao = await repo.find_one(atribuicao_id)
        if atribuicao is None:
            raise NotFound("Atribuição não encontrada")
        await assert_turma_owner(atribuicao.turma_id, user.user_id, roster)

        members = await roster.active_members(atribuicao.turma_id)
        by_aluno = {s.aluno_id: s for s in await repo.find_statuses(atribuicao_id)}

        progresso = []
        for m in members:
            s = by_aluno.get(m.user_id)
            progresso.append(AlunoProgresso(
                aluno_id=m.user_id,
                status=s.status if s else "pendente",
                progresso=s.progresso if s else 0,
                ultima_atualizacao=s.updated_at if s else None,
            ))
        return progresso
