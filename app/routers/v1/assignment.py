import logging
from typing import Annotated
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.schemas.assignment import AtribuicaoCreate, AtribuicaoDelete, AtribuicaoRef, StatusUpdate, TurmaRef
from app.schemas.context import UserContext
from app.database.assignment_repo import AssignmentRepo
from app.database.content_repo import ContentRepo
from app.database.roster_repo import RosterRepo
from app.core.deps import get_repository, get_content_repository, get_roster_repository, get_publisher

from app.services.auth_service import AuthService
from app.services.assignment_service import AssignmentService
from app.services.cascade import CascadeDeleter
from app.services.errors import AssignmentError
from app.services.publisher_service import AssignmentPublisher


router = APIRouter()
logger = logging.getLogger("assignment.router")

RepoDep = Annotated[AssignmentRepo, Depends(get_repository)]
ContentDep = Annotated[ContentRepo, Depends(get_content_repository)]
RosterDep = Annotated[RosterRepo, Depends(get_roster_repository)]
UserDep = Annotated[UserContext, Depends(AuthService.get_current_user)]
PublisherDep = Annotated[AssignmentPublisher, Depends(get_publisher)]


def _error(e: AssignmentError) -> JSONResponse:
    return JSONResponse(status_code=e.status_code, content={"error": e.message})


@router.post("/assignment.create")
async def create_assignment_endpoint(
    body: AtribuicaoCreate,
    user: UserDep,
    roster: RosterDep,
    content: ContentDep,
    repo: RepoDep,
    publisher: PublisherDep,
):
    try:
        result = await AssignmentService.create_assignment(body, user, roster, content, repo)
    except AssignmentError as e:
        return _error(e)

    try:
        await publisher.publish_assignment_created(
            result.atribuicao.id, result.atribuicao.turma_id, user.user_id, result.status_count
        )
    except Exception:
        # l'atribuicao esiste già: l'evento perso non cambia la risposta
        logger.exception("Publish assignment.created fallito")

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "atribuicao": result.atribuicao.model_dump(mode="json"),
            "warnings": [w.model_dump(mode="json") for w in result.warnings],
        },
    )


@router.post("/assignment.delete")
async def delete_assignment_endpoint(
    body: AtribuicaoDelete,
    user: UserDep,
    roster: RosterDep,
    content: ContentDep,
    repo: RepoDep,
    publisher: PublisherDep,
):
    if not body.atribuicao_id:
        return JSONResponse(status_code=400, content={"error": "ID da atribuição é obrigatório"})
    try:
        report = await CascadeDeleter.delete_assignment(body.atribuicao_id, user.user_id, roster, content, repo)
    except AssignmentError as e:
        return _error(e)

    if report.existed:
        try:
            await publisher.publish_assignment_deleted(report.atribuicao_id, user.user_id)
        except Exception:
            logger.exception("Publish assignment.deleted fallito")

    return {"success": True}


@router.post("/assignment.by-turma")
async def list_by_turma_endpoint(
    body: TurmaRef,
    user: UserDep,
    roster: RosterDep,
    content: ContentDep,
    repo: RepoDep,
):
    try:
        items = await AssignmentService.list_for_turma(body.turma_id, user, roster, content, repo)
    except AssignmentError as e:
        return _error(e)
    return {"atribuicoes": [a.model_dump(mode="json") for a in items]}


@router.post("/assignment.mine")
async def list_mine_endpoint(user: UserDep, repo: RepoDep):
    items = await AssignmentService.list_mine(user, repo)
    return {"atribuicoes": [a.model_dump(mode="json") for a in items]}


@router.post("/assignment.update-status")
async def update_status_endpoint(
    body: StatusUpdate,
    user: UserDep,
    roster: RosterDep,
    repo: RepoDep,
    publisher: PublisherDep,
):
    try:
        saved, atribuicao = await AssignmentService.update_status(body, user, roster, repo)
    except AssignmentError as e:
        return _error(e)

    if saved.status == "concluida" and atribuicao.pontos_vale > 0:
        try:
            await publisher.publish_assignment_completed(atribuicao.id, user.user_id, atribuicao.pontos_vale)
        except Exception:
            logger.exception("Publish assignment.completed fallito")

    return {"status": saved.model_dump(mode="json")}


@router.post("/assignment.progress")
async def student_progress_endpoint(
    body: AtribuicaoRef,
    user: UserDep,
    roster: RosterDep,
    repo: RepoDep,
):
    try:
        items = await AssignmentService.student_progress(body.atribuicao_id, user, roster, repo)
    except AssignmentError as e:
        return _error(e)
    return {"progresso": [p.model_dump(mode="json") for p in items]}
