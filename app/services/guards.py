from app.database.roster_repo import RosterRepo
from app.schemas.turma import Turma
from app.services.errors import Forbidden


async def assert_turma_owner(turma_id: str, caller_id: str, roster: RosterRepo) -> Turma:
    """Ritorna la turma se caller_id ne è il professore, altrimenti Forbidden."""
    turma = await roster.find_turma(turma_id)
    if turma is None or turma.owner_teacher_id != caller_id:
        raise Forbidden("Turma não encontrada ou acesso negado")
    return turma


async def assert_turma_access(turma_id: str, caller_id: str, roster: RosterRepo) -> bool:
    """Professore o alunno attivo. Ritorna True se il chiamante è il professore."""
    turma = await roster.find_turma(turma_id)
    if turma is not None and turma.owner_teacher_id == caller_id:
        return True
    if turma is None or not await roster.is_active_member(turma_id, caller_id):
        raise Forbidden("Você não tem acesso a esta turma")
    return False
