from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import datetime

FonteTipo = Literal["lista", "pasta"]
StatusTipo = Literal["pendente", "em_andamento", "concluida"]

FONTE_TIPOS = ("lista", "pasta")
STATUS_TIPOS = ("pendente", "em_andamento", "concluida")


class AtribuicaoCreate(BaseModel):
    # tutto opzionale: la validazione la fa il service (400, non 422)
    turma_id: Optional[str] = None
    titulo: Optional[str] = None
    descricao: Optional[str] = None
    fonte_tipo: Optional[str] = None
    fonte_id: Optional[str] = None
    data_limite: Optional[datetime] = None
    pontos_vale: Optional[int] = None


class AtribuicaoDelete(BaseModel):
    atribuicao_id: Optional[str] = None


class AtribuicaoRef(BaseModel):
    atribuicao_id: Optional[str] = None


class TurmaRef(BaseModel):
    turma_id: Optional[str] = None


class StatusUpdate(BaseModel):
    atribuicao_id: Optional[str] = None
    status: Optional[str] = None
    progresso: Optional[int] = None


class Atribuicao(BaseModel):
    id: str
    turma_id: str
    titulo: str
    descricao: Optional[str] = None
    fonte_tipo: FonteTipo
    fonte_id: str
    data_limite: Optional[datetime] = None
    pontos_vale: int = 50
    created_at: Optional[datetime] = None


class AtribuicaoStatus(BaseModel):
    atribuicao_id: str
    aluno_id: str
    status: StatusTipo = "pendente"
    progresso: int = Field(default=0, ge=0, le=100)
    updated_at: Optional[datetime] = None


class ProgressoStats(BaseModel):
    total_alunos: int
    concluidas: int
    em_andamento: int
    pendentes: int


class AtribuicaoOverview(Atribuicao):
    progresso: ProgressoStats
    card_count: int
    meu_status: StatusTipo = "pendente"
    meu_progresso: int = 0


class MinhaAtribuicao(Atribuicao):
    status: StatusTipo
    progresso: int


class AlunoProgresso(BaseModel):
    aluno_id: str
    status: StatusTipo
    progresso: int
    ultima_atualizacao: Optional[datetime] = None


class LeafWarning(BaseModel):
    """Una riga figlia saltata: loggata, mai propagata come errore."""
    kind: Literal["copy", "delete", "fanout"]
    entity: str
    entity_id: Optional[str] = None
    message: str


class CopyResult(BaseModel):
    root_id: str
    warnings: List[LeafWarning] = []


class CreateResult(BaseModel):
    atribuicao: Atribuicao
    status_count: int
    warnings: List[LeafWarning] = []


class DeleteReport(BaseModel):
    atribuicao_id: str
    existed: bool
    warnings: List[LeafWarning] = []
