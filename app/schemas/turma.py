from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel


class Turma(BaseModel):
    id: str
    owner_teacher_id: str
    nome: str
    descricao: Optional[str] = None


class TurmaMembro(BaseModel):
    turma_id: str
    user_id: str
    ativo: bool = True
    role: Literal["aluno", "professor"] = "aluno"
    joined_at: Optional[datetime] = None
