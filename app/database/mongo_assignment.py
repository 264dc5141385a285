# app/database/mongo_assignment.py
from datetime import datetime, timezone
from typing import Sequence, Optional, List
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from app.database.assignment_repo import AssignmentRepo
from app.schemas.assignment import Atribuicao, AtribuicaoStatus


class MongoAssignmentRepository(AssignmentRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["atribuicoes"]
        self.status_col = db["atribuicoes_status"]

    def _from_doc(self, d: dict) -> Atribuicao:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return Atribuicao(**base)

    def _status_from_doc(self, d: dict) -> AtribuicaoStatus:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return AtribuicaoStatus(**base)

    def _to_doc_from_model(self, a: Atribuicao) -> dict:
        doc = a.model_dump()
        if doc.get("created_at") is None:
            doc["created_at"] = datetime.now(timezone.utc)
        return doc

    async def create(self, atribuicao: Atribuicao) -> str:
        doc = self._to_doc_from_model(atribuicao)
        await self.col.insert_one(doc)
        return atribuicao.id

    async def find_one(self, atribuicao_id: str) -> Optional[Atribuicao]:
        d = await self.col.find_one({"id": str(atribuicao_id)})
        return self._from_doc(d) if d else None

    async def find_for_turma(self, turma_id: str) -> Sequence[Atribuicao]:
        cursor = self.col.find({"turma_id": str(turma_id)}).sort("created_at", DESCENDING)
        docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def find_many(self, atribuicao_ids: Sequence[str]) -> Sequence[Atribuicao]:
        if not atribuicao_ids:
            return []
        cursor = self.col.find({"id": {"$in": list(atribuicao_ids)}})
        return [self._from_doc(d) async for d in cursor]

    async def delete(self, atribuicao_id: str) -> bool:
        res = await self.col.delete_one({"id": str(atribuicao_id)})
        return res.deleted_count > 0

    async def create_statuses(self, statuses: Sequence[AtribuicaoStatus]) -> int:
        if not statuses:
            return 0
        now = datetime.now(timezone.utc)
        docs = [{**s.model_dump(), "updated_at": s.updated_at or now} for s in statuses]
        res = await self.status_col.insert_many(docs)
        return len(res.inserted_ids)

    async def find_statuses(self, atribuicao_id: str) -> Sequence[AtribuicaoStatus]:
        cursor = self.status_col.find({"atribuicao_id": str(atribuicao_id)})
        return [self._status_from_doc(d) async for d in cursor]

    async def find_statuses_for_student(self, aluno_id: str) -> Sequence[AtribuicaoStatus]:
        cursor = self.status_col.find({"aluno_id": str(aluno_id)}).sort("updated_at", DESCENDING)
        return [self._status_from_doc(d) async for d in cursor]

    async def upsert_status(self, status: AtribuicaoStatus) -> AtribuicaoStatus:
        d = await self.status_col.find_one_and_update(
            {"atribuicao_id": status.atribuicao_id, "aluno_id": status.aluno_id},
            {"$set": {
                "status": status.status,
                "progresso": status.progresso,
                "updated_at": datetime.now(timezone.utc),
            }},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return self._status_from_doc(d)

    async def delete_statuses(self, atribuicao_id: str) -> int:
        res = await self.status_col.delete_many({"atribuicao_id": str(atribuicao_id)})
        return res.deleted_count

    async def ensure_indexes(self):
        await self.col.create_index("id", unique=True)
        await self.col.create_index([("turma_id", ASCENDING), ("created_at", DESCENDING)])
        await self.status_col.create_index(
            [("atribuicao_id", ASCENDING), ("aluno_id", ASCENDING)], unique=True
        )
        await self.status_col.create_index([("aluno_id", ASCENDING), ("updated_at", DESCENDING)])
