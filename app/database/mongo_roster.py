# app/database/mongo_roster.py
from typing import Sequence, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from app.database.roster_repo import RosterRepo
from app.schemas.turma import Turma, TurmaMembro


class MongoRosterRepository(RosterRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.turmas = db["turmas"]
        self.membros = db["turma_membros"]

    async def find_turma(self, turma_id: str) -> Optional[Turma]:
        d = await self.turmas.find_one({"id": str(turma_id)}, {"_id": 0})
        return Turma(**d) if d else None

    async def active_members(self, turma_id: str) -> Sequence[TurmaMembro]:
        cursor = self.membros.find({"turma_id": str(turma_id), "ativo": True}, {"_id": 0})
        return [TurmaMembro(**d) async for d in cursor]

    async def is_active_member(self, turma_id: str, user_id: str) -> bool:
        d = await self.membros.find_one(
            {"turma_id": str(turma_id), "user_id": str(user_id), "ativo": True}, {"_id": 1}
        )
        return d is not None

    async def count_active_members(self, turma_id: str) -> int:
        return await self.membros.count_documents({"turma_id": str(turma_id), "ativo": True})

    async def ensure_indexes(self):
        await self.turmas.create_index("id", unique=True)
        await self.turmas.create_index("owner_teacher_id")
        await self.membros.create_index(
            [("turma_id", ASCENDING), ("user_id", ASCENDING)], unique=True
        )
