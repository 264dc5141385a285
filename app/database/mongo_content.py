# app/database/mongo_content.py
from datetime import datetime, timezone
from typing import Sequence, Optional, List
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from app.database.content_repo import ContentRepo
from app.schemas.content import Folder, StudyList, Flashcard


def _strip_id(d: dict) -> dict:
    return {k: v for k, v in d.items() if k not in {"_id"}}


def _with_timestamps(doc: dict) -> dict:
    now = datetime.now(timezone.utc)
    if doc.get("created_at") is None:
        doc["created_at"] = now
    doc["updated_at"] = now
    return doc


class MongoContentRepository(ContentRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.folders = db["folders"]
        self.lists = db["lists"]
        self.flashcards = db["flashcards"]

    async def find_folder(self, folder_id: str) -> Optional[Folder]:
        d = await self.folders.find_one({"id": str(folder_id)})
        return Folder(**_strip_id(d)) if d else None

    async def find_list(self, list_id: str) -> Optional[StudyList]:
        d = await self.lists.find_one({"id": str(list_id)})
        return StudyList(**_strip_id(d)) if d else None

    async def find_lists_in_folder(self, folder_id: str) -> Sequence[StudyList]:
        cursor = self.lists.find({"folder_id": str(folder_id)}).sort("order_index", ASCENDING)
        docs: List[dict] = [d async for d in cursor]
        return [StudyList(**_strip_id(d)) for d in docs]

    async def find_flashcards(self, list_id: str) -> Sequence[Flashcard]:
        cursor = self.flashcards.find({"list_id": str(list_id)}).sort("created_at", ASCENDING)
        return [Flashcard(**_strip_id(d)) async for d in cursor]

    async def count_flashcards(self, list_ids: Sequence[str]) -> int:
        if not list_ids:
            return 0
        return await self.flashcards.count_documents({"list_id": {"$in": list(list_ids)}})

    async def create_folder(self, folder: Folder) -> str:
        await self.folders.insert_one(_with_timestamps(folder.model_dump()))
        return folder.id

    async def create_list(self, study_list: StudyList) -> str:
        await self.lists.insert_one(_with_timestamps(study_list.model_dump()))
        return study_list.id

    async def create_flashcard(self, card: Flashcard) -> str:
        await self.flashcards.insert_one(_with_timestamps(card.model_dump()))
        return card.id

    async def delete_flashcards(self, list_id: str) -> int:
        res = await self.flashcards.delete_many({"list_id": str(list_id)})
        return res.deleted_count

    async def delete_list(self, list_id: str, class_id: str) -> bool:
        res = await self.lists.delete_one({"id": str(list_id), "class_id": str(class_id)})
        return res.deleted_count > 0

    async def delete_folder(self, folder_id: str, class_id: str) -> bool:
        res = await self.folders.delete_one({"id": str(folder_id), "class_id": str(class_id)})
        return res.deleted_count > 0

    async def ensure_indexes(self):
        await self.folders.create_index("id", unique=True)
        await self.folders.create_index("owner_id")
        await self.lists.create_index("id", unique=True)
        await self.lists.create_index([("folder_id", ASCENDING), ("order_index", ASCENDING)])
        await self.flashcards.create_index("id", unique=True)
        await self.flashcards.create_index("list_id")
