from typing import Annotated
from fastapi import APIRouter, Depends

from app.core.deps import get_publisher
from app.services.publisher_service import AssignmentPublisher

router = APIRouter()

@router.get("/assignments/health")
async def health_check(publisher: Annotated[AssignmentPublisher, Depends(get_publisher)]):
    return {"status": "ok", "events": publisher.enabled}
