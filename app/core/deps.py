from fastapi import Request
from app.database.assignment_repo import AssignmentRepo
from app.database.content_repo import ContentRepo
from app.database.roster_repo import RosterRepo
from app.services.publisher_service import AssignmentPublisher

def get_repository(request: Request) -> AssignmentRepo:
    repo = getattr(request.app.state, "assignment_repo", None)
    if repo is None:
        raise RuntimeError("Repository non inizializzato")
    return repo

def get_content_repository(request: Request) -> ContentRepo:
    repo = getattr(request.app.state, "content_repo", None)
    if repo is None:
        raise RuntimeError("Content repository non inizializzato")
    return repo

def get_roster_repository(request: Request) -> RosterRepo:
    repo = getattr(request.app.state, "roster_repo", None)
    if repo is None:
        raise RuntimeError("Roster repository non inizializzato")
    return repo

def get_publisher(request: Request) -> AssignmentPublisher:
    publisher = getattr(request.app.state, "assignment_publisher", None)
    if publisher is None:
        raise RuntimeError("Publisher non inizializzato")
    return publisher
