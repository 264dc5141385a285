# app/main.py
from contextlib import asynccontextmanager
import logging
import sys
from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient

from app.core.config import settings
from app.database.mongo_assignment import MongoAssignmentRepository
from app.database.mongo_content import MongoContentRepository
from app.database.mongo_roster import MongoRosterRepository
from app.services.publisher_service import AssignmentPublisher
from app.routers.v1 import health
from app.routers.v1 import assignment

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    stream=sys.stdout,
)

# più verboso solo per il motore di copia/cancellazione
logging.getLogger("assignment.duplicator").setLevel(logging.DEBUG)
logging.getLogger("assignment.cascade").setLevel(logging.DEBUG)

def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = AsyncIOMotorClient(settings.mongo_uri, uuidRepresentation="standard")
        db = client[settings.mongo_db_name]

        repo = MongoAssignmentRepository(db)
        content_repo = MongoContentRepository(db)
        roster_repo = MongoRosterRepository(db)
        for r in (repo, content_repo, roster_repo):
            await r.ensure_indexes()
        app.state.assignment_repo = repo   # repo disponibili alle routes
        app.state.content_repo = content_repo
        app.state.roster_repo = roster_repo

        # --- RabbitMQ Publisher ---
        publisher = AssignmentPublisher(
            rabbitmq_url=settings.rabbitmq_url,
            heartbeat=30,
            exchange=settings.events_exchange,
        )
        await publisher.connect(max_retries=10, delay=5)
        app.state.assignment_publisher = publisher

        try:
            yield
        finally:
            await publisher.close()
            client.close()

    app = FastAPI(
        title="Assignment Distribution Service",
        description="Atribuições de pastas e listas de flashcards para turmas",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"], allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        # stesso formato { error } delle risposte dei service
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        campi = sorted({".".join(str(p) for p in err["loc"][1:]) or "body" for err in exc.errors()})
        return JSONResponse(status_code=400, content={"error": f"Campos inválidos: {', '.join(campi)}"})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logging.getLogger("assignment.router").exception("Errore inatteso su %s", request.url.path)
        return JSONResponse(status_code=500, content={"error": "Erro interno"})

    app.include_router(health.router,     prefix="/api/v1", tags=["health"])
    app.include_router(assignment.router, prefix="/api/v1", tags=["assignments"])
    return app

app = create_app()
