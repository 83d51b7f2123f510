import logging
import os
from typing import Any, Dict, List

import uvicorn
from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from src.db import Base, engine, get_db
from src.domain import Note
from src.errors import NoteIdentityError, NoteNotFoundError
from src.repository import NoteRepository
from src.schemas import NoteCreate, NoteOut, NoteReplace, NoteUpdate

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Service health and readiness endpoints."},
    {"name": "Notes", "description": "CRUD operations for notes."},
]

app = FastAPI(
    title="Notes API",
    description="Notes backend API supporting CRUD operations with SQL persistence.",
    version="1.0.0",
    openapi_tags=openapi_tags,
)


def _parse_allowed_origins() -> List[str]:
    """
    Parse comma-separated ALLOWED_ORIGINS from env.

    Falls back to localhost dev origins when not set.
    """
    raw = (os.getenv("ALLOWED_ORIGINS") or "").strip()
    if not raw:
        return ["http://localhost:3000", "http://127.0.0.1:3000"]

    origins = [o.strip() for o in raw.split(",")]
    return [o for o in origins if o]


def _parse_allowed_origin_regex() -> str | None:
    """Optional ALLOWED_ORIGIN_REGEX override; no regex matching when unset."""
    raw = (os.getenv("ALLOWED_ORIGIN_REGEX") or "").strip()
    return raw or None


app.add_middleware(
    CORSMiddleware,
    allow_origins=_parse_allowed_origins(),
    allow_origin_regex=_parse_allowed_origin_regex(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NoteNotFoundError)
async def _note_not_found_handler(request: Request, exc: NoteNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Note not found"})


@app.exception_handler(NoteIdentityError)
async def _note_identity_handler(request: Request, exc: NoteIdentityError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Return JSON for unexpected errors.

    Clients always get a JSON body, and the real cause (DB errors, coding errors)
    ends up in the log.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


@app.on_event("startup")
def _startup_create_tables() -> None:
    """
    Create database tables if they do not exist.

    Startup must not fail when the DB is unavailable; /health/db reports readiness.
    """
    try:
        Base.metadata.create_all(bind=engine)
    except Exception:
        logger.exception("Database initialization failed during startup (tables not created).")


# PUBLIC_INTERFACE
def get_repository(db: Session = Depends(get_db)) -> NoteRepository:
    """FastAPI dependency providing a note repository bound to the request session."""
    return NoteRepository(db)


# PUBLIC_INTERFACE
@app.get("/", tags=["Health"], summary="Health check", description="Returns a simple health payload.")
def health_check() -> Dict[str, str]:
    """Health check endpoint used by previews/monitoring."""
    return {"message": "Healthy"}


# PUBLIC_INTERFACE
@app.get(
    "/health/db",
    tags=["Health"],
    summary="Database health check",
    description=(
        "Verifies database connectivity by running a lightweight read-only query (SELECT 1). "
        "Returns status=up when the query succeeds, otherwise status=down with error details."
    ),
)
def health_check_db(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Database readiness endpoint used to verify DB connectivity."""
    try:
        value = db.execute(text("SELECT 1")).scalar_one()
        return {"status": "up", "query": "SELECT 1", "result": int(value)}
    except Exception as exc:
        logger.warning("Database health check failed: %s", exc)
        return {"status": "down", "error": str(exc)}


# PUBLIC_INTERFACE
@app.get(
    "/notes",
    response_model=List[NoteOut],
    tags=["Notes"],
    summary="List notes",
    description="Return all notes ordered by most recent (highest id first).",
)
def list_notes(repo: NoteRepository = Depends(get_repository)) -> List[Note]:
    """List all notes."""
    return repo.list()


# PUBLIC_INTERFACE
@app.post(
    "/notes",
    response_model=NoteOut,
    status_code=status.HTTP_201_CREATED,
    tags=["Notes"],
    summary="Create note",
    description="Create a new note with a title and content.",
)
def create_note(payload: NoteCreate, repo: NoteRepository = Depends(get_repository)) -> Note:
    """Create a note."""
    return repo.add(Note(title=payload.title, content=payload.content))


# PUBLIC_INTERFACE
@app.get(
    "/notes/{note_id}",
    response_model=NoteOut,
    tags=["Notes"],
    summary="Get note",
    description="Fetch a single note by ID.",
)
def get_note(note_id: int, repo: NoteRepository = Depends(get_repository)) -> Note:
    """Get a note by id."""
    return repo.get(note_id)


# PUBLIC_INTERFACE
@app.put(
    "/notes/{note_id}",
    response_model=NoteOut,
    tags=["Notes"],
    summary="Replace note",
    description="Full update of a note by ID; title and content are both required.",
)
def replace_note(note_id: int, payload: NoteReplace, repo: NoteRepository = Depends(get_repository)) -> Note:
    """Replace a note's title and content."""
    return repo.update(Note(title=payload.title, content=payload.content, id=note_id))


# PUBLIC_INTERFACE
@app.patch(
    "/notes/{note_id}",
    response_model=NoteOut,
    tags=["Notes"],
    summary="Update note",
    description="Partial update of a note by ID; omitted fields remain unchanged.",
)
def update_note(note_id: int, payload: NoteUpdate, repo: NoteRepository = Depends(get_repository)) -> Note:
    """Update selected fields of a note."""
    note = repo.get(note_id)
    if payload.title is not None:
        note.title = payload.title
    if payload.content is not None:
        note.content = payload.content
    return repo.update(note)


# PUBLIC_INTERFACE
@app.delete(
    "/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Notes"],
    summary="Delete note",
    description="Delete a note by ID.",
)
def delete_note(note_id: int, repo: NoteRepository = Depends(get_repository)) -> Response:
    """Delete a note by id."""
    repo.delete(note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# PUBLIC_INTERFACE
def run() -> None:
    """Serve the API with uvicorn; HOST and PORT come from env."""
    uvicorn.run(
        "src.api.main:app",
        host=os.getenv("HOST") or "0.0.0.0",
        port=int(os.getenv("PORT") or "3001"),
        log_level=(os.getenv("LOG_LEVEL") or "info").lower(),
    )


if __name__ == "__main__":
    run()
