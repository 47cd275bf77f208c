# ABOUTME: FastAPI app: POST /generate-steps (AI step generation), dream CRUD and step completion toggling.
# ABOUTME: Every response carries permissive CORS headers; errors are {"error": message}. Auth via provider JWT.

import logging
from uuid import UUID

from fastapi import Depends, FastAPI, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.auth import get_current_user_id
from core.config import (
    CORS_HEADERS,
    DEFAULT_DREAMS_PAGE_SIZE,
    DREAM_TITLE_MAX_CHARS,
    MAX_DREAMS_PAGE_SIZE,
    GatewaySettings,
    load_gateway_settings,
)
from core.database import Dream, Step, get_session
from core.errors import GenerationError, InvalidInputError
from core.progress import compute_progress
from core.schemas import DreamCreateRequest, StepUpdateRequest, StepsResponse
from dreamplanner.generator import generate_steps

app = FastAPI(title="Dream Planner API")


@app.middleware("http")
async def cross_origin_headers(request: Request, call_next):
    """Answer preflight with an empty 200 and stamp CORS headers on every other response."""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    try:
        response = await call_next(request)
    except Exception:
        logging.exception("%s %s failed unexpectedly", request.method, request.url.path)
        response = _error(500, "An unexpected error occurred.")
    response.headers.update(CORS_HEADERS)
    return response


def _error(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": message}, headers=headers
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_body(_request: Request, exc: StarletteHTTPException):
    """Auth failures and unknown routes use the same {"error": ...} body as everything else."""
    return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_body(_request: Request, exc: RequestValidationError):
    """422 with the first validation problem, e.g. "steps: List should have at least 5 items"."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    message = first.get("msg", "Invalid request")
    return _error(422, f"{field}: {message}" if field else message)


def _step_to_json(step: Step) -> dict:
    return {
        "id": str(step.id),
        "dream_id": str(step.dream_id),
        "title": step.title,
        "description": step.description,
        "order_index": step.order_index,
        "completed": step.completed,
    }


def _dream_to_json(dream: Dream, steps: list[Step]) -> dict:
    """Serialize a Dream row with its steps (already ordered) and derived progress."""
    return {
        "id": str(dream.id),
        "title": dream.title,
        "description": dream.description,
        "domain": dream.domain,
        "created_at": dream.created_at.isoformat(),
        "steps": [_step_to_json(s) for s in steps],
        "progress": compute_progress(steps).to_json(),
    }


@app.post("/generate-steps", response_model=StepsResponse)
async def post_generate_steps(
    request: Request,
    settings: GatewaySettings = Depends(load_gateway_settings),
    _user_id: UUID = Depends(get_current_user_id),
):
    """Break a dream into 5-7 ordered action steps. Requires authentication."""
    try:
        body = await request.json()
    except ValueError:
        body = None
    try:
        if not isinstance(body, dict):
            raise InvalidInputError("Request body must be a JSON object.")
        steps = await run_in_threadpool(
            generate_steps, body.get("dream"), body.get("domain"), settings
        )
    except GenerationError as exc:
        logging.warning("generate_steps failed: %s: %s", exc.__class__.__name__, exc)
        return _error(exc.status_code, exc.public_message)
    except Exception:
        logging.exception("generate_steps failed unexpectedly")
        return _error(500, GenerationError.public_message)
    return {"steps": [s.model_dump() for s in steps]}


@app.post("/dreams")
def post_dreams(
    req: DreamCreateRequest, current_user_id: UUID = Depends(get_current_user_id)
):
    """Persist a dream and its generated steps; step i is stored with order_index i."""
    text = req.dream.strip()
    if not text:
        return _error(400, "Please describe your dream.")
    try:
        with get_session() as session:
            dream = Dream(
                user_id=current_user_id,
                title=text[:DREAM_TITLE_MAX_CHARS],
                description=text,
                domain=req.domain.value,
            )
            session.add(dream)
            steps = [
                Step(
                    dream_id=dream.id,
                    title=s.title,
                    description=s.description,
                    order_index=index,
                )
                for index, s in enumerate(req.steps)
            ]
            session.add_all(steps)
            session.commit()
            session.refresh(dream)
            for step in steps:
                session.refresh(step)
            return _dream_to_json(dream, steps)
    except SQLAlchemyError:
        logging.exception("post_dreams failed (database error)")
        return _error(500, "Could not save dream.")
    except Exception:
        logging.exception("post_dreams: unexpected error (non-SQLAlchemy)")
        return _error(500, "An unexpected error occurred while saving the dream.")


@app.get("/dreams")
def get_dreams(
    limit: int = Query(DEFAULT_DREAMS_PAGE_SIZE, ge=0, le=MAX_DREAMS_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    current_user_id: UUID = Depends(get_current_user_id),
):
    """List the caller's dreams newest first, each with ordered steps and progress. Returns { dreams: [...], total: N }."""
    try:
        with get_session() as session:
            total_stmt = (
                select(func.count())
                .select_from(Dream)
                .where(Dream.user_id == current_user_id)
            )
            total = session.exec(total_stmt).one()
            stmt = (
                select(Dream)
                .where(Dream.user_id == current_user_id)
                .order_by(Dream.created_at.desc())
                .limit(limit)
                .offset(offset)
            )
            dreams = list(session.exec(stmt))
            steps_by_dream: dict[UUID, list[Step]] = {d.id: [] for d in dreams}
            if dreams:
                steps_stmt = (
                    select(Step)
                    .where(col(Step.dream_id).in_(list(steps_by_dream)))
                    .order_by(Step.order_index)
                )
                for step in session.exec(steps_stmt):
                    steps_by_dream[step.dream_id].append(step)
        return {
            "dreams": [_dream_to_json(d, steps_by_dream[d.id]) for d in dreams],
            "total": total,
        }
    except SQLAlchemyError:
        logging.exception("get_dreams failed (database error)")
        return _error(500, "Could not load dreams.")
    except Exception:
        logging.exception("get_dreams failed unexpectedly")
        return _error(500, "An unexpected error occurred while loading dreams.")


@app.patch("/steps/{step_id}")
def patch_step(
    step_id: UUID,
    req: StepUpdateRequest,
    current_user_id: UUID = Depends(get_current_user_id),
):
    """Mark a step completed or not. 404 unless the step belongs to one of the caller's dreams."""
    try:
        with get_session() as session:
            step = session.get(Step, step_id)
            dream = session.get(Dream, step.dream_id) if step else None
            if dream is None or dream.user_id != current_user_id:
                return _error(404, "Step not found.")
            step.completed = req.completed
            session.add(step)
            session.commit()
            session.refresh(step)
            return _step_to_json(step)
    except SQLAlchemyError:
        logging.exception("patch_step failed (database error)")
        return _error(500, "Could not update step.")
    except Exception:
        logging.exception("patch_step failed unexpectedly")
        return _error(500, "An unexpected error occurred while updating the step.")


@app.delete("/dreams/{dream_id}", status_code=204)
def delete_dream(dream_id: UUID, current_user_id: UUID = Depends(get_current_user_id)):
    """Delete one of the caller's dreams together with its steps."""
    try:
        with get_session() as session:
            dream = session.get(Dream, dream_id)
            if dream is None or dream.user_id != current_user_id:
                return _error(404, "Dream not found.")
            for step in list(session.exec(select(Step).where(Step.dream_id == dream_id))):
                session.delete(step)
            session.delete(dream)
            session.commit()
        return Response(status_code=204)
    except SQLAlchemyError:
        logging.exception("delete_dream failed (database error)")
        return _error(500, "Could not delete dream.")
    except Exception:
        logging.exception("delete_dream failed unexpectedly")
        return _error(500, "An unexpected error occurred while deleting the dream.")
