"""Storage API endpoints: snapshot read, typed mutation commands, and login."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from kidstreak.domain.commands import parse_command
from kidstreak.engine.facade import Engine
from kidstreak.interface.auth import check_password, make_token, require_auth
from kidstreak.services import storage_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["storage"])


class LoginRequest(BaseModel):
    password: str | None = None


def get_engine(request: Request) -> Engine:
    """Return the engine built at startup."""
    return request.app.state.engine


def _serialise(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json", by_alias=True)
    return result


@router.post("/auth")
async def login(body: LoginRequest) -> dict[str, Any]:
    """Check the shared app password and hand back the bearer token."""
    if not check_password(body.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect password")
    return {"success": True, "token": make_token(body.password)}


@router.get("/storage", dependencies=[Depends(require_auth)])
async def get_storage(engine: Engine = Depends(get_engine)) -> dict[str, Any]:
    """Return kids, tasks, last reset date, and streaks."""
    snapshot = await storage_service.list_data(engine=engine)
    return snapshot.model_dump(mode="json", by_alias=True)


@router.post("/storage", dependencies=[Depends(require_auth)])
async def post_storage(
    body: dict[str, Any] = Body(...),
    engine: Engine = Depends(get_engine),
) -> Any:
    """Validate the body as one typed command and run it."""
    try:
        command = parse_command(body)
    except ValidationError as e:
        logger.warning("storage_command_rejected", extra={"action": body.get("action"), "errors": e.error_count()})
        raise RequestValidationError(e.errors(include_url=False)) from e

    result = await storage_service.dispatch(engine=engine, command=command)
    return _serialise(result)
