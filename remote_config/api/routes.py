"""
API routes for the remote config service
"""
import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from remote_config.api.responses import created, no_content, ok
from remote_config.api.security import Principal, require_admin
from remote_config.core.config import settings
from remote_config.core.errors import StoreError, ValidationError
from remote_config.models.content import ConfigIdentity, ConfigPayload
from remote_config.services.config_store import ConfigStore
from remote_config.services.response_shaper import group_by_screen
from remote_config.services.validation import (
    is_valid_app,
    valid_apps_message,
    validate_app,
    validate_config_payload,
    validate_key,
    validate_screen,
)

logger = logging.getLogger(__name__)

# Create router
api_router = APIRouter()

MISSING_IDENTITY_MESSAGE = "Missing required: key (path), app (query), screen (query)"


def get_store(request: Request) -> ConfigStore:
    """Store instance attached to the application at startup"""
    return request.app.state.config_store


async def _read_json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        raise ValidationError("Invalid JSON body")


def _validated_payload(body: Any) -> ConfigPayload:
    result = validate_config_payload(body)
    if not result.valid or result.data is None:
        raise ValidationError(result.error or "Validation failed")
    return result.data


def _require_app(app: Optional[str]) -> str:
    if not is_valid_app(app):
        raise ValidationError(valid_apps_message("App"))
    return app


@api_router.get("/config")
async def get_config(app: Optional[str] = None, store: ConfigStore = Depends(get_store)):
    """Public config for an app, grouped by screen"""
    validation = validate_app(app)
    if not validation.valid:
        raise ValidationError(validation.error)

    try:
        entries = await run_in_threadpool(store.fetch_published, app)
    except Exception as e:
        logger.error(f"Error fetching config for app={app}: {e}")
        raise StoreError(code="CONFIG_FETCH_ERROR") from e

    return ok(group_by_screen(entries), headers={"Cache-Control": settings.cache_control_header()})


@api_router.post("/admin/config")
async def create_config(
    request: Request,
    principal: Principal = Depends(require_admin),
    store: ConfigStore = Depends(get_store),
):
    """Create a config entry. Body: {app, screen, key, value, type}"""
    body = await _read_json_body(request)
    payload = _validated_payload(body)
    app = _require_app(body.get("app"))

    try:
        await run_in_threadpool(
            store.put, app, payload.screen, payload.key, payload.value, payload.type, principal.updated_by
        )
    except Exception as e:
        logger.error(f"Error creating config {app}/{payload.screen}/{payload.key}: {e}")
        raise StoreError(code="CONFIG_CREATE_ERROR") from e

    logger.info(f"Config {app}/{payload.screen}/{payload.key} written by {principal.updated_by}")
    return created(ConfigIdentity(app=app, screen=payload.screen, key=payload.key).to_dict())


@api_router.put("/admin/config/{key}")
async def update_config(
    request: Request,
    key: str,
    app: Optional[str] = None,
    screen: Optional[str] = None,
    principal: Principal = Depends(require_admin),
    store: ConfigStore = Depends(get_store),
):
    """
    Update a config entry. Body: {value, type}

    Writes are unconditional, so updating an entry that does not exist
    creates it.
    """
    if not key or not app or not screen:
        raise ValidationError(MISSING_IDENTITY_MESSAGE)
    _require_app(app)

    body = await _read_json_body(request)
    merged = dict(body) if isinstance(body, dict) else {}
    merged.update(key=key, screen=screen)
    payload = _validated_payload(merged)

    try:
        await run_in_threadpool(store.put, app, screen, key, payload.value, payload.type, principal.updated_by)
    except Exception as e:
        logger.error(f"Error updating config {app}/{screen}/{key}: {e}")
        raise StoreError(code="CONFIG_UPDATE_ERROR") from e

    logger.info(f"Config {app}/{screen}/{key} written by {principal.updated_by}")
    return ok(ConfigIdentity(app=app, screen=screen, key=key).to_dict())


@api_router.delete("/admin/config/{key}")
async def delete_config(
    key: str,
    app: Optional[str] = None,
    screen: Optional[str] = None,
    principal: Principal = Depends(require_admin),
    store: ConfigStore = Depends(get_store),
):
    """Delete a config entry; deleting a missing entry still succeeds"""
    if not key or not app or not screen:
        raise ValidationError(MISSING_IDENTITY_MESSAGE)

    result = validate_key(key)
    if not result.valid:
        raise ValidationError(result.error)
    result = validate_screen(screen)
    if not result.valid:
        raise ValidationError(result.error)
    _require_app(app)

    try:
        await run_in_threadpool(store.delete, app, screen, key)
    except Exception as e:
        logger.error(f"Error deleting config {app}/{screen}/{key}: {e}")
        raise StoreError(code="CONFIG_DELETE_ERROR") from e

    logger.info(f"Config {app}/{screen}/{key} deleted by {principal.updated_by}")
    return no_content()
