"""Configuration API routes over the managed .env file."""

from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter, Body, HTTPException

from ...app import IApplication
from ...env_file import (
    apply_config_update,
    managed_subset,
    mask_sensitive_values,
    read_env_file,
    write_env_file,
)
from ...errors import ConfigError
from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigUpdateResponse(BaseModel):
    message: str
    config: dict[str, str]


def create_config_router(app: IApplication) -> APIRouter:
    """Create config router. Changes take effect on the next start."""
    router = APIRouter(prefix="/api", tags=["config"])

    @router.get("/config", response_model=dict[str, str])
    async def get_config() -> dict:
        """Get managed keys with secrets masked."""
        try:
            current = read_env_file(app.settings.env_file)
        except OSError as e:
            logger.error("Error reading config file: %s", e, exc_info=True)
            raise HTTPException(status_code=500, detail="Failed to read configuration")
        return mask_sensitive_values(managed_subset(current))

    @router.post("/config", response_model=ConfigUpdateResponse)
    async def update_config(updates: dict[str, Any] = Body(...)) -> dict:
        """Validate and write managed keys to the .env file."""
        env_file = app.settings.env_file
        try:
            current = read_env_file(env_file)
            merged, changed = apply_config_update(current, updates)
            if changed:
                write_env_file(env_file, merged)
                logger.info("Configuration written to %s", env_file)
        except ConfigError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except OSError as e:
            logger.error("Error writing config file: %s", e, exc_info=True)
            raise HTTPException(status_code=500, detail="Failed to write configuration")

        return {
            "message": (
                "Configuration updated successfully"
                if changed
                else "No changes applied to configuration"
            ),
            "config": mask_sensitive_values(managed_subset(merged)),
        }

    return router
