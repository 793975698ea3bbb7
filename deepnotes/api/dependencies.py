"""FastAPI dependencies for DI."""

from functools import lru_cache

from fastapi import Depends, HTTPException

from deepnotes.core.config import AppConfig, get_config
from deepnotes.core.container import Container
from deepnotes.core.exceptions import SessionNotFoundError
from deepnotes.session.controller import SessionController


@lru_cache
def get_cached_config() -> AppConfig:
    """Get cached application config."""
    return get_config()


@lru_cache
def get_container() -> Container:
    """Get cached DI container."""
    return Container(config=get_cached_config())


# For testing - allows overriding the container
_container_override: Container | None = None


def set_container_override(container: Container | None) -> None:
    """Set container override (for testing)."""
    global _container_override
    _container_override = container


def clear_container_override() -> None:
    """Clear container override (for testing cleanup)."""
    global _container_override
    _container_override = None


def get_container_dependency() -> Container:
    """FastAPI dependency to get the container."""
    if _container_override:
        return _container_override
    return get_container()


def get_session(
    session_id: str,
    container: Container = Depends(get_container_dependency),  # noqa: B008
) -> SessionController:
    """FastAPI dependency resolving the session from the path."""
    try:
        return container.session_registry.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
