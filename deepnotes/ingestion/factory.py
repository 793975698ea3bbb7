"""Ingestion backend factory with decorator-based registration."""

from deepnotes.core.config import IngestionConfig
from deepnotes.core.exceptions import ConfigurationError
from deepnotes.core.protocols import IngestionBackend


class IngestionBackendFactory:
    """Decorator-based auto-registration factory.

    To add a new backend:
    1. Create ingestion/new_backend.py
    2. Apply @IngestionBackendFactory.register("new_name") decorator
    3. Import the module in ingestion/__init__.py
    4. Set INGESTION_BACKEND=new_name in .env
    """

    _registry: dict[str, type] = {}

    @classmethod
    def register(cls, name: str):
        """Decorator to register a backend class."""

        def decorator(backend_cls: type) -> type:
            cls._registry[name] = backend_cls
            return backend_cls

        return decorator

    @classmethod
    def create(cls, config: IngestionConfig) -> IngestionBackend:
        """Create a backend instance from configuration."""
        backend_cls = cls._registry.get(config.backend)
        if backend_cls is None:
            available = ", ".join(cls._registry.keys()) or "none registered"
            raise ConfigurationError(
                f"Unknown ingestion backend: '{config.backend}'. Available: {available}"
            )
        return backend_cls(config)

    @classmethod
    def available_backends(cls) -> list[str]:
        """List all registered backends."""
        return list(cls._registry.keys())
