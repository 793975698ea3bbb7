"""Answerer factory with decorator-based registration."""

from deepnotes.core.config import ConversationConfig
from deepnotes.core.exceptions import ConfigurationError
from deepnotes.core.protocols import Answerer


class AnswererFactory:
    """Decorator-based auto-registration factory.

    To add a new answerer:
    1. Create conversation/new_answerer.py
    2. Apply @AnswererFactory.register("new_name") decorator
    3. Import the module in conversation/__init__.py
    4. Set CONVERSATION_ANSWERER=new_name in .env
    """

    _registry: dict[str, type] = {}

    @classmethod
    def register(cls, name: str):
        """Decorator to register an answerer class."""

        def decorator(answerer_cls: type) -> type:
            cls._registry[name] = answerer_cls
            return answerer_cls

        return decorator

    @classmethod
    def create(cls, config: ConversationConfig) -> Answerer:
        """Create an answerer instance from configuration."""
        answerer_cls = cls._registry.get(config.answerer)
        if answerer_cls is None:
            available = ", ".join(cls._registry.keys()) or "none registered"
            raise ConfigurationError(
                f"Unknown answerer: '{config.answerer}'. Available: {available}"
            )
        return answerer_cls(config)

    @classmethod
    def available_answerers(cls) -> list[str]:
        """List all registered answerers."""
        return list(cls._registry.keys())
