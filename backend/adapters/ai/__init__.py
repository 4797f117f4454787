# AI Adapters
# Anthropic integration

from .anthropic_adapter import (
    AIConfigurationError,
    AIGenerationError,
    AnthropicAdapter,
    Completion,
    anthropic_adapter,
)

__all__ = [
    "AnthropicAdapter",
    "anthropic_adapter",
    "Completion",
    "AIConfigurationError",
    "AIGenerationError",
]
