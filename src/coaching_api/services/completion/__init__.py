"""Completion strategy registry for the session completion pipeline."""
from typing import Dict, List, Type

from .base import (
    CompletionRequest,
    CompletionResult,
    CompletionStrategy,
    StrategyUnavailable,
)

_STRATEGY_REGISTRY: Dict[str, Type[CompletionStrategy]] = {}


def register_strategy(strategy_class: Type[CompletionStrategy]) -> None:
    """Register a completion strategy class.

    Raises:
        ValueError: If a strategy is already registered under this name.
    """
    name = strategy_class.strategy_name()
    if name in _STRATEGY_REGISTRY:
        raise ValueError(f"Strategy already registered under '{name}'")
    _STRATEGY_REGISTRY[name] = strategy_class


def get_strategy(name: str) -> CompletionStrategy:
    """Get an instantiated strategy by name.

    Raises:
        KeyError: If no strategy is registered under the name.
    """
    cls = _STRATEGY_REGISTRY[name]
    return cls()


def select_strategies(rpc_enabled: bool) -> List[CompletionStrategy]:
    """Strategies to try, in priority order. The sequential path is always last."""
    names = ["rpc", "sequential"] if rpc_enabled else ["sequential"]
    return [get_strategy(name) for name in names]


__all__ = [
    "register_strategy",
    "get_strategy",
    "select_strategies",
    "CompletionRequest",
    "CompletionResult",
    "CompletionStrategy",
    "StrategyUnavailable",
]

# Auto-load strategies (triggers self-registration)
from . import rpc_strategy  # noqa: F401,E402
from . import sequential_strategy  # noqa: F401,E402
