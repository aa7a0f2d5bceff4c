"""
Axis Strategy Factory Module - Registry and factory for axis strategies.
"""

from typing import Any, Dict, List, Type

from .base import AxisStrategy


# Global registry of strategies
_STRATEGIES: Dict[str, Type[AxisStrategy]] = {}

DEFAULT_STRATEGY = "adaptive"


def register_axis_strategy(cls: Type[AxisStrategy]) -> Type[AxisStrategy]:
    """
    Decorator to register an axis strategy class.

    Usage:
        @register_axis_strategy
        class MyStrategy(AxisStrategy):
            name = "my_strategy"
            ...

    Args:
        cls: Strategy class to register

    Returns:
        The same class (for decorator chaining)
    """
    if not issubclass(cls, AxisStrategy):
        raise TypeError(f"{cls} must be a subclass of AxisStrategy")
    _STRATEGIES[cls.name] = cls
    return cls


def create_axis_strategy(name: str = DEFAULT_STRATEGY, **config: Any) -> AxisStrategy:
    """
    Create an axis strategy by name.

    Args:
        name: Strategy name (e.g. "adaptive")
        **config: Strategy parameters applied through configure(),
            e.g. cluster_ratio, max_pitch_retries. Unknown keys are ignored.

    Returns:
        Configured strategy instance

    Raises:
        ValueError: If strategy name not found
    """
    if name not in _STRATEGIES:
        available = ", ".join(_STRATEGIES.keys())
        raise ValueError(f"Unknown axis strategy: {name}. Available: {available}")

    strategy = _STRATEGIES[name]()
    if config:
        strategy.configure(**config)
    return strategy


def get_strategy_names() -> List[str]:
    """List registered strategy names."""
    return list(_STRATEGIES.keys())


def get_strategy_info() -> List[Dict[str, str]]:
    """
    Get name and description for all registered strategies.

    Returns:
        List of dicts with 'name' and 'description' keys
    """
    return [
        {"name": cls.name, "description": cls.description}
        for cls in _STRATEGIES.values()
    ]
