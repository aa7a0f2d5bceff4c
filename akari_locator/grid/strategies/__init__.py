"""
Strategies Package - Concrete axis strategy implementations.

Import this module to register all built-in strategies.
"""

from .adaptive import AdaptiveAxisStrategy

__all__ = [
    "AdaptiveAxisStrategy",
]
