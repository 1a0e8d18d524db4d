"""
Registry for discovering and creating schema conflict strategies.

Strategies register the names they answer to; configuration values are looked
up case-insensitively.
"""

import logging
from typing import Dict, List, Optional, Type, Union

from .base import SchemaConflictStrategy
from .strategies import ConflictStrategy, FailStrategy, FirstWinsStrategy, RenameStrategy

logger = logging.getLogger(__name__)


class StrategyRegistry:
    """
    Registry of available schema conflict strategies.

    Holds strategy classes keyed by every name they support and creates a
    fresh instance per lookup.
    """

    def __init__(self):
        self._strategies: Dict[str, Type[ConflictStrategy]] = {}
        self._register_default_strategies()

    def _register_default_strategies(self) -> None:
        """Register the built-in strategies."""
        self.register(RenameStrategy)
        self.register(FirstWinsStrategy)
        self.register(FailStrategy)

        logger.debug(f"Registered {len(self._strategies)} strategy names")

    def register(self, strategy_class: Type[ConflictStrategy]) -> None:
        """
        Register a strategy class under each name it supports.

        Args:
            strategy_class: Class that inherits from ConflictStrategy
        """
        if not (
            isinstance(strategy_class, type)
            and issubclass(strategy_class, ConflictStrategy)
        ):
            raise ValueError(
                f"Strategy must inherit from ConflictStrategy: {strategy_class}"
            )

        for name in strategy_class().supported_names:
            self._strategies[name.lower()] = strategy_class
            logger.debug(f"Registered strategy '{name}' -> {strategy_class.__name__}")

    def unregister(self, name: str) -> None:
        """Unregister a strategy name."""
        if name.lower() in self._strategies:
            del self._strategies[name.lower()]
            logger.debug(f"Unregistered strategy: {name}")

    def get_available_strategies(self) -> List[str]:
        """Canonical names of all registered strategies."""
        names = []
        for strategy_class in self._strategies.values():
            name = strategy_class().strategy_name
            if name not in names:
                names.append(name)
        return names

    def get_strategy_class(self, name: str) -> Optional[Type[ConflictStrategy]]:
        return self._strategies.get(name.lower())

    def create(
        self, strategy: Union[str, SchemaConflictStrategy]
    ) -> ConflictStrategy:
        """
        Create a strategy instance.

        Args:
            strategy: Strategy name or enum member

        Returns:
            A new strategy instance

        Raises:
            ValueError: If no strategy is registered under the name
        """
        name = strategy.value if isinstance(strategy, SchemaConflictStrategy) else strategy
        strategy_class = self.get_strategy_class(str(name))

        if strategy_class is None:
            available = ", ".join(self.get_available_strategies())
            raise ValueError(
                f"Unknown schema conflict strategy: '{name}'. "
                f"Available strategies: {available}"
            )

        return strategy_class()

    def get_strategy_info(self) -> Dict[str, Dict[str, object]]:
        """Describe registered strategies, grouped by class."""
        info: Dict[str, Dict[str, object]] = {}
        for name, strategy_class in self._strategies.items():
            entry = info.setdefault(
                strategy_class().strategy_name,
                {
                    "class": strategy_class.__name__,
                    "aliases": [],
                    "description": (
                        strategy_class.__doc__.strip()
                        if strategy_class.__doc__
                        else "No description"
                    ),
                },
            )
            entry["aliases"].append(name)
        return info


# Global registry instance
strategy_registry = StrategyRegistry()


def create_strategy(strategy: Union[str, SchemaConflictStrategy]) -> ConflictStrategy:
    """Convenience function to create a strategy from the global registry."""
    return strategy_registry.create(strategy)


def register_strategy(strategy_class: Type[ConflictStrategy]) -> None:
    """Convenience function to register a custom strategy."""
    strategy_registry.register(strategy_class)


def get_available_strategies() -> List[str]:
    """Convenience function to list available strategies."""
    return strategy_registry.get_available_strategies()


def get_strategy_info() -> Dict[str, Dict[str, object]]:
    """Convenience function to describe available strategies."""
    return strategy_registry.get_strategy_info()
