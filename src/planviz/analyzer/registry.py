"""
Rule registry for warning rules.

Rules register themselves with the @register_rule decorator when their
module is imported. The analyzer instantiates them in registration order,
which is also the order their warnings appear for a given node.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from planviz.analyzer.rules.base import Rule

T = TypeVar("T", bound="Rule")


class RuleRegistry:
    """
    Registry of warning rule classes keyed by rule ID.

    Example:
        @register_rule
        class MyRule(Rule):
            rule_id = "MY_RULE"
            ...

        rules = get_registry().filter(exclude={"BROADCAST"})
    """

    def __init__(self) -> None:
        self._rules: dict[str, type[Rule]] = {}

    def register(self, rule_cls: type[T]) -> type[T]:
        """
        Register a rule class.

        Raises:
            ValueError: If a rule with the same ID is already registered
        """
        rule_id = rule_cls.rule_id

        if rule_id in self._rules:
            existing = self._rules[rule_id]
            raise ValueError(
                f"Rule '{rule_id}' already registered by {existing.__module__}.{existing.__name__}. "
                f"Cannot register {rule_cls.__module__}.{rule_cls.__name__}"
            )

        self._rules[rule_id] = rule_cls
        return rule_cls

    def get(self, rule_id: str) -> type[Rule] | None:
        return self._rules.get(rule_id)

    def all(self) -> list[type[Rule]]:
        """All registered rule classes, in registration order."""
        return list(self._rules.values())

    def all_ids(self) -> list[str]:
        return list(self._rules.keys())

    def filter(
        self,
        include: set[str] | None = None,
        exclude: set[str] | None = None,
    ) -> list[type[Rule]]:
        """
        Rule classes filtered by ID, in registration order.

        Args:
            include: If given, only these rule IDs
            exclude: Rule IDs to drop
        """
        exclude = exclude or set()
        return [
            cls
            for rule_id, cls in self._rules.items()
            if (include is None or rule_id in include) and rule_id not in exclude
        ]

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules


_registry = RuleRegistry()


def get_registry() -> RuleRegistry:
    """The process-wide rule registry."""
    return _registry


def register_rule(rule_cls: type[T]) -> type[T]:
    """Decorator registering a rule class in the global registry."""
    return _registry.register(rule_cls)
