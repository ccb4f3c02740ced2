"""Rule registry: stores construction rules and orders the applicable ones."""

from __future__ import annotations

from plankernel.models.context import WallConstructionContext
from plankernel.rules.base import ConstructionRule


class RuleRegistry:
    """
    Central registry for all construction rules.

    Rules are registered at startup. During planning, the registry
    returns the rules applicable to a wall sorted by priority with
    dependencies resolved.
    """

    def __init__(self) -> None:
        self._rules: dict[str, ConstructionRule] = {}

    def register(self, rule: ConstructionRule) -> None:
        """Register a construction rule."""
        self._rules[rule.get_id()] = rule

    def unregister(self, rule_id: str) -> None:
        """Remove a rule from the registry."""
        self._rules.pop(rule_id, None)

    def get_rule(self, rule_id: str) -> ConstructionRule | None:
        return self._rules.get(rule_id)

    def list_rules(self) -> list[ConstructionRule]:
        """Return all registered rules."""
        return list(self._rules.values())

    def get_applicable_rules(self, context: WallConstructionContext) -> list[ConstructionRule]:
        """
        Return rules that apply to the given wall, sorted by priority.

        Respects GenerationConfig.enabled_rules and disabled_rules.
        """
        config = context.config
        candidates = list(self._rules.values())

        # If enabled_rules is specified, only use those
        if config.enabled_rules:
            candidates = [r for r in candidates if r.get_id() in config.enabled_rules]

        # Remove explicitly disabled rules
        if config.disabled_rules:
            candidates = [r for r in candidates if r.get_id() not in config.disabled_rules]

        # Filter by applies()
        applicable = [r for r in candidates if r.applies(context)]

        # Sort by priority (lower first), then resolve dependencies
        applicable.sort(key=lambda r: r.priority)
        return self._resolve_order(applicable)

    def _resolve_order(self, rules: list[ConstructionRule]) -> list[ConstructionRule]:
        """Topological sort respecting dependencies among the given rules."""
        rule_map = {r.get_id(): r for r in rules}
        visited: set[str] = set()
        ordered: list[ConstructionRule] = []

        def visit(rule_id: str) -> None:
            if rule_id in visited:
                return
            visited.add(rule_id)
            rule = rule_map.get(rule_id)
            if rule is None:
                return
            for dep_id in rule.dependencies:
                visit(dep_id)
            ordered.append(rule)

        for r in rules:
            visit(r.get_id())

        return ordered


def create_default_registry() -> RuleRegistry:
    """Create a registry with all standard construction rules."""
    from plankernel.rules.wall.infill import InfillWallRule
    from plankernel.rules.wall.strawhenge import StrawhengeWallRule
    from plankernel.rules.wall.monolithic import MonolithicWallRule
    from plankernel.rules.opening.frame import OpeningFrameRule

    registry = RuleRegistry()
    registry.register(InfillWallRule())
    registry.register(StrawhengeWallRule())
    registry.register(MonolithicWallRule())
    registry.register(OpeningFrameRule())
    return registry
