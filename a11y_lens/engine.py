"""Rule dispatch with per-rule failure isolation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from a11y_lens.models import Violation
from a11y_lens.rules import RuleRegistry, build_registry
from a11y_lens.rules.base import Rule, RuleContext

logger = logging.getLogger(__name__)


class RuleExecutionError(RuntimeError):
    """A rule raised while checking a file."""

    def __init__(self, rule_id: str, file_path: str, cause: Exception) -> None:
        super().__init__(f"Rule '{rule_id}' failed on {file_path}: {cause}")
        self.rule_id = rule_id
        self.file_path = file_path
        self.cause = cause


@dataclass(slots=True)
class EngineResult:
    violations: list[Violation] = field(default_factory=list)
    failures: list[RuleExecutionError] = field(default_factory=list)


class RuleEngine:
    """Runs the applicable rules of a registry against one file at a time."""

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        self.registry = registry if registry is not None else build_registry()

    def applicable_rules(self, context: RuleContext) -> list[Rule]:
        """Rules for the file kind; tree-based rules need a parsed file."""
        return [
            rule
            for rule in self.registry.for_kind(context.file_kind)
            if not rule.mode.needs_tree or context.parser is not None
        ]

    def run(self, context: RuleContext) -> EngineResult:
        result = EngineResult()
        for rule in self.applicable_rules(context):
            try:
                found = rule.check(context)
            except Exception as exc:
                failure = RuleExecutionError(rule.rule_id, context.file_path, exc)
                logger.warning("%s", failure, exc_info=exc)
                result.failures.append(failure)
                continue
            result.violations.extend(found)
        return result

    def check_file(self, context: RuleContext) -> list[Violation]:
        """Concatenate violations of every applicable rule in registration order."""
        return self.run(context).violations
