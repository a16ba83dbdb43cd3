"""Design-system component validation through a pluggable validator.

The validator is an external collaborator (a registry lookup, a service call).
Each call runs on a worker thread and is awaited for at most the configured
timeout, so a slow or broken validator degrades to an informational violation
instead of stalling or failing the scan.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from concurrent.futures import Executor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Protocol

from a11y_lens.models import FixSuggestion, Violation
from a11y_lens.parsers.script import UNKNOWN, PropValue, ScriptParser, SyntaxNode
from a11y_lens.rules.design_system import is_component_name

logger = logging.getLogger(__name__)

DEFAULT_HELP = "Review the design system component documentation"


@dataclass(frozen=True, slots=True)
class ComponentVerdict:
    """Validator answer for one component usage."""

    valid: bool
    issues: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()


class ComponentValidator(Protocol):
    """Checks one component usage against a design system."""

    def validate(self, component_name: str, props: Mapping[str, PropValue]) -> ComponentVerdict:
        """Return a verdict for ``component_name`` rendered with ``props``."""


class ComponentValidationError(RuntimeError):
    """The validator failed, timed out or answered with a malformed verdict."""

    def __init__(self, component_name: str, reason: str) -> None:
        super().__init__(f"Unable to validate component {component_name}: {reason}")
        self.component_name = component_name
        self.reason = reason


@dataclass(frozen=True, slots=True)
class _PropRequirement:
    any_of: tuple[str, ...]
    issue: str
    suggestion: str


LABEL_PROPS = ("label", "aria-label", "aria-labelledby")

_REQUIREMENTS: dict[str, tuple[_PropRequirement, ...]] = {
    "Icon": (
        _PropRequirement(
            any_of=("aria-label", "aria-hidden", "title"),
            issue="Icon needs aria-label, or aria-hidden when it is decorative",
            suggestion=(
                'Add aria-hidden="true" to decorative icons or aria-label to meaningful ones'
            ),
        ),
    ),
    "Modal": (
        _PropRequirement(
            any_of=("title", "aria-label", "aria-labelledby"),
            issue="Modal needs a title, aria-label or aria-labelledby",
            suggestion="Give the modal a title prop so screen readers announce it",
        ),
    ),
    "Tooltip": (
        _PropRequirement(
            any_of=("content", "title", "label"),
            issue="Tooltip needs content",
            suggestion="Pass the tooltip text through the content prop",
        ),
    ),
}
for _name in ("Input", "Select", "Textarea", "Checkbox", "Radio", "Switch", "Dropdown"):
    _REQUIREMENTS[_name] = (
        _PropRequirement(
            any_of=LABEL_PROPS,
            issue=f"{_name} needs a label, aria-label or aria-labelledby prop",
            suggestion=f'Add label="..." to the {_name} component',
        ),
    )


class RequiredPropsValidator:
    """Local validator enforcing accessible-name props on approved components."""

    def validate(self, component_name: str, props: Mapping[str, PropValue]) -> ComponentVerdict:
        issues: list[str] = []
        suggestions: list[str] = []
        for requirement in _REQUIREMENTS.get(component_name, ()):
            if any(_is_set(props.get(name)) for name in requirement.any_of):
                continue
            issues.append(requirement.issue)
            suggestions.append(requirement.suggestion)
        if component_name == "Button" and props.get("iconOnly") is True:
            if not any(_is_set(props.get(name)) for name in LABEL_PROPS):
                issues.append("Icon-only Button needs an aria-label")
                suggestions.append('Add aria-label="..." describing the button action')
        return ComponentVerdict(
            valid=not issues, issues=tuple(issues), suggestions=tuple(suggestions)
        )


def _is_set(value: PropValue | None) -> bool:
    if value is None or value is False:
        return False
    if value is UNKNOWN or value is True:
        return True
    return bool(str(value).strip())


@dataclass(slots=True)
class ComponentCheckResult:
    violations: list[Violation] = field(default_factory=list)
    failures: list[ComponentValidationError] = field(default_factory=list)
    elapsed_ms: int = 0


def validate_components(
    parser: ScriptParser,
    validator: ComponentValidator,
    executor: Executor,
    *,
    timeout_seconds: float,
) -> ComponentCheckResult:
    """Validate every custom component usage in a parsed markup file."""
    start = time.perf_counter()
    result = ComponentCheckResult()
    for element in parser.find_elements():
        name = parser.element_name(element)
        if not is_component_name(name):
            continue
        props = parser.component_props(element)
        try:
            verdict = _call_validator(validator, executor, name, props, timeout_seconds)
        except ComponentValidationError as exc:
            logger.warning("%s", exc)
            result.failures.append(exc)
            result.violations.append(_validation_error(parser, element, exc))
            continue
        if not verdict.valid:
            result.violations.extend(_issue_violations(parser, element, name, verdict))
    result.elapsed_ms = int((time.perf_counter() - start) * 1000)
    return result


def _call_validator(
    validator: ComponentValidator,
    executor: Executor,
    name: str,
    props: dict[str, PropValue],
    timeout_seconds: float,
) -> ComponentVerdict:
    future = executor.submit(validator.validate, name, dict(props))
    try:
        verdict = future.result(timeout=timeout_seconds)
    except FutureTimeoutError as exc:
        future.cancel()
        raise ComponentValidationError(name, f"timed out after {timeout_seconds:g}s") from exc
    except Exception as exc:
        raise ComponentValidationError(name, f"{exc.__class__.__name__}: {exc}") from exc
    if not _is_well_formed(verdict):
        raise ComponentValidationError(name, f"malformed verdict {verdict!r}")
    return verdict


def _is_well_formed(verdict: object) -> bool:
    if not isinstance(verdict, ComponentVerdict) or not isinstance(verdict.valid, bool):
        return False
    for values in (verdict.issues, verdict.suggestions):
        if isinstance(values, str) or not isinstance(values, Sequence):
            return False
        if not all(isinstance(item, str) for item in values):
            return False
    return True


def _issue_violations(
    parser: ScriptParser, element: SyntaxNode, name: str, verdict: ComponentVerdict
) -> list[Violation]:
    position = parser.get_node_location(element)
    code = parser.opening_tag_code(element)
    violations: list[Violation] = []
    for issue in verdict.issues:
        help_text = next((item for item in verdict.suggestions if issue in item), DEFAULT_HELP)
        violations.append(
            Violation(
                id="ds-component-error",
                severity="error",
                wcag_criteria=("4.1.2",),
                title=f"Design system component issue: {name}",
                description=issue,
                help=help_text,
                line=position.line,
                column=position.column,
                code=code,
                fix_suggestions=tuple(
                    FixSuggestion(
                        title="Design system component fix",
                        description=suggestion,
                        priority="high",
                    )
                    for suggestion in verdict.suggestions
                    if suggestion != issue
                ),
                tags=("design-system", "wcag-4.1.2"),
            )
        )
    return violations


def _validation_error(
    parser: ScriptParser, element: SyntaxNode, error: ComponentValidationError
) -> Violation:
    position = parser.get_node_location(element)
    return Violation(
        id="ds-validation-error",
        severity="info",
        wcag_criteria=(),
        title=f"Design system validation error: {error.component_name}",
        description=f"Unable to validate component against the design system ({error.reason})",
        help="Check the design system validator and component availability",
        line=position.line,
        column=position.column,
        code=parser.opening_tag_code(element),
        tags=("design-system", "validation-error"),
    )
