"""Rule engine and rule domain service.

Rules are evaluated in ascending (priority, id) order. The first matching
categorize rule fixes the category and the first matching merchant-cleanup
rule fixes the display name; evaluation stops once both are set.
"""

import re
from dataclasses import replace
from typing import Any, Iterable, Optional

from ledgerwise.database.base import Database
from ledgerwise.domain.entities import MatchMode, Rule, RuleMatch, RuleType
from ledgerwise.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    rule_not_found,
)

SUPPORTED_MATCH_FIELDS = ("description",)
UPDATABLE_RULE_FIELDS = (
    "match_pattern",
    "match_mode",
    "target_category_id",
    "display_name",
    "priority",
    "is_active",
)


def rule_matches(rule: Rule, description: str) -> bool:
    """Return True if the rule's pattern matches the description.

    Plain modes compare lower-cased text. Regex mode searches the original
    description case-insensitively; an invalid pattern never matches.
    """
    if rule.match_mode is MatchMode.REGEX:
        try:
            return re.search(rule.match_pattern, description, re.IGNORECASE) is not None
        except re.error:
            return False

    value = description.lower()
    pattern = rule.match_pattern.lower()
    if rule.match_mode is MatchMode.CONTAINS:
        return pattern in value
    if rule.match_mode is MatchMode.STARTS_WITH:
        return value.startswith(pattern)
    if rule.match_mode is MatchMode.EXACT:
        return value == pattern
    return False


def apply_rules(rules: Iterable[Rule], description: str) -> RuleMatch:
    """Resolve category and display-name overrides for a description.

    Args:
        rules: Rules to evaluate; inactive ones are ignored
        description: Raw transaction description

    Returns:
        RuleMatch with whatever overrides were found
    """
    ordered = sorted((r for r in rules if r.is_active), key=lambda r: (r.priority, r.id))

    result = RuleMatch()
    for rule in ordered:
        if result.is_resolved:
            break
        if not rule_matches(rule, description):
            continue
        if (
            rule.rule_type is RuleType.CATEGORIZE
            and result.category_id is None
            and rule.target_category_id is not None
        ):
            result = replace(result, category_id=rule.target_category_id)
        elif (
            rule.rule_type is RuleType.MERCHANT_CLEANUP
            and result.display_name is None
            and rule.display_name is not None
        ):
            result = replace(result, display_name=rule.display_name)

    return result


def _parse_rule_type(value: str | RuleType) -> RuleType:
    try:
        return RuleType(value)
    except ValueError:
        choices = ", ".join(t.value for t in RuleType)
        raise ValidationError(f"Invalid rule type '{value}'. Expected one of: {choices}")


def _parse_match_mode(value: str | MatchMode) -> MatchMode:
    try:
        return MatchMode(value)
    except ValueError:
        choices = ", ".join(m.value for m in MatchMode)
        raise ValidationError(f"Invalid match mode '{value}'. Expected one of: {choices}")


class RuleService:
    """Service for managing enrichment rules."""

    def __init__(self, db: Database):
        """Initialize rule service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_rule(
        self,
        rule_type: str | RuleType,
        match_pattern: str,
        match_mode: str | MatchMode = MatchMode.CONTAINS,
        target_category_id: Optional[int] = None,
        display_name: Optional[str] = None,
        priority: int = 100,
        match_field: str = "description",
    ) -> int:
        """Create a rule.

        Args:
            rule_type: categorize or merchant_cleanup
            match_pattern: Text or regular expression to match
            match_mode: contains, starts_with, exact or regex
            target_category_id: Category assigned by a categorize rule
            display_name: Name assigned by a merchant_cleanup rule
            priority: Lower values are evaluated first
            match_field: Transaction field the pattern applies to

        Returns:
            Rule ID

        Raises:
            ValidationError: If the rule is incomplete or malformed
            NotFoundError: If the target category doesn't exist
        """
        parsed_type = _parse_rule_type(rule_type)
        parsed_mode = _parse_match_mode(match_mode)

        if not match_pattern:
            raise ValidationError("Match pattern cannot be empty")
        if match_field not in SUPPORTED_MATCH_FIELDS:
            raise ValidationError(f"Unsupported match field '{match_field}'")

        if parsed_type is RuleType.CATEGORIZE:
            if target_category_id is None:
                raise ValidationError("Categorize rules require a target category")
            if self.db.get_category(target_category_id) is None:
                raise NotFoundError(category_not_found(target_category_id))
        elif not display_name:
            raise ValidationError("Merchant cleanup rules require a display name")

        return self.db.create_rule(
            rule_type=parsed_type.value,
            match_pattern=match_pattern,
            match_field=match_field,
            match_mode=parsed_mode.value,
            target_category_id=target_category_id,
            display_name=display_name,
            priority=priority,
        )

    def get_rule(self, rule_id: int) -> Optional[Rule]:
        """Get rule by ID, or None."""
        return self.db.get_rule(rule_id)

    def list_rules(self, active_only: bool = True) -> list[Rule]:
        """List rules in evaluation order."""
        return self.db.list_rules(active_only=active_only)

    def update_rule(self, rule_id: int, **changes: Any) -> Rule:
        """Update a rule.

        Args:
            rule_id: Rule ID
            **changes: Any of match_pattern, match_mode, target_category_id,
                display_name, priority, is_active. Passing None clears
                nullable fields.

        Returns:
            Updated rule

        Raises:
            NotFoundError: If rule or target category doesn't exist
            ValidationError: If a field is unknown or invalid
        """
        if self.db.get_rule(rule_id) is None:
            raise NotFoundError(rule_not_found(rule_id))

        unknown = set(changes) - set(UPDATABLE_RULE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update rule fields: {', '.join(sorted(unknown))}")

        if "match_mode" in changes:
            changes["match_mode"] = _parse_match_mode(changes["match_mode"]).value
        if "match_pattern" in changes and not changes["match_pattern"]:
            raise ValidationError("Match pattern cannot be empty")
        category_id = changes.get("target_category_id")
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        self.db.update_rule(rule_id, changes)
        return self.db.get_rule(rule_id)

    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule.

        Raises:
            NotFoundError: If rule doesn't exist
        """
        if self.db.get_rule(rule_id) is None:
            raise NotFoundError(rule_not_found(rule_id))
        self.db.delete_rule(rule_id)

    def apply_rules(self, description: str) -> RuleMatch:
        """Evaluate the active rules against a description."""
        return apply_rules(self.db.list_rules(active_only=True), description)
