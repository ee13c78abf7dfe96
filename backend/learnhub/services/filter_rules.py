"""
CMS filter rules: decide whether one topic/content item (or hierarchy node) passes a rule.
Fail closed: a rule that cannot be evaluated excludes the item, it never raises.
"""
import json
import logging
from typing import Any, Callable, Iterable

from pydantic import BaseModel

from learnhub.schemas.records import FilterRuleRecord

logger = logging.getLogger(__name__)

FILTER_TYPES = ("parent_id", "column_value", "custom")
FILTER_LOGICS = ("equals", "contains", "in_array")

CustomPredicate = Callable[[FilterRuleRecord, Any], bool]

_MISSING = object()


def _read_column(entity: Any, column: str | None) -> Any:
    """Value of column on a dict or an object; _MISSING when the column does not exist."""
    if not column:
        return _MISSING
    if isinstance(entity, dict):
        return entity.get(column, _MISSING)
    if isinstance(entity, tuple) and hasattr(entity, "_fields"):
        fields = entity._fields
    elif isinstance(entity, BaseModel):
        fields = type(entity).model_fields
    else:
        # plain objects: data attributes only, never methods or private names
        if column.startswith("_"):
            return _MISSING
        value = getattr(entity, column, _MISSING)
        return _MISSING if callable(value) else value
    return getattr(entity, column) if column in fields else _MISSING


def _as_text(v: Any) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    return str(v)


def parse_value_list(raw: str | None) -> list[str]:
    """
    Decode a rule's column_value as a list: JSON array when it starts with '[',
    otherwise comma-separated. Empty entries are dropped.
    """
    if raw is None:
        return []
    s = raw.strip()
    if s.startswith("["):
        try:
            decoded = json.loads(s)
        except ValueError:
            logger.debug("column_value %r is not valid JSON; splitting on commas", raw)
        else:
            if isinstance(decoded, list):
                return [_as_text(x) for x in decoded if x is not None]
    return [p.strip() for p in s.split(",") if p.strip()]


def _match_column(value: Any, logic: str, target: str | None) -> bool:
    if value is None or target is None:
        return False
    is_array = isinstance(value, (list, tuple, set, frozenset))
    if logic == "equals":
        if is_array:
            return [_as_text(v) for v in value] == parse_value_list(target)
        return _as_text(value) == target
    if logic == "contains":
        if is_array:
            return target in {_as_text(v) for v in value}
        if isinstance(value, str):
            return target in value
        return False
    if logic == "in_array":
        allowed = set(parse_value_list(target))
        if is_array:
            return any(_as_text(v) in allowed for v in value)
        return _as_text(value) in allowed
    return False


def evaluate_filter_rule(
    rule: FilterRuleRecord,
    entity: Any,
    parent_match_value: str | None = None,
    custom_predicate: CustomPredicate | None = None,
) -> bool:
    """
    True if entity satisfies rule. Inactive rules impose no constraint (True).
    parent_id rules compare entity.parent_id with parent_match_value (the caller's selected parent).
    custom rules delegate to custom_predicate; without one they exclude.
    """
    if not rule.is_active:
        return True
    if rule.filter_type == "parent_id":
        if not parent_match_value:
            return False
        parent = _read_column(entity, "parent_id")
        return parent is not _MISSING and parent == parent_match_value
    if rule.filter_type == "column_value":
        value = _read_column(entity, rule.column_name)
        if value is _MISSING:
            logger.debug("Filter rule %s: column %r not present on entity", rule.id, rule.column_name)
            return False
        return _match_column(value, rule.filter_logic, rule.column_value)
    if rule.filter_type == "custom":
        if custom_predicate is None:
            return False
        try:
            return bool(custom_predicate(rule, entity))
        except Exception as e:
            logger.warning("Filter rule %s: custom predicate failed, excluding item: %s", rule.id, e)
            return False
    logger.debug("Filter rule %s: unknown filter_type %r", rule.id, rule.filter_type)
    return False


def active_rules_for_level(rules: Iterable[FilterRuleRecord], level: int | None = None) -> list[FilterRuleRecord]:
    """Active rules, optionally only those for one level. Order preserved."""
    return [r for r in rules if r.is_active and (level is None or r.level == level)]


def evaluate_filter_rules(
    rules: Iterable[FilterRuleRecord],
    entity: Any,
    level: int | None = None,
    parent_match_value: str | None = None,
    custom_predicate: CustomPredicate | None = None,
) -> bool:
    """AND of every active rule (for level, when given). No active rules means no constraint."""
    return all(
        evaluate_filter_rule(r, entity, parent_match_value, custom_predicate)
        for r in active_rules_for_level(rules, level)
    )
