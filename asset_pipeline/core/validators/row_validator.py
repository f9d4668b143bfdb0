"""
Row validator for mapped asset rows.

Builds per-rule validators from rule configurations (the same shape the
rule builder produces) and applies all of them to each mapped row,
collecting every violation as a ValidationError with the rule's severity.
"""

from collections.abc import Callable
from datetime import date
from typing import Any

from asset_pipeline.core.coercion import parse_date
from asset_pipeline.core.constants import (
    CANONICAL_ASSET_FIELDS,
    DATE_FIELDS,
    ENUM_FIELDS,
    FIELD_DEFAULTS,
    FIELD_MAX_LENGTHS,
    MAX_FIELD_LENGTH,
    NUMERIC_FIELDS,
    REQUIRED_ASSET_FIELDS,
    field_label,
)
from asset_pipeline.core.models import MappedRow, Severity, ValidationError

from .base_validator import BaseValidator, RuleViolation, is_blank
from .custom_validator import CustomValidator
from .enum_validator import EnumValidator
from .length_validator import LengthValidator
from .range_validator import RangeValidator
from .required_field_validator import RequiredFieldValidator
from .type_validator import TypeValidator


class RowValidator:
    """
    Applies validation rules to mapped rows.

    Rules are dictionaries containing:
    - rule_name: str
    - rule_type: str (required_field, enum, length, type_check, range, custom)
    - field_name: str (canonical asset field)
    - parameters: dict[str, Any] (optional)
    - severity: str (error or warning)
    - enabled: bool (default True)
    """

    VALIDATOR_REGISTRY = {
        "required_field": RequiredFieldValidator,
        "enum": EnumValidator,
        "length": LengthValidator,
        "type_check": TypeValidator,
        "range": RangeValidator,
        "custom": CustomValidator,
    }

    def __init__(self, rules: list[dict[str, Any]]):
        self.rules = rules
        self.validators: list[tuple[str, Severity, BaseValidator]] = []
        self._build_validators()

    @classmethod
    def default(cls, today: Callable[[], date] | None = None) -> "RowValidator":
        """Validator with the standard asset rule set."""
        return cls(default_asset_rules(today))

    def _build_validators(self) -> None:
        for rule in self.rules:
            if not rule.get("enabled", True):
                continue

            rule_name = rule["rule_name"]
            validator_class = self.VALIDATOR_REGISTRY.get(rule["rule_type"])
            if not validator_class:
                raise ValueError(f"Unknown rule type: {rule['rule_type']}")

            try:
                validator = validator_class(rule["field_name"], rule.get("parameters", {}))
            except ValueError as e:
                raise ValueError(f"Failed to create validator for rule '{rule_name}': {e}") from e
            self.validators.append((rule_name, Severity(rule.get("severity", "error")), validator))

    def validate(self, row: MappedRow | dict[str, str]) -> list[ValidationError]:
        """
        Validate one mapped row.

        Args:
            row: MappedRow or a plain canonical field -> value dict

        Returns:
            All issues found, in rule order (empty when the row is clean)
        """
        record = row.mapped if isinstance(row, MappedRow) else row
        issues = []
        for _, severity, validator in self.validators:
            value = record.get(validator.field_name)
            try:
                validator.validate(value, record)
            except RuleViolation as violation:
                issues.append(ValidationError(
                    field=violation.field_name,
                    value=value,
                    error=violation.message,
                    severity=severity,
                ))
        return issues

    def get_rule_summary(self) -> dict[str, Any]:
        counts: dict[str, int] = {}
        for _, _, validator in self.validators:
            counts[validator.rule_type] = counts.get(validator.rule_type, 0) + 1
        return {"total_rules": len(self.validators), "rules_by_type": counts}


class AssetRuleBuilder:
    """
    Programmatically build validation rule configurations.
    """

    def __init__(self):
        self.rules: list[dict[str, Any]] = []

    def _add(
        self,
        rule_name: str,
        rule_type: str,
        field_name: str,
        parameters: dict[str, Any],
        severity: str = "error",
    ) -> "AssetRuleBuilder":
        self.rules.append({
            "rule_name": rule_name,
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters,
            "severity": severity,
            "enabled": True,
        })
        return self

    def add_required_field(self, field_name: str) -> "AssetRuleBuilder":
        return self._add(f"{field_name}_required", "required_field", field_name, {})

    def add_enum(self, field_name: str, allowed_values: tuple[str, ...]) -> "AssetRuleBuilder":
        return self._add(
            f"{field_name}_enum", "enum", field_name, {"allowed_values": allowed_values}
        )

    def add_max_length(self, field_name: str, max_length: int) -> "AssetRuleBuilder":
        return self._add(f"{field_name}_length", "length", field_name, {"max_length": max_length})

    def add_type_check(self, field_name: str, expected_type: str) -> "AssetRuleBuilder":
        return self._add(
            f"{field_name}_type_check", "type_check", field_name, {"expected_type": expected_type}
        )

    def add_range(
        self,
        field_name: str,
        min_value: float | None = None,
        max_value: float | None = None,
        severity: str = "error",
    ) -> "AssetRuleBuilder":
        params = {}
        if min_value is not None:
            params["min"] = min_value
        if max_value is not None:
            params["max"] = max_value
        return self._add(f"{field_name}_range", "range", field_name, params, severity)

    def add_custom(
        self,
        rule_name: str,
        field_name: str,
        validator_func: Callable[[str | None, dict[str, str]], None],
        severity: str = "error",
    ) -> "AssetRuleBuilder":
        return self._add(
            rule_name, "custom", field_name, {"validator_func": validator_func}, severity
        )

    def build(self) -> list[dict[str, Any]]:
        return self.rules


def default_asset_rules(today: Callable[[], date] | None = None) -> list[dict[str, Any]]:
    """
    The standard asset rule set.

    Errors: required tag and name, enum membership, length bounds,
    unparseable price or dates. Warnings: negative price, warranty ending
    before purchase, purchase date in the future, blank status/condition
    that will be defaulted.
    """
    today = today or date.today
    builder = AssetRuleBuilder()

    for field_name in REQUIRED_ASSET_FIELDS:
        builder.add_required_field(field_name)

    for field_name in CANONICAL_ASSET_FIELDS:
        if field_name in DATE_FIELDS or field_name in NUMERIC_FIELDS:
            continue
        builder.add_max_length(field_name, FIELD_MAX_LENGTHS.get(field_name, MAX_FIELD_LENGTH))

    for field_name, allowed in ENUM_FIELDS.items():
        builder.add_enum(field_name, allowed)
        builder.add_custom(
            f"{field_name}_defaulted",
            field_name,
            _defaulted_check(field_name, FIELD_DEFAULTS[field_name]),
            severity="warning",
        )

    for field_name in NUMERIC_FIELDS:
        builder.add_type_check(field_name, "number")
        builder.add_range(field_name, min_value=0, severity="warning")

    for field_name in DATE_FIELDS:
        builder.add_type_check(field_name, "date")

    builder.add_custom(
        "warranty_after_purchase", "warrantyExpiration", _check_warranty_after_purchase,
        severity="warning",
    )
    builder.add_custom(
        "purchase_not_in_future", "purchaseDate", _future_date_check(today),
        severity="warning",
    )
    return builder.build()


def _defaulted_check(field_name: str, default: str):
    def check(value: str | None, record: dict[str, str]) -> None:
        if field_name in record and is_blank(value):
            raise ValueError(f"{field_label(field_name)} not provided; defaults to {default}")
    return check


def _check_warranty_after_purchase(value: str | None, record: dict[str, str]) -> None:
    purchase = record.get("purchaseDate")
    if is_blank(value) or is_blank(purchase):
        return
    try:
        warranty_date, purchase_date = parse_date(value), parse_date(purchase)
    except ValueError:
        return
    if warranty_date < purchase_date:
        raise ValueError("Warranty expiration is before the purchase date")


def _future_date_check(today: Callable[[], date]):
    def check(value: str | None, record: dict[str, str]) -> None:
        if is_blank(value):
            return
        try:
            purchased = parse_date(value)
        except ValueError:
            return
        if purchased > today():
            raise ValueError("Purchase date is in the future")
    return check
