# okr_app/core/progress.py
"""Progress calculation for measurable items (Key Results and Success Metrics).

Every view that shows a percentage or a status badge goes through
``evaluate`` / ``calculate_progress`` so identical inputs render identically.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple
import enum
import math
import re


class MeasurableType(str, enum.Enum):
    increase_to = "increase_to"
    decrease_to = "decrease_to"
    achieve_or_not = "achieve_or_not"
    should_stay_above = "should_stay_above"
    should_stay_below = "should_stay_below"

    @classmethod
    def parse(cls, value: Any) -> Optional["MeasurableType"]:
        """Return the member for ``value`` or None for unrecognized types."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None


class UnitEnum(str, enum.Enum):
    number = "number"
    percentage = "percentage"
    currency = "currency"


_NUMERIC_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def to_safe_number(value: Any, fallback: float = 0.0) -> float:
    """Coerce ``value`` to a finite float, returning ``fallback`` on failure.

    Strings are parsed from their leading numeric prefix ("12.5kg" -> 12.5),
    None, booleans and anything unparseable give ``fallback``.
    """
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value.strip())
        if not match:
            return fallback
        value = match.group(0)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return number


def _clamp(raw: float) -> float:
    if not math.isfinite(raw):
        return 0.0
    return max(0.0, min(100.0, raw))


# One evaluator per type: (base, current, target) -> (raw percentage, completed, valid)
Evaluator = Callable[[float, float, float], Tuple[float, bool, bool]]


def _increase_to(base: float, current: float, target: float) -> Tuple[float, bool, bool]:
    if target <= base:
        return 0.0, False, False
    return (current - base) / (target - base) * 100, current >= target, True


def _decrease_to(base: float, current: float, target: float) -> Tuple[float, bool, bool]:
    if base <= target:
        return 0.0, False, False
    return (base - current) / (base - target) * 100, current <= target, True


def _at_least(base: float, current: float, target: float) -> Tuple[float, bool, bool]:
    reached = current >= target
    return (100.0 if reached else 0.0), reached, True


def _at_most(base: float, current: float, target: float) -> Tuple[float, bool, bool]:
    reached = current <= target
    return (100.0 if reached else 0.0), reached, True


def _ratio_fallback(base: float, current: float, target: float) -> Tuple[float, bool, bool]:
    if target == 0:
        return 0.0, False, False
    return current / target * 100, False, False


EVALUATORS: Dict[MeasurableType, Evaluator] = {
    MeasurableType.increase_to: _increase_to,
    MeasurableType.decrease_to: _decrease_to,
    MeasurableType.achieve_or_not: _at_least,
    MeasurableType.should_stay_above: _at_least,
    MeasurableType.should_stay_below: _at_most,
}


@dataclass(frozen=True)
class ProgressResult:
    percentage: float
    is_completed: bool
    is_valid: bool


def calculate_progress_result(
    item_type: Any,
    base_value: Any = None,
    current_value: Any = None,
    target_value: Any = None,
) -> ProgressResult:
    """Full calculation result, including completion and config validity."""
    base = to_safe_number(base_value)
    current = to_safe_number(current_value)
    target = to_safe_number(target_value)

    evaluator = EVALUATORS.get(MeasurableType.parse(item_type), _ratio_fallback)
    raw, completed, valid = evaluator(base, current, target)

    percentage = round(_clamp(raw), 2)
    return ProgressResult(percentage=percentage, is_completed=completed, is_valid=valid)


def calculate_progress(
    item_type: Any,
    base_value: Any = None,
    current_value: Any = None,
    target_value: Any = None,
) -> float:
    """Completion percentage in [0, 100]. Never raises."""
    return calculate_progress_result(item_type, base_value, current_value, target_value).percentage


@dataclass(frozen=True)
class StatusThreshold:
    min_percentage: float
    label: str
    inclusive: bool = True

    def matches(self, percentage: float) -> bool:
        if self.inclusive:
            return percentage >= self.min_percentage
        return percentage > self.min_percentage


NOT_STARTED = "not_started"

# Evaluated top-down; first match wins.
STATUS_THRESHOLDS: Tuple[StatusThreshold, ...] = (
    StatusThreshold(100, "completed"),
    StatusThreshold(80, "on_track"),
    StatusThreshold(60, "at_risk"),
    StatusThreshold(0, "behind", inclusive=False),
)


def status_label(
    percentage: float,
    has_updates: bool = False,
    thresholds: Sequence[StatusThreshold] = STATUS_THRESHOLDS,
) -> str:
    """Bucket a percentage into a display status.

    0% is ``not_started`` until the item has recorded an update, after which
    it counts as ``behind``.
    """
    percentage = to_safe_number(percentage)
    for threshold in thresholds:
        if threshold.matches(percentage):
            return threshold.label
    return "behind" if has_updates else NOT_STARTED


@dataclass(frozen=True)
class MeasurableItem:
    type: str
    base_value: Any = None
    current_value: Any = None
    target_value: Any = None
    unit: str = UnitEnum.number.value

    @classmethod
    def from_record(cls, record: Any) -> "MeasurableItem":
        """Build from a mapping (snake_case or camelCase keys) or an object with attributes."""
        def read(*names: str, default: Any = None) -> Any:
            for name in names:
                if isinstance(record, Mapping):
                    if name in record:
                        return record[name]
                elif hasattr(record, name):
                    return getattr(record, name)
            return default

        item_type = read("type", "key_result_type", "keyResultType", default="")
        if isinstance(item_type, enum.Enum):
            item_type = item_type.value
        unit = read("unit", default=None) or UnitEnum.number.value
        if isinstance(unit, enum.Enum):
            unit = unit.value
        return cls(
            type=str(item_type) if item_type is not None else "",
            base_value=read("base_value", "baseValue"),
            current_value=read("current_value", "currentValue"),
            target_value=read("target_value", "targetValue"),
            unit=str(unit),
        )


@dataclass(frozen=True)
class ProgressSummary:
    percentage: float
    status_label: str
    is_completed: bool
    is_valid: bool


def evaluate(record: Any, has_updates: bool = False) -> ProgressSummary:
    """Percentage plus status label for any measurable record."""
    item = record if isinstance(record, MeasurableItem) else MeasurableItem.from_record(record)
    result = calculate_progress_result(item.type, item.base_value, item.current_value, item.target_value)
    return ProgressSummary(
        percentage=result.percentage,
        status_label=status_label(result.percentage, has_updates=has_updates),
        is_completed=result.is_completed,
        is_valid=result.is_valid,
    )


def average_progress(percentages: Sequence[float]) -> float:
    if not percentages:
        return 0.0
    return round(sum(percentages) / len(percentages), 2)


def validate_measurable_config(
    item_type: Any,
    target_value: Any,
    base_value: Any = None,
) -> Tuple[bool, Optional[str]]:
    target = to_safe_number(target_value)
    base = to_safe_number(base_value)
    kind = MeasurableType.parse(item_type)

    if kind is None:
        return False, f"Unknown measurable type: {item_type}"
    if kind == MeasurableType.increase_to and target <= base:
        return False, "Target must be greater than the base value for 'increase_to'"
    if kind == MeasurableType.decrease_to and base <= target:
        return False, "Base value must be greater than the target for 'decrease_to'"
    return True, None


_METHOD_DESCRIPTIONS = {
    MeasurableType.increase_to: "Progress = (Current - Base) / (Target - Base) x 100%",
    MeasurableType.decrease_to: "Progress = (Base - Current) / (Base - Target) x 100%",
    MeasurableType.should_stay_above: "Progress = 100% if Current >= Target, otherwise 0%",
    MeasurableType.should_stay_below: "Progress = 100% if Current <= Target, otherwise 0%",
    MeasurableType.achieve_or_not: "Progress = 100% if achieved, otherwise 0%",
}


def calculation_method_description(item_type: Any) -> str:
    kind = MeasurableType.parse(item_type)
    if kind is None:
        return "Unknown calculation method"
    return _METHOD_DESCRIPTIONS[kind]


def _group_thousands(number: float) -> str:
    # Dot as thousand separator, comma as decimal separator.
    number = round(number, 2)
    if number == 0:
        number = 0.0  # drop the sign of -0.0
    text = f"{number:.2f}".rstrip("0").rstrip(".")
    negative = text.startswith("-")
    if negative:
        text = text[1:]
    integer_part, _, decimal_part = text.partition(".")
    grouped = f"{int(integer_part):,}".replace(",", ".")
    if decimal_part:
        grouped = f"{grouped},{decimal_part}"
    return f"-{grouped}" if negative else grouped


def format_value(value: Any, unit: Optional[str]) -> str:
    """Render a measurable value for display according to its unit."""
    number = to_safe_number(value)
    unit = unit.value if isinstance(unit, enum.Enum) else unit
    if unit == UnitEnum.currency.value:
        return f"Rp {_group_thousands(number)}"
    if unit == UnitEnum.percentage.value:
        return f"{_group_thousands(number)}%"
    return _group_thousands(number)
