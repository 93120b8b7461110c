"""Stateless progress endpoints used by update modals before anything is saved."""
from fastapi import APIRouter
from typing import List

from okr_app.core.logging import get_logger
from okr_app.core.progress import (
    MeasurableItem, MeasurableType, STATUS_THRESHOLDS,
    evaluate, format_value, calculation_method_description, validate_measurable_config,
)
from okr_app.core.timeline import calculate_ideal_progress, timeline_status
from okr_app.schemas import MeasurablePreview, PreviewOut, CalculationMethod, StatusThresholdOut

logger = get_logger(__name__)
router = APIRouter()


@router.post("/preview", response_model=PreviewOut)
def preview_progress(payload: MeasurablePreview):
    """Evaluate an unsaved measurable item. Malformed numbers count as 0."""
    item = MeasurableItem(
        type=payload.type,
        base_value=payload.base_value,
        current_value=payload.current_value,
        target_value=payload.target_value,
        unit=payload.unit or "number",
    )
    summary = evaluate(item, has_updates=payload.has_updates)
    _, config_error = validate_measurable_config(item.type, item.target_value, item.base_value)

    timeline = None
    if payload.start_date and payload.end_date:
        ideal = calculate_ideal_progress(payload.start_date, payload.end_date)
        timeline = timeline_status(summary.percentage, ideal)

    logger.debug(f"Preview {item.type}: {summary.percentage}% ({summary.status_label})")
    return PreviewOut(
        percentage=summary.percentage,
        status_label=summary.status_label,
        is_completed=summary.is_completed,
        is_valid=summary.is_valid,
        timeline_status=timeline,
        display_current=format_value(item.current_value, item.unit),
        display_target=format_value(item.target_value, item.unit),
        config_error=config_error,
    )


@router.get("/methods", response_model=List[CalculationMethod])
def list_calculation_methods():
    """Human readable formula for every measurable type."""
    return [
        CalculationMethod(type=kind.value, description=calculation_method_description(kind))
        for kind in MeasurableType
    ]


@router.get("/status-thresholds", response_model=List[StatusThresholdOut])
def list_status_thresholds():
    """The percentage-to-label table, in evaluation order."""
    return [
        StatusThresholdOut(min_percentage=t.min_percentage, label=t.label, inclusive=t.inclusive)
        for t in STATUS_THRESHOLDS
    ]
