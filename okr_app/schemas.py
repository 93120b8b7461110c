from pydantic import BaseModel, Field
from typing import List, Optional, Literal, Union
from datetime import date, datetime

MeasurableTypeName = Literal[
    "increase_to", "decrease_to", "achieve_or_not", "should_stay_above", "should_stay_below"
]
Unit = Literal["number", "percentage", "currency"]
ObjectiveStatus = Literal["not_started", "in_progress", "paused", "canceled"]
InitiativeStatus = Literal["draft", "in_progress", "completed", "canceled"]

# Raw numeric input as it arrives from forms: number, numeric string or null
RawNumber = Optional[Union[float, str]]


class ProgressOut(BaseModel):
    percentage: float
    status_label: str
    is_completed: bool = False
    is_valid: bool = True
    timeline_status: Optional[str] = None


# Cycles

class CycleCreate(BaseModel):
    name: str
    start_date: date
    end_date: date


class CycleOut(CycleCreate):
    id: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class CycleStatusChange(BaseModel):
    id: str
    old_status: str
    new_status: str
    reason: str


# Key results

class KRCreate(BaseModel):
    title: str
    description: Optional[str] = None
    key_result_type: MeasurableTypeName = "increase_to"
    base_value: Optional[float] = Field(None, allow_inf_nan=False)
    current_value: Optional[float] = Field(None, allow_inf_nan=False)
    target_value: float = Field(..., allow_inf_nan=False)
    unit: Unit = "number"


class KRUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    key_result_type: Optional[MeasurableTypeName] = None
    base_value: Optional[float] = Field(None, allow_inf_nan=False)
    target_value: Optional[float] = Field(None, allow_inf_nan=False)
    unit: Optional[Unit] = None


class KROut(BaseModel):
    id: str
    objective_id: str
    title: str
    description: Optional[str] = None
    key_result_type: str
    base_value: Optional[float] = None
    current_value: Optional[float] = None
    target_value: float
    unit: str
    display_current: str
    display_target: str
    calculation_method: str
    progress: ProgressOut
    created_at: datetime
    updated_at: datetime


class CheckInCreate(BaseModel):
    value: float = Field(..., allow_inf_nan=False)
    notes: Optional[str] = None


class CheckInOut(BaseModel):
    id: str
    key_result_id: str
    value: float
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CheckInResult(BaseModel):
    check_in: CheckInOut
    key_result: KROut


# Objectives

class ObjectiveBase(BaseModel):
    title: str
    description: Optional[str] = None
    owner: Optional[str] = None
    cycle_id: Optional[str] = None
    parent_id: Optional[str] = None


class ObjectiveCreate(ObjectiveBase):
    pass


class ObjectiveUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    owner: Optional[str] = None
    status: Optional[ObjectiveStatus] = None
    cycle_id: Optional[str] = None
    parent_id: Optional[str] = None


class ObjectiveOut(ObjectiveBase):
    id: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class ObjectiveDetail(ObjectiveOut):
    overall_progress: float = 0.0
    objective_status: str = "not_started"
    time_progress: float = 0.0
    key_results: List[KROut] = []


class KRNode(KROut):
    initiatives: List['InitiativeSummary'] = []


class ObjectiveNode(ObjectiveOut):
    overall_progress: float = 0.0
    objective_status: str = "not_started"
    key_results: List[KRNode] = []
    children: List['ObjectiveNode'] = []


# Initiatives and success metrics

class InitiativeCreate(BaseModel):
    title: str
    description: Optional[str] = None


class InitiativeUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[InitiativeStatus] = None


class InitiativeSummary(BaseModel):
    id: str
    title: str
    status: str
    score: float = 0.0
    status_label: str = "no_metrics"


class MetricCreate(BaseModel):
    name: str
    type: MeasurableTypeName = "increase_to"
    base_value: Optional[float] = Field(None, allow_inf_nan=False)
    current_value: Optional[float] = Field(None, allow_inf_nan=False)
    target_value: float = Field(..., allow_inf_nan=False)
    unit: Unit = "number"


class MetricUpdateCreate(BaseModel):
    value: float = Field(..., allow_inf_nan=False)
    notes: Optional[str] = None


class MetricUpdateOut(BaseModel):
    id: str
    metric_id: str
    value: float
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class MetricOut(BaseModel):
    id: str
    initiative_id: str
    name: str
    type: str
    base_value: Optional[float] = None
    current_value: Optional[float] = None
    target_value: float
    unit: str
    display_current: str
    display_target: str
    progress: ProgressOut
    updates: List[MetricUpdateOut] = []
    created_at: datetime


class MetricsDashboard(BaseModel):
    initiative_id: str
    total_metrics: int
    score: float
    status_label: str
    metrics: List[MetricOut] = []


class InitiativeOut(BaseModel):
    id: str
    key_result_id: str
    title: str
    description: Optional[str] = None
    status: str
    created_at: datetime
    dashboard: MetricsDashboard


# Progress preview

class MeasurablePreview(BaseModel):
    type: str
    base_value: RawNumber = None
    current_value: RawNumber = None
    target_value: RawNumber = None
    unit: Optional[str] = "number"
    has_updates: bool = False
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class PreviewOut(ProgressOut):
    display_current: str
    display_target: str
    config_error: Optional[str] = None


class CalculationMethod(BaseModel):
    type: str
    description: str


class StatusThresholdOut(BaseModel):
    min_percentage: float
    label: str
    inclusive: bool = Field(True, description="Whether min_percentage itself matches")


KRNode.model_rebuild()
ObjectiveNode.model_rebuild()
