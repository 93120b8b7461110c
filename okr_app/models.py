# okr_app/models.py
from sqlalchemy import Column, String, Float, ForeignKey, Text, Date, DateTime, Enum, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from .db import Base
from .core.progress import MeasurableType, UnitEnum


class CycleStatusEnum(str, enum.Enum):
    planning = "planning"
    active = "active"
    completed = "completed"


class ObjectiveStatusEnum(str, enum.Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    paused = "paused"
    canceled = "canceled"


class InitiativeStatusEnum(str, enum.Enum):
    draft = "draft"
    in_progress = "in_progress"
    completed = "completed"
    canceled = "canceled"


class Cycle(Base):
    __tablename__ = "cycles"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(Enum(CycleStatusEnum), nullable=False, default=CycleStatusEnum.planning)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    objectives = relationship("Objective", back_populates="cycle")


class Objective(Base):
    __tablename__ = "objectives"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    owner = Column(String, nullable=True)

    # Manual status; paused/canceled override the derived status
    status = Column(Enum(ObjectiveStatusEnum), nullable=False, default=ObjectiveStatusEnum.not_started)

    cycle_id = Column(String, ForeignKey("cycles.id", ondelete="SET NULL"), nullable=True, index=True)
    parent_id = Column(String, ForeignKey("objectives.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    cycle = relationship("Cycle", back_populates="objectives")
    key_results = relationship(
        "KeyResult", back_populates="objective", cascade="all, delete-orphan", order_by="KeyResult.created_at"
    )

    parent = relationship("Objective", remote_side=[id], back_populates="children")
    children = relationship("Objective", back_populates="parent")


class KeyResult(Base):
    __tablename__ = "key_results"

    id = Column(String, primary_key=True)
    objective_id = Column(String, ForeignKey("objectives.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)

    key_result_type = Column(Enum(MeasurableType), nullable=False, default=MeasurableType.increase_to)
    base_value = Column(Float, nullable=True)
    current_value = Column(Float, nullable=True, default=0.0)
    target_value = Column(Float, nullable=False)
    unit = Column(Enum(UnitEnum), nullable=False, default=UnitEnum.number)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    objective = relationship("Objective", back_populates="key_results")
    check_ins = relationship(
        "CheckIn", back_populates="key_result", cascade="all, delete-orphan", order_by="CheckIn.created_at"
    )
    initiatives = relationship("Initiative", back_populates="key_result", cascade="all, delete-orphan")


class CheckIn(Base):
    __tablename__ = "check_ins"

    id = Column(String, primary_key=True)
    key_result_id = Column(String, ForeignKey("key_results.id", ondelete="CASCADE"), nullable=False)
    value = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    key_result = relationship("KeyResult", back_populates="check_ins")

    __table_args__ = (
        Index("ix_check_ins_kr_created", "key_result_id", "created_at"),
    )


class Initiative(Base):
    __tablename__ = "initiatives"

    id = Column(String, primary_key=True)
    key_result_id = Column(String, ForeignKey("key_results.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(Enum(InitiativeStatusEnum), nullable=False, default=InitiativeStatusEnum.draft)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    key_result = relationship("KeyResult", back_populates="initiatives")
    success_metrics = relationship(
        "SuccessMetric", back_populates="initiative", cascade="all, delete-orphan", order_by="SuccessMetric.created_at"
    )


class SuccessMetric(Base):
    __tablename__ = "success_metrics"

    id = Column(String, primary_key=True)
    initiative_id = Column(String, ForeignKey("initiatives.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)

    type = Column(Enum(MeasurableType), nullable=False, default=MeasurableType.increase_to)
    base_value = Column(Float, nullable=True)
    current_value = Column(Float, nullable=True, default=0.0)
    target_value = Column(Float, nullable=False)
    unit = Column(Enum(UnitEnum), nullable=False, default=UnitEnum.number)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    initiative = relationship("Initiative", back_populates="success_metrics")
    updates = relationship(
        "SuccessMetricUpdate", back_populates="metric", cascade="all, delete-orphan",
        order_by="SuccessMetricUpdate.created_at"
    )


class SuccessMetricUpdate(Base):
    __tablename__ = "success_metric_updates"

    id = Column(String, primary_key=True)
    metric_id = Column(String, ForeignKey("success_metrics.id", ondelete="CASCADE"), nullable=False, index=True)
    value = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    metric = relationship("SuccessMetric", back_populates="updates")
