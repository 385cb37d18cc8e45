from sqlalchemy import Column, Integer, String, Float, Text, DateTime, Date, Enum, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from perfdesk.database import Base


class KpiStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    AT_RISK = "at_risk"


KPI_TERMINAL_STATUSES = (KpiStatus.COMPLETED,)


class KPI(Base):
    __tablename__ = "kpis"

    id = Column(Integer, primary_key=True, index=True)
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    assigned_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    kpi_name = Column(String, nullable=False)
    metric = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    unit = Column(String, nullable=True)
    period = Column(String, nullable=True)
    deadline = Column(Date, nullable=True)

    target = Column(Float, nullable=False, default=0.0)
    achieved_value = Column(Float, nullable=False, default=0.0)
    weightage = Column(Float, nullable=False, default=0.0)  # 0-100

    status = Column(
        Enum(KpiStatus, values_callable=lambda e: [m.value for m in e]),
        default=KpiStatus.NOT_STARTED,
        nullable=False,
    )
    score = Column(Float, nullable=False, default=0.0)  # 0-100
    progress = Column(Float, nullable=False, default=0.0)  # percent

    progress_notes = Column(Text, nullable=True)
    qualitative_score = Column(Float, nullable=True)
    supervisor_comments = Column(Text, nullable=True)
    remarks = Column(Text, nullable=True)

    last_updated = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("User", foreign_keys=[assigned_to])
    assignor = relationship("User", foreign_keys=[assigned_by])

    @property
    def owner_id(self) -> int:
        return self.assigned_to
