from sqlalchemy import Column, Integer, String, Float, Text, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from perfdesk.database import Base


class AppraisalStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    REVIEWED = "reviewed"
    FINALIZED = "finalized"


APPRAISAL_TERMINAL_STATUSES = (AppraisalStatus.REVIEWED, AppraisalStatus.FINALIZED)


class Appraisal(Base):
    """Annual Performance Appraisal Record (APAR)."""
    __tablename__ = "appraisals"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    period = Column(String, nullable=False)

    achievements = Column(Text, nullable=False)
    challenges = Column(Text, nullable=False)
    goals = Column(Text, nullable=False)
    draft = Column(Text, nullable=True)  # AI-generated, edited by the owner
    self_appraisal = Column(Text, nullable=True)

    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewer_comments = Column(Text, nullable=True)
    reviewer_score = Column(Float, nullable=True)
    final_score = Column(Float, nullable=True)

    status = Column(
        Enum(AppraisalStatus, values_callable=lambda e: [m.value for m in e]),
        default=AppraisalStatus.DRAFT,
        nullable=False,
    )

    last_updated = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employee = relationship("User", foreign_keys=[employee_id])
    reviewer = relationship("User", foreign_keys=[reviewer_id])

    @property
    def owner_id(self) -> int:
        return self.employee_id
