"""Student profile model."""

from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text

from ..database.base import Base


class StudentProfile(Base):
    __tablename__ = "student_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    university_id = Column(String(100), nullable=False)
    department = Column(String(200), nullable=False, default="")
    gpa = Column(Numeric(3, 2), nullable=False)
    skills = Column(Text, nullable=False, default="")
    resume_url = Column(String(1000), nullable=False, default="")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    __table_args__ = (
        CheckConstraint("gpa >= 0 AND gpa <= 4", name="ck_student_profiles_gpa"),
    )
