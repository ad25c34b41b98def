"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from app.adapters.persistence.database import Base


class AuthorityModel(Base):
    __tablename__ = "authorities"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    pincodes: Mapped[list[str]] = mapped_column(ARRAY(String(10)), nullable=False, default=list)
    # [[lat, lon], ...]; SQL NULL when the authority has no boundary
    polygon: Mapped[list | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    center_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    center_lon: Mapped[float | None] = mapped_column(Float, nullable=True)
    jurisdiction_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    endpoint_tokens: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list)

    __table_args__ = (
        Index("idx_authorities_pincodes", "pincodes", postgresql_using="gin"),
        Index("idx_authorities_jurisdiction", "jurisdiction_code"),
    )


class IssueModel(Base):
    __tablename__ = "issues"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    pincode: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    assigned_to: Mapped[str | None] = mapped_column(String(100), nullable=True)
    assigned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    assignment_method: Mapped[str | None] = mapped_column(String(30), nullable=True)
    assignment_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    reassigned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reassigned_by: Mapped[str | None] = mapped_column(String(200), nullable=True)

    __table_args__ = (
        Index("idx_issues_assigned_to", "assigned_to"),
        Index("idx_issues_method", "assignment_method"),
    )
    __mapper_args__ = {"eager_defaults": True}


class AssignmentLogModel(Base):
    __tablename__ = "assignment_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    issue_id: Mapped[str] = mapped_column(String(64), nullable=False)
    assigned_to: Mapped[str] = mapped_column(String(100), nullable=False)
    method: Mapped[str] = mapped_column(String(30), nullable=False)
    inputs: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (Index("idx_assignment_logs_issue", "issue_id"),)
    __mapper_args__ = {"eager_defaults": True}
