import enum

from sqlalchemy import Column, Integer, String, Numeric, DateTime
from sqlalchemy.sql import func

from employee_portal.db.base_class import Base


class EmployeeStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Employee(Base):
    __tablename__ = "employees"  # type: ignore[assignment]

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    # Stored trimmed and lowercased
    email = Column(String(255), unique=True, index=True, nullable=False)
    position = Column(String(255), nullable=False)
    # Bounds (0 .. 9,999,999.99) are enforced by validation, not the column
    salary = Column(Numeric(10, 2), nullable=False)
    status = Column(String(16), nullable=False, default=EmployeeStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)
