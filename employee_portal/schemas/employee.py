from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_serializer

from employee_portal.models.employee import EmployeeStatus


class EmployeeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    position: str
    salary: Decimal
    status: EmployeeStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("salary")
    def _serialize_salary(self, salary: Decimal) -> str:
        return f"{salary:.2f}"


class EmployeeEnvelope(BaseModel):
    data: EmployeeRead


class EmployeeListEnvelope(BaseModel):
    data: List[EmployeeRead]
