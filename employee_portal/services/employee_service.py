"""
Employee lifecycle: validate first, then mutate through the repository.

Create and update are all-or-nothing. Expected failures surface as
EmployeeValidationError / EmployeeNotFoundError for the API layer to map.
"""

import logging
from typing import Any, List, Mapping

from employee_portal.core.exceptions import (
    DuplicateEmailError,
    EmployeeNotFoundError,
    EmployeeValidationError,
)
from employee_portal.models.employee import Employee
from employee_portal.services.employee_repository import EmployeeRepository
from employee_portal.services.employee_validation import validate_employee_payload

logger = logging.getLogger("employee_portal.employees")

EMAIL_TAKEN_MESSAGE = "The email has already been taken."


class EmployeeService:
    def __init__(self, repository: EmployeeRepository):
        self.repository = repository

    async def list_employees(self) -> List[Employee]:
        return await self.repository.list()

    async def get_employee(self, employee_id: int) -> Employee:
        employee = await self.repository.get(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def create_employee(self, payload: Mapping[str, Any]) -> Employee:
        result = await validate_employee_payload(payload, self.repository)
        if not result.ok:
            raise EmployeeValidationError(result.errors)

        try:
            employee = await self.repository.create(result.value)
        except DuplicateEmailError:
            # Another request inserted the same email between check and write
            raise EmployeeValidationError({"email": [EMAIL_TAKEN_MESSAGE]})

        logger.info(f"Created employee {employee.id}")
        return employee

    async def update_employee(self, employee_id: int, payload: Mapping[str, Any]) -> Employee:
        employee = await self.get_employee(employee_id)

        result = await validate_employee_payload(payload, self.repository, exclude_id=employee.id)
        if not result.ok:
            raise EmployeeValidationError(result.errors)

        try:
            employee = await self.repository.update(employee, result.value)
        except DuplicateEmailError:
            raise EmployeeValidationError({"email": [EMAIL_TAKEN_MESSAGE]})

        logger.info(f"Updated employee {employee.id}")
        return employee

    async def delete_employee(self, employee_id: int) -> None:
        employee = await self.get_employee(employee_id)
        await self.repository.delete(employee)
        logger.info(f"Deleted employee {employee_id}")
