"""
Employee persistence.

EmployeeRepository is the capability set the service layer relies on; the
SQLAlchemy implementation below is the only storage backend. Validation never
lives here: callers hand over already-validated values.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_portal.core.exceptions import DuplicateEmailError
from employee_portal.models.employee import Employee

logger = logging.getLogger("employee_portal.repository")


class EmployeeRepository:
    """Base class for employee storage backends."""

    async def list(self) -> List[Employee]:
        """Return every employee in storage order."""
        raise NotImplementedError

    async def get(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    async def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """True if another employee (other than exclude_id) uses this email."""
        raise NotImplementedError

    async def create(self, fields: Dict[str, Any]) -> Employee:
        """Persist a new employee. Raises DuplicateEmailError on a unique violation."""
        raise NotImplementedError

    async def update(self, employee: Employee, fields: Dict[str, Any]) -> Employee:
        """Overwrite the editable fields. Raises DuplicateEmailError on a unique violation."""
        raise NotImplementedError

    async def delete(self, employee: Employee) -> None:
        raise NotImplementedError


def _is_email_unique_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "unique" in message and "email" in message


class SQLAlchemyEmployeeRepository(EmployeeRepository):
    """Employee storage on an AsyncSession. Each mutation commits on its own."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self) -> List[Employee]:
        result = await self.db.execute(select(Employee).order_by(Employee.id))
        return list(result.scalars().all())

    async def get(self, employee_id: int) -> Optional[Employee]:
        return await self.db.get(Employee, employee_id)

    async def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        query = select(Employee.id).where(Employee.email == email)
        if exclude_id is not None:
            query = query.where(Employee.id != exclude_id)
        result = await self.db.execute(select(exists(query)))
        return bool(result.scalar())

    async def create(self, fields: Dict[str, Any]) -> Employee:
        employee = Employee(**fields)
        self.db.add(employee)
        await self._commit()
        await self.db.refresh(employee)
        return employee

    async def update(self, employee: Employee, fields: Dict[str, Any]) -> Employee:
        for key, value in fields.items():
            setattr(employee, key, value)
        await self._commit()
        await self.db.refresh(employee)
        return employee

    async def delete(self, employee: Employee) -> None:
        await self.db.delete(employee)
        await self.db.commit()

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            if _is_email_unique_violation(exc):
                raise DuplicateEmailError(str(exc.orig)) from exc
            raise
