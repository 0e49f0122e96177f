import re
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status, Response

from employee_portal.api.deps import get_current_user, get_employee_service
from employee_portal.api.errors import ValidationErrorBody, validation_error_response
from employee_portal.core.exceptions import EmployeeNotFoundError, EmployeeValidationError
from employee_portal.schemas.employee import (
    EmployeeEnvelope,
    EmployeeListEnvelope,
    EmployeeRead,
)
from employee_portal.services.employee_service import EmployeeService

# Every route here requires a valid bearer token
router = APIRouter(dependencies=[Depends(get_current_user)])

_ERROR_RESPONSES = {
    404: {"description": "Employee not found"},
    422: {"model": ValidationErrorBody},
}


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Employee not found",
    )


def _path_employee_id(employee_id: str) -> int:
    # Parsed after authentication, so /employees/abc without a token is still a 401
    # More than 18 digits cannot be a stored id and would overflow a BIGINT
    if not re.fullmatch(r"[0-9]{1,18}", employee_id):
        raise _not_found()
    return int(employee_id)


@router.get("", response_model=EmployeeListEnvelope)
async def list_employees(
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Retrieve all employees.
    """
    employees = await service.list_employees()
    return EmployeeListEnvelope(data=[EmployeeRead.model_validate(e) for e in employees])


@router.post(
    "",
    response_model=EmployeeEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def create_employee(
    payload: Dict[str, Any] = Body(...),
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Create an employee. Email is trimmed and lowercased before validation.
    """
    try:
        employee = await service.create_employee(payload)
    except EmployeeValidationError as exc:
        return validation_error_response(exc.errors)
    return EmployeeEnvelope(data=EmployeeRead.model_validate(employee))


@router.get("/{employee_id}", response_model=EmployeeEnvelope, responses=_ERROR_RESPONSES)
async def read_employee(
    employee_id: int = Depends(_path_employee_id),
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Get employee by ID.
    """
    try:
        employee = await service.get_employee(employee_id)
    except EmployeeNotFoundError:
        raise _not_found()
    return EmployeeEnvelope(data=EmployeeRead.model_validate(employee))


@router.api_route(
    "/{employee_id}",
    methods=["PUT", "PATCH"],
    response_model=EmployeeEnvelope,
    responses=_ERROR_RESPONSES,
)
async def update_employee(
    employee_id: int = Depends(_path_employee_id),
    payload: Dict[str, Any] = Body(...),
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Replace all editable fields of an employee. PATCH takes the same full record.
    """
    try:
        employee = await service.update_employee(employee_id, payload)
    except EmployeeNotFoundError:
        raise _not_found()
    except EmployeeValidationError as exc:
        return validation_error_response(exc.errors)
    return EmployeeEnvelope(data=EmployeeRead.model_validate(employee))


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_ERROR_RESPONSES,
)
async def delete_employee(
    employee_id: int = Depends(_path_employee_id),
    service: EmployeeService = Depends(get_employee_service),
) -> Response:
    """
    Delete an employee.
    """
    try:
        await service.delete_employee(employee_id)
    except EmployeeNotFoundError:
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
