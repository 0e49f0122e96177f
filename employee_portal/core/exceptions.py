"""
Domain exceptions raised by the service layer and translated to HTTP
responses by the API routers.
"""

from typing import Dict, List


class InvalidCredentialsError(Exception):
    """Raised when an email/password pair does not match a user"""
    pass


class EmployeeNotFoundError(Exception):
    """Raised when no employee exists for the requested id"""

    def __init__(self, employee_id: int):
        super().__init__(f"Employee {employee_id} not found")
        self.employee_id = employee_id


class EmployeeValidationError(Exception):
    """Raised when employee fields fail validation; nothing was written"""

    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__("The given data was invalid.")
        self.errors = errors


class DuplicateEmailError(Exception):
    """Raised by the repository when the store rejects a duplicate employee email"""
    pass
