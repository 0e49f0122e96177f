from fastapi import APIRouter

from employee_portal.api.v1 import auth, employees

api_router = APIRouter()
# /login stays public; /logout and /user declare their own auth dependency
api_router.include_router(auth.router, tags=["authentication"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
