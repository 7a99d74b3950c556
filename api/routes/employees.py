"""
api/routes/employees.py -- Employee CRUD routes.

Routes:
  GET    /employees       -- list all, newest first
  POST   /employees       -- create; 201
  GET    /employees/{id}  -- one record
  PUT    /employees/{id}  -- overwrite all four fields
  DELETE /employees/{id}  -- remove; 200 {message}

Authorization is flat: any authenticated caller may act on any record.
"""

from fastapi import APIRouter, Depends, Request

from api.models import EmployeeFields, EmployeeResponse, MessageResponse
from auth.dependencies import resolve_identity
from directory import service
from directory.store import EmployeeStore

# All employee routes require authentication.
# Router-level dependency applies to every route registered on this router,
# so individual handlers don't each need to repeat Depends(resolve_identity).
router = APIRouter(dependencies=[Depends(resolve_identity)])


def _store(request: Request) -> EmployeeStore:
    return request.app.state.employee_store


@router.get("/employees", response_model=list[EmployeeResponse])
def list_employees(request: Request) -> list[EmployeeResponse]:
    return [EmployeeResponse.from_employee(e) for e in service.list_employees(_store(request))]


@router.post("/employees", response_model=EmployeeResponse, status_code=201)
def create_employee(request: Request, body: EmployeeFields) -> EmployeeResponse:
    created = service.create_employee(_store(request), body.model_dump())
    return EmployeeResponse.from_employee(created)


@router.get("/employees/{employee_id}", response_model=EmployeeResponse)
def get_employee(request: Request, employee_id: int) -> EmployeeResponse:
    return EmployeeResponse.from_employee(service.get_employee(_store(request), employee_id))


@router.put("/employees/{employee_id}", response_model=EmployeeResponse)
def update_employee(request: Request, employee_id: int, body: EmployeeFields) -> EmployeeResponse:
    """Replace name, company, city and phone_number. Omitted fields are a 400, not a no-op."""
    updated = service.update_employee(_store(request), employee_id, body.model_dump())
    return EmployeeResponse.from_employee(updated)


@router.delete("/employees/{employee_id}", response_model=MessageResponse)
def delete_employee(request: Request, employee_id: int) -> MessageResponse:
    return MessageResponse(**service.delete_employee(_store(request), employee_id))
