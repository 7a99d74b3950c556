"""
directory/service.py -- Employee CRUD operations.

Functions over an EmployeeStore. Callers (api/routes/employees.py) reach them
only after resolve_identity() has accepted the request; the identity is not
otherwise consulted because employees have no owner.

Each function validates its input, calls exactly one store write (or read),
and translates outcomes into core.errors:
  ValidationError -- a required field missing or blank (create and update)
  NotFound        -- no employee with the given id (get, update, delete)
  InternalError   -- any SQLAlchemyError; the driver message is logged here
                     and never sent to the client
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from core.errors import InternalError, NotFound, ValidationError
from directory.models import EMPLOYEE_FIELDS, Employee
from directory.store import EmployeeStore

logger = logging.getLogger("empdir.directory")

_NOT_FOUND = "Employee not found"

# Ids are signed 64-bit integers in every supported database.
_MAX_ID = 2**63 - 1


def _require_storable_id(employee_id: int) -> None:
    """No record can carry an id outside the column range, so it is simply absent."""
    if employee_id < 1 or employee_id > _MAX_ID:
        raise NotFound(_NOT_FOUND)


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Employee store failure while trying to %s", action)
        raise InternalError(f"Failed to {action}") from exc


def validate_fields(fields: Mapping[str, Any]) -> Employee:
    """Build an Employee from fields, or raise ValidationError.

    All four fields must be present and non-blank strings. Surrounding
    whitespace is stripped.
    """
    values: dict[str, str] = {}
    for name in EMPLOYEE_FIELDS:
        value = fields.get(name)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("All fields are required")
        values[name] = value.strip()
    return Employee(**values)


def list_employees(store: EmployeeStore) -> list[Employee]:
    with _store_errors("fetch employees"):
        return store.list_employees()


def get_employee(store: EmployeeStore, employee_id: int) -> Employee:
    _require_storable_id(employee_id)
    with _store_errors("fetch employee"):
        employee = store.get_employee(employee_id)
    if employee is None:
        raise NotFound(_NOT_FOUND)
    return employee


def create_employee(store: EmployeeStore, fields: Mapping[str, Any]) -> Employee:
    employee = validate_fields(fields)
    with _store_errors("create employee"):
        created = store.create_employee(employee)
    logger.info("Created employee %d", created.id)
    return created


def update_employee(store: EmployeeStore, employee_id: int, fields: Mapping[str, Any]) -> Employee:
    """Overwrite all four fields of employee_id. There is no partial update."""
    employee = validate_fields(fields)
    _require_storable_id(employee_id)
    with _store_errors("update employee"):
        updated = store.update_employee(employee_id, employee)
    if updated is None:
        raise NotFound(_NOT_FOUND)
    logger.info("Updated employee %d", employee_id)
    return updated


def delete_employee(store: EmployeeStore, employee_id: int) -> dict[str, str]:
    _require_storable_id(employee_id)
    with _store_errors("delete employee"):
        deleted = store.delete_employee(employee_id)
    if not deleted:
        raise NotFound(_NOT_FOUND)
    logger.info("Deleted employee %d", employee_id)
    return {"message": "Employee deleted successfully"}
