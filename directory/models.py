"""
directory/models.py -- Domain dataclasses for the employee directory.

Pure data containers with zero logic. Validation lives in
directory/service.py; persistence in directory/store.py.
"""

from dataclasses import asdict, dataclass
from typing import Optional

EMPLOYEE_FIELDS = ("name", "company", "city", "phone_number")


@dataclass
class Employee:
    """One directory entry.

    Every field is a required non-empty string. Employees are not owned by
    any user: any authenticated caller may read or change any record.

    id is None before the record is written to the database.
    """

    name: str
    company: str
    city: str
    phone_number: str
    id: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)
