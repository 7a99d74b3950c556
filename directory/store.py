"""
directory/store.py -- SQLAlchemy-backed persistence layer for employee records.

Uses SQLAlchemy Core (not ORM) so the dataclass in directory/models.py remains
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Pattern: Repository + Data Mapper. EmployeeStore is the repository and
_row_to_employee the mapper. Route handlers and the service never touch SQL.

Every write is a single statement in its own transaction (engine.begin()),
so concurrent requests never observe a half-applied change.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = EmployeeStore()                               # SQLite default
    store = EmployeeStore("postgresql://user:pw@host/db") # PostgreSQL
    emp = store.create_employee(Employee(name="Bob", company="Acme", city="NYC", phone_number="+1555"))
    store.list_employees()
    store.close()
"""

from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine, event, text
from sqlalchemy.engine import Engine

from directory.models import Employee

_DEFAULT_DB_URL = "sqlite:///./employee_directory.db"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_employees = Table(
    "employees",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("company", String(100), nullable=False),
    Column("city", String(100), nullable=False),
    Column("phone_number", String(20), nullable=False),
)


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class EmployeeStore:
    """Repository for Employee records."""

    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def list_employees(self) -> list[Employee]:
        """Return every employee, most recently created (highest id) first."""
        with self.engine.connect() as conn:
            rows = conn.execute(_employees.select().order_by(_employees.c.id.desc())).fetchall()
        return [_row_to_employee(r) for r in rows]

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        """Look up one employee by id. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_employees.select().where(_employees.c.id == employee_id)).fetchone()
        return _row_to_employee(row) if row is not None else None

    def create_employee(self, employee: Employee) -> Employee:
        """Insert a record and return it with its assigned id."""
        with self.engine.begin() as conn:
            result = conn.execute(
                _employees.insert().values(
                    name=employee.name,
                    company=employee.company,
                    city=employee.city,
                    phone_number=employee.phone_number,
                )
            )
            new_id = result.inserted_primary_key[0]
        return Employee(
            id=new_id,
            name=employee.name,
            company=employee.company,
            city=employee.city,
            phone_number=employee.phone_number,
        )

    def update_employee(self, employee_id: int, employee: Employee) -> Optional[Employee]:
        """Overwrite all four fields of an existing record.

        Returns the updated record, or None if no employee has that id.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _employees.update()
                .where(_employees.c.id == employee_id)
                .values(
                    name=employee.name,
                    company=employee.company,
                    city=employee.city,
                    phone_number=employee.phone_number,
                )
            )
            if result.rowcount == 0:
                return None
        return Employee(
            id=employee_id,
            name=employee.name,
            company=employee.company,
            city=employee.city,
            phone_number=employee.phone_number,
        )

    def delete_employee(self, employee_id: int) -> bool:
        """Remove a record. Returns True if deleted, False if not found."""
        with self.engine.begin() as conn:
            result = conn.execute(_employees.delete().where(_employees.c.id == employee_id))
        return result.rowcount > 0

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_employee(row) -> Employee:
    return Employee(
        id=row.id,
        name=row.name,
        company=row.company,
        city=row.city,
        phone_number=row.phone_number,
    )
