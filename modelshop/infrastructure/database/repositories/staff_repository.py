"""Employee and trade lookups."""

from collections.abc import Iterable

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select

from modelshop.models import Employee, Trade, TradeEmployee

from .base import BaseRepository, DatabaseError


class EmployeeRepository(BaseRepository[Employee]):
    entity_class = Employee
    entity_name = "Employee"
    id_field = "employee_id"

    def resolve_names(self, names: Iterable[str]) -> dict[str, list[int]]:
        """Map each trimmed employee name to the ids registered under it."""
        names = {name.strip() for name in names if name and name.strip()}
        if not names:
            return {}
        trimmed = func.trim(Employee.employee_name)
        statement = (
            select(Employee.employee_id, trimmed)
            .where(trimmed.in_(sorted(names)))
            .order_by(col(Employee.employee_id))
        )
        try:
            rows = self.session.exec(statement).all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during resolve_names: {str(e)}") from e

        resolved: dict[str, list[int]] = {}
        for employee_id, name in rows:
            resolved.setdefault(name, []).append(employee_id)
        return resolved

    def list_by_trade(self, trade_id: int) -> list[Employee]:
        statement = (
            select(Employee)
            .join(
                TradeEmployee,
                col(TradeEmployee.employee_id) == col(Employee.employee_id),
            )
            .where(TradeEmployee.trade_id == trade_id)
            .order_by(col(Employee.employee_id))
        )
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during list_by_trade: {str(e)}") from e


class TradeRepository(BaseRepository[Trade]):
    entity_class = Trade
    entity_name = "Trade"
    id_field = "trade_id"
