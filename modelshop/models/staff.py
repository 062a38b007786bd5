"""Employee and trade SQLModels (read-only from this service)."""

from sqlmodel import Field, SQLModel


class Employee(SQLModel, table=True):
    __tablename__ = "employee_master"

    employee_id: int | None = Field(default=None, primary_key=True)
    employee_name: str = Field(max_length=100, index=True)
    email_id: str | None = Field(default=None, max_length=255)
    designation: str | None = Field(default=None, max_length=100)


class Trade(SQLModel, table=True):
    __tablename__ = "trade_master"

    trade_id: int | None = Field(default=None, primary_key=True)
    trade_name: str = Field(max_length=100)


class TradeEmployee(SQLModel, table=True):
    __tablename__ = "trade_employee"

    trade_id: int = Field(foreign_key="trade_master.trade_id", primary_key=True)
    employee_id: int = Field(
        foreign_key="employee_master.employee_id", primary_key=True
    )
