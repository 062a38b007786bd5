"""Employee and trade lookups used when building assignment batches."""

from fastapi import APIRouter

from modelshop.api.deps import EmployeeRepositoryDep, TradeRepositoryDep
from modelshop.application.dtos.staff_dtos import EmployeeRead, TradeRead
from modelshop.domain.exceptions import EntityNotFoundError

router = APIRouter(prefix="/api", tags=["staff"])


@router.get("/employees", summary="List employees", response_model=list[EmployeeRead])
def list_employees(employees: EmployeeRepositoryDep) -> list[EmployeeRead]:
    return [EmployeeRead.model_validate(e) for e in employees.get_all()]


@router.get("/trades", summary="List trades", response_model=list[TradeRead])
def list_trades(trades: TradeRepositoryDep) -> list[TradeRead]:
    return [TradeRead.model_validate(t) for t in trades.get_all()]


@router.get(
    "/employees/{trade_id}",
    summary="Employees of a trade",
    response_model=list[EmployeeRead],
    responses={404: {"description": "No employees found for the trade"}},
)
def list_employees_by_trade(
    trade_id: int, employees: EmployeeRepositoryDep
) -> list[EmployeeRead]:
    members = employees.list_by_trade(trade_id)
    if not members:
        raise EntityNotFoundError("Employees for trade", trade_id)
    return [EmployeeRead.model_validate(e) for e in members]
