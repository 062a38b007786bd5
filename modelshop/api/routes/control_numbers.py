from fastapi import APIRouter

from modelshop.api.deps import PartStatusServiceDep
from modelshop.application.dtos.common import MessageResponse
from modelshop.application.dtos.work_order_dtos import ControlNumberRequest

router = APIRouter(prefix="/api/control-numbers", tags=["control-numbers"])


@router.get(
    "",
    summary="Active control numbers",
    description="Control numbers with at least one part that is not finished.",
    response_model=list[int],
)
def list_active_control_numbers(service: PartStatusServiceDep) -> list[int]:
    return service.active_control_numbers()


@router.put(
    "",
    summary="Finish a control number",
    description="Archive a control number by marking all of its parts FINISHED.",
    response_model=MessageResponse,
    responses={404: {"description": "Control number has no parts"}},
)
def finish_control_number(
    request: ControlNumberRequest, service: PartStatusServiceDep
) -> MessageResponse:
    service.finish_control_number(request.control_number)
    return MessageResponse(
        message=f"Control number {request.control_number} marked as finished"
    )
