"""
Work order API routes.

Registering work orders and their parts. Control numbers are generated by
the database when a work order is inserted.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile, status

from modelshop.api.deps import FileStorageDep, WorkOrderServiceDep
from modelshop.application.dtos.work_order_dtos import (
    AddPartsRequest,
    AddPartsResponse,
    WorkOrderCreate,
    WorkOrderCreatedResponse,
)
from modelshop.domain.exceptions import DomainError

router = APIRouter(tags=["work-orders"])


@router.post(
    "/api/work-order",
    summary="Create work order",
    description="Register a work order, optionally with its document.",
    response_model=WorkOrderCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Missing or invalid work order fields"}},
)
def create_work_order(
    work_order_number: Annotated[str, Form(min_length=1, max_length=50)],
    project_code: Annotated[str, Form(min_length=1, max_length=50)],
    priority: Annotated[int, Form(ge=0)],
    group_section: Annotated[str, Form(min_length=1, max_length=100)],
    work_order_date: Annotated[date, Form()],
    received_date: Annotated[date, Form()],
    desired_completion_date: Annotated[date, Form()],
    product_description: Annotated[str, Form(min_length=1)],
    service: WorkOrderServiceDep,
    storage: FileStorageDep,
    document: Annotated[UploadFile | None, File()] = None,
) -> WorkOrderCreatedResponse:
    data = WorkOrderCreate(
        work_order_number=work_order_number,
        project_code=project_code,
        priority=priority,
        group_section=group_section,
        work_order_date=work_order_date,
        received_date=received_date,
        desired_completion_date=desired_completion_date,
        product_description=product_description,
    )
    document_path = None
    if document is not None and document.filename:
        document_path = storage.save(document.file, document.filename)

    try:
        work_order = service.create_work_order(data, document_path)
    except DomainError:
        if document_path is not None:
            storage.delete(document_path)
        raise
    return WorkOrderCreatedResponse(
        message="Work order created successfully",
        control_number=work_order.control_number,
        document_path=document_path,
    )


@router.get(
    "/api/work-orders/control-numbers",
    summary="All control numbers",
    response_model=list[int],
)
def list_control_numbers(service: WorkOrderServiceDep) -> list[int]:
    return service.control_numbers()


@router.post(
    "/api/part",
    summary="Add parts",
    description="Add parts to a work order in one transaction.",
    response_model=AddPartsResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Unknown control number or invalid part"}},
)
def add_parts(
    request: AddPartsRequest, service: WorkOrderServiceDep
) -> AddPartsResponse:
    parts = service.add_parts(request.control_number, request.parts)
    return AddPartsResponse(
        message="Parts added successfully",
        control_number=request.control_number,
        part_numbers=[part.part_number for part in parts],
    )


@router.get(
    "/parts/{control_number}",
    summary="Part numbers of a control number",
    response_model=list[str],
    responses={404: {"description": "No parts for the control number"}},
)
def list_part_numbers(control_number: int, service: WorkOrderServiceDep) -> list[str]:
    return service.part_numbers(control_number)
