from fastapi.testclient import TestClient
from sqlmodel import Session, select

from modelshop.domain.enums import AssignmentStatus
from modelshop.models import AuditLog
from modelshop.tests.utils import (
    create_assignment,
    create_employee,
    create_parts,
    create_work_order,
    part_statuses,
)


def setup_part(db: Session, employees: int = 1) -> tuple[int, list[int]]:
    work_order = create_work_order(db)
    create_parts(db, work_order.control_number, ["P1"])
    ids = [create_employee(db, f"Worker{i}").employee_id for i in range(employees)]
    return work_order.control_number, ids


def test_reassign_pending_then_reject_second(client: TestClient, db: Session) -> None:
    cn, (alice,) = setup_part(db)
    task = create_assignment(db, cn, ["P1"], alice)

    r = client.post("/update-job-status", json={"id": task.id, "status": "ongoing"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["status"] == "ongoing"
    assert body["actual_start_date"] is not None

    r = client.post("/update-job-status", json={"id": task.id, "status": "ongoing"})
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Task is already ongoing"}


def test_hold_with_ongoing_sibling_keeps_part_ongoing(
    client: TestClient, db: Session
) -> None:
    cn, (alice, bob) = setup_part(db, employees=2)
    first = create_assignment(db, cn, ["P1"], alice, status=AssignmentStatus.ONGOING)
    create_assignment(db, cn, ["P1"], bob, status=AssignmentStatus.ONGOING)

    r = client.post(
        "/update-job-status",
        json={"id": first.id, "status": "on hold", "reason": "High Priority"},
    )

    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Task put ON HOLD"
    assert body["on_hold_date"] is not None
    assert body["hold_reason"] == "High Priority"
    assert part_statuses(db, cn) == {"P1": "ongoing"}


def test_hold_of_only_assignment_leaves_part_not_started(
    client: TestClient, db: Session
) -> None:
    cn, (alice,) = setup_part(db)
    task = create_assignment(db, cn, ["P1"], alice, status=AssignmentStatus.ONGOING)

    r = client.post(
        "/update-job-status",
        json={"id": task.id, "status": "On Hold", "reason": "High Priority"},
    )

    assert r.status_code == 200
    assert part_statuses(db, cn) == {"P1": "not started"}


def test_complete_only_assignment_completes_part(
    client: TestClient, db: Session
) -> None:
    cn, (alice,) = setup_part(db)
    task = create_assignment(db, cn, ["P1"], alice, status=AssignmentStatus.ONGOING)

    r = client.post("/update-job-status", json={"id": task.id, "status": "completed"})

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "completed"
    assert body["reason"] == "Task completed successfully"
    assert body["actual_end_date"] is not None
    assert "on_hold_date" not in body
    assert part_statuses(db, cn) == {"P1": "completed"}


def test_complete_from_hold_is_rejected_repeatedly(
    client: TestClient, db: Session
) -> None:
    cn, (alice,) = setup_part(db)
    task = create_assignment(
        db, cn, ["P1"], alice, status=AssignmentStatus.ON_HOLD, hold_reason="Paint"
    )

    for _ in range(2):
        r = client.post(
            "/update-job-status", json={"id": task.id, "status": "completed"}
        )
        assert r.status_code == 400
        assert r.json() == {
            "success": False,
            "message": "Cannot complete task. Only ONGOING tasks can be "
            "completed. Current status: ON HOLD",
        }

    db.refresh(task)
    assert task.status == "on hold"
    assert task.actual_end_date is None


def test_hold_requires_reason(client: TestClient, db: Session) -> None:
    cn, (alice,) = setup_part(db)
    task = create_assignment(db, cn, ["P1"], alice, status=AssignmentStatus.ONGOING)

    r = client.post("/update-job-status", json={"id": task.id, "status": "on hold"})

    assert r.status_code == 400
    assert r.json()["message"] == "Hold reason is required"


def test_unknown_status_value(client: TestClient, db: Session) -> None:
    cn, (alice,) = setup_part(db)
    task = create_assignment(db, cn, ["P1"], alice)

    r = client.post("/update-job-status", json={"id": task.id, "status": "approved"})

    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Invalid status"}


def test_job_status_missing_task(client: TestClient) -> None:
    r = client.post("/update-job-status", json={"id": 404, "status": "completed"})

    assert r.status_code == 404
    assert r.json()["success"] is False


def test_accept_task(client: TestClient, db: Session) -> None:
    cn, (alice,) = setup_part(db)
    task = create_assignment(db, cn, ["P1"], alice)

    r = client.post(
        "/update-task-status",
        json={"id": task.id, "status": "ongoing", "employee_id": alice},
    )

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Task accepted and status changed to ONGOING"
    assert body["status"] == "ongoing"
    assert body["actual_start_date"] is not None
    assert part_statuses(db, cn) == {"P1": "ongoing"}


def test_accept_for_other_employee_is_not_found(
    client: TestClient, db: Session
) -> None:
    cn, (alice,) = setup_part(db)
    task = create_assignment(db, cn, ["P1"], alice)

    r = client.post(
        "/update-task-status",
        json={"id": task.id, "status": "ongoing", "employee_id": alice + 100},
    )

    assert r.status_code == 404


def test_accept_with_other_status(client: TestClient, db: Session) -> None:
    cn, (alice,) = setup_part(db)
    task = create_assignment(db, cn, ["P1"], alice)

    r = client.post("/update-task-status", json={"id": task.id, "status": "completed"})

    assert r.status_code == 400
    assert r.json()["message"] == "Invalid status update request"


def test_missing_fields_are_bad_requests(client: TestClient) -> None:
    r = client.post("/update-task-status", json={"status": "ongoing"})

    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert "id" in body["message"]


def test_transition_is_audited_and_recomputes_part(
    client: TestClient, db: Session
) -> None:
    cn, (alice,) = setup_part(db)
    task = create_assignment(db, cn, ["P1"], alice)

    r = client.post("/update-job-status", json={"id": task.id, "status": "ongoing"})

    assert r.status_code == 200
    assert part_statuses(db, cn) == {"P1": "ongoing"}
    audit = db.exec(select(AuditLog)).all()
    assert [entry.event for entry in audit] == ["TASK_STATUS_UPDATED"]
    assert f"Task {task.id}" in audit[0].description
