"""
Task status service tests.

Transitions against a real (in-memory SQLite) database, including the part
status recomputation that follows them and interleaved writers on one row.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import Engine
from sqlmodel import Session, select

from modelshop.application.services.part_status_service import PartStatusService
from modelshop.application.services.task_status_service import TaskStatusService
from modelshop.domain.enums import AssignmentStatus
from modelshop.domain.exceptions import (
    ConcurrentTransitionError,
    EntityNotFoundError,
    InvalidTransitionError,
    ValidationError,
)
from modelshop.infrastructure.database.repositories import (
    AssignmentRepository,
    DatabaseError,
)
from modelshop.models import AuditLog, TaskAssignment
from modelshop.tests.utils import (
    create_assignment,
    create_employee,
    create_parts,
    create_work_order,
    part_statuses,
)

NOW = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def shop(db: Session):
    work_order = create_work_order(db)
    create_parts(db, work_order.control_number, ["P1", "P2"])
    alice = create_employee(db, "Alice")
    bob = create_employee(db, "Bob")
    return work_order.control_number, alice.employee_id, bob.employee_id


@pytest.fixture
def service(db: Session) -> TaskStatusService:
    return TaskStatusService(db, clock=lambda: NOW)


class TestAccept:
    def test_accept_pending_task(self, db, shop, service):
        cn, alice, _ = shop
        task = create_assignment(db, cn, ["P1"], alice)

        result = service.accept(task.id, "ongoing")

        assert result.plan.target is AssignmentStatus.ONGOING
        db.refresh(task)
        assert task.status == "ongoing"
        assert task.actual_start_date == NOW
        assert part_statuses(db, cn) == {"P1": "ongoing", "P2": "not started"}

    def test_accept_resumes_hold_and_keeps_start(self, db, shop, service):
        cn, alice, _ = shop
        started = datetime(2024, 2, 1, 8, 0, tzinfo=timezone.utc)
        task = create_assignment(
            db,
            cn,
            ["P1"],
            alice,
            status=AssignmentStatus.ON_HOLD,
            actual_start_date=started,
            hold_reason="Waiting for resin",
            on_hold_date=datetime(2024, 2, 2, 8, 0, tzinfo=timezone.utc),
        )

        service.accept(task.id, "Ongoing")

        db.refresh(task)
        assert task.status == "ongoing"
        assert task.actual_start_date == started
        assert task.hold_reason == "Waiting for resin"
        assert task.on_hold_date is None

    def test_accept_requires_ongoing(self, db, shop, service):
        cn, alice, _ = shop
        task = create_assignment(db, cn, ["P1"], alice)

        with pytest.raises(ValidationError) as exc_info:
            service.accept(task.id, "completed")

        assert exc_info.value.message == "Invalid status update request"
        db.refresh(task)
        assert task.status is None

    def test_accept_scoped_to_assignee(self, db, shop, service):
        cn, alice, bob = shop
        task = create_assignment(db, cn, ["P1"], alice)

        with pytest.raises(EntityNotFoundError):
            service.accept(task.id, "ongoing", employee_id=bob)

        service.accept(task.id, "ongoing", employee_id=alice, assigned_by=99)
        db.refresh(task)
        assert task.status == "ongoing"

    def test_accept_twice_is_rejected_without_change(self, db, shop, service):
        cn, alice, _ = shop
        task = create_assignment(db, cn, ["P1"], alice)
        service.accept(task.id, "ongoing")

        for _ in range(2):
            with pytest.raises(InvalidTransitionError) as exc_info:
                service.accept(task.id, "ongoing")
            assert exc_info.value.message == "Task is already ongoing"

        db.refresh(task)
        assert task.status == "ongoing"
        assert task.actual_start_date == NOW

    def test_missing_task(self, service, shop):
        with pytest.raises(EntityNotFoundError):
            service.accept(12345, "ongoing")


class TestChangeStatus:
    def test_hold_then_complete_round(self, db, shop, service):
        cn, alice, _ = shop
        task = create_assignment(
            db, cn, ["P1"], alice, status=AssignmentStatus.ONGOING
        )

        service.change_status(task.id, "on hold", "Waiting for decals")
        db.refresh(task)
        assert task.status == "on hold"
        assert task.hold_reason == "Waiting for decals"
        assert task.on_hold_date == NOW

        service.change_status(task.id, "ongoing")
        service.change_status(task.id, "completed")
        db.refresh(task)
        assert task.status == "completed"
        assert task.reason == "Task completed successfully"
        assert task.actual_end_date == NOW
        assert task.on_hold_date is None

    def test_hold_without_reason_does_not_mutate(self, db, shop, service):
        cn, alice, _ = shop
        task = create_assignment(
            db, cn, ["P1"], alice, status=AssignmentStatus.ONGOING
        )

        with pytest.raises(ValidationError):
            service.change_status(task.id, "on hold", "")

        db.refresh(task)
        assert task.status == "ongoing"
        assert task.on_hold_date is None
        assert task.hold_reason is None

    def test_complete_pending_is_rejected(self, db, shop, service):
        cn, alice, _ = shop
        task = create_assignment(db, cn, ["P1"], alice)

        with pytest.raises(InvalidTransitionError):
            service.change_status(task.id, "completed")

        db.refresh(task)
        assert task.status is None
        assert task.actual_end_date is None

    def test_unknown_status(self, db, shop, service):
        cn, alice, _ = shop
        task = create_assignment(db, cn, ["P1"], alice)

        with pytest.raises(ValidationError) as exc_info:
            service.change_status(task.id, "approved")

        assert exc_info.value.message == "Invalid status"

    def test_transition_is_audited(self, db, shop, service):
        cn, alice, _ = shop
        task = create_assignment(db, cn, ["P1"], alice)

        service.accept(task.id, "ongoing")

        events = db.exec(select(AuditLog)).all()
        assert [e.event for e in events] == ["TASK_STATUS_UPDATED"]
        assert "PENDING to ONGOING" in events[0].description


class TestPartStatusRecompute:
    def test_all_completed_then_partial(self, db, shop, service):
        cn, alice, bob = shop
        first = create_assignment(
            db, cn, ["P1", "P2"], alice, status=AssignmentStatus.ONGOING
        )
        second = create_assignment(
            db, cn, ["P1"], bob, status=AssignmentStatus.ONGOING
        )

        service.change_status(first.id, "completed")
        assert part_statuses(db, cn) == {"P1": "ongoing", "P2": "completed"}

        service.change_status(second.id, "on hold", "Broken mould")
        assert part_statuses(db, cn) == {
            "P1": "partially completed",
            "P2": "completed",
        }

        service.accept(second.id, "ongoing")
        service.change_status(second.id, "completed")
        assert part_statuses(db, cn) == {"P1": "completed", "P2": "completed"}

    def test_recompute_is_idempotent(self, db, shop):
        cn, alice, _ = shop
        create_assignment(db, cn, ["P1"], alice, status=AssignmentStatus.COMPLETED)
        parts = PartStatusService(db)

        first = parts.recompute(cn)
        second = parts.recompute(cn)

        assert first == {(cn, "P1"): "completed"}
        assert second == {}

    def test_finished_parts_are_never_recomputed(self, db, shop, service):
        cn, alice, _ = shop
        task = create_assignment(db, cn, ["P1"], alice)
        PartStatusService(db).finish_control_number(cn)

        service.accept(task.id, "ongoing")

        assert part_statuses(db, cn) == {"P1": "finished", "P2": "finished"}

    def test_recompute_failure_keeps_transition(self, db, shop, monkeypatch):
        cn, alice, _ = shop
        task = create_assignment(db, cn, ["P1"], alice)

        def fail(self, control_number=None):
            raise DatabaseError("disk full")

        monkeypatch.setattr(PartStatusService, "recompute", fail)
        TaskStatusService(db, clock=lambda: NOW).accept(task.id, "ongoing")

        db.refresh(task)
        assert task.status == "ongoing"
        assert part_statuses(db, cn)["P1"] == "not started"

    def test_finish_unknown_control_number(self, db, shop):
        with pytest.raises(EntityNotFoundError):
            PartStatusService(db).finish_control_number(999)


class TestConcurrentWriters:
    """Two sessions read the same row before either writes."""

    def test_conditional_update_requires_expected_status(self, db, shop):
        cn, alice, _ = shop
        task = create_assignment(db, cn, ["P1"], alice)
        repo = AssignmentRepository(db)

        assert repo.apply_conditional_update(task.id, "ongoing", {"status": "x"}) == 0
        assert repo.apply_conditional_update(task.id, None, {"status": "ongoing"}) == 1
        db.commit()

    def test_stale_hold_loses_to_completion(self, engine: Engine, db, shop):
        cn, alice, _ = shop
        task = create_assignment(
            db, cn, ["P1"], alice, status=AssignmentStatus.ONGOING
        )

        with Session(engine) as other:
            stale = other.get(TaskAssignment, task.id)
            assert stale.status == "ongoing"

            TaskStatusService(db, clock=lambda: NOW).change_status(
                task.id, "completed"
            )

            with pytest.raises(ConcurrentTransitionError):
                TaskStatusService(other, clock=lambda: NOW).change_status(
                    task.id, "on hold", "Needs sanding"
                )

        db.refresh(task)
        assert task.status == "completed"
        assert task.hold_reason is None
        assert task.on_hold_date is None

    def test_concurrent_accepts_only_one_wins(self, engine: Engine, db, shop):
        cn, alice, _ = shop
        task = create_assignment(db, cn, ["P1"], alice)

        with Session(engine) as other:
            other.get(TaskAssignment, task.id)

            TaskStatusService(db, clock=lambda: NOW).accept(task.id, "ongoing")
            with pytest.raises(ConcurrentTransitionError):
                TaskStatusService(other, clock=lambda: NOW).accept(
                    task.id, "ongoing"
                )

        db.refresh(task)
        assert task.status == "ongoing"
        assert task.actual_start_date == NOW
