from pathlib import Path

from fastapi.testclient import TestClient
from sqlmodel import Session, select

from modelshop.infrastructure.database.repositories import (
    DatabaseError,
    WorkOrderRepository,
)
from modelshop.models import AuditLog, WorkOrder
from modelshop.tests.utils import create_work_order

WORK_ORDER_FORM = {
    "work_order_number": "WO-100",
    "project_code": "PRJ-7",
    "priority": "3",
    "group_section": "Assembly",
    "work_order_date": "2024-01-10",
    "received_date": "2024-01-11",
    "desired_completion_date": "2024-02-01",
    "product_description": "Harbour diorama",
}


class TestCreateWorkOrder:
    def test_control_numbers_are_generated(
        self, client: TestClient, db: Session
    ) -> None:
        first = client.post("/api/work-order", data=WORK_ORDER_FORM)
        second = client.post(
            "/api/work-order", data={**WORK_ORDER_FORM, "work_order_number": "WO-101"}
        )

        assert first.status_code == 201
        assert second.status_code == 201
        first_cn = first.json()["control_number"]
        second_cn = second.json()["control_number"]
        assert second_cn > first_cn
        assert first.json()["document_path"] is None

        work_order = db.get(WorkOrder, first_cn)
        assert work_order.work_order_number == "WO-100"
        assert work_order.priority == 3
        events = [e.event for e in db.exec(select(AuditLog)).all()]
        assert events.count("Work Order Created") == 2

    def test_with_document(
        self, client: TestClient, db: Session, upload_dir: Path
    ) -> None:
        r = client.post(
            "/api/work-order",
            data=WORK_ORDER_FORM,
            files={"document": ("drawing.PDF", b"drawing", "application/pdf")},
        )

        assert r.status_code == 201
        path = r.json()["document_path"]
        assert path.startswith("/uploads/")
        assert path.endswith(".pdf")
        assert (upload_dir / path.removeprefix("/uploads/")).exists()

    def test_failed_insert_discards_document(
        self, client: TestClient, db: Session, upload_dir: Path, monkeypatch
    ) -> None:
        def failing_add(repository, work_order):
            raise DatabaseError("Database error during add: disk I/O error")

        monkeypatch.setattr(WorkOrderRepository, "add", failing_add)

        r = client.post(
            "/api/work-order",
            data=WORK_ORDER_FORM,
            files={"document": ("drawing.pdf", b"drawing", "application/pdf")},
        )

        assert r.status_code == 500
        assert list(upload_dir.iterdir()) == []
        assert db.exec(select(WorkOrder)).all() == []

    def test_missing_field(self, client: TestClient) -> None:
        form = {k: v for k, v in WORK_ORDER_FORM.items() if k != "project_code"}

        r = client.post("/api/work-order", data=form)

        assert r.status_code == 400
        assert "project_code" in r.json()["message"]

    def test_list_control_numbers(self, client: TestClient, db: Session) -> None:
        first = create_work_order(db).control_number
        second = create_work_order(db).control_number

        r = client.get("/api/work-orders/control-numbers")

        assert r.json() == [first, second]


class TestParts:
    def parts_payload(self, cn: int, *numbers: str) -> dict:
        return {
            "controlNumber": cn,
            "parts": [
                {"partNumber": n, "description": f"Part {n}", "quantity": 1}
                for n in numbers
            ],
        }

    def test_add_and_list_parts(self, client: TestClient, db: Session) -> None:
        cn = create_work_order(db).control_number

        r = client.post("/api/part", json=self.parts_payload(cn, "P1", " P2 "))

        assert r.status_code == 201
        assert r.json()["part_numbers"] == ["P1", "P2"]
        assert client.get(f"/parts/{cn}").json() == ["P1", "P2"]

    def test_unknown_control_number(self, client: TestClient) -> None:
        r = client.post("/api/part", json=self.parts_payload(999, "P1"))

        assert r.status_code == 400
        assert r.json() == {"success": False, "message": "Invalid Control Number"}

    def test_duplicate_part_adds_nothing(
        self, client: TestClient, db: Session
    ) -> None:
        cn = create_work_order(db).control_number
        client.post("/api/part", json=self.parts_payload(cn, "P1"))

        r = client.post("/api/part", json=self.parts_payload(cn, "P2", "P1"))

        assert r.status_code == 400
        assert client.get(f"/parts/{cn}").json() == ["P1"]

    def test_missing_part_fields(self, client: TestClient, db: Session) -> None:
        cn = create_work_order(db).control_number

        r = client.post(
            "/api/part",
            json={"controlNumber": cn, "parts": [{"partNumber": "P1"}]},
        )

        assert r.status_code == 400

    def test_no_parts_for_control_number(self, client: TestClient, db: Session) -> None:
        cn = create_work_order(db).control_number

        r = client.get(f"/parts/{cn}")

        assert r.status_code == 404
        assert r.json()["success"] is False
