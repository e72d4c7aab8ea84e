"""Tests for the medication CRUD endpoints."""
import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.db.models.movement import Movement
from app.services import inventory


def _create(client, headers, **overrides):
    body = {
        "name": "Aspirin",
        "dose": "100mg",
        "current_stock": 10,
        "min_stock": 5,
        "schedule": ["09:00", "21:00"],
    }
    body.update(overrides)
    return client.post("/api/medications", json=body, headers=headers)


def _movements(store):
    with store.session() as db:
        return list(db.execute(select(Movement).order_by(Movement.movement_id)).scalars().all())


class TestCreateMedication:
    def test_create_logs_initial_load(self, client, auth_headers, store):
        r = _create(client, auth_headers, current_stock=30)

        assert r.status_code == 201
        body = r.json()
        assert body["name"] == "Aspirin"
        assert body["current_stock"] == 30
        assert body["low_stock_notified"] is False
        assert body["days_remaining"] == 15

        movements = _movements(store)
        assert len(movements) == 1
        assert movements[0].kind == "InitialLoad"
        assert movements[0].delta == 30
        assert movements[0].medication_name == "Aspirin"

    def test_create_with_empty_stock_logs_nothing(self, client, auth_headers, store):
        r = _create(client, auth_headers, current_stock=0)

        assert r.status_code == 201
        assert _movements(store) == []

    def test_defaults_and_trimming(self, client, auth_headers):
        r = client.post(
            "/api/medications",
            json={"name": "  Omeprazole  ", "schedule": ["8:30"]},
            headers=auth_headers,
        )

        assert r.status_code == 201
        body = r.json()
        assert body["name"] == "Omeprazole"
        assert body["current_stock"] == 0
        assert body["min_stock"] == 5
        assert body["dose"] is None
        assert body["schedule"] == ["08:30"]

    def test_short_name_is_rejected(self, client, auth_headers):
        r = _create(client, auth_headers, name="A")

        assert r.status_code == 400
        assert r.json()["detail"] == "Validation error"
        assert any(e.startswith("name") for e in r.json()["errors"])

    def test_invalid_schedule_is_rejected(self, client, auth_headers):
        r = _create(client, auth_headers, schedule=["25:00"])

        assert r.status_code == 400
        assert any("HH:MM" in e for e in r.json()["errors"])

    def test_empty_schedule_is_rejected(self, client, auth_headers):
        assert _create(client, auth_headers, schedule=[]).status_code == 400

    def test_negative_stock_and_zero_threshold_are_rejected(self, client, auth_headers):
        r = _create(client, auth_headers, current_stock=-1, min_stock=0)

        assert r.status_code == 400
        errors = r.json()["errors"]
        assert any(e.startswith("current_stock") for e in errors)
        assert any(e.startswith("min_stock") for e in errors)

    def test_long_dose_is_rejected(self, client, auth_headers):
        assert _create(client, auth_headers, dose="x" * 51).status_code == 400

    def test_invalid_expiry_date_is_rejected(self, client, auth_headers):
        assert _create(client, auth_headers, expiry_date="2026-02-30").status_code == 400

    def test_blank_expiry_date_means_none(self, client, auth_headers):
        r = _create(client, auth_headers, expiry_date="")

        assert r.status_code == 201
        assert r.json()["expiry_date"] is None


class TestListMedications:
    def test_days_remaining_is_floored(self, client, auth_headers):
        _create(client, auth_headers, name="Metformin", current_stock=7, schedule=["08:00", "14:00", "20:00"])

        r = client.get("/api/medications", headers=auth_headers)

        assert r.status_code == 200
        [med] = r.json()
        assert med["days_remaining"] == 2

    def test_empty_schedule_means_zero_days(self, client, auth_headers, add_medication):
        add_medication(name="As needed", current_stock=40, schedule=[])

        [med] = client.get("/api/medications", headers=auth_headers).json()

        assert med["days_remaining"] == 0

    def test_get_single_medication(self, client, auth_headers):
        med_id = _create(client, auth_headers).json()["id"]

        r = client.get(f"/api/medications/{med_id}", headers=auth_headers)

        assert r.status_code == 200
        assert r.json()["id"] == med_id


class TestUpdateMedication:
    def test_new_expiry_date_resets_flag(self, client, auth_headers, add_medication, load_medication):
        med_id = add_medication(current_stock=10, expiry_date=date(2025, 1, 1), expiry_notified=True)

        r = client.put(f"/api/medications/{med_id}", json={"expiry_date": "2025-06-01"}, headers=auth_headers)

        assert r.status_code == 200
        assert r.json()["expiry_notified"] is False
        assert load_medication(med_id).expiry_date == date(2025, 6, 1)

    def test_same_expiry_date_keeps_flag(self, client, auth_headers, add_medication):
        med_id = add_medication(current_stock=10, expiry_date=date(2025, 1, 1), expiry_notified=True)

        r = client.put(f"/api/medications/{med_id}", json={"expiry_date": "2025-01-01"}, headers=auth_headers)

        assert r.json()["expiry_notified"] is True

    def test_stock_change_logs_manual_adjustment(self, client, auth_headers, add_medication, store):
        med_id = add_medication(name="Losartan", current_stock=30, min_stock=5, low_stock_notified=True)

        r = client.put(f"/api/medications/{med_id}", json={"current_stock": 12}, headers=auth_headers)

        assert r.status_code == 200
        assert r.json()["low_stock_notified"] is False
        [movement] = _movements(store)
        assert movement.kind == "ManualAdjustment"
        assert movement.delta == -18

    def test_stock_change_below_threshold_keeps_flag(self, client, auth_headers, add_medication, store):
        med_id = add_medication(current_stock=4, min_stock=5, low_stock_notified=True)

        r = client.put(f"/api/medications/{med_id}", json={"current_stock": 2}, headers=auth_headers)

        assert r.json()["low_stock_notified"] is True
        assert _movements(store)[0].delta == -2

    def test_edit_without_stock_change_logs_nothing(self, client, auth_headers, add_medication, store):
        med_id = add_medication(current_stock=4)

        r = client.put(
            f"/api/medications/{med_id}",
            json={"name": "Aspirin forte", "schedule": ["07:00"]},
            headers=auth_headers,
        )

        assert r.status_code == 200
        assert r.json()["name"] == "Aspirin forte"
        assert r.json()["schedule"] == ["07:00"]
        assert _movements(store) == []

    def test_null_name_is_rejected(self, client, auth_headers, add_medication):
        med_id = add_medication(current_stock=4)

        r = client.put(f"/api/medications/{med_id}", json={"name": None}, headers=auth_headers)

        assert r.status_code == 400

    def test_unknown_id_is_404(self, client, auth_headers):
        r = client.put(f"/api/medications/{uuid.uuid4()}", json={"dose": "1"}, headers=auth_headers)

        assert r.status_code == 404


class TestDeleteMedication:
    def test_delete_removes_record_without_movement(self, client, auth_headers, add_medication, store):
        med_id = add_medication(current_stock=4)

        r = client.delete(f"/api/medications/{med_id}", headers=auth_headers)

        assert r.status_code == 200
        assert client.get(f"/api/medications/{med_id}", headers=auth_headers).status_code == 404
        assert _movements(store) == []

    def test_delete_unknown_is_404(self, client, auth_headers):
        assert client.delete(f"/api/medications/{uuid.uuid4()}", headers=auth_headers).status_code == 404

    def test_malformed_id_is_400(self, client, auth_headers):
        assert client.delete("/api/medications/not-a-uuid", headers=auth_headers).status_code == 400


class TestRestock:
    def test_restock_adds_units_and_rearms_notice(self, client, auth_headers, add_medication, store):
        med_id = add_medication(current_stock=2, min_stock=5, low_stock_notified=True)

        r = client.put(f"/api/medications/{med_id}/restock", json={"quantity": 30}, headers=auth_headers)

        assert r.status_code == 200
        assert r.json()["current_stock"] == 32
        assert r.json()["low_stock_notified"] is False
        [movement] = _movements(store)
        assert movement.kind == "Restock"
        assert movement.delta == 30

    def test_negative_quantity_is_rejected_without_change(self, client, auth_headers, add_medication, load_medication, store):
        med_id = add_medication(current_stock=2, low_stock_notified=True)

        r = client.put(f"/api/medications/{med_id}/restock", json={"quantity": -5}, headers=auth_headers)

        assert r.status_code == 400
        med = load_medication(med_id)
        assert med.current_stock == 2
        assert med.low_stock_notified is True
        assert _movements(store) == []

    def test_zero_quantity_is_rejected(self, client, auth_headers, add_medication):
        med_id = add_medication(current_stock=2)

        r = client.put(f"/api/medications/{med_id}/restock", json={"quantity": 0}, headers=auth_headers)

        assert r.status_code == 400

    def test_restock_unknown_is_404(self, client, auth_headers):
        r = client.put(f"/api/medications/{uuid.uuid4()}/restock", json={"quantity": 5}, headers=auth_headers)

        assert r.status_code == 404


class TestDoses:
    def test_dose_decrements_stock(self, client, auth_headers, add_medication, store):
        med_id = add_medication(current_stock=3)

        r = client.post("/api/doses", json={"medication_id": str(med_id)}, headers=auth_headers)

        assert r.status_code == 200
        assert r.json()["current_stock"] == 2
        assert _movements(store) == []

    def test_camel_case_body_is_accepted(self, client, auth_headers, add_medication):
        med_id = add_medication(current_stock=3)

        r = client.post("/api/doses", json={"medicationId": str(med_id)}, headers=auth_headers)

        assert r.status_code == 200

    def test_dose_on_empty_stock_is_rejected(self, client, auth_headers, add_medication, load_medication):
        med_id = add_medication(name="Aspirin", current_stock=0)

        r = client.post("/api/doses", json={"medication_id": str(med_id)}, headers=auth_headers)

        assert r.status_code == 400
        assert "Aspirin" in r.json()["detail"]
        assert load_medication(med_id).current_stock == 0

    def test_dose_unknown_is_404(self, client, auth_headers):
        r = client.post("/api/doses", json={"medication_id": str(uuid.uuid4())}, headers=auth_headers)

        assert r.status_code == 404


class TestHistory:
    def test_latest_fifty_newest_first(self, client, auth_headers, store):
        with store.session() as db:
            for i in range(55):
                db.add(Movement(medication_name=f"Med {i}", delta=i + 1, kind="Restock"))
                db.flush()
            db.commit()

        r = client.get("/api/history", headers=auth_headers)

        assert r.status_code == 200
        entries = r.json()
        assert len(entries) == 50
        assert entries[0]["medication_name"] == "Med 54"
        assert entries[-1]["medication_name"] == "Med 5"

    def test_history_requires_token(self, client):
        assert client.get("/api/history").status_code == 401


class TestDatabaseErrors:
    def test_store_failure_becomes_logged_500(self, client, auth_headers, monkeypatch, caplog):
        def unreachable(db):
            raise OperationalError("SELECT medications", {}, Exception("connection lost"))

        monkeypatch.setattr(inventory, "list_medications", unreachable)

        r = client.get("/api/medications", headers=auth_headers)

        assert r.status_code == 500
        assert r.json() == {"detail": "Database error"}
        assert "Database error on GET /api/medications" in caplog.text

    def test_process_keeps_serving_after_store_failure(self, client, auth_headers, monkeypatch):
        def unreachable(db):
            raise OperationalError("SELECT medications", {}, Exception("connection lost"))

        monkeypatch.setattr(inventory, "list_medications", unreachable)
        assert client.get("/api/medications", headers=auth_headers).status_code == 500

        monkeypatch.undo()
        assert client.get("/api/medications", headers=auth_headers).status_code == 200
