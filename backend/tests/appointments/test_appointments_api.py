from datetime import date, timedelta

import pytest


def _book(api_client, auth_headers, dentist_id, **overrides):
    payload = {
        "patient_name": "Ana Ruiz",
        "dentist_id": dentist_id,
        "date": "2026-03-10",
        "time": "09:00",
        "duration": 60,
        "procedure": "Limpieza dental",
    }
    payload.update(overrides)
    res = api_client.post("/appointments", json=payload, headers=auth_headers)
    assert res.status_code == 201, res.text
    return res.json()


def test_calendar_marks_hour_appointment(api_client, auth_headers, create_dentist):
    dentist = create_dentist()
    appointment = _book(api_client, auth_headers, dentist["id"])
    assert appointment["status_appointments"] == "scheduled"
    assert appointment["dentist"]["name"] == dentist["name"]

    res = api_client.get("/appointments/calendar", params={"date": "2026-03-10"}, headers=auth_headers)
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["slot_minutes"] == 30
    states = {slot["time"]: slot["state"] for slot in body["slots"]}
    assert states["09:00:00"] == "start"
    assert states["09:30:00"] == "occupied"
    assert states["10:00:00"] == "available"
    start_slot = next(slot for slot in body["slots"] if slot["time"] == "09:00:00")
    assert [a["id"] for a in start_slot["appointments"]] == [appointment["id"]]


def test_deleted_appointment_frees_calendar(api_client, auth_headers, create_dentist):
    dentist = create_dentist()
    appointment = _book(api_client, auth_headers, dentist["id"])

    res = api_client.delete(f"/appointments/{appointment['id']}", headers=auth_headers)
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["status"] == "0"
    assert body["status_appointments"] == "cancelled"

    res = api_client.get("/appointments/calendar", params={"date": "2026-03-10"}, headers=auth_headers)
    assert all(slot["state"] == "available" for slot in res.json()["slots"])

    res = api_client.get("/appointments", headers=auth_headers)
    assert res.json()["total_count"] == 0


def test_cancel_keeps_record_active(api_client, auth_headers, create_dentist):
    dentist = create_dentist()
    appointment = _book(api_client, auth_headers, dentist["id"])

    res = api_client.post(f"/appointments/{appointment['id']}/cancel", headers=auth_headers)
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["status_appointments"] == "cancelled"
    assert body["status"] == "1"


def test_appointment_list_ordered_by_date_and_time(api_client, auth_headers, create_dentist):
    dentist = create_dentist()
    late = _book(api_client, auth_headers, dentist["id"], date="2026-03-11", time="08:00")
    early = _book(api_client, auth_headers, dentist["id"], date="2026-03-10", time="11:00")
    earliest = _book(api_client, auth_headers, dentist["id"], date="2026-03-10", time="08:30")

    res = api_client.get("/appointments", headers=auth_headers)
    assert res.status_code == 200, res.text
    ids = [item["id"] for item in res.json()["items"]]
    assert ids == [earliest["id"], early["id"], late["id"]]

    res = api_client.get("/appointments", params={"date": "2026-03-11"}, headers=auth_headers)
    assert [item["id"] for item in res.json()["items"]] == [late["id"]]


def test_appointment_validation(api_client, auth_headers, create_dentist):
    dentist = create_dentist()
    res = api_client.post(
        "/appointments",
        json={
            "patient_name": "A",
            "patient_phone": "12",
            "dentist_id": dentist["id"],
            "date": "2026-03-10",
            "time": "09:00",
            "duration": 10,
            "procedure": "Empaste",
        },
        headers=auth_headers,
    )
    assert res.status_code == 422, res.text
    assert {"patient_name", "patient_phone", "duration"} <= set(res.json()["errors"])


def test_appointment_requires_known_dentist(api_client, auth_headers):
    res = api_client.post(
        "/appointments",
        json={
            "patient_name": "Ana Ruiz",
            "dentist_id": "missing-dentist",
            "date": "2026-03-10",
            "time": "09:00",
            "procedure": "Empaste",
        },
        headers=auth_headers,
    )
    assert res.status_code == 404, res.text


def test_update_rejects_null_required_field(api_client, auth_headers, create_dentist):
    dentist = create_dentist()
    appointment = _book(api_client, auth_headers, dentist["id"])
    res = api_client.patch(
        f"/appointments/{appointment['id']}", json={"date": None}, headers=auth_headers
    )
    assert res.status_code == 422, res.text

    res = api_client.patch(
        f"/appointments/{appointment['id']}",
        json={"status_appointments": "confirmed", "duration": 45},
        headers=auth_headers,
    )
    assert res.status_code == 200, res.text
    assert res.json()["status_appointments"] == "confirmed"
    assert res.json()["duration"] == 45


def test_procedures_list(api_client, auth_headers):
    res = api_client.get("/appointments/procedures")
    assert res.status_code == 200, res.text
    assert "Limpieza dental" in res.json()
    assert len(res.json()) == 12


def test_default_dentist_is_next_upcoming(api_client, auth_headers, create_patient, create_dentist):
    patient = create_patient("Ana Ruiz")
    near = create_dentist("Dr. Near Future")
    far = create_dentist("Dr. Far Future")
    past = create_dentist("Dr. Long Ago")
    today = date.today()

    _book(api_client, auth_headers, past["id"], patient_id=patient["id"],
          date=(today - timedelta(days=3)).isoformat())
    _book(api_client, auth_headers, far["id"], patient_id=patient["id"],
          date=(today + timedelta(days=20)).isoformat())
    cancelled = _book(api_client, auth_headers, past["id"], patient_id=patient["id"],
                      date=(today + timedelta(days=1)).isoformat())
    api_client.post(f"/appointments/{cancelled['id']}/cancel", headers=auth_headers)
    _book(api_client, auth_headers, near["id"], patient_id=patient["id"],
          date=(today + timedelta(days=5)).isoformat())

    res = api_client.get(f"/patients/{patient['id']}/default-dentist", headers=auth_headers)
    assert res.status_code == 200, res.text
    assert res.json()["id"] == near["id"]


def test_default_dentist_none_without_bookings(api_client, auth_headers, create_patient):
    patient = create_patient("Ana Ruiz")
    res = api_client.get(f"/patients/{patient['id']}/default-dentist", headers=auth_headers)
    assert res.status_code == 200, res.text
    assert res.json() is None


def test_patient_appointments_list(api_client, auth_headers, create_patient, create_dentist):
    patient = create_patient("Ana Ruiz")
    dentist = create_dentist()
    own = _book(api_client, auth_headers, dentist["id"], patient_id=patient["id"])
    _book(api_client, auth_headers, dentist["id"], patient_name="Walk In")

    res = api_client.get(f"/patients/{patient['id']}/appointments", headers=auth_headers)
    assert res.status_code == 200, res.text
    assert [item["id"] for item in res.json()["items"]] == [own["id"]]


@pytest.mark.parametrize("start", ["09:15", "09:00:30", "07:30", "20:00"])
def test_appointment_time_must_sit_on_slot_grid(api_client, auth_headers, create_dentist, start):
    dentist = create_dentist()
    res = api_client.post(
        "/appointments",
        json={
            "patient_name": "Ana Ruiz",
            "dentist_id": dentist["id"],
            "date": "2026-03-10",
            "time": start,
            "duration": 60,
            "procedure": "Empaste",
        },
        headers=auth_headers,
    )
    assert res.status_code == 422, res.text
    assert "time" in res.json()["errors"]

    res = api_client.get("/appointments/calendar", params={"date": "2026-03-10"}, headers=auth_headers)
    assert all(slot["state"] == "available" for slot in res.json()["slots"])


def test_update_rejects_off_grid_time(api_client, auth_headers, create_dentist):
    dentist = create_dentist()
    appointment = _book(api_client, auth_headers, dentist["id"])
    res = api_client.patch(
        f"/appointments/{appointment['id']}", json={"time": "09:45"}, headers=auth_headers
    )
    assert res.status_code == 422, res.text
    assert "time" in res.json()["errors"]

    res = api_client.patch(
        f"/appointments/{appointment['id']}", json={"time": "19:30"}, headers=auth_headers
    )
    assert res.status_code == 200, res.text
    assert res.json()["time"] == "19:30:00"
