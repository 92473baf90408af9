import pytest


def _log(client, **overrides):
    payload = {
        "workout_type": "Other",
        "started_at": "2025-01-06T10:00:00Z",
        "duration": "00:01:00",
        "max_heart_rate": 200,
        "samples": [{"heart_rate": 100}],
    }
    payload.update(overrides)
    res = client.post("/workouts/", json=payload)
    assert res.status_code == 200, res.text
    return res.json()


def test_root(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.json()["message"] == "Hundred backend is running"


def test_log_workout_scores_samples(client):
    data = _log(client)
    assert data["status"] == "completed"
    assert data["duration_seconds"] == 60
    assert data["duration"] == "00:01:00"
    assert data["ended_at"].startswith("2025-01-06T10:01:00")
    assert data["date"] == "2025-01-06"
    assert data["hr_max"] == 200
    assert data["effort"]["score"] == 13
    assert data["effort"]["quality"] == "Poor"
    assert data["effort"]["time_in_zones"]["recovery"] == 100
    assert len(data["samples"]) == 1


def test_missing_readings_are_stored_but_not_scored(client):
    samples = [{"heart_rate": 150}] * 9 + [{"heart_rate": None}]
    data = _log(client, samples=samples, duration="00:10:00")
    assert len(data["samples"]) == 10
    assert data["samples"][-1]["heart_rate"] is None
    assert data["avg_hr"] == 150
    assert data["min_hr"] == 150
    assert data["max_hr"] == 150
    assert data["effort"]["time_in_zones"]["anaerobic"] == 100
    assert data["effort"]["score"] == 66


def test_workout_without_readings_has_no_effort(client):
    data = _log(client, samples=[{"heart_rate": None}, {"heart_rate": None}])
    assert data["effort"] is None
    assert data["avg_hr"] is None


def test_duration_derived_from_end_time(client):
    data = _log(client, duration=None, ended_at="2025-01-06T10:45:30Z")
    assert data["duration_seconds"] == 2730


def test_log_rejects_bad_input(client):
    base = {
        "started_at": "2025-01-06T10:00:00Z",
        "max_heart_rate": 200,
        "samples": [{"heart_rate": 120}],
    }
    assert client.post("/workouts/", json={**base, "duration": "1:2"}).status_code == 422
    assert client.post(
        "/workouts/", json={**base, "ended_at": "2025-01-06T09:00:00Z"}
    ).status_code == 422
    assert client.post("/workouts/", json={**base, "max_heart_rate": 300}).status_code == 422
    assert client.post("/workouts/", json={**base, "workout_type": "Pilates"}).status_code == 422
    assert client.post(
        "/workouts/", json={**base, "samples": [{"heart_rate": -5}]}
    ).status_code == 422


def test_list_filters_and_order(client):
    first = _log(client, workout_type="HIIT", started_at="2025-01-06T10:00:00Z")
    second = _log(client, workout_type="Running", started_at="2025-01-08T10:00:00Z")
    third = _log(client, workout_type="HIIT", started_at="2025-01-12T10:00:00Z")

    ids = [w["id"] for w in client.get("/workouts/").json()]
    assert ids == [third["id"], second["id"], first["id"]]

    hiit = client.get("/workouts/", params={"workout_type": "HIIT"}).json()
    assert [w["id"] for w in hiit] == [third["id"], first["id"]]

    window = client.get(
        "/workouts/", params={"start_date": "2025-01-07", "end_date": "2025-01-12"}
    ).json()
    assert [w["id"] for w in window] == [third["id"], second["id"]]

    latest = client.get("/workouts/", params={"limit": 1}).json()
    assert [w["id"] for w in latest] == [third["id"]]


def test_stats(client):
    empty = client.get("/workouts/stats").json()
    assert empty["total_workouts"] == 0
    assert empty["last_score"] is None

    _log(client, started_at="2025-01-06T10:00:00Z")
    _log(
        client,
        started_at="2025-01-08T10:00:00Z",
        samples=[{"heart_rate": 150}] * 9 + [{"heart_rate": None}],
        duration="00:10:00",
    )
    stats = client.get("/workouts/stats").json()
    assert stats["total_workouts"] == 2
    assert stats["last_score"] == 66
    assert stats["average_score"] == pytest.approx(39.5)
    assert stats["by_type"]["Other"] == 2
    assert stats["by_type"]["HIIT"] == 0


def test_active_workout_lifecycle(client):
    res = client.post(
        "/workouts/start",
        json={"workout_type": "HIIT", "max_heart_rate": 200},
    )
    assert res.status_code == 200
    started = res.json()
    assert started["status"] == "active"
    wid = started["id"]

    live = client.post(f"/workouts/{wid}/samples", json={"heart_rate": 150}).json()
    assert live["effort"]["zone"] == "anaerobic"
    assert live["effort"]["label"] == "Anaerobic"
    assert live["effort"]["intensity"] == 67
    assert live["sample_count"] == 1
    assert live["average_heart_rate"] == 150

    # manual readings outside 40-250 bpm are refused
    for bad in (30, 40, 250):
        res = client.post(f"/workouts/{wid}/samples", json={"heart_rate": bad})
        assert res.status_code == 422

    live = client.post(f"/workouts/{wid}/samples", json={"heart_rate": None}).json()
    assert live["heart_rate"] is None
    assert live["effort"] is None
    assert live["sample_count"] == 2

    polled = client.get(f"/workouts/{wid}/live").json()
    assert polled["sample_count"] == 2
    assert polled["hr_max"] == 200

    finished = client.post(f"/workouts/{wid}/finish").json()
    assert finished["status"] == "completed"
    assert len(finished["samples"]) == 2
    # one valid reading at 150 bpm scored as intervals
    assert finished["effort"]["score"] == 60
    assert finished["effort"]["quality"] == "Good"

    assert client.post(f"/workouts/{wid}/samples", json={"heart_rate": 120}).status_code == 409
    assert client.post(f"/workouts/{wid}/finish").status_code == 409


def test_sensor_readings_skip_manual_range(client):
    wid = client.post(
        "/workouts/start",
        json={"workout_type": "Cardio", "source": "sensor", "max_heart_rate": 200},
    ).json()["id"]
    live = client.post(f"/workouts/{wid}/samples", json={"heart_rate": 35}).json()
    assert live["effort"]["zone"] == "recovery"
    assert live["effort"]["intensity"] == 7


def test_changing_type_rescores(client):
    samples = [{"heart_rate": hr} for hr in [60, 190] * 5]
    data = _log(client, workout_type="HIIT", samples=samples, duration="00:00:00")
    assert data["effort"]["score"] == 74
    assert data["effort"]["workout_specific"]["zone_transitions"] == 9

    res = client.put(f"/workouts/{data['id']}", json={"workout_type": "Other"})
    assert res.status_code == 200
    updated = res.json()
    assert updated["workout_type"] == "Other"
    assert updated["effort"]["score"] == 56
    assert updated["effort"]["quality"] == "Fair"

    res = client.put(f"/workouts/{data['id']}", json={"notes": "legs day"})
    assert res.json()["notes"] == "legs day"
    assert res.json()["effort"]["score"] == 56


def test_delete_and_clear(client):
    data = _log(client)
    assert client.delete(f"/workouts/{data['id']}").status_code == 200
    assert client.get(f"/workouts/{data['id']}").status_code == 404
    assert client.delete(f"/workouts/{data['id']}").status_code == 404

    _log(client)
    _log(client)
    res = client.delete("/workouts/")
    assert res.json()["deleted"] == 2
    assert client.get("/workouts/").json() == []


def test_unknown_workout_is_404(client):
    assert client.get("/workouts/999").status_code == 404
    assert client.get("/workouts/999/live").status_code == 404
    assert client.post("/workouts/999/finish").status_code == 404
