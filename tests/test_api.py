"""End-to-end API tests with the manual ticker and in-memory SQLite."""
from __future__ import annotations

from conftest import settle


async def create_timer(client, **overrides):
    payload = {"label": "Tea", "duration_seconds": 3, **overrides}
    response = await client.post("/api/timers", json=payload)
    assert response.status_code == 201
    return response.json()


async def create_sequence(client, durations=(2, 3), **overrides):
    payload = {
        "name": "Flow",
        "steps": [
            {"label": f"Step {index + 1}", "duration_seconds": duration}
            for index, duration in enumerate(durations)
        ],
        **overrides,
    }
    response = await client.post("/api/sequences", json=payload)
    assert response.status_code == 201
    return response.json()


class TestHealth:
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    async def test_health_reports_engine_counts(self, client):
        response = await client.get("/api/health/")
        body = response.json()

        assert body["status"] == "healthy"
        assert body["timers"] == {"tracked": 0, "running": 0}

    async def test_pool_stats(self, client):
        response = await client.get("/api/health/pool")
        assert response.status_code == 200
        assert response.json()["pool"] == "StaticPool"


class TestDefinitions:
    async def test_categories_seeded(self, client):
        response = await client.get("/api/categories")
        assert [c["name"] for c in response.json()][:2] == ["General", "Yoga"]

    async def test_delete_default_category_conflicts(self, client):
        response = await client.delete("/api/categories/1")
        assert response.status_code == 409

    async def test_timer_crud(self, client):
        timer = await create_timer(client, notification_kind="alarm", category_id=4)
        assert timer["notification_kind"] == "alarm"

        response = await client.patch(f"/api/timers/{timer['id']}", json={"label": "Chai"})
        assert response.json()["label"] == "Chai"

        listing = (await client.get("/api/timers", params={"category_id": 4})).json()
        assert listing["count"] == 1

        assert (await client.delete(f"/api/timers/{timer['id']}")).status_code == 200
        assert (await client.get(f"/api/timers/{timer['id']}")).status_code == 404

    async def test_timer_rejects_bad_input(self, client):
        response = await client.post("/api/timers", json={"label": "", "duration_seconds": 0})
        assert response.status_code == 422

    async def test_timer_unknown_category(self, client):
        response = await client.post("/api/timers", json={"label": "x", "duration_seconds": 5, "category_id": 99})
        assert response.status_code == 404

    async def test_sequence_steps_replaced(self, client):
        sequence = await create_sequence(client, durations=(10, 20))

        response = await client.put(
            f"/api/sequences/{sequence['id']}/steps",
            json=[{"label": "Only", "duration_seconds": 5}],
        )

        assert response.status_code == 200
        assert [s["label"] for s in response.json()["steps"]] == ["Only"]

    async def test_sequence_listing_includes_totals(self, client):
        created = await create_sequence(client, durations=(30, 45))
        assert created["total_duration_seconds"] == 75
        assert created["step_count"] == 2

        listing = (await client.get("/api/sequences")).json()
        assert listing["sequences"][0]["total_duration_seconds"] == 75
        assert listing["sequences"][0]["step_count"] == 2

    async def test_categories_reordered(self, client):
        response = await client.put("/api/categories/order", json={"ordered_ids": [3, 1]})

        assert response.status_code == 200
        assert [c["name"] for c in response.json()][:3] == ["Workout", "General", "Yoga"]
        listing = (await client.get("/api/categories")).json()
        assert listing[0]["name"] == "Workout"

    async def test_category_reorder_rejects_empty_list(self, client):
        response = await client.put("/api/categories/order", json={"ordered_ids": []})
        assert response.status_code == 422


class TestTimerPlayback:
    async def test_get_initializes_idle_state(self, client):
        timer = await create_timer(client, duration_seconds=125)

        body = (await client.get(f"/api/playback/timers/{timer['id']}")).json()

        assert body["state"]["remaining_seconds"] == 125
        assert body["state"]["is_running"] is False
        assert body["remaining_display"] == "2:05"

    async def test_start_runs_to_completion(self, client, app, ticker):
        timer = await create_timer(client, duration_seconds=3)
        response = await client.post(f"/api/playback/timers/{timer['id']}/start")
        assert response.json()["state"]["is_running"] is True

        await ticker.advance(3)

        state = app.state.timer_engine.get_state(timer["id"])
        assert state.is_complete
        assert not state.is_running

    async def test_pause_and_stop_over_http(self, client, ticker):
        timer = await create_timer(client, duration_seconds=10)
        await client.post(f"/api/playback/timers/{timer['id']}/start")
        await ticker.advance(2)

        paused = (await client.post(f"/api/playback/timers/{timer['id']}/pause")).json()
        assert paused["state"]["is_paused"] is True
        await ticker.advance(2)

        stopped = (await client.post(f"/api/playback/timers/{timer['id']}/stop")).json()
        assert stopped["state"]["remaining_seconds"] == 8
        assert stopped["state"]["is_running"] is False

        restarted = (await client.post(f"/api/playback/timers/{timer['id']}/start")).json()
        assert restarted["state"]["remaining_seconds"] == 8

    async def test_summary_reports_running_timer(self, client):
        timer = await create_timer(client, label="Pasta", duration_seconds=540)
        await client.post(f"/api/playback/timers/{timer['id']}/start")

        body = (await client.get("/api/playback/summary")).json()

        assert body["summary"] == "Pasta - 9:00 remaining"
        assert body["has_running_timers"] is True
        assert body["has_running_sequences"] is False

    async def test_clear_removes_state(self, client, app):
        timer = await create_timer(client)
        await client.post(f"/api/playback/timers/{timer['id']}/start")

        response = await client.delete(f"/api/playback/timers/{timer['id']}")

        assert response.json()["success"] is True
        assert app.state.timer_engine.get_state(timer["id"]) is None

    async def test_deleting_definition_clears_playback(self, client, app):
        timer = await create_timer(client)
        await client.post(f"/api/playback/timers/{timer['id']}/start")

        await client.delete(f"/api/timers/{timer['id']}")
        await settle()

        assert app.state.timer_engine.get_state(timer["id"]) is None
        assert not app.state.timer_engine.is_loop_active(timer["id"])

    async def test_unknown_timer_is_404(self, client):
        response = await client.post("/api/playback/timers/999/start")
        assert response.status_code == 404


class TestSequencePlayback:
    async def test_view_shows_current_and_next_step(self, client):
        sequence = await create_sequence(client, durations=(2, 3))

        body = (await client.get(f"/api/playback/sequences/{sequence['id']}")).json()

        assert body["current_step"]["label"] == "Step 1"
        assert body["next_step"]["label"] == "Step 2"
        assert body["total_steps"] == 2
        assert body["remaining_seconds"] == 2
        assert body["overall_progress"] == 0.0

    async def test_run_to_completion(self, client, app, ticker):
        sequence = await create_sequence(client, durations=(2, 3))
        await client.post(f"/api/playback/sequences/{sequence['id']}/start")

        await ticker.advance(5)

        body = (await client.get(f"/api/playback/sequences/{sequence['id']}")).json()
        assert body["state"]["is_complete"] is True
        assert body["state"]["is_running"] is False
        assert body["overall_progress"] == 1.0

    async def test_skip_next_and_previous(self, client):
        sequence = await create_sequence(client, durations=(5, 7, 9))
        await client.post(f"/api/playback/sequences/{sequence['id']}/start")

        after_next = (await client.post(f"/api/playback/sequences/{sequence['id']}/skip-next")).json()
        assert after_next["state"]["current_step_index"] == 1
        assert after_next["remaining_seconds"] == 7

        after_previous = (await client.post(f"/api/playback/sequences/{sequence['id']}/skip-previous")).json()
        assert after_previous["state"]["current_step_index"] == 0
        assert after_previous["remaining_seconds"] == 5

    async def test_empty_sequence_does_not_start(self, client, app):
        sequence = await create_sequence(client, durations=())

        body = (await client.post(f"/api/playback/sequences/{sequence['id']}/start")).json()

        assert body["state"] is None
        assert body["total_steps"] == 0
        assert not app.state.sequence_engine.is_loop_active(sequence["id"])

    async def test_states_listing(self, client):
        sequence = await create_sequence(client)
        await client.post(f"/api/playback/sequences/{sequence['id']}/start")

        body = (await client.get("/api/playback/sequences")).json()

        assert body["running_ids"] == [sequence["id"]]
        assert str(sequence["id"]) in body["states"]
