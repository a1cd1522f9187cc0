from datetime import datetime


def create_task_payload(title="Test Task", description="Do something", priority=None):
    payload = {"title": title, "description": description}
    if priority is not None:
        payload["priority"] = priority
    return payload


def assert_task_shape(task: dict):
    for key in ["id", "title", "description", "completed", "priority", "createdAt"]:
        assert key in task
    assert isinstance(task["id"], int)
    assert isinstance(task["title"], str)
    assert isinstance(task["completed"], bool)
    assert task["priority"] in ("low", "medium", "high")
    # Timestamps are ISO8601 UTC strings with a Z suffix
    assert task["createdAt"].endswith("Z")
    datetime.fromisoformat(task["createdAt"])
    if "updatedAt" in task:
        datetime.fromisoformat(task["updatedAt"])


def ids(body: dict):
    return [t["id"] for t in body["tasks"]]


class TestListTasks:
    def test_list_seed_in_insertion_order(self, client):
        res = client.get("/api/tasks")
        assert res.status_code == 200
        body = res.json()
        assert ids(body) == [1, 2, 3]
        assert body["count"] == len(body["tasks"]) == 3
        for task in body["tasks"]:
            assert_task_shape(task)
            assert "updatedAt" not in task
        assert [t["title"] for t in body["tasks"]] == [
            "Learn API Testing",
            "Build Demo API",
            "Write Documentation",
        ]

    def test_new_tasks_are_appended(self, client):
        client.post("/api/tasks", json=create_task_payload(title="Fourth"))
        client.post("/api/tasks", json=create_task_payload(title="Fifth"))
        body = client.get("/api/tasks").json()
        assert ids(body) == [1, 2, 3, 4, 5]
        assert body["count"] == 5

    def test_filter_completed_literal_true(self, client):
        assert ids(client.get("/api/tasks?completed=true").json()) == [2]

    def test_filter_completed_other_values_select_pending(self, client):
        for value in ("false", "yes", "1", "TRUE", ""):
            body = client.get("/api/tasks", params={"completed": value}).json()
            assert ids(body) == [1, 3], value

    def test_filter_priority_exact(self, client):
        assert ids(client.get("/api/tasks?priority=high").json()) == [1]
        assert ids(client.get("/api/tasks?priority=HIGH").json()) == []

    def test_search_title_case_insensitive(self, client):
        assert ids(client.get("/api/tasks?search=DOC").json()) == [3]
        # description is not searched
        assert ids(client.get("/api/tasks?search=Postman").json()) == []

    def test_filters_are_combined(self, client):
        client.post("/api/tasks", json=create_task_payload(title="Low docs", priority="low"))
        body = client.get("/api/tasks?completed=false&priority=low&search=doc").json()
        assert ids(body) == [3, 4]
        assert body["count"] == 2

    def test_unmatched_filter_is_empty_not_error(self, client):
        res = client.get("/api/tasks?priority=urgent")
        assert res.status_code == 200
        assert res.json() == {"count": 0, "tasks": []}

    def test_trailing_slash_and_case_reach_handlers(self, client):
        assert ids(client.get("/api/tasks/").json()) == [1, 2, 3]
        assert ids(client.get("/API/TASKS?priority=low").json()) == [3]
        assert client.get("/api/tasks/1/").json()["id"] == 1
        assert client.patch("/api/Tasks/3/Toggle/").json()["completed"] is True
        res = client.post("/api/tasks/", json={"title": "Slash"})
        assert res.status_code == 201
        assert res.json()["id"] == 4

    def test_json_array_body_has_no_title(self, client):
        res = client.post("/api/tasks", json=[{"title": "inside a list"}])
        assert res.status_code == 400
        assert res.json()["message"] == "Title is required"


class TestGetTask:
    def test_get_task(self, client):
        res = client.get("/api/tasks/2")
        assert res.status_code == 200
        task = res.json()
        assert_task_shape(task)
        assert task["id"] == 2
        assert task["completed"] is True

    def test_get_not_found(self, client):
        res = client.get("/api/tasks/9999")
        assert res.status_code == 404
        assert res.json() == {"error": "Not Found", "message": "Task with id 9999 not found"}

    def test_id_parsed_leniently(self, client):
        assert client.get("/api/tasks/2abc").json()["id"] == 2

    def test_non_numeric_id_not_found(self, client):
        res = client.get("/api/tasks/abc")
        assert res.status_code == 404
        assert res.json()["message"] == "Task with id abc not found"


class TestCreateTask:
    def test_create_minimal_defaults(self, client):
        res = client.post("/api/tasks", json={"title": "X"})
        assert res.status_code == 201
        task = res.json()
        assert_task_shape(task)
        assert task["id"] == 4
        assert task["title"] == "X"
        assert task["priority"] == "medium"
        assert task["completed"] is False
        assert task["description"] == ""
        assert "updatedAt" not in task

    def test_create_trims_title_and_keeps_fields(self, client):
        res = client.post("/api/tasks", json=create_task_payload(title="  Padded  ", priority="high"))
        assert res.status_code == 201
        task = res.json()
        assert task["title"] == "Padded"
        assert task["description"] == "Do something"
        assert task["priority"] == "high"

    def test_create_ignores_completed(self, client):
        task = client.post("/api/tasks", json={"title": "Done?", "completed": True}).json()
        assert task["completed"] is False

    def test_ids_increase_and_are_not_reused(self, client):
        first = client.post("/api/tasks", json={"title": "A"}).json()["id"]
        client.delete(f"/api/tasks/{first}")
        second = client.post("/api/tasks", json={"title": "B"}).json()["id"]
        third = client.post("/api/tasks", json={"title": "C"}).json()["id"]
        assert (first, second, third) == (4, 5, 6)

    def test_create_title_required(self, client):
        for payload in ({"title": ""}, {"title": "   "}, {}, {"title": None}, {"title": 42}):
            res = client.post("/api/tasks", json=payload)
            assert res.status_code == 400, payload
            assert res.json() == {"error": "Bad Request", "message": "Title is required"}

    def test_create_without_body(self, client):
        res = client.post("/api/tasks")
        assert res.status_code == 400
        assert res.json()["message"] == "Title is required"

    def test_create_invalid_priority(self, client):
        res = client.post("/api/tasks", json={"title": "X", "priority": "urgent"})
        assert res.status_code == 400
        assert res.json() == {
            "error": "Bad Request",
            "message": "Invalid priority. Must be one of: low, medium, high",
        }

    def test_create_empty_priority_defaults(self, client):
        task = client.post("/api/tasks", json={"title": "X", "priority": ""}).json()
        assert task["priority"] == "medium"

    def test_create_malformed_json(self, client):
        res = client.post("/api/tasks", content=b"{not json", headers={"content-type": "application/json"})
        assert res.status_code == 400
        assert res.json()["error"] == "Bad Request"

    def test_failed_create_does_not_consume_id(self, client):
        client.post("/api/tasks", json={"title": ""})
        assert client.post("/api/tasks", json={"title": "Ok"}).json()["id"] == 4


class TestReplaceTask:
    def test_replace_all_fields(self, client):
        before = client.get("/api/tasks/1").json()
        res = client.put(
            "/api/tasks/1",
            json={"title": " Replaced ", "description": "New", "completed": True, "priority": "low"},
        )
        assert res.status_code == 200
        task = res.json()
        assert_task_shape(task)
        assert task["id"] == 1
        assert task["title"] == "Replaced"
        assert task["description"] == "New"
        assert task["completed"] is True
        assert task["priority"] == "low"
        assert task["createdAt"] == before["createdAt"]
        assert "updatedAt" in task

    def test_replace_resets_omitted_fields(self, client):
        task = client.put("/api/tasks/2", json={"title": "Only title"}).json()
        assert task["description"] == ""
        assert task["completed"] is False
        assert task["priority"] == "medium"

    def test_replace_completed_truthiness(self, client):
        assert client.put("/api/tasks/1", json={"title": "T", "completed": "false"}).json()["completed"] is True
        assert client.put("/api/tasks/1", json={"title": "T", "completed": 0}).json()["completed"] is False
        assert client.put("/api/tasks/1", json={"title": "T", "completed": []}).json()["completed"] is True

    def test_replace_not_found_checked_before_title(self, client):
        res = client.put("/api/tasks/9999", json={})
        assert res.status_code == 404
        assert res.json()["message"] == "Task with id 9999 not found"

    def test_replace_title_required(self, client):
        res = client.put("/api/tasks/1", json={"title": "  "})
        assert res.status_code == 400
        assert res.json()["message"] == "Title is required"
        # untouched on failure
        assert client.get("/api/tasks/1").json()["title"] == "Learn API Testing"

    def test_replace_invalid_priority(self, client):
        res = client.put("/api/tasks/1", json={"title": "T", "priority": "urgent"})
        assert res.status_code == 400
        assert client.get("/api/tasks/1").json()["priority"] == "high"

    def test_replace_keeps_position(self, client):
        client.put("/api/tasks/1", json={"title": "Moved?"})
        assert ids(client.get("/api/tasks").json()) == [1, 2, 3]


class TestToggleTask:
    def test_toggle_twice_restores(self, client):
        for tid in (1, 2, 3):
            original = client.get(f"/api/tasks/{tid}").json()["completed"]
            first = client.patch(f"/api/tasks/{tid}/toggle")
            assert first.status_code == 200
            assert first.json()["completed"] is (not original)
            assert "updatedAt" in first.json()
            second = client.patch(f"/api/tasks/{tid}/toggle")
            assert second.status_code == 200
            assert second.json()["completed"] is original

    def test_toggle_not_found(self, client):
        res = client.patch("/api/tasks/9999/toggle")
        assert res.status_code == 404
        assert res.json()["error"] == "Not Found"


class TestDeleteTask:
    def test_delete_returns_record(self, client):
        res = client.delete("/api/tasks/2")
        assert res.status_code == 200
        body = res.json()
        assert body["message"] == "Task deleted successfully"
        assert body["deleted"]["id"] == 2
        assert body["deleted"]["title"] == "Build Demo API"

    def test_delete_then_get_not_found_and_order_kept(self, client):
        client.delete("/api/tasks/2")
        assert client.get("/api/tasks/2").status_code == 404
        assert ids(client.get("/api/tasks").json()) == [1, 3]
        # Deleting again should still be 404
        res = client.delete("/api/tasks/2")
        assert res.status_code == 404
        assert res.json()["message"] == "Task with id 2 not found"

    def test_delete_not_found(self, client):
        assert client.delete("/api/tasks/9999").status_code == 404
