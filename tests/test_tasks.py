def create(client, **fields):
    response = client.post("/api/tasks", json=fields)
    assert response.status_code == 201, response.text
    return response.json()


# ========== CREATE ==========
def test_create_task_defaults(alice):
    """Test: only a title, every default applied"""
    response = alice.post("/api/tasks", json={"title": "Buy milk"})
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Buy milk"
    assert data["description"] == ""
    assert data["priority"] == "medium"
    assert data["category"] == "general"
    assert data["dueDate"] is None
    assert data["completed"] is False
    assert data["createdAt"] == data["updatedAt"]
    assert data["id"]
    assert data["userId"] == alice.get("/api/auth/me").json()["id"]


def test_create_task_all_fields(alice):
    data = create(
        alice,
        title="  Report  ",
        description=" quarterly ",
        priority="high",
        category="work",
        dueDate="2026-10-25",
    )
    assert data["title"] == "Report"
    assert data["description"] == "quarterly"
    assert data["priority"] == "high"
    assert data["category"] == "work"
    assert data["dueDate"] == "2026-10-25"


def test_create_task_blank_due_date(alice):
    data = create(alice, title="No date", dueDate="")
    assert data["dueDate"] is None


def test_create_task_empty_title(alice):
    for body in ({"title": ""}, {"title": "   "}, {}):
        response = alice.post("/api/tasks", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Title is required"}


def test_create_task_invalid_priority(alice):
    response = alice.post("/api/tasks", json={"title": "x", "priority": "urgent"})
    assert response.status_code == 400
    assert "priority" in response.json()["error"]


def test_tasks_require_session(client):
    assert client.get("/api/tasks").status_code == 401
    assert client.post("/api/tasks", json={"title": "x"}).status_code == 401
    assert client.get("/api/tasks/some-id").status_code == 401
    assert client.put("/api/tasks/some-id", json={"title": "x"}).status_code == 401
    assert client.delete("/api/tasks/some-id").status_code == 401
    assert client.get("/api/tasks/stats").status_code == 401


# ========== READ ==========
def test_list_tasks_empty(alice):
    response = alice.get("/api/tasks")
    assert response.status_code == 200
    assert response.json() == []


def test_list_tasks_newest_first(alice):
    for title in ("first", "second", "third"):
        create(alice, title=title)
    titles = [t["title"] for t in alice.get("/api/tasks").json()]
    assert titles == ["third", "second", "first"]


def test_create_then_get_round_trip(alice):
    created = create(alice, title="Plan trip", description="book hotel", category="personal", dueDate="2026-12-01")
    response = alice.get(f"/api/tasks/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


def test_get_unknown_task(alice):
    response = alice.get("/api/tasks/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}


# ========== FILTERS / STATS ==========
def test_filter_tasks(alice):
    low = create(alice, title="Low", priority="low", category="shopping")
    create(alice, title="High 1", priority="high", category="work")
    high2 = create(alice, title="High 2", priority="high", category="work")
    alice.put(f"/api/tasks/{high2['id']}", json={"completed": True})

    high = alice.get("/api/tasks?priority=high").json()
    assert [t["title"] for t in high] == ["High 2", "High 1"]

    work = alice.get("/api/tasks", params={"category": "work"}).json()
    assert len(work) == 2

    done = alice.get("/api/tasks", params={"completed": "true"}).json()
    assert [t["id"] for t in done] == [high2["id"]]

    pending_shopping = alice.get("/api/tasks", params={"completed": "false", "category": "shopping"}).json()
    assert [t["id"] for t in pending_shopping] == [low["id"]]


def test_filter_invalid_priority(alice):
    response = alice.get("/api/tasks?priority=urgent")
    assert response.status_code == 400


def test_stats(alice, bob):
    create(alice, title="a", priority="high")
    create(alice, title="b", priority="high", dueDate="2000-01-01")
    done = create(alice, title="c", dueDate="2000-01-01")
    alice.put(f"/api/tasks/{done['id']}", json={"completed": True})
    create(bob, title="not alice's", priority="high")

    response = alice.get("/api/tasks/stats")
    assert response.status_code == 200
    assert response.json() == {
        "total": 3,
        "completed": 1,
        "pending": 2,
        "highPriorityPending": 2,
        "overdue": 1,
    }


# ========== UPDATE ==========
def test_update_task(alice):
    created = create(alice, title="Original", priority="low")
    response = alice.put(f"/api/tasks/{created['id']}", json={"title": "Changed", "priority": "high"})
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Changed"
    assert data["priority"] == "high"
    assert data["updatedAt"] > created["updatedAt"]


def test_update_ignores_protected_fields(alice, bob):
    """Test: id, userId, createdAt never change, even when sent"""
    created = create(alice, title="Mine")
    bob_id = bob.get("/api/auth/me").json()["id"]

    response = alice.put(f"/api/tasks/{created['id']}", json={
        "id": "hijacked",
        "userId": bob_id,
        "user_id": bob_id,
        "createdAt": "2000-01-01T00:00:00",
        "unknownField": 42,
        "completed": True,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == created["id"]
    assert data["userId"] == created["userId"]
    assert data["createdAt"] == created["createdAt"]
    assert data["completed"] is True
    assert bob.get("/api/tasks").json() == []


def test_update_refreshes_updated_at_without_changes(alice):
    created = create(alice, title="Same")
    data = alice.put(f"/api/tasks/{created['id']}", json={}).json()
    assert data["title"] == "Same"
    assert data["updatedAt"] > created["updatedAt"]


def test_update_without_body(alice):
    """Test: a PUT with no body still touches updatedAt"""
    created = create(alice, title="Untouched", priority="high")
    response = alice.put(f"/api/tasks/{created['id']}")
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Untouched"
    assert data["priority"] == "high"
    assert data["updatedAt"] > created["updatedAt"]


def test_update_blank_title_rejected(alice):
    created = create(alice, title="Keep me")
    response = alice.put(f"/api/tasks/{created['id']}", json={"title": "  "})
    assert response.status_code == 400
    assert alice.get(f"/api/tasks/{created['id']}").json()["title"] == "Keep me"


def test_update_clears_due_date(alice):
    created = create(alice, title="Dated", dueDate="2026-11-01")
    data = alice.put(f"/api/tasks/{created['id']}", json={"dueDate": None}).json()
    assert data["dueDate"] is None


def test_update_unknown_task(alice):
    response = alice.put("/api/tasks/does-not-exist", json={"completed": True})
    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}


# ========== DELETE ==========
def test_delete_task_twice(alice):
    """Test: the second delete is a clean 404"""
    created = create(alice, title="To delete")
    response = alice.delete(f"/api/tasks/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted successfully"}

    response = alice.delete(f"/api/tasks/{created['id']}")
    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}
    assert alice.get("/api/tasks").json() == []


# ========== SCENARIO ==========
def test_full_scenario(make_client):
    client = make_client()
    response = client.post("/api/auth/signup", json={"username": "alice", "email": "a@x.com", "password": "secret1"})
    assert response.status_code == 201

    response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert response.status_code == 200
    assert "set-cookie" in response.headers

    response = client.post("/api/tasks", json={"title": "Buy milk"})
    assert response.status_code == 201
    task = response.json()
    assert task["title"] == "Buy milk"
    assert task["priority"] == "medium"
    assert task["category"] == "general"
    assert task["completed"] is False

    assert client.get("/api/tasks").json() == [task]

    response = client.put(f"/api/tasks/{task['id']}", json={"completed": True})
    assert response.status_code == 200
    updated = response.json()
    assert updated["completed"] is True
    assert updated["updatedAt"] != task["updatedAt"]

    assert client.delete(f"/api/tasks/{task['id']}").status_code == 200
    assert client.get(f"/api/tasks/{task['id']}").status_code == 404
