"""
End-to-end tests through the HTTP API.
"""
from datetime import datetime, timedelta, timezone


def test_health_endpoints(client):
    for path in ("/", "/health"):
        response = client.get(path)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["status"] == "healthy"

    assert client.get("/api").json()["data"]["endpoints"]["todos"] == "/api/todos"


def test_register_login_and_me(client, register):
    user_id, headers = register("alice@example.com", name="Alice")

    login = client.post("/api/auth/login", json={"email": "ALICE@example.com", "password": "secret123"})
    assert login.status_code == 200
    assert login.json()["user"]["id"] == user_id
    assert "password_hash" not in login.json()["user"]

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    data = me.json()["data"]
    assert data["user"]["email"] == "alice@example.com"
    assert data["token_info"]["remaining_time"] > 0


def test_duplicate_registration_conflicts(client, register):
    register("a@b.com")

    response = client.post("/api/auth/register", json={"email": "A@B.COM", "password": "secret123", "name": "Other"})

    assert response.status_code == 409
    assert response.json()["success"] is False
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"


def test_bad_credentials_and_tokens(client, register):
    register("alice@example.com")

    login = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-password"})
    assert login.status_code == 401
    assert login.json()["error"]["code"] == "INVALID_CREDENTIALS"

    missing = client.get("/api/todos")
    assert missing.status_code == 401
    assert missing.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"

    invalid = client.get("/api/todos", headers={"Authorization": "Bearer nonsense"})
    assert invalid.status_code == 401
    assert invalid.json()["error"]["code"] == "INVALID_TOKEN"

    verify = client.post("/api/auth/verify", json={"token": "nonsense"})
    assert verify.status_code == 200
    assert verify.json()["data"]["valid"] is False


def test_validation_errors_use_error_envelope(client, register):
    _, headers = register("alice@example.com")
    project_id = client.post("/api/projects", json={"name": "Alpha"}, headers=headers).json()["data"]["id"]

    blank = client.post("/api/todos", json={"title": "   ", "project_id": project_id}, headers=headers)
    script = client.post("/api/todos", json={"title": "<SCRIPT>x", "project_id": project_id}, headers=headers)
    too_long = client.post("/api/todos", json={"title": "x" * 256, "project_id": project_id}, headers=headers)
    bad_email = client.post("/api/auth/register", json={"email": "nope", "password": "secret123", "name": "N"})

    for response in (blank, script, too_long, bad_email):
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_todo_lifecycle(client, register):
    _, headers = register("alice@example.com")
    project_id = client.post("/api/projects", json={"name": "Alpha"}, headers=headers).json()["data"]["id"]
    due = (datetime.now(timezone.utc) + timedelta(days=3)).isoformat()

    created = client.post(
        "/api/todos",
        json={"title": "Write docs", "project_id": project_id, "priority": "HIGH", "due_date": due},
        headers=headers,
    )
    assert created.status_code == 201
    todo = created.json()["data"]
    assert todo["status"] == "PENDING"
    assert todo["is_overdue"] is False
    assert todo["created_at"] == todo["updated_at"]

    updated = client.put(f"/api/todos/{todo['id']}", json={"title": "Write better docs"}, headers=headers)
    assert updated.json()["data"]["title"] == "Write better docs"

    toggled = client.patch(f"/api/todos/{todo['id']}/toggle", headers=headers)
    assert toggled.json()["data"]["status"] == "COMPLETED"

    listed = client.get("/api/todos", params={"completed": "true"}, headers=headers).json()
    assert listed["count"] == 1

    empty_update = client.put(f"/api/todos/{todo['id']}", json={}, headers=headers)
    assert empty_update.status_code == 400

    assert client.delete(f"/api/todos/{todo['id']}", headers=headers).status_code == 200
    second = client.delete(f"/api/todos/{todo['id']}", headers=headers)
    assert second.status_code == 404
    assert second.json()["error"]["code"] == "NOT_FOUND"


def test_priority_sort_through_api(client, register):
    _, headers = register("alice@example.com")
    project_id = client.post("/api/projects", json={"name": "Alpha"}, headers=headers).json()["data"]["id"]
    for priority in ("HIGH", "LOW", "MEDIUM"):
        client.post("/api/todos", json={"title": priority, "project_id": project_id, "priority": priority}, headers=headers)

    response = client.get(
        f"/api/projects/{project_id}/todos", params={"sort": "PRIORITY", "order": "ASC"}, headers=headers
    )

    assert [t["priority"] for t in response.json()["data"]] == ["LOW", "MEDIUM", "HIGH"]


def test_collaboration_flow(client, register):
    alice_id, alice = register("alice@example.com", name="Alice")
    bob_id, bob = register("bob@example.com", name="Bob")

    project = client.post("/api/projects", json={"name": "Shared"}, headers=alice).json()["data"]
    assert project["member_count"] == 1

    invited = client.post(f"/api/projects/{project['id']}/members", json={"email": "bob@example.com"}, headers=alice)
    assert invited.status_code == 201
    assert invited.json()["data"]["role"] == "MEMBER"

    bobs_todo = client.post(
        "/api/todos", json={"title": "For Alice", "project_id": project["id"], "assigned_to": alice_id}, headers=bob
    ).json()["data"]
    alices_todo = client.post("/api/todos", json={"title": "Alice's", "project_id": project["id"]}, headers=alice).json()["data"]

    denied = client.delete(f"/api/todos/{alices_todo['id']}", headers=bob)
    assert denied.status_code == 403
    assert denied.json()["error"]["code"] == "PERMISSION_DENIED"

    assert client.delete(f"/api/todos/{bobs_todo['id']}", headers=alice).status_code == 200
    assert client.delete(f"/api/todos/{alices_todo['id']}", headers=alice).status_code == 200

    todos = client.get(f"/api/projects/{project['id']}/todos", headers=alice).json()
    assert todos["data"] == []
    assert todos["count"] == 0

    detail = client.get(f"/api/projects/{project['id']}", headers=bob).json()["data"]
    assert detail["current_user_role"] == "MEMBER"
    assert {m["user_name"] for m in detail["members"]} == {"Alice", "Bob"}


def test_membership_management(client, register):
    _, alice = register("alice@example.com")
    bob_id, bob = register("bob@example.com")
    project_id = client.post("/api/projects", json={"name": "Shared"}, headers=alice).json()["data"]["id"]
    client.post(f"/api/projects/{project_id}/members", json={"email": "bob@example.com", "role": "VIEWER"}, headers=alice)

    owner_invite = client.post(
        f"/api/projects/{project_id}/members", json={"email": "bob@example.com", "role": "OWNER"}, headers=alice
    )
    assert owner_invite.status_code == 400

    viewer_todo = client.post("/api/todos", json={"title": "nope", "project_id": project_id}, headers=bob)
    assert viewer_todo.status_code == 403

    promoted = client.put(f"/api/projects/{project_id}/members/{bob_id}/role", json={"role": "ADMIN"}, headers=alice)
    assert promoted.json()["data"]["role"] == "ADMIN"

    members = client.get(f"/api/projects/{project_id}/members", headers=alice).json()
    assert members["count"] == 2

    assert client.post(f"/api/projects/{project_id}/leave", headers=bob).status_code == 200
    assert client.get(f"/api/projects/{project_id}", headers=bob).status_code == 403
    assert client.post(f"/api/projects/{project_id}/leave", headers=alice).status_code == 403

    assert client.delete(f"/api/projects/{project_id}", headers=alice).status_code == 200
    assert client.get("/api/projects", headers=alice).json()["count"] == 0


def test_todo_filters_on_project_and_global_routes(client, register):
    _, headers = register("alice@example.com")
    alpha = client.post("/api/projects", json={"name": "Alpha"}, headers=headers).json()["data"]["id"]
    beta = client.post("/api/projects", json={"name": "Beta"}, headers=headers).json()["data"]["id"]
    urgent = client.post(
        "/api/todos", json={"title": "urgent", "project_id": alpha, "priority": "HIGH"}, headers=headers
    ).json()["data"]
    done = client.post(
        "/api/todos", json={"title": "done", "project_id": alpha, "priority": "HIGH"}, headers=headers
    ).json()["data"]
    client.patch(f"/api/todos/{done['id']}/toggle", headers=headers)
    client.post("/api/todos", json={"title": "other", "project_id": beta, "priority": "HIGH"}, headers=headers)

    scoped = client.get(
        f"/api/projects/{alpha}/todos", params={"priority": "high", "completed": "false"}, headers=headers
    )
    global_view = client.get("/api/todos", params={"project_id": beta}, headers=headers)
    everything = client.get("/api/todos", params={"priority": "High"}, headers=headers)

    assert scoped.status_code == 200
    assert [t["id"] for t in scoped.json()["data"]] == [urgent["id"]]
    assert [t["title"] for t in global_view.json()["data"]] == ["other"]
    assert everything.json()["count"] == 3


def test_removed_member_loses_assignments(client, register):
    _, alice = register("alice@example.com", name="Alice")
    bob_id, bob = register("bob@example.com", name="Bob")
    project_id = client.post("/api/projects", json={"name": "Shared"}, headers=alice).json()["data"]["id"]
    client.post(f"/api/projects/{project_id}/members", json={"email": "bob@example.com", "role": "member"}, headers=alice)
    todo = client.post(
        "/api/todos", json={"title": "for bob", "project_id": project_id, "assigned_to": bob_id}, headers=alice
    ).json()["data"]
    assert todo["assigned_to"] == bob_id

    removed = client.delete(f"/api/projects/{project_id}/members/{bob_id}", headers=alice)

    assert removed.status_code == 200
    assert client.get(f"/api/todos/{todo['id']}", headers=alice).json()["data"]["assigned_to"] is None
    assigned = client.get(f"/api/projects/{project_id}/todos", params={"assigned_to": bob_id}, headers=alice)
    assert assigned.json()["count"] == 0


def test_members_endpoint_lists_owner_first(client, register):
    _, alice = register("alice@example.com", name="Alice")
    register("bob@example.com", name="Bob")
    register("carol@example.com", name="Carol")
    project_id = client.post("/api/projects", json={"name": "Shared"}, headers=alice).json()["data"]["id"]
    client.post(f"/api/projects/{project_id}/members", json={"email": "bob@example.com", "role": "viewer"}, headers=alice)
    client.post(f"/api/projects/{project_id}/members", json={"email": "carol@example.com", "role": "admin"}, headers=alice)

    members = client.get(f"/api/projects/{project_id}/members", headers=alice).json()["data"]

    assert [(m["user_name"], m["role"]) for m in members] == [("Alice", "OWNER"), ("Carol", "ADMIN"), ("Bob", "VIEWER")]


def test_profile_endpoints(client, register):
    alice_id, alice = register("alice@example.com", name="Alice")
    _, bob = register("bob@example.com", name="Bob")

    updated = client.put(
        "/api/users/profile", json={"name": "Alicia", "profile_image_url": "https://img.example.com/a.png"}, headers=alice
    )
    seen_by_bob = client.get(f"/api/users/profile/{alice_id}", headers=bob)

    assert updated.status_code == 200
    assert updated.json()["data"]["name"] == "Alicia"
    assert seen_by_bob.json()["data"]["profile_image_url"] == "https://img.example.com/a.png"
    assert "password_hash" not in seen_by_bob.json()["data"]
    assert client.get("/api/auth/me", headers=alice).json()["data"]["user"]["name"] == "Alicia"

    missing = client.get("/api/users/profile/nobody", headers=bob)
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "USER_NOT_FOUND"
    assert client.put("/api/users/profile", json={}, headers=alice).status_code == 400
    assert client.put("/api/users/profile", json={"name": "<script>x</script>"}, headers=alice).status_code == 400
    assert client.get(f"/api/users/profile/{alice_id}").status_code == 401
