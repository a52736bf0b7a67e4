def test_created_user_round_trips_through_get(client, register):
    profile = {
        "sex": "F",
        "birthDate": "1990-05-17",
        "department": "Research",
        "telephone": "555-0100",
        "email": "alice@example.com",
        "role": "ADMIN",
    }
    created = register("alice", **profile)["data"]

    body = client.get(f"/api/users/{created['id']}").json()

    assert body["code"] == 200
    assert body["data"] == created
    assert "password" not in body["data"]
    for key, value in profile.items():
        assert body["data"][key] == value
    assert body["data"]["createTime"] is not None


def test_get_unknown_user_is_not_found(client):
    body = client.get("/api/users/999").json()

    assert body == {"code": 404, "message": "User does not exist"}


def test_delete_user(client, register):
    user_id = register("alice")["data"]["id"]

    assert client.delete(f"/api/users/del/{user_id}").json()["code"] == 200
    assert client.get(f"/api/users/{user_id}").json()["code"] == 404


def test_delete_unknown_user_fails(client):
    body = client.delete("/api/users/del/999").json()

    assert body["code"] == 500


def test_page_listing(client, register):
    for i in range(25):
        register(f"user{i:02d}")

    body = client.get("/api/users/page", params={"pageNum": 1, "pageSize": 10}).json()

    assert body["code"] == 200
    assert len(body["data"]) == 10
    assert body["total"] == 25
    assert body["pages"] == 3
    assert body["current"] == 1
    assert body["size"] == 10
    assert [u["name"] for u in body["data"]] == [f"user{i:02d}" for i in range(10)]
    assert all("password" not in u for u in body["data"])

    last = client.get("/api/users/page", params={"pageNum": 3, "pageSize": 10}).json()
    assert [u["name"] for u in last["data"]] == [f"user{i:02d}" for i in range(20, 25)]


def test_page_listing_defaults(client, register):
    register("alice")

    body = client.get("/api/users/page").json()
    assert (body["current"], body["size"], body["total"], body["pages"]) == (1, 10, 1, 1)

    body = client.get("/api/users/page", params={"pageNum": 0, "pageSize": -5}).json()
    assert (body["current"], body["size"]) == (1, 10)


def test_page_listing_rejects_non_numeric_page(client):
    body = client.get("/api/users/page", params={"pageNum": "abc"}).json()

    assert body["code"] == 400


def test_update_without_id_is_bad_request(client):
    body = client.put("/api/users/update", json={"email": "x@example.com"}).json()

    assert body["code"] == 400


def test_update_to_taken_name_is_duplicate(client, register):
    register("alice")
    bob_id = register("bob")["data"]["id"]

    body = client.put("/api/users/update", json={"id": bob_id, "name": "alice"}).json()

    assert body == {"code": 400, "message": "Update failed: user name already exists"}
    assert client.get(f"/api/users/{bob_id}").json()["data"]["name"] == "bob"


def test_update_unknown_user_fails(client):
    body = client.put("/api/users/update", json={"id": 999, "email": "x@example.com"}).json()

    assert body["code"] == 500


def test_update_only_touches_supplied_fields(client, register):
    created = register("alice", department="Research", email="old@example.com")["data"]

    body = client.put(
        "/api/users/update", json={"id": created["id"], "email": "new@example.com"}
    ).json()

    assert body["code"] == 200
    assert body["data"]["email"] == "new@example.com"
    assert body["data"]["department"] == "Research"
    assert body["data"]["name"] == "alice"


def test_update_password_changes_login(client, register):
    user_id = register("alice", password="old-pw")["data"]["id"]

    client.put("/api/users/update", json={"id": user_id, "password": "new-pw"})

    old = client.post("/api/users/login", json={"name": "alice", "password": "old-pw"})
    new = client.post("/api/users/login", json={"name": "alice", "password": "new-pw"})
    assert old.json()["code"] == 401
    assert new.json()["code"] == 200


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
