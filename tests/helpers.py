# tests/helpers.py


def register(client, name="Ada", email="ada@example.com", password="secret1"):
    resp = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def create_task(client, headers, **fields):
    fields.setdefault("title", "Write report")
    resp = client.post("/api/tasks", json=fields, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()
