def _create(client, headers, **fields):
    return client.post("/api/categories", json=fields, headers=headers)


def test_category_crud(client, auth_headers):
    resp = _create(client, auth_headers, name="Web Development", description="All things web")
    assert resp.status_code == 201
    category = resp.get_json()
    assert category["slug"] == "web-development"
    assert category["description"] == "All things web"

    updated = client.put(
        f"/api/categories/{category['id']}",
        json={"name": "Web", "color": "#ff0000"},
        headers=auth_headers,
    ).get_json()
    assert (updated["name"], updated["slug"], updated["color"]) == ("Web", "web", "#ff0000")

    listed = client.get("/api/categories").get_json()["categories"]
    assert [(c["name"], c["post_count"]) for c in listed] == [("Web", 0)]

    assert client.delete(f"/api/categories/{category['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/categories/{category['id']}").status_code == 404


def test_category_name_or_slug_clash_is_conflict(client, auth_headers):
    _create(client, auth_headers, name="News")

    assert _create(client, auth_headers, name="News").status_code == 409
    assert _create(client, auth_headers, name="Latest", slug="news").status_code == 409


def test_category_with_posts_cannot_be_deleted(client, auth_headers, create_post):
    category = _create(client, auth_headers, name="Guides").get_json()
    create_post(category_id=category["id"])

    resp = client.delete(f"/api/categories/{category['id']}", headers=auth_headers)

    assert resp.status_code == 400
    assert client.get(f"/api/categories/{category['id']}").get_json()["post_count"] == 1


def test_category_rejects_unknown_fields(client, auth_headers):
    assert _create(client, auth_headers, name="Guides", parent="x").status_code == 400
