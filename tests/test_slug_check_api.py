def test_check_unique_slug(client):
    resp = client.post("/api/slugs/check", json={"text": "Hello World", "type": "post"})

    assert resp.status_code == 200
    assert resp.get_json() == {"slug": "hello-world", "isUnique": True, "suggestions": []}


def test_check_colliding_slug_suggests_alternatives(client, create_post):
    create_post(title="Hello World")

    data = client.post("/api/slugs/check", json={"text": "Hello World", "type": "post"}).get_json()

    assert data["slug"] == "hello-world-2"
    assert data["isUnique"] is False
    assert data["suggestions"] == ["hello-world-2", "hello-world-alternative"]


def test_check_skips_first_free_suffix(client, create_post):
    create_post(title="Hello World")
    create_post(title="Hello World")

    data = client.post("/api/slugs/check", json={"text": "hello world", "type": "post"}).get_json()

    assert data["slug"] == "hello-world-3"


def test_check_excludes_current_record(client, create_post):
    post = create_post(title="Hello World")

    data = client.post(
        "/api/slugs/check",
        json={"text": "Hello World", "type": "post", "currentId": post["id"]},
    ).get_json()

    assert data == {"slug": "hello-world", "isUnique": True, "suggestions": []}


def test_post_and_page_namespaces_are_separate(client, create_post):
    create_post(title="About")

    data = client.post("/api/slugs/check", json={"text": "About", "type": "page"}).get_json()

    assert data["slug"] == "about"
    assert data["isUnique"] is True


def test_check_requires_text_and_type(client):
    resp = client.post("/api/slugs/check", json={"text": "Hello"})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Text and type are required"}

    resp = client.post("/api/slugs/check", json={"type": "post"})
    assert resp.status_code == 400


def test_check_rejects_unknown_type(client):
    resp = client.post("/api/slugs/check", json={"text": "Hello", "type": "product"})

    assert resp.status_code == 400
    assert resp.get_json() == {"error": 'Type must be either "post" or "page"'}


def test_check_rejects_text_without_slug_characters(client):
    resp = client.post("/api/slugs/check", json={"text": "!!!", "type": "post"})

    assert resp.status_code == 400
