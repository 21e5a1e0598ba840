def test_tag_crud(client, auth_headers):
    resp = client.post("/api/tags", json={"name": "Machine Learning", "color": "#336699"}, headers=auth_headers)
    assert resp.status_code == 201
    tag = resp.get_json()
    assert tag["slug"] == "machine-learning"
    assert tag["post_count"] == 0

    updated = client.put(
        f"/api/tags/{tag['id']}", json={"name": "ML", "slug": "ml"}, headers=auth_headers
    ).get_json()
    assert (updated["name"], updated["slug"]) == ("ML", "ml")

    assert client.get(f"/api/tags/{tag['id']}").get_json()["name"] == "ML"
    assert client.delete(f"/api/tags/{tag['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/tags/{tag['id']}").status_code == 404


def test_tag_name_clash_is_conflict(client, auth_headers):
    client.post("/api/tags", json={"name": "News"}, headers=auth_headers)

    resp = client.post("/api/tags", json={"name": "News"}, headers=auth_headers)

    assert resp.status_code == 409


def test_search_tags(client, auth_headers):
    for name in ("Python", "Pyramid", "Rust"):
        client.post("/api/tags", json={"name": name}, headers=auth_headers)

    tags = client.get("/api/tags?search=py").get_json()["tags"]

    assert [t["name"] for t in tags] == ["Pyramid", "Python"]


def test_renamed_tag_is_reused_by_name(client, auth_headers, create_post):
    tag = client.post("/api/tags", json={"name": "C#", "slug": "csharp"}, headers=auth_headers).get_json()

    post = create_post(tags=["C#"])

    assert [t["id"] for t in post["tags"]] == [tag["id"]]


def test_deleting_tag_unlinks_posts(client, auth_headers, create_post):
    post = create_post(tags=["News", "Tutorial"])
    news = next(t for t in post["tags"] if t["name"] == "News")

    client.delete(f"/api/tags/{news['id']}", headers=auth_headers)

    fetched = client.get(f"/api/posts/{post['id']}").get_json()
    assert [t["name"] for t in fetched["tags"]] == ["Tutorial"]


def test_tag_writes_require_auth(client):
    assert client.post("/api/tags", json={"name": "News"}).status_code == 401
