def _tag_names(post):
    return sorted(t["name"] for t in post["tags"])


def test_create_post_derives_slug_and_tags(client, auth_headers, admin):
    resp = client.post(
        "/api/posts",
        json={"title": "My First Post", "content": "<p>Hi</p>", "tags": ["News", "Tutorial"]},
        headers=auth_headers,
    )

    assert resp.status_code == 201
    post = resp.get_json()
    assert post["slug"] == "my-first-post"
    assert post["permalink"] == "https://blog.example.com/my-first-post/"
    assert post["status"] == "DRAFT"
    assert post["author"]["id"] == admin["id"]
    assert _tag_names(post) == ["News", "Tutorial"]
    assert {t["slug"] for t in post["tags"]} == {"news", "tutorial"}


def test_saving_same_tags_twice_does_not_duplicate(client, auth_headers, create_post):
    post = create_post(title="My First Post", tags=["News", "Tutorial"])

    resp = client.put(
        f"/api/posts/{post['id']}",
        json={"title": "My First Post", "tags": ["News", "Tutorial"]},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    updated = resp.get_json()
    assert updated["slug"] == "my-first-post"
    assert _tag_names(updated) == ["News", "Tutorial"]
    tags = client.get("/api/tags").get_json()["tags"]
    assert sorted((t["name"], t["post_count"]) for t in tags) == [("News", 1), ("Tutorial", 1)]


def test_tags_accept_objects(create_post):
    post = create_post(tags=[{"name": "React", "slug": "react"}, {"name": "react"}])

    assert _tag_names(post) == ["React"]


def test_omitted_tags_clear_associations(client, auth_headers, create_post):
    post = create_post(tags=["News"])

    updated = client.put(
        f"/api/posts/{post['id']}", json={"title": "My First Post"}, headers=auth_headers
    ).get_json()

    assert updated["tags"] == []


def test_duplicate_titles_get_numbered_slugs(create_post):
    first = create_post(title="Hello World")
    second = create_post(title="Hello World")

    assert first["slug"] == "hello-world"
    assert second["slug"] == "hello-world-2"


def test_explicit_duplicate_slug_is_a_conflict(client, auth_headers, create_post):
    create_post(title="Hello", slug="hello")

    resp = client.post("/api/posts", json={"title": "Other", "slug": "hello"}, headers=auth_headers)

    assert resp.status_code == 409
    assert "conflict" in resp.get_json()["error"]


def test_invalid_slug_is_rejected(client, auth_headers):
    resp = client.post("/api/posts", json={"title": "Hello", "slug": "Not A Slug"}, headers=auth_headers)

    assert resp.status_code == 400


def test_publishing_sets_published_at(create_post):
    post = create_post(status="published")

    assert post["status"] == "PUBLISHED"
    assert post["published_at"] is not None
    # stored as naive UTC
    assert not post["published_at"].endswith("+00:00")


def test_payload_validation(client, auth_headers):
    assert client.post("/api/posts", json={"content": "no title"}, headers=auth_headers).status_code == 400
    assert client.post("/api/posts", json={"title": "x", "status": "LIVE"}, headers=auth_headers).status_code == 400
    assert client.post("/api/posts", json={"title": "x", "bogus": 1}, headers=auth_headers).status_code == 400
    assert client.post("/api/posts", json={"title": "x", "tags": "News"}, headers=auth_headers).status_code == 400
    assert client.post("/api/posts", json={"title": "x", "category_id": "nope"}, headers=auth_headers).status_code == 400


def test_seo_metadata_is_upserted(client, auth_headers, create_post):
    post = create_post(seo_metadata={"meta_title": "First", "keywords": ["cms", "python"]})
    assert post["seo_metadata"]["meta_title"] == "First"
    assert post["seo_metadata"]["keywords"] == ["cms", "python"]

    updated = client.put(
        f"/api/posts/{post['id']}",
        json={"title": "My First Post", "seo_metadata": {"meta_title": "Second"}},
        headers=auth_headers,
    ).get_json()

    assert updated["seo_metadata"]["meta_title"] == "Second"
    assert updated["seo_metadata"]["keywords"] == []


def test_list_posts_filters_and_paginates(client, create_post):
    for i in range(3):
        create_post(title=f"Draft {i}")
    create_post(title="Live", status="PUBLISHED", sticky=True)

    data = client.get("/api/posts?limit=2").get_json()
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 4, "total_pages": 2}
    assert data["posts"][0]["title"] == "Live"

    published = client.get("/api/posts?status=published").get_json()
    assert [p["title"] for p in published["posts"]] == ["Live"]

    found = client.get("/api/posts?search=Draft%201").get_json()
    assert [p["title"] for p in found["posts"]] == ["Draft 1"]


def test_filter_by_category(client, auth_headers, create_post):
    category = client.post("/api/categories", json={"name": "Guides"}, headers=auth_headers).get_json()
    create_post(title="In category", category_id=category["id"])
    create_post(title="Elsewhere")

    data = client.get(f"/api/posts?categoryId={category['id']}").get_json()

    assert [p["title"] for p in data["posts"]] == ["In category"]
    assert data["posts"][0]["category"]["slug"] == "guides"


def test_get_and_delete_post(client, auth_headers, create_post):
    post = create_post(tags=["News"], seo_metadata={"meta_title": "x"})

    assert client.get(f"/api/posts/{post['id']}").get_json()["title"] == "My First Post"
    assert client.delete(f"/api/posts/{post['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/posts/{post['id']}").status_code == 404
    # the tag survives its last post
    assert client.get("/api/tags").get_json()["tags"][0]["post_count"] == 0


def test_unknown_post_is_404(client, auth_headers):
    assert client.get("/api/posts/missing").status_code == 404
    resp = client.put("/api/posts/missing", json={"title": "x"}, headers=auth_headers)
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Post not found"}


def test_update_without_slug_keeps_custom_slug(client, auth_headers, create_post):
    post = create_post(title="Hello World", slug="custom-link")

    updated = client.put(
        f"/api/posts/{post['id']}", json={"title": "Hello World"}, headers=auth_headers
    ).get_json()

    assert updated["slug"] == "custom-link"


def test_title_edit_keeps_derived_slug(client, auth_headers, create_post):
    post = create_post(title="Hello World")

    updated = client.put(
        f"/api/posts/{post['id']}", json={"title": "Hello World (edited)"}, headers=auth_headers
    ).get_json()

    assert updated["title"] == "Hello World (edited)"
    assert updated["slug"] == "hello-world"


def test_explicit_slug_on_update_replaces_it(client, auth_headers, create_post):
    post = create_post(title="Hello World")

    updated = client.put(
        f"/api/posts/{post['id']}", json={"title": "Hello World", "slug": "hello"}, headers=auth_headers
    ).get_json()

    assert updated["slug"] == "hello"
