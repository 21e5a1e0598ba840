import pytest


@pytest.fixture
def published(client, auth_headers, create_post):
    category = client.post("/api/categories", json={"name": "Guides"}, headers=auth_headers).get_json()
    post = create_post(title="Hello World", status="PUBLISHED", category_id=category["id"], tags=["News"])
    create_post(title="Secret Draft", tags=["News"])
    return post


def test_permalink_resolves_published_post(client, published):
    resp = client.get("/hello-world/")

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["type"] == "post"
    assert data["post"]["id"] == published["id"]


def test_permalink_falls_back_to_page(client, auth_headers):
    client.post("/api/pages", json={"title": "About", "status": "PUBLISHED"}, headers=auth_headers)

    data = client.get("/about").get_json()

    assert data["type"] == "page"
    assert data["page"]["slug"] == "about"


def test_post_wins_over_page_with_same_slug(client, auth_headers, create_post):
    create_post(title="About", status="PUBLISHED")
    client.post("/api/pages", json={"title": "About", "status": "PUBLISHED"}, headers=auth_headers)

    assert client.get("/about/").get_json()["type"] == "post"


def test_drafts_are_not_public(client, published):
    assert client.get("/secret-draft/").status_code == 404
    assert client.get("/no-such-thing/").get_json() == {"error": "Page not found"}


def test_blog_lists_published_posts(client, published):
    posts = client.get("/blog").get_json()["posts"]

    assert [p["slug"] for p in posts] == ["hello-world"]


def test_archives(client, published):
    category = client.get("/category/guides").get_json()
    assert category["category"]["name"] == "Guides"
    assert [p["slug"] for p in category["posts"]] == ["hello-world"]

    tag = client.get("/tag/news").get_json()
    assert tag["tag"]["slug"] == "news"
    assert [p["slug"] for p in tag["posts"]] == ["hello-world"]

    assert client.get("/category/missing").status_code == 404
    assert client.get("/tag/missing").status_code == 404


def test_home(client, published):
    data = client.get("/").get_json()

    assert data["site_url"] == "https://blog.example.com"
    assert [p["slug"] for p in data["posts"]] == ["hello-world"]
    assert [c["slug"] for c in data["categories"]] == ["guides"]


def test_permalink_survives_title_edit(client, auth_headers, published):
    resp = client.put(
        f"/api/posts/{published['id']}",
        json={"title": "Hello World (edited)", "status": "PUBLISHED"},
        headers=auth_headers,
    )
    assert resp.status_code == 200

    data = client.get("/hello-world/").get_json()

    assert data["post"]["title"] == "Hello World (edited)"


def test_page_permalink_survives_title_edit(client, auth_headers):
    page = client.post(
        "/api/pages", json={"title": "About", "status": "PUBLISHED"}, headers=auth_headers
    ).get_json()
    client.put(
        f"/api/pages/{page['id']}", json={"title": "About Us", "status": "PUBLISHED"}, headers=auth_headers
    )

    resp = client.get("/about/")

    assert resp.status_code == 200
    assert resp.get_json()["page"]["title"] == "About Us"
