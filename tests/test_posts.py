# tests/test_posts.py

from tests.conftest import image_path, png_upload


def create_post(client, headers, title="Hello", description="First post", files=None):
    return client.post("/posts", headers=headers, data={"title": title, "description": description}, files=files)


# -------------------------------
# Create
# -------------------------------

def test_create_post_without_image(client, make_user):
    user, headers = make_user("Alice")

    res = create_post(client, headers)

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Post created successfully."
    assert body["data"]["image_url"] is None
    post = body["data"]["post"]
    assert post["title"] == "Hello"
    assert post["image"] is None
    assert post["user_id"] == user["id"]


def test_create_post_with_image(client, make_user):
    _, headers = make_user("Alice")

    res = create_post(client, headers, files=png_upload())

    data = res.json()["data"]
    name = data["post"]["image"]
    assert name.endswith(".png")
    assert data["image_url"] == f"http://testserver/images/{name}"
    assert image_path(name).exists()
    assert client.get(f"/images/{name}").status_code == 200


def test_create_post_requires_title_and_description(client, make_user):
    _, headers = make_user("Alice")

    missing = client.post("/posts", headers=headers, data={"description": "no title"})
    blank = create_post(client, headers, title="Hello", description="   ")

    for res in (missing, blank):
        assert res.status_code == 401
        assert res.json()["message"] == "Validation failed"
    assert blank.json()["data"]["error"] == ["The description field is required."]


def test_title_length_ignores_surrounding_whitespace(client, make_user):
    _, headers = make_user("Alice")

    fits = create_post(client, headers, title="t" * 255 + " ")
    too_long = create_post(client, headers, title="t" * 256)

    assert fits.status_code == 200
    assert fits.json()["data"]["post"]["title"] == "t" * 255
    assert too_long.status_code == 401
    assert too_long.json()["data"]["error"] == ["The title may not be greater than 255 characters."]


def test_create_post_rejects_non_image(client, make_user):
    _, headers = make_user("Alice")

    res = create_post(client, headers, files={"image": ("notes.txt", b"hello", "text/plain")})

    assert res.status_code == 401
    assert res.json()["data"]["error"] == ["The image must be a file of type: png, jpg, jpeg, gif."]


def test_posts_require_authentication(client):
    assert client.get("/posts").status_code == 401
    assert create_post(client, {}).status_code == 401


# -------------------------------
# Read
# -------------------------------

def test_index_is_not_found_when_empty(client, make_user):
    _, headers = make_user("Alice")

    res = client.get("/posts", headers=headers)

    assert res.status_code == 404
    assert res.json() == {"message": "Posts not found", "success": False}


def test_index_lists_newest_first(client, make_user):
    _, headers = make_user("Alice")
    create_post(client, headers, title="one")
    create_post(client, headers, title="two")

    res = client.get("/posts", headers=headers)

    assert res.status_code == 200
    assert [p["title"] for p in res.json()["data"]["posts"]] == ["two", "one"]


def test_show(client, make_user):
    _, headers = make_user("Alice")
    post_id = create_post(client, headers).json()["data"]["post"]["id"]

    assert client.get(f"/posts/{post_id}", headers=headers).json()["data"]["id"] == post_id
    missing = client.get("/posts/999", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Post not found"


# -------------------------------
# Update / delete
# -------------------------------

def test_owner_update_replaces_image(client, make_user):
    _, headers = make_user("Alice")
    created = create_post(client, headers, files=png_upload("old.png")).json()["data"]["post"]

    res = client.put(
        f"/posts/{created['id']}",
        headers=headers,
        data={"title": "Edited", "description": "Changed"},
        files=png_upload("new.png"),
    )

    assert res.status_code == 200
    updated = res.json()["data"]
    assert updated["title"] == "Edited"
    assert updated["image"] != created["image"]
    assert image_path(updated["image"]).exists()
    assert not image_path(created["image"]).exists()


def test_update_without_image_keeps_it(client, make_user):
    _, headers = make_user("Alice")
    created = create_post(client, headers, files=png_upload()).json()["data"]["post"]

    res = client.patch(f"/posts/{created['id']}", headers=headers, data={"title": "Edited", "description": "d"})

    assert res.status_code == 200
    assert res.json()["data"]["image"] == created["image"]
    assert image_path(created["image"]).exists()


def test_non_owner_cannot_update(client, make_user):
    _, alice = make_user("Alice")
    _, bob = make_user("Bob")
    post_id = create_post(client, alice).json()["data"]["post"]["id"]

    res = client.put(f"/posts/{post_id}", headers=bob, data={"title": "Hijacked", "description": "x"})

    assert res.status_code == 403
    assert client.get(f"/posts/{post_id}", headers=alice).json()["data"]["title"] == "Hello"


def test_update_missing_post(client, make_user):
    _, headers = make_user("Alice")

    res = client.put("/posts/42", headers=headers, data={"title": "t", "description": "d"})

    assert res.status_code == 404


def test_non_owner_cannot_delete(client, make_user):
    _, alice = make_user("Alice")
    _, bob = make_user("Bob")
    post_id = create_post(client, alice).json()["data"]["post"]["id"]

    assert client.delete(f"/posts/{post_id}", headers=bob).status_code == 403
    assert client.get(f"/posts/{post_id}", headers=alice).status_code == 200


def test_owner_delete_removes_post_and_image(client, make_user):
    _, headers = make_user("Alice")
    created = create_post(client, headers, files=png_upload()).json()["data"]["post"]

    res = client.delete(f"/posts/{created['id']}", headers=headers)

    assert res.status_code == 200
    assert res.json()["data"]["id"] == created["id"]
    assert not image_path(created["image"]).exists()
    assert client.get(f"/posts/{created['id']}", headers=headers).status_code == 404
    assert client.delete(f"/posts/{created['id']}", headers=headers).status_code == 404
