import pytest

from app.schemas import YOUTUBE_LINK_RE

LINK = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


@pytest.mark.parametrize(
    ("link", "ok"),
    [
        (LINK, True),
        ("https://youtu.be/dQw4w9WgXcQ", True),
        ("http://youtube.com/watch?v=dQw4w9WgXcQ", True),
        ("https://vimeo.com/123456", False),
        ("https://www.youtube.com/watch?v=short", False),
        ("youtube.com/watch?v=dQw4w9WgXcQ", False),
    ],
)
def test_youtube_link_pattern(link, ok):
    assert bool(YOUTUBE_LINK_RE.match(link)) is ok


def test_create_tutorial_rejects_duplicate_link(admin_client):
    r = admin_client.post("/api/admin/tutorials", json={"title": "Hiragana", "link": LINK})
    assert r.status_code == 200
    r = admin_client.post("/api/admin/tutorials", json={"title": "Again", "link": LINK})
    assert r.status_code == 400
    assert r.json()["message"] == "A tutorial with this link already exists."


def test_create_tutorial_validation(admin_client):
    r = admin_client.post("/api/admin/tutorials", json={"title": "", "link": "https://example.com"})
    assert r.status_code == 400
    assert r.json()["message"] == "Title is required.\nInvalid YouTube URL."


def test_update_and_delete_tutorial(admin_client, user_client):
    tutorial_id = admin_client.post(
        "/api/admin/tutorials", json={"title": "Hiragana", "link": LINK}
    ).json()["tutorial"]["id"]

    r = admin_client.patch(f"/api/admin/tutorials/{tutorial_id}", json={"title": "Katakana"})
    assert r.status_code == 200
    assert r.json()["tutorial"] == {"id": tutorial_id, "title": "Katakana", "link": LINK}

    r = admin_client.patch(f"/api/admin/tutorials/{tutorial_id}", json={"link": "not a link"})
    assert r.status_code == 400

    r = user_client.get("/api/user/tutorials")
    assert r.status_code == 200
    assert [t["title"] for t in r.json()["tutorials"]] == ["Katakana"]

    assert admin_client.delete(f"/api/admin/tutorials/{tutorial_id}").status_code == 200
    r = admin_client.get(f"/api/admin/tutorials/{tutorial_id}")
    assert r.status_code == 400
    assert r.json()["message"] == "No Tutorial with this ID exists."


def test_update_tutorial_rejects_link_of_another_tutorial(admin_client):
    other = "https://youtu.be/abcdefghijk"
    admin_client.post("/api/admin/tutorials", json={"title": "Hiragana", "link": LINK})
    tutorial_id = admin_client.post(
        "/api/admin/tutorials", json={"title": "Katakana", "link": other}
    ).json()["tutorial"]["id"]

    r = admin_client.patch(f"/api/admin/tutorials/{tutorial_id}", json={"link": LINK})
    assert r.status_code == 400
    assert r.json()["message"] == "A tutorial with this link already exists."

    # keeping its own link is not a clash
    r = admin_client.patch(f"/api/admin/tutorials/{tutorial_id}", json={"title": "Kata", "link": other})
    assert r.status_code == 200
    assert r.json()["tutorial"]["link"] == other
