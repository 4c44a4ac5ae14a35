"""Tests for the learning library: uploads, streaming, shares, workshops and progress"""

from datetime import timedelta

import pytest

from kisandecks.domain.learning.service import parse_range_header
from kisandecks.errors import RangeNotSatisfiable
from kisandecks.models import ContentShare, utcnow

from .conftest import FARMER_PASSWORD, FARMER_PHONE

MEDIA_BYTES = b"0123456789" * 10

WORKSHOP = {
    "title": "Drip irrigation basics",
    "category": "irrigation",
    "trainerName": "Suresh Patil",
    "scheduledAt": "2026-11-20T10:00:00",
}


def _upload_video(client, title="Gehun ki buvai"):
    response = client.post(
        "/admin/learning/upload/video",
        files={"video": ("clip.mp4", MEDIA_BYTES, "video/mp4")},
        data={"title": title, "category": "crop-management", "duration": "120"},
    )
    assert response.status_code == 200
    return response.json()["content"]


def _create_record(client, **overrides):
    payload = {"type": "audio", "title": "Mandi news", "category": "market", "filePath": "/missing/file.mp3"}
    response = client.post("/learning/content", json={**payload, **overrides})
    assert response.status_code == 201
    return response.json()


class TestParseRangeHeader:
    @pytest.mark.parametrize(
        "header, expected",
        [
            ("bytes=0-9", (0, 9)),
            ("bytes=5-", (5, 99)),
            ("bytes=90-500", (90, 99)),
            ("bytes=-10", (90, 99)),
            ("bytes=-500", (0, 99)),
            ("bytes=0-1, 5-6", (0, 1)),
        ],
    )
    def test_valid_ranges(self, header, expected):
        assert parse_range_header(header, 100) == expected

    @pytest.mark.parametrize("header", [None, "", "items=0-9", "bytes=abc-def"])
    def test_unusable_headers_are_ignored(self, header):
        assert parse_range_header(header, 100) is None

    @pytest.mark.parametrize("header", ["bytes=100-", "bytes=50-10", "bytes=-0"])
    def test_unsatisfiable(self, header):
        with pytest.raises(RangeNotSatisfiable) as exc_info:
            parse_range_header(header, 100)

        assert exc_info.value.status_code == 416
        assert exc_info.value.headers == {"Content-Range": "bytes */100"}


class TestContent:
    def test_upload_requires_admin(self, client):
        response = client.post(
            "/admin/learning/upload/video", files={"video": ("clip.mp4", MEDIA_BYTES, "video/mp4")}
        )

        assert response.status_code == 401

    def test_upload_and_list(self, admin_client):
        content = _upload_video(admin_client)

        assert content["type"] == "video"
        assert content["fileSize"] == len(MEDIA_BYTES)
        assert content["duration"] == 120
        assert content["filePath"].startswith("/uploads/videos/")

        listed = admin_client.get("/learning/content", params={"type": "video"}).json()
        assert [c["id"] for c in listed] == [content["id"]]
        assert admin_client.get("/learning/content", params={"q": "buvai"}).json()[0]["id"] == content["id"]
        assert admin_client.get("/learning/content", params={"q": "tractor"}).json() == []

    def test_upload_defaults(self, admin_client):
        response = admin_client.post(
            "/admin/learning/upload/audio", files={"audio": ("talk.mp3", MEDIA_BYTES, "audio/mpeg")}
        )

        content = response.json()["content"]
        assert content["title"] == "Untitled Audio"
        assert content["category"] == "crop-management"
        assert content["language"] == "hindi"

    def test_upload_requires_file(self, admin_client):
        response = admin_client.post("/admin/learning/upload/video", data={"title": "No file"})

        assert response.status_code == 400
        assert response.json()["error"] == "Video file is required"

    def test_upload_rejects_wrong_type(self, admin_client):
        response = admin_client.post(
            "/admin/learning/upload/video", files={"video": ("notes.txt", b"hello", "text/plain")}
        )

        assert response.status_code == 400
        assert "Unsupported video type" in response.json()["error"]

    def test_view_counts(self, admin_client):
        content = _create_record(admin_client)

        admin_client.get(f"/learning/content/{content['id']}")
        viewed = admin_client.get(f"/learning/content/{content['id']}").json()

        assert viewed["viewCount"] == 2

    def test_unknown_content(self, client):
        response = client.get("/learning/content/999")

        assert response.status_code == 404
        assert response.json()["error"] == "Content not found"

    def test_invalid_type(self, admin_client):
        response = admin_client.post(
            "/learning/content", json={"type": "pdf", "title": "x", "category": "y", "filePath": "/f"}
        )

        assert response.status_code == 400


class TestMediaDelivery:
    def test_full_stream(self, admin_client):
        content = _upload_video(admin_client)

        response = admin_client.get(f"/learning/stream/video/{content['id']}")

        assert response.status_code == 200
        assert response.content == MEDIA_BYTES
        assert response.headers["accept-ranges"] == "bytes"
        assert "content-range" not in response.headers

    def test_partial_stream(self, admin_client):
        content = _upload_video(admin_client)

        response = admin_client.get(f"/learning/stream/video/{content['id']}", headers={"Range": "bytes=10-19"})

        assert response.status_code == 206
        assert response.content == b"0123456789"
        assert response.headers["content-range"] == "bytes 10-19/100"
        assert response.headers["content-length"] == "10"

    def test_malformed_range_streams_everything(self, admin_client):
        content = _upload_video(admin_client)

        response = admin_client.get(f"/learning/stream/video/{content['id']}", headers={"Range": "bytes=x-y"})

        assert response.status_code == 200
        assert response.content == MEDIA_BYTES

    def test_range_past_end(self, admin_client):
        content = _upload_video(admin_client)

        response = admin_client.get(f"/learning/stream/video/{content['id']}", headers={"Range": "bytes=500-"})

        assert response.status_code == 416
        assert response.headers["content-range"] == "bytes */100"

    def test_stream_wrong_type(self, admin_client):
        content = _upload_video(admin_client)

        response = admin_client.get(f"/learning/stream/audio/{content['id']}")

        assert response.status_code == 404
        assert response.json()["error"] == "Audio not found"

    def test_stream_missing_file(self, admin_client):
        content = _create_record(admin_client)

        response = admin_client.get(f"/learning/stream/audio/{content['id']}")

        assert response.status_code == 404
        assert response.json()["error"] == "Audio file not found"

    def test_path_outside_media_root(self, admin_client):
        content = _create_record(admin_client, filePath="/../../etc/passwd")

        response = admin_client.get(f"/learning/stream/audio/{content['id']}")

        assert response.status_code == 404

    def test_download(self, admin_client):
        content = _upload_video(admin_client)

        response = admin_client.get(f"/learning/download/{content['id']}")

        assert response.status_code == 200
        assert response.content == MEDIA_BYTES
        assert f'Gehun_ki_buvai_{content["id"]}.mp4' in response.headers["content-disposition"]
        assert admin_client.get(f"/learning/content/{content['id']}").json()["downloadCount"] == 1

    def test_download_not_allowed(self, admin_client):
        content = _create_record(admin_client, isDownloadable=False)

        response = admin_client.get(f"/learning/download/{content['id']}")

        assert response.status_code == 403
        assert response.json()["error"] == "Content is not downloadable"

    def test_missing_thumbnail(self, admin_client):
        content = _upload_video(admin_client)

        assert admin_client.get(f"/learning/thumbnail/{content['id']}").status_code == 404


class TestShares:
    def test_create_and_resolve(self, client):
        created = client.post("/learning/share", json={"contentId": 5, "contentType": "video"})

        assert created.status_code == 200
        share_url = created.json()["shareUrl"]
        assert share_url.startswith("/learning/share/")
        assert len(share_url.rsplit("/", 1)[1]) == 64

        resolved = client.get(share_url).json()
        assert resolved == {"valid": True, "contentId": 5, "contentType": "video"}

    def test_create_requires_reference(self, client):
        response = client.post("/learning/share", json={"contentType": "video"})

        assert response.status_code == 400
        assert response.json()["error"] == "Content ID and type required"

    def test_unknown_token(self, client):
        response = client.get("/learning/share/not-a-token")

        assert response.status_code == 404
        assert response.json()["valid"] is False
        assert response.json()["error"] == "Share link not found"

    def test_expired_token(self, client, db):
        share_url = client.post("/learning/share", json={"contentId": 5, "contentType": "audio"}).json()["shareUrl"]
        token = share_url.rsplit("/", 1)[1]
        db.query(ContentShare).filter(ContentShare.share_token == token).update(
            {"expires_at": utcnow() - timedelta(minutes=1)}
        )
        db.commit()

        response = client.get(share_url)

        assert response.status_code == 410
        assert response.json()["valid"] is False
        assert response.json()["error"] == "Share link expired"

    def test_access_count(self, client, db):
        share_url = client.post("/learning/share", json={"contentId": 5, "contentType": "audio"}).json()["shareUrl"]

        client.get(share_url)
        client.get(share_url)

        share = db.query(ContentShare).one()
        db.refresh(share)
        assert share.access_count == 2


class TestWorkshops:
    def test_create_requires_admin(self, client):
        assert client.post("/learning/workshops", json=WORKSHOP).status_code == 401

    def test_register_once(self, admin_client):
        workshop = admin_client.post("/learning/workshops", json=WORKSHOP).json()
        assert workshop["status"] == "upcoming"
        assert workshop["joinMethod"] == "youtube"

        registered = admin_client.post(
            f"/learning/workshops/{workshop['id']}/register", json={"farmerName": "Ramesh", "farmerPhone": "9876543210"}
        )
        assert registered.status_code == 200
        assert registered.json()["registration"]["farmerId"] == "default"

        duplicate = admin_client.post(f"/learning/workshops/{workshop['id']}/register", json={"farmerName": "Ramesh"})
        assert duplicate.status_code == 400
        assert duplicate.json()["error"] == "Already registered for this workshop"

        listed = admin_client.get("/learning/workshops").json()
        assert listed[0]["registeredCount"] == 1

    def test_register_requires_name(self, admin_client):
        workshop = admin_client.post("/learning/workshops", json=WORKSHOP).json()

        response = admin_client.post(f"/learning/workshops/{workshop['id']}/register", json={"farmerName": 42})

        assert response.status_code == 400
        assert response.json()["error"] == "Farmer name is required"

    def test_unknown_workshop(self, client):
        response = client.post("/learning/workshops/999/register", json={"farmerName": "Ramesh"})

        assert response.status_code == 404

    def test_invalid_join_method(self, admin_client):
        response = admin_client.post("/learning/workshops", json={**WORKSHOP, "joinMethod": "fax"})

        assert response.status_code == 400


class TestProgress:
    def test_bookmark_toggles(self, client):
        first = client.post("/learning/bookmark", json={"contentId": 3, "contentType": "video"})
        second = client.post("/learning/bookmark", json={"contentId": 3, "contentType": "video"})

        assert first.json() == {"success": True, "isBookmarked": True}
        assert second.json() == {"success": True, "isBookmarked": False}

    @pytest.mark.parametrize(
        "payload",
        [{"contentType": "video"}, {"contentId": "3", "contentType": "video"}, {"contentId": 3, "contentType": "pdf"}],
    )
    def test_bookmark_validation(self, client, payload):
        assert client.post("/learning/bookmark", json=payload).status_code == 400

    def test_progress_and_my_learning(self, admin_client, farmer):
        content = _create_record(admin_client)
        login = admin_client.post("/auth/farmer/login", json={"phone": FARMER_PHONE, "password": FARMER_PASSWORD})
        assert login.status_code == 200

        saved = admin_client.post(
            "/learning/progress",
            json={
                "contentId": content["id"],
                "contentType": "audio",
                "watchedSeconds": 30,
                "totalSeconds": "a lot",
                "completedPercent": 25.7,
                "isCompleted": "yes",
            },
        ).json()["progress"]
        assert saved["farmerId"] == str(farmer.id)
        assert saved["watchedSeconds"] == 30
        assert saved["totalSeconds"] == 0
        assert saved["completedPercent"] == 25
        assert saved["isCompleted"] is False

        admin_client.post("/learning/bookmark", json={"contentId": content["id"], "contentType": "audio"})

        mine = admin_client.get("/learning/my-learning").json()
        assert len(mine["progress"]) == 1
        assert mine["progress"][0]["isBookmarked"] is True
        assert mine["bookmarked"][0]["title"] == "Mandi news"

    def test_progress_updates_existing_row(self, client):
        client.post("/learning/progress", json={"contentId": 3, "contentType": "video", "watchedSeconds": 10})
        client.post(
            "/learning/progress",
            json={"contentId": 3, "contentType": "video", "watchedSeconds": 90, "isCompleted": True},
        )

        progress = client.get("/learning/my-learning").json()["progress"]
        assert len(progress) == 1
        assert progress[0]["watchedSeconds"] == 90
        assert progress[0]["isCompleted"] is True
