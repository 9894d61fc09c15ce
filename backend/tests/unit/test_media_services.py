# backend/tests/unit/test_media_services.py
"""Unit tests for reels, videos and study materials with storage mocked."""

import pytest

from app.core.exceptions import NotFoundException, ValidationException
from app.services.material_service import MaterialService
from app.services.media_service import ReelService, VideoService


@pytest.fixture
def reel_service(unit_db, mock_storage):
    return ReelService(unit_db, storage_service=mock_storage)


@pytest.fixture
def video_service(unit_db, mock_storage):
    return VideoService(unit_db, storage_service=mock_storage)


@pytest.fixture
def material_service(unit_db, mock_storage):
    return MaterialService(unit_db, storage_service=mock_storage)


def reel_data(**overrides):
    data = {
        "title": "Color theory in 60s",
        "videoUrl": "https://cdn.example.com/reels/color.mp4",
        "thumbnailUrl": "https://cdn.example.com/reels/color.jpg",
        "category": "design",
        "tags": ["color", "basics"],
        "isPublished": True,
    }
    data.update(overrides)
    return data


class TestMediaCounters:
    def test_view_and_like_counters(self, reel_service, admin_caller):
        reel = reel_service.create_media(reel_data(), admin_caller)

        reel_service.increment_view(reel["id"])
        reel_service.like(reel["id"])
        liked = reel_service.like(reel["id"])

        assert liked["viewCount"] == 1
        assert liked["likeCount"] == 2
        assert liked["uploadedBy"] == admin_caller.id

    def test_unlike_never_goes_negative(self, reel_service):
        reel = reel_service.create_media(reel_data())

        assert reel_service.unlike(reel["id"])["likeCount"] == 0

    def test_unknown_media_is_not_found(self, video_service):
        with pytest.raises(NotFoundException) as exc_info:
            video_service.like("01MISSING")
        assert "Video" in exc_info.value.message


class TestMediaQueries:
    def test_reels_and_videos_are_separate_collections(self, reel_service, video_service):
        reel_service.create_media(reel_data())

        assert reel_service.list_published().total == 1
        assert video_service.list_published().total == 0

    def test_drafts_are_not_listed_publicly(self, reel_service):
        draft = reel_service.create_media(reel_data(isPublished=False))

        assert reel_service.list_published().total == 0
        assert reel_service.list_media().total == 1
        assert reel_service.publish(draft["id"])["publishedAt"]
        assert reel_service.list_published().total == 1

    def test_tag_and_category_lookups(self, reel_service):
        reel_service.create_media(reel_data())
        reel_service.create_media(reel_data(title="Grids", tags=["layout"], category="layout"))

        assert [m["title"] for m in reel_service.get_by_tags(["layout", "nope"])] == ["Grids"]
        assert len(reel_service.get_by_category("design")) == 1
        assert reel_service.get_categories() == ["design", "layout"]
        assert reel_service.get_tags() == ["basics", "color", "layout"]

    def test_most_liked_orders_by_likes(self, reel_service):
        quiet = reel_service.create_media(reel_data(title="Quiet"))
        loud = reel_service.create_media(reel_data(title="Loud"))
        reel_service.like(loud["id"])

        assert [m["id"] for m in reel_service.get_most_liked(2)] == [loud["id"], quiet["id"]]


class TestMediaDelete:
    def test_delete_removes_stored_files(self, reel_service, mock_storage):
        reel = reel_service.create_media(reel_data())

        reel_service.delete_media(reel["id"])

        deleted = [call.args[0] for call in mock_storage.delete_by_url.call_args_list]
        assert deleted == [reel_data()["videoUrl"], reel_data()["thumbnailUrl"]]
        with pytest.raises(NotFoundException):
            reel_service.get_media(reel["id"])


class TestMaterialService:
    def test_upload_stores_file_and_metadata(self, material_service, mock_storage, admin_caller):
        material = material_service.upload_material(
            b"%PDF-1.4 fake",
            "Design Basics.PDF",
            "application/pdf",
            {"category": "guides", "tags": ["intro"]},
            admin_caller,
        )

        assert material["fileUrl"] == "https://cdn.example.com/materials/Design Basics.PDF"
        assert material["fileType"] == "pdf"
        assert material["fileSize"] == len(b"%PDF-1.4 fake")
        assert material["name"] == "Design Basics.PDF"
        assert material["isPublished"] is False
        assert material["downloadCount"] == 0
        mock_storage.upload_bytes.assert_called_once()

    def test_empty_upload_is_rejected(self, material_service, mock_storage):
        with pytest.raises(ValidationException):
            material_service.upload_material(b"", "empty.pdf", "application/pdf", {})
        mock_storage.upload_bytes.assert_not_called()

    def test_create_from_url_requires_file_url(self, material_service):
        with pytest.raises(ValidationException):
            material_service.create_material({"name": "No file"})

    def test_downloads_feed_category_stats(self, material_service):
        guide = material_service.create_material(
            {"name": "Guide", "fileUrl": "https://x/guide.pdf", "category": "guides"}
        )
        material_service.create_material(
            {"name": "Sheet", "fileUrl": "https://x/sheet.pdf", "category": "cheatsheets"}
        )
        material_service.track_download(guide["id"])
        material_service.track_download(guide["id"])

        stats = {entry["category"]: entry for entry in material_service.get_category_stats()}

        assert stats["guides"]["downloads"] == 2
        assert stats["cheatsheets"]["downloads"] == 0
        assert material_service.get_stats()["totalDownloads"] == 2

    def test_delete_removes_file(self, material_service, mock_storage):
        material = material_service.create_material({"name": "Old", "fileUrl": "https://x/old.pdf"})

        material_service.delete_material(material["id"])

        mock_storage.delete_by_url.assert_called_once_with("https://x/old.pdf")
        with pytest.raises(NotFoundException):
            material_service.get_material(material["id"])
