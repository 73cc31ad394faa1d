"""Tests for wire conversion of the content models."""

import pytest

from dashboard.errors import InvalidContentError
from dashboard.models import Category, ContentItem, Video, ZoneData


def test_content_item_omits_unset_optional_fields():
    pdf = ContentItem(
        id="p1",
        name="Syllabus",
        type="pdf",
        parent_id=None,
        created_at="2024-01-10",
        pdf_url="https://example.com/s.pdf",
    )

    assert pdf.to_dict() == {
        "id": "p1",
        "name": "Syllabus",
        "type": "pdf",
        "parentId": None,
        "createdAt": "2024-01-10",
        "pdfUrl": "https://example.com/s.pdf",
    }


def test_content_item_rejects_unknown_type():
    with pytest.raises(InvalidContentError):
        ContentItem.from_dict({"id": "x", "name": "X", "type": "audio"})


def test_content_item_requires_id():
    with pytest.raises(InvalidContentError):
        ContentItem.from_dict({"name": "X", "type": "folder"})


def test_category_children_round_trip():
    raw = {
        "id": "lecture",
        "name": "Lecture",
        "icon": "Video",
        "children": [
            {"id": "lecture-physics", "name": "Physics", "icon": "Atom", "parentId": "lecture"}
        ],
    }

    category = Category.from_dict(raw)

    assert category.children[0].parent_id == "lecture"
    assert category.to_dict() == raw


def test_video_defaults_for_sparse_record():
    video = Video.from_dict({"id": "1", "title": "Laws of Motion", "videoUrl": "u"})

    assert video.duration == "00:00"
    assert video.category_id == ""
    assert video.watched is False


def test_legacy_zone_has_no_contents_key():
    zone = ZoneData.from_dict(
        {
            "categories": [{"id": "c", "name": "C", "icon": "Folder"}],
            "videos": [{"id": "1", "title": "T", "videoUrl": "u", "watched": True}],
        }
    )

    assert zone.contents is None
    assert "contents" not in zone.to_dict()
    assert zone.videos[0].watched is True


def test_zone_rejects_non_object():
    with pytest.raises(InvalidContentError):
        ZoneData.from_dict(["not", "a", "zone"])
