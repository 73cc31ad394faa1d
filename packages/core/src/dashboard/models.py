"""Data models for dashboard content.

Two parallel shapes live in a zone document: the legacy category tree with
its flat, category-tagged video list, and the newer flat ``contents`` list
of folders, videos and PDFs linked by ``parentId``.  The dataclasses below
use snake_case attributes and convert to and from the camelCase wire shape.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from dashboard.errors import InvalidContentError

CONTENT_TYPES = ("folder", "video", "pdf")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


@dataclass
class Category:
    """A node of the legacy category tree.

    Attributes:
        id: Unique category id (uniqueness is a convention, not enforced).
        name: Display name.
        icon: Symbolic icon name understood by the presentation layer.
        parent_id: Id of the parent category, if any.
        children: Child categories, or None when there are none.
    """

    id: str
    name: str
    icon: str = "Folder"
    parent_id: str | None = None
    children: list["Category"] | None = None

    @classmethod
    def from_dict(cls, raw: dict) -> "Category":
        children = raw.get("children")
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", "")),
            icon=str(raw.get("icon") or "Folder"),
            parent_id=_str_or_none(raw.get("parentId")),
            children=(
                [cls.from_dict(child) for child in children if isinstance(child, dict)]
                if isinstance(children, list)
                else None
            ),
        )

    def to_dict(self) -> dict:
        result: dict = {"id": self.id, "name": self.name, "icon": self.icon}
        if self.parent_id is not None:
            result["parentId"] = self.parent_id
        if self.children is not None:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass
class Video:
    """A legacy video record tagged with the id of its category."""

    id: str
    title: str
    video_url: str
    description: str = ""
    thumbnail: str = ""
    duration: str = "00:00"
    category_id: str = ""
    watched: bool = False
    created_at: str = field(default_factory=_now_iso)

    @classmethod
    def from_dict(cls, raw: dict) -> "Video":
        return cls(
            id=str(raw.get("id", "")),
            title=str(raw.get("title", "")),
            video_url=str(raw.get("videoUrl", "")),
            description=str(raw.get("description") or ""),
            thumbnail=str(raw.get("thumbnail") or ""),
            duration=str(raw.get("duration") or "00:00"),
            category_id=str(raw.get("categoryId") or ""),
            watched=bool(raw.get("watched", False)),
            created_at=str(raw.get("createdAt") or ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "thumbnail": self.thumbnail,
            "videoUrl": self.video_url,
            "duration": self.duration,
            "categoryId": self.category_id,
            "watched": self.watched,
            "createdAt": self.created_at,
        }


@dataclass
class ContentItem:
    """A node of the unified content tree.

    Attributes:
        id: Unique id within the tree.
        name: Display name.
        type: One of "folder", "video" or "pdf".
        parent_id: Id of the containing folder, or None for the root.
        created_at: ISO-8601 creation timestamp.
        video_url: Video link (videos only).
        duration: Human-readable duration such as "45:30" (videos only).
        description: Free-text description (videos only).
        thumbnail: Explicit thumbnail URL (videos only).
        pdf_url: Document link (PDFs only).
    """

    id: str
    name: str
    type: str
    parent_id: str | None = None
    created_at: str = field(default_factory=_now_iso)
    video_url: str | None = None
    duration: str | None = None
    description: str | None = None
    thumbnail: str | None = None
    pdf_url: str | None = None

    def __post_init__(self) -> None:
        if self.type not in CONTENT_TYPES:
            raise InvalidContentError(
                f"Unknown content type '{self.type}' for item '{self.id}'"
            )

    @property
    def is_folder(self) -> bool:
        return self.type == "folder"

    @classmethod
    def from_dict(cls, raw: dict) -> "ContentItem":
        """Build an item from its wire representation.

        Raises:
            InvalidContentError: If ``raw`` is not a mapping, has no id, or
                carries an unknown type.
        """
        if not isinstance(raw, dict):
            raise InvalidContentError("Content items must be JSON objects")
        item_id = raw.get("id")
        if not isinstance(item_id, str) or not item_id:
            raise InvalidContentError("Content items must have a non-empty id")
        return cls(
            id=item_id,
            name=str(raw.get("name", "")),
            type=str(raw.get("type", "")),
            parent_id=_str_or_none(raw.get("parentId")),
            created_at=str(raw.get("createdAt") or ""),
            video_url=_str_or_none(raw.get("videoUrl")),
            duration=_str_or_none(raw.get("duration")),
            description=_str_or_none(raw.get("description")),
            thumbnail=_str_or_none(raw.get("thumbnail")),
            pdf_url=_str_or_none(raw.get("pdfUrl")),
        )

    def to_dict(self) -> dict:
        """Serialize to the wire shape, omitting unset optional fields."""
        result: dict = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "parentId": self.parent_id,
            "createdAt": self.created_at,
        }
        optional = {
            "videoUrl": self.video_url,
            "duration": self.duration,
            "description": self.description,
            "thumbnail": self.thumbnail,
            "pdfUrl": self.pdf_url,
        }
        result.update({k: v for k, v in optional.items() if v is not None})
        return result


@dataclass
class ZoneData:
    """The persisted zone document.

    ``contents`` is None for legacy documents that predate the folder tree.
    """

    categories: list[Category] = field(default_factory=list)
    videos: list[Video] = field(default_factory=list)
    contents: list[ContentItem] | None = None

    @classmethod
    def from_dict(cls, raw: dict) -> "ZoneData":
        """Parse a zone document, tolerating missing sections.

        Raises:
            InvalidContentError: If ``raw`` is not a mapping or a content item
                is malformed.
        """
        if not isinstance(raw, dict):
            raise InvalidContentError("Zone documents must be JSON objects")
        categories = raw.get("categories")
        videos = raw.get("videos")
        contents = raw.get("contents")
        return cls(
            categories=[
                Category.from_dict(c) for c in categories if isinstance(c, dict)
            ]
            if isinstance(categories, list)
            else [],
            videos=[Video.from_dict(v) for v in videos if isinstance(v, dict)]
            if isinstance(videos, list)
            else [],
            contents=[ContentItem.from_dict(c) for c in contents]
            if isinstance(contents, list)
            else None,
        )

    def to_dict(self) -> dict:
        result: dict = {
            "categories": [c.to_dict() for c in self.categories],
            "videos": [v.to_dict() for v in self.videos],
        }
        if self.contents is not None:
            result["contents"] = [c.to_dict() for c in self.contents]
        return result
