"""Derive the legacy category/video view from the content tree.

``contents`` is the source of truth.  Categories and videos are projections
recomputed after every edit; the only state carried across a recomputation
is each video's ``watched`` flag, which lives on the client and is merged
back by id.
"""

import re

from dashboard.models import Category, ContentItem, Video

# Ordered: the first keyword found in the folder name wins.
FOLDER_ICON_KEYWORDS = [
    ("lecture", "Video"),
    ("text", "BookOpen"),
    ("note", "FileText"),
    ("class", "GraduationCap"),
]
DEFAULT_FOLDER_ICON = "Folder"

DEFAULT_DURATION = "00:00"

_YOUTUBE_EMBED = re.compile(r"youtube\.com/embed/([a-zA-Z0-9_-]{11})")
_YOUTUBE_PATTERNS = [
    re.compile(
        r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/|youtube\.com/v/)"
        r"([a-zA-Z0-9_-]{11})"
    ),
    re.compile(r"^([a-zA-Z0-9_-]{11})$"),
]

_THUMBNAIL_QUALITIES = {
    "default": "default",
    "hq": "hqdefault",
    "mq": "mqdefault",
    "sd": "sddefault",
    "maxres": "maxresdefault",
}


def extract_youtube_id(value: str | None) -> str | None:
    """Pull the 11-character video id out of a YouTube URL or embed snippet.

    Accepts watch, short (youtu.be), embed and /v/ links, iframe markup, or a
    bare id.  Returns None when nothing matches.
    """
    if not value:
        return None
    match = _YOUTUBE_EMBED.search(value)
    if match:
        return match.group(1)
    for pattern in _YOUTUBE_PATTERNS:
        match = pattern.search(value)
        if match:
            return match.group(1)
    return None


def youtube_thumbnail(video_id: str, quality: str = "maxres") -> str:
    """Return the thumbnail URL YouTube serves for ``video_id``."""
    return f"https://img.youtube.com/vi/{video_id}/{_THUMBNAIL_QUALITIES[quality]}.jpg"


def youtube_embed_url(video_id: str) -> str:
    return (
        f"https://www.youtube.com/embed/{video_id}"
        "?autoplay=1&modestbranding=1&rel=0&showinfo=0"
    )


def icon_for_folder(name: str) -> str:
    lowered = name.lower()
    for keyword, icon in FOLDER_ICON_KEYWORDS:
        if keyword in lowered:
            return icon
    return DEFAULT_FOLDER_ICON


def derive_categories(
    contents: list[ContentItem], parent_id: str | None = None
) -> list[Category]:
    """Build the legacy category tree from the folders in ``contents``.

    Folders keep the order they have in the flat list.  A folder without
    folder children gets ``children=None`` rather than an empty list.
    """
    categories = []
    for folder in contents:
        if not folder.is_folder or folder.parent_id != parent_id:
            continue
        # Guard against a folder listed as its own parent.
        children = (
            derive_categories(contents, folder.id) if folder.id != parent_id else []
        )
        categories.append(
            Category(
                id=folder.id,
                name=folder.name,
                icon=icon_for_folder(folder.name),
                parent_id=folder.parent_id,
                children=children or None,
            )
        )
    return categories


def _thumbnail_for(item: ContentItem) -> str:
    if item.thumbnail:
        return item.thumbnail
    video_id = extract_youtube_id(item.video_url)
    return youtube_thumbnail(video_id) if video_id else ""


def derive_videos(
    contents: list[ContentItem], previous: list[Video] | None = None
) -> list[Video]:
    """Build the legacy video list from the videos in ``contents``.

    Args:
        contents: The content tree.
        previous: The video list being replaced.  Each derived video takes
            the ``watched`` flag of the previous video with the same id;
            new videos start unwatched.

    Returns:
        One Video per video item, in tree order, with ``category_id`` set to
        the containing folder (empty string at the root).
    """
    watched = {video.id: video.watched for video in previous or []}
    return [
        Video(
            id=item.id,
            title=item.name,
            description=item.description or "",
            thumbnail=_thumbnail_for(item),
            video_url=item.video_url or "",
            duration=item.duration or DEFAULT_DURATION,
            category_id=item.parent_id or "",
            watched=watched.get(item.id, False),
            created_at=item.created_at,
        )
        for item in contents
        if item.type == "video"
    ]
