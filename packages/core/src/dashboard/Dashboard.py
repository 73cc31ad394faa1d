"""Client-side working copy of one zone and the mutations an admin can make."""

import json
import logging
from pathlib import Path

from dashboard import tree
from dashboard.ZoneClient import ApiResult, ZoneClient
from dashboard.errors import InvalidContentError, ItemNotFoundError
from dashboard.models import Category, ContentItem, Video, ZoneData
from dashboard.sync import (
    derive_categories,
    derive_videos,
    extract_youtube_id,
    youtube_embed_url,
)

logger = logging.getLogger(__name__)


class Dashboard:
    """Holds categories, videos and the content tree for a zone.

    ``contents`` is authoritative.  Every mutation goes through
    :meth:`update_contents`, which recomputes the legacy categories and
    videos while keeping each video's watched flag.
    """

    def __init__(self, client: ZoneClient, zone_key: str | None = None) -> None:
        """Initialize an empty dashboard bound to a zone.

        Args:
            client: Client used to load and save the zone document.
            zone_key: Zone to work on; None lets the server pick its default.
        """
        self._client = client
        self.zone_key = zone_key
        self.categories: list[Category] = []
        self.videos: list[Video] = []
        self.contents: list[ContentItem] = []
        self.current_folder_id: str | None = None

    # -- loading and saving -------------------------------------------------

    def load(self) -> None:
        """Replace the working copy with the server's document."""
        self.apply_document(self._client.fetch_zone(self.zone_key))

    def apply_document(self, data: ZoneData) -> None:
        """Adopt a zone document as the working copy.

        Documents with a content tree have their legacy view re-derived from
        it, keeping stored watched flags.  Legacy documents are taken as-is.
        """
        if data.contents is None:
            self.categories = list(data.categories)
            self.videos = list(data.videos)
            self.contents = []
        else:
            self.contents = list(data.contents)
            self.categories = derive_categories(self.contents)
            self.videos = derive_videos(self.contents, previous=data.videos)

        if self.current_folder_id is not None and not any(
            item.id == self.current_folder_id for item in self.contents
        ):
            self.current_folder_id = None

    def to_document(self) -> ZoneData:
        return ZoneData(
            categories=list(self.categories),
            videos=list(self.videos),
            contents=list(self.contents),
        )

    def save(self) -> ApiResult:
        """Post the working copy; failures come back as an ApiResult."""
        result = self._client.save_zone(self.to_document(), self.zone_key)
        if not result.ok:
            logger.warning("Zone save failed: %s", result.error)
        return result

    # -- content mutations --------------------------------------------------

    def update_contents(self, new_contents: list[ContentItem]) -> None:
        self.contents = new_contents
        self.categories = derive_categories(new_contents)
        self.videos = derive_videos(new_contents, previous=self.videos)

    def create_folder(self, name: str) -> ContentItem:
        folder = tree.new_item("folder", name, self.current_folder_id)
        self.update_contents(tree.create_item(self.contents, folder))
        return folder

    def add_video(
        self,
        name: str,
        video_url: str,
        duration: str | None = None,
        description: str | None = None,
    ) -> ContentItem:
        """Add a video to the current folder.

        Raises:
            InvalidContentError: If the name or URL is blank.
        """
        video_url = video_url.strip()
        if not video_url:
            raise InvalidContentError("Video URL must not be empty")
        video = tree.new_item(
            "video",
            name,
            self.current_folder_id,
            video_url=video_url,
            duration=duration or None,
            description=description or None,
        )
        self.update_contents(tree.create_item(self.contents, video))
        return video

    def add_pdf(self, name: str, pdf_url: str) -> ContentItem:
        pdf_url = pdf_url.strip()
        if not pdf_url:
            raise InvalidContentError("PDF URL must not be empty")
        pdf = tree.new_item("pdf", name, self.current_folder_id, pdf_url=pdf_url)
        self.update_contents(tree.create_item(self.contents, pdf))
        return pdf

    def rename(self, item_id: str, name: str) -> None:
        self.update_contents(tree.rename_item(self.contents, item_id, name))

    def edit_video(self, item_id: str, **changes: str | None) -> None:
        """Change descriptive fields of a video item.

        Raises:
            ItemNotFoundError: If ``item_id`` is unknown.
            InvalidContentError: If the item is not a video, or on an unknown
                field or a blank name.
        """
        item = tree.find_item(self.contents, item_id)
        if item.type != "video":
            raise InvalidContentError(f"'{item.name}' is not a video")
        self.update_contents(tree.update_item(self.contents, item_id, **changes))

    def move(self, item_id: str, new_parent_id: str | None) -> None:
        self.update_contents(tree.move_item(self.contents, item_id, new_parent_id))

    def delete(self, item_id: str) -> None:
        """Delete an item and its subtree, leaving a deleted folder if inside it."""
        doomed = tree.descendant_ids(self.contents, item_id) | {item_id}
        self.update_contents(tree.delete_item(self.contents, item_id))
        if self.current_folder_id in doomed:
            self.current_folder_id = None

    def clear(self, item_id: str) -> None:
        doomed = tree.descendant_ids(self.contents, item_id)
        self.update_contents(tree.clear_folder(self.contents, item_id))
        if self.current_folder_id in doomed:
            self.current_folder_id = item_id

    def import_document(self, path: str | Path) -> int:
        """Graft the ``contents`` of a JSON file into the current folder.

        Returns:
            The number of imported items.

        Raises:
            InvalidContentError: If the file is not a zone document with a
                ``contents`` list.
        """
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise InvalidContentError(f"Could not read '{path}': {e}") from e
        if not isinstance(raw, dict) or not isinstance(raw.get("contents"), list):
            raise InvalidContentError(
                "Invalid JSON file. Please upload a valid folder structure."
            )

        imported = [ContentItem.from_dict(item) for item in raw["contents"]]
        self.update_contents(
            tree.import_structure(self.contents, imported, self.current_folder_id)
        )
        return len(imported)

    def export_document(self, path: str | Path) -> None:
        """Write ``{"contents": [...]}`` as pretty-printed JSON."""
        payload = {"contents": [item.to_dict() for item in self.contents]}
        Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")

    # -- navigation ---------------------------------------------------------

    def navigate(self, folder_id: str | None) -> None:
        """Make ``folder_id`` the current folder (None for the root).

        Raises:
            ItemNotFoundError: If the folder does not exist.
            InvalidContentError: If the id names a video or PDF.
        """
        if folder_id is not None:
            item = tree.find_item(self.contents, folder_id)
            if not item.is_folder:
                raise InvalidContentError(f"'{item.name}' is not a folder")
        self.current_folder_id = folder_id

    def navigate_up(self) -> None:
        if self.current_folder_id is None:
            return
        current = tree.find_item(self.contents, self.current_folder_id)
        self.current_folder_id = current.parent_id

    def current_items(self) -> list[ContentItem]:
        return tree.children_of(self.contents, self.current_folder_id)

    def breadcrumb(self) -> list[ContentItem]:
        return tree.breadcrumb(self.contents, self.current_folder_id)

    # -- visitor views ------------------------------------------------------

    def mark_watched(self, video_id: str) -> None:
        """Flag a video as watched.

        Raises:
            ItemNotFoundError: If no video has that id.
        """
        self._find_video(video_id).watched = True

    def play_url(self, video_id: str) -> str:
        """Return the URL to play a video: the YouTube embed when it is one."""
        video = self._find_video(video_id)
        youtube_id = extract_youtube_id(video.video_url)
        return youtube_embed_url(youtube_id) if youtube_id else video.video_url

    def _find_video(self, video_id: str) -> Video:
        for video in self.videos:
            if video.id == video_id:
                return video
        raise ItemNotFoundError(video_id)

    def filtered_videos(
        self, category_id: str | None = None, query: str | None = None
    ) -> list[Video]:
        """Return legacy videos filtered by category and search text.

        A top-level category also matches videos tagged with one of its
        direct child categories.  The query is matched case-insensitively
        against title and description.
        """
        result = self.videos
        if category_id:
            accepted = {category_id}
            for category in self.categories:
                if category.id == category_id:
                    accepted.update(child.id for child in category.children or [])
            result = [video for video in result if video.category_id in accepted]

        if query:
            needle = query.lower()
            result = [
                video
                for video in result
                if needle in video.title.lower() or needle in video.description.lower()
            ]
        return result

    def search_contents(self, query: str) -> list[ContentItem]:
        if not query:
            return list(self.contents)
        needle = query.lower()
        return [item for item in self.contents if needle in item.name.lower()]

    def category_name(self, category_id: str | None) -> str:
        if not category_id:
            return "All Content"
        for category in self.categories:
            if category.id == category_id:
                return category.name
            for child in category.children or []:
                if child.id == category_id:
                    return child.name
        return "Content"

    def stats(self) -> dict[str, int]:
        watched = sum(1 for video in self.videos if video.watched)
        return {
            "total": len(self.videos),
            "watched": watched,
            "remaining": len(self.videos) - watched,
        }
