"""Built-in zone document used when the server has nothing to offer.

The starter tree has the top-level sections every zone begins with and a
couple of sample items so a fresh install is not empty.
"""

from dashboard.models import ContentItem, ZoneData
from dashboard.sync import derive_categories, derive_videos

_SEED_DATE = "2024-01-01"

INITIAL_CONTENTS = [
    {"id": "folder-class-9th", "name": "Class-9th", "type": "folder", "parentId": None},
    {"id": "folder-class-10th", "name": "Class-10th", "type": "folder", "parentId": None},
    {"id": "folder-lecture", "name": "Lecture", "type": "folder", "parentId": None},
    {"id": "folder-textbook", "name": "Text Book", "type": "folder", "parentId": None},
    {"id": "folder-notes", "name": "Notes", "type": "folder", "parentId": None},
    {"id": "folder-lecturepdf", "name": "Lecture Pdf", "type": "folder", "parentId": None},
    {"id": "folder-lecture-physics", "name": "Physics", "type": "folder", "parentId": "folder-lecture"},
    {"id": "folder-lecture-chemistry", "name": "Chemistry", "type": "folder", "parentId": "folder-lecture"},
    {"id": "folder-lecture-mathematics", "name": "Mathematics", "type": "folder", "parentId": "folder-lecture"},
    {
        "id": "video-sample-1",
        "name": "Introduction to Classical Mechanics",
        "type": "video",
        "parentId": "folder-lecture-physics",
        "createdAt": "2024-01-15",
        "videoUrl": "https://www.youtube.com/watch?v=W6NZfCO5SIk",
        "duration": "45:30",
        "description": "Fundamental concepts of motion, forces, and energy",
    },
    {"id": "folder-textbook-physics", "name": "Physics", "type": "folder", "parentId": "folder-textbook"},
    {"id": "folder-textbook-chemistry", "name": "Chemistry", "type": "folder", "parentId": "folder-textbook"},
    {
        "id": "pdf-sample-1",
        "name": "Physics Class 12 NCERT",
        "type": "pdf",
        "parentId": "folder-textbook-physics",
        "createdAt": "2024-01-10",
        "pdfUrl": "https://drive.google.com/file/d/example/view",
    },
]


def default_contents() -> list[ContentItem]:
    """Return a fresh copy of the starter tree."""
    return [
        ContentItem.from_dict({"createdAt": _SEED_DATE, **raw})
        for raw in INITIAL_CONTENTS
    ]


def default_zone() -> ZoneData:
    """Return the starter document with its legacy view already derived."""
    contents = default_contents()
    return ZoneData(
        categories=derive_categories(contents),
        videos=derive_videos(contents),
        contents=contents,
    )
