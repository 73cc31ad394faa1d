"""Operations on the flat, parent-pointer content tree.

Every function takes the full list of items and returns a new list; inputs
are never mutated and surviving items keep their relative order.  Children
are found through a parent -> children index rebuilt per call.
"""

import logging
import uuid
from collections import defaultdict, deque
from dataclasses import replace

from dashboard.errors import (
    InvalidContentError,
    ItemNotFoundError,
    TreeIntegrityError,
)
from dashboard.models import ContentItem

logger = logging.getLogger(__name__)

# Fields a caller may change through update_item().
_EDITABLE_FIELDS = {
    "name",
    "video_url",
    "duration",
    "description",
    "thumbnail",
    "pdf_url",
}


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def new_item_id(item_type: str) -> str:
    """Return a fresh id of the form ``<type>-<uuid4 hex>``."""
    return f"{item_type}-{uuid.uuid4().hex}"


def _children_index(contents: list[ContentItem]) -> dict[str | None, list[ContentItem]]:
    index: dict[str | None, list[ContentItem]] = defaultdict(list)
    for item in contents:
        index[item.parent_id].append(item)
    return index


def find_item(contents: list[ContentItem], item_id: str) -> ContentItem:
    """Return the item with the given id.

    Raises:
        ItemNotFoundError: If no item has that id.
    """
    for item in contents:
        if item.id == item_id:
            return item
    raise ItemNotFoundError(item_id)


def children_of(
    contents: list[ContentItem], parent_id: str | None
) -> list[ContentItem]:
    """Return the direct children of ``parent_id`` (None for the root)."""
    return [item for item in contents if item.parent_id == parent_id]


def descendant_ids(contents: list[ContentItem], item_id: str) -> set[str]:
    """Return the ids of every item whose parent chain leads to ``item_id``.

    The item itself is not included.  Traversal keeps a visited set, so a
    corrupt cyclic tree cannot make it loop.
    """
    index = _children_index(contents)
    found: set[str] = set()
    queue = deque([item_id])
    while queue:
        current = queue.popleft()
        for child in index.get(current, []):
            if child.id in found or child.id == item_id:
                continue
            found.add(child.id)
            queue.append(child.id)
    return found


def _require_folder(contents: list[ContentItem], folder_id: str | None) -> None:
    if folder_id is None:
        return
    folder = find_item(contents, folder_id)
    if not folder.is_folder:
        raise InvalidContentError(f"'{folder.name}' ({folder_id}) is not a folder")


# ---------------------------------------------------------------------------
# Integrity
# ---------------------------------------------------------------------------


def find_problems(contents: list[ContentItem]) -> list[str]:
    """Describe every integrity problem in the tree.

    Reports duplicate ids, parents that do not exist, parents that are not
    folders, and parent cycles.  An empty list means the tree is sound.
    """
    problems: list[str] = []
    by_id: dict[str, ContentItem] = {}
    for item in contents:
        if item.id in by_id:
            problems.append(f"duplicate id '{item.id}'")
        by_id[item.id] = item

    for item in contents:
        if item.parent_id is None:
            continue
        parent = by_id.get(item.parent_id)
        if parent is None:
            problems.append(
                f"'{item.id}' references missing parent '{item.parent_id}'"
            )
        elif not parent.is_folder:
            problems.append(
                f"'{item.id}' is inside '{parent.id}', which is a {parent.type}"
            )

    for cycle_start in _cycle_members(by_id):
        problems.append(f"'{cycle_start}' is part of a parent cycle")
    return problems


def _cycle_members(by_id: dict[str, ContentItem]) -> list[str]:
    on_cycle: set[str] = set()
    for item_id in by_id:
        seen: list[str] = []
        current: str | None = item_id
        while current is not None and current in by_id:
            if current in seen:
                on_cycle.update(seen[seen.index(current):])
                break
            seen.append(current)
            current = by_id[current].parent_id
    return [item_id for item_id in by_id if item_id in on_cycle]


def ensure_acyclic(contents: list[ContentItem]) -> None:
    """Reject trees with duplicate ids or parent cycles.

    Dangling parents are tolerated, since stored documents may already
    contain orphans.

    Raises:
        TreeIntegrityError: On duplicate ids or a cycle.
    """
    ids: set[str] = set()
    for item in contents:
        if item.id in ids:
            raise TreeIntegrityError(f"Duplicate content id '{item.id}'")
        ids.add(item.id)

    cycle = _cycle_members({item.id: item for item in contents})
    if cycle:
        raise TreeIntegrityError(
            "Parent cycle detected through: " + ", ".join(cycle)
        )


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def new_item(
    item_type: str,
    name: str,
    parent_id: str | None = None,
    **fields: str | None,
) -> ContentItem:
    """Build a new item with a generated id.

    Raises:
        InvalidContentError: If the trimmed name is empty.
    """
    name = name.strip()
    if not name:
        raise InvalidContentError("Name must not be empty")
    return ContentItem(
        id=new_item_id(item_type),
        name=name,
        type=item_type,
        parent_id=parent_id,
        **fields,
    )


def create_item(
    contents: list[ContentItem], item: ContentItem
) -> list[ContentItem]:
    """Append ``item`` under its parent folder.

    Raises:
        ItemNotFoundError: If the parent does not exist.
        InvalidContentError: If the parent is not a folder.
        TreeIntegrityError: If the id is already taken.
    """
    _require_folder(contents, item.parent_id)
    result = [*contents, item]
    ensure_acyclic(result)
    return result


def rename_item(
    contents: list[ContentItem], item_id: str, name: str
) -> list[ContentItem]:
    """Rename one item; blank names are rejected."""
    return update_item(contents, item_id, name=name)


def update_item(
    contents: list[ContentItem], item_id: str, **changes: str | None
) -> list[ContentItem]:
    """Return a copy of the tree with the given fields of one item changed.

    Only descriptive fields can be edited here; use :func:`move_item` to
    change the parent.

    Raises:
        ItemNotFoundError: If ``item_id`` is unknown.
        InvalidContentError: On an unknown field or a blank name.
    """
    unknown = set(changes) - _EDITABLE_FIELDS
    if unknown:
        raise InvalidContentError(
            "Cannot edit field(s): " + ", ".join(sorted(unknown))
        )
    if "name" in changes:
        name = (changes["name"] or "").strip()
        if not name:
            raise InvalidContentError("Name must not be empty")
        changes["name"] = name

    find_item(contents, item_id)
    return [
        replace(item, **changes) if item.id == item_id else item
        for item in contents
    ]


def move_item(
    contents: list[ContentItem], item_id: str, new_parent_id: str | None
) -> list[ContentItem]:
    """Re-parent an item.

    Raises:
        ItemNotFoundError: If either id is unknown.
        InvalidContentError: If the destination is not a folder.
        TreeIntegrityError: If a folder would be moved into its own subtree.
    """
    find_item(contents, item_id)
    _require_folder(contents, new_parent_id)
    if new_parent_id is not None and (
        new_parent_id == item_id or new_parent_id in descendant_ids(contents, item_id)
    ):
        raise TreeIntegrityError(
            f"Cannot move '{item_id}' into itself or one of its descendants"
        )

    result = [
        replace(item, parent_id=new_parent_id) if item.id == item_id else item
        for item in contents
    ]
    ensure_acyclic(result)
    return result


def delete_item(contents: list[ContentItem], target_id: str) -> list[ContentItem]:
    """Remove an item and, for folders, everything beneath it.

    Raises:
        ItemNotFoundError: If ``target_id`` is unknown.
    """
    find_item(contents, target_id)
    doomed = descendant_ids(contents, target_id) | {target_id}
    return [item for item in contents if item.id not in doomed]


def clear_folder(contents: list[ContentItem], target_id: str) -> list[ContentItem]:
    """Remove everything beneath an item while keeping the item itself.

    Raises:
        ItemNotFoundError: If ``target_id`` is unknown.
    """
    find_item(contents, target_id)
    doomed = descendant_ids(contents, target_id)
    return [item for item in contents if item.id not in doomed]


def import_structure(
    contents: list[ContentItem],
    imported: list[ContentItem],
    current_folder_id: str | None,
) -> list[ContentItem]:
    """Graft an externally supplied fragment into the tree.

    Every imported id gets one fresh ``imported-<hex>-`` prefix per call, and
    parent references inside the fragment are rewritten through the same
    prefix.  Items whose parent is None, or whose parent is not part of the
    fragment, become children of ``current_folder_id``.

    Args:
        contents: The live tree.
        imported: Items read from an uploaded document.
        current_folder_id: Folder the fragment is grafted into (None = root).

    Returns:
        The live tree followed by the relocated fragment.

    Raises:
        ItemNotFoundError: If ``current_folder_id`` is unknown.
        InvalidContentError: If ``current_folder_id`` is not a folder.
        TreeIntegrityError: If the fragment has duplicate ids or a cycle.
    """
    _require_folder(contents, current_folder_id)
    ensure_acyclic(imported)

    existing = {item.id for item in contents}
    fragment_ids = {item.id for item in imported}
    while True:
        prefix = f"imported-{uuid.uuid4().hex[:8]}-"
        if not any(prefix + item_id in existing for item_id in fragment_ids):
            break

    relocated = [
        replace(
            item,
            id=prefix + item.id,
            parent_id=(
                prefix + item.parent_id
                if item.parent_id in fragment_ids
                else current_folder_id
            ),
        )
        for item in imported
    ]
    logger.info(
        "Imported %d item(s) under %s", len(relocated), current_folder_id or "root"
    )
    return [*contents, *relocated]


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


def breadcrumb(
    contents: list[ContentItem], folder_id: str | None
) -> list[ContentItem]:
    """Return the folders from the root down to ``folder_id`` inclusive.

    Stops early at a dangling parent.  A cycle is logged and cut at the
    first repeated item.
    """
    by_id = {item.id: item for item in contents}
    path: list[ContentItem] = []
    seen: set[str] = set()
    current = folder_id
    while current is not None:
        if current in seen:
            logger.warning("Parent cycle while building breadcrumb at '%s'", current)
            break
        item = by_id.get(current)
        if item is None:
            break
        seen.add(current)
        path.append(item)
        current = item.parent_id
    path.reverse()
    return path
