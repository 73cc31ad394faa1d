"""Interactive command-line interface for managing a zone's content tree."""

import argparse
import logging
import shlex

from dotenv import load_dotenv  # type: ignore

from dashboard.Dashboard import Dashboard  # type: ignore
from dashboard.ZoneClient import ZoneClient  # type: ignore
from dashboard.errors import ContentError  # type: ignore
from dashboard.tree import find_problems  # type: ignore

_ICONS = {"folder": "[dir]", "video": "[vid]", "pdf": "[pdf]"}

# Short names accepted by `edit`.
_EDIT_FIELDS = {"url": "video_url", "videoUrl": "video_url"}

HELP_TEXT = """\
Navigation:  ls | cd <folder-id> | cd .. | cd / | up | pwd
Content:     mkdir <name> | video <name> <url> [duration] [description]
             pdf <name> <url> | rename <id> <name> | mv <id> <folder-id|/>
             edit <video-id> field=value... (name, url, duration, description, thumbnail)
             rm <id> | clear <id> | import <file> | export <file> | check
Videos:      videos [query] | watch <id> | play <id> | stats
Session:     login <username> <password> | logout | whoami
Sync:        pull | save
Other:       help | quit"""


class Shell:
    """Turns one line of input into a Dashboard operation.

    Each handler returns the text to print, so the loop in :func:`main`
    stays a thin read/print wrapper.
    """

    def __init__(self, dashboard: Dashboard, client: ZoneClient) -> None:
        self._dashboard = dashboard
        self._client = client
        self._commands = {
            "help": self._help,
            "ls": self._ls,
            "cd": self._cd,
            "up": self._up,
            "pwd": self._pwd,
            "mkdir": self._mkdir,
            "video": self._video,
            "pdf": self._pdf,
            "rename": self._rename,
            "edit": self._edit,
            "mv": self._mv,
            "rm": self._rm,
            "clear": self._clear,
            "import": self._import,
            "export": self._export,
            "check": self._check,
            "videos": self._videos,
            "watch": self._watch,
            "play": self._play,
            "stats": self._stats,
            "login": self._login,
            "logout": self._logout,
            "whoami": self._whoami,
            "pull": self._pull,
            "save": self._save,
        }

    def execute(self, line: str) -> str:
        """Run one command line and return its output."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            return f"Error: {e}"
        if not parts:
            return ""

        name, args = parts[0].lower(), parts[1:]
        handler = self._commands.get(name)
        if handler is None:
            return f"Unknown command '{name}'. Type 'help' for a list."
        try:
            return handler(args)
        except ContentError as e:
            return f"Error: {e}"
        except IndexError:
            return f"Usage error for '{name}'. Type 'help' for a list."

    # -- navigation ---------------------------------------------------------

    def _help(self, args: list[str]) -> str:
        return HELP_TEXT

    def _ls(self, args: list[str]) -> str:
        items = self._dashboard.current_items()
        if not items:
            return "(empty)"
        return "\n".join(
            f"{_ICONS[item.type]} {item.name}  ({item.id})" for item in items
        )

    def _cd(self, args: list[str]) -> str:
        target = args[0]
        if target == "/":
            self._dashboard.navigate(None)
        elif target == "..":
            self._dashboard.navigate_up()
        else:
            self._dashboard.navigate(target)
        return self._pwd([])

    def _up(self, args: list[str]) -> str:
        self._dashboard.navigate_up()
        return self._pwd([])

    def _pwd(self, args: list[str]) -> str:
        names = [folder.name for folder in self._dashboard.breadcrumb()]
        return "/" + "/".join(names)

    # -- content ------------------------------------------------------------

    def _mkdir(self, args: list[str]) -> str:
        folder = self._dashboard.create_folder(" ".join(args))
        return f"Folder created: {folder.name} ({folder.id})"

    def _video(self, args: list[str]) -> str:
        name, url = args[0], args[1]
        duration = args[2] if len(args) > 2 else None
        description = " ".join(args[3:]) or None
        video = self._dashboard.add_video(name, url, duration, description)
        return f"Video added: {video.name} ({video.id})"

    def _pdf(self, args: list[str]) -> str:
        pdf = self._dashboard.add_pdf(args[0], args[1])
        return f"PDF added: {pdf.name} ({pdf.id})"

    def _rename(self, args: list[str]) -> str:
        self._dashboard.rename(args[0], " ".join(args[1:]))
        return "Renamed."

    def _edit(self, args: list[str]) -> str:
        item_id, assignments = args[0], args[1:]
        if not assignments:
            return "Usage: edit <video-id> field=value..."
        changes = {}
        for assignment in assignments:
            field, sep, value = assignment.partition("=")
            if not sep:
                return f"Error: expected field=value, got '{assignment}'"
            field = _EDIT_FIELDS.get(field, field)
            changes[field] = value
        self._dashboard.edit_video(item_id, **changes)
        return "Updated."

    def _mv(self, args: list[str]) -> str:
        destination = None if args[1] == "/" else args[1]
        self._dashboard.move(args[0], destination)
        return "Moved."

    def _rm(self, args: list[str]) -> str:
        before = len(self._dashboard.contents)
        self._dashboard.delete(args[0])
        return f"Deleted {before - len(self._dashboard.contents)} item(s)."

    def _clear(self, args: list[str]) -> str:
        before = len(self._dashboard.contents)
        self._dashboard.clear(args[0])
        return f"Cleared {before - len(self._dashboard.contents)} item(s)."

    def _import(self, args: list[str]) -> str:
        count = self._dashboard.import_document(args[0])
        return f"Imported {count} item(s)."

    def _export(self, args: list[str]) -> str:
        self._dashboard.export_document(args[0])
        return f"Wrote {args[0]}"

    def _check(self, args: list[str]) -> str:
        problems = find_problems(self._dashboard.contents)
        if not problems:
            return "Tree is consistent."
        return "\n".join(problems)

    # -- videos -------------------------------------------------------------

    def _videos(self, args: list[str]) -> str:
        videos = self._dashboard.filtered_videos(query=" ".join(args) or None)
        if not videos:
            return "No videos."
        return "\n".join(
            f"{'[x]' if v.watched else '[ ]'} {v.title} ({v.duration})  {v.id}"
            for v in videos
        )

    def _watch(self, args: list[str]) -> str:
        self._dashboard.mark_watched(args[0])
        return "Marked as watched."

    def _play(self, args: list[str]) -> str:
        return self._dashboard.play_url(args[0])

    def _stats(self, args: list[str]) -> str:
        stats = self._dashboard.stats()
        return (
            f"{stats['total']} video(s), {stats['watched']} watched, "
            f"{stats['remaining']} remaining"
        )

    # -- session and sync ---------------------------------------------------

    def _login(self, args: list[str]) -> str:
        result = self._client.login(args[0], args[1])
        return "Logged in." if result.ok else f"Login failed: {result.error}"

    def _logout(self, args: list[str]) -> str:
        result = self._client.logout()
        return "Logged out." if result.ok else f"Logout failed: {result.error}"

    def _whoami(self, args: list[str]) -> str:
        session = self._client.session()
        if session["admin"]:
            return "admin"
        return "visitor"

    def _pull(self, args: list[str]) -> str:
        self._dashboard.load()
        return f"Loaded {len(self._dashboard.contents)} item(s)."

    def _save(self, args: list[str]) -> str:
        result = self._dashboard.save()
        return "Saved." if result.ok else f"Save failed: {result.error}"


def main():
    """Run the interactive content shell.

    Loads environment configuration, fetches the zone document from the
    server, then reads commands until the user quits.
    """
    load_dotenv()
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    parser = argparse.ArgumentParser(description="Manage EduDash content")
    parser.add_argument("--key", help="Zone key (defaults to the server's zone)")
    args = parser.parse_args()

    client = ZoneClient.from_env()
    dashboard = Dashboard(client, zone_key=args.key)
    dashboard.load()
    shell = Shell(dashboard, client)

    print("EduDash content shell (type 'help', 'quit' or 'exit')")
    print("-" * 48)

    try:
        while True:
            try:
                user_input = input(f"\n{shell.execute('pwd')}> ").strip()
            except (KeyboardInterrupt, EOFError):
                print("\nGoodbye!")
                break

            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit"):
                print("Goodbye!")
                break

            print(shell.execute(user_input))
    finally:
        client.close()


if __name__ == "__main__":
    main()
