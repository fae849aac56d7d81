# src/seat_watch/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..connectors.formatting import render_tracked_list
from ..core.state import AppState
from ..tracking.api import add_tracked, clear_tracked, get_tracked, remove_tracked
from ..tracking.store import DuplicateError

CommandHandler = Callable[[AppState, list[str], str | None, str | None], str]

logger = logging.getLogger(__name__)

TRACK_USAGE = "Usage: /track <term> <subject> <courseNumber> <section> <crn>"


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /track, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        user_id: str | None = None,
        room_id: str | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        # Some clients send "/track@botname".
        name = parts[0].split("@", 1)[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        logger.debug("Command /%s args=%d user=%s room=%s", name, len(args), user_id, room_id)
        return handler(state, args, user_id, room_id)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def owner_key(user_id: str | None, room_id: str | None) -> str | None:
    """Tracking lists are per chat: the room when there is one, else the sender."""
    return room_id or user_id


def cmd_start(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    return (
        "Commands:\n"
        "/help\n"
        "/tracked\n"
        "/track <term> <subject> <courseNumber> <section> <crn>\n"
        "/untrack <crn>\n"
        "/clear"
    )


def cmd_help(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    return (
        registry.build_help()
        + "\n\nExample: /track 252 ENGL 214 02 30577"
    )


def cmd_track(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    """
    /track <term> <subject> <courseNumber> <section> <crn>
    """
    owner = owner_key(user_id, room_id)
    if owner is None:
        return "No user_id in this context."
    if len(args) != 5:
        return TRACK_USAGE

    term, subject, course_number, section, crn = args
    try:
        item = add_tracked(
            state,
            owner,
            term=term,
            subject=subject,
            course_number=course_number,
            section=section,
            crn=crn,
        )
    except DuplicateError as e:
        return f"CRN {e.crn} is already tracked. Use /tracked"

    return f"Added: {item.label} - {item.crn}"


def cmd_untrack(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    owner = owner_key(user_id, room_id)
    if owner is None:
        return "No user_id in this context."
    if len(args) != 1:
        return "Usage: /untrack <crn>"

    crn = args[0]
    if remove_tracked(state, owner, crn):
        return f"Removed CRN {crn}."
    return "CRN not found."


def cmd_clear(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    owner = owner_key(user_id, room_id)
    if owner is None:
        return "No user_id in this context."
    clear_tracked(state, owner)
    return "Cleared your tracking list."


def cmd_tracked(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    owner = owner_key(user_id, room_id)
    if owner is None:
        return "No user_id in this context."
    return render_tracked_list(get_tracked(state, owner))


def cmd_status(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    settings = state.settings
    owner = owner_key(user_id, room_id)
    mine = state.store.count(owner) if owner is not None else 0
    return (
        "Status:\n"
        f"  Platform: {getattr(settings, 'banner_base_url', '?')}\n"
        f"  Poll interval: {float(getattr(settings, 'poll_interval_seconds', 0)):g}s\n"
        f"  Max parallel queries: {getattr(settings, 'poll_max_concurrency', '?')}\n"
        f"  Your tracked sections: {mine}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("start", cmd_start, help_text="Short command overview.")
registry.register("track", cmd_track, help_text="Watch a section: /track <term> <subject> <courseNumber> <section> <crn>.")
registry.register("untrack", cmd_untrack, help_text="Stop watching a section: /untrack <crn>.")
registry.register("clear", cmd_clear, help_text="Stop watching everything.")
registry.register("tracked", cmd_tracked, help_text="List tracked sections with seats and waiting list.")
registry.register("status", cmd_status, help_text="Show poller settings.")
