# src/seat_watch/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tracking.models import TrackedItem
from .formatting import render_open_alert

logger = logging.getLogger(__name__)

CONSOLE_USER_ID = "console"


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleSink:
    """Prints open alerts for the local console user."""

    def owns(self, user_id: str) -> bool:
        return user_id == CONSOLE_USER_ID

    async def on_became_open(self, user_id: str, item: TrackedItem) -> None:
        _print_ts(render_open_alert(item))


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")

    sink = ConsoleSink()
    state.notifier.register(sink)

    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    try:
        while True:
            try:
                user_input = input(">>> ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                cmd_response = command_registry.handle(state, user_input, user_id=CONSOLE_USER_ID)
            except Exception:
                logger.exception("Command handler crashed.")
                cmd_response = "Internal error while handling a command."

            if cmd_response is None:
                cmd_response = "Only commands are supported here. Use /help."

            _print_ts(cmd_response)
    finally:
        state.notifier.unregister(sink)
        logger.info("Console connector finished.")
