"""Application entry point and setup for the termtype typing test."""

from __future__ import annotations

import argparse
import curses
import logging
import sys
import threading
from pathlib import Path
from typing import Optional, Sequence

from termtype.core.channel import Channel
from termtype.core.config import CONFIG_DIR, Settings, load_settings
from termtype.core.dictionary import DictionaryProvider
from termtype.core.dispatch import ExitReason, run_dispatch_loop
from termtype.core.events import Event, EventSource
from termtype.core.session import TypingTest
from termtype.ui.colors import init_color_pairs
from termtype.ui.terminal import CursesKeyReader, CursesRenderer, terminal_session
from termtype.ui.view import build_snapshot

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = CONFIG_DIR / "termtype.log"
EVENT_SOURCE_JOIN_TIMEOUT = 1.0


def configure_logging(log_file: Path, verbose: bool = False) -> None:
    """Configure application-wide logging. curses owns the screen, so log to a file."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        filename=str(log_file),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="termtype", description="A 30 second terminal typing test.")
    parser.add_argument("--config", type=Path, help="YAML settings file (default: ~/.termtype/config.yaml)")
    parser.add_argument("--dictionary", type=Path, help="word list file with a '---' header line")
    parser.add_argument("--log-file", type=Path, default=DEFAULT_LOG_FILE, help="where to write the log")
    parser.add_argument("--verbose", action="store_true", help="log debug messages")
    return parser


def play(
    screen: "curses.window",
    test: TypingTest,
    exit_signal: Channel[None],
    settings: Settings,
) -> ExitReason:
    """Wire the event source, dispatch loop and renderer on an open terminal."""
    screen_lock = threading.Lock()
    renderer = CursesRenderer(screen, init_color_pairs(), lock=screen_lock)
    reader = CursesKeyReader(curses.newwin(1, 1, 0, 0), lock=screen_lock)

    events: Channel[Event] = Channel()
    source = EventSource(reader.poll, events, tick_interval=settings.tick_interval)
    source.start()

    reason = run_dispatch_loop(
        test,
        events,
        exit_signal,
        lambda current: renderer(build_snapshot(current, settings.preview_words)),
    )
    if not source.join(EVENT_SOURCE_JOIN_TIMEOUT):
        logger.warning("Event source did not stop within %.1fs", EVENT_SOURCE_JOIN_TIMEOUT)
    return reason


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Load resources, run the typing test and return the process exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.verbose)

    try:
        settings = load_settings(args.config)
        dictionary = DictionaryProvider(args.dictionary or settings.dictionary_path).load()
    except (FileNotFoundError, ValueError) as e:
        logger.error("Startup failed: %s", e)
        print(f"termtype: {e}", file=sys.stderr)
        return 1

    exit_signal: Channel[None] = Channel()
    test = TypingTest(dictionary, settings, exit_signal=exit_signal)
    with terminal_session() as screen:
        reason = play(screen, test, exit_signal, settings)
    logger.info("Exited (%s)", reason.value)
    if reason is ExitReason.DISCONNECTED:
        # input stopped without Esc or Ctrl+C
        print("termtype: keyboard input stopped unexpectedly, see the log", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    sys.exit(run())
