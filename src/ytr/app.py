from __future__ import annotations

import argparse
import logging
import sys
import threading
from typing import NoReturn

from rich.console import Console
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.theme import Theme
from textual.widgets import Input, Label, ListItem, ListView, Static

from .config import AppConfig, load_config
from .enrichment import EnrichmentResult, Spawner, start_enrichment
from .entry import Candidate, Displayable, VideoEntry
from .errors import (
    DuplicateEntry,
    EmptyQueue,
    InvalidReference,
    StoreError,
)
from .logging_setup import configure_logging
from .metadata import TitleFetcher, make_title_fetcher, title_or_url
from .opener import Opener, open_and_log, open_url
from .paths import config_path
from .resolve import extract_video_id, looks_like_url
from .rng import PythonRandom, RandomSource
from .session import Session, SessionMode
from .store import JsonStore
from .ui.screens import NoticeScreen
from .video_queue import VideoQueue

logger = logging.getLogger(__name__)

HELP_BAR_TEXT = "a: add • d: delete • r: play random • /: filter • q: quit"
CAPTURE_HINT = "(esc to cancel)"

TOKYO_NIGHT_THEME = Theme(
    name="tokyo-night",
    primary="#7aa2f7",
    secondary="#7dcfff",
    accent="#bb9af7",
    warning="#e0af68",
    error="#f7768e",
    success="#9ece6a",
    foreground="#c0caf5",
    background="#1a1b26",
    surface="#1f2335",
    panel="#24283b",
    boost="#2f334d",
    variables={
        "block-cursor-background": "#7aa2f7",
        "block-cursor-foreground": "#1a1b26",
        "input-selection-background": "#7aa2f7 30%",
    },
)


class EnrichmentFinished(Message):
    """Posted from the enrichment thread once its task has a result."""

    def __init__(self, result: EnrichmentResult) -> None:
        super().__init__()
        self.result = result


class EntryListItem(ListItem):
    def __init__(self, entry: VideoEntry) -> None:
        self.entry = entry
        super().__init__(
            Label(_format_title(entry), classes="entry_title"),
            Label(entry.description, classes="entry_description"),
            classes="entry_item",
        )


class YtrApp(App):
    BINDINGS = [
        ("q", "quit_session", "Quit"),
        ("a", "add", "Add"),
        ("d", "delete", "Delete"),
        ("r", "random", "Play Random"),
        ("/", "filter", "Filter"),
    ]

    CSS = """
    Screen {
        background: $background;
        color: $text;
    }

    #browse {
        height: 1fr;
        margin: 1 2;
    }

    #list_title {
        background: $primary;
        color: $background;
        padding: 0 1;
        text-style: bold;
    }

    #entry_list {
        height: 1fr;
        background: $surface;
    }

    .entry_item {
        height: auto;
        padding: 0 1;
    }

    .entry_description {
        color: $text-muted;
    }

    #empty_hint {
        color: $text-muted;
        padding: 1 1;
    }

    #capture {
        height: auto;
        margin: 1 2;
    }

    #status_line {
        color: $success;
        margin: 0 2;
        height: 1;
    }

    #help_bar {
        color: $text-muted;
        margin: 0 2 1 2;
    }

    .hidden {
        display: none;
    }
    """

    def __init__(self, session: Session, *, start_thread: Spawner = start_enrichment) -> None:
        super().__init__()
        self.register_theme(TOKYO_NIGHT_THEME)
        self.theme = TOKYO_NIGHT_THEME.name
        self.session = session
        self.config = session.config
        self._start_thread = start_thread
        self._enrichment_thread: threading.Thread | None = None
        self._filter_text = ""
        self._notice_screen: NoticeScreen | None = None
        self._entry_list: ListView | None = None
        self._url_input: Input | None = None
        self._filter_input: Input | None = None
        self._browse: Vertical | None = None
        self._capture: Vertical | None = None
        self._status_line: Static | None = None
        self._help_bar: Static | None = None
        self._empty_hint: Static | None = None

    def compose(self) -> ComposeResult:
        with Vertical(id="browse"):
            yield Label(self.config.list_title, id="list_title")
            yield Input(
                placeholder="Filter by title",
                id="filter_input",
                classes="hidden",
                compact=True,
            )
            yield ListView(id="entry_list")
            yield Static("No videos queued. Press a to add one.", id="empty_hint", classes="hidden")
        with Vertical(id="capture", classes="hidden"):
            yield Label("Enter YouTube URL:")
            yield Input(placeholder="Enter YouTube URL", id="url_input")
            yield Label(CAPTURE_HINT)
        yield Static("", id="status_line")
        yield Static(HELP_BAR_TEXT, id="help_bar")

    async def on_mount(self) -> None:
        self._entry_list = self.query_one("#entry_list", ListView)
        self._url_input = self.query_one("#url_input", Input)
        self._filter_input = self.query_one("#filter_input", Input)
        self._browse = self.query_one("#browse", Vertical)
        self._capture = self.query_one("#capture", Vertical)
        self._status_line = self.query_one("#status_line", Static)
        self._help_bar = self.query_one("#help_bar", Static)
        self._empty_hint = self.query_one("#empty_hint", Static)
        await self._refresh_view()
        self._entry_list.focus()

    @property
    def filter_text(self) -> str:
        return self._filter_text

    def visible_entries(self) -> list[VideoEntry]:
        entries = list(self.session.entries)
        needle = self._filter_text.strip().casefold()
        if not needle:
            return entries
        return [entry for entry in entries if _matches_filter(entry, needle)]

    def selected_entry(self) -> VideoEntry | None:
        if self._entry_list is None:
            return None
        item = self._entry_list.highlighted_child
        if isinstance(item, EntryListItem):
            return item.entry
        return None

    async def action_quit_session(self) -> None:
        self.session.quit()
        if not self.session.running:
            self.exit()

    async def action_add(self) -> None:
        self.session.begin_input()
        await self._refresh_view()

    async def action_delete(self) -> None:
        self.session.delete(self.selected_entry())
        await self._refresh_view()

    async def action_random(self) -> None:
        self.session.consume_random()
        await self._refresh_view()

    async def action_filter(self) -> None:
        if self.session.mode is not SessionMode.BROWSING or self._filter_input is None:
            return
        self._filter_input.remove_class("hidden")
        self._filter_input.focus()

    async def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, EntryListItem):
            self.session.select(event.item.entry)
            await self._refresh_view()

    async def on_key(self, event: events.Key) -> None:
        if event.key != "escape":
            return
        if self._url_input is not None and self._url_input.has_focus:
            self._url_input.value = ""
            self.session.cancel_input()
            event.stop()
            await self._refresh_view()
            return
        if self._filter_input is not None and self._filter_input.has_focus:
            self._filter_input.value = ""
            self._filter_text = ""
            self._filter_input.add_class("hidden")
            event.stop()
            await self._refresh_view()

    async def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "filter_input":
            return
        self._filter_text = event.value
        await self._render_entries()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "filter_input":
            if not event.value.strip():
                event.input.add_class("hidden")
            if self._entry_list is not None:
                self._entry_list.focus()
            return
        if event.input.id != "url_input":
            return
        text = event.value
        event.input.value = ""
        task = self.session.submit(text)
        if task is not None:
            self._enrichment_thread = self._start_thread(task, self._deliver_enrichment)
        await self._refresh_view()

    async def on_enrichment_finished(self, message: EnrichmentFinished) -> None:
        self.session.apply_enrichment(message.result)
        await self._refresh_view()

    def _deliver_enrichment(self, result: EnrichmentResult) -> None:
        # Runs on the enrichment thread; post_message is thread-safe and
        # drops the message once the app has shut down.
        self.post_message(EnrichmentFinished(result))

    async def _refresh_view(self) -> None:
        capturing = self.session.mode is SessionMode.CAPTURING_INPUT
        if self._browse is not None and self._capture is not None:
            self._browse.set_class(capturing, "hidden")
            self._capture.set_class(not capturing, "hidden")
        if self._help_bar is not None:
            self._help_bar.set_class(capturing, "hidden")
        if self._status_line is not None:
            self._status_line.update(self.session.status or "")
        await self._render_entries()
        if capturing:
            if self._url_input is not None:
                self._url_input.focus()
        elif self._entry_list is not None and not (
            self._filter_input is not None and self._filter_input.has_focus
        ):
            self._entry_list.focus()
        self._sync_notice()

    async def _render_entries(self) -> None:
        list_view = self._entry_list
        if list_view is None:
            return
        previous = list_view.index or 0
        entries = self.visible_entries()
        await list_view.clear()
        if entries:
            await list_view.extend(EntryListItem(entry) for entry in entries)
            list_view.index = min(previous, len(entries) - 1)
        if self._empty_hint is not None:
            self._empty_hint.set_class(bool(entries), "hidden")

    def _sync_notice(self) -> None:
        notice = self.session.notice
        if notice is None:
            return
        if self._notice_screen is not None:
            self._notice_screen.set_message(notice)
            return
        self._notice_screen = NoticeScreen(notice)
        self.push_screen(self._notice_screen, self._handle_notice_closed)

    def _handle_notice_closed(self, _: None) -> None:
        self._notice_screen = None
        self.session.intercept_key()


def _format_title(entry: Displayable) -> Text:
    label = Text()
    label.append(entry.title, style="bold")
    return label


def _matches_filter(entry: Displayable, needle: str) -> bool:
    return needle in entry.filter_value.casefold()


USAGE_TEXT = """Usage:
  ytr                 Open a random video and remove it from the queue
  -t                  Run TUI mode
  <YouTube URL>       Add a YouTube video
  -h, --help          Show this help message
"""


class _CliParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print_usage()
        raise SystemExit(1)


def print_usage() -> None:
    Console().print(Text(USAGE_TEXT.rstrip()), highlight=False)
    Console().print(Text(f"Config: {config_path()}", style="dim"), highlight=False)


def _fail(message: str) -> NoReturn:
    Console(stderr=True).print(Text(message, style="red"), highlight=False)
    raise SystemExit(1)


def _build_parser() -> _CliParser:
    parser = _CliParser(prog="ytr", add_help=False, allow_abbrev=False)
    parser.add_argument("-h", "--help", action="store_true", dest="show_help")
    parser.add_argument("-t", action="store_true", dest="tui")
    parser.add_argument("target", nargs="?")
    return parser


def open_queue(config: AppConfig, rng: RandomSource | None = None) -> VideoQueue:
    return VideoQueue.load(
        JsonStore(config.store_path()),
        rng=rng or PythonRandom(),
        short_id_length=config.short_id_length,
    )


def run_random(queue: VideoQueue, opener: Opener) -> VideoEntry:
    try:
        entry = queue.consume_random()
    except EmptyQueue as exc:
        _fail(str(exc))
    except StoreError as exc:
        _fail(f"Error saving database: {exc}")
    open_and_log(opener, entry.url)
    return entry


def _video_id_or_fail(url: str) -> str:
    try:
        return extract_video_id(url)
    except InvalidReference as exc:
        _fail(f"Invalid YouTube URL: {exc}")


def run_add(url: str, queue: VideoQueue, fetch_title: TitleFetcher) -> VideoEntry:
    video_id = _video_id_or_fail(url)
    existing = queue.find_duplicate(video_id, url)
    if existing is not None:
        _fail(f"Duplicate entry: {existing.title}")
    title = title_or_url(video_id, url, fetch_title)
    try:
        entry = queue.add(Candidate(video_id=video_id, url=url, title=title))
    except DuplicateEntry as exc:
        _fail(f"Duplicate entry: {exc.title}")
    except StoreError as exc:
        _fail(f"Error saving database: {exc}")
    Console().print(Text(f"Added video: {entry.title}", style="green"), highlight=False)
    return entry


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) > 1 or "--" in argv:
        parser.error("expected at most one argument")
    args = parser.parse_args(argv)
    if args.show_help:
        print_usage()
        raise SystemExit(0)
    if args.tui and args.target is not None:
        parser.error("-t takes no URL")
    if args.target is not None and not looks_like_url(args.target):
        parser.error(f"unexpected argument: {args.target}")

    config, config_error = load_config()
    configure_logging(config.debug)
    if config_error:
        Console(stderr=True).print(Text(config_error, style="yellow"), highlight=False)
        logger.warning(config_error)
    if args.target is not None:
        _video_id_or_fail(args.target)

    try:
        queue = open_queue(config)
    except StoreError as exc:
        if args.tui:
            _fail(f"Error initializing model: {exc}")
        if args.target is None:
            _fail("No videos available.")
        _fail(f"Error loading database: {exc}")

    fetch_title = make_title_fetcher(config.fetch_timeout, config.oembed_url)
    if args.tui:
        session = Session(queue, opener=open_url, fetch_title=fetch_title, config=config)
        if config_error:
            session.show_notice(config_error)
        YtrApp(session).run()
        return
    if args.target is not None:
        run_add(args.target, queue, fetch_title)
        return
    run_random(queue, open_url)
