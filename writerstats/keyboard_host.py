"""System-wide keyboard listener that feeds edits to a WriterStats tracker.

Printable keys are buffered and handed over as one typed change whenever a
word boundary (space, enter, tab) is reached. Ctrl+V / Cmd+V reads the
clipboard and reports its text as a pasted change.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

import pyperclip
from pynput import keyboard

from writerstats.classifier import Change, EditTransaction
from writerstats.tracker import WriterStats

logger = logging.getLogger(__name__)

PASTE_MODIFIERS = {
    keyboard.Key.ctrl,
    keyboard.Key.ctrl_l,
    keyboard.Key.ctrl_r,
    keyboard.Key.cmd,
    keyboard.Key.cmd_l,
    keyboard.Key.cmd_r,
}

BOUNDARY_KEYS = {
    keyboard.Key.space: " ",
    keyboard.Key.enter: "\n",
    keyboard.Key.tab: "\t",
}

# With Ctrl held some platforms report V as the SYN control character
PASTE_CHARS = {"v", "V", "\x16"}


class KeyboardEditSource:
    def __init__(
        self,
        tracker: WriterStats,
        document_path: str,
        listener_factory: Callable[..., keyboard.Listener] = keyboard.Listener,
        read_clipboard: Callable[[], str] = pyperclip.paste,
    ):
        self.tracker = tracker
        self.document_path = document_path
        self.listener_factory = listener_factory
        self.read_clipboard = read_clipboard
        self.listener: keyboard.Listener | None = None
        self._buffer = ""
        self._modifiers: set = set()
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self.listener is not None

    def start(self) -> None:
        if self.listener:
            return
        self.listener = self.listener_factory(on_press=self._on_press, on_release=self._on_release)
        self.listener.start()
        logger.info("Tracking edits to %s", self.document_path)

    def stop(self) -> None:
        if self.listener:
            self.listener.stop()
            self.listener = None
        self.flush()

    def join(self) -> None:
        if self.listener:
            self.listener.join()

    def flush(self) -> None:
        """Hand any half-typed word to the tracker."""
        with self._lock:
            text, self._buffer = self._buffer, ""
        if text:
            self._emit(Change.typed(text))

    def _emit(self, change: Change) -> None:
        self.tracker.handle_update(self.document_path, [EditTransaction(changes=[change])])

    def _on_press(self, key) -> None:
        if key in PASTE_MODIFIERS:
            self._modifiers.add(key)
            return

        char = getattr(key, "char", None)
        if self._modifiers:
            if char in PASTE_CHARS:
                self._paste()
            return

        if key in BOUNDARY_KEYS:
            with self._lock:
                self._buffer += BOUNDARY_KEYS[key]
            self.flush()
        elif key == keyboard.Key.backspace:
            with self._lock:
                self._buffer = self._buffer[:-1]
        elif char:
            with self._lock:
                self._buffer += char

    def _on_release(self, key) -> None:
        self._modifiers.discard(key)

    def _paste(self) -> None:
        try:
            text = self.read_clipboard()
        except pyperclip.PyperclipException:
            logger.warning("Clipboard unavailable, paste not counted")
            return
        self.flush()
        if text:
            self._emit(Change.pasted(text))
