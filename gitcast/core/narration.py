"""Podcast narration: speech engines, playback state and script rendering.

A `SpeechEngine` speaks text and reports progress through boundary events
carrying a character offset. `Narrator` wraps one engine and exposes the
whole playback contract: play, pause, resume, stop and the current offset.
There is one narrator per process, acquired with `get_narrator` and torn
down with `reset_narrator`.

Engines can only play audio in real time; none of them can capture the
synthesized speech to a file.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol, TextIO, Tuple
import logging
import math
import re
import sys
import threading

logger = logging.getLogger(__name__)

AVERAGE_WORD_CHARS = 5

BoundaryCallback = Callable[[int], None]


class SpeechEngine(Protocol):
    def speak(self, text: str, *, rate: float, pitch: float, volume: float,
              on_boundary: BoundaryCallback, on_end: Callable[[], None],
              on_error: Callable[[Exception], None]) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def cancel(self) -> None: ...

    def wait(self, timeout: Optional[float] = None) -> None: ...


class TerminalSpeechEngine:
    """Prints the script word by word at a speaking pace.

    Runs on a background thread. Boundary events fire before each word with
    the word's character offset. Pitch and volume have no effect here.
    """

    def __init__(self, stream: Optional[TextIO] = None, words_per_minute: int = 150):
        self.stream = stream or sys.stdout
        self.words_per_minute = words_per_minute
        self._thread: Optional[threading.Thread] = None
        self._cancelled = threading.Event()
        self._running = threading.Event()

    @property
    def speaking(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def paused(self) -> bool:
        return self.speaking and not self._running.is_set()

    def speak(self, text, *, rate=1.0, pitch=1.0, volume=1.0,
              on_boundary=lambda offset: None, on_end=lambda: None, on_error=lambda e: None):
        self.cancel()
        self._cancelled = threading.Event()
        self._running = threading.Event()
        self._running.set()
        delay = 60.0 / (self.words_per_minute * max(rate, 0.1))
        self._thread = threading.Thread(
            target=self._run, args=(text, delay, on_boundary, on_end, on_error), daemon=True
        )
        self._thread.start()

    def _run(self, text, delay, on_boundary, on_end, on_error):
        cancelled, running = self._cancelled, self._running
        last = 0
        try:
            for word in re.finditer(r"\S+", text):
                running.wait()
                if cancelled.is_set():
                    return
                on_boundary(word.start())
                self.stream.write(text[last:word.end()])
                self.stream.flush()
                last = word.end()
                if cancelled.wait(delay):
                    return
            self.stream.write(text[last:] + "\n")
            self.stream.flush()
        except OSError as e:
            on_error(e)
            return
        on_end()

    def pause(self) -> None:
        self._running.clear()

    def resume(self) -> None:
        self._running.set()

    def cancel(self) -> None:
        self._cancelled.set()
        self._running.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the current utterance finishes."""
        if self._thread is not None:
            self._thread.join(timeout)


class PlaybackState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(frozen=True)
class Highlight:
    """The script split around the word being spoken."""

    spoken: str
    current: str
    remaining: str


def estimated_minutes(script: str, words_per_minute: int = 150) -> int:
    """Reading time estimate assuming ~5 characters per word."""
    return math.ceil(len(script) / AVERAGE_WORD_CHARS / words_per_minute)


class Narrator:
    """Playback state over a `SpeechEngine`."""

    def __init__(self, engine: SpeechEngine, rate: float = 1.0, pitch: float = 1.0, volume: float = 1.0):
        self.engine = engine
        self.rate = rate
        self.pitch = pitch
        self.volume = volume
        self.script = ""
        self.state = PlaybackState.IDLE
        self.position = 0
        self.last_error: Optional[Exception] = None

    def play(self, script: Optional[str] = None) -> None:
        """Start narrating `script`, or resume if paused and no new script given."""
        if self.state is PlaybackState.PAUSED and script is None:
            self.resume()
            return
        if script is None:
            script = self.script
        self.stop()
        self.script = script
        self.last_error = None
        self.state = PlaybackState.PLAYING
        self.engine.speak(
            script,
            rate=self.rate, pitch=self.pitch, volume=self.volume,
            on_boundary=self._on_boundary, on_end=self._on_end, on_error=self._on_error,
        )

    def pause(self) -> None:
        if self.state is PlaybackState.PLAYING:
            self.engine.pause()
            self.state = PlaybackState.PAUSED

    def resume(self) -> None:
        if self.state is PlaybackState.PAUSED:
            self.engine.resume()
            self.state = PlaybackState.PLAYING

    def stop(self) -> None:
        self.engine.cancel()
        self.state = PlaybackState.IDLE
        self.position = 0

    def _on_boundary(self, offset: int) -> None:
        self.position = offset

    def _on_end(self) -> None:
        self.state = PlaybackState.IDLE
        self.position = 0

    def _on_error(self, error: Exception) -> None:
        logger.error("Speech synthesis error: %s", error)
        self.last_error = error
        self.state = PlaybackState.IDLE

    @property
    def progress(self) -> float:
        """Percentage of the script already reached (0-100)."""
        if not self.script:
            return 0.0
        return self.position / len(self.script) * 100

    def highlight(self) -> Highlight:
        start = min(self.position, len(self.script))
        match = re.compile(r"\S*").match(self.script, start)
        end = match.end() if match else start
        return Highlight(self.script[:start], self.script[start:end], self.script[end:])


_narrator: Optional[Narrator] = None


def get_narrator(engine_factory: Callable[[], SpeechEngine] = TerminalSpeechEngine, **kwargs) -> Narrator:
    """Return the process-wide narrator, creating it on first use."""
    global _narrator
    if _narrator is None:
        _narrator = Narrator(engine_factory(), **kwargs)
    return _narrator


def reset_narrator() -> None:
    """Stop and drop the process-wide narrator."""
    global _narrator
    if _narrator is not None:
        _narrator.stop()
        _narrator = None


# ---- script rendering ------------------------------------------------------

class LineKind(str, Enum):
    CALL_TO_ACTION = "call_to_action"
    SOUND_EFFECT = "sound_effect"
    HEADING = "heading"
    TEXT = "text"


def classify_line(line: str) -> LineKind:
    """Guess what a script line is from its formatting. Best effort only."""
    stripped = line.strip()
    if re.match(r"^\d+\.", stripped):
        return LineKind.CALL_TO_ACTION
    if stripped.startswith("[") and stripped.endswith("]"):
        return LineKind.SOUND_EFFECT
    lowered = stripped.lower()
    if "call to action" in lowered or "summary" in lowered:
        return LineKind.HEADING
    return LineKind.TEXT


def classify_script(script: str) -> List[Tuple[LineKind, str]]:
    return [(classify_line(ln), ln.strip()) for ln in script.splitlines() if ln.strip()]


def script_to_markdown(script: str) -> str:
    out = []
    for kind, line in classify_script(script):
        if kind is LineKind.CALL_TO_ACTION:
            out.append(f"> {line}")
        elif kind is LineKind.SOUND_EFFECT:
            out.append(f"_{line}_")
        elif kind is LineKind.HEADING:
            out.append(f"#### {line}")
        else:
            out.append(line)
    return "\n\n".join(out)
