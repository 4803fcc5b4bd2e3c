"""Tests for narration playback and script rendering."""

import io

import pytest

from gitcast.core import narration
from gitcast.core.narration import (
    LineKind,
    Narrator,
    PlaybackState,
    TerminalSpeechEngine,
    classify_line,
    classify_script,
    estimated_minutes,
    get_narrator,
    reset_narrator,
    script_to_markdown,
)


class FakeEngine:
    """Records calls and lets the test fire engine callbacks."""

    def __init__(self):
        self.calls = []
        self.callbacks = {}

    def speak(self, text, *, rate, pitch, volume, on_boundary, on_end, on_error):
        self.calls.append(("speak", text, rate, pitch, volume))
        self.callbacks = {"boundary": on_boundary, "end": on_end, "error": on_error}

    def pause(self):
        self.calls.append(("pause",))

    def resume(self):
        self.calls.append(("resume",))

    def cancel(self):
        self.calls.append(("cancel",))

    def wait(self, timeout=None):
        self.calls.append(("wait",))


SCRIPT = "Welcome to GitCast. Today we review engine."


class TestNarrator:
    def test_play_pause_resume_stop(self):
        engine = FakeEngine()
        n = Narrator(engine, rate=1.2)
        n.play(SCRIPT)
        assert n.state is PlaybackState.PLAYING
        assert engine.calls[-1] == ("speak", SCRIPT, 1.2, 1.0, 1.0)

        n.pause()
        assert n.state is PlaybackState.PAUSED
        n.play()
        assert n.state is PlaybackState.PLAYING
        assert engine.calls[-1] == ("resume",)

        engine.callbacks["boundary"](11)
        assert n.position == 11
        n.stop()
        assert n.state is PlaybackState.IDLE
        assert n.position == 0
        assert engine.calls[-1] == ("cancel",)

    def test_pause_when_idle_is_noop(self):
        engine = FakeEngine()
        n = Narrator(engine)
        n.pause()
        n.resume()
        assert engine.calls == []
        assert n.state is PlaybackState.IDLE

    def test_new_script_restarts(self):
        engine = FakeEngine()
        n = Narrator(engine)
        n.play("first")
        n.pause()
        n.play("second")
        assert engine.calls[-2:] == [("cancel",), ("speak", "second", 1.0, 1.0, 1.0)]
        assert n.state is PlaybackState.PLAYING

    def test_end_and_error_return_to_idle(self):
        engine = FakeEngine()
        n = Narrator(engine)
        n.play(SCRIPT)
        engine.callbacks["boundary"](20)
        engine.callbacks["end"]()
        assert (n.state, n.position) == (PlaybackState.IDLE, 0)

        n.play(SCRIPT)
        err = RuntimeError("audio device busy")
        engine.callbacks["error"](err)
        assert n.state is PlaybackState.IDLE
        assert n.last_error is err

    def test_progress_and_highlight(self):
        n = Narrator(FakeEngine())
        assert n.progress == 0.0
        n.play(SCRIPT)
        n._on_boundary(SCRIPT.index("Today"))
        h = n.highlight()
        assert h.spoken == "Welcome to GitCast. "
        assert h.current == "Today"
        assert h.remaining == " we review engine."
        assert n.progress == pytest.approx(20 / len(SCRIPT) * 100)


class TestProcessWideNarrator:
    def test_acquire_once_and_reset(self):
        reset_narrator()
        engines = []

        def factory():
            engines.append(FakeEngine())
            return engines[-1]

        first = get_narrator(factory)
        assert get_narrator(factory) is first
        assert len(engines) == 1

        first.play(SCRIPT)
        reset_narrator()
        assert engines[0].calls[-1] == ("cancel",)
        assert narration._narrator is None
        assert get_narrator(factory) is not first
        reset_narrator()


class TestTerminalEngine:
    def test_writes_every_word_and_reports_offsets(self):
        out = io.StringIO()
        engine = TerminalSpeechEngine(stream=out, words_per_minute=6_000_000)
        offsets, ended = [], []
        engine.speak("one  two\nthree", on_boundary=offsets.append, on_end=lambda: ended.append(True))
        engine.wait(timeout=5)
        assert out.getvalue() == "one  two\nthree\n"
        assert offsets == [0, 5, 9]
        assert ended == [True]
        assert engine.speaking is False

    def test_cancel_stops_output(self):
        out = io.StringIO()
        engine = TerminalSpeechEngine(stream=out, words_per_minute=1)
        ended = []
        engine.speak("a b c d", on_end=lambda: ended.append(True))
        engine.cancel()
        assert engine.speaking is False
        assert ended == []
        assert "d" not in out.getvalue()


class TestScriptRendering:
    @pytest.mark.parametrize("line,kind", [
        ("1. Add a license", LineKind.CALL_TO_ACTION),
        ("[Intro music]", LineKind.SOUND_EFFECT),
        ("Call to Action Summary", LineKind.HEADING),
        ("Welcome back to GitCast!", LineKind.TEXT),
    ])
    def test_classify_line(self, line, kind):
        assert classify_line(line) is kind

    def test_blank_lines_dropped(self):
        assert classify_script("\n[Intro]\n\n  \nHello\n") == [
            (LineKind.SOUND_EFFECT, "[Intro]"), (LineKind.TEXT, "Hello"),
        ]

    def test_markdown(self):
        md = script_to_markdown("[Intro music]\nHi Ada\nCall to action:\n1. Pin repos\n")
        assert md == "_[Intro music]_\n\nHi Ada\n\n#### Call to action:\n\n> 1. Pin repos"


def test_estimated_minutes():
    assert estimated_minutes("") == 0
    assert estimated_minutes("x" * 750) == 1
    assert estimated_minutes("x" * 751) == 2
    assert estimated_minutes("x" * 4500) == 6
