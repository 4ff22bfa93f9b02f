"""
Tests for ContextWindowManager and TextDocument.
"""

import dataclasses

import pytest

from nullcode.modules.config import ContextSettings
from nullcode.modules.context.document import TextDocument, language_for_path, split_lines
from nullcode.modules.context.window_manager import ContextWindowManager, clip_span
from nullcode.modules.schemas import CursorPosition


def numbered(n):
    return "\n".join(f"line {i}" for i in range(1, n + 1))


class TestSlidingWindow:
    def test_keeps_last_n_lines(self):
        manager = ContextWindowManager(window_size=250)
        window = manager.recompute_window(numbered(300))

        assert len(window) == 250
        assert window[0] == "line 51"
        assert window[-1] == "line 300"

    def test_short_document_is_kept_whole(self):
        manager = ContextWindowManager(window_size=250)
        assert manager.recompute_window(numbered(10)) == tuple(split_lines(numbered(10)))

    def test_trailing_newline_does_not_add_a_line(self):
        manager = ContextWindowManager(window_size=5)
        assert manager.recompute_window("a\nb\n") == ("a", "b")

    def test_recompute_is_idempotent(self):
        manager = ContextWindowManager(window_size=20)
        first = manager.recompute_window(numbered(100))
        assert manager.recompute_window(numbered(100)) == first

    def test_crlf_documents(self):
        manager = ContextWindowManager(window_size=5)
        assert manager.recompute_window("a\r\nb\r\nc") == ("a", "b", "c")


class TestSnapshot:
    @pytest.mark.parametrize(
        "cursor,radius,total,expected",
        [
            (0, 25, 100, (0, 25)),
            (50, 25, 100, (25, 75)),
            (95, 25, 100, (70, 100)),
            (-10, 5, 20, (0, 0)),
            (500, 25, 100, (100, 100)),
            (3, 25, 0, (0, 0)),
        ],
    )
    def test_clip_span(self, cursor, radius, total, expected):
        assert clip_span(cursor, radius, total) == expected

    def test_snapshot_text(self):
        text = numbered(100)
        manager = ContextWindowManager(snapshot_radius=25)
        snapshot = manager.recompute_snapshot(text, 50, 100)

        assert snapshot.start_line == 25
        assert snapshot.end_line == 75
        assert snapshot.line_count == 50
        assert snapshot.text == "\n".join(split_lines(text)[25:75])

    def test_total_larger_than_document_does_not_raise(self):
        manager = ContextWindowManager(snapshot_radius=5)
        snapshot = manager.recompute_snapshot("a\nb", 1, 50)

        assert snapshot.text == "a\nb"
        assert (snapshot.start_line, snapshot.end_line) == (0, 2)
        assert snapshot.line_count == 2


class TestAcceptedLog:
    def test_append_order(self):
        manager = ContextWindowManager()
        manager.track_accepted("first")
        manager.on_suggestion_accepted("second")

        assert manager.accepted_suggestions == ("first", "second")
        assert manager.get_context().accepted_suggestions == ("first", "second")

    def test_cap_limits_bundle_but_not_log(self):
        manager = ContextWindowManager(max_accepted_suggestions=2)
        for text in ("a", "b", "c"):
            manager.track_accepted(text)

        assert manager.get_context().accepted_suggestions == ("b", "c")
        assert manager.accepted_suggestions == ("a", "b", "c")

    def test_zero_cap_exposes_nothing(self):
        manager = ContextWindowManager(max_accepted_suggestions=0)
        manager.track_accepted("a")
        assert manager.get_context().accepted_suggestions == ()


class TestBundle:
    def test_no_active_document(self):
        manager = ContextWindowManager()
        manager.track_accepted("kept")
        bundle = manager.get_context()

        assert bundle.recent_lines == ()
        assert bundle.surrounding_context.is_empty
        assert bundle.accepted_suggestions == ("kept",)

    def test_editor_events_drive_the_bundle(self):
        manager = ContextWindowManager(window_size=10, snapshot_radius=2)
        manager.on_active_editor_changed(TextDocument(numbered(30), "python"), CursorPosition(line=5))

        bundle = manager.get_context()
        assert bundle.recent_lines[-1] == "line 30"
        assert bundle.surrounding_context.text == "line 4\nline 5\nline 6\nline 7"

        manager.on_cursor_moved(CursorPosition(line=0))
        assert manager.get_context().surrounding_context.text == "line 1\nline 2"

        manager.on_document_changed(TextDocument(numbered(3), "python"))
        assert manager.get_context().recent_lines == ("line 1", "line 2", "line 3")

    def test_closing_the_editor_clears_window_in_bundle(self):
        manager = ContextWindowManager()
        manager.on_active_editor_changed(TextDocument(numbered(5)))
        manager.on_active_editor_changed(None)

        assert manager.active_document is None
        assert manager.get_context().recent_lines == ()

    def test_bundle_is_read_only(self):
        bundle = ContextWindowManager().get_context()
        with pytest.raises(dataclasses.FrozenInstanceError):
            bundle.recent_lines = ("x",)

    def test_to_dict(self):
        manager = ContextWindowManager(snapshot_radius=1)
        manager.on_active_editor_changed(TextDocument("a\nb\nc"), CursorPosition(line=1))
        data = manager.get_context().to_dict()

        assert data["recent_lines"] == ["a", "b", "c"]
        assert data["surrounding_context"] == {"start_line": 0, "end_line": 2, "text": "a\nb"}

    def test_from_settings(self):
        manager = ContextWindowManager.from_settings(
            ContextSettings(window_size=7, snapshot_radius=3, max_accepted_suggestions=1)
        )
        assert (manager.window_size, manager.snapshot_radius, manager.max_accepted_suggestions) == (7, 3, 1)


class TestTextDocument:
    def test_accessors_clip(self):
        doc = TextDocument("abc\ndef")

        assert doc.line_count == 2
        assert doc.line_at(1) == "def"
        assert doc.line_at(9) == ""
        assert doc.line_at(-1) == ""
        assert doc.get_text(-5, 0, 999, 0) == "abc\ndef"
        assert doc.get_text(0, 1, 1, 2) == "bc\nde"
        assert doc.get_text(1, 0, 0, 0) == ""

    def test_from_path(self, tmp_path):
        path = tmp_path / "app.py"
        path.write_text("x = 1\n", encoding="utf-8")
        doc = TextDocument.from_path(str(path))

        assert doc.language_id == "python"
        assert doc.lines == ("x = 1",)

    def test_language_for_path(self):
        assert language_for_path("src/main.rs") == "rust"
        assert language_for_path("README") == ""
