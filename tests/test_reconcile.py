"""Tests for word-to-line reconciliation."""

from __future__ import annotations

from lyricsync.lyrics.models import LineWindow, TimedWord
from lyricsync.lyrics.reconcile import reconcile


def _w(word, start, end):
    return TimedWord(word=word, start=start, end=end)


class TestReconcile:
    def test_case_insensitive_substring_within_slack(self):
        word = _w("hello", 1.0, 2.0)
        result = reconcile([word], [LineWindow(0, 5, "Hello world", False)])
        assert result.lines[0].words == [word]
        assert result.unmatched == []

    def test_instrumental_gets_no_words(self):
        words = [_w("hello", 5.5, 6.0)]
        result = reconcile(words, [LineWindow(5, 10, "", True)])
        line = result.lines[0]
        assert line.is_instrumental
        assert line.words == []
        assert result.unmatched == words

    def test_slack_window_edges(self):
        window = LineWindow(10, 20, "a b c d", False)
        inside_low = _w("a", 8.0, 9.0)
        inside_high = _w("b", 21.0, 22.0)
        too_early = _w("c", 7.9, 9.0)
        too_late = _w("d", 21.0, 22.1)
        result = reconcile([inside_low, inside_high, too_early, too_late], [window])
        assert result.lines[0].words == [inside_low, inside_high]
        assert result.unmatched == [too_early, too_late]

    def test_custom_slack(self):
        word = _w("x", 4.5, 5.0)
        assert reconcile([word], [LineWindow(5, 6, "x", False)], slack=0.0).lines[0].words == []
        assert reconcile([word], [LineWindow(5, 6, "x", False)], slack=0.5).lines[0].words == [word]

    def test_text_must_be_contained(self):
        result = reconcile([_w("goodbye", 1, 2)], [LineWindow(0, 5, "Hello world", False)])
        assert result.lines[0].words == []

    def test_consumed_text_not_reused_within_line(self):
        first, second = _w("la", 0.5, 1.0), _w("la", 1.0, 1.5)
        result = reconcile([first, second], [LineWindow(0, 5, "la di da", False)])
        assert result.lines[0].words == [first]
        assert result.unmatched == [second]

    def test_repeated_words_fill_repeated_text(self):
        words = [_w("la", 0.5, 1.0), _w("la", 1.0, 1.5), _w("la", 1.5, 2.0)]
        result = reconcile(words, [LineWindow(0, 5, "La la la", False)])
        assert result.lines[0].words == words

    def test_each_word_consumed_once(self):
        word = _w("again", 4.5, 5.5)
        windows = [LineWindow(0, 5, "again", False), LineWindow(5, 10, "again", False)]
        result = reconcile([word], windows)
        assert result.lines[0].words == [word]
        assert result.lines[1].words == []

    def test_greedy_can_leave_later_line_short(self):
        # the early "yeah" is within slack of line 0 and belongs to line 1,
        # but line 0 claims the first matching word in transcript order
        w1, w2 = _w("yeah", 5.5, 6.0), _w("yeah", 1.0, 2.0)
        windows = [LineWindow(0, 5, "yeah", False), LineWindow(5, 10, "yeah", False)]
        result = reconcile([w1, w2], windows)
        assert result.lines[0].words == [w1]
        assert result.lines[1].words == []
        assert result.unmatched == [w2]

    def test_words_keep_transcript_order(self):
        words = [_w("world", 1.5, 2.0), _w("hello", 1.0, 1.5)]
        result = reconcile(words, [LineWindow(0, 5, "hello world", False)])
        assert [w.word for w in result.lines[0].words] == ["world", "hello"]

    def test_multiword_fragment(self):
        word = _w("Hello world", 0.0, 2.0)
        result = reconcile([word], [LineWindow(0, 5, "hello world!", False)])
        assert result.lines[0].words == [word]

    def test_output_order_matches_input(self):
        windows = [LineWindow(0, 5, "a", False), LineWindow(5, 10, "", True), LineWindow(10, 15, "b", False)]
        result = reconcile([], windows)
        assert [(ln.start, ln.end, ln.text, ln.is_instrumental) for ln in result.lines] == [
            (0, 5, "a", False), (5, 10, "", True), (10, 15, "b", False),
        ]

    def test_input_words_not_mutated(self):
        words = [_w("a", 0, 1), _w("b", 1, 2)]
        snapshot = list(words)
        reconcile(words, [LineWindow(0, 5, "a b", False)])
        assert words == snapshot
