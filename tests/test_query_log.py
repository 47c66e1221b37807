"""Tests for chatbot.query_log - QueryLog."""

import re
import threading
from datetime import datetime, timezone

from chatbot.query_log import QueryLog

LINE = re.compile(r"^\[[^\]]+\] (QUESTION|ANSWER): .*$")


class TestAppend:
    def test_writes_question_and_answer_lines(self, tmp_path):
        log = QueryLog(tmp_path / "chat_log.txt")
        log.append("What is the return policy?", "Returns are accepted within 30 days.")

        lines = (tmp_path / "chat_log.txt").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert lines[0].endswith("] QUESTION: What is the return policy?")
        assert lines[1].endswith("] ANSWER: Returns are accepted within 30 days.")

    def test_iso_timestamp(self, tmp_path):
        log = QueryLog(tmp_path / "chat_log.txt")
        ts = datetime(2026, 1, 31, 12, 0, tzinfo=timezone.utc)
        log.append("q", "a", timestamp=ts)
        first = (tmp_path / "chat_log.txt").read_text(encoding="utf-8").splitlines()[0]
        assert first == "[2026-01-31T12:00:00+00:00] QUESTION: q"

    def test_appends(self, tmp_path):
        log = QueryLog(tmp_path / "chat_log.txt")
        log.append("q1", "a1")
        log.append("q2", "a2")
        assert len((tmp_path / "chat_log.txt").read_text(encoding="utf-8").splitlines()) == 4

    def test_multiline_content_stays_on_one_line(self, tmp_path):
        log = QueryLog(tmp_path / "chat_log.txt")
        log.append("first line\nsecond line", "a\\b")
        lines = (tmp_path / "chat_log.txt").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert all(LINE.match(line) for line in lines)

    def test_creates_parent_directory(self, tmp_path):
        log = QueryLog(tmp_path / "logs" / "chat_log.txt")
        log.append("q", "a")
        assert (tmp_path / "logs" / "chat_log.txt").exists()

    def test_write_failure_is_swallowed(self, tmp_path):
        # A directory cannot be opened for appending.
        log = QueryLog(tmp_path)
        log.append("q", "a")

    def test_lone_surrogate_is_written_escaped(self, tmp_path):
        log = QueryLog(tmp_path / "chat_log.txt")
        log.append("refund \ud83d?", "a")
        lines = (tmp_path / "chat_log.txt").read_text(encoding="utf-8").splitlines()
        assert lines[0].endswith("] QUESTION: refund \\ud83d?")

    def test_concurrent_appends_do_not_interleave(self, tmp_path):
        log = QueryLog(tmp_path / "chat_log.txt")
        threads = [
            threading.Thread(target=log.append, args=(f"q{i}", f"a{i}")) for i in range(20)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        entries = log.read_entries()
        assert len(entries) == 20
        assert all(e.question[1:] == e.answer[1:] for e in entries)


class TestReadEntries:
    def test_round_trip(self, tmp_path):
        log = QueryLog(tmp_path / "chat_log.txt")
        log.append("Multi\nline?", "Yes.")
        log.append("Second", "I don't know.")

        entries = log.read_entries()
        assert [(e.question, e.answer) for e in entries] == [
            ("Multi\nline?", "Yes."),
            ("Second", "I don't know."),
        ]
        assert entries[0].timestamp.tzinfo is not None

    def test_missing_file(self, tmp_path):
        assert QueryLog(tmp_path / "nope.txt").read_entries() == []

    def test_skips_malformed_lines(self, tmp_path):
        path = tmp_path / "chat_log.txt"
        path.write_text(
            "garbage\n"
            "[2026-01-31T12:00:00+00:00] QUESTION: q\n"
            "[2026-01-31T12:00:00+00:00] ANSWER: a\n",
            encoding="utf-8",
        )
        entries = QueryLog(path).read_entries()
        assert [(e.question, e.answer) for e in entries] == [("q", "a")]
