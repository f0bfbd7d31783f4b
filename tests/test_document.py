"""Tests for the plan document grammar."""

from datetime import date

import pytest

from core.document import (
    TaskItem,
    compute_percent,
    format_progress,
    locate_task_section,
    parse_document,
    parse_task_line,
    plan_filename,
    split_lines,
    join_lines,
)
from core.errors import FormatError


class TestParseTaskLine:

    @pytest.mark.parametrize("line, expected", [
        ("- [ ] Write docs", TaskItem("Write docs", False)),
        ("- [x] Write docs", TaskItem("Write docs", True)),
        ("- [X] Write docs", TaskItem("Write docs", True)),
        ("- [x] Write docs\r", TaskItem("Write docs", True)),
        ("- Write docs", TaskItem("Write docs", False)),
        ("- [x]", TaskItem("", True)),
        ("- [x]foo", TaskItem("foo", True)),
        ("- [ ]foo", TaskItem("foo", False)),
    ])
    def test_markers(self, line, expected):
        assert parse_task_line(line) == expected


class TestLocateTaskSection:

    def test_span_and_items(self, plan_text):
        lines = split_lines(plan_text)
        section = locate_task_section(lines)
        assert lines[section.start - 1] == "## Tasks"
        assert section.end - section.start == 3
        assert [item.description for item in section.items] == [
            "Choose a tech stack", "Design the page layout", "Deploy the site",
        ]
        assert not any(item.done for item in section.items)

    def test_first_header_wins(self):
        lines = ["## Tasks", "- [x] a", "", "## Tasks", "- [ ] b", "- [ ] c"]
        section = locate_task_section(lines)
        assert (section.start, section.end) == (1, 2)

    def test_missing_header(self):
        with pytest.raises(FormatError):
            locate_task_section(["# Project Plan: x", "- [ ] orphan"])


class TestParseDocument:

    def test_built_document(self, plan_text, goal, tasks):
        doc = parse_document(plan_text)
        assert doc.title == goal
        assert doc.created_date == date(2024, 5, 17)
        assert [t.description for t in doc.tasks] == tasks
        assert doc.progress.total == 3
        assert doc.progress.percent == 0

    def test_freeform_sections_kept_verbatim(self, plan_text):
        doc = parse_document(plan_text)
        headers = [block.split("\n", 1)[0] for block in doc.freeform_sections]
        assert headers == ["## Overview", "## Timeline", "## Resources Needed", "## Notes"]
        assert doc.freeform_sections[2] == "## Resources Needed\n*To be determined*\n"
        assert doc.freeform_sections[-1].endswith("planning agent.\n")

    def test_missing_date_and_title(self):
        doc = parse_document("## Tasks\n- [x] a\n- [ ] b\n")
        assert doc.title == ""
        assert doc.created_date is None
        assert doc.progress.completed == 1
        assert doc.progress.percent == 50

    def test_requires_task_section(self):
        with pytest.raises(FormatError):
            parse_document("# Project Plan: x\n\n## Notes\n")


class TestProgressMath:

    @pytest.mark.parametrize("completed, total, percent", [
        (0, 3, 0), (1, 3, 33), (2, 3, 67), (3, 3, 100), (1, 8, 13), (1, 200, 1), (0, 0, 0),
    ])
    def test_compute_percent(self, completed, total, percent):
        assert compute_percent(completed, total) == percent

    def test_format_progress(self):
        assert format_progress(2, 3) == "- 2/3 tasks completed (67%)"


def test_split_join_is_lossless():
    text = "a\r\n\nb\n"
    assert join_lines(split_lines(text)) == text


def test_plan_filename():
    assert plan_filename("Hello, World") == "plan-hello--world.md"
