from __future__ import annotations

import unittest

from daybook.tasks import Task, TaskStatus, TextBlock, TimeInfo, format_node, format_task
from daybook.tasks.formatter import line_number_for_node, task_line_range
from tests.helpers import SAMPLE_NOTE, note


class TestTaskFormatter(unittest.TestCase):
    def test_format_task_renders_annotations_in_order(self) -> None:
        task = Task(
            status=TaskStatus.COMPLETED,
            description="Gym",
            emoji="🏋",
            time_info=TimeInfo(scheduled="07:00-08:00", completed="08:05"),
        )
        self.assertEqual("- [x] 🏋 07:00-08:00 Gym (08:05)", format_task(task))

    def test_format_task_appends_comment(self) -> None:
        task = Task(status=TaskStatus.ABANDONED, description="Water plants", comment="    rained all day")
        self.assertEqual("- [-] Water plants\n    rained all day", format_task(task))

    def test_completion_time_is_only_rendered_when_completed(self) -> None:
        task = Task(status=TaskStatus.PENDING, description="Call", time_info=TimeInfo(completed="10:00"))
        self.assertEqual("- [ ] Call", format_task(task))

    def test_move_annotations(self) -> None:
        moved = Task(status=TaskStatus.MOVED, description="Renew passport", target="2026-10-21")
        arrived = Task(status=TaskStatus.PENDING, description="Renew passport", source="2026-10-19")
        self.assertEqual("- [>] Renew passport → 2026-10-21", format_task(moved))
        self.assertEqual("- [ ] Renew passport (from 2026-10-19)", format_task(arrived))

    def test_format_node_rejects_unknown_nodes(self) -> None:
        self.assertEqual("prose", format_node(TextBlock(content="prose")))
        with self.assertRaises(TypeError):
            format_node("- [ ] not a node")  # type: ignore[arg-type]

    def test_line_numbers_follow_multiline_nodes(self) -> None:
        document = note(SAMPLE_NOTE)
        self.assertEqual(1, line_number_for_node(document, 0))
        self.assertEqual(3, line_number_for_node(document, 1))
        self.assertEqual(5, line_number_for_node(document, 2))
        self.assertEqual(10, line_number_for_node(document, 6))
        self.assertEqual((3, 4), task_line_range(document, 1))
        self.assertEqual((5, 5), task_line_range(document, 2))


if __name__ == "__main__":
    unittest.main()
