from __future__ import annotations

import unittest

from daybook.tasks import (
    TaskStatus,
    TaskToolError,
    TimeInfo,
    abandon_task,
    add_comment_to_task,
    append_comment_line,
    complete_task,
    create_moved_task,
    create_task,
    format_task,
    mark_task_as_moved,
    task_from_text,
    uncheck_task,
)
from tests.helpers import note


class TestTaskMutations(unittest.TestCase):
    def test_create_task_sets_original_line(self) -> None:
        task = create_task("  Call   dentist ", emoji="📞", scheduled="09:00-09:30")
        self.assertIs(TaskStatus.PENDING, task.status)
        self.assertEqual("Call dentist", task.description)
        self.assertEqual("- [ ] 📞 09:00-09:30 Call dentist", task.original_line)

    def test_task_from_text_reads_annotations(self) -> None:
        task = task_from_text("📧 ~14:00 Send invoice")
        self.assertEqual("📧", task.emoji)
        self.assertEqual("~14:00", task.time_info.scheduled)
        self.assertEqual("Send invoice", task.description)

    def test_task_from_text_rejects_blank_text(self) -> None:
        with self.assertRaises(TaskToolError):
            task_from_text("   ")

    def test_complete_task_postcondition(self) -> None:
        (task,) = note("- [ ] 09:00-10:00 Gym").tasks()
        done = complete_task(task, "10:05", "legs day")

        self.assertIs(TaskStatus.COMPLETED, done.status)
        self.assertEqual(TimeInfo(scheduled="09:00-10:00", completed="10:05"), done.time_info)
        self.assertEqual("    legs day", done.comment)
        self.assertEqual("Gym", done.description)
        self.assertIs(TaskStatus.PENDING, task.status)

    def test_complete_without_time_keeps_existing_time(self) -> None:
        (task,) = note("- [x] Gym (10:05)").tasks()
        self.assertEqual("10:05", complete_task(task).time_info.completed)

    def test_comments_accumulate_with_indentation(self) -> None:
        (task,) = note("- [ ] Draft report\n> from standup").tasks()
        updated = append_comment_line(task, "first pass done\n> quoted reply")
        updated = add_comment_to_task(updated, "sent to Ana", "16:20")
        self.assertEqual(
            "> from standup\n    first pass done\n> quoted reply\n    (16:20) sent to Ana",
            updated.comment,
        )
        self.assertIs(task, append_comment_line(task, ""))

    def test_uncheck_clears_completion_time(self) -> None:
        (task,) = note("- [x] ~08:00 Run (08:40)").tasks()
        reopened = uncheck_task(task)
        self.assertIs(TaskStatus.PENDING, reopened.status)
        self.assertEqual(TimeInfo(scheduled="~08:00"), reopened.time_info)

    def test_abandon_task(self) -> None:
        (task,) = note("- [ ] Water plants").tasks()
        dropped = abandon_task(task, "rained")
        self.assertEqual("- [-] Water plants\n    rained", format_task(dropped))

    def test_move_pair(self) -> None:
        (task,) = note("- [ ] Renew passport\n    bring photos").tasks()
        left = mark_task_as_moved(task, "2026-10-21")
        arrived = create_moved_task(left, "2026-10-19")

        self.assertEqual("- [>] Renew passport → 2026-10-21\n    bring photos", format_task(left))
        self.assertIs(TaskStatus.PENDING, arrived.status)
        self.assertIsNone(arrived.target)
        self.assertEqual(-1, arrived.line_index)
        self.assertEqual("- [ ] Renew passport (from 2026-10-19)\n    bring photos", format_task(arrived))

    def test_create_moved_task_keeps_status_of_processed_items(self) -> None:
        (task,) = note("- [x] Ship (12:00)").tasks()
        self.assertIs(TaskStatus.COMPLETED, create_moved_task(task, "2026-10-18").status)


if __name__ == "__main__":
    unittest.main()
