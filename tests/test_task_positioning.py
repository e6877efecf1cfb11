from __future__ import annotations

import unittest

from daybook.tasks import (
    InsertPosition,
    InsertionOutOfBoundsError,
    InvalidPositionError,
    Task,
    TaskNotFoundError,
    TaskStatus,
    complete_task,
    create_task,
    determine_insertion_position,
    find_current_spot,
    find_task_by_description,
    format_note,
    insert_task_at_position,
    move_task_to_current_spot,
    move_task_to_position,
    remove_task_from_document,
    replace_task_in_document,
)
from daybook.tasks.positioning import insert_position_from_name
from tests.helpers import note, task_descriptions


class TestCurrentSpot(unittest.TestCase):
    def test_no_pending_tasks_means_end(self) -> None:
        document = note("- [x] A (09:00)\nprose")
        self.assertEqual(len(document), find_current_spot(document))

    def test_pending_first_means_start(self) -> None:
        document = note("- [ ] A\n- [x] B (09:00)")
        self.assertEqual(0, find_current_spot(document))

    def test_only_text_before_first_pending(self) -> None:
        document = note("# Today\n- [ ] A")
        self.assertEqual(0, find_current_spot(document))

    def test_text_after_processed_task_stays_with_it(self) -> None:
        document = note("# Today\n- [x] A (09:00)\nnotes about A\n- [ ] B")
        self.assertEqual(3, find_current_spot(document))

    def test_spot_sits_right_after_last_processed_task(self) -> None:
        document = note("- [x] A (09:00)\n- [-] B\n- [ ] C\n- [x] D (10:00)")
        self.assertEqual(2, find_current_spot(document))


class TestInsertionPosition(unittest.TestCase):
    def setUp(self) -> None:
        self.document = note("- [x] A (09:00)\n- [ ] B\n- [ ] C")

    def test_beginning_and_end(self) -> None:
        self.assertEqual(1, determine_insertion_position(self.document, InsertPosition.BEGINNING))
        self.assertEqual(3, determine_insertion_position(self.document, "end"))

    def test_before_and_after_reference(self) -> None:
        self.assertEqual(2, determine_insertion_position(self.document, "before", "C"))
        self.assertEqual(3, determine_insertion_position(self.document, "after", "C"))

    def test_reference_required(self) -> None:
        with self.assertRaises(InvalidPositionError):
            determine_insertion_position(self.document, "after")

    def test_unknown_reference(self) -> None:
        with self.assertRaises(InvalidPositionError) as ctx:
            determine_insertion_position(self.document, "before", "Z")
        self.assertIsInstance(ctx.exception.__cause__, TaskNotFoundError)

    def test_unknown_mode(self) -> None:
        with self.assertRaises(InvalidPositionError):
            insert_position_from_name("middle")
        self.assertIs(InsertPosition.END, insert_position_from_name(" END "))


class TestDocumentEdits(unittest.TestCase):
    def test_insert_bounds(self) -> None:
        document = note("- [ ] A")
        task = create_task("B")
        with self.assertRaises(InsertionOutOfBoundsError):
            insert_task_at_position(document, task, -1)
        with self.assertRaises(InsertionOutOfBoundsError):
            insert_task_at_position(document, task, 2)
        updated = insert_task_at_position(document, task, 1)
        self.assertEqual(["A", "B"], task_descriptions(updated))
        self.assertEqual(["A"], task_descriptions(document))

    def test_remove_and_replace(self) -> None:
        document = note("- [ ] A\n- [ ] B")
        a = find_task_by_description(document, "A")
        self.assertEqual(["B"], task_descriptions(remove_task_from_document(document, a)))

        done = complete_task(a, "11:00")
        replaced = replace_task_in_document(document, a, done)
        self.assertEqual("- [x] A (11:00)\n- [ ] B", format_note(replaced))

        with self.assertRaises(TaskNotFoundError):
            remove_task_from_document(document, done)

    def test_identity_hits_first_duplicate(self) -> None:
        document = note("- [ ] Water plants\n    kitchen\n- [ ] Water plants\n    balcony")
        balcony = list(document.tasks())[1]
        updated = remove_task_from_document(document, balcony)
        (remaining,) = updated.tasks()
        self.assertEqual("    balcony", remaining.comment)

    def test_move_to_current_spot_scenario(self) -> None:
        document = note("- [ ] 📞 Call dentist\n- [x] 📧 Send invoice (14:05)")
        task = find_task_by_description(document, "Call dentist")
        done = complete_task(task, "15:00")
        updated = move_task_to_current_spot(replace_task_in_document(document, task, done), done)

        self.assertEqual(["Send invoice", "Call dentist"], task_descriptions(updated))
        moved = updated.content[1]
        assert isinstance(moved, Task)
        self.assertIs(TaskStatus.COMPLETED, moved.status)
        self.assertEqual("📞 Call dentist (15:00)", moved.text)
        self.assertEqual("- [x] 📧 Send invoice (14:05)\n- [x] 📞 Call dentist (15:00)", format_note(updated))

    def test_move_to_current_spot_removes_the_original_task(self) -> None:
        document = note("- [x] Call (09:00)\n    from monday\n- [ ] Call")
        pending = list(document.tasks())[1]
        done = complete_task(pending, "15:00")
        updated = move_task_to_current_spot(document, pending, done)
        self.assertEqual(
            "- [x] Call (09:00)\n    from monday\n- [x] Call (15:00)",
            format_note(updated),
        )

    def test_move_after_reference(self) -> None:
        document = note("- [ ] A\n- [ ] B\n- [ ] C")
        a = find_task_by_description(document, "A")
        updated = move_task_to_position(document, a, InsertPosition.AFTER, "C")
        self.assertEqual(["B", "C", "A"], task_descriptions(updated))


if __name__ == "__main__":
    unittest.main()
