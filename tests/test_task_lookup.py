from __future__ import annotations

import unittest

from daybook.tasks import (
    AmbiguousTaskError,
    TaskNotFoundError,
    TaskStatus,
    find_task_by_description,
    find_tasks_by_description,
    normalize_text,
)
from tests.helpers import DAILY_PATH, SAMPLE_NOTE, note


class TestTaskLookup(unittest.TestCase):
    def test_normalize_text_folds_case_accents_and_punctuation(self) -> None:
        self.assertEqual("creme brulee", normalize_text("  Crème   Brûlée! "))
        self.assertEqual("kupic mleko", normalize_text("Kupić mleko"))

    def test_description_substring_wins_first(self) -> None:
        task = find_task_by_description(note(SAMPLE_NOTE), "dentist")
        self.assertEqual("Call dentist", task.description)

    def test_original_line_matches_annotations(self) -> None:
        task = find_task_by_description(note(SAMPLE_NOTE), "📞 09:00-09:30 Call")
        self.assertEqual("Call dentist", task.description)

    def test_normalized_match_ignores_diacritics(self) -> None:
        document = note("- [ ] Kupic mleko")
        task = find_task_by_description(document, "Kupić mleko")
        self.assertEqual("Kupic mleko", task.description)

    def test_normalized_match_does_not_forgive_typos(self) -> None:
        document = note("- [ ] Kupic mleko")
        with self.assertRaises(TaskNotFoundError) as ctx:
            find_task_by_description(document, "Kup mleko")
        self.assertEqual("Kup mleko", ctx.exception.query)
        self.assertEqual(DAILY_PATH, ctx.exception.file_path)

    def test_first_tier_with_hits_stops_the_search(self) -> None:
        document = note("- [ ] Call dentist\n- [ ] call center survey")
        matches = find_tasks_by_description(document, "Call")
        self.assertEqual(["Call dentist"], [task.description for task in matches])

    def test_ambiguous_query_reports_match_count(self) -> None:
        document = note("- [ ] Send invoice to Ana\n- [x] Send invoice to Bo (09:00)")
        with self.assertRaises(AmbiguousTaskError) as ctx:
            find_task_by_description(document, "Send invoice")
        self.assertEqual(2, ctx.exception.matches)
        self.assertIn(DAILY_PATH, str(ctx.exception))

    def test_predicate_narrows_candidates(self) -> None:
        document = note("- [ ] Send invoice to Ana\n- [x] Send invoice to Bo (09:00)")
        task = find_task_by_description(
            document,
            "Send invoice",
            lambda candidate: candidate.status is TaskStatus.COMPLETED,
        )
        self.assertEqual("Send invoice to Bo", task.description)


if __name__ == "__main__":
    unittest.main()
