import unittest
from datetime import date

from sqlite_support import SQLiteTestCase

from movienight.db.models import TimeSlotEnum
from movienight.services.group_service import (
    find_best_slot,
    get_movie_night_summary,
    get_ranked_intersection,
)
from movienight.services.movie_service import save_movie
from movienight.services.scheduling_service import update_availability
from movienight.services.user_service import identify_user, reorder_unseen, toggle_unseen

AFTERNOON = TimeSlotEnum.afternoon
EVENING = TimeSlotEnum.evening
TODAY = date(2026, 10, 19)


class TestFindBestSlot(unittest.TestCase):
    def test_none_when_nobody_is_available(self) -> None:
        self.assertIsNone(find_best_slot([], TODAY))
        self.assertIsNone(find_best_slot([{"name": "Alice", "slots": {}}], TODAY))

    def test_picks_slot_with_most_people(self) -> None:
        availability = [
            {"name": "Alice", "slots": {"2026-10-20": [EVENING], "2026-10-22": [AFTERNOON]}},
            {"name": "Bob", "slots": {"2026-10-22": [AFTERNOON]}},
            {"name": "Carol", "slots": {"2026-10-22": [AFTERNOON, EVENING]}},
        ]
        best = find_best_slot(availability, TODAY)
        self.assertEqual(best["date"], "2026-10-22")
        self.assertEqual(best["slot"], AFTERNOON)
        self.assertEqual(best["users"], ["Alice", "Bob", "Carol"])

    def test_earliest_slot_wins_ties(self) -> None:
        availability = [
            {"name": "Alice", "slots": {"2026-10-21": [EVENING], "2026-10-25": [AFTERNOON]}},
            {"name": "Bob", "slots": {"2026-10-21": [EVENING], "2026-10-25": [AFTERNOON]}},
        ]
        best = find_best_slot(availability, TODAY)
        self.assertEqual((best["date"], best["slot"]), ("2026-10-21", EVENING))

    def test_afternoon_before_evening_on_same_day(self) -> None:
        availability = [{"name": "Alice", "slots": {"2026-10-20": [AFTERNOON, EVENING]}}]
        best = find_best_slot(availability, TODAY)
        self.assertEqual(best["slot"], AFTERNOON)

    def test_ignores_dates_outside_the_window(self) -> None:
        availability = [
            {"name": "Alice", "slots": {"2026-10-18": [EVENING], "2026-11-30": [EVENING]}},
            {"name": "Bob", "slots": {"2026-10-18": [EVENING], "2026-11-30": [EVENING]}},
        ]
        self.assertIsNone(find_best_slot(availability, TODAY, weeks_ahead=5))

    def test_last_day_of_window_is_included(self) -> None:
        # 1 week ahead covers today through today + 6
        availability = [{"name": "Alice", "slots": {"2026-10-25": [EVENING]}}]
        self.assertIsNotNone(find_best_slot(availability, TODAY, weeks_ahead=1))
        availability = [{"name": "Alice", "slots": {"2026-10-26": [EVENING]}}]
        self.assertIsNone(find_best_slot(availability, TODAY, weeks_ahead=1))


class TestMovieNightSummary(SQLiteTestCase):
    def setUp(self) -> None:
        super().setUp()
        for tmdb_id, title in (("1", "Alien"), ("2", "Brazil"), ("3", "Casablanca"), ("4", "Dune"), ("5", "Heat")):
            save_movie(self.db, {"tmdb_id": tmdb_id, "title": title, "year": 1980})

        identify_user(self.db, "Alice")
        identify_user(self.db, "Bob")
        for movie_id in ("1", "2", "3", "4", "5"):
            toggle_unseen(self.db, "Alice", movie_id)
        for movie_id in ("5", "4", "3", "2", "9"):
            toggle_unseen(self.db, "Bob", movie_id)

    def test_ranked_intersection(self) -> None:
        ranked = get_ranked_intersection(self.db)
        # 2: 4 + 2, 3: 3 + 3, 4: 2 + 4, 5: 1 + 5; all tie, first user's order kept
        self.assertEqual([r.movie_id for r in ranked], ["2", "3", "4", "5"])
        self.assertEqual({r.score for r in ranked}, {6})
        self.assertEqual(ranked[0].movie.title, "Brazil")

    def test_summary_with_availability(self) -> None:
        reorder_unseen(self.db, "Bob", ["3", "5", "4", "2", "9"])
        update_availability(self.db, "Alice", date(2026, 10, 23), [EVENING])
        update_availability(self.db, "Bob", date(2026, 10, 23), [EVENING])

        summary = get_movie_night_summary(self.db, today=TODAY)

        self.assertEqual(summary["best_slot"]["date"], "2026-10-23")
        self.assertEqual(summary["best_slot"]["users"], ["Alice", "Bob"])
        # 3: 3 + 5, 2: 4 + 2, 4: 2 + 3, 5: 1 + 4
        self.assertEqual(summary["top_pick"].movie_id, "3")
        self.assertEqual([r.movie_id for r in summary["runner_ups"]], ["2", "4", "5"])
        self.assertEqual(summary["intersection_size"], 4)

    def test_summary_with_empty_intersection(self) -> None:
        identify_user(self.db, "Carol")
        summary = get_movie_night_summary(self.db, today=TODAY)
        self.assertIsNone(summary["best_slot"])
        self.assertIsNone(summary["top_pick"])
        self.assertEqual(summary["runner_ups"], [])
        self.assertEqual(summary["intersection_size"], 0)
