import asyncio
import unittest
from unittest.mock import AsyncMock

from sqlite_support import SQLiteTestCase

from movienight.services.movie_service import (
    MovieNotFoundError,
    add_movie_by_imdb_id,
    add_movie_from_tmdb,
    clear_all_movies,
    delete_movie,
    get_movie,
    import_top_rated,
    list_movies,
    list_movies_with_unseen_counts,
    poster_url,
    save_movie,
)
from movienight.services.user_service import get_user, identify_user, toggle_unseen


def _details(tmdb_id, title):
    return {"tmdb_id": str(tmdb_id), "title": title, "year": 2000, "genres": ["Drama"]}


def _fake_tmdb(details=None, imdb_match=None, top_rated=None):
    service = AsyncMock()
    service.get_movie_details.side_effect = lambda tmdb_id: (details or {}).get(tmdb_id)
    service.find_by_imdb_id.return_value = imdb_match
    service.get_top_rated_movies.return_value = top_rated or []
    return service


class TestPosterUrl(unittest.TestCase):
    def test_builds_sized_url(self) -> None:
        self.assertEqual(
            poster_url("/abc.jpg", "w200"),
            "https://image.tmdb.org/t/p/w200/abc.jpg",
        )
        self.assertEqual(poster_url("/abc.jpg"), "https://image.tmdb.org/t/p/w500/abc.jpg")

    def test_missing_path(self) -> None:
        self.assertIsNone(poster_url(None))
        self.assertIsNone(poster_url(""))


class TestCatalog(SQLiteTestCase):
    def test_save_movie_upserts(self) -> None:
        save_movie(self.db, {"tmdb_id": 550, "title": "Fight Club", "year": 1999})
        updated = save_movie(self.db, {"tmdb_id": "550", "title": "Fight Club", "year": 1999, "runtime": 139})

        self.assertEqual(updated.tmdb_id, "550")
        self.assertEqual(updated.runtime, 139)
        self.assertEqual(len(list_movies(self.db)), 1)

    def test_list_is_sorted_by_title(self) -> None:
        save_movie(self.db, _details(2, "Zodiac"))
        save_movie(self.db, _details(1, "Amélie"))
        self.assertEqual([m.title for m in list_movies(self.db)], ["Amélie", "Zodiac"])

    def test_get_unknown_movie(self) -> None:
        with self.assertRaises(MovieNotFoundError):
            get_movie(self.db, "404")

    def test_delete_keeps_unseen_lists(self) -> None:
        save_movie(self.db, _details(1, "Heat"))
        identify_user(self.db, "Alice")
        toggle_unseen(self.db, "Alice", "1")

        delete_movie(self.db, "1")

        self.assertEqual(list_movies(self.db), [])
        self.assertEqual(get_user(self.db, "alice").unseen_movies, ["1"])
        with self.assertRaises(MovieNotFoundError):
            delete_movie(self.db, "1")

    def test_clear_all_movies(self) -> None:
        save_movie(self.db, _details(1, "Heat"))
        save_movie(self.db, _details(2, "Ronin"))
        self.assertEqual(clear_all_movies(self.db), 2)
        self.assertEqual(list_movies(self.db), [])

    def test_unseen_counts_and_viewer_flag(self) -> None:
        save_movie(self.db, _details(1, "Heat"))
        save_movie(self.db, _details(2, "Ronin"))
        identify_user(self.db, "Alice")
        identify_user(self.db, "Bob")
        toggle_unseen(self.db, "Alice", "1")
        toggle_unseen(self.db, "Bob", "1")
        toggle_unseen(self.db, "Bob", "2")

        rows = list_movies_with_unseen_counts(self.db, viewer_name="ALICE")
        by_id = {row["movie"].tmdb_id: row for row in rows}
        self.assertEqual(by_id["1"]["unseen_count"], 2)
        self.assertEqual(by_id["2"]["unseen_count"], 1)
        self.assertTrue(by_id["1"]["is_unseen_by_viewer"])
        self.assertFalse(by_id["2"]["is_unseen_by_viewer"])

    def test_unseen_counts_without_viewer(self) -> None:
        save_movie(self.db, _details(1, "Heat"))
        rows = list_movies_with_unseen_counts(self.db, viewer_name="nobody")
        self.assertEqual(rows[0]["unseen_count"], 0)
        self.assertFalse(rows[0]["is_unseen_by_viewer"])


class TestTmdbImports(SQLiteTestCase):
    def test_add_movie_from_tmdb(self) -> None:
        tmdb = _fake_tmdb(details={550: _details(550, "Fight Club")})
        movie = asyncio.run(add_movie_from_tmdb(self.db, 550, tmdb=tmdb))
        self.assertEqual(movie.title, "Fight Club")
        self.assertEqual(get_movie(self.db, "550").year, 2000)

    def test_add_movie_from_tmdb_not_found(self) -> None:
        with self.assertRaises(MovieNotFoundError):
            asyncio.run(add_movie_from_tmdb(self.db, 1, tmdb=_fake_tmdb()))

    def test_add_movie_by_imdb_id(self) -> None:
        tmdb = _fake_tmdb(details={550: _details(550, "Fight Club")}, imdb_match=550)
        movie = asyncio.run(add_movie_by_imdb_id(self.db, "tt0137523", tmdb=tmdb))
        self.assertEqual(movie.tmdb_id, "550")
        tmdb.find_by_imdb_id.assert_awaited_once_with("tt0137523")

    def test_add_movie_by_unknown_imdb_id(self) -> None:
        with self.assertRaises(MovieNotFoundError):
            asyncio.run(add_movie_by_imdb_id(self.db, "tt0000000", tmdb=_fake_tmdb()))

    def test_import_top_rated_skips_missing_details(self) -> None:
        tmdb = _fake_tmdb(
            details={1: _details(1, "Heat"), 3: _details(3, "Ran")},
            top_rated=[{"id": 1}, {"id": 2}, {"id": 3}, {"title": "no id"}],
        )
        imported = asyncio.run(import_top_rated(self.db, pages=1, tmdb=tmdb))
        self.assertEqual([m.tmdb_id for m in imported], ["1", "3"])
        self.assertEqual(len(list_movies(self.db)), 2)
