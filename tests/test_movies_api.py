"""Endpoint tests for the movie service with the repository replaced by a mock."""

import unittest
from datetime import UTC, datetime
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from cinereserva.api.v1.movies import get_movie_repository
from cinereserva.core.errors import NotFoundError, StoreTimeoutError
from cinereserva.main import movie_app
from cinereserva.models import Movie
from cinereserva.repositories.movies import MOVIE_NOT_FOUND_MESSAGE, MovieRepository

NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC)
MOVIE_ID = "65f1c0a2b3d4e5f6a7b8c9d0"

ENDGAME = {
    "title": "Avengers: Endgame",
    "description": "Los Vengadores se reúnen una vez más.",
    "posterImage": "https://example.com/avengers-endgame.jpg",
    "genre": "Acción",
    "duration": 181,
    "rating": "PG-13",
    "releaseDate": "2019-04-26",
    "director": "Anthony Russo, Joe Russo",
    "cast": ["Robert Downey Jr.", "Chris Evans"],
}


def _stored(**overrides: object) -> Movie:
    data = {
        "id": MOVIE_ID,
        "title": ENDGAME["title"],
        "description": ENDGAME["description"],
        "poster_image": ENDGAME["posterImage"],
        "genre": ENDGAME["genre"],
        "duration": ENDGAME["duration"],
        "rating": ENDGAME["rating"],
        "release_date": ENDGAME["releaseDate"],
        "director": ENDGAME["director"],
        "cast": ENDGAME["cast"],
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return Movie(**data)


class MovieApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = MagicMock(spec=MovieRepository)
        movie_app.dependency_overrides[get_movie_repository] = lambda: self.repo
        self.client = TestClient(movie_app)

    def tearDown(self) -> None:
        movie_app.dependency_overrides.clear()


class TestCreate(MovieApiTestCase):
    def test_valid_movie_is_created(self) -> None:
        self.repo.create.return_value = _stored()
        response = self.client.post("/api/movies", json=ENDGAME)
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["id"], MOVIE_ID)
        self.assertEqual(body["duration"], 181)
        self.assertEqual(body["posterImage"], ENDGAME["posterImage"])

        movie = self.repo.create.call_args.args[0]
        self.assertIsNone(movie.id)
        self.assertEqual(movie.release_date, "2019-04-26")

    def test_zero_duration_is_rejected(self) -> None:
        response = self.client.post("/api/movies", json={**ENDGAME, "duration": 0})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "la duración debe ser mayor a 0 minutos"})
        self.repo.create.assert_not_called()

    def test_missing_title_is_rejected(self) -> None:
        payload = {k: v for k, v in ENDGAME.items() if k != "title"}
        response = self.client.post("/api/movies", json=payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "el título es obligatorio"})

    def test_null_fields_get_rule_messages(self) -> None:
        response = self.client.post("/api/movies", json={**ENDGAME, "title": None})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "el título es obligatorio"})

        response = self.client.post("/api/movies", json={**ENDGAME, "duration": None})
        self.assertEqual(response.json(), {"error": "la duración debe ser mayor a 0 minutos"})
        self.repo.create.assert_not_called()

    def test_missing_cast_is_stored_empty(self) -> None:
        self.repo.create.return_value = _stored(cast=[])
        payload = {k: v for k, v in ENDGAME.items() if k != "cast"}
        self.assertEqual(self.client.post("/api/movies", json=payload).status_code, 201)
        self.assertEqual(self.repo.create.call_args.args[0].cast, [])

    def test_non_numeric_duration_is_bad_request(self) -> None:
        response = self.client.post("/api/movies", json={**ENDGAME, "duration": "larga"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Datos de entrada inválidos"})


class TestRead(MovieApiTestCase):
    def test_list(self) -> None:
        self.repo.list_all.return_value = [_stored()]
        response = self.client.get("/api/movies")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([m["title"] for m in response.json()], ["Avengers: Endgame"])

    def test_get_missing(self) -> None:
        self.repo.get_by_id.return_value = None
        response = self.client.get(f"/api/movies/{MOVIE_ID}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": MOVIE_NOT_FOUND_MESSAGE})

    def test_search_passes_criteria(self) -> None:
        self.repo.search.return_value = [_stored()]
        response = self.client.get("/api/movies/search", params={"genre": "acción"})
        self.assertEqual(response.status_code, 200)
        self.repo.search.assert_called_once_with(title=None, genre="acción")

    def test_genres(self) -> None:
        self.repo.distinct_genres.return_value = ["Acción", "Drama"]
        response = self.client.get("/api/movies/genres")
        self.assertEqual(response.json(), ["Acción", "Drama"])
        self.repo.get_by_id.assert_not_called()


class TestUpdateAndDelete(MovieApiTestCase):
    def test_update_returns_stored_movie(self) -> None:
        self.repo.get_by_id.return_value = _stored(duration=182)
        response = self.client.put(f"/api/movies/{MOVIE_ID}", json={**ENDGAME, "duration": 182})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["duration"], 182)
        self.assertEqual(self.repo.update.call_args.args[0], MOVIE_ID)

    def test_update_missing(self) -> None:
        self.repo.update.side_effect = NotFoundError(MOVIE_NOT_FOUND_MESSAGE)
        response = self.client.put(f"/api/movies/{MOVIE_ID}", json=ENDGAME)
        self.assertEqual(response.status_code, 404)

    def test_update_validates_before_touching_store(self) -> None:
        response = self.client.put(f"/api/movies/{MOVIE_ID}", json={**ENDGAME, "duration": 601})
        self.assertEqual(response.status_code, 400)
        self.repo.update.assert_not_called()

    def test_delete(self) -> None:
        self.assertEqual(self.client.delete(f"/api/movies/{MOVIE_ID}").status_code, 204)
        self.repo.delete.side_effect = NotFoundError(MOVIE_NOT_FOUND_MESSAGE)
        self.assertEqual(self.client.delete(f"/api/movies/{MOVIE_ID}").status_code, 404)

    def test_store_timeout_is_generic_500(self) -> None:
        self.repo.list_all.side_effect = StoreTimeoutError("timed out trying to list movies")
        response = self.client.get("/api/movies")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Error interno del servidor"})
