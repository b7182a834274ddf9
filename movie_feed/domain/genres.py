"""TMDB genre tables for movies and TV shows."""
from __future__ import annotations

from dataclasses import dataclass

UNKNOWN_GENRE = "Unknown Genre"

MOVIE_GENRES: dict[int, str] = {
    28: "Action",
    12: "Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    14: "Fantasy",
    36: "History",
    27: "Horror",
    10402: "Music",
    9648: "Mystery",
    10749: "Romance",
    878: "Science Fiction",
    10770: "TV Movie",
    53: "Thriller",
    10752: "War",
    37: "Western",
}

TV_GENRES: dict[int, str] = {
    10759: "Action & Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    10762: "Kids",
    9648: "Mystery",
    10763: "News",
    10764: "Reality",
    10765: "Sci-Fi & Fantasy",
    10766: "Soap",
    10767: "Talk",
    10768: "War & Politics",
    37: "Western",
}


@dataclass(frozen=True, slots=True)
class Genre:
    id: int
    name: str

    @property
    def is_known(self) -> bool:
        return self.name != UNKNOWN_GENRE

    @classmethod
    def movie(cls, genre_id: int) -> "Genre":
        return cls(genre_id, MOVIE_GENRES.get(genre_id, UNKNOWN_GENRE))

    @classmethod
    def tv(cls, genre_id: int) -> "Genre":
        return cls(genre_id, TV_GENRES.get(genre_id, UNKNOWN_GENRE))

    def __str__(self) -> str:
        return self.name


__all__ = ["Genre", "MOVIE_GENRES", "TV_GENRES", "UNKNOWN_GENRE"]
