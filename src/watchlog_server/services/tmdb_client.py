"""TMDB API client for movie/series search and season metadata."""

import asyncio
import logging
from typing import Any, Optional

import httpx

from ..core.config import settings
from ..core.errors import ConfigurationError, NetworkError
from ..models.metadata import EpisodeInfo, FullSeriesData, SearchResult, SeasonEpisodes, SeriesDetails
from .cache import TTLCache

logger = logging.getLogger(__name__)


def extract_year(date_string: Optional[str]) -> str:
    """Return the year part of a YYYY-MM-DD date, or an empty string."""
    if not date_string:
        return ""
    return date_string.split("-")[0]


def sort_seasons(seasons: list[SeasonEpisodes]) -> list[SeasonEpisodes]:
    """
    Order seasons by release year, oldest first.

    Seasons without a derivable year go after those with one; ties are
    broken by season number.
    """
    return sorted(
        seasons,
        key=lambda s: (s.year_value is None, s.year_value or 0, s.season_number),
    )


class TMDBClient:
    """Client for TMDB v3 API."""

    def __init__(
        self,
        api_key: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
        cache: Optional[TTLCache] = None,
    ):
        """
        Initialize TMDB client.

        Args:
            api_key: TMDB v3 API key. A missing key only fails when a request is made.
            client: Optional preconfigured HTTP client
            cache: Optional response cache (defaults to the configured TTL)
        """
        self.api_key = api_key
        self.base_url = settings.tmdb_base_url.rstrip("/")
        self.image_base_url = settings.tmdb_image_base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=30.0)
        self._cache = cache or TTLCache(settings.metadata_cache_ttl_seconds)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def _get_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError(
                "TMDB API key is not configured. Please set WATCHLOG_TMDB_API_KEY "
                "in your environment variables."
            )
        return self.api_key

    def image_url(self, path: Optional[str]) -> Optional[str]:
        """Build a full image URL from a TMDB image path."""
        if not path:
            return None
        return f"{self.image_base_url}{path}"

    async def _request(self, cache_key: str, endpoint: str, **params: Any) -> Any:
        """
        Make a cached GET request to the TMDB API.

        Args:
            cache_key: Signature of the operation and its parameters
            endpoint: API endpoint (without base URL)
            **params: Extra query parameters

        Returns:
            Response JSON data

        Raises:
            ConfigurationError: If no API key is configured
            NetworkError: If the request fails
        """
        api_key = self._get_api_key()

        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        query = {"api_key": api_key, "language": settings.tmdb_language, **params}
        try:
            response = await self._client.get(f"{self.base_url}/{endpoint}", params=query)
        except httpx.HTTPError as e:
            logger.error(f"TMDB request failed: GET {endpoint} -> {e}")
            raise NetworkError(f"TMDB request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"TMDB request failed: GET {endpoint} -> {response.status_code}")
            raise NetworkError(f"TMDB API error: {response.status_code} - {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"TMDB returned invalid JSON: GET {endpoint}")
            raise NetworkError(f"TMDB returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            logger.error(f"TMDB returned unexpected payload: GET {endpoint}")
            raise NetworkError(f"TMDB returned unexpected payload type: {type(data).__name__}")

        self._cache.set(cache_key, data)
        return data

    async def search(self, query: str) -> list[SearchResult]:
        """
        Search movies and series by free text.

        Args:
            query: Search text

        Returns:
            Movie/series candidates in API order, empty for short queries
        """
        self._get_api_key()

        if len(query) < settings.search_min_query_length:
            return []

        logger.info(f"Searching TMDB for: {query}")
        data = await self._request(f"search:{query}", "search/multi", query=query)

        results = [
            self._parse_search_result(result)
            for result in data.get("results", [])
            if result.get("media_type") in ("movie", "tv")
        ]
        return results[: settings.search_result_limit]

    def _parse_search_result(self, data: dict) -> SearchResult:
        """Parse a multi-search result into SearchResult."""
        is_movie = data["media_type"] == "movie"
        year = extract_year(data.get("release_date")) or extract_year(data.get("first_air_date"))

        return SearchResult(
            id=data["id"],
            title=data.get("title") or data.get("name") or "Unknown",
            year=year,
            type="Movie" if is_movie else "Series",
            poster_url=self.image_url(data.get("poster_path")),
            media_type=data["media_type"],
        )

    async def get_series_details(self, tv_id: int) -> SeriesDetails:
        """
        Get top-level series information.

        Args:
            tv_id: TMDB series ID

        Returns:
            Series details including current season count
        """
        data = await self._request(f"tv:{tv_id}", f"tv/{tv_id}")

        return SeriesDetails(
            id=data.get("id", tv_id),
            name=data.get("name") or "Unknown",
            season_count=data.get("number_of_seasons") or 0,
            episode_count=data.get("number_of_episodes") or 0,
            poster_url=self.image_url(data.get("poster_path")),
            first_air_date=data.get("first_air_date") or None,
        )

    async def get_season_episodes(self, tv_id: int, season_number: int) -> SeasonEpisodes:
        """
        Get all episodes of one season.

        Args:
            tv_id: TMDB series ID
            season_number: Season number

        Returns:
            Season with its episodes and derived year
        """
        data = await self._request(
            f"tv:{tv_id}:season:{season_number}", f"tv/{tv_id}/season/{season_number}"
        )

        episodes = [
            EpisodeInfo(
                episode_number=ep.get("episode_number", 0),
                title=ep.get("name") or f"Episode {ep.get('episode_number', 0)}",
                air_date=ep.get("air_date") or None,
                tmdb_id=ep.get("id", 0),
                overview=ep.get("overview") or None,
                runtime=ep.get("runtime"),
                still_url=self.image_url(ep.get("still_path")),
            )
            for ep in data.get("episodes") or []
        ]

        # Season air date first, then the first episode's air date
        air_date = data.get("air_date") or None
        year = extract_year(air_date) or (extract_year(episodes[0].air_date) if episodes else "")

        return SeasonEpisodes(
            season_number=data.get("season_number", season_number),
            tmdb_season_id=data.get("id"),
            episodes=episodes,
            year=year or None,
            air_date=air_date,
        )

    async def get_all_seasons(self, tv_id: int) -> list[SeasonEpisodes]:
        """
        Get every non-empty season of a series, ordered by release year.

        Seasons 1..season_count are fetched concurrently.

        Args:
            tv_id: TMDB series ID

        Returns:
            Seasons with episodes
        """
        details = await self.get_series_details(tv_id)
        return await self._fetch_seasons(tv_id, details.season_count)

    async def get_full_series_data(self, tv_id: int) -> FullSeriesData:
        """
        Get the series title with all seasons and episodes.

        Args:
            tv_id: TMDB series ID

        Returns:
            Full series data
        """
        details = await self.get_series_details(tv_id)
        seasons = await self._fetch_seasons(tv_id, details.season_count)

        logger.info(
            f"Full series data fetched for {details.name} ({details.id}): "
            f"{len(seasons)} seasons"
        )
        return FullSeriesData(title=details.name, tmdb_id=details.id, seasons=seasons)

    async def _fetch_seasons(self, tv_id: int, season_count: int) -> list[SeasonEpisodes]:
        seasons = await asyncio.gather(
            *(self.get_season_episodes(tv_id, n) for n in range(1, season_count + 1))
        )
        return sort_seasons([s for s in seasons if s.episodes])
