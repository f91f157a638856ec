"""
Request, credential and response types for the Sonarr client.

The TypedDicts describe what Sonarr v3 returns. They document the payloads
and are never checked at runtime; responses are passed through untouched.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypedDict

if TYPE_CHECKING:
    from ..utils.exceptions import ErrorCategory, SonarrApiError

API_VERSION_PATH = "/api/v3"
API_KEY_HEADER = "X-Api-Key"

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})

JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None


@dataclass(frozen=True)
class RequestDescriptor:
    """An API call before the base URL and auth header are merged in."""

    path: str
    method: str = "GET"
    query_params: dict[str, Any] = field(default_factory=dict)
    body: Any = None

    def __post_init__(self) -> None:
        method = (self.method or "GET").upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method!r}")
        object.__setattr__(self, "method", method)

        if not self.path.startswith("/"):
            object.__setattr__(self, "path", "/" + self.path)

        if self.query_params is None:
            object.__setattr__(self, "query_params", {})


@dataclass(frozen=True)
class Credentials:
    base_url: str
    api_key: str = field(repr=False)

    @property
    def api_root(self) -> str:
        return self.base_url.rstrip("/") + API_VERSION_PATH

    def url_for(self, path: str) -> str:
        return self.api_root + path

    @property
    def headers(self) -> dict[str, str]:
        return {API_KEY_HEADER: self.api_key}


@dataclass(frozen=True)
class ApiResult:
    """
    Outcome of a single Sonarr request.

    Exactly one of ``data`` or ``error`` is meaningful: ``error`` is None on
    success, and ``data`` is None on failure (it can also be None for a
    successful empty response).
    """

    data: JsonValue = None
    error: "SonarrApiError | None" = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def category(self) -> "ErrorCategory | None":
        return self.error.category if self.error is not None else None

    @property
    def status_code(self) -> int | None:
        return getattr(self.error, "status_code", None)


# --- Sonarr v3 payloads ---


class Tag(TypedDict):
    id: int
    label: str


class HealthCheck(TypedDict, total=False):
    source: str
    type: str
    message: str
    wikiUrl: str


class SeriesImage(TypedDict, total=False):
    coverType: str
    url: str
    remoteUrl: str


class SeriesStatistics(TypedDict, total=False):
    seasonCount: int
    episodeFileCount: int
    episodeCount: int
    totalEpisodeCount: int
    sizeOnDisk: int
    releaseGroups: list[str]
    percentOfEpisodes: float


class SeriesSeason(TypedDict, total=False):
    seasonNumber: int
    monitored: bool
    statistics: SeriesStatistics


class AlternateTitle(TypedDict, total=False):
    title: str
    seasonNumber: int


class Ratings(TypedDict, total=False):
    votes: int
    value: float


class SeriesDetails(TypedDict, total=False):
    id: int
    title: str
    alternateTitles: list[AlternateTitle]
    sortTitle: str
    status: str
    ended: bool
    overview: str
    previousAiring: str
    network: str
    airTime: str
    images: list[SeriesImage]
    seasons: list[SeriesSeason]
    year: int
    path: str
    qualityProfileId: int
    languageProfileId: int
    seasonFolder: bool
    monitored: bool
    useSceneNumbering: bool
    runtime: int
    tvdbId: int
    tvRageId: int
    tvMazeId: int
    firstAired: str
    seriesType: str
    cleanTitle: str
    imdbId: str
    titleSlug: str
    rootFolderPath: str
    certification: str
    genres: list[str]
    tags: list[int]
    added: str
    ratings: Ratings
    statistics: SeriesStatistics
