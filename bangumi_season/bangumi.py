"""Bangumi (bgm.tv) API client module."""
import logging
import threading
import time
from typing import Any

import requests

from .cancellation import CancellationToken
from .models import PersonInfo, PersonKind, Subject


BANGUMI_BASE_URL = "https://api.bgm.tv"
DEFAULT_TIMEOUT = 10
RATE_LIMIT_DELAY = 0.25  # 250ms between requests to avoid rate limiting
DEFAULT_USER_AGENT = "bangumi-season/0.3.0 (https://github.com/bangumi-season)"
SEARCH_LIMIT = 10

# Subject type for anime in the v0 API.
SUBJECT_TYPE_ANIME = 2

# Relation label of the direct successor ("next season").
SEQUEL_RELATION = "续集"

# Staff relations that are attached to the result, everything else is dropped.
STAFF_KINDS = {
    "导演": PersonKind.DIRECTOR,
    "总导演": PersonKind.DIRECTOR,
    "脚本": PersonKind.WRITER,
    "系列构成": PersonKind.WRITER,
    "原作": PersonKind.WRITER,
    "音乐": PersonKind.COMPOSER,
    "制片人": PersonKind.PRODUCER,
    "製作": PersonKind.PRODUCER,
    "人物设定": PersonKind.ARTIST,
}

log = logging.getLogger(__name__)


class BangumiError(Exception):
    """Exception raised for Bangumi API errors."""
    pass


def _image_url(data: dict[str, Any]) -> str | None:
    images = data.get("images") or {}
    return images.get("large") or images.get("medium") or None


def _retry_after(response) -> int:
    """Seconds to wait after a 429.  Non-numeric values (HTTP dates) wait 1s."""
    try:
        return max(int(response.headers.get("Retry-After", 1)), 0)
    except (TypeError, ValueError):
        return 1


def _to_subject(data: Any, endpoint: str) -> Subject:
    try:
        return Subject.from_json(data)
    except (KeyError, TypeError, AttributeError) as e:
        raise BangumiError(f"Malformed response from {endpoint}") from e


class BangumiClient:
    """Client for the Bangumi v0 API.

    Safe to share between threads: every request keeps its state local
    and only the rate limiter is shared.
    """

    def __init__(
        self,
        access_token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        base_url: str = BANGUMI_BASE_URL,
    ):
        """
        Initialize Bangumi client.

        Args:
            access_token: Optional personal access token. Anonymous access
                          works for public subjects; NSFW subjects need a token.
            timeout: Per-request timeout in seconds.
            user_agent: User-Agent header, required by the API.
            base_url: API root, overridable for mirrors.
        """
        self.access_token = access_token
        self.timeout = timeout
        self.user_agent = user_agent
        self.base_url = base_url.rstrip("/")
        self._rate_lock = threading.Lock()
        self._last_request_time = 0.0

    def _headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _rate_limit(self) -> None:
        """Apply rate limiting between requests."""
        with self._rate_lock:
            elapsed = time.time() - self._last_request_time
            if elapsed < RATE_LIMIT_DELAY:
                time.sleep(RATE_LIMIT_DELAY - elapsed)
            self._last_request_time = time.time()

    def _request(
        self,
        endpoint: str,
        token: CancellationToken,
        method: str = "GET",
        params: dict | None = None,
        json_body: dict | None = None,
        retries: int = 3
    ) -> Any:
        """
        Make a request to the Bangumi API.

        Args:
            endpoint: API endpoint (e.g., '/v0/subjects/1234')
            token: Cancellation token, checked before and after each attempt
            method: "GET" or "POST"
            params: Query parameters
            json_body: JSON body for POST requests
            retries: Number of attempts on timeouts and connection errors

        Returns:
            Decoded JSON response, or None when the resource does not exist

        Raises:
            BangumiError: If the API keeps failing or answers with an error
            OperationCancelled: If ``token`` is cancelled
        """
        url = f"{self.base_url}{endpoint}"
        log.debug("%s %s params=%s", method, endpoint, params)

        last_error: Exception | None = None
        for attempt in range(retries):
            token.throw_if_cancelled()
            self._rate_limit()
            try:
                if method == "POST":
                    response = requests.post(
                        url,
                        params=params,
                        json=json_body,
                        headers=self._headers(),
                        timeout=self.timeout,
                    )
                else:
                    response = requests.get(
                        url,
                        params=params,
                        headers=self._headers(),
                        timeout=self.timeout,
                    )
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                last_error = e
                log.debug("Request error: %s (attempt %d/%d)", e, attempt + 1, retries)
                if attempt < retries - 1:
                    time.sleep(1)
                continue
            except requests.exceptions.RequestException as e:
                raise BangumiError(f"Request to {endpoint} failed: {e}") from e

            # A response that arrives after cancellation is discarded.
            token.throw_if_cancelled()
            log.debug("Response status: %s", response.status_code)

            if response.status_code == 404:
                return None

            if response.status_code == 429:  # Rate limited
                retry_after = _retry_after(response)
                log.debug("Rate limited, waiting %ss", retry_after)
                last_error = BangumiError("Rate limited")
                time.sleep(retry_after)
                continue

            try:
                response.raise_for_status()
                return response.json()
            except requests.exceptions.HTTPError as e:
                raise BangumiError(f"Bangumi API error for {endpoint}: {e}") from e
            except ValueError as e:
                raise BangumiError(f"Malformed response from {endpoint}") from e

        raise BangumiError(
            f"Bangumi API unreachable for {endpoint} after {retries} attempts: {last_error}"
        )

    def search_subjects(self, keyword: str, token: CancellationToken) -> list[Subject]:
        """
        Search anime subjects by keyword.

        Args:
            keyword: Search query
            token: Cancellation token

        Returns:
            Subjects in catalog order, partially populated
        """
        data = self._request(
            "/v0/search/subjects",
            token,
            method="POST",
            params={"limit": SEARCH_LIMIT},
            json_body={"keyword": keyword, "filter": {"type": [SUBJECT_TYPE_ANIME]}},
        )
        if not data or not data.get("data"):
            return []
        log.debug("Found %d results for %r", len(data["data"]), keyword)
        return [_to_subject(item, "/v0/search/subjects") for item in data["data"]]

    def get_subject(self, subject_id: int, token: CancellationToken) -> Subject | None:
        """
        Get full subject details.

        Returns:
            Subject if found, None otherwise
        """
        endpoint = f"/v0/subjects/{subject_id}"
        data = self._request(endpoint, token)
        if not data:
            return None
        return _to_subject(data, endpoint)

    def get_successor_subject(self, subject_id: int, token: CancellationToken) -> Subject | None:
        """
        Get the subject that directly follows ``subject_id`` (its sequel).

        Returns:
            Fully fetched sequel subject, or None when there is none
        """
        endpoint = f"/v0/subjects/{subject_id}/subjects"
        related = self._request(endpoint, token)
        if not related:
            return None
        for item in related:
            if item.get("relation") != SEQUEL_RELATION:
                continue
            if "id" not in item:
                raise BangumiError(f"Malformed response from {endpoint}")
            return self.get_subject(item["id"], token)
        return None

    def get_subject_persons(self, subject_id: int, token: CancellationToken) -> list[PersonInfo]:
        """
        Get staff of a subject.

        Returns:
            Staff entries with a known kind, in catalog order
        """
        data = self._request(f"/v0/subjects/{subject_id}/persons", token)
        persons = []
        for item in data or []:
            kind = STAFF_KINDS.get(item.get("relation", ""))
            if kind is None:
                continue
            persons.append(PersonInfo(
                name=item.get("name", ""),
                kind=kind,
                role=item.get("relation"),
                image_url=_image_url(item),
                id=item.get("id"),
            ))
        return persons

    def get_subject_characters(self, subject_id: int, token: CancellationToken) -> list[PersonInfo]:
        """
        Get voice actors of a subject.

        Every actor of every character becomes one entry, with the
        character name as its role.
        """
        data = self._request(f"/v0/subjects/{subject_id}/characters", token)
        actors = []
        for character in data or []:
            for actor in character.get("actors") or []:
                actors.append(PersonInfo(
                    name=actor.get("name", ""),
                    kind=PersonKind.ACTOR,
                    role=character.get("name"),
                    image_url=_image_url(actor),
                    id=actor.get("id"),
                ))
        return actors

    def get_image_response(self, url: str, token: CancellationToken) -> requests.Response:
        """Fetch an image URL as-is for the host to stream."""
        token.throw_if_cancelled()
        try:
            response = requests.get(url, headers=self._headers(), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise BangumiError(f"Image request failed: {e}") from e
        token.throw_if_cancelled()
        return response
