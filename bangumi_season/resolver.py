"""Season metadata provider: resolve a season folder to a Bangumi subject.

Resolution order:

  1. local hints (bangumi.ini, folder tag, stored ids)   -- extractor
  2. sibling seasons of the parent series                -- inference
  3. full subject fetch when only an id is known
  4. field mapping onto the season record                -- materializer

Content that cannot be identified is a normal outcome and yields an
empty MetadataResult.  Catalog errors and cancellation propagate.
"""
from __future__ import annotations

import logging
import os

import requests

from .bangumi import BangumiClient
from .cancellation import CancellationToken
from .extractor import extract_subject_id
from .inference import guess_subject
from .library import LibraryTree, normalize_path
from .local_config import LocalConfiguration
from .materializer import materialize
from .models import (
    MetadataResult,
    NO_SUBJECT,
    ResolutionResult,
    SeasonInfo,
    SeriesNode,
)
from .settings import PluginConfiguration

log = logging.getLogger(__name__)

PROVIDER_NAME = "Bangumi"


class SeasonProvider:
    """Remote metadata provider for seasons.

    Constructor args:
        client:        BangumiClient (or compatible catalog client).
        library:       LibraryTree used to find the parent series.
        configuration: PluginConfiguration; ``use_bangumi_season_title``
                       controls whether subject names replace the title.

    Holds no per-call state, so one instance serves concurrent calls.
    """

    name = PROVIDER_NAME
    order = -5

    def __init__(
        self,
        client: BangumiClient,
        library: LibraryTree,
        configuration: PluginConfiguration | None = None,
    ):
        self._client = client
        self._library = library
        self._configuration = configuration or PluginConfiguration()

    # -- Public API ------------------------------------------------

    def resolve(self, info: SeasonInfo, token: CancellationToken | None = None) -> ResolutionResult:
        """Work out which subject ``info`` belongs to, without fetching it."""
        token = token or CancellationToken()
        token.throw_if_cancelled()
        log.debug("Resolving %s", info.to_log_string())

        override = LocalConfiguration.for_path(info.path)
        subject_id = extract_subject_id(info, override)
        if subject_id != NO_SUBJECT:
            return ResolutionResult(subject_id=subject_id)

        parent = self._library.find_by_path(os.path.dirname(normalize_path(info.path)))
        if not isinstance(parent, SeriesNode):
            return ResolutionResult()

        subject = guess_subject(self._client, parent, info, token)
        if subject is None:
            return ResolutionResult()
        return ResolutionResult(subject_id=subject.id, subject=subject)

    def get_metadata(self, info: SeasonInfo, token: CancellationToken | None = None) -> MetadataResult:
        """
        Resolve and fetch metadata for one season.

        Returns:
            MetadataResult; ``has_metadata`` is False when the season
            could not be identified

        Raises:
            BangumiError: If the catalog fails
            OperationCancelled: If ``token`` is cancelled
        """
        token = token or CancellationToken()
        resolution = self.resolve(info, token)
        if not resolution.resolved:
            log.debug("No subject for %s", info.path)
            return MetadataResult()

        subject = resolution.subject
        if subject is None:
            subject = self._client.get_subject(resolution.subject_id, token)
        if subject is None:
            log.info("Subject #%d not found, ignoring stored id", resolution.subject_id)
            return MetadataResult()

        persons = self._client.get_subject_persons(subject.id, token)
        characters = self._client.get_subject_characters(subject.id, token)
        token.throw_if_cancelled()

        return materialize(
            subject,
            persons,
            characters,
            use_subject_title=self._configuration.use_bangumi_season_title,
        )

    def get_search_results(self, info: SeasonInfo, token: CancellationToken | None = None) -> list:
        """Seasons contribute nothing to interactive search."""
        return []

    def get_image_response(self, url: str, token: CancellationToken | None = None) -> requests.Response:
        return self._client.get_image_response(url, token or CancellationToken())
