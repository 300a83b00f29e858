"""Local identifier hints for a season, without network access."""
import logging

from .attributes import subject_id_from_path
from .models import LocalOverride, NO_SUBJECT, SeasonInfo

log = logging.getLogger(__name__)


def extract_subject_id(info: SeasonInfo, override: LocalOverride | None = None) -> int:
    """
    Pick the subject id the season already points at.

    Checked in order, the first non-zero value wins:
    1. ``id`` in the folder's bangumi.ini
    2. ``[bangumi-N]`` tag on the folder name
    3. Bangumi id already stored on the season
    4. Bangumi id of the series, for season 1 only

    Returns:
        Subject id, or NO_SUBJECT when there is no local hint
    """
    if override is not None and override.id != NO_SUBJECT:
        log.debug("Using local configuration id %d", override.id)
        return override.id

    subject_id = subject_id_from_path(info.path)
    if subject_id != NO_SUBJECT:
        log.debug("Using folder attribute id %d", subject_id)
        return subject_id

    subject_id = info.provider_ids.bangumi_id()
    if subject_id != NO_SUBJECT:
        return subject_id

    if info.index_number == 1:
        subject_id = info.series_provider_ids.bangumi_id()
        if subject_id != NO_SUBJECT:
            log.debug("Season 1 inherits series id %d", subject_id)
        return subject_id

    return NO_SUBJECT
