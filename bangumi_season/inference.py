"""Guess a season's subject from its sibling seasons.

Used only when the season has no local hint.  The sibling with the
largest resolved id among "previous season" and "this season" decides
the strategy:

  - it is this very folder: nothing earlier is resolved, so search the
    catalog by a constructed season name (guess-by-name)
  - it is another folder with an id: follow that subject's sequel
    relation (guess-by-relation)
"""
import logging

from .cancellation import CancellationToken
from .library import normalize_path
from .models import NO_SUBJECT, SeasonInfo, SeriesNode, SiblingSeason, Subject

log = logging.getLogger(__name__)


def select_previous_season(series: SeriesNode, info: SeasonInfo) -> SiblingSeason | None:
    """
    Select the sibling to chain from.

    Among children indexed ``index - 1`` or ``index``, returns the one
    with the numerically largest resolved id (unresolved counts as 0).
    The first child wins ties.
    """
    if info.index_number is None:
        return None
    candidates = [
        child for child in series.children
        if child.index_number in (info.index_number - 1, info.index_number)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda child: child.provider_ids.bangumi_id())


def search_names(series_name: str, index: int) -> list[str]:
    return [f"{series_name} Season {index}", f"{series_name} 第{index}季"]


def guess_by_name(client, series: SeriesNode, info: SeasonInfo, token: CancellationToken) -> Subject | None:
    """Search the constructed season names in order, first hit wins."""
    subject = None
    for search_name in search_names(series.name, info.index_number):
        log.info("Guessing season id by name: %s", search_name)
        results = client.search_subjects(search_name, token)
        if info.year is not None:
            year = str(info.year)
            results = [
                result for result in results
                if result.production_year is None or result.production_year == year
            ]
        if results:
            subject = results[0]
            break
    log.info(
        "Guessed result: %s (#%s)",
        subject.name if subject else None,
        subject.id if subject else None,
    )
    return subject


def guess_by_relation(client, previous_id: int, token: CancellationToken) -> Subject | None:
    """Follow the sequel relation of the previous season's subject."""
    log.info("Guessing season id from previous season #%d", previous_id)
    subject = client.get_successor_subject(previous_id, token)
    if subject is not None:
        log.info("Guessed result: %s (#%s)", subject.name, subject.id)
    return subject


def guess_subject(client, series: SeriesNode, info: SeasonInfo, token: CancellationToken) -> Subject | None:
    """
    Infer the subject of ``info`` from the seasons of ``series``.

    Args:
        client: Catalog client (BangumiClient or compatible)
        series: Parent series with its season children
        info: Season being resolved
        token: Cancellation token passed to every catalog call

    Returns:
        Fully populated Subject, or None when no inference is possible
    """
    previous = select_previous_season(series, info)
    if previous is None:
        return None

    if normalize_path(previous.path) == normalize_path(info.path):
        return guess_by_name(client, series, info, token)

    previous_id = previous.provider_ids.bangumi_id()
    if previous_id > NO_SUBJECT:
        return guess_by_relation(client, previous_id, token)

    # An unresolved sibling in another folder gives nothing to chain from.
    log.debug("Previous season %s is not identified, no guess", previous.path)
    return None
