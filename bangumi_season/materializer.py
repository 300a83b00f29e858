"""Map a resolved Bangumi subject onto a season metadata record."""
from datetime import datetime

from .models import MetadataResult, PersonInfo, SeasonMetadataRecord, Subject

# Official rating used for NSFW subjects.
ADULT_RATING = "X"

# Air dates on Bangumi are loosely formatted.
AIR_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d", "%Y-%m", "%Y")


def parse_air_date(value: str | None) -> datetime | None:
    """Parse an air date string, returning None when it is not a date."""
    if not value:
        return None
    value = value.strip()
    for fmt in AIR_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_production_year(value: str | None) -> int | None:
    """Return the year for exactly-four-digit strings, otherwise None."""
    if value is None or len(value) != 4 or not value.isdigit():
        return None
    return int(value)


def materialize(
    subject: Subject,
    persons: list[PersonInfo],
    characters: list[PersonInfo],
    use_subject_title: bool = True,
) -> MetadataResult:
    """
    Build the metadata result for a resolved subject.

    Args:
        subject: Fully fetched subject
        persons: Staff entries, appended first
        characters: Voice actor entries, appended after staff
        use_subject_title: Replace the season title with the subject's names

    Returns:
        MetadataResult with ``has_metadata`` set
    """
    item = SeasonMetadataRecord()
    result = MetadataResult(item=item)

    # The provider id is always the first attribute set.
    item.provider_ids.bangumi = str(subject.id)
    result.has_metadata = True

    if subject.rating is not None and subject.rating.score is not None:
        item.community_rating = subject.rating.score

    if use_subject_title:
        item.name = subject.name
        item.original_title = subject.original_name

    item.overview = subject.summary or None
    item.tags = list(subject.popular_tags)

    air_date = parse_air_date(subject.air_date)
    if air_date is not None:
        item.premiere_date = air_date
        item.production_year = air_date.year

    production_year = parse_production_year(subject.production_year)
    if production_year is not None:
        item.production_year = production_year

    if subject.nsfw:
        item.official_rating = ADULT_RATING

    for person in persons:
        result.add_person(person)
    for person in characters:
        result.add_person(person)

    return result
