"""Data models for the bangumi_season package."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


# Identifier value meaning "no subject".  Valid Bangumi subjects are > 0.
NO_SUBJECT = 0


def parse_subject_id(value: Any) -> int:
    """Parse a stored identifier, returning NO_SUBJECT when unusable."""
    if value is None:
        return NO_SUBJECT
    try:
        subject_id = int(str(value).strip())
    except ValueError:
        return NO_SUBJECT
    if subject_id <= NO_SUBJECT:
        return NO_SUBJECT
    return subject_id


@dataclass
class ProviderIds:
    """External identifiers known for a library item."""
    bangumi: str | None = None

    def bangumi_id(self) -> int:
        return parse_subject_id(self.bangumi)

    def to_log_string(self) -> str:
        return "{" + f"Bangumi={self.bangumi or ''}" + "}"


@dataclass(frozen=True)
class SeasonInfo:
    """Lookup info for one season folder, as provided by the host."""
    path: str
    name: str = ""
    original_title: str = ""
    index_number: int | None = None
    parent_index_number: int | None = None
    year: int | None = None
    provider_ids: ProviderIds = field(default_factory=ProviderIds)
    series_provider_ids: ProviderIds = field(default_factory=ProviderIds)

    def to_log_string(self) -> str:
        return (
            f"SeasonInfo"
            f"\nName: {self.name}"
            f"\nOriginalTitle: {self.original_title}"
            f"\nPath: {self.path}"
            f"\nProviderIds: {self.provider_ids.to_log_string()}"
            f"\nIndexNumber: {self.index_number}, "
            f"ParentIndexNumber: {self.parent_index_number}"
            f"\nSeriesProviderIds: {self.series_provider_ids.to_log_string()}"
        )


@dataclass
class LocalOverride:
    """Per-folder configuration.  ``id`` is NO_SUBJECT when not set."""
    id: int = NO_SUBJECT


@dataclass
class SiblingSeason:
    """A season entry already present in the library tree."""
    index_number: int | None
    path: str
    provider_ids: ProviderIds = field(default_factory=ProviderIds)


@dataclass
class SeriesNode:
    """A series container holding season children."""
    name: str
    path: str
    children: list[SiblingSeason] = field(default_factory=list)


@dataclass
class FolderNode:
    """Any other container (plain folder, collection, library root)."""
    name: str
    path: str


Container = SeriesNode | FolderNode


@dataclass
class Rating:
    score: float | None = None
    total: int = 0
    rank: int | None = None


@dataclass
class Tag:
    name: str
    count: int = 0


@dataclass
class Subject:
    """A Bangumi subject (one show or season)."""
    id: int
    name: str
    original_name: str = ""
    rating: Rating | None = None
    summary: str | None = None
    air_date: str | None = None
    production_year: str | None = None
    nsfw: bool = False
    tags: list[Tag] = field(default_factory=list)

    @property
    def popular_tags(self) -> list[str]:
        """Tag names whose vote count reaches 1/25 of all tag votes."""
        baseline = max(sum(tag.count for tag in self.tags) // 25, 1)
        return [tag.name for tag in self.tags if tag.count >= baseline]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Subject":
        """Build a Subject from a v0 API payload (full or search result)."""
        air_date = data.get("date") or data.get("air_date") or None
        production_year = None
        if air_date and len(air_date) >= 4:
            production_year = air_date[:4]

        rating = None
        raw_rating = data.get("rating")
        if isinstance(raw_rating, dict):
            rating = Rating(
                score=raw_rating.get("score"),
                total=raw_rating.get("total") or 0,
                rank=raw_rating.get("rank"),
            )

        tags = [
            Tag(name=tag.get("name", ""), count=tag.get("count") or 0)
            for tag in data.get("tags") or []
            if tag.get("name")
        ]

        original_name = data.get("name", "")
        return cls(
            id=data["id"],
            name=data.get("name_cn") or original_name,
            original_name=original_name,
            rating=rating,
            summary=data.get("summary") or None,
            air_date=air_date,
            production_year=production_year,
            nsfw=bool(data.get("nsfw", False)),
            tags=tags,
        )


class PersonKind(Enum):
    ACTOR = "Actor"
    DIRECTOR = "Director"
    WRITER = "Writer"
    COMPOSER = "Composer"
    PRODUCER = "Producer"
    ARTIST = "Artist"
    UNKNOWN = "Unknown"


@dataclass
class PersonInfo:
    """A cast or staff entry attached to the metadata result."""
    name: str
    kind: PersonKind
    role: str | None = None
    image_url: str | None = None
    id: int | None = None


@dataclass
class ResolutionResult:
    """Outcome of identity resolution.

    ``subject`` is set when the subject was already fetched by a guess;
    otherwise only ``subject_id`` is known and a full fetch is pending.
    """
    subject_id: int = NO_SUBJECT
    subject: Subject | None = None

    @property
    def resolved(self) -> bool:
        return self.subject_id > NO_SUBJECT


@dataclass
class SeasonMetadataRecord:
    """Season attributes populated from a resolved subject."""
    provider_ids: ProviderIds = field(default_factory=ProviderIds)
    name: str | None = None
    original_title: str | None = None
    community_rating: float | None = None
    overview: str | None = None
    tags: list[str] = field(default_factory=list)
    premiere_date: datetime | None = None
    production_year: int | None = None
    official_rating: str | None = None


@dataclass
class MetadataResult:
    """Result handed back to the host for one season."""
    item: SeasonMetadataRecord | None = None
    has_metadata: bool = False
    people: list[PersonInfo] = field(default_factory=list)
    result_language: str = "zh-CN"

    def add_person(self, person: PersonInfo) -> None:
        self.people.append(person)
