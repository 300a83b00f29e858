import sys
from pathlib import Path

import pytest

# Ensure root path is available for imports
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from bangumi_season.cancellation import CancellationToken  # noqa: E402
from bangumi_season.models import (  # noqa: E402
    PersonInfo,
    PersonKind,
    Rating,
    Subject,
    Tag,
)


class FakeCatalog:
    """In-memory stand-in for BangumiClient that records every call."""

    def __init__(self):
        self.subjects: dict[int, Subject] = {}
        self.search_results: dict[str, list[Subject]] = {}
        self.successors: dict[int, Subject] = {}
        self.persons: dict[int, list[PersonInfo]] = {}
        self.characters: dict[int, list[PersonInfo]] = {}
        self.calls: list[tuple[str, object]] = []

    def search_subjects(self, keyword, token):
        token.throw_if_cancelled()
        self.calls.append(("search_subjects", keyword))
        return list(self.search_results.get(keyword, []))

    def get_subject(self, subject_id, token):
        token.throw_if_cancelled()
        self.calls.append(("get_subject", subject_id))
        return self.subjects.get(subject_id)

    def get_successor_subject(self, subject_id, token):
        token.throw_if_cancelled()
        self.calls.append(("get_successor_subject", subject_id))
        return self.successors.get(subject_id)

    def get_subject_persons(self, subject_id, token):
        token.throw_if_cancelled()
        self.calls.append(("get_subject_persons", subject_id))
        return list(self.persons.get(subject_id, []))

    def get_subject_characters(self, subject_id, token):
        token.throw_if_cancelled()
        self.calls.append(("get_subject_characters", subject_id))
        return list(self.characters.get(subject_id, []))

    def get_image_response(self, url, token):
        self.calls.append(("get_image_response", url))
        return f"image:{url}"

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def token():
    return CancellationToken()


@pytest.fixture
def full_subject():
    return Subject(
        id=42,
        name="进击的巨人 第二季",
        original_name="進撃の巨人 Season 2",
        rating=Rating(score=8.1, total=5000, rank=120),
        summary="The walls have been breached.",
        air_date="2017-04-01",
        production_year="2017",
        nsfw=False,
        tags=[Tag("漫改", 900), Tag("热血", 400), Tag("TV", 30)],
    )


@pytest.fixture
def staff():
    return [PersonInfo(name="荒木哲郎", kind=PersonKind.DIRECTOR, role="导演")]


@pytest.fixture
def actors():
    return [
        PersonInfo(name="梶裕貴", kind=PersonKind.ACTOR, role="艾伦·耶格尔"),
        PersonInfo(name="石川由依", kind=PersonKind.ACTOR, role="三笠·阿克曼"),
    ]
