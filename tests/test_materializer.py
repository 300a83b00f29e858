from datetime import datetime

from bangumi_season.materializer import (
    ADULT_RATING,
    materialize,
    parse_air_date,
    parse_production_year,
)
from bangumi_season.models import Rating, Subject


def test_materialize_maps_all_fields(full_subject, staff, actors):
    result = materialize(full_subject, staff, actors, use_subject_title=True)
    item = result.item

    assert result.has_metadata is True
    assert item.provider_ids.bangumi == "42"
    assert item.community_rating == 8.1
    assert item.name == "进击的巨人 第二季"
    assert item.original_title == "進撃の巨人 Season 2"
    assert item.overview == "The walls have been breached."
    assert item.tags == ["漫改", "热血"]
    assert item.premiere_date == datetime(2017, 4, 1)
    assert item.production_year == 2017
    assert item.official_rating is None


def test_people_appended_staff_then_actors(full_subject, staff, actors):
    result = materialize(full_subject, staff, actors + actors[:1])
    assert [p.name for p in result.people] == ["荒木哲郎", "梶裕貴", "石川由依", "梶裕貴"]


def test_titles_untouched_when_disabled(full_subject):
    item = materialize(full_subject, [], [], use_subject_title=False).item
    assert item.name is None
    assert item.original_title is None


def test_production_year_field_overrides_air_date():
    subject = Subject(id=1, name="S", air_date="2021-04-10", production_year="2022")
    item = materialize(subject, [], []).item
    assert item.premiere_date == datetime(2021, 4, 10)
    assert item.production_year == 2022


def test_malformed_dates_leave_fields_unset():
    subject = Subject(id=1, name="S", air_date="sometime in spring", production_year="21")
    item = materialize(subject, [], []).item
    assert item.premiere_date is None
    assert item.production_year is None


def test_empty_summary_and_missing_rating():
    subject = Subject(id=1, name="S", summary="", rating=Rating(score=None))
    item = materialize(subject, [], []).item
    assert item.overview is None
    assert item.community_rating is None


def test_nsfw_sets_adult_rating():
    subject = Subject(id=1, name="S", nsfw=True)
    assert materialize(subject, [], []).item.official_rating == ADULT_RATING


def test_materialize_is_idempotent(full_subject, staff, actors):
    first = materialize(full_subject, staff, actors)
    second = materialize(full_subject, staff, actors)
    assert first == second


def test_parse_air_date_formats():
    assert parse_air_date("2013/04/07") == datetime(2013, 4, 7)
    assert parse_air_date("2013-04") == datetime(2013, 4, 1)
    assert parse_air_date("") is None
    assert parse_air_date(None) is None


def test_parse_production_year():
    assert parse_production_year("2013") == 2013
    assert parse_production_year("") is None
    assert parse_production_year("20xx") is None
    assert parse_production_year(None) is None
