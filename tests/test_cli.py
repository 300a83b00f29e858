from bangumi_season import cli
from bangumi_season.bangumi import BangumiError
from bangumi_season.local_config import CONFIG_FILE, LocalConfiguration
from bangumi_season.models import Subject


def make_tree(tmp_path):
    series = tmp_path / "Mushoku Tensei"
    (series / "Season 1").mkdir(parents=True)
    (series / "Season 1" / CONFIG_FILE).write_text("id=277554\n", encoding="utf-8")
    (series / "Season 2").mkdir()
    return series


def run(tmp_path, *args):
    return cli.main([*args, "--settings", str(tmp_path / "settings.json")])


def test_build_season_info_parses_index(tmp_path):
    info = cli.build_season_info(tmp_path / "Season 3", year=2024)
    assert info.index_number == 3
    assert info.year == 2024
    assert info.name == "Season 3"


def test_cli_resolves_next_season(mocker, tmp_path, catalog, capsys):
    series = make_tree(tmp_path)
    catalog.successors[277554] = Subject(id=373247, name="无职转生 第二季", air_date="2023-07-03")
    mocker.patch("bangumi_season.cli.BangumiClient", return_value=catalog)

    assert run(tmp_path, str(series / "Season 2")) == 0

    out = capsys.readouterr().out
    assert "Bangumi ID: 373247" in out
    assert "Title: 无职转生 第二季" in out
    assert "Year: 2023" in out


def test_cli_no_match(mocker, tmp_path, catalog, capsys):
    series = tmp_path / "Unknown Show"
    (series / "Season 1").mkdir(parents=True)
    mocker.patch("bangumi_season.cli.BangumiClient", return_value=catalog)

    assert run(tmp_path, str(series / "Season 1"), "--no-season-title") == 0
    assert "No match found." in capsys.readouterr().out


def test_cli_set_id_writes_override(mocker, tmp_path, catalog):
    series = make_tree(tmp_path)
    catalog.subjects[1] = Subject(id=1, name="Manual")
    mocker.patch("bangumi_season.cli.BangumiClient", return_value=catalog)

    assert run(tmp_path, str(series / "Season 2"), "--set-id", "1") == 0
    assert LocalConfiguration.for_path(series / "Season 2").id == 1
    assert ("get_subject", 1) in catalog.calls


def test_cli_reports_catalog_errors(mocker, tmp_path, catalog, capsys):
    series = make_tree(tmp_path)
    mocker.patch.object(catalog, "get_successor_subject", side_effect=BangumiError("down"))
    mocker.patch("bangumi_season.cli.BangumiClient", return_value=catalog)

    assert run(tmp_path, str(series / "Season 2")) == 1
    assert "Error: down" in capsys.readouterr().out


def test_cli_rejects_missing_folder(tmp_path, capsys):
    assert run(tmp_path, str(tmp_path / "missing")) == 1
    assert "Not a folder" in capsys.readouterr().out
