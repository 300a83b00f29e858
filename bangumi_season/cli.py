#!/usr/bin/env python3
"""
bangumi-season - Season metadata lookup

A CLI tool for identifying an anime season folder on Bangumi.
"""
import argparse
import logging
import sys
from pathlib import Path

from .bangumi import BangumiClient, BangumiError
from .cancellation import CancellationToken, OperationCancelled
from .library import FolderLibrary, normalize_path, parse_season_number
from .local_config import LocalConfiguration
from .models import MetadataResult, ProviderIds, SeasonInfo
from .resolver import SeasonProvider
from .settings import PluginConfiguration, SettingsManager


def build_season_info(
    path: Path,
    index: int | None = None,
    year: int | None = None,
    name: str | None = None,
    series_id: str | None = None,
) -> SeasonInfo:
    """
    Build the SeasonInfo a host would pass for a season folder.

    Args:
        path: Season folder
        index: Season number; parsed from the folder name when omitted
        year: Expected production year
        name: Display name; defaults to the folder name
        series_id: Bangumi id already known for the series

    Returns:
        SeasonInfo for ``path``
    """
    if index is None:
        index = parse_season_number(path.name)
    return SeasonInfo(
        path=normalize_path(path),
        name=name or path.name,
        index_number=index,
        year=year,
        series_provider_ids=ProviderIds(bangumi=series_id),
    )


def print_result(result: MetadataResult) -> None:
    """Print the resolved record."""
    if not result.has_metadata or result.item is None:
        print("No match found.")
        return

    item = result.item
    print(f"Bangumi ID: {item.provider_ids.bangumi}")
    if item.name:
        print(f"Title: {item.name}")
    if item.original_title:
        print(f"Original title: {item.original_title}")
    if item.production_year:
        print(f"Year: {item.production_year}")
    if item.premiere_date:
        print(f"Premiere: {item.premiere_date:%Y-%m-%d}")
    if item.community_rating is not None:
        print(f"Rating: {item.community_rating}")
    if item.official_rating:
        print(f"Official rating: {item.official_rating}")
    if item.tags:
        print(f"Tags: {', '.join(item.tags)}")
    if item.overview:
        print("Overview:")
        print(f"  {item.overview}")
    if result.people:
        print("People:")
        for person in result.people:
            role = f" ({person.role})" if person.role else ""
            print(f"  {person.kind.value}: {person.name}{role}")


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="bangumi-season",
        description="Identify an anime season folder on Bangumi."
    )

    parser.add_argument(
        "path",
        type=Path,
        help="Season folder to identify"
    )
    parser.add_argument(
        "--index",
        type=int,
        default=None,
        help="Season number (default: parsed from the folder name)"
    )
    parser.add_argument(
        "--year",
        type=int,
        default=None,
        help="Expected production year, used to filter name searches"
    )
    parser.add_argument(
        "--name",
        type=str,
        default=None,
        help="Season display name (default: folder name)"
    )
    parser.add_argument(
        "--series-id",
        type=str,
        default=None,
        metavar="ID",
        help="Bangumi id already known for the series"
    )
    parser.add_argument(
        "--set-id",
        type=int,
        default=None,
        metavar="ID",
        help="Write ID to the folder's bangumi.ini before resolving"
    )
    parser.add_argument(
        "--no-season-title",
        action="store_true",
        help="Keep the folder's title instead of the Bangumi title"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds"
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Settings file (default: platform settings directory)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed debug information"
    )

    parsed_args = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        format="  [%(name)s] %(message)s",
    )

    path = parsed_args.path.resolve()
    if not path.is_dir():
        print(f"Error: Not a folder: {parsed_args.path}")
        return 1

    if parsed_args.set_id is not None:
        if not LocalConfiguration.write(path, parsed_args.set_id):
            print(f"Error: Could not write {LocalConfiguration.config_path(path)}")
            return 1

    configuration = PluginConfiguration.load(SettingsManager(parsed_args.settings))
    if parsed_args.no_season_title:
        configuration.use_bangumi_season_title = False
    if parsed_args.timeout is not None:
        configuration.timeout = parsed_args.timeout

    client = BangumiClient(
        access_token=configuration.access_token,
        timeout=configuration.timeout,
        user_agent=configuration.user_agent,
    )
    provider = SeasonProvider(client, FolderLibrary(), configuration)

    info = build_season_info(
        path,
        index=parsed_args.index,
        year=parsed_args.year,
        name=parsed_args.name,
        series_id=parsed_args.series_id,
    )

    token = CancellationToken()
    try:
        result = provider.get_metadata(info, token)
    except KeyboardInterrupt:
        token.cancel()
        print("Cancelled.")
        return 130
    except OperationCancelled:
        print("Cancelled.")
        return 130
    except BangumiError as e:
        print(f"Error: {e}")
        return 1

    print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
