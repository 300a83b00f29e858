"""Library tree lookup: containers and their season children."""
import logging
import os
import re
from pathlib import Path

from .attributes import subject_id_from_path
from .local_config import LocalConfiguration
from .models import (
    Container,
    FolderNode,
    NO_SUBJECT,
    ProviderIds,
    SeriesNode,
    SiblingSeason,
)

log = logging.getLogger(__name__)

# Season folder patterns (order matters - more specific first)
SEASON_PATTERNS = [
    # Season 2 / Season.02 / season_2
    r'\bseason[\s._-]*(\d{1,3})\b',
    # 第2季 / 第02期
    r'第\s*(\d{1,3})\s*[季期]',
    # S02 / s2
    r'\bs(\d{1,3})\b',
    # Bare number folder: "2"
    r'^(\d{1,3})$',
]

# Bracketed tags like [bangumi-1234] or (2019)
_TAG_PATTERN = r'\s*[\[({][^\])}]*[\])}]'


def parse_season_number(folder_name: str) -> int | None:
    """
    Extract the season number from a season folder name.

    Args:
        folder_name: Name of the folder (not a full path)

    Returns:
        Season number, or None if the name does not look like a season
    """
    name = folder_name.strip()
    for pattern in SEASON_PATTERNS:
        match = re.search(pattern, name, re.IGNORECASE)
        if match:
            return int(match.group(1))
    return None


def clean_series_name(folder_name: str) -> str:
    """Strip bracketed tags from a series folder name."""
    name = re.sub(_TAG_PATTERN, '', folder_name)
    return re.sub(r'\s+', ' ', name).strip() or folder_name


def normalize_path(path: str | Path) -> str:
    return os.path.normpath(str(path))


class LibraryTree:
    """Lookup of library containers by path."""

    def find_by_path(self, path: str) -> Container | None:
        raise NotImplementedError


class InMemoryLibrary(LibraryTree):
    """Library tree populated by the host.

    Usage:
        library = InMemoryLibrary()
        library.add(SeriesNode("Show", "/anime/Show", children=[...]))
        library.find_by_path("/anime/Show")
    """

    def __init__(self, containers: list[Container] | None = None):
        self._containers: dict[str, Container] = {}
        for container in containers or []:
            self.add(container)

    def add(self, container: Container) -> None:
        self._containers[normalize_path(container.path)] = container

    def find_by_path(self, path: str) -> Container | None:
        return self._containers.get(normalize_path(path))


class FolderLibrary(LibraryTree):
    """Library tree read directly from disk.

    A folder is a series when at least one of its sub-folders is named
    like a season.  Resolved identifiers of the seasons come from their
    ``bangumi.ini`` or a ``[bangumi-N]`` tag in the folder name.
    """

    def find_by_path(self, path: str) -> Container | None:
        folder = Path(path)
        if not folder.is_dir():
            return None

        children = []
        for item in sorted(folder.iterdir()):
            if not item.is_dir():
                continue
            index = parse_season_number(item.name)
            if index is None:
                continue
            children.append(SiblingSeason(
                index_number=index,
                path=normalize_path(item),
                provider_ids=self._provider_ids(item),
            ))

        name = clean_series_name(folder.name)
        if not children:
            return FolderNode(name=name, path=normalize_path(folder))

        log.debug("Series %r has %d season folder(s)", name, len(children))
        return SeriesNode(name=name, path=normalize_path(folder), children=children)

    @staticmethod
    def _provider_ids(season_folder: Path) -> ProviderIds:
        subject_id = LocalConfiguration.for_path(season_folder).id
        if subject_id == NO_SUBJECT:
            subject_id = subject_id_from_path(str(season_folder))
        if subject_id == NO_SUBJECT:
            return ProviderIds()
        return ProviderIds(bangumi=str(subject_id))
