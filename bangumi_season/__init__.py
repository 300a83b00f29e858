"""
bangumi_season - Bangumi season identification

Resolves a local anime season folder to its Bangumi subject and maps
the subject onto season metadata.
"""
from .models import (
    NO_SUBJECT,
    ProviderIds,
    SeasonInfo,
    LocalOverride,
    SiblingSeason,
    SeriesNode,
    FolderNode,
    Subject,
    PersonInfo,
    PersonKind,
    ResolutionResult,
    SeasonMetadataRecord,
    MetadataResult,
)
from .bangumi import BangumiClient, BangumiError
from .cancellation import CancellationToken, OperationCancelled
from .library import LibraryTree, InMemoryLibrary, FolderLibrary
from .local_config import LocalConfiguration
from .resolver import SeasonProvider
from .settings import PluginConfiguration, SettingsManager

__version__ = "0.3.0"
__all__ = [
    "NO_SUBJECT",
    "ProviderIds",
    "SeasonInfo",
    "LocalOverride",
    "SiblingSeason",
    "SeriesNode",
    "FolderNode",
    "Subject",
    "PersonInfo",
    "PersonKind",
    "ResolutionResult",
    "SeasonMetadataRecord",
    "MetadataResult",
    "BangumiClient",
    "BangumiError",
    "CancellationToken",
    "OperationCancelled",
    "LibraryTree",
    "InMemoryLibrary",
    "FolderLibrary",
    "LocalConfiguration",
    "SeasonProvider",
    "PluginConfiguration",
    "SettingsManager",
]
