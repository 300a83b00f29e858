"""Per-folder local configuration (``bangumi.ini``)."""
import configparser
import logging
from pathlib import Path

from .models import LocalOverride, parse_subject_id

log = logging.getLogger(__name__)

CONFIG_FILE = "bangumi.ini"

# bangumi.ini has no section header; values are read under this one.
_SECTION = "bangumi"


class LocalConfiguration:
    """Loads explicit subject overrides placed next to the media."""

    @staticmethod
    def config_path(path: str | Path) -> Path:
        """
        Return the bangumi.ini location for ``path``.

        Directories hold their own file; for a file path the file beside
        it is used.
        """
        path = Path(path)
        if path.is_dir():
            return path / CONFIG_FILE
        return path.parent / CONFIG_FILE

    @classmethod
    def for_path(cls, path: str | Path) -> LocalOverride:
        """
        Load the override for ``path``.

        Returns:
            LocalOverride with ``id`` set to NO_SUBJECT when the file is
            missing, unreadable or malformed
        """
        config_path = cls.config_path(path)
        if not config_path.is_file():
            return LocalOverride()

        parser = configparser.ConfigParser()
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                parser.read_string(f"[{_SECTION}]\n" + f.read())
        except (configparser.Error, IOError, UnicodeDecodeError) as e:
            log.warning("Ignoring unreadable %s: %s", config_path, e)
            return LocalOverride()

        return LocalOverride(id=parse_subject_id(parser.get(_SECTION, "id", fallback=None)))

    @classmethod
    def write(cls, path: str | Path, subject_id: int) -> bool:
        """
        Write an override file for ``path``.

        Returns:
            True if saved successfully
        """
        config_path = cls.config_path(path)
        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(f"id={subject_id}\n")
            return True
        except IOError:
            return False
