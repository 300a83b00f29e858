"""Inline attributes embedded in folder names.

Folders can carry provider hints such as ``Show [bangumi-1234]`` or
``Show (bangumi=1234)``.  Only the final path segment is inspected.
"""
import re
from pathlib import PurePath

from .models import NO_SUBJECT, parse_subject_id


def _attribute_pattern(attribute: str) -> re.Pattern:
    return re.compile(
        r'[\[({]\s*' + re.escape(attribute) + r'\s*[=-]\s*([^\])}]+?)\s*[\])}]',
        re.IGNORECASE,
    )


def get_attribute_value(name: str, attribute: str) -> str | None:
    """
    Get the value of ``attribute`` from a bracketed tag in ``name``.

    Args:
        name: File or folder name
        attribute: Attribute key, e.g. "bangumi"

    Returns:
        The raw attribute value, or None when the tag is absent
    """
    if not name or not attribute:
        return None
    match = _attribute_pattern(attribute).search(name)
    if match:
        return match.group(1)
    return None


def subject_id_from_path(path: str) -> int:
    """Return the ``bangumi`` attribute of the last path segment as an id."""
    base_name = PurePath(path).name
    value = get_attribute_value(base_name, "bangumi")
    if value is None:
        return NO_SUBJECT
    return parse_subject_id(value)
