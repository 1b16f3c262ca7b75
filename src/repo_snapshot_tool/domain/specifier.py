from __future__ import annotations
"""Repository specifier parsing.

Accepted forms:

    owner/repo                 -> owner/repo, "/",     None
    owner/repo/                -> owner/repo, "/",     None
    owner/repo/src             -> owner/repo, "/src/", None
    owner/repo#some/branch     -> owner/repo, "/",     "some/branch"
    owner/repo/src#some/branch -> owner/repo, "/src/", "some/branch"
"""

import re

from .entities import CloneSpec
from .errors import InvalidSpecifier


_SPECIFIER_PATTERN = re.compile(r"(?P<repository>[^/]+/[^/#]+)(?P<sub>/[^#]*)?(?P<ref>#.+)?")
_REPEATED_SEPARATORS = re.compile(r"/{2,}")
_LEADING_HASHES = re.compile(r"^#+")


def parse_specifier(text: str) -> CloneSpec:
    match = _SPECIFIER_PATTERN.fullmatch(text)
    if match is None:
        raise InvalidSpecifier(text)

    return CloneSpec(
        repository_id=match.group("repository"),
        sub_path=normalize_sub_path(match.group("sub")),
        ref=normalize_ref(match.group("ref")),
    )


def normalize_sub_path(sub: str | None) -> str:
    """Return `sub` as "/a/b/": one leading and trailing "/", no repeats."""
    return _REPEATED_SEPARATORS.sub("/", f"/{sub or ''}/")


def normalize_ref(ref: str | None) -> str | None:
    """Strip leading "#" characters; an empty result means the default branch."""
    if not ref:
        return None
    return _LEADING_HASHES.sub("", ref) or None
