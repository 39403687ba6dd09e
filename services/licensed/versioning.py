"""Helpers for resolving a requested version against release tags."""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from services.licensed.models import Release


__all__ = [
    "find_release_for_version",
    "find_version",
    "parse_range",
    "parse_tag",
]

_LATEST_ALIASES = {"", "latest", "*", "x"}
_WILDCARDS = {"x", "X", "*"}
_PARTIAL_PATTERN = re.compile(r"^v?(\d+(?:\.\d+)*)(?:\.[x*])*$", re.IGNORECASE)
_HYPHEN_RANGE_PATTERN = re.compile(r"^(\S+)\s+-\s+(\S+)$")
_COMPARATOR_PATTERN = re.compile(r"(\^|~|>=|<=|>|<|==|=|!=)?\s*v?([0-9xX*][0-9A-Za-z.*+-]*)")


def parse_tag(tag: str) -> Version | None:
    """Return the parsed version for ``tag`` or ``None`` when it is not a version."""

    try:
        return Version(tag.strip())
    except InvalidVersion:
        return None


def find_version(tags: Sequence[str], requested: str | None) -> str | None:
    """Return the tag in ``tags`` that best matches ``requested``.

    An exact tag match always wins, ignoring a leading ``v``.  Otherwise
    ``requested`` is treated as a partial version (``4``, ``4.3``, ``4.x.x``),
    a PEP 440 specifier set (``>=4,<5``) or a semver range (``^4.0.0``,
    ``~4.2``, ``>=4.0.0 <5.0.0``, ``4.0.0 - 4.2.0``, ``3.x || 4.x``) and the
    newest matching tag is returned.  ``None`` means nothing matched.
    """

    specifier = (requested or "").strip()
    if specifier.lower() in _LATEST_ALIASES:
        return _newest(_parsed_tags(tags), allow_prereleases=False)

    exact = _find_exact(tags, specifier)
    if exact is not None:
        return exact

    partial = _PARTIAL_PATTERN.match(specifier)
    if partial is not None:
        prefix = tuple(int(part) for part in partial.group(1).split("."))
        candidates = (
            (tag, version)
            for tag, version in _parsed_tags(tags)
            if version.release[: len(prefix)] == prefix
        )
        return _newest(candidates, allow_prereleases=False)

    alternatives = parse_range(specifier)
    if alternatives is None:
        return None
    candidates = (
        (tag, version)
        for tag, version in _parsed_tags(tags)
        if any(
            alternative.contains(version, prereleases=alternative.prereleases)
            for alternative in alternatives
        )
    )
    return _newest(candidates, allow_prereleases=True)


def parse_range(specifier: str) -> list[SpecifierSet] | None:
    """Translate ``specifier`` into alternative :class:`SpecifierSet` objects.

    The text is read as a semver range first: ``||`` separates alternatives,
    comparators within an alternative are separated by whitespace or commas.
    Text that is not a semver range is tried as a PEP 440 specifier set
    (``~=4.2``, ``>=5.0.0b1``).  ``None`` means the text is neither.
    """

    alternatives: list[SpecifierSet] | None = []
    for alternative in specifier.split("||"):
        clauses = _semver_clauses(alternative.strip())
        if clauses is None:
            alternatives = None
            break
        alternatives.append(SpecifierSet(",".join(clauses)))
    if alternatives is not None:
        return alternatives

    try:
        return [SpecifierSet(specifier)]
    except InvalidSpecifier:
        return None


def find_release_for_version(releases: Sequence[Release], requested: str | None) -> Release | None:
    """Return the release whose tag :func:`find_version` selects."""

    found = find_version([release.tag_name for release in releases], requested)
    if found is None:
        return None
    for release in releases:
        if release.tag_name == found:
            return release
    return None


def _semver_clauses(text: str) -> list[str] | None:
    if not text:
        return []

    hyphen = _HYPHEN_RANGE_PATTERN.match(text)
    if hyphen is not None:
        lower = _split_version(hyphen.group(1).lstrip("vV"))
        upper = _split_version(hyphen.group(2).lstrip("vV"))
        if lower is None or upper is None:
            return None
        lower_clauses = _comparator_clauses(">=", *lower)
        upper_clauses = _comparator_clauses("<=", *upper)
        if lower_clauses is None or upper_clauses is None:
            return None
        return lower_clauses + upper_clauses

    if _COMPARATOR_PATTERN.sub("", text).replace(",", "").strip():
        return None

    clauses: list[str] = []
    for match in _COMPARATOR_PATTERN.finditer(text):
        parsed = _split_version(match.group(2))
        if parsed is None:
            return None
        translated = _comparator_clauses(match.group(1) or "=", *parsed)
        if translated is None:
            return None
        clauses.extend(translated)
    return clauses


def _split_version(raw: str) -> tuple[list[int], str | None] | None:
    """Split ``4.2.x`` or ``4.2.0-beta.1`` into release numbers and prerelease."""

    core, _, prerelease = raw.split("+", 1)[0].partition("-")
    numbers: list[int] = []
    wildcard_seen = False
    for part in core.split("."):
        if part in _WILDCARDS:
            wildcard_seen = True
        elif part.isdigit() and not wildcard_seen:
            numbers.append(int(part))
        else:
            return None
    if len(numbers) > 3 or (prerelease and len(numbers) < 3):
        return None
    return numbers, prerelease or None


def _comparator_clauses(operator: str, numbers: list[int], prerelease: str | None) -> list[str] | None:
    full = len(numbers) == 3
    if not numbers:
        return [] if operator in ("=", "==", ">=", "^", "~", "<=") else None

    lower = _format_version(numbers, prerelease)
    if lower is None:
        return None

    if operator in ("=", "=="):
        if full:
            return [f"=={lower}"]
        return [f">={lower}", f"<{_bump(numbers, len(numbers) - 1)}"]
    if operator == "!=":
        return [f"!={lower}"] if full else [f"!={_join(numbers)}.*"]
    if operator == ">":
        return [f">{lower}"] if full else [f">={_bump(numbers, len(numbers) - 1)}"]
    if operator == ">=":
        return [f">={lower}"]
    if operator == "<":
        return [f"<{lower}"]
    if operator == "<=":
        return [f"<={lower}"] if full else [f"<{_bump(numbers, len(numbers) - 1)}"]
    if operator == "~":
        return [f">={lower}", f"<{_bump(numbers, min(1, len(numbers) - 1))}"]
    if operator == "^":
        significant = next(
            (index for index, number in enumerate(numbers) if number != 0),
            len(numbers) - 1,
        )
        return [f">={lower}", f"<{_bump(numbers, significant)}"]
    return None


def _format_version(numbers: list[int], prerelease: str | None) -> str | None:
    padded = numbers + [0] * (3 - len(numbers))
    text = _join(padded)
    if prerelease:
        text = f"{text}-{prerelease}"
    version = parse_tag(text)
    return str(version) if version is not None else None


def _bump(numbers: list[int], index: int) -> str:
    bumped = numbers[: index + 1]
    bumped[index] += 1
    return _join(bumped)


def _join(numbers: Iterable[int]) -> str:
    return ".".join(str(number) for number in numbers)


def _find_exact(tags: Iterable[str], specifier: str) -> str | None:
    tags = list(tags)
    for tag in tags:
        if tag == specifier:
            return tag
    bare = specifier.lstrip("vV")
    for tag in tags:
        if tag.lstrip("vV") == bare:
            return tag
    return None


def _parsed_tags(tags: Iterable[str]) -> Iterable[tuple[str, Version]]:
    for tag in tags:
        version = parse_tag(tag)
        if version is not None:
            yield tag, version


def _newest(candidates: Iterable[tuple[str, Version]], *, allow_prereleases: bool) -> str | None:
    best: tuple[str, Version] | None = None
    for tag, version in candidates:
        if version.is_prerelease and not allow_prereleases:
            continue
        if best is None or version > best[1]:
            best = (tag, version)
    return best[0] if best is not None else None
