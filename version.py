# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import typing

import semver

Version = semver.VersionInfo | str

T = typing.TypeVar('T')


def parse_to_semver(
    version,
    invalid_semver_ok: bool=False,
) -> semver.VersionInfo | None:
    '''
    parses the given version into a semver.VersionInfo object.

    Parsing is strict (as defined by semver-v2), with one exception: a single leading `v` is
    stripped (`v1.2.3` and `1.2.3` are treated identically). Versions lacking minor- or
    patch-level, or bearing leading zeroes, are rejected.

    @param version: either a str, or a semver.VersionInfo (returned as-is)
    @param invalid_semver_ok: if True, return None for invalid versions (instead of raising)
    '''
    if isinstance(version, semver.VersionInfo):
        return version
    if version is None:
        raise ValueError('version must not be None')
    if not isinstance(version, str):
        raise ValueError(f'unexpected type for version: {type(version)}')

    try:
        semver_version_info, _ = _parse_to_semver_and_prefix(version)
    except ValueError:
        if invalid_semver_ok:
            return None

        raise

    return semver_version_info


def _parse_to_semver_and_prefix(version: str) -> tuple[semver.VersionInfo, str | None]:
    if not version:
        raise ValueError(f'not a valid (semver) version: `{version}`')

    semver_version = version
    prefix = None

    # strip (at most one) leading `v`
    if version[0] == 'v':
        semver_version = version[1:]
        prefix = 'v'

    try:
        return semver.VersionInfo.parse(semver_version), prefix
    except (ValueError, TypeError):
        raise ValueError(f'not a valid (semver) version: `{version}`')


def greatest_version(
    versions: typing.Iterable[T],
    converter: typing.Callable[[T], Version]=None,
    tie_break_key: typing.Callable[[T], typing.Any]=None,
    ignore_prerelease_versions: bool=False,
    invalid_semver_ok: bool=False,
) -> T | None:
    '''
    returns the greatest version from the passed versions (or None, if no version remains).

    versions are compared using semver precedence (build-metadata does not contribute to
    precedence). If a `converter` is passed, it is used to map each element to a version
    (str or semver.VersionInfo); the returned object is guaranteed to be identical to the
    passed-in element.

    if `ignore_prerelease_versions` is set to True, only versions w/o prerelease are considered.
    if `invalid_semver_ok` is set to True, versions that are not valid semver versions are
    silently ignored (will raise otherwise).

    Elements of equal precedence are ordered by `tie_break_key` (smallest key wins). If no
    `tie_break_key` is given, the element encountered first wins.
    '''
    greatest_candidate = None
    greatest_candidate_semver = None

    for candidate in versions:
        candidate_version = converter(candidate) if converter else candidate
        candidate_semver = parse_to_semver(
            version=candidate_version,
            invalid_semver_ok=invalid_semver_ok,
        )

        if candidate_semver is None:
            continue

        if ignore_prerelease_versions and candidate_semver.prerelease:
            continue

        if greatest_candidate_semver is None:
            greatest_candidate_semver = candidate_semver
            greatest_candidate = candidate
            continue

        cmp = candidate_semver.compare(greatest_candidate_semver)
        if cmp > 0:
            greatest_candidate_semver = candidate_semver
            greatest_candidate = candidate
        elif cmp == 0 and tie_break_key:
            if tie_break_key(candidate) < tie_break_key(greatest_candidate):
                greatest_candidate_semver = candidate_semver
                greatest_candidate = candidate

    return greatest_candidate
