# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import collections.abc
import logging

import gitutil
import release_range.errors as rre
import release_range.model as rm
import version

logger = logging.getLogger(__name__)


def iter_tag_candidates(
    git_helper: gitutil.GitHelper,
    pattern: str='refs/tags/*',
) -> collections.abc.Generator[rm.TagCandidate, None, None]:
    '''
    yields a TagCandidate for each tag-reference whose name is a valid semver version (optionally
    prefixed w/ `v`). Other tags are skipped.
    '''
    for tag_ref in git_helper.iter_tag_references(pattern=pattern):
        if not (name := tag_ref.name):
            logger.debug(f'Skipping tag without short name {tag_ref.path=}')
            continue

        if (parsed := version.parse_to_semver(name, invalid_semver_ok=True)) is None:
            logger.debug(f'Skipping non-semver tag {tag_ref.path=}')
            continue

        yield rm.TagCandidate(
            version=parsed,
            tag=tag_ref,
        )


def select_latest_semver_tag(
    git_helper: gitutil.GitHelper,
    pattern: str='refs/tags/*',
    ignore_prerelease_versions: bool=False,
) -> rm.TagCandidate:
    '''
    returns the tag w/ the greatest semver version. If multiple tags share the same precedence
    (e.g. `1.2.3` and `v1.2.3`, or versions only differing in build-metadata), the tag whose
    reference-path is lexicographically smallest wins.

    raises NoMatchingTagsError if there is no semver tag at all
    '''
    latest = version.greatest_version(
        versions=iter_tag_candidates(git_helper=git_helper, pattern=pattern),
        converter=lambda candidate: candidate.version,
        tie_break_key=lambda candidate: candidate.tag.path,
        ignore_prerelease_versions=ignore_prerelease_versions,
    )

    if not latest:
        raise rre.NoMatchingTagsError('no semver tags found')

    logger.debug(f'Latest semver tag chosen: {latest.name} ({latest.version})')
    return latest
