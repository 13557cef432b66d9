# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import logging

import git

import gitutil
import release_range.branch as rb
import release_range.errors as rre
import release_range.model as rm
import release_range.tags as rt
import release_range.walk as rw

logger = logging.getLogger(__name__)


def peel_to_commit(tag: git.TagReference) -> git.Commit:
    '''
    returns the commit the given tag ultimately points to (annotated tags point to a tag-object,
    which in turn points to the commit; lightweight tags point to the commit directly).
    '''
    try:
        return tag.commit
    except (ValueError, TypeError, git.BadName, git.BadObject) as e:
        raise rre.PeelError(
            f'could not peel tag {tag.path} to a commit',
            tag_name=tag.name,
        ) from e


def get_commits_after_latest_tag(
    git_helper: gitutil.GitHelper,
    remote_name: str='origin',
    advertised_head_lookup: rb.AdvertisedHeadLookup | None=None,
    tag_pattern: str='refs/tags/*',
    ignore_prerelease_versions: bool=False,
) -> rm.RangeResult:
    '''
    gathers commits on the repository's default branch since the latest semver release-tag, using
    the comparison semantics of hosting platforms (`<tag>...<default-branch>`):

    1. select the tag w/ the greatest semver version (tags not parseable as semver are ignored)
    2. peel the tag to the commit it refers to
    3. determine the default branch (see `release_range.branch.resolve_default_base`)
    4. walk history from the default branch, hiding the merge-base of tag and default branch

    The tag does not need to be an ancestor of the default branch (e.g. if it was created on a
    release-branch); only commits after the fork-point are hidden in that case.

    raises (a subclass of) RangeResolutionError on failure; there are no partial results
    '''
    latest = rt.select_latest_semver_tag(
        git_helper=git_helper,
        pattern=tag_pattern,
        ignore_prerelease_versions=ignore_prerelease_versions,
    )
    tag_commit = peel_to_commit(latest.tag)
    logger.info(f'Latest semver tag: {latest.name} @ {tag_commit.hexsha}')

    try:
        base = rb.resolve_default_base(
            git_helper=git_helper,
            remote_name=remote_name,
            advertised_head_lookup=advertised_head_lookup,
        )
    except rre.NoHeadError as nhe:
        raise rre.NoHeadError(f'could not resolve default branch: {nhe}') from nhe
    logger.info(f'Default branch: {base.name} @ {base.hexsha} ({base.strategy})')

    range_walk = rw.commits_since(
        git_helper=git_helper,
        tag_commit=tag_commit,
        base_commit=base.hexsha,
    )

    logger.info(
        f'Found {len(range_walk.commits)} commits since {latest.name} ({latest.version})'
    )

    return rm.RangeResult(
        tag=latest.tag,
        version=latest.version,
        base=base,
        merge_base=range_walk.merge_base,
        commits=range_walk.commits,
    )
