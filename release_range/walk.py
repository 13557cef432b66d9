# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import dataclasses
import logging

import git

import gitutil
import release_range.errors as rre
import release_range.model as rm

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RangeWalk:
    merge_base: str | None
    commits: tuple[rm.CommitRecord, ...]


def commits_since(
    git_helper: gitutil.GitHelper,
    tag_commit: git.Commit | str,
    base_commit: git.Commit | str,
) -> RangeWalk:
    '''
    returns all commits reachable from `base_commit`, but not from the merge-base of `tag_commit`
    and `base_commit` (this is what hosting platforms show for `<tag>...<base>`), newest first.

    If histories are disjoint (no merge-base), all commits reachable from `base_commit` are
    returned.
    '''
    try:
        merge_base = git_helper.merge_base(tag_commit, base_commit)
    except (git.GitCommandError, ValueError) as e:
        raise rre.RevwalkInitError(
            f'could not determine merge-base of {tag_commit} and {base_commit}'
        ) from e

    if merge_base:
        merge_base = merge_base.hexsha
        logger.debug(f'{merge_base=}')
    else:
        logger.info(
            f'{tag_commit} and {base_commit} do not share history - considering all commits'
        )

    try:
        walk = git_helper.iter_commits(
            start=base_commit,
            hide=merge_base,
        )
    except (git.GitCommandError, ValueError) as e:
        raise rre.RevwalkInitError(f'could not walk history from {base_commit}') from e

    commits = []
    try:
        for commit in walk:
            try:
                commits.append(rm.CommitRecord.from_commit(commit))
            except (ValueError, git.BadObject) as e:
                raise rre.CommitLookupError(
                    f'could not look up commit {commit.hexsha} during history walk'
                ) from e
    except git.GitCommandError as e:
        raise rre.RevwalkInitError(f'error iterating through commits from {base_commit}') from e

    logger.debug(f'Collected {len(commits)} commits from {base_commit}')

    return RangeWalk(
        merge_base=merge_base,
        commits=tuple(commits),
    )
