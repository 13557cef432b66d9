# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


'''
Determines the branch releases are compared against ("default branch").

There is no single authoritative source for a repository's default branch (fresh clones, long-lived
clones, and repositories w/o remote differ), so lookup degrades through strategies of decreasing
certainty. Each strategy returns a `ResolvedBase`, or None; the first result wins. Only the last
strategy (current HEAD) may fail.
'''

import collections.abc
import functools
import logging

import git

import gitutil
import release_range.errors as rre
import release_range.model as rm

logger = logging.getLogger(__name__)

AdvertisedHeadLookup = collections.abc.Callable[[git.Remote], str | None]
Strategy = collections.abc.Callable[[gitutil.GitHelper], rm.ResolvedBase | None]


def _resolve(
    git_helper: gitutil.GitHelper,
    ref_name: str,
    strategy: rm.BaseStrategy,
) -> rm.ResolvedBase:
    if not (commit := git_helper.resolve_commit(ref_name)):
        raise rre.BranchUnresolvableError(ref_name)

    return rm.ResolvedBase(
        name=ref_name,
        hexsha=commit.hexsha,
        strategy=strategy,
    )


def _resolve_first(
    git_helper: gitutil.GitHelper,
    ref_names: collections.abc.Iterable[str],
    strategy: rm.BaseStrategy,
) -> rm.ResolvedBase:
    for ref_name in ref_names:
        try:
            return _resolve(git_helper, ref_name, strategy)
        except rre.BranchUnresolvableError:
            logger.debug(f'could not resolve {ref_name=}')

    raise rre.BranchUnresolvableError(f'none of {ref_names=} resolved to a commit')


def from_remote_head(
    git_helper: gitutil.GitHelper,
    remote_name: str='origin',
) -> rm.ResolvedBase | None:
    '''
    uses the symbolic reference `refs/remotes/<remote>/HEAD` (typically created by `git clone`, or
    `git remote set-head`), e.g. pointing to `refs/remotes/origin/main`. The matching local branch
    (`refs/heads/main`) is preferred over the remote-tracking branch.
    '''
    remote_prefix = f'{gitutil.REMOTES_PREFIX}{remote_name}/'
    remote_head = f'{remote_prefix}HEAD'

    if not (target := git_helper.symbolic_target(remote_head)):
        logger.debug(f'{remote_head} does not exist, or is not symbolic')
        return None

    branch_name = target.removeprefix(remote_prefix)
    local_branch = f'{gitutil.HEADS_PREFIX}{branch_name}'

    try:
        resolved = _resolve_first(
            git_helper=git_helper,
            ref_names=(local_branch, target),
            strategy=rm.BaseStrategy.REMOTE_HEAD,
        )
    except rre.BranchUnresolvableError:
        logger.debug(f'{remote_head} points to {target}, which does not resolve to a commit')
        return None

    logger.debug(f'Using default branch {resolved.name} (from {remote_head})')
    return resolved


def from_remote_advertised(
    git_helper: gitutil.GitHelper,
    remote_name: str='origin',
    advertised_head_lookup: AdvertisedHeadLookup | None=None,
) -> rm.ResolvedBase | None:
    '''
    uses the default branch advertised by the remote (as returned by `advertised_head_lookup`,
    e.g. `refs/heads/main`). The advertised reference is tried locally first; for branches, the
    matching remote-tracking branch (`refs/remotes/<remote>/main`) is tried as well.

    if no `advertised_head_lookup` is passed, this strategy never yields a result.
    '''
    if not advertised_head_lookup:
        logger.debug('no lookup for advertised default branch configured')
        return None

    try:
        if not (remote := git_helper.remote(name=remote_name)):
            raise rre.RemoteMissingError(remote_name)

        if not (advertised := advertised_head_lookup(remote)):
            raise rre.BranchUnresolvableError(f'{remote_name=} advertised no default branch')

        logger.debug(f'Remote default branch: {advertised}')

        ref_names = [advertised]
        if advertised.startswith(gitutil.HEADS_PREFIX):
            branch_name = advertised.removeprefix(gitutil.HEADS_PREFIX)
            ref_names.append(f'{gitutil.REMOTES_PREFIX}{remote_name}/{branch_name}')

        resolved = _resolve_first(
            git_helper=git_helper,
            ref_names=ref_names,
            strategy=rm.BaseStrategy.REMOTE_ADVERTISED,
        )
    except rre.SoftResolutionError as sre:
        logger.debug(f'could not determine advertised default branch: {sre!r}')
        return None

    logger.debug(f'Using default branch {resolved.name} (advertised by {remote_name})')
    return resolved


def from_current_head(
    git_helper: gitutil.GitHelper,
) -> rm.ResolvedBase:
    try:
        name, commit = git_helper.head()
    except ValueError as ve:
        raise rre.NoHeadError(
            f'repository has no resolvable HEAD (is it empty?): {git_helper.repo_path}'
        ) from ve

    logger.debug(f'Falling back to current HEAD ({name})')
    return rm.ResolvedBase(
        name=name,
        hexsha=commit.hexsha,
        strategy=rm.BaseStrategy.CURRENT_HEAD,
    )


def default_strategies(
    remote_name: str='origin',
    advertised_head_lookup: AdvertisedHeadLookup | None=None,
) -> tuple[Strategy, ...]:
    return (
        functools.partial(from_remote_head, remote_name=remote_name),
        functools.partial(
            from_remote_advertised,
            remote_name=remote_name,
            advertised_head_lookup=advertised_head_lookup,
        ),
        from_current_head,
    )


def resolve_default_base(
    git_helper: gitutil.GitHelper,
    remote_name: str='origin',
    advertised_head_lookup: AdvertisedHeadLookup | None=None,
    strategies: collections.abc.Iterable[Strategy] | None=None,
) -> rm.ResolvedBase:
    '''
    determines the repository's default branch, trying (in this order):

    1. the local symbolic reference tracking the remote's HEAD (`refs/remotes/<remote>/HEAD`)
    2. the default branch advertised by the remote (only if `advertised_head_lookup` is given)
    3. the current HEAD

    raises NoHeadError if none of the strategies yielded a result
    '''
    if strategies is None:
        strategies = default_strategies(
            remote_name=remote_name,
            advertised_head_lookup=advertised_head_lookup,
        )

    for strategy in strategies:
        if resolved := strategy(git_helper):
            logger.debug(f'Default base resolved to {resolved.name} @ {resolved.hexsha}')
            return resolved

    raise rre.NoHeadError('could not resolve default branch')
