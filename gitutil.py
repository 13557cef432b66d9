# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import collections.abc
import fnmatch
import logging

import git

logger = logging.getLogger(__name__)

HEADS_PREFIX = 'refs/heads/'
REMOTES_PREFIX = 'refs/remotes/'


class GitHelper:
    '''
    read-only accessor for a local git-repository.

    GitHelper never alters references, objects, index or worktree of the wrapped repository. Some
    reads are delegated to the `git` executable by GitPython (e.g. merge-base, rev-list); those
    are local reads w/o network access. Remotes are only ever contacted through the module-level
    `ls_remote_default_branch`, which callers must pass in explicitly.
    '''
    def __init__(
        self,
        repo: git.Repo | str,
    ):
        if repo is None:
            raise ValueError(repo)
        if isinstance(repo, str):
            repo = git.Repo(repo, search_parent_directories=True)
        if not isinstance(repo, git.Repo):
            raise ValueError(repo)

        self.repo = repo

    @property
    def repo_path(self) -> str:
        return self.repo.working_tree_dir or self.repo.git_dir

    def iter_tag_references(
        self,
        pattern: str='refs/tags/*',
    ) -> collections.abc.Generator[git.TagReference, None, None]:
        '''
        yields all tag-references whose full path (e.g. `refs/tags/v1.2.3`) matches the given
        glob-pattern. Note that (as for `git for-each-ref`) `*` will also match `/`.
        '''
        for tag_ref in git.TagReference.iter_items(self.repo):
            if fnmatch.fnmatchcase(tag_ref.path, pattern):
                yield tag_ref

    def resolve_commit(self, ref_name: str) -> git.Commit | None:
        '''
        resolves the reference of the given (exact) name (e.g. `refs/heads/main`, or `HEAD`) to
        the commit it points to. Symbolic references are followed, annotated tags are peeled.

        returns None if there is no such reference, or if it does not point to a commit.
        '''
        ref = git.SymbolicReference(self.repo, ref_name)
        try:
            return ref.commit
        except (ValueError, TypeError, git.BadName, git.BadObject) as e:
            logger.debug(f'could not resolve {ref_name=} to a commit: {e}')
            return None

    def symbolic_target(self, ref_name: str) -> str | None:
        '''
        returns the (full) name of the reference the given symbolic reference points to (e.g.
        `refs/remotes/origin/main` for `refs/remotes/origin/HEAD`).

        returns None if there is no such reference, or if it is not symbolic (i.e. detached).
        Note that the target itself is not required to exist.
        '''
        ref = git.SymbolicReference(self.repo, ref_name)
        try:
            return ref.reference.path
        except (ValueError, TypeError) as e:
            logger.debug(f'{ref_name=} is not a symbolic reference: {e}')
            return None

    def head(self) -> tuple[str, git.Commit]:
        '''
        returns name and commit of the current HEAD. The name is the branch HEAD points to
        (e.g. `refs/heads/main`), or `HEAD` if HEAD is detached.

        raises ValueError if HEAD cannot be resolved to a commit (e.g. for empty repositories)
        '''
        head = self.repo.head
        commit = head.commit # raises ValueError for "unborn" branches

        try:
            name = head.reference.path
        except TypeError:
            name = 'HEAD' # detached

        return name, commit

    def remote(self, name: str='origin') -> git.Remote | None:
        remote = git.Remote(self.repo, name)
        if not remote.exists():
            return None
        return remote

    def merge_base(
        self,
        left: git.Commit | str,
        right: git.Commit | str,
    ) -> git.Commit | None:
        '''
        returns the best common ancestor of the given commits, or None if histories are disjoint
        '''
        if not (merge_bases := self.repo.merge_base(left, right)):
            return None
        return merge_bases[0]

    def iter_commits(
        self,
        start: git.Commit | str,
        hide: git.Commit | str | None=None,
    ) -> collections.abc.Iterator[git.Commit]:
        '''
        yields all commits reachable from `start`, excluding `hide` and all commits reachable from
        it (if given), in reverse chronological order (newest first).

        the returned iterator is lazy; errors from the underlying `git rev-list` are raised
        (as git.GitCommandError) while iterating.
        '''
        start = _hexsha(start)
        if hide is None:
            rev = start
        else:
            rev = f'{_hexsha(hide)}..{start}'

        return self.repo.iter_commits(rev)

    def github_org_and_repo(self, remote_name: str='origin') -> tuple[str, str]:
        '''
        returns the (org, repository)-names parsed from the url of the given remote, which is
        expected to be hosted on github.com.

        supported url formats:
        - git@github.com:org/repo.git
        - https://github.com/org/repo.git
        - ssh://git@github.com/org/repo.git
        '''
        if not (remote := self.remote(name=remote_name)):
            raise ValueError(
                f"Could not find remote '{remote_name}'; "
                'remote required in order to parse organization/repo'
            )

        try:
            url = remote.url
        except AttributeError as e:
            raise ValueError(f"Remote '{remote_name}' has no URL") from e

        return parse_github_org_and_repo(url)


def _hexsha(commit: git.Commit | str) -> str:
    if isinstance(commit, git.Commit):
        return commit.hexsha
    return commit


def parse_github_org_and_repo(url: str) -> tuple[str, str]:
    trimmed = url.removesuffix('.git')

    # split on both `:` and `/` to cover scp-like syntax, as well as urls
    parts = trimmed.replace(':', '/').split('/')

    for idx, part in enumerate(parts):
        if 'github.com' in part:
            break
    else:
        raise ValueError(f"URL '{url}' does not look like a GitHub URL")

    if idx + 2 >= len(parts):
        raise ValueError(f"Could not parse organization and repo name from '{url}'")

    return parts[idx + 1], parts[idx + 2]


def ls_remote_default_branch(remote: git.Remote) -> str | None:
    '''
    asks the given remote for its advertised default branch (the target of its `HEAD`), e.g.
    `refs/heads/main`. This requires connecting to the remote (which might involve network access
    and authentication, which is left to the effective git-config).

    returns None if the remote cannot be reached, or does not advertise a symbolic HEAD.
    '''
    try:
        output = remote.repo.git.ls_remote('--symref', remote.name, 'HEAD')
    except git.GitCommandError as e:
        logger.debug(f'could not query advertised HEAD from {remote.name=}: {e}')
        return None

    for line in output.splitlines():
        # ref: refs/heads/main	HEAD
        if not line.startswith('ref: '):
            continue
        target, _, name = line.removeprefix('ref: ').partition('\t')
        if name.strip() == 'HEAD':
            return target.strip()

    return None
