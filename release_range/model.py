# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import dataclasses
import enum

import git
import semver


ABBREVIATED_HEXSHA_LENGTH = 7


class BaseStrategy(enum.StrEnum):
    REMOTE_HEAD = 'remote-head'
    REMOTE_ADVERTISED = 'remote-advertised'
    CURRENT_HEAD = 'current-head'


@dataclasses.dataclass(frozen=True)
class TagCandidate:
    version: semver.VersionInfo
    tag: git.TagReference

    @property
    def name(self) -> str:
        return self.tag.name


@dataclasses.dataclass(frozen=True)
class ResolvedBase:
    '''
    the branch (or detached HEAD) releases are compared against

    name: full reference name, e.g. `refs/heads/main`, `refs/remotes/origin/main`, or `HEAD`
    hexsha: commit the reference pointed to when it was resolved
    strategy: the lookup-strategy that yielded this base
    '''
    name: str
    hexsha: str
    strategy: BaseStrategy


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    hexsha: str
    message: str
    parents: tuple[str, ...] = ()
    committed_date: int = 0

    @staticmethod
    def from_commit(commit: git.Commit) -> 'CommitRecord':
        message = commit.message
        if isinstance(message, bytes):
            # GitPython keeps raw bytes if message cannot be decoded w/ declared encoding
            message = message.decode('utf-8', errors='replace')

        return CommitRecord(
            hexsha=commit.hexsha,
            message=message,
            parents=tuple(parent.hexsha for parent in commit.parents),
            committed_date=commit.committed_date,
        )

    @property
    def short_message(self) -> str:
        return short_message(self.message)

    @property
    def abbreviated_hexsha(self) -> str:
        return abbreviated_hexsha(self.hexsha)


@dataclasses.dataclass(frozen=True)
class RangeResult:
    '''
    the commits on the default-branch since the latest (semver) release-tag, following
    "three-dot"-semantics (`<tag>...<base>`)
    '''
    tag: git.TagReference
    version: semver.VersionInfo
    base: ResolvedBase
    merge_base: str | None
    commits: tuple[CommitRecord, ...]

    @property
    def tag_name(self) -> str:
        return self.tag.name


def short_message(message: str | None) -> str:
    '''
    returns the first line of the given commit-message
    '''
    if not message:
        return ''
    first_line, _, _ = message.partition('\n')
    return first_line


def abbreviated_hexsha(hexsha: str) -> str:
    return hexsha[:ABBREVIATED_HEXSHA_LENGTH]
