import itertools

import git
import pytest

import gitutil


@pytest.fixture
def git_repo(tmpdir):
    repo = git.Repo.init(tmpdir.join('repo'))

    # required for annotated tags
    with repo.config_writer() as cfg_writer:
        cfg_writer.set_value('user', 'name', 'Test User')
        cfg_writer.set_value('user', 'email', 'test@example.com')

    return repo


@pytest.fixture
def git_helper(git_repo):
    return gitutil.GitHelper(repo=git_repo)


@pytest.fixture
def commit(git_repo):
    '''
    returns a callable creating (empty) commits. Successive commits have strictly increasing
    commit-dates, so history-walk order is deterministic.
    '''
    timestamps = itertools.count(start=1700000000, step=60)
    actor = git.Actor('Test User', 'test@example.com')

    def create_commit(
        message: str,
        parent_commits=None,
        head: bool=True,
        repo: git.Repo=git_repo,
    ) -> git.Commit:
        date = f'{next(timestamps)} +0000'
        return repo.index.commit(
            message,
            parent_commits=parent_commits,
            head=head,
            author=actor,
            committer=actor,
            author_date=date,
            commit_date=date,
        )

    return create_commit
