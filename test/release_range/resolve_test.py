import pytest

import release_range.errors as rre
import release_range.model as rm
import release_range.resolve as rr


def test_get_commits_after_latest_tag(git_repo, git_helper, commit):
    c1 = commit('first commit')
    c2 = commit('second commit')
    c3 = commit('third commit\n\nwith a longer description')

    git_repo.create_tag('1.0.0', ref=c1)
    git_repo.create_tag('1.1.0', ref=c2)

    result = rr.get_commits_after_latest_tag(git_helper=git_helper)

    assert result.tag_name == '1.1.0'
    assert str(result.version) == '1.1.0'
    assert result.merge_base == c2.hexsha
    assert result.base.strategy is rm.BaseStrategy.CURRENT_HEAD
    assert result.base.hexsha == c3.hexsha

    assert [c.hexsha for c in result.commits] == [c3.hexsha]
    assert result.commits[0].short_message == 'third commit'

    # read-only; repeated calls yield equal results
    assert rr.get_commits_after_latest_tag(git_helper=git_helper) == result


def test_no_commits_since_tag(git_repo, git_helper, commit):
    c1 = commit('first commit')
    git_repo.create_tag('v0.1.0', ref=c1, message='annotated')

    result = rr.get_commits_after_latest_tag(git_helper=git_helper)

    assert result.tag_name == 'v0.1.0'
    assert result.commits == ()


def test_no_semver_tags(git_repo, git_helper, commit):
    c1 = commit('first commit')
    git_repo.create_tag('latest', ref=c1)

    with pytest.raises(rre.NoMatchingTagsError) as exc_info:
        rr.get_commits_after_latest_tag(git_helper=git_helper)

    assert 'no semver tags found' in str(exc_info.value)


def test_tag_on_release_branch(git_repo, git_helper, commit):
    commit('first commit')
    fork_point = commit('fork point')
    release_commit = commit('release fix', parent_commits=[fork_point], head=False)
    c3 = commit('third commit')

    git_repo.create_tag('1.0.0', ref=fork_point)
    git_repo.create_tag('1.0.1', ref=release_commit)

    result = rr.get_commits_after_latest_tag(git_helper=git_helper)

    assert result.tag_name == '1.0.1'
    assert result.merge_base == fork_point.hexsha
    assert [c.hexsha for c in result.commits] == [c3.hexsha]


def test_remote_default_branch_is_used(git_repo, git_helper, commit):
    c1 = commit('first commit')
    c2 = commit('second commit')
    git_repo.create_tag('1.0.0', ref=c1)

    feature_commit = commit('feature commit') # checked-out branch is ahead of default branch

    git_repo.create_remote('origin', 'https://github.com/my-org/my-repo.git')
    git_repo.git.update_ref('refs/remotes/origin/trunk', c2.hexsha)

    def lookup(remote):
        return 'refs/heads/trunk'

    result = rr.get_commits_after_latest_tag(
        git_helper=git_helper,
        advertised_head_lookup=lookup,
    )
    assert result.base.strategy is rm.BaseStrategy.REMOTE_ADVERTISED
    assert result.base.name == 'refs/remotes/origin/trunk'
    assert [c.hexsha for c in result.commits] == [c2.hexsha]

    git_repo.git.symbolic_ref('refs/remotes/origin/HEAD', 'refs/remotes/origin/trunk')
    result = rr.get_commits_after_latest_tag(git_helper=git_helper)
    assert result.base.strategy is rm.BaseStrategy.REMOTE_HEAD
    assert feature_commit.hexsha not in [c.hexsha for c in result.commits]


def test_peel_to_commit(git_repo, commit):
    c1 = commit('first commit')
    lightweight = git_repo.create_tag('1.0.0', ref=c1)
    annotated = git_repo.create_tag('v1.0.0', ref=c1, message='annotated')

    assert rr.peel_to_commit(lightweight) == c1
    assert rr.peel_to_commit(annotated) == c1


def test_peel_error(git_repo, git_helper, commit):
    c1 = commit('first commit')
    git_repo.create_tag('1.0.0', ref=c1)
    tree_tag = git_repo.create_tag('2.0.0', ref=c1.tree)

    with pytest.raises(rre.PeelError) as exc_info:
        rr.peel_to_commit(tree_tag)
    assert exc_info.value.tag_name == '2.0.0'

    # latest tag cannot be peeled -> no fallback to an older tag
    with pytest.raises(rre.PeelError):
        rr.get_commits_after_latest_tag(git_helper=git_helper)


def test_empty_repository(git_helper):
    with pytest.raises(rre.NoMatchingTagsError):
        rr.get_commits_after_latest_tag(git_helper=git_helper)


def test_unresolvable_head(git_repo, git_helper, commit):
    c1 = commit('first commit')
    git_repo.create_tag('1.0.0', ref=c1)

    # point HEAD to an unborn branch
    git_repo.git.symbolic_ref('HEAD', 'refs/heads/unborn')

    with pytest.raises(rre.NoHeadError) as exc_info:
        rr.get_commits_after_latest_tag(git_helper=git_helper)

    assert 'could not resolve default branch' in str(exc_info.value)
