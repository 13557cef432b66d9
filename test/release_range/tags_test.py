import pytest

import release_range.errors as rre
import release_range.tags as rt


def _latest(git_helper, **kwargs):
    return rt.select_latest_semver_tag(git_helper=git_helper, **kwargs)


def test_selects_greatest_version(git_repo, git_helper, commit):
    c1 = commit('first commit')
    c2 = commit('second commit')

    git_repo.create_tag('1.0.0', ref=c1)
    git_repo.create_tag('1.10.0', ref=c1) # not on latest commit
    git_repo.create_tag('1.9.0', ref=c2)

    latest = _latest(git_helper)
    assert latest.name == '1.10.0'
    assert str(latest.version) == '1.10.0'
    assert latest.tag.path == 'refs/tags/1.10.0'


def test_ignores_non_semver_tags(git_repo, git_helper, commit):
    c1 = commit('first commit')
    for name in ('latest', 'alpha', 'release-9.0.0', '9.0', 'vv9.9.9', 'nightly/9.0.0'):
        git_repo.create_tag(name, ref=c1)

    with pytest.raises(rre.NoMatchingTagsError):
        _latest(git_helper)

    git_repo.create_tag('0.1.0', ref=c1)
    assert _latest(git_helper).name == '0.1.0'


def test_v_prefix_is_stripped(git_repo, git_helper, commit):
    c1 = commit('first commit')
    git_repo.create_tag('1.2.3', ref=c1)
    git_repo.create_tag('v1.3.0', ref=c1)

    latest = _latest(git_helper)
    assert latest.name == 'v1.3.0'
    assert str(latest.version) == '1.3.0'

    git_repo.create_tag('1.4.0', ref=c1)
    assert _latest(git_helper).name == '1.4.0'


def test_no_tags(git_helper, commit):
    commit('first commit')

    with pytest.raises(rre.NoMatchingTagsError) as exc_info:
        _latest(git_helper)

    assert 'no semver tags found' in str(exc_info.value)


def test_prerelease_ordering(git_repo, git_helper, commit):
    c1 = commit('first commit')
    git_repo.create_tag('2.0.0-rc.1', ref=c1)
    git_repo.create_tag('1.5.0', ref=c1)

    assert _latest(git_helper).name == '2.0.0-rc.1'
    assert _latest(git_helper, ignore_prerelease_versions=True).name == '1.5.0'

    git_repo.create_tag('2.0.0', ref=c1)
    assert _latest(git_helper).name == '2.0.0'


def test_equal_versions_tie_break(git_repo, git_helper, commit):
    c1 = commit('first commit')
    c2 = commit('second commit')

    # equal precedence; reference-path decides (lexicographically smallest wins)
    git_repo.create_tag('v1.0.0', ref=c2)
    git_repo.create_tag('1.0.0+build.2', ref=c2)
    git_repo.create_tag('1.0.0+build.1', ref=c1)

    latest = _latest(git_helper)
    assert latest.name == '1.0.0+build.1'

    # stable across repeated scans
    assert _latest(git_helper).tag.path == latest.tag.path


def test_annotated_and_lightweight_tags(git_repo, git_helper, commit):
    c1 = commit('first commit')
    git_repo.create_tag('1.0.0', ref=c1)
    git_repo.create_tag('v2.0.0', ref=c1, message='release 2.0.0')

    assert _latest(git_helper).name == 'v2.0.0'


def test_tag_pattern(git_repo, git_helper, commit):
    c1 = commit('first commit')
    git_repo.create_tag('v1.0.0', ref=c1)
    git_repo.create_tag('2.0.0', ref=c1)

    assert _latest(git_helper, pattern='refs/tags/v*').name == 'v1.0.0'

    with pytest.raises(rre.NoMatchingTagsError):
        _latest(git_helper, pattern='refs/tags/release/*')


def test_iter_tag_candidates(git_repo, git_helper, commit):
    c1 = commit('first commit')
    git_repo.create_tag('v1.0.0', ref=c1)
    git_repo.create_tag('latest', ref=c1)

    candidates = list(rt.iter_tag_candidates(git_helper=git_helper))
    assert [c.name for c in candidates] == ['v1.0.0']
