#! /usr/bin/env python3
# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


'''
exposes a (read-only) CLI printing the commits on the default branch since the latest semver tag
'''

import argparse
import json
import logging
import os
import sys

import git
import termcolor

import gitutil
import release_range.config as rc
import release_range.errors as rre
import release_range.log
import release_range.model as rm
import release_range.resolve

logger = logging.getLogger('release-range')


def configure_parser(parser: argparse.ArgumentParser):
    # defaults are left to configuration; only explicitly passed arguments act as overrides
    parser.add_argument(
        'repo_path',
        nargs='?',
        default=os.getcwd(),
        help='path to the git-repository (defaults to current working directory)',
    )
    parser.add_argument(
        '--remote',
        default=None,
        help='name of the remote whose default branch to compare against (default: origin)',
    )
    parser.add_argument(
        '--query-remote',
        action='store_true',
        default=None,
        help='ask the remote for its default branch if not known locally (requires network)',
    )
    parser.add_argument(
        '--tag-pattern',
        default=None,
        help='glob-pattern for tag-references to consider (default: refs/tags/*)',
    )
    parser.add_argument(
        '--ignore-prereleases',
        action='store_true',
        default=None,
        help='do not consider tags w/ prerelease-versions',
    )
    parser.add_argument(
        '--max-commits',
        type=int,
        default=None,
        help='fail if more than the given amount of commits were found',
    )
    parser.add_argument(
        '--format', '-o',
        type=rc.OutputFormat,
        choices=tuple(rc.OutputFormat),
        default=None,
        dest='output_format',
    )
    parser.add_argument(
        '--config', '-c',
        default=None,
        dest='cfg_file',
        help=f'config file to use instead of ~/{rc.CFG_FILE_NAME} and <repo>/{rc.CFG_FILE_NAME}',
    )
    parser.add_argument(
        '--debug', '-d',
        action='store_true',
        default=None,
    )


def cfg_overrides(parsed: argparse.Namespace) -> dict:
    overrides = {
        'remote': {
            'name': parsed.remote,
            'query_advertised_head': parsed.query_remote,
        },
        'tags': {
            'pattern': parsed.tag_pattern,
            'ignore_prerelease_versions': parsed.ignore_prereleases,
        },
        'output': {
            'format': parsed.output_format,
            'max_commits': parsed.max_commits,
        },
        'debug': parsed.debug,
    }

    def strip_none(value):
        if not isinstance(value, dict):
            return value
        return {
            k: strip_none(v) for k, v in value.items()
            if v is not None
        }

    return strip_none(overrides)


def as_dict(
    result: rm.RangeResult,
    org_and_repo: tuple[str, str] | None=None,
) -> dict:
    raw = {
        'tag': result.tag_name,
        'version': str(result.version),
        'base': {
            'name': result.base.name,
            'sha': result.base.hexsha,
            'strategy': str(result.base.strategy),
        },
        'merge_base': result.merge_base,
        'commits': [
            {
                'sha': commit.hexsha,
                'short_sha': commit.abbreviated_hexsha,
                'summary': commit.short_message,
                'message': commit.message,
            } for commit in result.commits
        ],
    }
    if org_and_repo:
        raw['organization'], raw['repository'] = org_and_repo

    return raw


def render_text(
    result: rm.RangeResult,
    org_and_repo: tuple[str, str] | None=None,
    colored: bool=False,
) -> str:
    def colour(text: str, color: str):
        if not colored:
            return text
        return termcolor.colored(text, color)

    divider = colour('│', 'magenta')
    lines = []

    if org_and_repo:
        org, repo = org_and_repo
        lines.append(f'{divider} Organization: {org}')
        lines.append(f'{divider} Repository:   {repo}')

    lines.append(f'{divider} Latest tag:   {colour(result.tag_name, "cyan")}')
    lines.append(f'{divider} Compared to:  {result.base.name} ({result.base.strategy})')
    lines.append(f'{divider} Commits:      {len(result.commits)}')

    if result.commits:
        lines.append('')
    for commit in result.commits:
        lines.append(f'{colour(commit.abbreviated_hexsha, "yellow")} {commit.short_message}')

    return '\n'.join(lines)


def _org_and_repo(
    git_helper: gitutil.GitHelper,
    remote_name: str,
) -> tuple[str, str] | None:
    try:
        return git_helper.github_org_and_repo(remote_name=remote_name)
    except ValueError as ve:
        logger.debug(f'will not report organization/repository: {ve}')
        return None


def run(parsed: argparse.Namespace, out=None) -> int:
    if not out:
        out = sys.stdout

    try:
        git_helper = gitutil.GitHelper(repo=parsed.repo_path)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
        logger.error(f'not a git-repository: {parsed.repo_path} ({e!r})')
        return 1

    try:
        cfg = rc.load_config(
            cfg_file=parsed.cfg_file,
            repo_root=git_helper.repo.working_tree_dir,
            overrides=cfg_overrides(parsed),
        )
    except ValueError as ve:
        logger.error(f'could not load configuration: {ve}')
        return 1

    if cfg.debug:
        logging.root.setLevel(logging.DEBUG)
        for handler in logging.root.handlers:
            handler.setLevel(logging.DEBUG)

    if cfg.remote.query_advertised_head:
        advertised_head_lookup = gitutil.ls_remote_default_branch
    else:
        advertised_head_lookup = None

    try:
        result = release_range.resolve.get_commits_after_latest_tag(
            git_helper=git_helper,
            remote_name=cfg.remote.name,
            advertised_head_lookup=advertised_head_lookup,
            tag_pattern=cfg.tags.pattern,
            ignore_prerelease_versions=cfg.tags.ignore_prerelease_versions,
        )
    except rre.RangeResolutionError as e:
        logger.error(f'could not get commits after latest tag: {e}')
        return 1

    org_and_repo = _org_and_repo(git_helper, remote_name=cfg.remote.name)

    if cfg.output.format is rc.OutputFormat.JSON:
        out.write(json.dumps(as_dict(result, org_and_repo=org_and_repo), indent=2) + '\n')
    else:
        colored = cfg.output.format is rc.OutputFormat.PRETTY and out.isatty()
        out.write(render_text(result, org_and_repo=org_and_repo, colored=colored) + '\n')
    out.flush()

    if (max_commits := cfg.output.max_commits) is not None and len(result.commits) > max_commits:
        logger.error(
            f'found {len(result.commits)} commits since {result.tag_name}, which exceeds '
            f'{max_commits=}'
        )
        return 1

    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='list commits on the default branch since the latest semver tag',
    )
    configure_parser(parser)
    parsed = parser.parse_args(argv)

    release_range.log.configure_default_logging(
        stdout_level=logging.DEBUG if parsed.debug else logging.INFO,
    )

    sys.exit(run(parsed))


if __name__ == '__main__':
    main()
