# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


'''
Configuration for the release-range CLI.

Configuration is read from (in ascending order of precedence):

- built-in defaults
- `~/.release-range.yaml`
- `<repository-root>/.release-range.yaml` (alternatively, an explicitly passed file replaces both
  of the aforementioned files)
- environment variables (`RELEASE_RANGE_*`)
- command line arguments (passed as overrides)
'''

import copy
import dataclasses
import enum
import logging
import os

import dacite
import deepmerge
import yaml

logger = logging.getLogger(__name__)

CFG_FILE_NAME = '.release-range.yaml'
ENV_PREFIX = 'RELEASE_RANGE_'


class OutputFormat(enum.StrEnum):
    PRETTY = 'pretty'
    PLAIN = 'plain'
    JSON = 'json'


@dataclasses.dataclass
class RemoteCfg:
    name: str = 'origin'
    query_advertised_head: bool = False # requires (potentially) network-access


@dataclasses.dataclass
class TagsCfg:
    pattern: str = 'refs/tags/*'
    ignore_prerelease_versions: bool = False


@dataclasses.dataclass
class OutputCfg:
    format: OutputFormat = OutputFormat.PRETTY
    max_commits: int | None = None # fail if more commits than this were found


@dataclasses.dataclass
class RangeCfg:
    remote: RemoteCfg = dataclasses.field(default_factory=RemoteCfg)
    tags: TagsCfg = dataclasses.field(default_factory=TagsCfg)
    output: OutputCfg = dataclasses.field(default_factory=OutputCfg)
    debug: bool = False


_merger = deepmerge.Merger(
    [(dict, ['merge']), (list, ['override'])],
    ['override'],
    ['override'],
)


def _parse_bool(value: str) -> bool:
    if (normalised := value.strip().lower()) in ('1', 'true', 'yes', 'on'):
        return True
    if normalised in ('0', 'false', 'no', 'off', ''):
        return False
    raise ValueError(f'not a boolean: {value=}')


def _parse_yaml_file(path: str) -> dict:
    with open(path) as f:
        parsed = yaml.load(f, Loader=yaml.SafeLoader)

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f'{path=} must contain a mapping (found: {type(parsed).__name__})')

    return parsed


def _config_from_files(
    cfg_file: str | None=None,
    repo_root: str | None=None,
) -> list[dict]:
    if cfg_file:
        if not os.path.isfile(cfg_file):
            raise ValueError(f'not an existing file: {cfg_file}')
        return [_parse_yaml_file(cfg_file)]

    candidates = [os.path.join(os.path.expanduser('~'), CFG_FILE_NAME)]
    if repo_root:
        candidates.append(os.path.join(repo_root, CFG_FILE_NAME))

    raw_cfgs = []
    for path in candidates:
        if not os.path.isfile(path):
            continue
        logger.debug(f'reading configuration from {path=}')
        raw_cfgs.append(_parse_yaml_file(path))

    return raw_cfgs


def _config_from_env(env=None) -> dict:
    if env is None:
        env = os.environ

    raw = {}

    def set_value(section: str | None, key: str, value):
        if section:
            raw.setdefault(section, {})[key] = value
        else:
            raw[key] = value

    if (remote := env.get(f'{ENV_PREFIX}REMOTE')):
        set_value('remote', 'name', remote)
    if (query_remote := env.get(f'{ENV_PREFIX}QUERY_REMOTE')) is not None:
        set_value('remote', 'query_advertised_head', _parse_bool(query_remote))
    if (tag_pattern := env.get(f'{ENV_PREFIX}TAG_PATTERN')):
        set_value('tags', 'pattern', tag_pattern)
    if (max_commits := env.get(f'{ENV_PREFIX}MAX_COMMITS')):
        try:
            set_value('output', 'max_commits', int(max_commits))
        except ValueError:
            raise ValueError(f'{ENV_PREFIX}MAX_COMMITS must be an integer: {max_commits=}')
    if (output_format := env.get(f'{ENV_PREFIX}FORMAT')):
        set_value('output', 'format', output_format)
    if (debug := env.get(f'{ENV_PREFIX}DEBUG')) is not None:
        set_value(None, 'debug', _parse_bool(debug))

    return raw


def from_dict(raw: dict) -> RangeCfg:
    try:
        return dacite.from_dict(
            data_class=RangeCfg,
            data=raw,
            config=dacite.Config(
                cast=[enum.Enum],
                strict=True,
            ),
        )
    except (dacite.DaciteError, ValueError) as e:
        raise ValueError(f'invalid configuration: {e}') from e


def load_config(
    cfg_file: str | None=None,
    repo_root: str | None=None,
    overrides: dict | None=None,
    env=None,
) -> RangeCfg:
    '''
    returns the effective configuration, merged from all sources (see module docstring).

    `overrides` is expected to have the same structure as config files, and takes precedence
    over any other source (intended to pass command line arguments).

    raises ValueError if any source contains invalid configuration
    '''
    merged = dataclasses.asdict(RangeCfg())

    layers = [
        *_config_from_files(cfg_file=cfg_file, repo_root=repo_root),
        _config_from_env(env=env),
        overrides or {},
    ]

    for layer in layers:
        merged = _merger.merge(merged, copy.deepcopy(layer))

    return from_dict(merged)
