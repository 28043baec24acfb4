#!/usr/bin/env python3
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
import yaml

from .errors import ConfigError


# Environment fallbacks for each setting (flags take precedence)
ENV_DIR = 'CONFIG_PATH'
ENV_POSSIBLE = 'POSSIBLE_VALUES'
ENV_TARGET = 'TARGET'
ENV_SOURCE1 = 'SOURCE1'
ENV_SOURCE2 = 'SOURCE2'
ENV_CONFIG_FILE = 'SYMSWAP_CONFIG'


@dataclass(frozen=True)
class Settings:
    directory: str
    target: str
    source1: Optional[str] = None
    source2: Optional[str] = None
    possible_values: Tuple[str, ...] = ()

    @property
    def link_path(self) -> str:
        return os.path.join(self.directory, self.target)

    def as_dict(self) -> Dict[str, Any]:
        return {
            'dir': self.directory,
            'target': self.target,
            'source1': self.source1,
            'source2': self.source2,
            'possible_values': list(self.possible_values),
        }


def _split_values(raw: Any) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return raw.split()
    if isinstance(raw, (list, tuple)):
        return [str(v) for v in raw if v is not None and str(v) != '']
    return [str(raw)]


def _opt(value: Any) -> Optional[str]:
    # Empty strings count as unset, as in `[ -z "$X" ]`
    if value is None:
        return None
    s = str(value)
    return s if s else None


def load_config(path: str) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError(f'Config file "{path}" does not exist!')
    except yaml.YAMLError as e:
        raise ConfigError(f'Config file "{path}" is not valid YAML: {e}')
    if not isinstance(data, dict):
        raise ConfigError(f'Config file "{path}" must contain a mapping at the top level')
    # Normalize keys we care about
    cfg: Dict[str, Any] = {
        'dir': _opt(data.get('dir') or data.get('directory')),
        'target': _opt(data.get('target')),
        'source1': _opt(data.get('source1')),
        'source2': _opt(data.get('source2')),
        'possible_values': _split_values(data.get('possible_values')),
    }
    return cfg


def _strip_slash(path: str) -> str:
    if len(path) > 1 and path.endswith('/'):
        return path[:-1]
    return path


def resolve_settings(
    *,
    directory: Optional[str] = None,
    target: Optional[str] = None,
    source1: Optional[str] = None,
    source2: Optional[str] = None,
    possible_values: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    file_cfg: Optional[Mapping[str, Any]] = None,
) -> Settings:
    """Merge flags, environment and config file (in that precedence) into Settings.

    Raises ConfigError when the directory or the target name is still unset.
    Mode validation (auto-detect vs explicit sources) is left to the toggle
    command so both layers can be combined before it is checked.
    """
    env = os.environ if environ is None else environ
    fc = file_cfg or {}

    def _pick(flag: Optional[str], env_key: str, cfg_key: str) -> Optional[str]:
        return _opt(flag) or _opt(env.get(env_key)) or _opt(fc.get(cfg_key))

    d = _pick(directory, ENV_DIR, 'dir')
    if not d:
        raise ConfigError('Set $CONFIG_PATH or pass argument with --dir "/example/path/"!')
    t = _pick(target, ENV_TARGET, 'target')
    if not t:
        raise ConfigError('Set $TARGET or pass argument with --target "example.file"!')

    values = [v for v in (possible_values or []) if v]
    if not values:
        values = _split_values(env.get(ENV_POSSIBLE))
    if not values:
        values = _split_values(fc.get('possible_values'))

    return Settings(
        directory=_strip_slash(d),
        target=t,
        source1=_pick(source1, ENV_SOURCE1, 'source1'),
        source2=_pick(source2, ENV_SOURCE2, 'source2'),
        possible_values=tuple(values),
    )
