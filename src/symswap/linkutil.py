#!/usr/bin/env python3
from __future__ import annotations

import logging
import os
import uuid
from typing import NamedTuple

from .errors import ConfigError, ToggleError

log = logging.getLogger("symswap.linkutil")


class LinkState(NamedTuple):
    path: str
    raw_target: str
    current: str


def path_exists(directory: str, name: str) -> bool:
    # Existence only, any file type (a dangling symlink does not count, like `test -e`)
    return os.path.exists(os.path.join(directory, name))


def inspect_link(path: str) -> LinkState:
    """Read the symlink at path and return its literal target and basename.

    The referent must exist and have a non-zero size. Comparison downstream is
    against the last segment of the stored link text, not the canonical path.
    """
    if not os.path.lexists(path):
        raise ConfigError(f'{path} does not exist. Please create it before running this command!')
    if not os.path.islink(path):
        raise ConfigError(f'{path} is not a symbolic link!')
    raw = os.readlink(path)
    try:
        size = os.path.getsize(path)
    except OSError:
        raise ConfigError(f'{path} points to {raw}, which does not exist. Please create it before running this command!')
    if size == 0:
        raise ConfigError(f'{path} points to {raw}, which has a size of zero!')
    current = os.path.basename(raw.rstrip('/'))
    log.debug("inspect %s -> %s (current=%s)", path, raw, current)
    return LinkState(path=path, raw_target=raw, current=current)


def replace_symlink(link_path: str, target: str) -> None:
    """Atomically point link_path at target.

    A temporary link is created next to link_path and renamed over it, so there
    is no moment without a link at link_path.
    """
    parent = os.path.dirname(link_path) or '.'
    tmp = os.path.join(parent, f".{os.path.basename(link_path)}.{uuid.uuid4().hex[:12]}.tmp")
    try:
        os.symlink(target, tmp)
    except OSError as e:
        raise ToggleError(f'{link_path} symlink could not be set to {target}: {e.strerror or e}')
    try:
        os.replace(tmp, link_path)
    except OSError as e:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise ToggleError(f'{link_path} symlink could not be set to {target}: {e.strerror or e}')
    log.info("replaced %s -> %s", link_path, target)
