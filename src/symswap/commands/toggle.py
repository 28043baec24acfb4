#!/usr/bin/env python3
from __future__ import annotations

"""Toggle command.

Flips directory/target between two candidate entries of the same directory.

Inputs
- settings: resolved Settings (directory, target, sources or possible values)
- say: callable receiving human-readable progress lines (default: print)

Outputs
- Dict with {result, target, from, to, candidates}, suitable for the YAML summary.

Failure policy
- Raise ConfigError/ResolutionError/ToggleError; nothing on disk changes before
  the final replace, so there is no partial state to clean up.
"""

import logging
import os
from typing import Callable, NamedTuple, Optional

from ..config import Settings
from ..errors import ConfigError, ResolutionError, ToggleError
from ..linkutil import inspect_link, path_exists, replace_symlink

log = logging.getLogger("symswap.toggle")


class Candidates(NamedTuple):
    first: Optional[str]
    second: Optional[str]


def resolve_candidates(settings: Settings, say: Callable[[str], None] = print) -> Candidates:
    if not settings.possible_values:
        if not settings.source1 or not settings.source2:
            raise ConfigError('Set $POSSIBLE_VALUES or pass multiple arguments with "-p example_source1 -p example_source2"')
        return Candidates(settings.source1, settings.source2)

    if settings.source1 or settings.source2:
        raise ConfigError(
            'Cannot combine auto-detect mode ($POSSIBLE_VALUES or -p) with explicit candidates '
            '(--source1, --source2 or $SOURCE1, $SOURCE2)!'
        )

    first: Optional[str] = None
    second: Optional[str] = None
    for name in settings.possible_values:
        if not path_exists(settings.directory, name):
            log.debug("possible value %s not found in %s", name, settings.directory)
            continue
        if first is None:
            say(f"Found {name} in {settings.directory}. Using it as source1")
            first = name
        elif second is None:
            say(f"Found {name} in {settings.directory}. Using it as source2")
            second = name
        else:
            raise ResolutionError(
                'Found more than two possible sources. Use --source1 <file1> --source2 <file2> '
                'to explicitly set the sources for the symlink!'
            )
    if second is None:
        log.warning("only %d of 2 possible sources found in %s", 0 if first is None else 1, settings.directory)
    return Candidates(first, second)


def decide(current: str, candidates: Candidates) -> str:
    """Return the candidate name the link should point at next."""
    if candidates.first is not None and current == candidates.first:
        if candidates.second is None:
            raise ToggleError('No match between existing symlink and given source options')
        return candidates.second
    if candidates.second is not None and current == candidates.second:
        return candidates.first  # type: ignore[return-value]
    raise ToggleError('No match between existing symlink and given source options')


def run_toggle(settings: Settings, say: Callable[[str], None] = print) -> dict:
    candidates = resolve_candidates(settings, say)
    state = inspect_link(settings.link_path)
    say(f"Current target of {settings.target} is {state.current}")

    nxt = decide(state.current, candidates)
    new_target = os.path.join(os.path.abspath(settings.directory), nxt)
    replace_symlink(settings.link_path, new_target)
    say(f"Set {settings.target} symlink to {new_target}")
    return {
        "result": "toggled",
        "target": settings.link_path,
        "from": state.raw_target,
        "to": new_target,
        "candidates": [candidates.first, candidates.second],
    }
