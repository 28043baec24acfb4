#!/usr/bin/env python3
from __future__ import annotations

"""Error kinds raised by the toggle pipeline.

Each kind carries the process exit code it maps to; only cli.main catches
them and turns them into a return code.
"""


class SymswapError(Exception):
    exit_code = 2


class ArgParseError(SymswapError):
    exit_code = 1


class ConfigError(SymswapError):
    exit_code = 2


class ResolutionError(SymswapError):
    exit_code = 3


class ToggleError(SymswapError):
    exit_code = 3
