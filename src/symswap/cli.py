#!/usr/bin/env python3
import argparse
import logging
import os
import sys
import time
from datetime import datetime
from typing import List, Optional

import yaml

from .env import load_dotenv
from .config import ENV_CONFIG_FILE, load_config, resolve_settings
from .errors import ArgParseError, SymswapError
from .commands.toggle import run_toggle
from .logsetup import setup_logging


USAGE_NOTES = """\
If -p is used, the possible sources are detected automatically; if more than two are found, the toggle aborts.
If --source1 and --source2 are used, the given sources are used for the symlink.
If -p and --source1 or --source2 are used, the toggle aborts.
Positional arguments are not accepted; every value must follow its option.

Possible environment variables:
   $CONFIG_PATH                Path to the target directory
   $POSSIBLE_VALUES            Possible sources for the symlink, located in $CONFIG_PATH. Use space as delimiter.
   $TARGET                     Name of the symlink target, located in $CONFIG_PATH
   $SOURCE1                    Name of the first source for the symlink, located in $CONFIG_PATH
   $SOURCE2                    Name of the second source for the symlink, located in $CONFIG_PATH
   $SYMSWAP_CONFIG             Path to a YAML config file (same keys as the flags)

Commandline arguments take precedence over environment variables, which take precedence over the config file.

Return codes:
   0                            Toggle finished successfully
   1                            Error while parsing arguments
   2                            Error in configuration or environment
   3                            Error while setting symlink
"""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise ArgParseError(message)


def _stamp() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S %z")


def _fmt_duration(seconds: float) -> str:
    total = int(seconds)
    mins, secs = divmod(total, 60)
    hours, mins = divmod(mins, 60)
    return f"{hours}h{mins}m{secs}s" if hours else f"{mins}m{secs}s"


def _emit(request: dict, run: dict, start_ts: float) -> None:
    """Print a uniform YAML envelope with request/run/runtime (runtime last)."""
    env = {}
    env["request"] = request
    env["run"] = run
    env["runtime"] = _fmt_duration(time.time() - start_ts)
    print(yaml.safe_dump(env, sort_keys=False, default_flow_style=False))


def _abort(err: SymswapError) -> int:
    print("---------", file=sys.stderr)
    print(str(err), file=sys.stderr)
    print("---------", file=sys.stderr)
    print("")
    print("Toggle aborted at:")
    print(_stamp())
    print("")
    return err.exit_code


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(
        prog="symswap",
        description="Toggle a symlink between two sources located in the same directory",
        epilog=USAGE_NOTES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    p.add_argument('-d', '--dir', dest='directory', metavar='<path>', help='Path to the target directory')
    p.add_argument('-p', '--possible-value', dest='possible_values', action='append', metavar='<name>',
                   help='Possible source for the symlink, located in --dir; can be used multiple times')
    p.add_argument('-t', '--target', metavar='<name>', help='Name of the symlink target, located in --dir')
    p.add_argument('--source1', metavar='<name>', help='Name of the first source for the symlink, located in --dir')
    p.add_argument('--source2', metavar='<name>', help='Name of the second source for the symlink, located in --dir')
    p.add_argument('-c', '--config', metavar='<path>', help=f'Path to YAML config (default: env {ENV_CONFIG_FILE})')
    p.add_argument('--env', default=os.path.join(os.getcwd(), '.env'), metavar='<path>', help='Path to .env file (default: ./.env)')
    p.add_argument('--summary', action='store_true', help='Print a YAML summary after the toggle')
    p.add_argument('-h', '--help', action='store_true', help='Display this help message')
    return p


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args_list = sys.argv[1:] if argv is None else list(argv)
    try:
        args = parse_args(args_list)
    except ArgParseError as e:
        print(f"Error while parsing arguments: {e}", file=sys.stderr)
        print("Terminating...", file=sys.stderr)
        return e.exit_code
    if args.help:
        build_parser().print_help()
        return 1

    start_ts = time.time()
    # Load .env silently; real environment variables win over it
    _loaded, env_path = load_dotenv(args.env)
    logger = logging.getLogger("symswap")

    print("")
    print("Toggle started at:")
    print(_stamp())
    print("")

    cfg_path = args.config or os.environ.get(ENV_CONFIG_FILE)
    request = {"action": "toggle", "args": args_list, "env_file": env_path, "config": cfg_path}
    try:
        setup_logging()
        logger.info("symswap started: args=%s env_file=%s loaded=%d", args_list, env_path, _loaded)
        file_cfg = load_config(cfg_path) if cfg_path else None
        settings = resolve_settings(
            directory=args.directory,
            target=args.target,
            source1=args.source1,
            source2=args.source2,
            possible_values=args.possible_values,
            file_cfg=file_cfg,
        )
        request["settings"] = settings.as_dict()
        logger.debug("settings: %s", settings)
        run = run_toggle(settings)
    except SymswapError as e:
        logger.error("toggle failed (exit %d): %s", e.exit_code, e)
        rc = _abort(e)
        if args.summary:
            _emit(request, {"result": "error", "error": str(e), "exit_code": rc}, start_ts)
        return rc

    logger.info("toggle done: %s -> %s", run["from"], run["to"])
    print("")
    print("Toggle finished at:")
    print(_stamp())
    print("")
    if args.summary:
        _emit(request, run, start_ts)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
