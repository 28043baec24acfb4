#!/usr/bin/env python3
import os
import re
from typing import MutableMapping, Optional, Tuple

_INLINE_COMMENT = re.compile(r'\s+#')


def _parse_value(raw: str) -> str:
    val = raw.strip()
    quote = val[:1]
    if quote in ('"', "'") and val.find(quote, 1) > 0:
        return val[1:val.index(quote, 1)]
    # Only a '#' preceded by whitespace starts a comment; /srv/app#blue is a value
    return _INLINE_COMMENT.split(val, maxsplit=1)[0].strip()


def load_dotenv(path: str, environ: Optional[MutableMapping[str, str]] = None, *, override: bool = False) -> Tuple[int, str]:
    """Simple .env loader: KEY=VALUE lines → environ. Returns (count, path).

    Keys already present in environ are kept unless override is set, so the
    real process environment wins over the file.
    """
    target = os.environ if environ is None else environ
    count = 0
    try:
        with open(path, 'r') as f:
            for raw in f:
                line = raw.strip()
                if not line or line.startswith('#'):
                    continue
                if line.startswith('export '):
                    line = line[len('export '):].lstrip()
                if '=' not in line:
                    continue
                key, val = line.split('=', 1)
                key = key.strip()
                if not key:
                    continue
                if key in target and not override:
                    continue
                target[key] = _parse_value(val)
                count += 1
    except FileNotFoundError:
        return 0, path
    return count, path
