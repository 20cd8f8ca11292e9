# lambdas/error_monitor/noise_filter.py
import re
from pathlib import Path
from typing import Any, List, Optional, Pattern
from urllib.parse import urlsplit

import yaml

DEFAULT_IGNORE_PATTERNS = [
    r"^favicon\.[^/]+$",
    r"^robots\.txt$",
    r"^apple-[^/]+\.png$",
]


def load_ignore_patterns(path: Optional[Path] = None) -> List[Pattern]:
    """
    Loads and compiles the ignore patterns from the YAML file that ships next
    to this module, falling back to the built-in defaults if it is missing.
    """
    patterns_path = path or Path(__file__).parent / "ignore_patterns.yml"
    try:
        with open(patterns_path, 'r') as f:
            config = yaml.safe_load(f) or {}
        raw_patterns = config.get('patterns') or DEFAULT_IGNORE_PATTERNS
    except FileNotFoundError:
        print(f"ℹ️ Ignore pattern file '{patterns_path}' not found. Using built-in patterns.")
        raw_patterns = DEFAULT_IGNORE_PATTERNS
    return [re.compile(p) for p in raw_patterns]


# Compiled once per container
IGNORE_PATTERNS = tuple(load_ignore_patterns())


def _last_path_segment(url: str) -> str:
    path = urlsplit(url).path if "://" in url else url.split("?", 1)[0].split("#", 1)[0]
    return path.rstrip("/").rsplit("/", 1)[-1]


def should_ignore(url: Any, patterns=IGNORE_PATTERNS) -> bool:
    """Returns True if the request URL points at known junk like a favicon or robots.txt."""
    if not url or not isinstance(url, str):
        return False
    name = _last_path_segment(url)
    return any(pattern.search(name) for pattern in patterns)
