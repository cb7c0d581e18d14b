"""Schema loading utility."""

import json
from functools import lru_cache
from pathlib import Path


def load_schema(path: Path) -> dict:
    """Load a JSON Schema file and return as dict."""
    with open(path) as f:
        return json.load(f)


@lru_cache(maxsize=None)
def package_schema(name: str) -> dict:
    """Load a schema shipped next to this module's package, cached."""
    return load_schema(Path(__file__).resolve().parent.parent / name)
