"""Whole-document JSON persistence.

Every write replaces the full document: the new content goes to a temporary
file in the same directory, which is then renamed over the target. Readers
see either the old or the new document, never a partial one.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def read_json(path: Path) -> Any:
    """Load a JSON document.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the content is not valid JSON
    """
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, data: Any) -> None:
    """Atomically replace `path` with `data` serialized as JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
