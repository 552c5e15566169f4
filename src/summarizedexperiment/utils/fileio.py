"""
Atomic manifest writes.

A bundle counts as complete once its manifest exists, so the manifest must
never be visible half-written. It is written to a temporary file in the
bundle directory and moved into place with ``os.replace()`` (atomic on POSIX).
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

import yaml


def atomic_write_yaml(path: str | os.PathLike, data: Any) -> None:
    """Serialize *data* to YAML and move it into *path* in one step.

    Serialization happens before the temporary file is created, so a
    non-serializable value leaves nothing behind on disk. Key order is
    preserved.

    Raises
    ------
    ValueError
        If *data* contains values ``yaml.safe_dump`` cannot represent.
    OSError
        If the directory is not writable (the temporary file is removed).
    """
    try:
        content = yaml.safe_dump(data, sort_keys=False)
    except yaml.YAMLError as e:
        raise ValueError(f"Value is not YAML-serializable: {e}") from e

    target = Path(path)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as tmp:
            tmp.write(content)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
