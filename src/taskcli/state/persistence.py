"""JSON file helpers for the task store."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


class Persistence:
    """Reads and replaces whole JSON documents on disk."""

    @staticmethod
    def read_json(file_path: Path) -> Any:
        """Parse JSON from file.

        Raises OSError when the file cannot be read and ValueError
        (json.JSONDecodeError) when its content is not valid JSON.
        """
        with file_path.open("r", encoding="utf-8") as fp:
            return json.load(fp)

    @staticmethod
    def write_json(file_path: Path, data: Any) -> None:
        """Replace file_path with data via a sibling temp file.

        Readers see either the previous document or the new one, never a
        half-written array.
        """
        Persistence.ensure_dir(file_path.parent)
        fd, name = tempfile.mkstemp(dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp")
        tmp_path = Path(name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fp:
                json.dump(data, fp, indent=2)
                fp.write("\n")
                fp.flush()
                os.fsync(fp.fileno())
            os.replace(tmp_path, file_path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    @staticmethod
    def ensure_dir(dir_path: Path) -> None:
        dir_path.mkdir(parents=True, exist_ok=True)
