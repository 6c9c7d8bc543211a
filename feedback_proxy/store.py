"""
JSON file storage for the change ledger.

The whole ledger is kept in one file as an ordered array of change records
and rewritten in full on every save.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from feedback_proxy.exceptions import CorruptState, PersistenceFailure
from feedback_proxy.models import Change


logger = logging.getLogger(__name__)


class ChangeStore:
    """Reads and writes the ledger file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Optional[List[Change]]:
        """
        Read all changes from disk.

        Returns:
            The stored changes in order, or None if the file does not exist.

        Raises:
            CorruptState: If the file cannot be read or does not hold a list
                of valid change records.
        """
        if not self.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            raise CorruptState(f"Cannot parse {self.path}: {e}") from e

        if not isinstance(raw, list):
            raise CorruptState(
                f"Expected a list of changes in {self.path}, got {type(raw).__name__}"
            )

        try:
            return [Change.model_validate(record) for record in raw]
        except ValidationError as e:
            raise CorruptState(f"Invalid change record in {self.path}: {e}") from e

    def save(self, changes: List[Change]) -> None:
        """
        Rewrite the file with the given changes.

        The data is written to a temporary file beside the target and moved
        into place, so a crash mid-write leaves the previous file intact.

        Raises:
            PersistenceFailure: If the file cannot be written.
        """
        records = [change.to_record() for change in changes]
        tmp_name: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(records, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceFailure(f"Cannot write {self.path}: {e}") from e

        logger.info(f"Saved {len(records)} local changes to {self.path}")
