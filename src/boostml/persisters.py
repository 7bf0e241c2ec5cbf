"""
Model persistence on the local filesystem.

Models are pickled to a user-specified path. Saving over an existing file
first moves it aside as a timestamped backup, keeping a bounded history of
previous versions that can be loaded back by recency.
"""

import glob
import logging
import os
import pickle
import time
from typing import List

from .exceptions import InvalidArgumentError, PersistenceError
from .learners.base import Persistable

logger = logging.getLogger(__name__)


class Filesystem:
    """
    Persister that pickles models to a file.

    Parameters
    ----------
    path : str
        Path of the model file. Its folder must exist and be writable.
    history : int, default=2
        Number of backups of previously saved models to keep.
    """

    BACKUP_EXT = ".old"

    def __init__(self, path: str, history: int = 2):
        folder = os.path.dirname(os.path.abspath(path))

        if not os.path.isdir(folder) or not os.access(folder, os.W_OK):
            raise InvalidArgumentError(
                f"Folder {folder} does not exist or is not writable, check path and permissions."
            )

        if history < 0:
            raise InvalidArgumentError(
                f"The number of backups to keep cannot be less than 0, {history} given."
            )

        self.path = path
        self.history = history

    def _backups(self) -> List[str]:
        """Backup files, most recent first."""
        backups = glob.glob(glob.escape(self.path) + ".*" + self.BACKUP_EXT)

        def timestamp(filename: str) -> int:
            stamp = filename[len(self.path) + 1:-len(self.BACKUP_EXT)]
            return int(stamp) if stamp.isdigit() else 0

        return sorted(backups, key=timestamp, reverse=True)

    def save(self, model: Persistable) -> None:
        """Save a model, rotating the current file into the backup history."""
        if not isinstance(model, Persistable):
            raise InvalidArgumentError(
                f"Model must be persistable, {type(model).__name__} given."
            )

        if self.history > 0 and os.path.isfile(self.path):
            backup = f"{self.path}.{time.time_ns()}{self.BACKUP_EXT}"

            try:
                os.replace(self.path, backup)
            except OSError as e:
                raise PersistenceError(
                    "Failed to save backup, check path and permissions."
                ) from e

            for old in self._backups()[self.history:]:
                os.remove(old)

        try:
            with open(self.path, "wb") as f:
                pickle.dump(model, f)
        except OSError as e:
            raise PersistenceError(
                "Failed to save model to the filesystem, check path and permissions."
            ) from e

        logger.info(f"Model saved to {self.path}")

    def load(self, version: int = 0) -> Persistable:
        """
        Load a model by version, 0 being the last one saved and n the n-th
        most recent backup.
        """
        if version < 0:
            raise InvalidArgumentError(
                f"Version cannot be less than 0, {version} given."
            )

        if version > self.history:
            raise InvalidArgumentError(
                f"The maximum number of backups is {self.history}, {version} given."
            )

        if version == 0:
            if not os.path.isfile(self.path):
                raise PersistenceError(
                    f"File {os.path.basename(self.path)} does not exist or is a folder, "
                    "check the path and permissions."
                )
            path = self.path
        else:
            backups = self._backups()

            if version > len(backups):
                raise PersistenceError(
                    f"Could not load version {version}, only {len(backups)} backups in storage."
                )

            path = backups[version - 1]

        try:
            with open(path, "rb") as f:
                model = pickle.load(f)
        except (OSError, pickle.UnpicklingError, EOFError) as e:
            raise PersistenceError(f"Model could not be reconstituted from {path}.") from e

        if not isinstance(model, Persistable):
            raise PersistenceError("Model could not be reconstituted.")

        logger.info(f"Model loaded from {path}")

        return model

    def flush(self) -> None:
        """Delete all backups from storage."""
        for filename in self._backups():
            os.remove(filename)
