import csv
import logging
import mmap
import os

import numpy as np
import pandas as pd

from .errors import RecordStoreError

logger = logging.getLogger(__name__)


def default_index_path(db_path):
    return f"{db_path}.index"


def read_index(index_path):
    """Read a ``key<TAB>offset<TAB>length`` index into numpy arrays."""
    if not os.path.exists(index_path):
        raise FileNotFoundError(f"Record store index not found: "
                                f"{index_path}")
    try:
        df = pd.read_csv(index_path, sep="\t", header=None,
                         names=["key", "offset", "length"],
                         dtype={"key": str}, usecols=[0, 1, 2],
                         keep_default_na=False, quoting=csv.QUOTE_NONE)
    except pd.errors.EmptyDataError:
        return (np.empty(0, dtype=object), np.empty(0, dtype=np.int64),
                np.empty(0, dtype=np.int64))
    except ValueError as e:
        raise RecordStoreError(f"Malformed record store index "
                               f"{index_path}: {e}") from e
    try:
        offsets = pd.to_numeric(df["offset"]).to_numpy(dtype=np.int64)
        lengths = pd.to_numeric(df["length"]).to_numpy(dtype=np.int64)
    except (ValueError, TypeError) as e:
        raise RecordStoreError(f"Malformed record store index "
                               f"{index_path}: {e}") from e
    if (offsets < 0).any() or (lengths < 0).any():
        raise RecordStoreError(f"Negative offset or length in record store "
                               f"index {index_path}")
    return df["key"].to_numpy(dtype=object), offsets, lengths


class RecordStore:
    """Read-only, randomly addressable records of an MMseqs2-style database.

    Records live back to back in the data file, each terminated by a NUL
    byte; the index maps record number to key, offset and length. The data
    file is memory mapped, so any number of threads may read concurrently
    as long as nobody closes the store until they are done.
    """

    def __init__(self, data_path, index_path=None):
        self.data_path = data_path
        self.index_path = index_path or default_index_path(data_path)
        self._keys, self._offsets, self._lengths = read_index(self.index_path)
        self._file = open(data_path, "rb")
        try:
            self._data_size = os.fstat(self._file.fileno()).st_size
            if self._data_size > 0:
                self._data = mmap.mmap(self._file.fileno(), 0,
                                       access=mmap.ACCESS_READ)
            else:
                self._data = b""
        except BaseException:
            self._file.close()
            raise
        logger.info(f"Opened record store {data_path} with "
                    f"{len(self._keys):,} records")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __len__(self):
        return self.size()

    def size(self):
        return len(self._keys)

    def _check(self, i):
        if not 0 <= i < len(self._keys):
            raise RecordStoreError(f"Record {i} out of range for store "
                                   f"{self.data_path} ({len(self._keys)} "
                                   f"records)")

    def key_at(self, i):
        self._check(i)
        return self._keys[i]

    def data_at(self, i):
        self._check(i)
        start = int(self._offsets[i])
        end = start + int(self._lengths[i])
        if end > self._data_size:
            raise RecordStoreError(f"Record {i} ({self._keys[i]}) extends "
                                   f"past the end of {self.data_path}")
        raw = self._data[start:end]
        if raw.endswith(b"\0"):
            raw = raw[:-1]
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RecordStoreError(f"Record {i} ({self._keys[i]}) is not "
                                   f"valid UTF-8: {e}") from e

    def close(self):
        if isinstance(self._data, mmap.mmap):
            self._data.close()
        self._data = b""
        self._file.close()

