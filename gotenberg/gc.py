"""Removal of expired files and directories at the top level of a directory."""

from __future__ import annotations

import logging
import os
import shutil
import stat
from datetime import datetime
from typing import Iterable


class GarbageCollectError(OSError):
    """Raised when an expired entry cannot be removed."""


def _remove(path: str, info: os.stat_result) -> None:
    if stat.S_ISDIR(info.st_mode):
        shutil.rmtree(path)
    else:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


def garbage_collect(
    logger: logging.Logger,
    root_path: str,
    include_substr: Iterable[str],
    expiration_time: datetime,
) -> None:
    """Remove entries directly under ``root_path`` that are older than ``expiration_time``.

    An entry is removed when its name contains one of ``include_substr``, or
    when its path equals one of them. Sub-directories are never descended.
    """
    logger = logger.getChild("gc")
    substrings = list(include_substr)
    expiration = expiration_time.timestamp()

    root_info = os.lstat(root_path)
    if not stat.S_ISDIR(root_info.st_mode):
        return

    for name in sorted(os.listdir(root_path)):
        path = os.path.normpath(os.path.join(root_path, name))
        try:
            info = os.lstat(path)
        except FileNotFoundError:
            continue

        if info.st_mtime >= expiration:
            continue
        if not any(substr in name or path == substr for substr in substrings):
            continue

        try:
            _remove(path, info)
        except OSError as exc:
            raise GarbageCollectError(f"garbage collect '{path}': {exc}") from exc
        logger.debug(f"'{path}' removed")