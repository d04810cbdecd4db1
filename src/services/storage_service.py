"""Low-level JSON database file I/O with atomic writes and locking."""
import json
import os
import sys
import tempfile
import time
from contextlib import contextmanager
from typing import Any, Dict

if sys.platform == "win32":
    import msvcrt
else:
    import fcntl


def read_database(file_path: str, retry_count: int = 3, retry_delay: float = 0.1) -> Dict[str, Any]:
    """
    Read the JSON database file.

    Args:
        file_path: Path to database file
        retry_count: Attempts for permission errors (default: 3)
        retry_delay: Delay in seconds between attempts (default: 0.1)

    Returns:
        dict: Parsed content, or an empty dict if the file doesn't exist yet

    Raises:
        json.JSONDecodeError: If the file holds malformed JSON
        PermissionError: If file not readable after retries
    """
    if not os.path.exists(file_path):
        return {}

    for attempt in range(retry_count):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = f.read()
        except PermissionError:
            if attempt < retry_count - 1:
                time.sleep(retry_delay)
                continue
            break

        if not content.strip():
            return {}
        data = json.loads(content)
        if not isinstance(data, dict):
            raise json.JSONDecodeError(f"Database root must be an object in {file_path}", content, 0)
        return data

    raise PermissionError(f"Cannot read file after {retry_count} attempts: {file_path}")


def write_database(file_path: str, data: Dict[str, Any]) -> None:
    """
    Replace the database file atomically.

    The content is written to a temporary sibling file, flushed to disk and
    renamed over the target, so readers never see a half-written file.

    Raises:
        IOError: If the write or rename fails
    """
    dir_path = os.path.dirname(file_path)
    if dir_path:
        os.makedirs(dir_path, exist_ok=True)

    temp_fd, temp_path = tempfile.mkstemp(
        dir=dir_path or ".",
        prefix=".tmp_",
        suffix=".json"
    )

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, file_path)
    except (OSError, TypeError, ValueError) as e:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise IOError(f"Failed to write file {file_path}: {e}") from e


@contextmanager
def database_lock(file_path: str, timeout: float = 5.0):
    """
    Hold an exclusive lock on the database for a read-modify-write cycle.

    The lock is taken on a companion "<file>.lock" file so the database
    itself can be replaced while the lock is held.

    Usage:
        with database_lock(path):
            data = read_database(path)
            data.setdefault("registrations", {})[doc_id] = document
            write_database(path, data)

    Raises:
        TimeoutError: If unable to acquire lock within timeout
    """
    lock_path = f"{file_path}.lock"
    dir_path = os.path.dirname(lock_path)
    if dir_path:
        os.makedirs(dir_path, exist_ok=True)

    lock_handle = open(lock_path, "a+")
    try:
        start_time = time.time()
        while True:
            try:
                if sys.platform == "win32":
                    lock_handle.seek(0)
                    msvcrt.locking(lock_handle.fileno(), msvcrt.LK_NBLCK, 1)
                else:
                    fcntl.flock(lock_handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except OSError:
                if time.time() - start_time > timeout:
                    raise TimeoutError(f"Could not acquire lock on {file_path} within {timeout}s")
                time.sleep(0.05)

        try:
            yield
        finally:
            if sys.platform == "win32":
                lock_handle.seek(0)
                msvcrt.locking(lock_handle.fileno(), msvcrt.LK_UNLCK, 1)
            else:
                fcntl.flock(lock_handle.fileno(), fcntl.LOCK_UN)
    finally:
        lock_handle.close()
