"""
Cross-process "ignore new instance if already running" guard.

Triggers can fire together (logon and startup at boot, two quick logons).
The first agent to take the lock runs the prompt; later ones see the lock
held and exit without presenting anything.
"""

import logging
from contextlib import contextmanager
from pathlib import Path

import filelock

logger = logging.getLogger("termsgate")


@contextmanager
def single_instance(lock_path: Path):
    """
    Yield True if this process holds the agent lock, False if another does.

    The lock is released when the block exits, including on exceptions.
    """
    lock_path = Path(lock_path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = filelock.FileLock(str(lock_path), timeout=0)
    try:
        lock.acquire()
    except filelock.Timeout:
        logger.info(f"Another prompt agent holds {lock_path}; ignoring this instance")
        yield False
        return
    try:
        yield True
    finally:
        lock.release()
