import threading
from contextlib import contextmanager


class UserLocks:
    """One lock per user id so reward checks and the writes that follow them
    never interleave for the same user. Process-local."""

    def __init__(self):
        self._locks: dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def for_user(self, user_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, user_id: int):
        lock = self.for_user(user_id)
        with lock:
            yield


user_locks = UserLocks()
