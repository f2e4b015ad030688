import threading
from contextlib import contextmanager
from uuid import UUID


class PairLockRegistry:
    """One lock per unordered user pair, so A->B and B->A writes serialize.

    Entries are reference counted and dropped once no thread holds or waits
    on them, keeping the registry bounded by the number of in-flight writes.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}

    @staticmethod
    def key(user_id_a: UUID, user_id_b: UUID):
        return frozenset((str(user_id_a), str(user_id_b)))

    @contextmanager
    def hold(self, user_id_a: UUID, user_id_b: UUID):
        key = self.key(user_id_a, user_id_b)
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1

        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self):
        with self._guard:
            return len(self._locks)


pair_locks = PairLockRegistry()
