"""In-process serialization of ledger writes for one customer."""

import threading
from contextlib import contextmanager
from weakref import WeakValueDictionary

_registry_lock = threading.Lock()
_customer_locks = WeakValueDictionary()


def _lock_for(key: str) -> threading.Lock:
    with _registry_lock:
        lock = _customer_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _customer_locks[key] = lock
        return lock


@contextmanager
def customer_lock(key: str):
    """
    Hold an exclusive lock for one customer key (phone or id) in this process.

    Must wrap the whole database transaction so the lock is released only
    after commit. Cross-process writers are serialized by row locks instead.
    """
    lock = _lock_for(str(key))
    with lock:
        yield
