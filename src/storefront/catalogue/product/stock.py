"""Per-product locks that serialize stock check-and-decrement.

Order placement holds the locks of every product on the order while its
unit of work checks stock, decrements it and commits. Locks are taken in
sorted id order so two orders sharing products cannot deadlock.

The registry lives in process memory; running several server processes
against one database needs a row lock or conditional update instead.
"""

import threading
from contextlib import contextmanager

_registry_lock = threading.Lock()
_product_locks: dict[str, threading.Lock] = {}


def lock_for(product_id) -> threading.Lock:
    with _registry_lock:
        return _product_locks.setdefault(str(product_id), threading.Lock())


@contextmanager
def reserve_stock(product_ids):
    """Hold the stock locks of ``product_ids`` for the duration of the block."""
    locks = [lock_for(product_id) for product_id in sorted({str(pid) for pid in product_ids})]
    acquired = []
    try:
        for lock in locks:
            lock.acquire()
            acquired.append(lock)
        yield
    finally:
        for lock in reversed(acquired):
            lock.release()
