import atexit

from tasktracker.tests.testcontainers.mongo_container import MongoReplicaSetContainer

_mongo_container = None


def _cleanup_mongo_container():
    global _mongo_container
    if _mongo_container is not None:
        _mongo_container.stop()
        _mongo_container = None


def get_shared_mongo_container():
    """One container per test process; every integration test case reuses it."""
    global _mongo_container
    if _mongo_container is None:
        container = MongoReplicaSetContainer()
        container.start()
        _mongo_container = container
        atexit.register(_cleanup_mongo_container)

    return _mongo_container
