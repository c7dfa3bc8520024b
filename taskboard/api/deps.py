from fastapi import Request

from taskboard.core.clock import Clock
from taskboard.db.store import RecordStore


# The store and clock are built once by create_app() and hung on app.state;
# endpoints receive them through these dependencies.
def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_clock(request: Request) -> Clock:
    return request.app.state.clock
