import asyncio

from core.middleware import DatabaseMiddleware
from db.base import close_db, db


def run_overlapping_requests():
    """Start two requests, finish the first while the second still runs."""
    middleware = DatabaseMiddleware(app=None)
    first_done = asyncio.Event()
    second_done = asyncio.Event()
    seen_open = []

    async def first(request):
        await first_done.wait()
        return "first"

    async def second(request):
        await second_done.wait()
        seen_open.append(not db.is_closed())
        return "second"

    async def scenario():
        a = asyncio.create_task(middleware.dispatch(None, first))
        await asyncio.sleep(0)
        b = asyncio.create_task(middleware.dispatch(None, second))
        await asyncio.sleep(0)

        first_done.set()
        assert await a == "first"
        still_open = not db.is_closed()

        second_done.set()
        assert await b == "second"
        return still_open

    still_open = asyncio.run(scenario())
    return still_open, seen_open


def test_connection_outlives_overlapping_request():
    close_db()

    still_open, seen_open = run_overlapping_requests()

    assert still_open
    assert seen_open == [True]
    assert db.is_closed()


def test_existing_connection_is_left_open():
    db.connect(reuse_if_open=True)
    try:
        run_overlapping_requests()
        assert not db.is_closed()
    finally:
        close_db()


def test_connection_closed_after_failed_request():
    close_db()
    middleware = DatabaseMiddleware(app=None)

    async def boom(request):
        raise RuntimeError("handler failed")

    async def scenario():
        try:
            await middleware.dispatch(None, boom)
        except RuntimeError:
            return True
        return False

    assert asyncio.run(scenario())
    assert db.is_closed()
    assert middleware._in_flight == 0
