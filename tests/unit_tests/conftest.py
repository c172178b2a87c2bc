# -*- coding: utf-8 -*-

import pytest

from deferwork.loop import EventLoop, VirtualClock, set_event_loop


@pytest.fixture
def loop(request):
    """Event loop using a virtual clock, set as the default loop.

    Errors escaping the units of work are not logged, but stored in the
    ``errors`` list attribute of the loop.

    Returns:
        EventLoop: the loop instance, not running yet.
    """
    loop = EventLoop(clock=VirtualClock())
    loop.errors = []

    def store_error(loop, context):
        loop.errors.append(context['exception'])

    loop.set_exception_handler(store_error)
    set_event_loop(loop)
    request.addfinalizer(lambda: set_event_loop(None))
    return loop
