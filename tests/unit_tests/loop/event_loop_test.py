# -*- coding: utf-8 -*-

import logging
import threading

import pytest

from deferwork.loop import EventLoop, VirtualClock, get_event_loop, \
    set_event_loop


class MyException(Exception):
    pass


class TestEventLoop(object):

    def test_microtasks_fifo(self, loop):
        order = []
        loop.queue_microtask(order.append, 1)
        loop.queue_microtask(order.append, 2)
        loop.queue_microtask(order.append, 3)
        loop.run()
        assert order == [1, 2, 3]

    def test_nested_microtask_before_timer(self, loop):
        """Microtasks queued during the drain run before any timer."""
        order = []

        def first():
            order.append('first')
            loop.queue_microtask(order.append, 'nested')

        loop.call_later(0, order.append, 'timer')
        loop.queue_microtask(first)
        loop.run()

        assert order == ['first', 'nested', 'timer']

    def test_timers_order(self, loop):
        order = []
        loop.call_later(2, order.append, 'c')
        loop.call_later(1, order.append, 'a')
        loop.call_later(1, order.append, 'b')
        loop.call_later(-5, order.append, 'now')
        loop.run()

        assert order == ['now', 'a', 'b', 'c']
        assert loop.clock.now() == 2

    def test_microtasks_drained_after_each_timer(self, loop):
        order = []

        def timer1():
            order.append('t1')
            loop.queue_microtask(order.append, 'm1')

        loop.call_later(0, timer1)
        loop.call_later(0, order.append, 't2')
        loop.run()

        assert order == ['t1', 'm1', 't2']

    def test_run_until(self, loop):
        order = []
        loop.call_later(1, order.append, 1)
        loop.call_later(2, order.append, 2)
        loop.run(until=lambda: len(order) == 1)

        assert order == [1]
        assert loop.has_pending_work()
        loop.run()
        assert order == [1, 2]
        assert not loop.has_pending_work()

    def test_stop(self, loop):
        order = []

        def stop():
            order.append('stop')
            loop.stop()

        loop.call_later(1, stop)
        loop.call_later(2, order.append, 'never')
        loop.run()

        assert order == ['stop']

    def test_run_until_idle(self, loop):
        order = []
        loop.call_later(0, order.append, 'due')
        loop.call_later(5, order.append, 'later')
        loop.queue_microtask(order.append, 'micro')
        loop.run_until_idle()

        assert order == ['micro', 'due']
        assert loop.clock.now() == 0

    def test_error_does_not_stop_loop(self, loop):
        order = []

        def fail():
            raise MyException()

        loop.queue_microtask(fail)
        loop.queue_microtask(order.append, 'after')
        loop.call_later(0, fail)
        loop.call_later(0, order.append, 'timer')
        loop.run()

        assert order == ['after', 'timer']
        assert len(loop.errors) == 2
        assert all(isinstance(e, MyException) for e in loop.errors)

    def test_default_exception_handler(self, caplog):
        loop = EventLoop(clock=VirtualClock())

        def fail():
            raise MyException('failure')

        with caplog.at_level(logging.ERROR):
            loop.queue_microtask(fail)
            loop.run()

        assert 'Exception in deferred work fail' in caplog.text
        assert caplog.records[-1].exc_info[1].args == ('failure',)

    def test_exception_handler_raising(self, caplog):
        loop = EventLoop(clock=VirtualClock())

        def handler(loop, context):
            raise ValueError()

        def fail():
            raise MyException()

        loop.set_exception_handler(handler)
        with caplog.at_level(logging.ERROR):
            loop.queue_microtask(fail)
            loop.run()

        assert 'Exception handler of the event loop' in caplog.text
        assert 'Exception in deferred work fail' in caplog.text

    def test_io_completion_from_thread(self, loop):
        order = []
        handle = loop.register_io()

        def worker():
            handle.post(order.append, 'io')

        loop.call_later(0, threading.Thread(target=worker).start)
        loop.run()

        assert order == ['io']
        assert not loop.has_pending_work()

    def test_io_handle_posted_twice(self, loop):
        handle = loop.register_io()
        handle.post(lambda: None)
        with pytest.raises(RuntimeError):
            handle.post(lambda: None)
        loop.run()

    def test_loop_waits_for_pending_io(self, loop):
        """The loop does not return while an I/O handle is pending."""
        order = []
        handle = loop.register_io()
        timer = threading.Timer(0.01, handle.post, args=[order.append, 'io'])
        timer.start()
        loop.run()

        assert order == ['io']


class TestDefaultLoop(object):

    def teardown_method(self, method):
        set_event_loop(None)

    def test_get_event_loop_created_once(self):
        set_event_loop(None)
        loop = get_event_loop()
        assert isinstance(loop, EventLoop)
        assert get_event_loop() is loop

    def test_set_event_loop(self):
        loop = EventLoop()
        set_event_loop(loop)
        assert get_event_loop() is loop
        set_event_loop(None)
        assert get_event_loop() is not loop
