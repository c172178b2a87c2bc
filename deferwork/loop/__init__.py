# -*- coding: utf-8 -*-

from .clock import MonotonicClock, VirtualClock
from .event_loop import EventLoop, IOHandle, get_event_loop, set_event_loop

__all__ = ['EventLoop', 'IOHandle', 'MonotonicClock', 'VirtualClock',
           'get_event_loop', 'set_event_loop']
