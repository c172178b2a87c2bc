# -*- coding: utf-8 -*-

from .__version__ import __version__  # noqa

from .loop import EventLoop, VirtualClock, get_event_loop, set_event_loop
from .promise import Deferred

__all__ = ['Deferred', 'EventLoop', 'VirtualClock', 'get_event_loop',
           'set_event_loop']
