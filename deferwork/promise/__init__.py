# -*- coding: utf-8 -*-

from .decorators import wrap_deferred
from .deferred import Deferred
from .errors import DeferredError, UnhandledRejectionError
from .thread_pool import ThreadPoolExecutor
from .util import is_error, is_thenable

__all__ = ['is_error', 'is_thenable', 'Deferred', 'DeferredError',
           'UnhandledRejectionError', 'ThreadPoolExecutor', 'wrap_deferred']
