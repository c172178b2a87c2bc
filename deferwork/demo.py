# -*- coding: utf-8 -*-

"""Demonstration of the Deferred ordering rules.

Timers are registered first, but the Deferreds already settled are drained
before them. Then, the timers resolve and reject other Deferreds, 1 and 2
seconds later. Each URL passed with ``--fetch`` is requested in a worker
thread and its JSON response (or error) is logged.
"""

import logging

import click

from .common import config, log
from .loop import EventLoop, VirtualClock, set_event_loop
from . import network
from .promise import Deferred

_logger = logging.getLogger(__name__)


def schedule_demo(loop, urls=()):
    """Register all the demonstration timers and Deferreds on the loop.

    Nothing is executed before the loop runs.

    Args:
        loop (EventLoop)
        urls (list of str, optional): URLs to fetch. A network Context must
            be started.
    """
    def log_timer(name):
        _logger.info(name)

    loop.call_later(0, log_timer, 'setTimeout 1')
    loop.call_later(0, log_timer, 'setTimeout 2')

    deferred = Deferred(
        lambda resolve, reject: loop.call_later(1, resolve, 10),
        loop=loop, name='delayed value')
    error_deferred = Deferred(
        lambda resolve, reject: loop.call_later(2, reject, 100),
        loop=loop, name='delayed error')

    deferred \
        .then(lambda res: res + 200) \
        .then(lambda res: res + 400) \
        .then(lambda res: res + 1000) \
        .then(lambda res: _logger.info('%s', res)) \
        .catch(lambda error: _logger.error('%s', error))

    error_deferred.then(lambda res: _logger.info('%s', res),
                        lambda error: _logger.error('error %s', error))

    Deferred.resolve('1', loop=loop) \
        .then(lambda res: _logger.info('Resolved %s', res))
    Deferred.reject('2', loop=loop) \
        .catch(lambda error: _logger.error('Rejected %s', error))

    for url in urls:
        network.fetch(url) \
            .then(lambda res, url=url: _logger.info('%s -> %s', url, res)) \
            .catch(lambda error: _logger.error('%s', error))


@click.command()
@click.option('--virtual', is_flag=True,
              help='Use a virtual clock: timers fire without waiting.')
@click.option('--fetch', 'urls', multiple=True, metavar='URL',
              help='JSON resource to request. Can be repeated.')
@click.option('--debug/--no-debug', default=None,
              help='Override the "debug_mode" config entry.')
def main(virtual, urls, debug):
    """Run the Deferred demonstration and log its output."""
    with log.Context():
        config.load()
        if debug is None:
            debug = config.get('debug_mode')
        log.set_debug_mode(debug)
        log.set_logs_level(config.get('log_levels'))

        loop = EventLoop(clock=VirtualClock() if virtual else None)
        set_event_loop(loop)

        with network.Context(loop=loop):
            schedule_demo(loop, urls)
            loop.run()


if __name__ == "__main__":
    main()
