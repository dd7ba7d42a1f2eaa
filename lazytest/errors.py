"""Exception hierarchy for lazytest.

Anything derived from ``LazyTestError`` is fatal for the invocation; the CLI
turns it into a non-zero exit with the message on stderr.
"""

from __future__ import annotations


class LazyTestError(Exception):
    pass


class UsageError(LazyTestError):
    pass


class DiscoveryError(LazyTestError):
    pass


class ConfigError(LazyTestError):
    pass
