"""jobhooks

Runs a single job through its ``before_perform``, ``around_perform`` and
``after_perform`` hooks.

This module holds the process-wide default settings, which can be
configured once at startup::

    from jobhooks import global_settings
    from jobhooks.hooks import HookResolver

    resolver = HookResolver()
    resolver.subscriber('on_failure', 'mypackage.errors:report')
    global_settings.resolver = resolver
    global_settings.allow_swallowed_failures = False

Alternatively, a :class:`~jobhooks.job.JobRunner` accepts its own resolver
and settings directly.

"""
from jobhooks.hooks import HookResolver

__all__ = ['Settings', 'global_settings']


class Settings(object):
    """The default settings

    A :obj:`jobhooks.global_settings` object is created using this
    during import. The ``.resolver`` property can be set on it to change
    the resolver used by every runner that isn't handed one.

    """
    def __init__(self):
        self._resolver = None
        self.allow_swallowed_failures = True

    @property
    def resolver(self):
        if not self._resolver:
            self._resolver = HookResolver()
        return self._resolver

    @resolver.setter
    def resolver(self, resolver):
        self._resolver = resolver

global_settings = Settings()
