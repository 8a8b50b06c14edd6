"""Hook resolution

A job type is any object with a callable ``perform``, usually a class
with class or static methods::

    class ResizeImage(object):
        @staticmethod
        def before_perform(path, width):
            if not os.path.exists(path):
                raise AbortJob()

        @staticmethod
        def around_perform(continuation, path, width):
            with Lock('resize:%s' % path):
                continuation()

        @staticmethod
        def perform(path, width):
            ...

        @staticmethod
        def after_perform(path, width):
            notify(path)

Every attribute whose name starts with a hook prefix is a hook, so
several mixins can each contribute one (``before_perform_lock``,
``before_perform_audit``). Hooks of a category run ordered by attribute
name, the bare ``before_perform`` first.

Hooks can also be attached without touching the job type::

    resolver = HookResolver()
    resolver.subscriber('on_failure', 'mypackage.errors:report')
    resolver.subscriber('after_perform', notify_done,
                        job='mypackage.jobs:ResizeImage')

A plain function is accepted as a job type with no hooks of its own, its
body being the function itself.

"""
import importlib
import inspect
from collections import namedtuple

from jobhooks.exc import ConfigurationError
from jobhooks.exc import JobResolutionError

BEFORE = 'before_perform'
AROUND = 'around_perform'
AFTER = 'after_perform'
FAILURE = 'on_failure'

CATEGORIES = (BEFORE, AROUND, AFTER, FAILURE)


class HookSet(namedtuple('HookSet', 'before around after failure')):
    """The ordered hooks of one job type, one tuple per category"""
    __slots__ = ()

    @classmethod
    def empty(cls):
        return cls((), (), (), ())

    def for_category(self, category):
        return getattr(self, _FIELDS[category])

_FIELDS = dict(zip(CATEGORIES, HookSet._fields))


def load_object(name):
    """Import an object given its ``package.module:attribute`` name"""
    if not isinstance(name, str):
        return name
    mod_name, sep, attr_path = name.partition(':')
    if not sep or not mod_name or not attr_path:
        raise JobResolutionError(
            "Expected a 'package.module:attribute' name, got %r" % name)
    try:
        obj = importlib.import_module(mod_name)
    except ImportError as exc:
        raise JobResolutionError(
            "Unable to import module %r: %s" % (mod_name, exc)) from exc
    for attr in attr_path.split('.'):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            raise JobResolutionError(
                "Module %r has no attribute %r" % (mod_name, attr_path)
            ) from None
    return obj


def job_name(job_type):
    """Returns the ``package.module:Name`` name of a job type"""
    if isinstance(job_type, str):
        return job_type
    qualname = getattr(job_type, '__qualname__',
                       type(job_type).__qualname__)
    return '%s:%s' % (job_type.__module__, qualname)


def job_body(job_type):
    """Returns the callable that performs the job"""
    perform = getattr(job_type, 'perform', None)
    if callable(perform):
        return perform
    if inspect.isfunction(job_type):
        return job_type
    raise ConfigurationError(
        "Job type %r has no callable 'perform'" % (job_type,))


def own_hooks(job_type):
    """Collects the hooks a job type defines on itself"""
    if inspect.isfunction(job_type):
        return HookSet.empty()
    found = dict((category, []) for category in CATEGORIES)
    # dir() is sorted, which gives the per-category ordering
    for attr in dir(job_type):
        for category in CATEGORIES:
            if attr.startswith(category):
                hook = getattr(job_type, attr)
                if callable(hook):
                    found[category].append(hook)
                break
    return HookSet(*[tuple(found[category]) for category in CATEGORIES])


class HookResolver(object):
    """Resolves and caches the :class:`HookSet` of job types"""
    def __init__(self):
        self.global_hooks = {}
        self.job_hooks = {}
        self._types = {}  # dotted name lookups
        self._cache = {}

    def subscriber(self, category, handler, job=None):
        """Attach a hook for a specific job type or for all of them

        :param category: One of ``before_perform``, ``around_perform``,
                         ``after_perform`` or ``on_failure``.
        :param handler: The hook, or its ``package.module:attribute`` name.
        :param job: Optional, a job type or its name to bind to.

        """
        if category not in CATEGORIES:
            raise ConfigurationError("Unknown hook category %r" % category)
        if job is not None:
            hooks = self.job_hooks.setdefault(job_name(job), {})
            hooks.setdefault(category, []).append(handler)
        else:
            self.global_hooks.setdefault(category, []).append(handler)
        self._cache.clear()

    def load(self, job):
        """Returns the job type for a job type or its name"""
        if not isinstance(job, str):
            return job
        if job not in self._types:
            self._types[job] = load_object(job)
        return self._types[job]

    def resolve(self, job):
        """Returns the :class:`HookSet` for a job type or its name"""
        job_type = self.load(job)
        try:
            return self._cache[job_type]
        except KeyError:
            pass
        job_body(job_type)
        hook_set = self._cache[job_type] = self._build(job_type)
        return hook_set

    def _build(self, job_type):
        own = own_hooks(job_type)
        specific = self.job_hooks.get(job_name(job_type), {})
        categories = []
        for category in CATEGORIES:
            handlers = list(own.for_category(category))
            handlers.extend(self.global_hooks.get(category, []))
            handlers.extend(specific.get(category, []))
            categories.append(tuple(load_object(h) for h in handlers))
        return HookSet(*categories)
