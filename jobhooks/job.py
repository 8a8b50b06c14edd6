"""Job execution

A :class:`JobRunner` performs a single invocation of a job, running the
hooks of its job type around it. The job comes in as a
:class:`JobDescriptor`, the job type (or its name) and the positional
arguments::

    from jobhooks.job import JobDescriptor, JobRunner

    runner = JobRunner()
    performed = runner.perform(
        JobDescriptor('mypackage.jobs:ResizeImage', ['/tmp/cat.png', 200]))

Queue workers that would rather not catch exceptions can use
:meth:`JobRunner.execute`, which returns a :class:`Result`::

    performed, error = runner.execute(descriptor)

.. _hook_order:

Hook Order
==========

* **before_perform**: Each runs in order with the job's arguments. Raising
  :exc:`~jobhooks.exc.AbortJob` skips the job gracefully: nothing else
  runs, the job is reported as not performed and no error is returned.
  Any other exception stops the job and reaches the caller.
* **around_perform**: Called as ``hook(continuation, *args)``, the first
  hook outermost. Calling ``continuation()`` runs the next hook, the last
  one running the job itself. A hook that never calls it skips the job,
  which is reported as not performed, and the after hooks don't run.
  Exceptions raised inside the continuation go through the hook's own
  ``finally`` blocks and keep propagating, unless the hook swallows them.
* **perform**: Runs exactly once, if every around hook called its
  continuation.
* **after_perform**: Each runs in order once the job has performed
  without raising. The first exception reaches the caller and skips the
  remaining ones.
* **on_failure**: Called as ``hook(exc, *args)`` before an exception
  from any of the above reaches the caller.

"""
import enum
import json
import logging
import sys
from collections import namedtuple
from optparse import OptionParser

from jobhooks import global_settings
from jobhooks.exc import AbortJob
from jobhooks.exc import ConfigurationError
from jobhooks.hooks import job_body
from jobhooks.hooks import job_name
from jobhooks.util import with_nested_continuations

log = logging.getLogger(__name__)


class JobDescriptor(namedtuple('JobDescriptor', 'job args')):
    """A job type, or its ``package.module:Name`` name, and its arguments"""
    __slots__ = ()

    def __new__(cls, job, args=()):
        return super(JobDescriptor, cls).__new__(cls, job, tuple(args))

    @classmethod
    def from_payload(cls, payload):
        """Create a descriptor from a JSON job payload

        :param payload: A JSON string, or the decoded dict, of the form
                        ``{"class": "mypackage.jobs:Job", "args": [...]}``.

        """
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except ValueError as exc:
                raise ConfigurationError(
                    "Job payload is not valid JSON: %s" % exc) from exc
        if not isinstance(payload, dict) or 'class' not in payload:
            raise ConfigurationError(
                "Job payload has no 'class': %r" % (payload,))
        args = payload.get('args', [])
        if not isinstance(args, list):
            raise ConfigurationError(
                "Job payload 'args' must be a list, got %r" % (args,))
        return cls(payload['class'], args)

    def __repr__(self):
        return '<JobDescriptor %s%r>' % (job_name(self.job), self.args)


class Outcome(enum.Enum):
    """How a single invocation ended"""
    PERFORMED = 'performed'
    ABORTED = 'aborted'
    SKIPPED = 'skipped'
    FAILED = 'failed'


class Result(namedtuple('Result', 'performed error')):
    """The result of :meth:`JobRunner.execute`

    A ``performed, error`` pair. ``error`` is only set for failures, an
    aborted or skipped job has neither. ``outcome`` tells them apart.

    """
    def __new__(cls, outcome, error=None):
        result = super(Result, cls).__new__(
            cls, outcome is Outcome.PERFORMED, error)
        result.outcome = outcome
        return result

    def __repr__(self):
        return '<Result %s error=%r>' % (self.outcome.value, self.error)


class JobRunner(object):
    """Runs jobs with their hooks"""
    def __init__(self, resolver=None, allow_swallowed_failures=None):
        """Create a runner

        :param resolver: The :class:`~jobhooks.hooks.HookResolver` to use,
                         defaults to the one on the global_settings.
        :param allow_swallowed_failures: Whether an around hook may swallow
                                         an exception raised inside its
                                         continuation. If not, the
                                         exception is raised anyway.
                                         Defaults to the global_settings.

        """
        self._resolver = resolver
        self._allow_swallowed_failures = allow_swallowed_failures

    @property
    def resolver(self):
        return self._resolver or global_settings.resolver

    @property
    def allow_swallowed_failures(self):
        if self._allow_swallowed_failures is None:
            return global_settings.allow_swallowed_failures
        return self._allow_swallowed_failures

    def perform(self, descriptor):
        """Runs the job, returning whether it was performed

        Exceptions raised by the hooks or the job are raised unchanged.

        """
        return self.run(descriptor) is Outcome.PERFORMED

    def execute(self, descriptor):
        """Runs the job, returning a :class:`Result` instead of raising"""
        try:
            outcome = self.run(descriptor)
        except Exception as exc:
            return Result(Outcome.FAILED, exc)
        return Result(outcome)

    def run(self, descriptor):
        """Runs the job and returns its :class:`Outcome`"""
        job_type = self.resolver.load(descriptor.job)
        hooks = self.resolver.resolve(job_type)
        body = job_body(job_type)
        name = job_name(job_type)
        try:
            return self.run_hooks(name, hooks, body, descriptor.args)
        except Exception as exc:
            log.debug("Job %s failed: %r", name, exc)
            self.run_failure_hooks(name, hooks, exc, descriptor.args)
            raise

    def run_hooks(self, name, hooks, body, args):
        try:
            for hook in hooks.before:
                hook(*args)
        except AbortJob:
            log.info("Job %s aborted by a before_perform hook", name)
            return Outcome.ABORTED

        performed = False

        def perform_body(*args):
            nonlocal performed
            log.debug("Performing job %s", name)
            result = body(*args)
            performed = True
            return result

        if hooks.around:
            continuations = []
            with_nested_continuations(hooks.around, perform_body, args,
                                      continuations)
            swallowed = [c.error for c in continuations
                         if c.error is not None]
            if swallowed:
                log.warning("Job %s failed but an around_perform hook "
                            "swallowed the exception: %r", name, swallowed[0])
                if not self.allow_swallowed_failures:
                    raise swallowed[0]
                return Outcome.SKIPPED
            if not performed:
                log.info("Job %s skipped, an around_perform hook did not "
                         "call its continuation", name)
                return Outcome.SKIPPED
        else:
            perform_body(*args)

        for hook in hooks.after:
            hook(*args)
        log.debug("Job %s performed", name)
        return Outcome.PERFORMED

    def run_failure_hooks(self, name, hooks, exc, args):
        """Run every on_failure hook, a failing hook doesn't stop the rest"""
        for hook in hooks.failure:
            try:
                hook(exc, *args)
            except Exception:
                log.exception("on_failure hook %r of job %s raised",
                              hook, name)


def perform_job(job, *args):
    """Perform a job with the default runner

    :param job: The job type, or its ``package.module:Name`` name.
    :returns: Whether the job was performed.

    """
    return JobRunner().perform(JobDescriptor(job, args))


def execute(descriptor):
    """Execute a :class:`JobDescriptor` with the default runner"""
    return JobRunner().execute(descriptor)


def run_job():
    usage = "usage: %prog job [args_json]"
    parser = OptionParser(usage=usage)
    parser.add_option("--log-level", dest="log_level", default="WARNING",
                      help="Logging level")
    (options, args) = parser.parse_args()

    if len(args) < 1:
        sys.exit("Error: Failed to provide a job to run")
    level = logging.getLevelName(options.log_level.upper())
    if not isinstance(level, int):
        sys.exit("Error: Unknown log level %r" % options.log_level)
    logging.basicConfig(level=level)

    payload = {'class': args[0]}
    if len(args) > 1:
        try:
            payload['args'] = json.loads(args[1])
        except ValueError as exc:
            sys.exit("Error: Job arguments are not valid JSON: %s" % exc)

    try:
        descriptor = JobDescriptor.from_payload(payload)
    except ConfigurationError as exc:
        sys.exit("Error: %s" % exc)
    result = execute(descriptor)
    if result.error is not None:
        sys.exit("Error: %s: %s" % (type(result.error).__name__,
                                    result.error))
    sys.exit(0 if result.performed else 2)
