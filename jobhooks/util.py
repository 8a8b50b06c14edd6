"""Utility functions"""
import functools

from jobhooks.exc import ContinuationError


class Continuation(object):
    """Runs everything inside an around hook, at most once

    ``called`` tells whether the hook invoked it, ``error`` holds the
    exception that was raised through it, if any.

    """
    def __init__(self, func):
        self.func = func
        self.called = False
        self.error = None

    def __call__(self):
        if self.called:
            raise ContinuationError("The continuation was already called")
        self.called = True
        try:
            return self.func()
        except Exception as exc:
            self.error = exc
            raise

    def __repr__(self):
        return '<%s called=%s error=%r>' % (
            self.__class__.__name__, self.called, self.error)


def with_nested_continuations(hooks, func, args, continuations=None):
    """Nested around hook calling

    Given a function and the positional arguments to call it with, every
    hook in the hooks list is called with a continuation running the next
    hook, the innermost one running the function.

    Every hook gets the continuation, then the positional arguments.

    Example::

        hook_a(lambda: hook_b(lambda: func(*args), *args), *args)

        # is equivalent to
        with_nested_continuations([hook_a, hook_b], func, args)

    :param continuations: Optional list, every continuation created is
                          appended to it, outermost first.

    """
    if not hooks:
        return func(*args)
    continuation = Continuation(functools.partial(
        with_nested_continuations, hooks[1:], func, args, continuations))
    if continuations is not None:
        continuations.append(continuation)
    return hooks[0](continuation, *args)


def around_from_context(factory):
    """Turn a context manager factory into an around hook

    The factory is called with the job's positional arguments, and the
    continuation runs inside the resulting context::

        @contextmanager
        def timed(*args):
            start = time.time()
            yield
            log.info('took %.2fs', time.time() - start)

        class Report(object):
            around_perform_timed = staticmethod(around_from_context(timed))

    A context manager that suppresses an exception swallows it, as an
    around hook catching it would.

    """
    @functools.wraps(factory)
    def around_perform(continuation, *args):
        with factory(*args):
            continuation()
    return around_perform
