import unittest

from mock import Mock

from jobhooks.tests import jobs


class TestResolver(unittest.TestCase):
    def _makeOne(self):
        from jobhooks.hooks import HookResolver
        return HookResolver()

    def test_own_hooks(self):
        hooks = self._makeOne().resolve(jobs.MixedJob)
        self.assertEqual(hooks.before, (
            jobs.MixedJob.before_perform,
            jobs.AuditMixin.before_perform_audit,
            jobs.LockMixin.before_perform_lock))
        self.assertEqual(hooks.around, (
            jobs.AuditMixin.around_perform_audit,
            jobs.LockMixin.around_perform_lock))
        self.assertEqual(hooks.after, (jobs.MixedJob.after_perform,))
        self.assertEqual(hooks.failure, ())

    def test_no_hooks(self):
        from jobhooks.hooks import HookSet
        resolver = self._makeOne()
        self.assertEqual(resolver.resolve(jobs.plain_job), HookSet.empty())
        self.assertEqual(resolver.resolve(jobs.ArgumentsJob),
                         HookSet.empty())

    def test_resolved_once(self):
        resolver = self._makeOne()
        first = resolver.resolve(jobs.MixedJob)
        self.assertIs(resolver.resolve(jobs.MixedJob), first)
        self.assertIs(resolver.resolve('jobhooks.tests.jobs:MixedJob'),
                      first)

    def test_no_perform(self):
        from jobhooks.exc import ConfigurationError
        resolver = self._makeOne()
        self.assertRaises(ConfigurationError, resolver.resolve,
                          jobs.NoPerformJob)
        self.assertRaises(ConfigurationError, resolver.resolve, object())

    def test_subscriber_order(self):
        resolver = self._makeOne()
        specific = Mock()
        resolver.subscriber('before_perform', specific,
                            job=jobs.BeforePerformJob)
        resolver.subscriber('before_perform',
                            'jobhooks.tests.jobs:record_before')
        hooks = resolver.resolve(jobs.BeforePerformJob)
        self.assertEqual(hooks.before, (jobs.BeforePerformJob.before_perform,
                                        jobs.record_before, specific))

    def test_subscriber_by_job_name(self):
        resolver = self._makeOne()
        resolver.subscriber('on_failure', 'jobhooks.tests.jobs:record_failure',
                            job='jobhooks.tests.jobs:AfterPerformJobFails')
        self.assertEqual(resolver.resolve(jobs.AfterPerformJobFails).failure,
                         (jobs.record_failure,))
        self.assertEqual(resolver.resolve(jobs.AfterPerformJob).failure, ())

    def test_subscriber_resets_cache(self):
        resolver = self._makeOne()
        self.assertEqual(resolver.resolve(jobs.plain_job).after, ())
        handler = Mock()
        resolver.subscriber('after_perform', handler)
        self.assertEqual(resolver.resolve(jobs.plain_job).after, (handler,))

    def test_unknown_category(self):
        from jobhooks.exc import ConfigurationError
        resolver = self._makeOne()
        self.assertRaises(ConfigurationError, resolver.subscriber,
                          'before_enqueue', Mock())

    def test_unknown_handler(self):
        from jobhooks.exc import JobResolutionError
        resolver = self._makeOne()
        resolver.subscriber('after_perform', 'jobhooks.tests.jobs:nothing')
        self.assertRaises(JobResolutionError, resolver.resolve,
                          jobs.AfterPerformJob)


class TestLoadObject(unittest.TestCase):
    def _callFUT(self, name):
        from jobhooks.hooks import load_object
        return load_object(name)

    def test_load(self):
        self.assertIs(self._callFUT('jobhooks.tests.jobs:MixedJob'),
                      jobs.MixedJob)

    def test_load_nested(self):
        self.assertIs(self._callFUT('jobhooks.tests.jobs:MixedJob.perform'),
                      jobs.MixedJob.perform)

    def test_not_a_name(self):
        self.assertIs(self._callFUT(jobs.plain_job), jobs.plain_job)

    def test_errors(self):
        from jobhooks.exc import JobResolutionError
        for name in ['jobhooks.tests.jobs', 'jobhooks.tests.jobs:',
                     ':MixedJob', 'jobhooks.tests.nomodule:MixedJob',
                     'jobhooks.tests.jobs:MixedJob.missing']:
            self.assertRaises(JobResolutionError, self._callFUT, name)


class TestJobName(unittest.TestCase):
    def _callFUT(self, job):
        from jobhooks.hooks import job_name
        return job_name(job)

    def test_names(self):
        self.assertEqual(self._callFUT(jobs.MixedJob),
                         'jobhooks.tests.jobs:MixedJob')
        self.assertEqual(self._callFUT(jobs.plain_job),
                         'jobhooks.tests.jobs:plain_job')
        self.assertEqual(self._callFUT('a.b:C'), 'a.b:C')
