"""jobhooks exceptions"""


class JobHooksException(Exception):
    """jobhooks package base exception"""


class ConfigurationError(JobHooksException):
    """Raised for general configuration errors"""


class JobResolutionError(ConfigurationError):
    """Raised when a job or hook name can't be imported"""


class ContinuationError(JobHooksException):
    """Raised when an around hook calls its continuation more than once"""


class AbortJob(JobHooksException):
    """Raised by a before hook to skip the job

    This is not a failure. The job is reported as not performed and
    no error reaches the caller.

    """
