"""Evaluation failures raised by the conflict detection service."""


class EvaluationFailure(RuntimeError):
    """Candidates or moratoria could not be fetched.

    Never means "no conflicts". Callers either block the submission or take an
    explicit, logged degraded-mode decision.
    """


class ConflictCheckIncomplete(EvaluationFailure):
    """The candidate fetch did not finish before the deadline."""
