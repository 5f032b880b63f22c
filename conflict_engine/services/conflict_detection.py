"""Conflict detection service.

Runs one conflict check end to end:
1. Parse the wire request and validate its geometry
2. Fetch candidate projects, active moratoria and the requesting project's
   moratorium exceptions in parallel, under one deadline (exception lookup fails safe)
3. Classify with the ConflictAggregator

Data-source failures and timeouts surface as EvaluationFailure; they are never
reported as an empty result.
"""

import contextvars
import logging
import time
from collections.abc import Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from conflict_engine.common.tracing import check_context
from conflict_engine.config import DEFAULT_CONFLICT_CONFIG, ConflictConfig
from conflict_engine.conflicts.aggregator import ConflictAggregator
from conflict_engine.models.domain import (
    ConflictDetectionRequest,
    ConflictDetectionResult,
    Moratorium,
    MoratoriumException,
    Project,
    TimeWindow,
)
from conflict_engine.models.request import ConflictDetectionInput
from conflict_engine.repositories.protocols import MoratoriumRegistry, ProjectSource
from conflict_engine.services.errors import ConflictCheckIncomplete, EvaluationFailure
from conflict_engine.validation.errors import InputValidationError, ValidationError
from conflict_engine.validation.geometry import GeometryValidator

logger = logging.getLogger(__name__)

UNVERIFIED_DISCLAIMER = (
    "Conflict check could not be completed. The project was submitted without "
    "conflict verification and must be reviewed by a coordinator."
)


@dataclass(frozen=True)
class ConflictCheckOutcome:
    """Result of a check that may have run in degraded mode.

    Attributes:
        result: Conflict result, or None when the check could not be completed
        verified: False when the submission proceeds without conflict verification
        disclaimer: User-visible notice shown for unverified submissions
    """

    result: ConflictDetectionResult | None
    verified: bool
    disclaimer: str | None = None


@dataclass(frozen=True)
class ConflictStatistics:
    """Aggregate counts over a batch of checked projects.

    Attributes:
        total_projects: Projects submitted to the batch, failed checks included
        projects_with_conflicts: Projects with at least one conflict of any kind
        spatial_conflicts: Projects with at least one spatially conflicting project
        moratorium_violations: Projects violating at least one moratorium
        failed_checks: Projects whose check could not be completed
    """

    total_projects: int = 0
    projects_with_conflicts: int = 0
    spatial_conflicts: int = 0
    moratorium_violations: int = 0
    failed_checks: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "totalProjects": self.total_projects,
            "projectsWithConflicts": self.projects_with_conflicts,
            "spatialConflicts": self.spatial_conflicts,
            "moratoriumViolations": self.moratorium_violations,
            "failedChecks": self.failed_checks,
        }


@dataclass
class BatchDetectionReport:
    """Per-project outcomes of a batch check, keyed by project id."""

    results: dict[str, ConflictDetectionResult] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def conflicting_ids(self) -> list[str]:
        return [pid for pid, result in self.results.items() if result.has_conflict]

    @property
    def statistics(self) -> ConflictStatistics:
        results = self.results.values()
        return ConflictStatistics(
            total_projects=len(self.results) + len(self.failures),
            projects_with_conflicts=sum(1 for r in results if r.has_conflict),
            spatial_conflicts=sum(1 for r in results if r.spatial_conflicts),
            moratorium_violations=sum(1 for r in results if r.moratorium_violations),
            failed_checks=len(self.failures),
        )


class ConflictDetectionService:
    """Checks proposed excavation works against existing projects and moratoria.

    The service holds no mutable state; one instance can serve concurrent
    callers as long as its collaborators return consistent snapshots.
    """

    def __init__(
        self,
        project_source: ProjectSource,
        moratorium_registry: MoratoriumRegistry,
        config: ConflictConfig = DEFAULT_CONFLICT_CONFIG,
        validator: GeometryValidator | None = None,
        aggregator: ConflictAggregator | None = None,
    ):
        self.project_source = project_source
        self.moratorium_registry = moratorium_registry
        self.config = config
        self.validator = validator or GeometryValidator()
        self.aggregator = aggregator or ConflictAggregator(config.proximity_threshold_m)

        search_radius = getattr(project_source, "search_radius_m", None)
        if isinstance(search_radius, int | float) and search_radius < config.proximity_threshold_m:
            logger.warning(
                f"Project source searches {search_radius:g}m around the request but the "
                f"proximity threshold is {config.proximity_threshold_m:g}m; "
                f"projects between the two distances will be missed"
            )

    def parse_request(
        self, request: ConflictDetectionInput | ConflictDetectionRequest | Mapping[str, Any]
    ) -> ConflictDetectionRequest:
        """Turn a wire request into a validated ConflictDetectionRequest.

        Raises:
            InputValidationError: If dates or geometry are invalid
        """
        if isinstance(request, ConflictDetectionRequest):
            return request

        if not isinstance(request, ConflictDetectionInput):
            try:
                request = ConflictDetectionInput.model_validate(request)
            except PydanticValidationError as e:
                raise InputValidationError(_request_errors(e)) from e

        geometry = self.validator.normalize(request.geometry)
        for warning in geometry.warnings:
            logger.info(f"Geometry warning: {warning}")

        return ConflictDetectionRequest(
            geometry=geometry,
            window=TimeWindow(start=request.start_date, end=request.end_date),
            exclude_project_id=request.exclude_project_id,
            project_id=request.project_id,
        )

    def detect_conflicts(
        self,
        request: ConflictDetectionInput | ConflictDetectionRequest | Mapping[str, Any],
        timeout_seconds: float | None = None,
    ) -> ConflictDetectionResult:
        """Run a conflict check.

        Args:
            request: Wire request (camelCase or snake_case keys) or a validated request
            timeout_seconds: Deadline for fetching candidates, moratoria and exceptions;
                defaults to ``config.fetch_timeout_seconds``

        Returns:
            ConflictDetectionResult

        Raises:
            InputValidationError: If the request is invalid
            ConflictCheckIncomplete: If the fetch did not finish in time
            EvaluationFailure: If a data source failed
        """
        timeout = self.config.fetch_timeout_seconds if timeout_seconds is None else timeout_seconds
        if timeout <= 0:
            msg = f"Timeout must be positive, got {timeout}"
            raise ValueError(msg)

        with check_context() as check_id:
            start_time = time.time()
            parsed = self.parse_request(request)
            logger.info(
                f"Conflict check {check_id}: {parsed.geometry.type} geometry, "
                f"{parsed.window.start.isoformat()}..{parsed.window.end.isoformat()}"
            )

            candidates, moratoriums, exceptions = self._fetch(parsed, timeout)
            result = self.aggregator.detect(parsed, candidates, moratoriums, exceptions)

            logger.info(f"Conflict check {check_id} completed in {time.time() - start_time:.3f}s")
            return result

    def check_or_unverified(
        self,
        request: ConflictDetectionInput | ConflictDetectionRequest | Mapping[str, Any],
        timeout_seconds: float | None = None,
    ) -> ConflictCheckOutcome:
        """Run a check, falling back to an explicit unverified outcome on failure.

        Input errors still raise; only evaluation failures are downgraded.
        """
        try:
            result = self.detect_conflicts(request, timeout_seconds)
        except EvaluationFailure as e:
            logger.warning(
                f"Degraded mode: submission proceeds without conflict verification ({e})"
            )
            return ConflictCheckOutcome(
                result=None, verified=False, disclaimer=UNVERIFIED_DISCLAIMER
            )
        return ConflictCheckOutcome(result=result, verified=True)

    def detect_for_project(
        self, project: Project, timeout_seconds: float | None = None
    ) -> ConflictDetectionResult:
        """Re-check an existing project against everything else, excluding itself."""
        request = ConflictDetectionRequest(
            geometry=project.geometry,
            window=project.window,
            exclude_project_id=project.id,
            project_id=project.id,
        )
        return self.detect_conflicts(request, timeout_seconds)

    def detect_batch(
        self, projects: Iterable[Project], timeout_seconds: float | None = None
    ) -> BatchDetectionReport:
        """Check several projects with bounded concurrency.

        Evaluation failures are recorded per project id; other errors propagate.
        """
        projects = list(projects)
        report = BatchDetectionReport()
        if not projects:
            return report

        logger.info(
            f"Batch conflict check: {len(projects)} projects, "
            f"{self.config.max_batch_workers} workers"
        )
        with ThreadPoolExecutor(
            max_workers=self.config.max_batch_workers, thread_name_prefix="conflict-batch"
        ) as executor:
            futures = [
                (project.id, executor.submit(self.detect_for_project, project, timeout_seconds))
                for project in projects
            ]
            for project_id, future in futures:
                try:
                    report.results[project_id] = future.result()
                except EvaluationFailure as e:
                    logger.error(f"Conflict check failed for project {project_id}: {e}")
                    report.failures[project_id] = str(e)

        logger.info(
            f"Batch conflict check done: {len(report.results)} checked, "
            f"{len(report.conflicting_ids)} with conflicts, {len(report.failures)} failed"
        )
        return report

    def _fetch(
        self, request: ConflictDetectionRequest, timeout: float
    ) -> tuple[list[Project], list[Moratorium], list[MoratoriumException]]:
        """Fetch candidates, active moratoria and exceptions concurrently under one deadline.

        On a candidate or moratorium timeout the pending fetches are abandoned and
        nothing partial is returned. The exception lookup fails safe instead.
        """
        project_id = request.requesting_project_id
        deadline = time.monotonic() + timeout
        executor = ThreadPoolExecutor(max_workers=3, thread_name_prefix="conflict-fetch")
        try:
            projects_future = _submit_in_context(
                executor, self.project_source.find_candidates_near, request.geometry
            )
            moratoria_future = _submit_in_context(
                executor,
                self.moratorium_registry.find_active_in_area,
                request.geometry,
                request.window,
            )
            exceptions_future = None
            if project_id is not None:
                exceptions_future = _submit_in_context(
                    executor, _as_list, self.moratorium_registry.find_exceptions, project_id
                )

            try:
                candidates = list(projects_future.result(timeout=_remaining(deadline)))
                moratoriums = list(moratoria_future.result(timeout=_remaining(deadline)))
            except FuturesTimeoutError as e:
                msg = f"Conflict check incomplete: candidate fetch exceeded {timeout:g}s"
                logger.error(msg)
                raise ConflictCheckIncomplete(msg) from e
            except Exception as e:
                msg = f"Conflict check failed while fetching candidates: {e}"
                logger.exception(msg)
                raise EvaluationFailure(msg) from e

            exceptions = self._exceptions_result(exceptions_future, project_id, deadline)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        logger.info(
            f"Fetched {len(candidates)} candidate projects, {len(moratoriums)} moratoria, "
            f"{len(exceptions)} moratorium exceptions"
        )
        return candidates, moratoriums, exceptions

    @staticmethod
    def _exceptions_result(
        future: Future | None, project_id: str | None, deadline: float
    ) -> list[MoratoriumException]:
        """Exception records for the requesting project; a failed or late lookup counts as none."""
        if future is None:
            return []
        try:
            return future.result(timeout=_remaining(deadline))
        except FuturesTimeoutError:
            logger.warning(
                f"Moratorium exception lookup for project {project_id} missed the deadline, "
                f"treating as no exception"
            )
        except Exception as e:
            logger.warning(
                f"Moratorium exception lookup failed for project {project_id}, "
                f"treating as no exception: {e}"
            )
        return []


def _submit_in_context(executor: ThreadPoolExecutor, fn, *args) -> Future:
    ctx = contextvars.copy_context()
    return executor.submit(ctx.run, fn, *args)


def _as_list(fn, *args) -> list:
    return list(fn(*args))


def _remaining(deadline: float) -> float:
    return max(0.0, deadline - time.monotonic())


def _request_errors(error: PydanticValidationError) -> list[ValidationError]:
    errors = []
    for err in error.errors():
        field_name = ".".join(str(part) for part in err["loc"])
        message = err["msg"].removeprefix("Value error, ")
        errors.append(
            ValidationError(
                message=f"{field_name}: {message}" if field_name else message,
                code=f"request_{err['type']}",
            )
        )
    return errors
