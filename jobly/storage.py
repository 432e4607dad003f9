"""
Jobs store: create, read, search, update and delete job rows.

Every write is a single statement with RETURNING, except create, which
checks for an existing title before inserting. The unique constraint on
jobs.title remains the source of truth for that race; a violation raised by
the insert is reported as the same ConflictError as the pre-check.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import IntegrityError

from .database import run_query
from .errors import ConflictError, JoblyError, NotFoundError
from .logger import StructuredLogger, get_logger
from .search import JobSearchCriteria, build_filtered_query
from .sql import JOB_FIELD_MAPPING, sql_for_partial_update

JOB_COLUMNS = 'title, salary, equity, company_handle AS "companyHandle"'


def _format_job(row: Row) -> Dict[str, Any]:
    """Row -> {title, salary, equity, companyHandle}; equity is exchanged as text."""
    job = dict(row._mapping)
    if job.get("equity") is not None:
        job["equity"] = str(job["equity"])
    return job


class JobStore:
    """Data access for the jobs table."""

    def __init__(self, engine: Engine, logger: Optional[StructuredLogger] = None):
        self.engine = engine
        self.logger = logger or get_logger()

    def _execute(self, conn, query: str, values=()):
        self.logger.record_query()
        self.logger.debug("Executing query", query=" ".join(query.split()), params=len(values))
        return run_query(conn, query, values)

    def _fail(self, operation: str, error: JoblyError) -> JoblyError:
        self.logger.record_operation_failure(operation, type(error).__name__)
        self.logger.info(f"{operation} failed: {error.message}", status=error.status)
        return error

    def create(self, job: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a job from data and return the stored row.

        Args:
            job: {title, salary, equity, companyHandle}

        Returns:
            {title, salary, equity, companyHandle}

        Raises:
            ConflictError: If a job with the same title already exists
        """
        self.logger.record_operation("create")
        title = job["title"]
        with self.engine.begin() as conn:
            duplicate_check = self._execute(
                conn,
                """SELECT title
                   FROM jobs
                   WHERE title = $1""",
                [title],
            ).first()

        if duplicate_check is not None:
            raise self._fail("create", ConflictError(f"Duplicate job: {title}"))

        try:
            with self.engine.begin() as conn:
                row = self._execute(
                    conn,
                    f"""INSERT INTO jobs
                        (title, salary, equity, company_handle)
                        VALUES ($1, $2, $3, $4)
                        RETURNING {JOB_COLUMNS}""",
                    [title, job.get("salary"), job.get("equity"), job["companyHandle"]],
                ).one()
        except IntegrityError:
            # Lost the race against a concurrent create, or a different
            # constraint (e.g. unknown company) that must surface unchanged.
            if self._title_exists(title):
                raise self._fail("create", ConflictError(f"Duplicate job: {title}"))
            raise

        self.logger.info("Created job", title=title)
        return _format_job(row)

    def _title_exists(self, title: str) -> bool:
        with self.engine.begin() as conn:
            return self._execute(
                conn, "SELECT title FROM jobs WHERE title = $1", [title]
            ).first() is not None

    def find_all(self) -> List[Dict[str, Any]]:
        """
        Find all jobs, ordered by title. An empty table yields [].

        Returns:
            [{title, salary, equity, companyHandle}, ...]
        """
        self.logger.record_operation("find_all")
        with self.engine.begin() as conn:
            rows = self._execute(
                conn,
                f"""SELECT {JOB_COLUMNS}
                    FROM jobs
                    ORDER BY title""",
            ).all()
        return [_format_job(row) for row in rows]

    def get(self, title: str) -> Dict[str, Any]:
        """
        Given an exact title, return the job.

        Raises:
            NotFoundError: If no job has that title
        """
        self.logger.record_operation("get")
        with self.engine.begin() as conn:
            row = self._execute(
                conn,
                f"""SELECT {JOB_COLUMNS}
                    FROM jobs
                    WHERE title = $1""",
                [title],
            ).first()

        if row is None:
            raise self._fail("get", NotFoundError(f"No job: {title}"))
        return _format_job(row)

    def filter(self, criteria: JobSearchCriteria) -> List[Dict[str, Any]]:
        """
        Return jobs matching every supplied criterion.

        Unlike find_all, an empty result is an error here.

        Raises:
            NotFoundError: If no job matches
        """
        self.logger.record_operation("filter")
        query, values = build_filtered_query(f"SELECT {JOB_COLUMNS} FROM jobs", criteria)
        with self.engine.begin() as conn:
            rows = self._execute(conn, query, values).all()

        if not rows:
            raise self._fail("filter", NotFoundError("No jobs found."))
        return [_format_job(row) for row in rows]

    def update(self, title: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Partially update a job: only fields present in data change.

        Args:
            title: Title of the job to update
            data: Any of {salary, equity}

        Returns:
            {title, salary, equity, companyHandle}

        Raises:
            BadRequestError: If data is empty
            NotFoundError: If no job has that title
        """
        self.logger.record_operation("update")
        try:
            fragment = sql_for_partial_update(data, JOB_FIELD_MAPPING)
        except JoblyError as e:
            raise self._fail("update", e)

        title_var_idx = f"${len(fragment.values) + 1}"
        query = f"""UPDATE jobs
                    SET {fragment.set_cols}
                    WHERE title = {title_var_idx}
                    RETURNING {JOB_COLUMNS}"""
        with self.engine.begin() as conn:
            row = self._execute(conn, query, [*fragment.values, title]).first()

        if row is None:
            raise self._fail("update", NotFoundError(f"No job: {title}"))
        self.logger.info("Updated job", title=title, fields=list(data))
        return _format_job(row)

    def remove(self, title: str) -> None:
        """
        Delete the job with the given title.

        Raises:
            NotFoundError: If no job has that title
        """
        self.logger.record_operation("remove")
        with self.engine.begin() as conn:
            row = self._execute(
                conn,
                """DELETE
                   FROM jobs
                   WHERE title = $1
                   RETURNING title""",
                [title],
            ).first()

        if row is None:
            raise self._fail("remove", NotFoundError(f"No job: {title}"))
        self.logger.info("Removed job", title=title)
