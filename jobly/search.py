from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class JobSearchCriteria:
    """
    Optional job search filters; any combination (including none) is allowed.
    title: case-insensitive substring of the job title.
    min_salary: lowest acceptable salary (inclusive).
    has_equity: True limits results to jobs with equity > 0; False means no filter.
    """

    title: str | None = None
    min_salary: int | None = None
    has_equity: bool | None = None

    @classmethod
    def from_query(cls, params: Mapping[str, Any]) -> "JobSearchCriteria":
        """Build criteria from already-validated query string params (title, minSalary, hasEquity)."""
        return cls(
            title=params.get("title"),
            min_salary=params.get("minSalary"),
            has_equity=params.get("hasEquity"),
        )


def build_filtered_query(base_query: str, criteria: JobSearchCriteria) -> tuple[str, list[Any]]:
    """
    Returns (query, values) with a WHERE clause for every supplied criterion.
    Predicates are added in a fixed order (title, min_salary, has_equity) so the
    $n placeholders line up with values for identical criteria shapes.
    has_equity contributes a static predicate and no bound value.
    """
    values: list[Any] = []
    predicates: list[str] = []

    if criteria.title is not None:
        values.append(f"%{criteria.title}%")
        predicates.append(f"title ILIKE ${len(values)}")

    if criteria.min_salary is not None:
        values.append(criteria.min_salary)
        predicates.append(f"salary >= ${len(values)}")

    if criteria.has_equity is True:
        predicates.append("equity > 0")

    if predicates:
        return base_query + " WHERE " + " AND ".join(predicates), values
    return base_query, values
