"""
SQL helpers shared by the store.

Column names only ever come from a static field mapping or from keys the
calling code controls; values always travel as positional bind parameters.
"""

from types import MappingProxyType
from typing import Any, Mapping, NamedTuple

from .errors import BadRequestError


class UpdateFragment(NamedTuple):
    """SET clauses plus the values bound to $1..$n, in the same order."""

    set_clauses: list[str]
    values: list[Any]

    @property
    def set_cols(self) -> str:
        return ", ".join(self.set_clauses)


# Application field name -> jobs column. title and companyHandle are not
# updatable: title is the lookup key and the company is fixed at creation.
JOB_FIELD_MAPPING: Mapping[str, str] = MappingProxyType({
    "salary": "salary",
    "equity": "equity",
})


def sql_for_partial_update(data_to_update: Mapping[str, Any], js_to_sql: Mapping[str, str]) -> UpdateFragment:
    """
    Turn a partial set of changed fields into the SET part of an UPDATE.

    Args:
        data_to_update: Changed fields, e.g. {"firstName": "Aliya", "age": 32}
        js_to_sql: Field name -> column name, e.g. {"firstName": "first_name"}.
            Fields missing from the mapping are used as the column name.

    Returns:
        UpdateFragment(['"first_name"=$1', '"age"=$2'], ["Aliya", 32]);
        ``set_cols`` joins the clauses with ", "

    Raises:
        BadRequestError: If data_to_update is empty
    """
    keys = list(data_to_update)
    if not keys:
        raise BadRequestError("No data")

    # {"firstName": "Aliya", "age": 32} => ['"first_name"=$1', '"age"=$2']
    cols = [f'"{js_to_sql.get(key, key)}"=${idx}' for idx, key in enumerate(keys, start=1)]

    return UpdateFragment(
        set_clauses=cols,
        values=[data_to_update[key] for key in keys],
    )
