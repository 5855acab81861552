"""
react-admin "simple REST" list conventions.

The admin client sends ``sort=["field","ASC"]``, ``range=[0,24]`` and
``filter={"q":"...","idUser":3}`` as JSON strings in the query string and reads
the total from ``Content-Range: <resource> <start>-<end>/<total>``.
Field names arrive camelCased and are mapped to column names through the
resource's read schema, so only known columns ever reach SQL.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from fastapi import Query
from pydantic import BaseModel

from src.admin_api.error_handlers import UnprocessableEntity

SEARCH_KEY = "q"
_SCALARS = (str, int, float, bool)


@dataclass
class ListQuery:
    sort_column: str = "id"
    sort_order: str = "ASC"
    start: int = 0
    end: Optional[int] = None
    filters: Dict[str, Any] = field(default_factory=dict)
    search: Optional[str] = None

    @property
    def limit(self) -> Optional[int]:
        if self.end is None:
            return None
        return self.end - self.start + 1


@dataclass
class RawListParams:
    sort: Optional[str] = None
    range: Optional[str] = None
    filter: Optional[str] = None


# PUBLIC_INTERFACE
def list_params(
    sort: Optional[str] = Query(None, description='Sort as JSON, e.g. ["id","ASC"]'),
    range_: Optional[str] = Query(None, alias="range", description="Inclusive range as JSON, e.g. [0,24]"),
    filter_: Optional[str] = Query(None, alias="filter", description='Filters as JSON, e.g. {"q":"red"}'),
) -> RawListParams:
    """Dependency collecting the raw react-admin list parameters."""
    return RawListParams(sort=sort, range=range_, filter=filter_)


def _invalid(message: str, param: str) -> UnprocessableEntity:
    return UnprocessableEntity(message, field=param)


def _load_json(raw: str, name: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        raise _invalid(f"'{name}' must be valid JSON", name)


# PUBLIC_INTERFACE
def field_columns(schema: Type[BaseModel]) -> Dict[str, str]:
    """Map every accepted field name (alias and attribute name) to its column."""
    columns: Dict[str, str] = {}
    for name, info in schema.model_fields.items():
        columns[name] = name
        if info.alias:
            columns[info.alias] = name
    return columns


def _column_for(name: Any, columns: Dict[str, str], param: str) -> str:
    if not isinstance(name, str) or name not in columns:
        raise _invalid(f"Unknown field '{name}'", param)
    return columns[name]


def _parse_sort(raw: str, columns: Dict[str, str], query: ListQuery) -> None:
    text = raw.strip()
    if text.startswith("["):
        value = _load_json(text, "sort")
        if not isinstance(value, list) or not value or len(value) > 2:
            raise _invalid("'sort' must look like [\"field\", \"ASC\"]", "sort")
        query.sort_column = _column_for(value[0], columns, "sort")
        if len(value) == 2:
            order = str(value[1]).upper()
            if order not in ("ASC", "DESC"):
                raise _invalid("Sort order must be ASC or DESC", "sort")
            query.sort_order = order
    elif text:
        query.sort_column = _column_for(text, columns, "sort")


def _parse_range(raw: str, query: ListQuery) -> None:
    value = _load_json(raw, "range")
    if (
        not isinstance(value, list)
        or len(value) != 2
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in value)
    ):
        raise _invalid("'range' must look like [start, end]", "range")
    start, end = value
    if start < 0 or end < start:
        raise _invalid("'range' must satisfy 0 <= start <= end", "range")
    query.start = start
    query.end = end


def _is_filter_value(value: Any) -> bool:
    # Only values the database driver can bind: scalars, null, or lists of scalars.
    if value is None or isinstance(value, _SCALARS):
        return True
    return isinstance(value, list) and all(isinstance(v, _SCALARS) for v in value)


def _parse_filter(raw: str, columns: Dict[str, str], query: ListQuery) -> None:
    value = _load_json(raw, "filter")
    if not isinstance(value, dict):
        raise _invalid("'filter' must be a JSON object", "filter")
    for name, filter_value in value.items():
        if name == SEARCH_KEY:
            if filter_value not in (None, ""):
                query.search = str(filter_value)
            continue
        column = _column_for(name, columns, "filter")
        if not _is_filter_value(filter_value):
            raise _invalid(f"Filter '{name}' must be a value, null or a list of values", "filter")
        query.filters[column] = filter_value


# PUBLIC_INTERFACE
def parse_list_query(params: RawListParams, schema: Type[BaseModel]) -> ListQuery:
    """Validate raw list parameters against a read schema; invalid input raises 422."""
    columns = field_columns(schema)
    query = ListQuery()
    if params.sort:
        _parse_sort(params.sort, columns, query)
    if params.range:
        _parse_range(params.range, query)
    if params.filter:
        _parse_filter(params.filter, columns, query)
    return query


# PUBLIC_INTERFACE
def content_range(resource: str, start: int, rows: List[Any], total: int) -> str:
    """Build the Content-Range header value react-admin reads the total from."""
    end = start + len(rows) - 1 if rows else start
    return f"{resource} {start}-{end}/{total}"
