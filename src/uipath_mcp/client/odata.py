"""OData query construction and the $count/$orderby fallback.

Some Orchestrator deployments reject $count or $orderby on certain
collections (typically when combined). Listings that are known to hit this
issue the full query first and, only when the server reports invalid query
options, retry once with the offending options removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from uipath_mcp.client.executor import RequestExecutor
from uipath_mcp.exceptions import ApiError

logger = logging.getLogger(__name__)


def quote_literal(value: str) -> str:
    """Quote a string for an OData ``eq`` predicate, doubling single quotes."""
    return "'" + value.replace("'", "''") + "'"


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return quote_literal(str(value))


class ODataQuery:
    """Collects paging, ordering, counting and filter options for one listing."""

    def __init__(
        self,
        top: int | None = None,
        skip: int | None = None,
        order_by: str | None = None,
        count: bool = False,
    ) -> None:
        self.top = top
        self.skip = skip
        self.order_by = order_by
        self.count = count
        self.filters: list[str] = []

    def where(self, expression: str) -> ODataQuery:
        self.filters.append(expression)
        return self

    def where_eq(self, field: str, value: Any) -> ODataQuery:
        """Add ``field eq value``; strings are quoted, bools/numbers are not."""
        return self.where(f"{field} eq {format_value(value)}")

    def where_ge(self, field: str, value: str) -> ODataQuery:
        return self.where(f"{field} ge {value}")

    def where_le(self, field: str, value: str) -> ODataQuery:
        return self.where(f"{field} le {value}")

    @property
    def filter_expression(self) -> str | None:
        return " and ".join(self.filters) if self.filters else None

    def to_params(
        self,
        *,
        include_count: bool = True,
        include_order: bool = True,
    ) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.top is not None:
            params["$top"] = str(self.top)
        if self.skip is not None:
            params["$skip"] = str(self.skip)
        if include_order and self.order_by:
            params["$orderby"] = self.order_by
        if include_count and self.count:
            params["$count"] = "true"
        if self.filter_expression:
            params["$filter"] = self.filter_expression
        return params


@dataclass(frozen=True)
class QueryFallback:
    """What to drop on the single retry after an invalid-options rejection.

    Attributes:
        drop_count: Retry without $count.
        drop_order: Retry without $orderby.
        count_page: Report the retried page's length as the total instead
            of leaving it unknown.
    """

    drop_count: bool
    drop_order: bool
    count_page: bool = False


# Queue items and jobs: total becomes unknown after the retry
DROP_COUNT_AND_ORDER = QueryFallback(drop_count=True, drop_order=True)
# Sessions, assets and schedules keep their ordering
DROP_COUNT = QueryFallback(drop_count=True, drop_order=False, count_page=True)
# Audit logs
DROP_COUNT_AND_ORDER_COUNT_PAGE = QueryFallback(drop_count=True, drop_order=True, count_page=True)
# Faulted jobs never ask for a count
DROP_ORDER = QueryFallback(drop_count=False, drop_order=True)


async def fetch_collection(
    executor: RequestExecutor,
    path: str,
    query: ODataQuery,
    *,
    folder_id: int | None = None,
    fallback: QueryFallback | None = None,
) -> tuple[list[dict[str, Any]], int | None]:
    """GET an OData collection, retrying once per ``fallback`` if rejected.

    Returns:
        The raw ``value`` array and the total count (None when unknown)

    Raises:
        ApiError: For any failure other than an invalid-options rejection on
            a listing with a fallback, or if the retry fails too
    """
    try:
        data = await executor.execute("GET", path, query.to_params(), folder_id=folder_id)
    except ApiError as e:
        if fallback is None or not e.invalid_query_options:
            raise
        logger.warning(
            f"{path} rejected query options, retrying "
            f"(drop_count={fallback.drop_count}, drop_order={fallback.drop_order})"
        )
        params = query.to_params(
            include_count=not fallback.drop_count,
            include_order=not fallback.drop_order,
        )
        data = await executor.execute("GET", path, params, folder_id=folder_id)
        items = (data or {}).get("value", [])
        if fallback.count_page:
            return items, len(items)
        return items, (data or {}).get("@odata.count")

    data = data or {}
    return data.get("value", []), data.get("@odata.count")
