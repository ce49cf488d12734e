# delivery_analytics/query/ranking.py
"""Window-function helpers shared by every ranked or look-back report.

Tie handling:

- dense rank: tied rows share a rank and the next distinct value takes the
  following integer (1, 1, 2).
- standard rank: tied rows share a rank and the following ranks skip by the
  number of ties (1, 1, 3).

Both are evaluated by the database, so a report keeps set semantics instead
of re-ranking rows in Python.
"""

import enum
from typing import Optional, Sequence, Union

from sqlalchemy import func, select
from sqlalchemy.sql import ColumnElement, Select

OrderSpec = Union[ColumnElement, Sequence[ColumnElement]]


class RankMethod(str, enum.Enum):
    """Ranking flavours supported by `rank_over`."""

    DENSE = "dense"
    STANDARD = "standard"


def rank_over(
    order_by: OrderSpec,
    partition_by: Optional[OrderSpec] = None,
    method: RankMethod = RankMethod.DENSE,
) -> ColumnElement:
    """Build `DENSE_RANK()` or `RANK()` over the given window."""
    rank_func = func.dense_rank() if method == RankMethod.DENSE else func.rank()
    return rank_func.over(partition_by=partition_by, order_by=order_by)


def dense_rank(order_by: OrderSpec, partition_by: Optional[OrderSpec] = None) -> ColumnElement:
    return rank_over(order_by, partition_by, RankMethod.DENSE)


def standard_rank(order_by: OrderSpec, partition_by: Optional[OrderSpec] = None) -> ColumnElement:
    return rank_over(order_by, partition_by, RankMethod.STANDARD)


def top_ranked(
    ranked: Select,
    rank_column: str = "rank",
    max_rank: int = 1,
    columns: Optional[Sequence[str]] = None,
) -> Select:
    """
    Keep rows of a ranked statement whose rank is at most `max_rank`.

    Window functions cannot appear in WHERE, so the ranked statement is wrapped
    in a subquery and filtered from outside.

    Args:
        ranked: statement carrying a labelled rank column
        rank_column: label of the rank column
        max_rank: highest rank to keep (inclusive)
        columns: labels to project; defaults to every column of `ranked`

    Returns:
        Select over the wrapped subquery; callers can order it through
        `selected_columns`.
    """
    subquery = ranked.subquery()
    if columns:
        projection = [subquery.c[name] for name in columns]
    else:
        projection = list(subquery.c)
    return select(*projection).where(subquery.c[rank_column] <= max_rank)


def previous_row(
    expression: ColumnElement,
    order_by: OrderSpec,
    partition_by: Optional[OrderSpec] = None,
) -> ColumnElement:
    """
    Value of `expression` on the preceding row of the window (`LAG(expr, 1)`).

    "Previous" is positional: a month with no activity has no row, so the
    look-back silently skips it. The first row of each partition gets NULL.
    """
    return func.lag(expression, 1).over(partition_by=partition_by, order_by=order_by)
