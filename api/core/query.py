"""
Turn raw list-endpoint query parameters into a `ListQuery`.

`sort_by` is not checked against a list of columns here. It is quoted and
handed to Postgres, whose undefined-column error is classified as a 400.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from .errors import ValidationError

ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class ListQueryConfig:
    default_sort: str
    filter_fields: frozenset[str] = frozenset()
    default_order: str = "desc"


@dataclass(frozen=True)
class ListQuery:
    sort_by: str
    order: str
    filters: dict[str, str] = field(default_factory=dict)

    @property
    def direction(self) -> str:
        return "ASC" if self.order == "asc" else "DESC"


def interpret(params: Mapping[str, str], config: ListQueryConfig) -> ListQuery:
    sort_by = (params.get("sort_by") or "").strip() or config.default_sort

    order = params.get("order")
    if order is None or order == "":
        order = config.default_order
    elif order not in ORDERS:
        raise ValidationError()

    filters = {
        key: value
        for key, value in params.items()
        if key in config.filter_fields and value != ""
    }
    return ListQuery(sort_by=sort_by, order=order, filters=filters)
