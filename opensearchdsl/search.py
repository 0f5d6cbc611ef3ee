from typing import Any, Callable, Dict, Optional

from opensearchdsl.builder import AggregationSpec, build_aggregation
from opensearchdsl.query import BoolQuery, Expr
from opensearchdsl.registry import AggregationRegistry


class Search:
    """
    Top level search request: query clauses plus named aggregations.

    ``compile()`` returns the request body as plain dicts and lists, ready
    to be passed unchanged as ``body`` to the client.
    """

    def __init__(self) -> None:
        self.query = BoolQuery()
        self.aggregations = AggregationRegistry()
        self._size: Optional[int] = None

    def aggregation(self, name: str, spec: AggregationSpec):
        self.aggregations.declare(name, build_aggregation(spec))
        return self

    def filter(self, *args: Expr, **kwargs):
        self.query.filter(*args, **kwargs)
        return self

    def union(self, *args: Expr, **kwargs):
        self.query.union(*args, **kwargs)
        return self

    def exclude(self, *args: Expr, **kwargs):
        self.query.exclude(*args, **kwargs)
        return self

    def size(self, size: int):
        self._size = size
        return self

    def compile(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if self.query:
            body['query'] = self.query.compile()
        if self.aggregations:
            body['aggregations'] = self.aggregations.compile()
        if self._size is not None:
            body['size'] = self._size
        return body


def search(configure: Optional[Callable[[Search], Any]] = None) -> Search:
    s = Search()
    if configure is not None:
        configure(s)
    return s
