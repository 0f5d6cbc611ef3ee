"""
Block-style builders for aggregation trees.

A declaration hands a fresh :class:`AggregationBuilder` to a caller supplied
configure function. The function picks one aggregation kind and configures
it; when it returns the builder is closed and the finished node is attached
under its name::

    search.aggregation('clicks', lambda a: a.range('clicks')
                       .key('low', to=10)
                       .key('mid', from_=10, to=20)
                       .aggregation('tags', lambda t: t.terms('tags')))
"""
from typing import Any, Callable, List, Optional, Union

from opensearchdsl.aggs import METRICS, Aggregation, Number, Range, RangeKey, Terms
from opensearchdsl.errors import AggregationTypeError, MissingFieldError
from opensearchdsl.registry import AggregationRegistry

AggregationSpec = Union[Aggregation, Callable[['AggregationBuilder'], Any]]


def build_aggregation(spec: AggregationSpec) -> Aggregation:
    """
    :arg spec: a finished node, or a function configuring an
        :class:`AggregationBuilder`
    """
    if isinstance(spec, Aggregation):
        return spec
    if callable(spec):
        builder = AggregationBuilder()
        spec(builder)
        return builder.close()
    raise AggregationTypeError(f'expected an aggregation or a configure function, got {spec!r}')


class Builder:
    def __init__(self) -> None:
        self._closed = False

    def _check_open(self):
        if self._closed:
            raise AggregationTypeError(f'{type(self).__name__} is already closed')

    def _build(self) -> Aggregation:
        raise NotImplementedError

    def close(self) -> Aggregation:
        self._check_open()
        node = self._build()
        self._closed = True
        return node


class FieldBuilder(Builder):
    def __init__(self, kind: str, field: Optional[str] = None) -> None:
        super().__init__()
        self.kind = kind
        self._field: Optional[str] = None
        if field is not None:
            self.field(field)

    def field(self, name: str):
        self._check_open()
        if self._field is not None:
            raise AggregationTypeError(f'{self.kind} field already set to {self._field!r}')
        self._field = name
        return self

    def _require_field(self) -> str:
        if self._field is None:
            raise MissingFieldError(self.kind)
        return self._field


class MetricBuilder(FieldBuilder):
    def _build(self):
        return METRICS[self.kind](self._require_field())


class BucketBuilder(FieldBuilder):
    def __init__(self, kind: str, field: Optional[str] = None) -> None:
        super().__init__(kind, field)
        self._aggregations = AggregationRegistry()

    def aggregation(self, name: str, spec: AggregationSpec):
        self._check_open()
        self._aggregations.declare(name, build_aggregation(spec))
        return self


class TermsBuilder(BucketBuilder):
    def __init__(self, field: Optional[str] = None, size: Optional[int] = None) -> None:
        super().__init__('terms', field)
        self._size = size

    def size(self, size: int):
        self._check_open()
        self._size = size
        return self

    def _build(self):
        return Terms(self._require_field(), size=self._size, aggregations=dict(self._aggregations.items()))


class RangeBuilder(BucketBuilder):
    def __init__(self, field: Optional[str] = None, keyed: bool = False) -> None:
        super().__init__('range', field)
        self._keys: List[RangeKey] = []
        self._keyed = keyed

    def key(self, label: str, from_: Optional[Number] = None, to: Optional[Number] = None):
        self._check_open()
        self._keys.append(RangeKey(key=label, from_=from_, to=to))
        return self

    def keyed(self, keyed: bool = True):
        self._check_open()
        self._keyed = keyed
        return self

    def _build(self):
        return Range(
            self._require_field(),
            self._keys,
            aggregations=dict(self._aggregations.items()),
            keyed=self._keyed,
        )


class AggregationBuilder(Builder):
    """Picks the kind of one declared aggregation; exactly one kind per declaration."""

    def __init__(self) -> None:
        super().__init__()
        self._inner: Optional[FieldBuilder] = None

    def _select(self, inner: FieldBuilder):
        self._check_open()
        if self._inner is not None:
            raise AggregationTypeError(f'aggregation already declared as {self._inner.kind}')
        self._inner = inner
        return inner

    def metric(self, kind: str, field: Optional[str] = None) -> MetricBuilder:
        if kind not in METRICS:
            raise AggregationTypeError(f'unknown metric aggregation: {kind}')
        return self._select(MetricBuilder(kind, field))

    def min(self, field: Optional[str] = None):
        return self.metric('min', field)

    def max(self, field: Optional[str] = None):
        return self.metric('max', field)

    def sum(self, field: Optional[str] = None):
        return self.metric('sum', field)

    def avg(self, field: Optional[str] = None):
        return self.metric('avg', field)

    def stats(self, field: Optional[str] = None):
        return self.metric('stats', field)

    def cardinality(self, field: Optional[str] = None):
        return self.metric('cardinality', field)

    def value_count(self, field: Optional[str] = None):
        return self.metric('value_count', field)

    def terms(self, field: Optional[str] = None, size: Optional[int] = None) -> TermsBuilder:
        return self._select(TermsBuilder(field, size))

    def range(self, field: Optional[str] = None, keyed: bool = False) -> RangeBuilder:
        return self._select(RangeBuilder(field, keyed))

    def _build(self):
        if self._inner is None:
            raise AggregationTypeError('aggregation declares no kind')
        return self._inner.close()
