import abc
from collections import Counter
import logging
from typing import Any, ClassVar, Dict, Mapping, Optional, Sequence, Type, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from opensearchdsl.errors import InvalidRangeError
from opensearchdsl.registry import AggregationRegistry, Path

Number = Union[int, float]


class Aggregation(abc.ABC):
    kind: ClassVar[str]

    def __init__(self, field: str) -> None:
        self.field = field

    @abc.abstractmethod
    def compile(self, path: Path = ()) -> dict:
        ...

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.field!r})'


class MetricAggregation(Aggregation):
    def compile(self, path: Path = ()):
        return {
            self.kind: {
                'field': self.field,
            }
        }


class Min(MetricAggregation):
    kind = 'min'


class Max(MetricAggregation):
    kind = 'max'


class Sum(MetricAggregation):
    kind = 'sum'


class Avg(MetricAggregation):
    kind = 'avg'


class Stats(MetricAggregation):
    kind = 'stats'


class Cardinality(MetricAggregation):
    kind = 'cardinality'


class ValueCount(MetricAggregation):
    kind = 'value_count'


METRICS: Dict[str, Type[MetricAggregation]] = {
    cls.kind: cls for cls in (Min, Max, Sum, Avg, Stats, Cardinality, ValueCount)
}


class BucketAggregation(Aggregation):
    """
    Aggregation that splits documents into buckets.

    Child aggregations are compiled under ``aggregations`` and run inside
    every bucket. The key is left out when there are no children.
    """

    def __init__(self, field: str, aggregations: Optional[Mapping[str, Aggregation]] = None) -> None:
        super().__init__(field)
        self.aggregations = AggregationRegistry(aggregations)

    @abc.abstractmethod
    def params(self) -> dict:
        ...

    def nested(self, name: str, child: Aggregation):
        self.aggregations.declare(name, child)
        return self

    def compile(self, path: Path = ()):
        doc: Dict[str, Any] = {self.kind: self.params()}
        if self.aggregations:
            doc['aggregations'] = self.aggregations.compile(path)
        return doc


class Terms(BucketAggregation):
    kind = 'terms'

    def __init__(
        self,
        field: str,
        size: Optional[int] = None,
        aggregations: Optional[Mapping[str, Aggregation]] = None,
    ) -> None:
        super().__init__(field, aggregations)
        self.size = size

    def params(self):
        params: Dict[str, Any] = {'field': self.field}
        if self.size is not None:
            params['size'] = self.size
        return params


class RangeKey(BaseModel):
    """A named sub-range of a range aggregation; at least one bound is required."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str
    from_: Optional[Number] = Field(default=None, alias='from')
    to: Optional[Number] = None

    @model_validator(mode='after')
    def check_bounds(self):
        if self.from_ is None and self.to is None:
            raise InvalidRangeError(f'range key {self.key!r} needs at least one of from/to')
        return self

    def compile(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Range(BucketAggregation):
    kind = 'range'

    def __init__(
        self,
        field: str,
        keys: Sequence[Union[RangeKey, Mapping[str, Any]]],
        aggregations: Optional[Mapping[str, Aggregation]] = None,
        keyed: bool = False,
    ) -> None:
        super().__init__(field, aggregations)
        if not keys:
            raise InvalidRangeError(f'range aggregation on {field!r} has no keys')
        self.keys = tuple(k if isinstance(k, RangeKey) else RangeKey.model_validate(k) for k in keys)
        self.keyed = keyed

        counts = Counter(k.key for k in self.keys)
        for label, count in counts.items():
            if count > 1:
                logging.warning('range on %s declares key %s %d times', field, label, count)

    def params(self):
        params: Dict[str, Any] = {
            'field': self.field,
            'ranges': [k.compile() for k in self.keys],
        }
        if self.keyed:
            params['keyed'] = True
        return params
