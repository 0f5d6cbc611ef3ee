import abc
from datetime import date, datetime
from enum import Enum
import logging
from typing import Any, Callable, Dict, List, Tuple


class Expr(abc.ABC):
    @abc.abstractmethod
    def compile(self) -> dict:
        ...


class FieldExpr(Expr):
    """Single field clause of the form ``{op: {field: value}}``."""

    op: str

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value

    def compile(self):
        return {
            self.op: {
                self.field: self.value,
            }
        }


class MatchPhrase(FieldExpr):
    op = 'match_phrase'


class MatchPhrasePrefix(FieldExpr):
    op = 'match_phrase_prefix'


class Wildcard(FieldExpr):
    op = 'wildcard'


class RegExp(FieldExpr):
    op = 'regexp'


class Contains(Expr):
    def __init__(self, field: str, values: list, min_match: int = 1):
        self.field = field
        self.values = values
        self.min_match = min_match

    def compile(self):
        return {
            'bool': {
                'should': [MatchPhrase(self.field, v).compile() for v in self.values],
                'minimum_should_match': self.min_match,
            }
        }


def _bound(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class Range(Expr):
    def __init__(self, field: str, interval: Tuple[Any, Any], *, left_open: bool = False, right_open: bool = False):
        self.field = field
        self.interval = interval
        self.left_open = left_open
        self.right_open = right_open

    def compile(self):
        left, right = map(_bound, self.interval)

        bounds = {}
        if left is not None:
            bounds['gt' if self.left_open else 'gte'] = left
        if right is not None:
            bounds['lt' if self.right_open else 'lte'] = right

        return {
            'range': {
                self.field: bounds,
            }
        }


class Operator(Enum):
    PREFIX = '__prefix'
    REGEXP = '__regexp'
    CONTAINS = '__contains'
    GTE = '__gte'
    GT = '__gt'
    LTE = '__lte'
    LT = '__lt'


OPERATOR_FUNCTIONS: Dict[Operator, Callable[[str, Any], Expr]] = {
    Operator.CONTAINS: lambda field, value: Contains(field, value),
    Operator.PREFIX: lambda field, value: MatchPhrasePrefix(field, value),
    Operator.REGEXP: lambda field, value: RegExp(field, value),
    Operator.GTE: lambda field, value: Range(field, (value, None)),
    Operator.GT: lambda field, value: Range(field, (value, None), left_open=True),
    Operator.LTE: lambda field, value: Range(field, (None, value)),
    Operator.LT: lambda field, value: Range(field, (None, value), right_open=True),
}


def parse_clause(raw_field: str, value) -> Expr:
    """
    Turn a keyword argument such as ``clicks__gte=10`` into a clause.
    A field without a known suffix becomes a phrase match.
    """
    for op in Operator:
        if raw_field.endswith(op.value):
            field = raw_field[:-len(op.value)]
            logging.debug('parse field: %s, raw: %s', field, raw_field)
            return OPERATOR_FUNCTIONS[op](field, value)

    return MatchPhrase(raw_field, value)


def parse_clauses(**kwargs) -> List[Expr]:
    return [parse_clause(k, v) for k, v in kwargs.items()]


class BoolQuery(Expr):
    def __init__(self):
        self.filters: List[Expr] = []
        self.excludes: List[Expr] = []
        self.unions: List[Expr] = []

    def __bool__(self):
        return bool(self.filters or self.excludes or self.unions)

    def compile(self):
        return {
            'bool': {
                'must_not': [e.compile() for e in self.excludes],
                'should': [e.compile() for e in self.unions],
                'filter': [e.compile() for e in self.filters],
                'minimum_should_match': 1 if self.unions else 0,
            }
        }

    def filter(self, *args: Expr, **kwargs):
        self.filters.extend(args)
        self.filters.extend(parse_clauses(**kwargs))
        return self

    def union(self, *args: Expr, **kwargs):
        self.unions.extend(args)
        self.unions.extend(parse_clauses(**kwargs))
        return self

    def exclude(self, *args: Expr, **kwargs):
        self.excludes.extend(args)
        self.excludes.extend(parse_clauses(**kwargs))
        return self
