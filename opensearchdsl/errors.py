class DSLError(Exception):
    """Base class for errors raised while building or compiling a search."""


class DuplicateNameError(DSLError):
    def __init__(self, name: str) -> None:
        super().__init__(f'aggregation already declared at this level: {name}')
        self.name = name


class MissingFieldError(DSLError):
    def __init__(self, kind: str) -> None:
        super().__init__(f'{kind} aggregation closed without a field')
        self.kind = kind


class InvalidRangeError(DSLError):
    """Raised for a range key without bounds, or a range without keys."""


class CyclicAggregationError(DSLError):
    def __init__(self, path) -> None:
        super().__init__('aggregation contains itself: ' + ' > '.join(path))
        self.path = path


class AggregationTypeError(DSLError):
    """Raised on misuse of a builder: no kind, two kinds, or use after close."""
