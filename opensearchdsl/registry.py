import logging
from typing import TYPE_CHECKING, Dict, Iterator, Mapping, Optional, Tuple

from opensearchdsl.errors import CyclicAggregationError, DuplicateNameError

if TYPE_CHECKING:
    from opensearchdsl.aggs import Aggregation

# (name, node) pairs from the root down to the registry being compiled
Path = Tuple[Tuple[str, 'Aggregation'], ...]


class AggregationRegistry:
    """
    Ordered mapping of aggregation name to node for one nesting level.

    Names only have to be unique among siblings; a child registry may reuse
    any name declared above it.
    """

    def __init__(self, aggregations: Optional[Mapping[str, 'Aggregation']] = None) -> None:
        self._nodes: Dict[str, 'Aggregation'] = {}
        for name, node in (aggregations or {}).items():
            self.declare(name, node)

    def declare(self, name: str, node: 'Aggregation'):
        if name in self._nodes:
            raise DuplicateNameError(name)
        logging.debug('declare aggregation: %s, kind: %s', name, node.kind)
        self._nodes[name] = node
        return self

    def compile(self, path: Path = ()) -> Dict[str, dict]:
        doc = {}
        for name, node in self._nodes.items():
            if any(node is ancestor for _, ancestor in path):
                raise CyclicAggregationError([n for n, _ in path] + [name])
            doc[name] = node.compile(path + ((name, node),))
        return doc

    def items(self):
        return self._nodes.items()

    def __getitem__(self, name: str) -> 'Aggregation':
        return self._nodes[name]

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f'AggregationRegistry({list(self._nodes)!r})'
