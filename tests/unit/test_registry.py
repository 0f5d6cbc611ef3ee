import pytest

from opensearchdsl.aggs import Max, Min, Terms
from opensearchdsl.errors import CyclicAggregationError, DuplicateNameError
from opensearchdsl.registry import AggregationRegistry


def test_declare_keeps_declaration_order():
    registry = AggregationRegistry()
    registry.declare('b', Min('clicks')).declare('a', Max('clicks'))

    assert list(registry) == ['b', 'a']
    assert list(registry.compile()) == ['b', 'a']
    assert len(registry) == 2
    assert 'a' in registry
    assert isinstance(registry['b'], Min)


def test_duplicate_sibling_name_fails():
    registry = AggregationRegistry({'clicks': Min('clicks')})

    with pytest.raises(DuplicateNameError, match='clicks'):
        registry.declare('clicks', Max('clicks'))

    assert isinstance(registry['clicks'], Min)


def test_same_name_on_different_levels_is_allowed():
    registry = AggregationRegistry()
    registry.declare('tags', Terms('tags', aggregations={'tags': Terms('tags')}))

    assert registry.compile() == {
        'tags': {
            'terms': {'field': 'tags'},
            'aggregations': {'tags': {'terms': {'field': 'tags'}}},
        }
    }


def test_empty_registry_compiles_to_empty_mapping():
    assert AggregationRegistry().compile() == {}
    assert not AggregationRegistry()


def test_cycle_is_reported_with_path():
    loop = Terms('tags')
    loop.nested('again', loop)
    registry = AggregationRegistry({'root': loop})

    with pytest.raises(CyclicAggregationError) as exc_info:
        registry.compile()

    assert exc_info.value.path == ['root', 'again']
