from opensearchdsl.search import Search
from opensearchdsl.utils import parse_aggregations


def _search():
    return (
        Search()
        .aggregation('clicks', lambda a: a.range('clicks', keyed=True)
                     .key('low', to=10)
                     .key('mid', from_=10, to=20)
                     .aggregation('tags', lambda t: t.terms('tags')))
        .aggregation('tags', lambda a: a.terms('tags'))
        .aggregation('min_clicks', lambda a: a.min('clicks'))
        .aggregation('stats_clicks', lambda a: a.stats('clicks'))
    )


RESPONSE = {
    'clicks': {
        'buckets': {
            'low': {'to': 10.0, 'doc_count': 1, 'tags': {'buckets': [{'key': 'one', 'doc_count': 1}]}},
            'mid': {'from': 10.0, 'to': 20.0, 'doc_count': 0, 'tags': {'buckets': []}},
        }
    },
    'tags': {
        'buckets': [
            {'key': 'one', 'doc_count': 3},
            {'key': 'three', 'doc_count': 1},
            {'key': 'two', 'doc_count': 1},
        ]
    },
    'min_clicks': {'value': 5.0},
    'stats_clicks': {'count': 3, 'min': 5.0, 'max': 20.0, 'avg': 13.333, 'sum': 40.0},
}


def test_parse_aggregations():
    result = parse_aggregations(RESPONSE, _search().aggregations)

    assert result == {
        'clicks': {'low': {'tags': {'one': 1}}, 'mid': {'tags': {}}},
        'tags': {'one': 3, 'three': 1, 'two': 1},
        'min_clicks': 5.0,
        'stats_clicks': {'count': 3, 'min': 5.0, 'max': 20.0, 'avg': 13.333, 'sum': 40.0},
    }


def test_missing_aggregations_are_skipped():
    assert parse_aggregations({'min_clicks': {'value': 5.0}}, _search().aggregations) == {'min_clicks': 5.0}
    assert parse_aggregations({}, _search().aggregations) is None
