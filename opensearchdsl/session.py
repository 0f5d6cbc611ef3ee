import json
import logging
from typing import Any, List, Optional, Union

from opensearchpy import OpenSearch

from opensearchdsl.search import Search
from opensearchdsl.utils import parse_aggregations

Host = Union[str, dict]


class SearchSession:
    def __init__(
        self,
        hosts: Union[Host, List[Host]] = 'localhost:9200',
        user: Optional[str] = None,
        password: Optional[str] = None,
        client: Any = None,
        **kwargs,
    ) -> None:
        """
        :arg hosts: list of nodes, or a single node, we should connect to.
            Node should be a dictionary ({"host": "localhost", "port": 9200}),
            or a string in the format of ``host[:port]``.

        :arg user: http auth username

        :arg password: http auth password

        :arg client: an already built client; anything with
            ``search(index=..., body=...)`` will do

        :arg kwargs: any additional arguments will be passed on to the opensearch-py call
        """
        if client is None:
            if user is not None:
                kwargs['http_auth'] = (user, password)
            kwargs.setdefault('http_compress', True)
            client = OpenSearch(hosts=hosts, **kwargs)
        self.client = client

    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()

    def close(self):
        close = getattr(self.client, 'close', None)
        if close is not None:
            close()

    def execute(self, search: Search, index: str, **kwargs) -> dict:
        """
        :arg kwargs: any additional arguments will be passed on to the opensearch-py call
        """
        body = search.compile()
        logging.debug('query:\n%s', json.dumps(body))

        return self.client.search(index=index, body=body, **kwargs)

    def aggregate(self, search: Search, index: str, **kwargs):
        """
        Run only the aggregations of ``search`` and flatten the result.

        :arg kwargs: any additional arguments will be passed on to the opensearch-py call
        """
        resp = self.execute(search, index, size=0, **kwargs)

        data = resp.get('aggregations', {})
        logging.debug('raw aggregations: %s', data)
        return parse_aggregations(data, search.aggregations)
