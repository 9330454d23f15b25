import pytest

from esapi.elasticsearch import Elasticsearch, Response


class DummyTransport(object):
    """ Records every request and answers from ``responses``. """

    def __init__(self, hosts, responses=None, **kwargs):
        self.hosts = hosts
        self.kwargs = kwargs
        self.responses = responses or {}
        self.calls = []

    def perform_request(self, method, url, params=None, body=None, **options):
        self.calls.append((method, url, params, body, options))
        resp = self.responses.get((method, url), {})
        if isinstance(resp, Exception):
            raise resp
        return Response(200, {}, resp)


@pytest.fixture
def client():
    return Elasticsearch(transport_class=DummyTransport)


@pytest.fixture
def strict_client():
    return Elasticsearch(transport_class=DummyTransport, validate_params=True)
