import pytest

from esapi.elasticsearch import (ACTIONS, Elasticsearch, InvalidParameterError, NotFoundError,
                                 ParamsRegistry, TransportError, UnregisteredActionError,
                                 build_request)
from esapi.elasticsearch.client.actions import ACTIONS_BY_NAME

from .conftest import DummyTransport

TEMPLATE_BODY = {
    'source': {'query': {'range': {'date': {'gte': '{{start}}', 'lte': '{{end}}'}}}},
    'params': {'start': '2014-02-01', 'end': '2014-03-01'},
}


class TestSearchTemplate:
    def test_request(self, client):
        result = client.search_template(index=['myindex'], body=TEMPLATE_BODY,
                                        routing='r1', bogus='x')

        assert result == {}
        method, url, params, body, options = client.transport.calls[0]
        assert method == 'GET'
        assert url == '/myindex/_search/template'
        assert params == {'routing': 'r1'}
        assert body is TEMPLATE_BODY
        assert options == {}

    def test_all_indices(self, client):
        client.search_template(body=TEMPLATE_BODY)
        assert client.transport.calls[0][1] == '/_search/template'

    def test_indices_and_types(self, client):
        client.search_template(index=['i1', 'i2'], doc_type='tweet', body=TEMPLATE_BODY)
        assert client.transport.calls[0][1] == '/i1,i2/tweet/_search/template'

    def test_returns_response_body(self):
        hits = {'hits': {'total': 1, 'hits': []}}
        transport = {'responses': {('GET', '/myindex/_search/template'): hits}}
        es = Elasticsearch(transport_class=DummyTransport, **transport)
        assert es.search_template(index='myindex', body=TEMPLATE_BODY) == hits


class TestActions:
    def test_type_without_index_searches_all(self, client):
        client.search(doc_type='tweet')
        assert client.transport.calls[0][1] == '/_all/tweet/_search'

    def test_from_is_renamed(self, client):
        client.search(index='i', from_=10, size=5)
        assert client.transport.calls[0][2] == {'from': 10, 'size': 5}

    def test_global_params_accepted(self, client):
        client.count(index='i', pretty=True, filter_path=['count'])
        assert client.transport.calls[0][2] == {'pretty': True, 'filter_path': ['count']}

    def test_transport_options_split_off(self, client):
        client.get(index='i', doc_type='t', id=1, ignore=404, request_timeout=3)
        method, url, params, body, options = client.transport.calls[0]
        assert (method, url, params) == ('GET', '/i/t/1', {})
        assert options == {'ignore': 404, 'request_timeout': 3}

    def test_positional_arguments(self, client):
        client.get_source('test-index', 'tweet', 1)
        assert client.transport.calls[0][:2] == ('GET', '/test-index/tweet/1/_source')

    def test_body_first_signature(self, client):
        body = {'docs': [{'_index': 'i', '_id': 1}]}
        client.mget(body, 'i')
        assert client.transport.calls[0][1:4] == ('/i/_mget', {}, body)

    def test_too_many_positional_arguments(self, client):
        with pytest.raises(TypeError):
            client.get('i', 't', 1, 'extra')

    def test_argument_given_twice(self, client):
        with pytest.raises(TypeError):
            client.get('i', 't', 1, index='other')

    def test_required_argument_missing(self, client):
        with pytest.raises(ValueError) as e:
            client.get(index='i', doc_type='t')
        assert "'id'" in str(e.value)
        assert client.transport.calls == []

    def test_required_argument_empty(self, client):
        with pytest.raises(ValueError):
            client.delete(index='', doc_type='t', id=1)

    def test_index_without_id(self, client):
        client.index(index='i', doc_type='t', body={'a': 1})
        assert client.transport.calls[0][:2] == ('POST', '/i/t')

    def test_create(self, client):
        client.create('i', 't', 1, {'a': 1}, refresh='wait_for')
        assert client.transport.calls[0][:3] == ('PUT', '/i/t/1/_create', {'refresh': 'wait_for'})

    def test_ndjson_actions_set_content_type(self, client):
        body = [{'index': 'i'}, {'query': {'match_all': {}}}]
        client.msearch(body, index='i')
        method, url, params, sent, options = client.transport.calls[0]
        assert url == '/i/_msearch'
        assert sent is body
        assert options['headers'] == {'content-type': 'application/x-ndjson'}

    def test_ndjson_body_required(self, client):
        with pytest.raises(ValueError):
            client.msearch_template([])
        assert client.transport.calls == []

    def test_ndjson_merges_caller_headers(self, client):
        client.msearch_template([{}, {'id': 'tpl'}], headers={'x-opaque-id': 'abc'})
        assert client.transport.calls[0][4]['headers'] == {
            'x-opaque-id': 'abc', 'content-type': 'application/x-ndjson'}

    def test_perform_action(self, client):
        client.perform_action('count', index='i', q='title:x')
        assert client.transport.calls[0][:3] == ('GET', '/i/_count', {'q': 'title:x'})

    def test_perform_unknown_action(self, client):
        with pytest.raises(UnregisteredActionError):
            client.perform_action('nope')

    def test_action_missing_from_registry(self):
        registry = ParamsRegistry()
        registry.freeze()
        es = Elasticsearch(transport_class=DummyTransport, registry=registry)
        with pytest.raises(UnregisteredActionError):
            es.search(index='i')
        assert es.transport.calls == []

    def test_info(self, client):
        client.info()
        assert client.transport.calls[0][:2] == ('GET', '/')

    def test_every_action_is_a_method(self):
        for action in ACTIONS:
            method = getattr(Elasticsearch, action.name)
            assert method.__name__ == action.name
            assert method.__doc__

    def test_generated_docstring(self):
        doc = Elasticsearch.search_template.__doc__
        assert '``GET /{index}/{doc_type}/_search/template``' in doc
        assert ':arg body:' in doc
        assert 'rest_total_hits_as_int' in doc


class TestStrictParams:
    def test_unknown_param_rejected(self, strict_client):
        with pytest.raises(InvalidParameterError) as e:
            strict_client.search_template(index='i', body=TEMPLATE_BODY, bogus='x')
        assert e.value.param == 'bogus'
        assert strict_client.transport.calls == []

    def test_known_params_pass(self, strict_client):
        strict_client.search_template(index='i', body=TEMPLATE_BODY, routing='r1',
                                      pretty=True, ignore=404)
        assert strict_client.transport.calls[0][2] == {'routing': 'r1', 'pretty': True}

    def test_path_field_of_another_action_rejected(self, strict_client):
        with pytest.raises(InvalidParameterError) as e:
            strict_client.search_template(id='x')
        assert e.value.param == 'id'

        with pytest.raises(InvalidParameterError) as e:
            strict_client.info(index='x')
        assert e.value.param == 'index'
        assert strict_client.transport.calls == []

    def test_own_path_fields_pass(self, strict_client):
        strict_client.get(index='i', doc_type='t', id='1', routing='r1')
        assert strict_client.transport.calls[0][:3] == ('GET', '/i/t/1', {'routing': 'r1'})


class TestPing:
    def test_up(self, client):
        client.transport.responses[('HEAD', '/')] = True
        assert client.ping() is True
        assert client.transport.calls[0][:2] == ('HEAD', '/')

    def test_down(self, client):
        client.transport.responses[('HEAD', '/')] = NotFoundError(404, 'not found', None)
        assert client.ping() is False

    def test_connection_error(self, client):
        client.transport.responses[('HEAD', '/')] = TransportError('N/A', 'refused', None)
        assert client.ping() is False


class TestBuildRequest:
    def test_arguments_not_modified(self):
        arguments = {'index': 'i', 'from_': 1, 'bogus': 'x', 'ignore': 404}
        request = build_request(ACTIONS_BY_NAME['search'], arguments)
        assert arguments == {'index': 'i', 'from_': 1, 'bogus': 'x', 'ignore': 404}
        assert request.params == {'from': 1}
        assert request.options == {'ignore': 404}

    def test_request_fields(self):
        request = build_request(ACTIONS_BY_NAME['search_template'],
                                {'index': ['myindex'], 'body': TEMPLATE_BODY, 'routing': 'r1',
                                 'bogus': 'x'})
        assert request.method == 'GET'
        assert request.path == '/myindex/_search/template'
        assert request.params == {'routing': 'r1'}
        assert request.body is TEMPLATE_BODY

    def test_strict(self):
        with pytest.raises(InvalidParameterError):
            build_request(ACTIONS_BY_NAME['count'], {'bogus': 1}, strict=True)
