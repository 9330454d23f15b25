from concurrent.futures import ThreadPoolExecutor

import pytest

from esapi.elasticsearch import (ACTIONS, PARAMS_REGISTRY, ParamsRegistry,
                                 UnregisteredActionError, extract_params)


@pytest.fixture
def registry():
    return ParamsRegistry()


class TestParamsRegistry:
    def test_register_and_get(self, registry):
        registry.register('search_template', ['routing', 'scroll'])
        assert registry.get('search_template') == ('routing', 'scroll')
        assert 'search_template' in registry
        assert len(registry) == 1

    def test_order_kept_and_duplicates_removed(self, registry):
        registry.register('count', ['q', 'df', 'q', 'routing'])
        assert registry.get('count') == ('q', 'df', 'routing')

    def test_unregistered_action(self, registry):
        with pytest.raises(UnregisteredActionError) as e:
            registry.get('nope')
        assert e.value.action == 'nope'

    def test_unregistered_action_is_lookup_error(self, registry):
        registry.register('count', ['q'])
        registry.freeze()
        with pytest.raises(LookupError):
            registry.get('search')

    def test_duplicate_registration_rejected(self, registry):
        registry.register('count', ['q'])
        with pytest.raises(ValueError):
            registry.register('count', ['df'])
        assert registry.get('count') == ('q', )

    def test_register_after_freeze_rejected(self, registry):
        registry.freeze()
        assert registry.frozen
        with pytest.raises(RuntimeError):
            registry.register('count', ['q'])

    def test_frozen_table_is_read_only(self, registry):
        registry.register('count', ['q'])
        registry.freeze()
        with pytest.raises(TypeError):
            registry._actions['count'] = ('df', )

    def test_freeze_twice(self, registry):
        registry.register('count', ['q'])
        registry.freeze()
        registry.freeze()
        assert registry.get('count') == ('q', )

    def test_repeated_get_is_stable(self, registry):
        registry.register('count', ['q', 'df'])
        first = registry.get('count')
        assert all(registry.get('count') == first for _ in range(10))

    def test_repr(self, registry):
        registry.register('count', ['q'])
        registry.freeze()
        assert repr(registry) == '<ParamsRegistry(1 actions, frozen)>'


class TestSharedRegistry:
    def test_every_action_registered_and_frozen(self):
        assert PARAMS_REGISTRY.frozen
        assert set(PARAMS_REGISTRY) == set(a.name for a in ACTIONS)

    def test_search_template_params(self):
        allowed = PARAMS_REGISTRY.get('search_template')
        for param in ('ignore_unavailable', 'allow_no_indices', 'expand_wildcards',
                      'preference', 'routing', 'scroll', 'search_type',
                      'rest_total_hits_as_int'):
            assert param in allowed

    def test_concurrent_reads(self):
        expected = dict((name, PARAMS_REGISTRY.get(name)) for name in PARAMS_REGISTRY)
        arguments = {'routing': 'r1', 'q': 'x', 'size': 1, 'bogus': 'x'}

        def read(n):
            name = ACTIONS[n % len(ACTIONS)].name
            allowed = PARAMS_REGISTRY.get(name)
            params = extract_params(arguments, allowed)
            return allowed == expected[name] and set(params) <= set(allowed)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(read, range(5000)))
        assert all(results)
