import pytest

from crm.cache import INVALIDATIONS, QueryCache, ORDERS, CLIENTS, CALL_LOGS


def test_fetches_once_until_invalidated():
    cache = QueryCache()
    calls = []

    def fetch():
        calls.append(1)
        return [{'id': str(len(calls))}]

    assert cache.get_or_fetch(ORDERS, fetch) == [{'id': '1'}]
    assert cache.get_or_fetch(ORDERS, fetch) == [{'id': '1'}]
    assert len(calls) == 1

    cache.invalidate('order.add_event')
    assert not cache.is_cached(ORDERS)
    assert cache.get_or_fetch(ORDERS, fetch) == [{'id': '2'}]


def test_cached_rows_cannot_be_mutated_by_readers():
    cache = QueryCache()
    rows = cache.get_or_fetch(CLIENTS, lambda: [{'id': 'c1', 'phones': ['1']}])
    rows[0]['phones'].append('2')

    assert cache.get_or_fetch(CLIENTS, lambda: []) == [{'id': 'c1', 'phones': ['1']}]


def test_client_delete_invalidates_dependent_collections():
    cache = QueryCache()
    for key in (CLIENTS, ORDERS, CALL_LOGS):
        cache.get_or_fetch(key, list)

    cache.invalidate('client.delete')

    assert not any(cache.is_cached(key) for key in (CLIENTS, ORDERS, CALL_LOGS))


def test_unknown_mutation_is_rejected():
    with pytest.raises(KeyError):
        QueryCache().invalidate('order.update_status')


def test_disabled_cache_always_fetches(app):
    app.config['QUERY_CACHE_ENABLED'] = False
    cache = QueryCache(app)
    calls = []

    cache.get_or_fetch(ORDERS, lambda: calls.append(1) or [])
    cache.get_or_fetch(ORDERS, lambda: calls.append(1) or [])

    assert len(calls) == 2
    assert not cache.is_cached(ORDERS)


def test_every_mutation_names_known_collections():
    known = {ORDERS, CLIENTS, CALL_LOGS, 'contact_groups', 'global_events', 'users'}
    for keys in INVALIDATIONS.values():
        assert set(keys) <= known
