# cache.py
import copy
import threading

import structlog

logger = structlog.get_logger()

ORDERS = 'orders'
CLIENTS = 'clients'
CONTACT_GROUPS = 'contact_groups'
CALL_LOGS = 'call_logs'
GLOBAL_EVENTS = 'global_events'
USERS = 'users'

# Which cached collections each mutation makes stale
INVALIDATIONS = {
    'client.create': (CLIENTS,),
    'client.update': (CLIENTS,),
    'client.delete': (CLIENTS, ORDERS, CALL_LOGS),
    'client.assign_group': (CLIENTS,),
    'group.create': (CONTACT_GROUPS,),
    'group.update': (CONTACT_GROUPS,),
    'group.delete': (CONTACT_GROUPS, CLIENTS),
    'order.create': (ORDERS,),
    'order.move_to_bin': (ORDERS,),
    'order.restore': (ORDERS,),
    'order.purge': (ORDERS,),
    'order.link_client': (ORDERS,),
    'order.add_event': (ORDERS,),
    'order.delete_event': (ORDERS,),
    'call_log.create': (CALL_LOGS,),
    'call_log.update': (CALL_LOGS,),
    'call_log.delete': (CALL_LOGS,),
    'global_event.create': (GLOBAL_EVENTS,),
    'user.sign_up': (USERS,),
    'user.sign_in': (USERS,),
    'user.provision': (USERS,),
    'user.set_active': (USERS,),
}


class QueryCache:
    """
    Read-through cache of fetched entity lists, keyed by collection name.

    Reads go through ``get_or_fetch``; a miss calls the fetcher and stores the
    result. Mutations call ``invalidate`` with their name from
    ``INVALIDATIONS`` so the next read refetches. Entries never expire on
    their own and nothing is patched in place.
    """

    def __init__(self, app=None):
        self._entries = {}
        self._lock = threading.Lock()
        self.enabled = True
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.enabled = app.config.get('QUERY_CACHE_ENABLED', True)
        self.clear()
        app.extensions['query_cache'] = self

    def get_or_fetch(self, key, fetcher):
        if not self.enabled:
            return fetcher()

        with self._lock:
            if key in self._entries:
                return copy.deepcopy(self._entries[key])

        rows = fetcher()
        with self._lock:
            self._entries[key] = copy.deepcopy(rows)
        logger.debug(f"Cache filled for {key}: {len(rows)} rows")
        return rows

    def invalidate(self, mutation):
        keys = INVALIDATIONS.get(mutation)
        if keys is None:
            raise KeyError(f"No invalidation mapping for mutation '{mutation}'")

        with self._lock:
            for key in keys:
                self._entries.pop(key, None)
        logger.debug(f"Cache invalidated by {mutation}: {', '.join(keys)}")

    def is_cached(self, key):
        with self._lock:
            return key in self._entries

    def clear(self):
        with self._lock:
            self._entries.clear()
