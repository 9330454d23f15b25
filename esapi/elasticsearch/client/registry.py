import logging
from types import MappingProxyType

from ..exceptions import UnregisteredActionError

logger = logging.getLogger('esapi')


class ParamsRegistry(object):
    """
    Mapping of action names to the query parameters each action accepts.

    Actions are registered while the package is being imported, then the
    registry is frozen and only read from. Once frozen the table is a read-only
    mapping of tuples, so any number of threads can call :meth:`get` without
    locking.
    """

    def __init__(self):
        self._actions = {}
        self._frozen = False

    @property
    def frozen(self):
        return self._frozen

    def register(self, action, params):
        """
        Register the allowed query parameters of ``action``.

        :arg action: name of the action
        :arg params: iterable of parameter names, order is kept and duplicates
            are removed
        """
        if self._frozen:
            raise RuntimeError('Cannot register %r, the registry is frozen.' % (action,))
        if action in self._actions:
            raise ValueError('Action %r is already registered.' % (action,))

        allowed = []
        for param in params:
            if param not in allowed:
                allowed.append(param)
        self._actions[action] = tuple(allowed)
        logger.debug('Registered action %s with %d params', action, len(allowed))

    def freeze(self):
        """ End the registration phase, all later access is read-only. """
        if not self._frozen:
            self._actions = MappingProxyType(dict(self._actions))
            self._frozen = True
            logger.debug('Params registry frozen with %d actions', len(self._actions))

    def get(self, action):
        try:
            return self._actions[action]
        except KeyError:
            raise UnregisteredActionError(action)

    def __contains__(self, action):
        return action in self._actions

    def __iter__(self):
        return iter(self._actions)

    def __len__(self):
        return len(self._actions)

    def __repr__(self):
        return '<ParamsRegistry(%d actions%s)>' % (
            len(self._actions), ', frozen' if self._frozen else '')


# shared by every client, filled in by the actions module
PARAMS_REGISTRY = ParamsRegistry()
