import pytest

from switchyard.routing import compile_pattern
from switchyard.routing import Route
from switchyard.routing import SignificantKeyIndex


@pytest.fixture
def index():
    return SignificantKeyIndex()


def _register(index, pattern, **kwargs):
    route = Route(pattern, compile_pattern(pattern, **kwargs), **kwargs)
    for path in route.paths:
        index.register(path)
    return route


def _find(index, params):
    path = index.find_matching_path(params)
    return None if path is None else str(path)


def test_most_specific_path_wins(index):
    _register(index, '/users/:id')
    _register(index, '/users/:id/posts/:post_id')

    assert _find(index, ['id']) == '/users/:id'
    assert _find(index, ['id', 'post_id']) == '/users/:id/posts/:post_id'
    assert _find(index, {'post_id': 1, 'id': 2}) == '/users/:id/posts/:post_id'


def test_insignificant_names_are_ignored(index):
    _register(index, '/users/:id')

    assert _find(index, ['id', 'page', 'sort']) == '/users/:id'
    assert _find(index, ['page']) is None
    assert _find(index, []) is None


def test_earliest_registration_wins_ties(index):
    _register(index, '/a/:id')
    _register(index, '/b/:id')

    assert _find(index, ['id']) == '/a/:id'


def test_tie_break_does_not_depend_on_name_order(index):
    _register(index, '/a/:x/:y')
    _register(index, '/b/:y/:x')

    assert _find(index, ['x', 'y']) == '/a/:x/:y'
    assert _find(index, ['y', 'x']) == '/a/:x/:y'


def test_defaults_select_shorter_key_sets(index):
    _register(index, '/:controller(/:action(/:id))', default_values={'action': 'index'})

    assert _find(index, ['controller']) == '/:controller'
    assert _find(index, ['controller', 'action']) == '/:controller/:action'
    assert _find(index, ['controller', 'action', 'id']) == '/:controller/:action/:id'


def test_defaulted_key_sets_are_registered(index):
    _register(index, '/:controller/:action', default_values={'action': 'index'})

    # NOTE: Selectable by the required names plus the defaulted one, but
    #   not by the required names alone.
    assert _find(index, ['controller', 'action']) == '/:controller/:action'
    assert _find(index, ['controller']) is None


def test_cannot_generate_without_required_names(index):
    _register(index, '/users/:id/posts/:post_id')
    assert _find(index, ['post_id']) is None


def test_static_paths_are_not_indexed(index):
    _register(index, '/about')

    assert index.significant_keys == frozenset()
    assert _find(index, ['about']) is None


def test_key_count(index):
    _register(index, '/users/:id')
    _register(index, '/posts/:id/:slug')

    assert index.key_count('id') == 2
    assert index.key_count('slug') == 1
    assert index.key_count('other') == 0
    assert index.significant_keys == frozenset(['id', 'slug'])


def test_results_are_cached(index):
    _register(index, '/users/:id/:name')
    assert _find(index, ['id']) is None

    # NOTE: The answer for a set of names is computed once; routes added
    #   afterwards do not change it.
    _register(index, '/users/:id')
    assert _find(index, ['id']) is None
    assert _find(index, ['id', 'name']) == '/users/:id/:name'


def test_cache_key_uses_significant_names_only(index):
    _register(index, '/users/:id')

    first = index.find_matching_path(['id', 'a'])
    second = index.find_matching_path(['id', 'b'])
    assert first is second
