import pytest

from switchyard import AmbiguousPattern
from switchyard.routing import compile_pattern
from switchyard.routing import Condition
from switchyard.routing import Route
from switchyard.routing import RouteTrie
from switchyard.routing import Splitter


def _route(pattern, **kwargs):
    return Route(pattern, compile_pattern(pattern, **kwargs))


@pytest.fixture
def trie():
    trie = RouteTrie()
    for pattern in ('/users', '/users/:id', '/users/:id/edit', '/files/*path'):
        for path in _route(pattern).paths:
            trie.insert(path)
    return trie


def _find(trie, path):
    return trie.find(Splitter().split(path))


@pytest.mark.parametrize(
    'path,expected,bindings',
    [
        ('/users', '/users', []),
        ('/users/42', '/users/:id', [('id', '42')]),
        ('/users/42/edit', '/users/:id/edit', [('id', '42')]),
        ('/files/a/b.c', '/files/*path', [('path', ['a', 'b', 'c'])]),
    ],
)
def test_find(trie, path, expected, bindings):
    found, found_bindings = _find(trie, path)

    assert str(found) == expected
    assert found_bindings == bindings


@pytest.mark.parametrize('path', ['/', '/users/', '/users/42/delete', '/files', '/other'])
def test_not_found(trie, path):
    assert _find(trie, path) is None


def test_shared_prefix_nodes(trie):
    (users,) = [n for n in trie.root.children()]
    assert users.segment.char == '/'
    assert sorted(users.literal_children) == ['files', 'users']


def test_walk(trie):
    assert sorted(str(path) for path in trie.walk()) == [
        '/files/*path',
        '/users',
        '/users/:id',
        '/users/:id/edit',
    ]


def test_check_does_not_modify(trie):
    route = _route('/other/:x')
    trie.check(route.paths[0])

    assert _find(trie, '/other/1') is None


def test_variable_conflict():
    trie = RouteTrie()
    trie.insert(_route('/users/:id').paths[0])

    conflicting = _route('/users/:name/edit').paths[0]
    with pytest.raises(AmbiguousPattern):
        trie.check(conflicting)
    with pytest.raises(AmbiguousPattern):
        trie.insert(conflicting)


def test_identical_path_last_insert_wins(caplog):
    trie = RouteTrie()
    first = _route('/same').paths[0]
    second = _route('/same').paths[0]

    trie.insert(first)
    with caplog.at_level('DEBUG', logger='switchyard'):
        trie.insert(second)

    found, __ = _find(trie, '/same')
    assert found is second
    assert 'overrides' in caplog.text


def test_condition_tokens():
    trie = RouteTrie()
    route = Route('/x', compile_pattern('/x'), condition_segments=(Condition('method', 'GET'),))
    trie.insert(route.paths[0])

    tokens = Splitter().split('/x')
    assert trie.find([Condition('method', 'GET')] + tokens)[0] is route.paths[0]
    assert trie.find([Condition('method', 'POST')] + tokens) is None


def test_unhashable_condition_token():
    trie = RouteTrie()
    route = Route('/x', compile_pattern('/x'), condition_segments=(Condition('method', 'GET'),))
    trie.insert(route.paths[0])

    tokens = [Condition('method', ['GET'])] + Splitter().split('/x')
    assert trie.find(tokens) is None
