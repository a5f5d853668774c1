# Copyright 2026 by the Switchyard authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Reverse-lookup index used to pick a path for URL generation."""

from collections import defaultdict
import itertools

__all__ = ('SignificantKeyIndex',)

_MISSING = object()


class SignificantKeyIndex:
    """Index concrete paths by the parameter names that can select them.

    Each dynamic path is registered under one or more key sets: the full
    set of its variable names, plus, for every non-empty subset of its
    defaulted variable names, the required names together with that
    subset. Within each key set, the path is filed once per member name,
    in a bucket keyed by the size of the key set.

    A lookup filters the caller's parameter names down to the significant
    ones, then scans the buckets from the largest size down, so that a
    path consuming more of the caller's parameters is preferred. Within a
    bucket, the earliest registered path wins.

    Lookups are memoized per distinct set of significant names. The cache
    is never invalidated by later registrations; an answer reflects the
    index as it was when that set of names was first looked up.

    Note:
        Registration is not thread-safe and must complete before lookups
        begin. Lookups may run concurrently; two threads resolving the same
        key set for the first time both compute the same answer and the
        last one to store it wins.
    """

    __slots__ = ('_orders', '_key_count', '_significant_keys', '_cache', '_sequence')

    def __init__(self):
        # NOTE: size of key set -> name -> [(sequence, path), ...]
        self._orders = defaultdict(lambda: defaultdict(list))
        self._key_count = {}
        self._significant_keys = frozenset()
        self._cache = {}
        self._sequence = itertools.count()

    @property
    def significant_keys(self):
        """The set of all names any registered path can be selected by."""
        return self._significant_keys

    def key_count(self, name):
        """Return how many times `name` has been filed in the index."""
        return self._key_count.get(name, 0)

    def register(self, path):
        """Add a concrete path to the index.

        Static paths (those without variables) cannot be selected by
        parameter names and are ignored.

        Args:
            path (Path): The path to register.
        """

        if not path.is_dynamic:
            return

        sequence = next(self._sequence)
        for key_set in self._key_sets_for(path):
            bucket = self._orders[len(key_set)]
            for name in key_set:
                bucket[name].append((sequence, path))
                self._key_count[name] = self._key_count.get(name, 0) + 1

        # NOTE: Replaced rather than mutated, so that concurrent readers
        #   always see a consistent frozenset.
        self._significant_keys = frozenset(self._key_count)

    def find_matching_path(self, params):
        """Find the most specific path that can be generated from `params`.

        Args:
            params: Parameter names, or a dict keyed by them. Names that no
                registered path uses are ignored.

        Returns:
            Path: The best path, or ``None`` if there is none.
        """

        relevant = frozenset(params) & self._significant_keys
        if not relevant:
            return None

        cached = self._cache.get(relevant, _MISSING)
        if cached is not _MISSING:
            return cached

        found = self._search(relevant)
        self._cache[relevant] = found
        return found

    def _search(self, relevant):
        for size in range(len(relevant), 0, -1):
            bucket = self._orders.get(size)
            if not bucket:
                continue

            best = None
            for name in relevant:
                for sequence, path in bucket.get(name, ()):
                    if best is not None and sequence >= best[0]:
                        break

                    if path.can_generate_from(relevant):
                        best = (sequence, path)
                        break

            if best is not None:
                return best[1]

        return None

    @staticmethod
    def _key_sets_for(path):
        with_defaults = [
            name for name in path.dynamic_keys if name in path.dynamic_keys_with_defaults
        ]
        without_defaults = [
            name
            for name in path.dynamic_keys
            if name not in path.dynamic_keys_with_defaults
        ]

        key_sets = [tuple(path.dynamic_keys)]
        for size in range(1, len(with_defaults) + 1):
            for subset in itertools.combinations(with_defaults, size):
                key_sets.append(tuple(without_defaults) + subset)

        return key_sets
