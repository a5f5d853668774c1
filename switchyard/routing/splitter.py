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

"""Request path tokenizer."""

import re

from switchyard.constants import DEFAULT_DELIMITERS


class Splitter:
    """Split request paths into tokens on a set of delimiter characters.

    Every occurrence of a delimiter becomes a token of its own, so that
    joining the tokens reproduces the original path::

        >>> Splitter().split('/users/42.json')
        ['/', 'users', '/', '42', '.', 'json']

    Args:
        delimiters (tuple): Single-character delimiter strings
            (default ``('/', '.')``).
    """

    __slots__ = ('_delimiters', '_pattern')

    def __init__(self, delimiters=DEFAULT_DELIMITERS):
        self._delimiters = frozenset(delimiters)
        self._pattern = re.compile(
            '({})'.format('|'.join(re.escape(d) for d in delimiters))
        )

    @property
    def delimiters(self):
        return self._delimiters

    def split(self, path):
        """Tokenize `path`.

        Args:
            path (str): The requested path, without query string.

        Returns:
            list: The tokens, in order. Empty strings are never included.
        """

        # PERF: re.split() with a capturing group keeps the delimiters,
        #   interleaved with the (possibly empty) runs between them.
        return [token for token in self._pattern.split(path) if token]

    def is_separator(self, token):
        return token in self._delimiters
