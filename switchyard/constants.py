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

import re

DEFAULT_DELIMITERS = ('/', '.')

# NOTE: Ordered; condition tokens are prepended to every concrete path
#   in exactly this order, so it must not change once routes are added.
DEFAULT_REQUEST_METHODS = (
    'protocol',
    'domain',
    'port',
    'query_string',
    'remote_ip',
    'user_agent',
    'referer',
    'method',
    'subdomains',
)

IDENTIFIER_PATTERN = re.compile('[A-Za-z_][A-Za-z0-9_]*$')
