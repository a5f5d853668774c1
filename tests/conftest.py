import pytest

import switchyard


class FakeRequest:
    """Minimal stand-in for a web framework's request object."""

    def __init__(self, path='/', **attributes):
        self.path = path
        for name, value in attributes.items():
            setattr(self, name, value)


@pytest.fixture
def router():
    return switchyard.Router()


@pytest.fixture
def make_request():
    return FakeRequest
