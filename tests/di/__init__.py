"""Mock providers for testing."""

from .identity import MockIdentityComponentProvider
from .mail import MockMailProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockIdentityComponentProvider",
    "MockMailProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
