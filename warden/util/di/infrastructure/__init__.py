"""Infrastructure providers."""

# Import bases
from .identity import IdentityComponentProvider
from .mail import MailProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .identity import ProdIdentityComponentProvider  # noqa: F401
from .mail import ProdMailProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "IdentityComponentProvider",
    "MailProvider",
    "PersistenceProvider",
    "ProdIdentityComponentProvider",
    "ProdMailProvider",
    "ProdPersistenceProvider",
]
