"""Authentication package: identity signal, auth flows, role assignment."""
from .identity import Identity, IdentityProvider, SessionIdentityProvider

__all__ = [
    "Identity",
    "IdentityProvider",
    "SessionIdentityProvider",
]
