"""Application interfaces (ports): store and identity provider protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces import tables
from app.application.interfaces.repositories import Filters, IRelationalStore
from app.application.interfaces.services import IIdentityProvider

__all__ = [
    "Filters",
    "IIdentityProvider",
    "IRelationalStore",
    "tables",
]
