"""Application interfaces (ports): repository protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure.
"""

from app.application.interfaces.repositories import (
    ICaseDocumentRepository,
    ICaseUpdateRepository,
    IDebtCaseRepository,
    IEmployeeRepository,
)

__all__ = [
    "ICaseDocumentRepository",
    "ICaseUpdateRepository",
    "IDebtCaseRepository",
    "IEmployeeRepository",
]
