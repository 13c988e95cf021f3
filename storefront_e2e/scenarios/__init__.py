"""
Scenarios package
-----------------
Reusable acceptance scenarios. Subclass one in a test module and set
`gateway` to the GatewayProfile under test.
"""

from .base import PaymentGatewayScenarios
from .credit_card import CreditCardScenarios, CreditCardTokenizationScenarios
from .token_editor import PaymentTokenEditorScenarios

__all__ = [
    "PaymentGatewayScenarios",
    "CreditCardScenarios",
    "CreditCardTokenizationScenarios",
    "PaymentTokenEditorScenarios",
]
