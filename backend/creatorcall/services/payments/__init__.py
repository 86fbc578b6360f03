"""Payment adapters, one per PaymentMethod."""

from ...models.booking import PaymentMethod
from .base import PaymentAdapter, PaymentInitiation, PaymentVerification
from .card import CardPaymentAdapter
from .wallet import WalletPaymentAdapter

_ADAPTERS = {
    PaymentMethod.CARD: CardPaymentAdapter,
    PaymentMethod.WALLET: WalletPaymentAdapter,
}


def get_payment_adapter(method: PaymentMethod) -> PaymentAdapter:
    """Build the adapter for a payment method."""
    return _ADAPTERS[PaymentMethod(method)]()


__all__ = [
    "CardPaymentAdapter",
    "PaymentAdapter",
    "PaymentInitiation",
    "PaymentVerification",
    "WalletPaymentAdapter",
    "get_payment_adapter",
]
