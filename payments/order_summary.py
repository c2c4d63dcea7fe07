from decimal import Decimal, InvalidOperation

# Session key holding the summary between the checkout redirect and the confirmation page
ORDER_SUMMARY_SESSION_KEY = 'order_summary'


class MissingOrderSummary(Exception):
    """The confirmation page was opened without (complete) order data in navigation state."""


class OrderSummary:
    """
    Summary shown once on the confirmation page.
    Quantity and total are displayed as given; no bounds are enforced here.
    """

    REQUIRED_FIELDS = ('product', 'quantity', 'total', 'transactionId')

    def __init__(self, product, quantity, total, transaction_id):
        self.product = product
        self.quantity = quantity
        self.total = total
        self.transaction_id = transaction_id

    @property
    def product_name(self):
        if isinstance(self.product, dict):
            return self.product.get('name', '')
        return getattr(self.product, 'name', str(self.product))

    @classmethod
    def from_state(cls, state):
        """Builds a summary from navigation state, raising MissingOrderSummary if anything is absent."""
        if not state:
            raise MissingOrderSummary("No order summary in navigation state.")

        missing = [field for field in cls.REQUIRED_FIELDS if state.get(field) is None]
        if missing:
            raise MissingOrderSummary(f"Order summary is missing: {', '.join(missing)}")

        try:
            total = Decimal(str(state['total']))
            quantity = Decimal(str(state['quantity']))
        except (InvalidOperation, TypeError, ValueError) as e:
            raise MissingOrderSummary(f"Order summary is malformed: {e}") from e

        # A fractional quantity is bad data, not something to round
        if not quantity.is_finite() or quantity != quantity.to_integral_value():
            raise MissingOrderSummary(f"Order summary quantity is not a whole number: {state['quantity']}")
        quantity = int(quantity)

        return cls(state['product'], quantity, total, str(state['transactionId']))

    def to_state(self):
        # Session data is JSON-serialized, so the Decimal travels as a string
        # and model-like products are reduced to the name the page shows
        product = self.product if isinstance(self.product, dict) else {'name': self.product_name}
        return {
            'product': product,
            'quantity': self.quantity,
            'total': str(self.total),
            'transactionId': self.transaction_id,
        }


def stash_order_summary(request, state):
    """
    Hands an order summary to the confirmation page via navigation state.
    Called by the checkout flow right before redirecting to payments:order_success.
    """
    summary = state if isinstance(state, OrderSummary) else OrderSummary.from_state(state)
    request.session[ORDER_SUMMARY_SESSION_KEY] = summary.to_state()
    return summary


def pop_order_summary(request):
    """Reads the summary once; a refresh afterwards shows the empty state."""
    return OrderSummary.from_state(request.session.pop(ORDER_SUMMARY_SESSION_KEY, None))
