"""
Domain exceptions raised by the service layer
"""


class StoreError(Exception):
    """Base class for storefront domain errors"""


class CommissionError(StoreError):
    """Commission computation or payout could not be persisted"""

    def __init__(self, order_id: int, reason: str):
        self.order_id = order_id
        self.reason = reason
        super().__init__(f"Commission for order {order_id} failed: {reason}")
