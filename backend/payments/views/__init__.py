from .settlement import PaymentDetailView, SettlementView

__all__ = ["PaymentDetailView", "SettlementView"]
