from . import health, orders, pay, payments

__all__ = ["health", "orders", "pay", "payments"]
