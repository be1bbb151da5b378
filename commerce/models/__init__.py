from commerce.models.customers import Address, Customer, User
from commerce.models.gateways import Gateway
from commerce.models.orders import LineItem, Order, OrderStatus
from commerce.models.purchasables import Purchasable

__all__ = [
    "Address",
    "Customer",
    "Gateway",
    "LineItem",
    "Order",
    "OrderStatus",
    "Purchasable",
    "User",
]
