from enum import Enum


class UserRole(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


class MainMenuDisplayType(str, Enum):
    PRODUCTS = "products"
    CAROUSEL = "carousel"
