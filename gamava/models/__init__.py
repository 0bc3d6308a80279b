from .user import User
from .product import Product
from .category import Category, ProductCategory, CategoryPopularProduct
from .main_menu import MainMenuItem

__all__ = [
    "User",
    "Product",
    "Category",
    "ProductCategory",
    "CategoryPopularProduct",
    "MainMenuItem",
]
