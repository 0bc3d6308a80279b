from flask import Blueprint, jsonify
from gamava.services.category_service import CategoryService
from gamava.services.main_menu_service import MainMenuService
from gamava.utils.validators import require_int_arg

navigation_bp = Blueprint("navigation", __name__)


@navigation_bp.route("/navigation/main-menu", methods=["GET"])
def main_menu():
    """Storefront main menu with nested subcategories"""
    menu = MainMenuService.get_navigation_menu()
    return jsonify({"success": True, "categories": menu, "totalItems": len(menu)}), 200


@navigation_bp.route("/categories/main-menu", methods=["GET"])
def category_tree():
    categories = CategoryService.list_categories(hierarchical=True)
    return jsonify({"success": True, "categories": categories}), 200


@navigation_bp.route("/main-menu/popular-products", methods=["GET"])
def menu_popular_products():
    """Popular products of a menu item (by menu item id or category id)"""
    identifier = require_int_arg("categoryId", "Category ID is required")
    return jsonify({"products": MainMenuService.get_menu_popular_products(identifier)}), 200
