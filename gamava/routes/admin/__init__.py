from flask import Blueprint
from .category_routes import category_admin_bp
from .main_menu_routes import main_menu_admin_bp
from .product_routes import product_admin_bp

admin_bp = Blueprint("admin", __name__)

admin_bp.register_blueprint(category_admin_bp, url_prefix="/categories")
admin_bp.register_blueprint(main_menu_admin_bp, url_prefix="/main-menu-items")
admin_bp.register_blueprint(product_admin_bp, url_prefix="/products")
