from flask import current_app

from gamava.extensions import db
from gamava.exceptions import NotFoundError, ValidationError
from gamava.models.category import Category, CategoryPopularProduct
from gamava.models.product import Product
from gamava.services.main_menu_service import MainMenuService
from gamava.utils.db_retry import with_db_retry


class PopularProductService:
    """Curated, ordered popular products per category"""

    @staticmethod
    def validate_product_ids(product_ids: list):
        """Raise ValidationError if any id has no product row"""
        if not product_ids:
            return
        found = {
            pid for (pid,) in db.session.query(Product.id).filter(Product.id.in_(product_ids))
        }
        missing = [pid for pid in product_ids if pid not in found]
        if missing:
            raise ValidationError(f"Products not found: {', '.join(str(m) for m in missing)}")

    @staticmethod
    def replace_popular_products(category_id: int, product_ids: list):
        """Delete-then-insert the curated set. Does not commit."""
        CategoryPopularProduct.query.filter_by(category_id=category_id).delete()
        for position, product_id in enumerate(product_ids, start=1):
            db.session.add(
                CategoryPopularProduct(
                    category_id=category_id,
                    product_id=product_id,
                    display_order=position,
                )
            )

    @staticmethod
    @with_db_retry
    def set_popular_products(category_id: int, product_ids: list):
        """Replace the popular products of a category, then project them onto its menu item"""
        if db.session.get(Category, category_id) is None:
            raise NotFoundError("Category not found")
        PopularProductService.validate_product_ids(product_ids)

        try:
            PopularProductService.replace_popular_products(category_id, product_ids)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        MainMenuService.sync_popular_products_to_menu(category_id, product_ids)
        return product_ids

    @staticmethod
    @with_db_retry
    def get_popular_products(category_id: int) -> list:
        rows = (
            db.session.query(Product, CategoryPopularProduct.display_order)
            .join(CategoryPopularProduct, CategoryPopularProduct.product_id == Product.id)
            .filter(CategoryPopularProduct.category_id == category_id)
            .order_by(CategoryPopularProduct.display_order, Product.name)
            .all()
        )
        return [
            {**product.to_card(), "display_order": display_order}
            for product, display_order in rows
        ]

    @staticmethod
    @with_db_retry
    def search_candidate_products(search: str = None, limit: int = None) -> list:
        """Picker feed for the curation UI: first page by id, or a name filter"""
        limit = limit or current_app.config.get("POPULAR_PRODUCTS_SEARCH_LIMIT", 30)
        query = Product.query

        if search and search.strip():
            query = query.filter(Product.name.ilike(f"%{search.strip()}%"))

        products = query.order_by(Product.id).limit(limit).all()
        return [product.to_card() for product in products]
