from gamava.models.product import Product
from gamava.models.category import Category, ProductCategory
from gamava.extensions import db
from gamava.exceptions import NotFoundError, ValidationError
from gamava.utils.helpers import unique_slug
from gamava.utils.db_retry import with_db_retry
from decimal import Decimal


class ProductService:
    """Product service handling product operations"""

    @staticmethod
    def create_product(name: str, price: Decimal, **kwargs) -> Product:
        """Create new product"""
        product = Product(
            name=name,
            slug=unique_slug(Product, name),
            price=price,
            description=kwargs.get("description"),
            images_cover_url=kwargs.get("images_cover_url"),
            platform=kwargs.get("platform"),
            kinguin_id=kwargs.get("kinguin_id"),
        )

        db.session.add(product)
        db.session.commit()

        return product

    @staticmethod
    def get_product_by_id(product_id: int) -> Product:
        """Get product by ID"""
        product = db.session.get(Product, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    @with_db_retry
    def search_products(search: str = None, is_active: bool = None, page: int = 1, per_page: int = 20):
        """Search products with filters"""
        query = Product.query

        if is_active is not None:
            query = query.filter_by(is_active=is_active)

        if search:
            query = query.filter(Product.name.ilike(f"%{search}%"))

        return query.order_by(Product.id).paginate(
            page=page, per_page=per_page, error_out=False
        )

    @staticmethod
    @with_db_retry
    def set_product_categories(product_id: int, category_ids: list) -> list:
        """Replace every category assignment of a product in one transaction"""
        ProductService.get_product_by_id(product_id)

        if category_ids:
            found = {
                cid for (cid,) in db.session.query(Category.id).filter(Category.id.in_(category_ids))
            }
            missing = [cid for cid in category_ids if cid not in found]
            if missing:
                raise ValidationError(
                    f"Categories not found: {', '.join(str(m) for m in missing)}"
                )

        try:
            ProductCategory.query.filter_by(product_id=product_id).delete()
            for category_id in category_ids:
                db.session.add(ProductCategory(product_id=product_id, category_id=category_id))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        return category_ids

    @staticmethod
    @with_db_retry
    def get_product_categories(product_id: int) -> list:
        rows = (
            db.session.query(ProductCategory.category_id, Category.name)
            .join(Category, ProductCategory.category_id == Category.id)
            .filter(ProductCategory.product_id == product_id)
            .order_by(Category.name)
            .all()
        )
        return [
            {"category_id": category_id, "category_name": name} for category_id, name in rows
        ]
