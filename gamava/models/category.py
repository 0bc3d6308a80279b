from gamava.models.base import BaseModel, utcnow
from gamava.extensions import db
from gamava.enums import MainMenuDisplayType


class Category(BaseModel):
    """Category model, a node of the catalog taxonomy tree"""
    __tablename__ = 'categories'

    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    parent_id = db.Column(
        db.Integer, db.ForeignKey('categories.id'), nullable=True, index=True
    )
    icon = db.Column(db.String(500))
    banner = db.Column(db.String(500))
    description = db.Column(db.Text)
    sub_description = db.Column(db.Text)
    link = db.Column(db.String(500))
    order_position = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.Boolean, nullable=False, default=True)
    show_in_main_menu = db.Column(db.Boolean, nullable=False, default=False)
    category_image = db.Column(db.String(500))
    main_menu_display_type = db.Column(
        db.String(20), nullable=False, default=MainMenuDisplayType.PRODUCTS.value
    )
    main_menu_description = db.Column(db.Text)


class ProductCategory(db.Model):
    """Many-to-many link between products and categories"""
    __tablename__ = 'product_categories'

    product_id = db.Column(
        db.Integer, db.ForeignKey('products.id', ondelete='CASCADE'), primary_key=True
    )
    category_id = db.Column(
        db.Integer, db.ForeignKey('categories.id'), primary_key=True, index=True
    )
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)


class CategoryPopularProduct(db.Model):
    """Hand-picked popular product of a category, ordered by display_order (1-based)"""
    __tablename__ = 'category_popular_products'

    category_id = db.Column(
        db.Integer, db.ForeignKey('categories.id'), primary_key=True
    )
    product_id = db.Column(
        db.Integer, db.ForeignKey('products.id', ondelete='CASCADE'), primary_key=True
    )
    display_order = db.Column(db.Integer, nullable=False)
