from gamava.models.base import BaseModel
from gamava.extensions import db
from gamava.enums import MainMenuDisplayType

BANNER_SLOTS = 4


def empty_banner_slots():
    return [""] * BANNER_SLOTS


class MainMenuItem(BaseModel):
    """Navigation projection of a category, carrying menu-only curated content"""

    __tablename__ = "main_menu_items"

    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=False, index=True)
    category_id = db.Column(
        db.Integer,
        db.ForeignKey("categories.id", ondelete="SET NULL"),
        unique=True,
        nullable=True,
    )
    parent_id = db.Column(
        db.Integer,
        db.ForeignKey("main_menu_items.id", ondelete="SET NULL"),
        nullable=True,
    )
    display_order = db.Column(db.Integer, nullable=False, default=1)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    show_product_count = db.Column(db.Boolean, nullable=False, default=True)
    icon_url = db.Column(db.String(500))
    category_image = db.Column(db.String(500))
    description = db.Column(db.Text)
    main_menu_display_type = db.Column(
        db.String(20), nullable=False, default=MainMenuDisplayType.PRODUCTS.value
    )
    banner_images = db.Column(db.JSON, nullable=False, default=empty_banner_slots)
    popular_product_ids = db.Column(db.JSON, nullable=True)

    def to_dict(self):
        data = super().to_dict()
        data["banner_images"] = list(self.banner_images or empty_banner_slots())
        return data
