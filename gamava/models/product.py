from gamava.models.base import BaseModel
from gamava.extensions import db


class Product(BaseModel):
    __tablename__ = "products"

    name = db.Column(db.String(255), nullable=False, index=True)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    images_cover_url = db.Column(db.String(500))
    platform = db.Column(db.String(100))
    kinguin_id = db.Column(db.Integer, index=True)
    is_active = db.Column(db.Boolean, default=True)

    def to_dict(self):
        data = super().to_dict()
        data["price"] = float(self.price) if self.price is not None else None
        return data

    def to_card(self):
        """Compact shape used by menu dropdowns and the curation picker"""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "images_cover_url": self.images_cover_url,
            "price": float(self.price) if self.price is not None else None,
            "platform": self.platform,
        }
