import logging

from gamava.extensions import db
from gamava.enums import MainMenuDisplayType
from gamava.exceptions import NotFoundError
from gamava.models.category import Category, ProductCategory
from gamava.models.main_menu import MainMenuItem, empty_banner_slots
from gamava.models.product import Product
from gamava.utils.category_tree import recursive_product_counts
from gamava.utils.db_retry import with_db_retry
from gamava.utils.sync import best_effort_sync
from sqlalchemy import func

logger = logging.getLogger(__name__)


def default_menu_description(name: str) -> str:
    return f"Browse {name} products"


def direct_product_counts() -> dict:
    """category id -> number of product associations"""
    rows = (
        db.session.query(ProductCategory.category_id, func.count())
        .group_by(ProductCategory.category_id)
        .all()
    )
    return {category_id: count for category_id, count in rows}


class MainMenuService:
    """Keeps main_menu_items in step with categories without losing curated content"""

    @staticmethod
    @best_effort_sync
    def sync_main_menu(category_id: int, slug: str, name: str, show_in_main_menu: bool, description: str = None):
        """Create, refresh or deactivate the menu item of a category.

        banner_images and popular_product_ids are never touched here.
        """
        item = MainMenuItem.query.filter_by(category_id=category_id).first()

        if not show_in_main_menu:
            if item:
                item.is_active = False
                db.session.commit()
                logger.info(f"Deactivated main menu item for category: {name}")
            return item

        description = description or default_menu_description(name)
        parent_item_id = MainMenuService._parent_item_id(category_id)

        if item is None:
            item = MainMenuItem(
                name=name,
                slug=slug,
                category_id=category_id,
                parent_id=parent_item_id,
                display_order=1,
                is_active=True,
                show_product_count=True,
                description=description,
                main_menu_display_type=MainMenuDisplayType.PRODUCTS.value,
                banner_images=empty_banner_slots(),
            )
            db.session.add(item)
            db.session.flush()
            MainMenuService._adopt_child_items(category_id, item.id)
            db.session.commit()
            logger.info(f"Created main menu item for category: {name}")
        else:
            item.name = name
            item.slug = slug
            item.description = description
            item.parent_id = parent_item_id
            item.is_active = True
            MainMenuService._adopt_child_items(category_id, item.id)
            db.session.commit()
            logger.info(f"Updated main menu item for category: {name}")

        return item

    @staticmethod
    def _adopt_child_items(category_id: int, item_id: int):
        """Point the menu items of the category's direct children at ``item_id``"""
        child_ids = [
            cid for (cid,) in db.session.query(Category.id).filter_by(parent_id=category_id)
        ]
        if not child_ids:
            return
        for child_item in MainMenuItem.query.filter(MainMenuItem.category_id.in_(child_ids)):
            child_item.parent_id = item_id

    @staticmethod
    @best_effort_sync
    def sync_menu_parent(category_id: int):
        """Re-point a category's menu item after the category moved in the tree"""
        item = MainMenuItem.query.filter_by(category_id=category_id).first()
        if item is None:
            return None

        item.parent_id = MainMenuService._parent_item_id(category_id)
        db.session.commit()
        logger.info(f"Moved main menu item {item.id} under parent item {item.parent_id}")
        return item

    @staticmethod
    def _parent_item_id(category_id: int):
        """Menu item of the category's parent, so submenus mirror the category tree"""
        category = db.session.get(Category, category_id)
        if category is None or category.parent_id is None:
            return None
        parent_item = MainMenuItem.query.filter_by(category_id=category.parent_id).first()
        return parent_item.id if parent_item else None

    @staticmethod
    @best_effort_sync
    def sync_popular_products_to_menu(category_id: int, product_ids: list):
        """Copy the curated popular-product order onto the category's menu item"""
        item = MainMenuItem.query.filter_by(category_id=category_id).first()
        if item is None:
            return None

        item.popular_product_ids = list(product_ids) if product_ids else None
        db.session.commit()
        logger.info(
            f"Synced popular products for main menu item {item.id} with category {category_id}"
        )
        return item

    @staticmethod
    @with_db_retry
    def get_navigation_menu() -> list:
        """Active root menu items with their linked category, recursive product
        counts and the category's main-menu subcategories as children."""
        categories = Category.query.all()
        category_map = {c.id: c for c in categories}
        totals = recursive_product_counts(
            [c.to_dict() for c in categories], direct_product_counts()
        )

        items = (
            db.session.query(MainMenuItem)
            .join(Category, MainMenuItem.category_id == Category.id)
            .filter(
                MainMenuItem.is_active.is_(True),
                Category.parent_id.is_(None),
            )
            .order_by(MainMenuItem.display_order, MainMenuItem.name)
            .all()
        )

        menu = []
        by_category = {}
        for item in items:
            category = category_map[item.category_id]
            entry = {
                "id": item.id,
                "name": item.name,
                "slug": item.slug,
                "category_id": item.category_id,
                "parent_id": item.parent_id,
                "display_order": item.display_order,
                "icon_url": item.icon_url,
                "description": item.description,
                "is_active": item.is_active,
                "show_product_count": item.show_product_count,
                "main_menu_image": item.category_image,
                "banner_images": list(item.banner_images or empty_banner_slots()),
                "popular_product_ids": item.popular_product_ids,
                "icon": category.icon,
                "banner": category.banner,
                "link": category.link,
                "category_image": category.category_image,
                "main_menu_display_type": category.main_menu_display_type,
                "main_menu_description": category.main_menu_description,
                "product_count": totals.get(category.id, 0),
                "children": [],
            }
            menu.append(entry)
            by_category[item.category_id] = entry

        subcategories = sorted(
            (c for c in categories if c.parent_id is not None and c.show_in_main_menu),
            key=lambda c: (c.parent_id, c.order_position or 0, c.name),
        )
        for sub in subcategories:
            parent_entry = by_category.get(sub.parent_id)
            if parent_entry is None:
                continue
            parent_entry["children"].append({
                "id": sub.id,
                "name": sub.name,
                "slug": sub.slug,
                "parent_id": sub.parent_id,
                "icon": sub.icon,
                "banner": sub.banner,
                "link": sub.link,
                "description": sub.description,
                "show_in_main_menu": sub.show_in_main_menu,
                "product_count": totals.get(sub.id, 0),
            })

        return menu

    @staticmethod
    @with_db_retry
    def list_menu_items() -> list:
        items = MainMenuItem.query.order_by(
            MainMenuItem.display_order, MainMenuItem.name
        ).all()
        return [item.to_dict() for item in items]

    @staticmethod
    def update_menu_item(slug: str, data: dict) -> MainMenuItem:
        """Edit curated menu fields by slug and mirror them onto the linked category.

        An omitted display type is stored as "carousel" on the menu item; the
        category keeps its own value unless one was sent.
        """
        items = (
            MainMenuItem.query.filter_by(slug=slug)
            .order_by(MainMenuItem.is_active.desc(), MainMenuItem.id)
            .all()
        )
        if not items:
            raise NotFoundError("Main menu item not found")

        category_image = data.get("category_image") or None
        banner_images = data.get("banner_images")
        display_type = data.get("main_menu_display_type") or None
        description = data.get("main_menu_description") or None

        try:
            for item in items:
                if category_image is not None:
                    item.category_image = category_image
                if banner_images is not None:
                    item.banner_images = list(banner_images)
                item.main_menu_display_type = display_type or MainMenuDisplayType.CAROUSEL.value
                if description is not None:
                    item.description = description

                if item.category_id:
                    category = db.session.get(Category, item.category_id)
                    if category is not None:
                        if category_image is not None:
                            category.category_image = category_image
                        if display_type is not None:
                            category.main_menu_display_type = display_type
                        if description is not None:
                            category.main_menu_description = description

            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Updated main menu item {items[0].id} ({slug})")
        return items[0]

    @staticmethod
    @with_db_retry
    def get_menu_popular_products(identifier: int) -> list:
        """Products of a menu item's popular_product_ids, in stored order.

        ``identifier`` is tried as a menu item id first, then as a category id.
        """
        item = db.session.get(MainMenuItem, identifier)
        if item is None:
            item = MainMenuItem.query.filter_by(category_id=identifier).first()

        if item is None or not item.popular_product_ids:
            return []

        product_ids = [int(pid) for pid in item.popular_product_ids]
        products = Product.query.filter(Product.id.in_(product_ids)).all()
        products_map = {p.id: p for p in products}
        return [products_map[pid].to_card() for pid in product_ids if pid in products_map]
