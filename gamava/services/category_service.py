import logging

from sqlalchemy.exc import IntegrityError

from gamava.extensions import db
from gamava.exceptions import ConflictError, NotFoundError, ValidationError
from gamava.models.category import Category, ProductCategory
from gamava.models.main_menu import MainMenuItem
from gamava.services.main_menu_service import MainMenuService, direct_product_counts
from gamava.services.popular_product_service import PopularProductService
from gamava.utils.category_tree import build_counted_tree, collect_descendant_ids
from gamava.utils.db_retry import with_db_retry
from gamava.utils.helpers import slugify

logger = logging.getLogger(__name__)

# Columns that ignore a missing or null value on update
COALESCE_FIELDS = (
    "name",
    "slug",
    "order_position",
    "status",
    "show_in_main_menu",
    "main_menu_display_type",
)

# Nullable columns: an explicit null clears them
NULLABLE_FIELDS = (
    "parent_id",
    "icon",
    "banner",
    "description",
    "sub_description",
    "link",
    "category_image",
    "main_menu_description",
)

SLUG_EXISTS = "Category slug already exists"


class CategoryService:
    """Category store: CRUD over the taxonomy tree plus the menu/curation side effects"""

    @staticmethod
    @with_db_retry
    def list_categories(hierarchical: bool = True, parent_id: int = None) -> list:
        counts = direct_product_counts()

        if parent_id is not None:
            children = (
                Category.query.filter_by(parent_id=parent_id)
                .order_by(Category.order_position, Category.name)
                .all()
            )
            return [
                {**c.to_dict(), "product_count": counts.get(c.id, 0)} for c in children
            ]

        categories = Category.query.order_by(Category.order_position, Category.name).all()
        rows = [c.to_dict() for c in categories]

        if hierarchical:
            return build_counted_tree(rows, counts)

        return [{**row, "product_count": counts.get(row["id"], 0)} for row in rows]

    @staticmethod
    def get_category_by_id(category_id: int) -> Category:
        category = db.session.get(Category, category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    @staticmethod
    def get_category_detail(category_id: int) -> dict:
        """Category with its direct product count, popular products and menu item"""
        category = CategoryService.get_category_by_id(category_id)
        menu_item = MainMenuItem.query.filter_by(category_id=category_id).first()

        data = category.to_dict()
        data["product_count"] = ProductCategory.query.filter_by(category_id=category_id).count()
        data["popular_products"] = PopularProductService.get_popular_products(category_id)
        data["main_menu_item"] = menu_item.to_dict() if menu_item else None
        return data

    @staticmethod
    def _validate_parent(parent_id, category_id: int = None):
        """Parent must already exist and must not sit inside the category's own subtree"""
        if parent_id is None:
            return
        if category_id is not None and parent_id == category_id:
            raise ValidationError("A category cannot be its own parent")
        if db.session.get(Category, parent_id) is None:
            raise ValidationError("Parent category not found")
        if category_id is not None:
            rows = [
                {"id": cid, "parent_id": pid}
                for cid, pid in db.session.query(Category.id, Category.parent_id)
            ]
            if parent_id in collect_descendant_ids(rows, category_id):
                raise ValidationError("A category cannot be moved under its own sub-category")

    @staticmethod
    def _ensure_unique_slug(slug: str, category_id: int = None):
        existing = Category.query.filter_by(slug=slug).first()
        if existing and existing.id != category_id:
            raise ConflictError(SLUG_EXISTS)

    @staticmethod
    def create_category(name: str, slug: str, **kwargs) -> Category:
        """Insert a category, then create its menu item and popular products if requested"""
        name = (name or "").strip()
        slug = (slug or "").strip()
        if not name or not slug:
            raise ValidationError("Name and slug are required")

        parent_id = kwargs.get("parent_id")
        popular_products = kwargs.get("popular_products") or []

        CategoryService._validate_parent(parent_id)
        CategoryService._ensure_unique_slug(slug)
        PopularProductService.validate_product_ids(popular_products)

        category = Category(
            name=name,
            slug=slug,
            parent_id=parent_id,
            icon=kwargs.get("icon"),
            banner=kwargs.get("banner"),
            description=kwargs.get("description"),
            sub_description=kwargs.get("sub_description"),
            link=kwargs.get("link"),
            order_position=kwargs.get("order_position", 0),
            status=kwargs.get("status", True),
            show_in_main_menu=kwargs.get("show_in_main_menu", False),
            category_image=kwargs.get("category_image"),
            main_menu_display_type=kwargs.get("main_menu_display_type") or "products",
            main_menu_description=kwargs.get("main_menu_description"),
        )

        try:
            db.session.add(category)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError(SLUG_EXISTS)

        # Menu item first, so the popular-products sync below finds it
        if category.show_in_main_menu:
            MainMenuService.sync_main_menu(
                category.id, category.slug, category.name, True, category.main_menu_description
            )

        if popular_products:
            PopularProductService.set_popular_products(category.id, popular_products)

        logger.info(f"Created category {category.id} ({category.slug})")
        return category

    @staticmethod
    def update_category(category_id: int, data: dict) -> Category:
        """Partial update; see COALESCE_FIELDS / NULLABLE_FIELDS for null handling"""
        category = CategoryService.get_category_by_id(category_id)

        changes = {}
        for field in COALESCE_FIELDS:
            value = data.get(field)
            if value is not None:
                changes[field] = value.strip() if isinstance(value, str) else value
        for field in NULLABLE_FIELDS:
            if field in data:
                changes[field] = data[field]

        if "name" in changes and not changes["name"]:
            raise ValidationError("Name cannot be empty")
        if "slug" in changes and not changes["slug"]:
            raise ValidationError("Slug cannot be empty")
        if "slug" in changes:
            CategoryService._ensure_unique_slug(changes["slug"], category_id)
        if "parent_id" in changes:
            CategoryService._validate_parent(changes["parent_id"], category_id)

        popular_products = data.get("popular_products")
        if popular_products is not None:
            PopularProductService.validate_product_ids(popular_products)

        try:
            category.update(commit=False, **changes)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError(SLUG_EXISTS)

        if "parent_id" in changes:
            MainMenuService.sync_menu_parent(category.id)

        if data.get("show_in_main_menu") is not None:
            MainMenuService.sync_main_menu(
                category.id,
                category.slug,
                category.name,
                data["show_in_main_menu"],
                category.main_menu_description,
            )

        if popular_products is not None:
            PopularProductService.set_popular_products(category.id, popular_products)

        logger.info(f"Updated category {category.id} ({category.slug})")
        return category

    @staticmethod
    @with_db_retry
    def delete_category(category_id: int):
        """Delete a leaf category. Product associations are left as they are."""
        has_children = Category.query.filter_by(parent_id=category_id).count() > 0
        if has_children:
            raise ConflictError(
                "Cannot delete category with sub-categories. Delete sub-categories first."
            )

        category = CategoryService.get_category_by_id(category_id)
        try:
            category.delete()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError("Category is still referenced by products and cannot be deleted")

        logger.info(f"Deleted category {category_id}")

    @staticmethod
    @with_db_retry
    def reorder_categories(category_ids: list):
        """Set order_position to each id's list index, all or nothing"""
        try:
            for position, category_id in enumerate(category_ids):
                category = db.session.get(Category, category_id)
                if category is None:
                    raise NotFoundError(f"Category {category_id} not found")
                category.update(commit=False, order_position=position)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    @staticmethod
    @with_db_retry
    def assign_products(category_id: int, product_ids: list) -> int:
        """Link one category to many products; pairs that already exist are skipped.

        Returns the number of new links.
        """
        CategoryService.get_category_by_id(category_id)
        PopularProductService.validate_product_ids(product_ids)

        existing = {
            pid
            for (pid,) in db.session.query(ProductCategory.product_id).filter(
                ProductCategory.category_id == category_id,
                ProductCategory.product_id.in_(product_ids),
            )
        }
        new_ids = [pid for pid in product_ids if pid not in existing]

        try:
            for product_id in new_ids:
                db.session.add(ProductCategory(product_id=product_id, category_id=category_id))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        return len(new_ids)

    @staticmethod
    def seed_demo_tree() -> list:
        """Small sample taxonomy for local development"""
        created = []
        tree = {
            "PC Games": ["Strategy", "Action", "RPG"],
            "Gift Cards": ["Steam", "PlayStation"],
            "Software": [],
        }
        for position, (root_name, children) in enumerate(tree.items()):
            root = Category.query.filter_by(slug=slugify(root_name)).first()
            if root is None:
                root = CategoryService.create_category(
                    root_name, slugify(root_name), order_position=position, show_in_main_menu=True
                )
                created.append(root)
            for child_position, child_name in enumerate(children):
                child_slug = f"{root.slug}-{slugify(child_name)}"
                if Category.query.filter_by(slug=child_slug).first():
                    continue
                created.append(
                    CategoryService.create_category(
                        child_name,
                        child_slug,
                        parent_id=root.id,
                        order_position=child_position,
                        show_in_main_menu=True,
                    )
                )
        return created
