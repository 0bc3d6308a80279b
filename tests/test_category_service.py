import pytest
from unittest.mock import patch
from gamava.extensions import db
from gamava.exceptions import ConflictError, NotFoundError, ValidationError
from gamava.models.category import Category, CategoryPopularProduct, ProductCategory
from gamava.models.main_menu import MainMenuItem
from gamava.services.category_service import CategoryService


class TestCreateCategory:
    """Test category creation"""

    def test_create_category_success(self, app):
        """Test create then flat list contains exactly one row with the slug"""
        CategoryService.create_category("PC Games", "pc-games", description="All PC games")

        categories = CategoryService.list_categories(hierarchical=False)
        matching = [c for c in categories if c["slug"] == "pc-games"]
        assert len(matching) == 1
        assert matching[0]["description"] == "All PC games"
        assert matching[0]["status"] is True
        assert matching[0]["main_menu_display_type"] == "products"

    def test_create_requires_name_and_slug(self, app):
        """Test missing name or slug"""
        with pytest.raises(ValidationError, match="Name and slug are required"):
            CategoryService.create_category("", "slug")
        with pytest.raises(ValidationError, match="Name and slug are required"):
            CategoryService.create_category("Name", "   ")

    def test_create_duplicate_slug(self, app, category):
        """Test duplicate slug raises ConflictError"""
        with pytest.raises(ConflictError, match="slug already exists"):
            CategoryService.create_category("Other", "gift-cards")

    def test_create_with_unknown_parent(self, app):
        """Test parent must already exist"""
        with pytest.raises(ValidationError, match="Parent category not found"):
            CategoryService.create_category("Child", "child", parent_id=999)
        assert Category.query.count() == 0

    def test_create_with_parent(self, app, category):
        """Test subcategory creation"""
        child = CategoryService.create_category("Steam", "steam", parent_id=category.id)
        assert child.parent_id == category.id

    def test_create_with_main_menu_creates_menu_item(self, app):
        """Test show_in_main_menu creates an active menu item with empty banner slots"""
        category = CategoryService.create_category("PC Games", "pc-games", show_in_main_menu=True)

        items = MainMenuItem.query.filter_by(category_id=category.id).all()
        assert len(items) == 1
        assert items[0].is_active is True
        assert items[0].banner_images == ["", "", "", ""]
        assert items[0].description == "Browse PC Games products"

    def test_create_without_main_menu_has_no_menu_item(self, app):
        """Test no menu item when flag is false"""
        category = CategoryService.create_category("PC Games", "pc-games")
        assert MainMenuItem.query.filter_by(category_id=category.id).count() == 0

    def test_create_with_popular_products(self, app, products):
        """Test popular products stored in order and projected to the menu item"""
        category = CategoryService.create_category(
            "PC Games",
            "pc-games",
            show_in_main_menu=True,
            popular_products=[products[4].id, products[1].id],
        )

        rows = (
            CategoryPopularProduct.query.filter_by(category_id=category.id)
            .order_by(CategoryPopularProduct.display_order)
            .all()
        )
        assert [(r.product_id, r.display_order) for r in rows] == [
            (products[4].id, 1),
            (products[1].id, 2),
        ]
        item = MainMenuItem.query.filter_by(category_id=category.id).first()
        assert item.popular_product_ids == [products[4].id, products[1].id]

    def test_create_with_unknown_popular_product(self, app):
        """Test unknown product ids are rejected before the category is written"""
        with pytest.raises(ValidationError, match="Products not found"):
            CategoryService.create_category("PC Games", "pc-games", popular_products=[42])
        assert Category.query.count() == 0

    def test_menu_sync_failure_does_not_fail_create(self, app):
        """Test a failing main menu projection is swallowed"""
        with patch(
            "gamava.services.main_menu_service.MainMenuService._parent_item_id",
            side_effect=RuntimeError("menu table unavailable"),
        ):
            category = CategoryService.create_category(
                "PC Games", "pc-games", show_in_main_menu=True
            )

        assert db.session.get(Category, category.id) is not None
        assert MainMenuItem.query.count() == 0


class TestUpdateCategory:
    """Test partial category updates"""

    def test_update_not_found(self, app):
        """Test unknown id"""
        with pytest.raises(NotFoundError):
            CategoryService.update_category(999, {"name": "X"})

    def test_omitted_fields_unchanged(self, app):
        """Test keys that are not sent keep their values"""
        category = CategoryService.create_category(
            "PC Games", "pc-games", icon="pc.svg", description="desc", order_position=3
        )

        CategoryService.update_category(category.id, {"name": "Computer Games"})

        updated = db.session.get(Category, category.id)
        assert updated.name == "Computer Games"
        assert updated.slug == "pc-games"
        assert updated.icon == "pc.svg"
        assert updated.description == "desc"
        assert updated.order_position == 3

    def test_null_clears_nullable_fields_but_not_coalesce_fields(self, app):
        """Test explicit null on nullable vs. non-nullable columns"""
        category = CategoryService.create_category("PC Games", "pc-games", icon="pc.svg")

        CategoryService.update_category(category.id, {"icon": None, "name": None, "status": None})

        updated = db.session.get(Category, category.id)
        assert updated.icon is None
        assert updated.name == "PC Games"
        assert updated.status is True

    def test_update_duplicate_slug(self, app, category):
        """Test slug taken by another category"""
        other = CategoryService.create_category("PC Games", "pc-games")
        with pytest.raises(ConflictError):
            CategoryService.update_category(other.id, {"slug": "gift-cards"})

    def test_update_keeps_own_slug(self, app, category):
        """Test re-sending the same slug is allowed"""
        CategoryService.update_category(category.id, {"slug": "gift-cards", "name": "Cards"})
        assert db.session.get(Category, category.id).name == "Cards"

    def test_update_cannot_create_cycle(self, app, category_tree):
        """Test moving a category under its own descendant"""
        pc_games = category_tree["PC Games"]
        turn_based = category_tree["Turn Based"]

        with pytest.raises(ValidationError, match="own sub-category"):
            CategoryService.update_category(pc_games.id, {"parent_id": turn_based.id})
        with pytest.raises(ValidationError, match="own parent"):
            CategoryService.update_category(pc_games.id, {"parent_id": pc_games.id})

    def test_update_moves_category(self, app, category_tree):
        """Test re-parenting to an unrelated category"""
        action = category_tree["Action"]
        software = category_tree["Software"]

        CategoryService.update_category(action.id, {"parent_id": software.id})
        assert db.session.get(Category, action.id).parent_id == software.id

    def test_popular_products_key_replaces_set(self, app, products):
        """Test empty list clears popular products"""
        category = CategoryService.create_category(
            "PC Games", "pc-games", popular_products=[products[0].id]
        )

        CategoryService.update_category(category.id, {"popular_products": []})
        assert CategoryPopularProduct.query.filter_by(category_id=category.id).count() == 0

    def test_missing_popular_products_key_keeps_set(self, app, products):
        """Test popular products untouched when key absent"""
        category = CategoryService.create_category(
            "PC Games", "pc-games", popular_products=[products[0].id]
        )

        CategoryService.update_category(category.id, {"name": "Games"})
        assert CategoryPopularProduct.query.filter_by(category_id=category.id).count() == 1

    def test_toggle_main_menu_preserves_curated_content(self, app, products):
        """Test false -> true -> false keeps banners and popular ids"""
        category = CategoryService.create_category(
            "PC Games", "pc-games", show_in_main_menu=True,
            popular_products=[products[2].id, products[0].id],
        )
        item = MainMenuItem.query.filter_by(category_id=category.id).first()
        item.banner_images = ["a.jpg", "", "", ""]
        db.session.commit()

        CategoryService.update_category(category.id, {"show_in_main_menu": False})
        item = MainMenuItem.query.filter_by(category_id=category.id).first()
        assert item.is_active is False
        assert item.popular_product_ids == [products[2].id, products[0].id]

        CategoryService.update_category(category.id, {"show_in_main_menu": True})
        item = MainMenuItem.query.filter_by(category_id=category.id).first()
        assert item.is_active is True
        assert item.banner_images == ["a.jpg", "", "", ""]
        assert item.popular_product_ids == [products[2].id, products[0].id]

        CategoryService.update_category(category.id, {"show_in_main_menu": False})
        item = MainMenuItem.query.filter_by(category_id=category.id).first()
        assert item.is_active is False
        assert item.popular_product_ids == [products[2].id, products[0].id]
        assert MainMenuItem.query.count() == 1

    def test_rename_updates_menu_item(self, app):
        """Test name/slug changes flow to the menu item when the flag is sent"""
        category = CategoryService.create_category("PC Games", "pc-games", show_in_main_menu=True)

        CategoryService.update_category(
            category.id, {"name": "Computer", "slug": "computer", "show_in_main_menu": True}
        )

        item = MainMenuItem.query.filter_by(category_id=category.id).first()
        assert item.name == "Computer"
        assert item.slug == "computer"
        assert item.description == "Browse Computer products"


    def test_rename_without_flag_leaves_menu_item(self, app):
        """Test the menu item only follows renames that carry the menu flag"""
        category = CategoryService.create_category("PC Games", "pc-games", show_in_main_menu=True)

        CategoryService.update_category(category.id, {"name": "Computer", "slug": "computer"})

        item = MainMenuItem.query.filter_by(category_id=category.id).first()
        assert (item.name, item.slug) == ("PC Games", "pc-games")


class TestDeleteCategory:
    """Test category deletion"""

    def test_delete_leaf(self, app, category):
        """Test delete category without children"""
        CategoryService.delete_category(category.id)
        assert db.session.get(Category, category.id) is None

    def test_delete_with_children_blocked(self, app, category_tree):
        """Test delete is rejected and both rows stay"""
        pc_games = category_tree["PC Games"]
        with pytest.raises(ConflictError, match="sub-categories"):
            CategoryService.delete_category(pc_games.id)

        assert db.session.get(Category, pc_games.id) is not None
        assert db.session.get(Category, category_tree["Strategy"].id) is not None

    def test_delete_not_found(self, app):
        """Test unknown id"""
        with pytest.raises(NotFoundError):
            CategoryService.delete_category(999)

    def test_delete_leaves_product_links(self, app, category_tree):
        """Test associations are not cleaned up implicitly"""
        turn_based = category_tree["Turn Based"]
        CategoryService.delete_category(turn_based.id)

        assert ProductCategory.query.filter_by(category_id=turn_based.id).count() == 1


class TestListCategories:
    """Test category listings"""

    def test_hierarchical_with_recursive_counts(self, app, category_tree):
        """Test tree shape and counts"""
        tree = CategoryService.list_categories(hierarchical=True)

        assert [n["name"] for n in tree] == ["PC Games", "Software"]
        pc_games = tree[0]
        assert pc_games["product_count"] == 6
        assert [c["name"] for c in pc_games["children"]] == ["Action", "Strategy"]
        strategy = pc_games["children"][1]
        assert strategy["product_count"] == 3
        assert strategy["children"][0]["product_count"] == 1
        assert tree[1]["product_count"] == 0

    def test_flat_list_direct_counts(self, app, category_tree):
        """Test flat list ordered by order_position, name"""
        categories = CategoryService.list_categories(hierarchical=False)

        assert len(categories) == 5
        counts = {c["name"]: c["product_count"] for c in categories}
        assert counts["PC Games"] == 3
        assert counts["Strategy"] == 2
        assert "children" not in categories[0]

    def test_parent_filter(self, app, category_tree):
        """Test direct children only"""
        categories = CategoryService.list_categories(parent_id=category_tree["PC Games"].id)
        assert [c["name"] for c in categories] == ["Action", "Strategy"]

    def test_counts_reflect_new_links(self, app, category_tree, products):
        """Test counts are recomputed on every read"""
        CategoryService.assign_products(category_tree["Action"].id, [products[9].id])

        tree = CategoryService.list_categories()
        assert tree[0]["product_count"] == 7


class TestReorderCategories:
    """Test reordering"""

    def test_reorder_sets_positions(self, app, category_tree):
        """Test positions follow list order"""
        ids = [
            category_tree["Software"].id,
            category_tree["PC Games"].id,
            category_tree["Action"].id,
        ]
        CategoryService.reorder_categories(ids)

        assert [db.session.get(Category, i).order_position for i in ids] == [0, 1, 2]

    def test_reorder_is_atomic(self, app, category_tree):
        """Test a failure on the second id rolls back the first"""
        software = category_tree["Software"]
        assert software.order_position == 1

        with pytest.raises(NotFoundError):
            CategoryService.reorder_categories([software.id, 999, category_tree["Action"].id])

        assert db.session.get(Category, software.id).order_position == 1


class TestAssignProducts:
    """Test category to products assignment"""

    def test_assign_is_idempotent(self, app, category, products):
        """Test existing pairs are skipped"""
        added = CategoryService.assign_products(category.id, [products[0].id, products[1].id])
        assert added == 2

        added = CategoryService.assign_products(category.id, [products[1].id, products[2].id])
        assert added == 1
        assert ProductCategory.query.filter_by(category_id=category.id).count() == 3

    def test_assign_unknown_category(self, app, products):
        """Test unknown category"""
        with pytest.raises(NotFoundError):
            CategoryService.assign_products(999, [products[0].id])


class TestSeedDemoTree:
    """Test demo taxonomy seeding"""

    def test_seed_is_repeatable(self, app):
        """Test second run creates nothing"""
        created = CategoryService.seed_demo_tree()
        assert len(created) == 8
        assert CategoryService.seed_demo_tree() == []

        roots = CategoryService.list_categories()
        assert [r["name"] for r in roots] == ["PC Games", "Gift Cards", "Software"]
        assert [c["slug"] for c in roots[1]["children"]] == [
            "gift-cards-steam",
            "gift-cards-playstation",
        ]

    def test_seed_builds_menu(self, app):
        """Test seeded subcategories hang under their root menu item"""
        CategoryService.seed_demo_tree()

        root_item = MainMenuItem.query.filter_by(slug="pc-games").one()
        child_item = MainMenuItem.query.filter_by(slug="pc-games-strategy").one()
        assert child_item.parent_id == root_item.id
        assert MainMenuItem.query.count() == 8
