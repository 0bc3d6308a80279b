import pytest
from decimal import Decimal
from gamava import create_app, db
from gamava.config import TestingConfig
from gamava.models.user import User
from gamava.models.product import Product
from gamava.models.category import Category, ProductCategory


@pytest.fixture(scope="function")
def app():
    """Create application for testing"""
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Test client"""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Test CLI runner"""
    return app.test_cli_runner()


# User fixtures
@pytest.fixture
def customer_user(app):
    """Create a customer user"""
    user = User(
        email="customer@test.com",
        username="customer",
        full_name="Test Customer",
        role="customer",
        is_active=True,
    )
    user.set_password("password123")
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_user(app):
    """Create an admin user"""
    user = User(
        email="admin@test.com",
        username="admin",
        full_name="Test Admin",
        role="admin",
        is_active=True,
    )
    user.set_password("password123")
    db.session.add(user)
    db.session.commit()
    return user


# Auth token fixtures
@pytest.fixture
def customer_token(client, customer_user):
    """Get customer authentication token"""
    response = client.post(
        "/api/auth/login", json={"username": "customer", "password": "password123"}
    )
    assert response.status_code == 200, f"Login failed: {response.json}"
    return response.json["access_token"]


@pytest.fixture
def admin_token(client, admin_user):
    """Get admin authentication token"""
    response = client.post(
        "/api/auth/login", json={"username": "admin", "password": "password123"}
    )
    assert response.status_code == 200, f"Login failed: {response.json}"
    return response.json["access_token"]


@pytest.fixture
def customer_headers(customer_token):
    """Customer authentication headers"""
    return {"Authorization": f"Bearer {customer_token}"}


@pytest.fixture
def admin_headers(admin_token):
    """Admin authentication headers"""
    return {"Authorization": f"Bearer {admin_token}"}


# Data fixtures
@pytest.fixture
def products(app):
    """Ten products with predictable names and ids 1..10"""
    items = []
    for i in range(1, 11):
        product = Product(
            name=f"Game {i:02d}",
            slug=f"game-{i:02d}",
            price=Decimal("9.99") + i,
            images_cover_url=f"https://cdn.example.com/game-{i}.jpg",
            platform="Steam",
        )
        db.session.add(product)
        items.append(product)
    db.session.commit()
    return items


@pytest.fixture
def category(app):
    """Create a test category"""
    category = Category(name="Gift Cards", slug="gift-cards", description="Prepaid cards")
    db.session.add(category)
    db.session.commit()
    return category


@pytest.fixture
def category_tree(app, products):
    """PC Games (3 products) > Strategy (2 products) > Turn Based (1 product), plus Software (0)

    Returns a dict of name -> Category.
    """
    pc_games = Category(name="PC Games", slug="pc-games", order_position=0)
    software = Category(name="Software", slug="software", order_position=1)
    db.session.add_all([pc_games, software])
    db.session.flush()

    strategy = Category(name="Strategy", slug="strategy", parent_id=pc_games.id, order_position=1)
    action = Category(name="Action", slug="action", parent_id=pc_games.id, order_position=0)
    db.session.add_all([strategy, action])
    db.session.flush()

    turn_based = Category(name="Turn Based", slug="turn-based", parent_id=strategy.id)
    db.session.add(turn_based)
    db.session.flush()

    links = [
        (products[0], pc_games),
        (products[1], pc_games),
        (products[2], pc_games),
        (products[3], strategy),
        (products[4], strategy),
        (products[5], turn_based),
    ]
    for product, cat in links:
        db.session.add(ProductCategory(product_id=product.id, category_id=cat.id))
    db.session.commit()

    return {
        "PC Games": pc_games,
        "Software": software,
        "Strategy": strategy,
        "Action": action,
        "Turn Based": turn_based,
    }
