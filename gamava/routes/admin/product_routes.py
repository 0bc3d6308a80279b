from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from gamava.utils.decorators import role_required
from gamava.enums import UserRole
from gamava.schemas import ProductCreateSchema, ProductCategoriesSchema
from gamava.utils.helpers import parse_bool_arg
from gamava.utils.validators import validate_pagination, validate_schema, require_int_arg
from gamava.services.product_service import ProductService

product_admin_bp = Blueprint("products", __name__)


@product_admin_bp.route("", methods=["GET"])
@jwt_required()
@role_required(UserRole.ADMIN)
def get_products(current_user):
    """Get all products"""
    search = request.args.get("search")
    is_active = request.args.get("is_active")
    page, per_page = validate_pagination()

    pagination = ProductService.search_products(
        search=search,
        is_active=parse_bool_arg(is_active) if is_active is not None else None,
        page=page,
        per_page=per_page,
    )

    return (
        jsonify(
            {
                "products": [p.to_dict() for p in pagination.items],
                "total": pagination.total,
                "page": page,
                "pages": pagination.pages,
            }
        ),
        200,
    )


@product_admin_bp.route("", methods=["POST"])
@jwt_required()
@role_required(UserRole.ADMIN)
@validate_schema(ProductCreateSchema)
def create_product(current_user):
    data = dict(request.validated_data)
    product = ProductService.create_product(data.pop("name"), data.pop("price"), **data)
    return jsonify({"product": product.to_dict()}), 201


@product_admin_bp.route("/categories", methods=["GET"])
@jwt_required()
@role_required(UserRole.ADMIN)
def get_product_categories(current_user):
    product_id = require_int_arg("productId", "Product ID is required")
    categories = ProductService.get_product_categories(product_id)
    return jsonify({"productId": product_id, "categories": categories}), 200


@product_admin_bp.route("/categories", methods=["POST"])
@jwt_required()
@role_required(UserRole.ADMIN)
@validate_schema(ProductCategoriesSchema)
def set_product_categories(current_user):
    """Replace the category assignments of a product"""
    data = request.validated_data
    category_ids = ProductService.set_product_categories(data["product_id"], data["category_ids"])
    return (
        jsonify(
            {
                "message": f"Updated category assignments for product {data['product_id']}",
                "productId": data["product_id"],
                "categoryIds": category_ids,
            }
        ),
        200,
    )


@product_admin_bp.route("/<int:product_id>", methods=["GET"])
@jwt_required()
@role_required(UserRole.ADMIN)
def get_product(product_id, current_user):
    """Get product detail"""
    product = ProductService.get_product_by_id(product_id)
    return jsonify({"product": product.to_dict()}), 200
