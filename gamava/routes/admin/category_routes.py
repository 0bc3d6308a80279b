from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from gamava.enums import UserRole
from gamava.schemas import (
    CategoryCreateSchema,
    CategoryUpdateSchema,
    CategoryReorderSchema,
    CategoryProductsSchema,
    PopularProductsSchema,
)
from gamava.services.category_service import CategoryService
from gamava.services.popular_product_service import PopularProductService
from gamava.utils.decorators import role_required
from gamava.utils.helpers import parse_bool_arg
from gamava.utils.validators import validate_schema, require_int_arg

category_admin_bp = Blueprint("categories", __name__)


@category_admin_bp.route("", methods=["GET"])
@jwt_required()
@role_required(UserRole.ADMIN)
def list_categories(current_user):
    """Category tree, flat list, or direct children of parent_id"""
    hierarchical = parse_bool_arg(request.args.get("hierarchical"), default=True)
    parent_id = request.args.get("parent_id", type=int)

    categories = CategoryService.list_categories(
        hierarchical=hierarchical, parent_id=parent_id
    )
    return jsonify({"categories": categories}), 200


@category_admin_bp.route("/<int:category_id>", methods=["GET"])
@jwt_required()
@role_required(UserRole.ADMIN)
def get_category(category_id, current_user):
    return jsonify({"category": CategoryService.get_category_detail(category_id)}), 200


@category_admin_bp.route("", methods=["POST"])
@jwt_required()
@role_required(UserRole.ADMIN)
@validate_schema(CategoryCreateSchema)
def create_category(current_user):
    data = dict(request.validated_data)
    category = CategoryService.create_category(data.pop("name"), data.pop("slug"), **data)
    return jsonify({"category": category.to_dict()}), 201


@category_admin_bp.route("", methods=["PUT"])
@jwt_required()
@role_required(UserRole.ADMIN)
@validate_schema(CategoryUpdateSchema)
def update_category(current_user):
    category_id = require_int_arg("id", "Category ID is required")
    category = CategoryService.update_category(category_id, request.validated_data)
    return jsonify({"category": category.to_dict()}), 200


@category_admin_bp.route("", methods=["DELETE"])
@jwt_required()
@role_required(UserRole.ADMIN)
def delete_category(current_user):
    category_id = require_int_arg("id", "Category ID is required")
    CategoryService.delete_category(category_id)
    return jsonify({"message": "Category deleted successfully"}), 200


@category_admin_bp.route("/reorder", methods=["PUT"])
@jwt_required()
@role_required(UserRole.ADMIN)
@validate_schema(CategoryReorderSchema)
def reorder_categories(current_user):
    category_ids = [entry["id"] for entry in request.validated_data["categories"]]
    CategoryService.reorder_categories(category_ids)
    return jsonify({"message": "Categories reordered successfully"}), 200


@category_admin_bp.route("/popular-products", methods=["GET"])
@jwt_required()
@role_required(UserRole.ADMIN)
def get_popular_products(current_user):
    """Curated products of categoryId, or the product picker feed when absent"""
    category_id = request.args.get("categoryId", type=int)

    if category_id is not None:
        products = PopularProductService.get_popular_products(category_id)
    else:
        products = PopularProductService.search_candidate_products(request.args.get("search"))

    return jsonify({"products": products}), 200


@category_admin_bp.route("/popular-products", methods=["POST"])
@jwt_required()
@role_required(UserRole.ADMIN)
@validate_schema(PopularProductsSchema)
def set_popular_products(current_user):
    data = request.validated_data
    PopularProductService.set_popular_products(data["category_id"], data["product_ids"])
    return jsonify({"success": True}), 200


@category_admin_bp.route("/<int:category_id>/products", methods=["POST"])
@jwt_required()
@role_required(UserRole.ADMIN)
@validate_schema(CategoryProductsSchema)
def assign_products(category_id, current_user):
    """Link this category to a set of products"""
    added = CategoryService.assign_products(
        category_id, request.validated_data["product_ids"]
    )
    return jsonify({"category_id": category_id, "added": added}), 200
