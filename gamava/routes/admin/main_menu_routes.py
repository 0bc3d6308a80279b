from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from gamava.enums import UserRole
from gamava.schemas import MainMenuItemUpdateSchema
from gamava.services.main_menu_service import MainMenuService
from gamava.utils.decorators import role_required
from gamava.utils.validators import validate_schema

main_menu_admin_bp = Blueprint("main_menu_items", __name__)


@main_menu_admin_bp.route("", methods=["GET"])
@jwt_required()
@role_required(UserRole.ADMIN)
def list_menu_items(current_user):
    return jsonify({"items": MainMenuService.list_menu_items()}), 200


@main_menu_admin_bp.route("", methods=["PUT"])
@jwt_required()
@role_required(UserRole.ADMIN)
@validate_schema(MainMenuItemUpdateSchema)
def update_menu_item(current_user):
    """Edit curated menu fields by slug"""
    data = dict(request.validated_data)
    item = MainMenuService.update_menu_item(data.pop("slug"), data)
    return (
        jsonify(
            {
                "success": True,
                "message": "Main menu item updated successfully",
                "item": item.to_dict(),
            }
        ),
        200,
    )
