from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from gamava.schemas import UserRegisterSchema, UserLoginSchema
from gamava.services.auth_service import AuthService
from gamava.utils.validators import validate_schema

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
@validate_schema(UserRegisterSchema)
def register():
    """Self-service sign-up, customers only"""
    user = AuthService.register_user(**request.validated_data)
    return jsonify({"user": user.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
@validate_schema(UserLoginSchema)
def login():
    return jsonify(AuthService.login_user(**request.validated_data)), 200


@auth_bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh():
    access_token = AuthService.refresh_access_token(get_jwt_identity())
    return jsonify({"access_token": access_token}), 200


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    user = AuthService.get_user_by_id(get_jwt_identity())
    return jsonify({"user": user.to_dict()}), 200
