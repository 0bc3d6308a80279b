from gamava.routes.auth import auth_bp
from gamava.routes.admin import admin_bp
from gamava.routes.navigation import navigation_bp


def register_blueprints(app):
    """Register all blueprints"""
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(navigation_bp, url_prefix='/api')
