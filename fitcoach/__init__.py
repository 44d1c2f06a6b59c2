import os

from flask import Flask, jsonify

from domain.errors import TransientStoreError
from fitcoach.config import config
from fitcoach.extensions import cors, db, jwt, ma, migrate


def register_error_handlers(app):
    @app.errorhandler(TransientStoreError)
    def store_unavailable(error):
        app.logger.error(f"Store unavailable: {error}")
        return jsonify({"msg": "Data is temporarily unavailable, please try again.", "retry": True}), 503

    @jwt.unauthorized_loader
    def unauthorized_callback(reason):
        return jsonify({"msg": reason}), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return jsonify({"msg": reason}), 401

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"msg": "Token has expired"}), 401


def create_app(config_name=None):
    app = Flask(__name__)
    app.config.from_object(config[config_name or os.getenv('FLASK_CONFIG', 'default')])
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Extensions
    db.init_app(app)
    ma.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    cors.init_app(app, resources={r"/api/*": {
        "origins": app.config['CORS_ORIGINS'],
        "allow_headers": ["Content-Type", "Authorization"],
        "methods": ["GET", "POST", "OPTIONS"]
    }})

    register_error_handlers(app)

    # Blueprints
    from fitcoach.routes.client import client_bp
    from fitcoach.routes.trainer import trainer_bp
    from fitcoach.routes.admin import admin_bp
    from fitcoach.routes.packages import packages_bp
    from fitcoach.routes.pages import pages_bp

    app.register_blueprint(client_bp, url_prefix="/api")
    app.register_blueprint(trainer_bp, url_prefix="/api/trainer")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
    app.register_blueprint(packages_bp, url_prefix="/api/packages")
    app.register_blueprint(pages_bp)

    from fitcoach.cli import register_cli
    register_cli(app)

    return app
