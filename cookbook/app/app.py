import logging
from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from werkzeug.exceptions import HTTPException
from cookbook.app.config import Config

db = SQLAlchemy()


def error_response(message, code):
    return jsonify({"success": False, "error": message}), code


def create_app(config_object=Config):
    app = Flask(__name__)

    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format='%(asctime)s %(levelname)s %(name)s %(message)s'
    )

    # after_request hooks run in reverse order, so this one sees the
    # response after Flask-CORS and replaces its preflight-only subset.
    @app.after_request
    def announce_cors_methods_and_headers(response):
        response.headers["Access-Control-Allow-Methods"] = ", ".join(app.config["CORS_ALLOWED_METHODS"])
        response.headers["Access-Control-Allow-Headers"] = ", ".join(app.config["CORS_ALLOWED_HEADERS"])
        return response

    CORS(app,
         origins="*",
         send_wildcard=True,
         methods=app.config["CORS_ALLOWED_METHODS"],
         allow_headers=app.config["CORS_ALLOWED_HEADERS"])

    db.init_app(app)

    from cookbook.app.recipes.store import RecipeStore
    app.extensions["recipe_store"] = RecipeStore(db.session)

    # Preflight never reaches routing, so unknown paths answer too.
    @app.before_request
    def short_circuit_options():
        if request.method == "OPTIONS":
            return "", 200

    @app.errorhandler(HTTPException)
    def http_error(e):
        message = "Method not allowed" if e.code == 405 else e.description
        return error_response(message, e.code)

    @app.cli.command("init-db")
    def init_db():
        """Create the recipes, ingredients and tags tables."""
        from cookbook.app.recipes import model  # noqa: F401
        db.create_all()
        logging.info("Database tables created")

    from cookbook.app.recipes.routes import recipes
    app.register_blueprint(recipes)

    return app

# flask --app cookbook.app.app:create_app init-db
