import os

from dotenv import load_dotenv, find_dotenv
from flask import Flask
from flask_migrate import Migrate

from db import db

migrate = Migrate()


def create_app(config=None):
    """Builds the Flask app. ``config`` overrides values read from the environment."""
    load_dotenv(find_dotenv())

    app = Flask(__name__)
    app.config['SECRET_KEY'] = os.environ.get("FLASK_KEY")
    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get("DB_URI", "sqlite:///farm_ledger.db")
    app.config['API_KEY'] = os.environ.get("API_KEY")
    app.config['FARM_TIMEZONE'] = os.environ.get("FARM_TIMEZONE", "UTC")
    if config:
        app.config.update(config)

    # --- Extensions ---
    db.init_app(app)
    migrate.init_app(app, db)

    # Registers every table on the metadata before migrations or create_all.
    import models  # noqa: F401

    # --- Route Blueprints ---
    from routes.inventory_routes import inventory_api
    from routes.plantings_routes import plantings_api

    app.register_blueprint(inventory_api)
    app.register_blueprint(plantings_api)

    # --- Basic Routes ---
    @app.route('/')
    def index():
        return "Welcome to the Farm Ledger API!"

    return app


app = create_app()


# --- Run Application ---
if __name__ == "__main__":
    app.run(debug=True, port=5028)
