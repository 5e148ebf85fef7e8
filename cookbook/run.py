import logging
import os
import sys
from dotenv import load_dotenv
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

dotenv_path = os.path.join(os.path.dirname(__file__), ".env")
load_dotenv(dotenv_path)

from cookbook.app.app import create_app, db  # noqa: E402

cookbook_app = create_app()


def check_database(app):
    with app.app_context():
        try:
            db.session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logging.critical(f"Could not open the recipe database: {e}")
            return False
        finally:
            db.session.remove()
    return True


def main():
    if not check_database(cookbook_app):
        sys.exit(1)

    port = int(cookbook_app.config["BACKEND_PORT"])
    logging.info(f"Cookbook backend listening on port {port}")
    try:
        cookbook_app.run(host="0.0.0.0", port=port)
    finally:
        with cookbook_app.app_context():
            db.engine.dispose()


if __name__ == "__main__":
    main()
