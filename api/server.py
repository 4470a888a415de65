from flask import Flask
from flask_cors import CORS
import logging
import os

from routes.references_api import references_bp


def create_app() -> Flask:
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "change-me")

    CORS(app)

    app.register_blueprint(references_bp)
    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    create_app().run(host="127.0.0.1", port=int(os.getenv("PORT", "5055")))
