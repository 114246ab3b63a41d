# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit

from flask import Flask

from chat_backend.infrastructure.container import Container
from chat_backend.shared.config import load_config
from chat_backend.shared.logging import logger, setup_logging
from chat_backend.shared.middleware.error_handler import configure_error_handling
from chat_backend.shared.middleware.rate_limit import configure_rate_limiting
from chat_backend.shared.middleware.request_logger import configure_request_logging


def create_app(container: Container | None = None) -> Flask:
    config = container.config if container is not None else load_config()
    setup_logging(
        "DEBUG" if config.debug_logging else config.log_level,
        serialize=config.is_production(),
    )

    container = container or Container(config)
    container.database.create_all()

    app = Flask(__name__)
    configure_error_handling(app)
    configure_request_logging(app, debug_mode=config.debug_logging)
    configure_rate_limiting(app, config.security)

    app.config.update(SECRET_KEY=config.secret_key)
    app.extensions["container"] = container

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())

    atexit.register(container.close)

    logger.info(f"Flask app initialized env={config.app_env}")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=4000, debug=True)
