# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import importlib
from typing import Any, Protocol, cast

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from arcade_auth.infrastructure.container import Container
from arcade_auth.infrastructure.db import Database, init_db
from arcade_auth.interfaces.http.auth_gate import EXTENSION_KEY
from arcade_auth.shared.config import AppConfig, load_config
from arcade_auth.shared.errors import register_error_handlers
from arcade_auth.shared.logging import logger, setup_logging
from arcade_auth.shared.middleware.rate_limit import configure_rate_limiting
from arcade_auth.shared.middleware.request_logger import configure_request_logging
from arcade_auth.shared.middleware.security_headers import configure_security_headers


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)


def create_app(config: AppConfig | None = None, *, database: Database | None = None) -> Flask:
    config = config or load_config()
    database = database or Database(config.database)
    init_db(database, config.resilience)

    for warning in config.security_warnings():
        logger.warning(f"config: {warning}")

    app = Flask(__name__)
    app.config.update(MAX_CONTENT_LENGTH=config.max_content_length)
    app.json.sort_keys = False  # type: ignore[attr-defined]
    if config.security.trusted_proxies:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=config.security.trusted_proxies)  # type: ignore[method-assign]

    configure_request_logging(app, debug_mode=config.debug_logging)
    register_error_handlers(app, debug_mode=config.debug_logging)
    configure_rate_limiting(app, config.security)
    configure_security_headers(app, enable_hsts=config.security.enable_hsts)

    CORS(
        app,
        resources={r"/api/*": {"origins": config.security.allowed_origins}},
        supports_credentials="*" not in config.security.allowed_origins,
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    container = Container(config, database)
    app.extensions[EXTENSION_KEY] = container
    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())

    logger.info("Flask app initialized")
    return app


def main() -> None:
    config = load_config()
    setup_logging(debug_mode=config.debug_logging)
    app = create_app(config)
    logger.info(f"Auth server listening on {config.host}:{config.port}")
    logger.info(f"Health check: http://localhost:{config.port}/api/health")
    try:
        app.run(host=config.host, port=config.port)
    finally:
        app.extensions[EXTENSION_KEY].close()


if __name__ == "__main__":
    main()
