"""Flask JSON interface for nupkgview.

Endpoints take the package location as the ``path`` query parameter; the
package is re-read on every request, nothing is cached.
"""
from __future__ import annotations

import io
import json
import logging
from typing import Any

from flask import Flask, abort, jsonify, request, send_file

from .classify import mime_type_for
from .errors import (
    ArchiveOpenError,
    MissingMetadataError,
    NupkgError,
    PackageFileNotFoundError,
    StreamError,
)
from .logs import LogMemory
from .mcp import generate_mcp_startup_config
from .parser import NupkgParser

logger = logging.getLogger(__name__)

_STATUS = {
    ArchiveOpenError: 400,
    PackageFileNotFoundError: 404,
    MissingMetadataError: 422,
    StreamError: 500,
}


def _required_arg(name: str) -> str:
    value = request.args.get(name, "").strip()
    if not value:
        abort(400, description=f"missing '{name}' query parameter")
    return value


def _log_memory(max_logs: int) -> LogMemory:
    """Return the LogMemory attached to the package logger, adding one if needed."""
    pkg_logger = logging.getLogger("nupkgview")
    for handler in pkg_logger.handlers:
        if isinstance(handler, LogMemory):
            return handler
    memory = LogMemory(max_logs)
    pkg_logger.addHandler(memory)
    return memory


def create_app(**config: Any) -> Flask:
    app = Flask(__name__)
    app.config.update(LOG_MEMORY_SIZE=50)
    app.config.from_prefixed_env("NUPKGVIEW")
    app.config.update(config)

    log_memory = _log_memory(app.config["LOG_MEMORY_SIZE"])
    app.extensions["nupkgview.log_memory"] = log_memory
    parser = NupkgParser()

    @app.errorhandler(NupkgError)
    def package_error(e: NupkgError):
        status = next((code for cls, code in _STATUS.items() if isinstance(e, cls)), 500)
        logger.error("%s", e)
        return jsonify(error=type(e).__name__, message=str(e)), status

    @app.errorhandler(400)
    @app.errorhandler(404)
    def http_error(e):
        return jsonify(error=e.name, message=e.description), e.code

    @app.route("/api/package")
    def package():
        content = parser.parse_package(_required_arg("path"))
        return jsonify(content.to_dict())

    @app.route("/api/file")
    def file_content():
        result = parser.get_file_content(_required_arg("path"), _required_arg("entry"))
        buf = io.BytesIO(result.content)
        buf.seek(0)
        return send_file(buf, mimetype=result.mime_type)

    @app.route("/api/icon")
    def icon():
        content = parser.parse_package(_required_arg("path"))
        if content.icon_data is None:
            abort(404, description="package has no icon")
        buf = io.BytesIO(content.icon_data)
        buf.seek(0)
        return send_file(buf, mimetype=mime_type_for(content.icon_path or ""))

    @app.route("/api/mcp-config")
    def mcp_config():
        content = parser.parse_package(_required_arg("path"))
        if content.mcp_server_content is None:
            abort(404, description="package has no .mcp/server.json")
        try:
            server = json.loads(content.mcp_server_content)
        except ValueError as e:
            logger.warning("Invalid %s: %s", content.mcp_server_path, e)
            abort(404, description=f"invalid {content.mcp_server_path}")
        return jsonify(generate_mcp_startup_config(server))

    @app.route("/api/logs")
    def logs():
        return jsonify(logs=log_memory.get_all())

    return app
