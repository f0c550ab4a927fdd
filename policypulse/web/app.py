"""Minimal Flask control surface: health check and manual run trigger."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request

from policypulse.errors import RunInProgressError
from policypulse.pipeline.orchestrator import IngestionPipeline


logger = logging.getLogger(__name__)

SERVICE_NAME = "policypulse-ingest"


def create_app(pipeline: IngestionPipeline) -> Flask:
    app = Flask(__name__)
    app.config["PIPELINE"] = pipeline

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify(
            {
                "status": "ok",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "service": SERVICE_NAME,
                "pipeline_state": pipeline.state.value,
                "running": pipeline.is_running,
            }
        )

    @app.route("/api/jobs/trigger", methods=["POST"])
    def trigger_job():
        logger.info("Manual job trigger requested")
        try:
            summary = pipeline.run()
        except RunInProgressError as e:
            return jsonify({"success": False, "error": "Run in progress", "message": str(e)}), 409
        except Exception as e:
            logger.exception("Manual job trigger failed")
            return jsonify({"success": False, "error": "Failed to trigger job", "message": str(e)}), 500
        return jsonify({"success": True, "message": "Job completed", "summary": summary.to_dict()})

    @app.errorhandler(404)
    def not_found(_e):
        return (
            jsonify(
                {
                    "success": False,
                    "error": "Not Found",
                    "message": f"Route {request.method} {request.path} not found",
                }
            ),
            404,
        )

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return jsonify({"success": False, "error": "Method Not Allowed"}), 405

    return app
