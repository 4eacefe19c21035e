"""Flask JSON API over the service log store."""

import os
from pathlib import Path
from typing import Optional

from flask import Flask, abort, jsonify, request

from servicelogs import (
    ALL_TYPES,
    DateRange,
    FilterCriteria,
    NotFoundError,
    ServiceLogStore,
    ValidationResult,
    adjust_end_date,
    filter_logs,
    new_draft_seed,
)
from servicelogs.loader import fields_from_dict, log_to_dict, state_to_dict

# Default state file (relative to project root)
DEFAULT_STATE_FILE = Path(__file__).parent.parent / "data" / "servicelogs.yaml"


def get_state_file() -> Path:
    """State file path from SERVICELOGS_FILE, or the default."""
    return Path(os.environ.get("SERVICELOGS_FILE", DEFAULT_STATE_FILE))


def json_body() -> dict:
    """Request JSON as a dict; anything else is a 400."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        abort(400, description="Expected a JSON object")
    return body


def validation_failed(result: ValidationResult):
    return jsonify({"errors": result.errors}), 422


def create_app(store: Optional[ServiceLogStore] = None) -> Flask:
    """Build the app around `store` (defaults to one backed by the state file)."""
    app = Flask(__name__)
    app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
    app.config["STORE"] = store or ServiceLogStore(get_state_file())

    def current_store() -> ServiceLogStore:
        return app.config["STORE"]

    @app.errorhandler(NotFoundError)
    def not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.route("/api/state")
    def get_state():
        """Full state snapshot for rendering."""
        return jsonify(state_to_dict(current_store().state))

    @app.route("/api/logs")
    def list_logs():
        """Logs filtered by ?q=&type=&start=&end=."""
        criteria = FilterCriteria(
            query=request.args.get("q", ""),
            type=request.args.get("type", ALL_TYPES) or ALL_TYPES,
            date_range=DateRange(
                start=request.args.get("start") or None,
                end=request.args.get("end") or None,
            ),
        )
        logs = filter_logs(current_store().state.logs, criteria)
        return jsonify([log_to_dict(log) for log in logs])

    @app.route("/api/logs", methods=["POST"])
    def add_log():
        """Validate and commit a new log."""
        store = current_store()
        result = store.submit(fields_from_dict(json_body()))
        if not result.valid:
            return validation_failed(result)
        return jsonify(log_to_dict(store.state.logs[0])), 201

    @app.route("/api/logs/<log_id>", methods=["PUT"])
    def update_log(log_id: str):
        """Validate and save an edited log."""
        store = current_store()
        result = store.edit(log_id, fields_from_dict(json_body()))
        if not result.valid:
            return validation_failed(result)
        return jsonify(log_to_dict(store.state.get_log(log_id)))

    @app.route("/api/logs/<log_id>", methods=["DELETE"])
    def delete_log(log_id: str):
        current_store().delete_log(log_id)
        return "", 204

    @app.route("/api/drafts", methods=["POST"])
    def create_draft():
        """Start a draft: default dates and type, overlaid with the request body."""
        seed = adjust_end_date({**new_draft_seed(), **fields_from_dict(json_body())})
        state = current_store().create_draft(seed)
        return jsonify(state_to_dict(state)), 201

    @app.route("/api/drafts", methods=["DELETE"])
    def clear_drafts():
        return jsonify(state_to_dict(current_store().clear_all_drafts()))

    @app.route("/api/drafts/active", methods=["PUT"])
    def set_active_draft():
        """Switch the active draft to {"id": ...}."""
        store = current_store()
        draft_id = json_body().get("id")
        if not isinstance(draft_id, str):
            abort(400, description="Expected a draft id")
        store.state.get_draft(draft_id)
        return jsonify(state_to_dict(store.set_active_draft(draft_id)))

    @app.route("/api/drafts/active", methods=["DELETE"])
    def delete_draft():
        return jsonify(state_to_dict(current_store().delete_draft()))

    @app.route("/api/form", methods=["PUT"])
    def autosave_form():
        """Autosave form values into the active draft or the scratch form."""
        state = current_store().autosave(fields_from_dict(json_body()))
        return jsonify(state_to_dict(state))

    @app.route("/api/submit", methods=["POST"])
    def submit_form():
        """Commit the full form values, retiring the draft or scratch form."""
        store = current_store()
        result = store.submit(fields_from_dict(json_body()))
        if not result.valid:
            return validation_failed(result)
        return jsonify(state_to_dict(store.state)), 201

    return app


if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=5001)
