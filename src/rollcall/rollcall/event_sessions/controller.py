from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_coordinator_id, json_error, read_json, server_error
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.session_service

    @app.route("/api/event-attendance/sessions", methods=["GET"], endpoint="api_sessions_list")
    def list_sessions():
        try:
            coordinator_id = current_coordinator_id(request.args.get("coordinatorId"))
            return jsonify({"success": True, "sessions": service.list_sessions(coordinator_id)})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "fetching sessions", "Failed to fetch sessions")

    @app.route("/api/event-attendance/sessions", methods=["POST"], endpoint="api_sessions_create")
    def create_session():
        try:
            body = request.get_json(silent=True) or {}
            coordinator_id = current_coordinator_id(body.get("coordinatorId"))
            return jsonify({"success": True, "session": service.create_session(coordinator_id)})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "creating session", "Failed to create session")

    @app.route("/api/event-attendance/sessions/<session_id>", methods=["GET"], endpoint="api_sessions_get")
    def get_session(session_id: str):
        try:
            coordinator_id = current_coordinator_id(request.args.get("coordinatorId"))
            return jsonify({"success": True, "session": service.get_session(coordinator_id, session_id)})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "fetching session", "Failed to fetch session")

    @app.route("/api/event-attendance/sessions/<session_id>", methods=["PATCH"], endpoint="api_sessions_mark")
    def mark_session(session_id: str):
        try:
            current_coordinator_id()
            body = read_json()
            coordinator_id = current_coordinator_id(body.get("coordinatorId"))
            session = service.mark_present(coordinator_id, session_id, body.get("volunteerIds"))
            return jsonify({"success": True, "session": session})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "updating attendance", "Failed to update attendance")
