from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_coordinator_id, json_error, server_error
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.volunteer_service

    @app.route("/api/event-attendance/volunteers", methods=["GET"], endpoint="api_volunteers_list")
    def list_volunteers():
        try:
            coordinator_id = current_coordinator_id(request.args.get("coordinatorId"))
            return jsonify({"success": True, "volunteers": service.list_volunteers(coordinator_id)})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "fetching volunteers")

    @app.route("/api/event-attendance/volunteers/bulk", methods=["POST"], endpoint="api_volunteers_bulk")
    def bulk_volunteers():
        upload = request.files.get("file")
        try:
            coordinator_id = current_coordinator_id(request.form.get("coordinatorId"))
            if not upload:
                return jsonify({"error": "No file provided"}), 400
            result = service.import_volunteers(
                coordinator_id,
                upload.read(),
                worksheet=request.form.get("worksheet") or None,
                filename=upload.filename,
            )
            return jsonify(result.to_dict())
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "processing volunteer upload")
