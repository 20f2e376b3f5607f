from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, json_error, read_json, server_error
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.people_service

    @app.route("/api/attendance/people", methods=["GET"], endpoint="api_people_list")
    @admin_required
    def list_people():
        try:
            people = service.list_people(
                search=request.args.get("search"),
                sort_by=request.args.get("sortBy"),
                sort_order=request.args.get("sortOrder"),
                cutoff_date=request.args.get("cutoffDate"),
            )
            return jsonify({"people": people})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "fetching people")

    @app.route("/api/attendance/people", methods=["POST"], endpoint="api_people_create")
    @admin_required
    def create_person():
        try:
            body = read_json()
            person = service.create_person(
                name=body.get("name"),
                registration_no=body.get("registration_no"),
                contact_no=body.get("contact_no"),
            )
            return jsonify({"person": person}), 201
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "creating person")

    @app.route("/api/attendance/people", methods=["PATCH"], endpoint="api_people_update")
    @admin_required
    def update_person():
        try:
            body = read_json()
            person = service.update_person(
                person_id=body.get("id"),
                name=body.get("name"),
                contact_no=body.get("contact_no"),
            )
            return jsonify({"person": person})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "updating person")

    @app.route("/api/attendance/people", methods=["DELETE"], endpoint="api_people_delete")
    @admin_required
    def delete_person():
        try:
            service.delete_person(request.args.get("id"))
            return jsonify({"success": True})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "deleting person")

    @app.route("/api/attendance/people/<person_id>/dates", methods=["GET"], endpoint="api_people_dates")
    @admin_required
    def person_dates(person_id: str):
        try:
            return jsonify({"dates": service.attendance_dates(person_id)})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "fetching attendance dates")

    @app.route("/api/attendance/people/bulk", methods=["POST"], endpoint="api_people_bulk")
    @admin_required
    def bulk_people():
        upload = request.files.get("file")
        if not upload:
            return jsonify({"error": "No file provided"}), 400
        try:
            result = service.import_people(
                upload.read(),
                worksheet=request.form.get("worksheet") or None,
                filename=upload.filename,
            )
            return jsonify(result.to_dict())
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "processing bulk upload")
