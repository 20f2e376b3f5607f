from __future__ import annotations

from flask import Flask, jsonify, redirect, render_template, session, url_for

from ..common.http import COORDINATOR_SESSION_KEY, json_error, read_json, server_error
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.coordinator_service

    @app.route("/event-attendance", methods=["GET"], endpoint="event_attendance_home")
    def event_attendance_home():
        if session.get(COORDINATOR_SESSION_KEY):
            return redirect(url_for("event_attendance_dashboard"))
        return render_template("event_attendance/login.html")

    @app.route("/event-attendance/dashboard", methods=["GET"], endpoint="event_attendance_dashboard")
    def event_attendance_dashboard():
        coordinator_id = session.get(COORDINATOR_SESSION_KEY)
        coordinator = service.get(int(coordinator_id)) if coordinator_id else None
        if not coordinator:
            session.pop(COORDINATOR_SESSION_KEY, None)
            return redirect(url_for("event_attendance_home"))
        return render_template("event_attendance/dashboard.html", coordinator=coordinator)

    @app.route("/api/event-attendance/coordinators", methods=["POST"], endpoint="api_coordinators_create")
    def create_coordinator():
        try:
            body = read_json()
            coordinator = service.create_coordinator(
                admin_password=body.get("adminPassword"),
                name=body.get("name"),
                username=body.get("username"),
                password=body.get("password"),
                registration_no=body.get("registrationNo"),
            )
            return jsonify({"success": True, "coordinator": coordinator})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "creating coordinator", "Failed to create coordinator")

    @app.route("/api/event-attendance/auth", methods=["POST"], endpoint="api_coordinators_auth")
    def auth():
        try:
            body = read_json()
            coordinator = service.authenticate(username=body.get("username"), password=body.get("password"))
            session[COORDINATOR_SESSION_KEY] = coordinator["id"]
            return jsonify({"success": True, "coordinator": coordinator})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "authenticating coordinator", "Authentication failed")

    @app.route("/api/event-attendance/logout", methods=["POST"], endpoint="api_coordinators_logout")
    def logout():
        session.pop(COORDINATOR_SESSION_KEY, None)
        return jsonify({"success": True})
