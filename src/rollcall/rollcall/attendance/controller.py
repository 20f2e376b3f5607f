from __future__ import annotations

import io

from flask import Flask, abort, jsonify, redirect, render_template, request, send_file, session, url_for

from ..common.http import ADMIN_SESSION_KEY, admin_required, json_error, read_json, server_error
from ..core.constants import XLSX_MIMETYPE
from ..core.exceptions import DomainError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    # ---- pages ----

    @app.route("/attendance", methods=["GET"], endpoint="attendance_home")
    def attendance_home():
        if not session.get(ADMIN_SESSION_KEY):
            return render_template("attendance/login.html")

        today = service.today()
        months = service.calendar(today=today)
        year, month = service.window.initial_month(today)
        return render_template(
            "attendance/calendar.html",
            months=months,
            initial_key=f"{year:04d}-{month:02d}",
            today=today,
        )

    @app.route("/attendance/day/<date_s>", methods=["GET"], endpoint="attendance_day")
    def attendance_day(date_s: str):
        if not session.get(ADMIN_SESSION_KEY):
            return redirect(url_for("attendance_home"))
        try:
            work_date, rows = service.people_for_day(date_s)
        except ValidationError:
            abort(404)
        if not service.window.contains(work_date) or work_date > service.today():
            abort(404)
        return render_template(
            "attendance/day.html",
            work_date=work_date,
            date_s=work_date.strftime("%Y-%m-%d"),
            rows=rows,
        )

    # ---- admin gate ----

    @app.route("/api/attendance/auth", methods=["POST"], endpoint="api_attendance_auth")
    def auth():
        try:
            body = read_json()
            container.admin_gate.verify(body.get("password"))
            session[ADMIN_SESSION_KEY] = True
            return jsonify({"success": True})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "authenticating")

    @app.route("/api/attendance/logout", methods=["POST"], endpoint="api_attendance_logout")
    def logout():
        session.pop(ADMIN_SESSION_KEY, None)
        return jsonify({"success": True})

    # ---- records ----

    @app.route("/api/attendance/records", methods=["GET"], endpoint="api_records_list")
    @admin_required
    def list_records():
        try:
            return jsonify({"attendance": service.list_for_date(request.args.get("date"))})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "fetching attendance")

    @app.route("/api/attendance/records", methods=["POST"], endpoint="api_records_mark")
    @admin_required
    def mark():
        try:
            body = read_json()
            mark = service.mark(person_id=body.get("person_id"), date_s=body.get("date"))
            return jsonify({"attendance": mark}), 201
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "marking attendance")

    @app.route("/api/attendance/records", methods=["DELETE"], endpoint="api_records_unmark")
    @admin_required
    def unmark():
        try:
            service.unmark(request.args.get("id"))
            return jsonify({"success": True})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "removing attendance")

    @app.route("/api/attendance/records/bulk", methods=["POST"], endpoint="api_records_bulk")
    @admin_required
    def mark_bulk():
        try:
            body = read_json()
            return jsonify(service.mark_bulk(person_ids=body.get("person_ids"), date_s=body.get("date")))
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "bulk marking attendance")

    # ---- summary / export ----

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="api_attendance_summary")
    @admin_required
    def summary():
        try:
            counts = service.daily_counts(start_s=request.args.get("start"), end_s=request.args.get("end"))
            return jsonify({"counts": counts})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "fetching attendance summary")

    @app.route("/api/attendance/export", methods=["GET"], endpoint="api_attendance_export")
    @admin_required
    def export():
        try:
            report = service.export_report()
        except Exception as e:
            return server_error(e, "exporting attendance", "Failed to export data")
        return send_file(
            io.BytesIO(report.content),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=report.filename,
        )
