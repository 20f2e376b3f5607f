from __future__ import annotations

import io

from flask import Flask, jsonify, render_template, request, send_file

from ..common.http import json_error, server_error
from ..core.constants import XLSX_MIMETYPE
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.label_service

    def _upload() -> tuple[bytes, str | None]:
        # Multipart form from the page, or the raw workbook as the body
        upload = request.files.get("file")
        if upload:
            return upload.read(), upload.filename
        return request.get_data(), request.headers.get("X-Filename")

    @app.route("/", methods=["GET"], endpoint="labels_home")
    def labels_home():
        return render_template("index.html")

    @app.route("/api/labels", methods=["POST"], endpoint="api_labels")
    def build_labels():
        data, filename = _upload()
        layout = request.args.get("layout") or request.form.get("layout")
        try:
            sheet = service.build(data, filename=filename, layout=layout)
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "generating labels", "Failed to generate labels")
        return send_file(
            io.BytesIO(sheet.content),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=sheet.filename,
        )

    @app.route("/api/worksheets", methods=["POST"], endpoint="api_worksheets")
    def worksheets():
        upload = request.files.get("file")
        if not upload:
            return jsonify({"error": "No file provided"}), 400
        try:
            return jsonify({"worksheets": service.worksheets(upload.read(), filename=upload.filename)})
        except DomainError as e:
            return json_error(e)
        except Exception as e:
            return server_error(e, "reading worksheets")
