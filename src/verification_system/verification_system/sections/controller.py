from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_caller, json_body
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    sections = container.section_service

    @app.route("/api/verification/personal-info", methods=["GET"], endpoint="get_personal_info")
    def get_personal_info():
        info = sections.get_personal_info(current_caller())
        return jsonify(info.to_dict() if info else None)

    @app.route("/api/verification/personal-info", methods=["PUT"], endpoint="update_personal_info")
    def update_personal_info():
        sections.update_personal_info(current_caller(), json_body())
        return jsonify({"success": True})

    @app.route("/api/verification/education", methods=["GET"], endpoint="get_education")
    def get_education():
        education = sections.get_education(current_caller())
        return jsonify(education.to_dict() if education else None)

    @app.route("/api/verification/education", methods=["PUT"], endpoint="update_education")
    def update_education():
        sections.update_education(current_caller(), json_body())
        return jsonify({"success": True})

    @app.route("/api/verification/job-history", methods=["GET"], endpoint="get_job_history")
    def get_job_history():
        jobs = sections.get_job_history(current_caller())
        return jsonify({"jobs": [j.to_dict() for j in jobs]})

    @app.route("/api/verification/job-history", methods=["PUT"], endpoint="update_job_history")
    def update_job_history():
        jobs = json_body().get("jobs") or []
        if not isinstance(jobs, list):
            raise ValidationError("jobs must be a list")
        sections.update_job_history(current_caller(), jobs)
        return jsonify({"success": True})

    @app.route("/api/verification/identity-document", methods=["GET"], endpoint="get_identity_document")
    def get_identity_document():
        document = sections.get_identity_document(current_caller())
        return jsonify(document.to_dict() if document else None)

    @app.route("/api/verification/identity-document", methods=["PUT"], endpoint="save_identity_document")
    def save_identity_document():
        data = json_body()
        result = sections.save_identity_document(
            current_caller(),
            document_type=data.get("document_type"),
            front_image_url=data.get("front_image_url"),
            back_image_url=data.get("back_image_url"),
        )
        return jsonify({"success": True, "document_id": result.document_id, "is_new": result.is_new})

    @app.route(
        "/api/verification/identity-document/<file_type>",
        methods=["DELETE"],
        endpoint="delete_identity_file",
    )
    def delete_identity_file(file_type: str):
        document_id = request.args.get("document_id", type=int)
        deleted = sections.delete_identity_file(current_caller(), file_type=file_type, document_id=document_id)
        if not deleted:
            return jsonify({"success": True, "message": "No document to delete"})
        return jsonify({"success": True})

    @app.route("/api/verification/review", methods=["GET"], endpoint="get_review")
    def get_review():
        return jsonify(sections.review(current_caller()).to_dict())
