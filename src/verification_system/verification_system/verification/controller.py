from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_caller, json_body, query_int
from ..container import Container
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.exceptions import ValidationError
from .model import SubmissionFilters


def _parse_filters() -> SubmissionFilters:
    def _date(name: str):
        raw = (request.args.get(name) or "").strip()
        if not raw:
            return None
        try:
            return parse_iso_date(raw)
        except ValueError:
            raise ValidationError(f"{name} must use YYYY-MM-DD format")

    return SubmissionFilters(
        status=request.args.get("status", "all"),
        date_from=_date("date_from"),
        date_to=_date("date_to"),
        search=(request.args.get("search") or "").strip() or None,
        sort_by=request.args.get("sort_by", "submitted_at"),
        sort_order=request.args.get("sort_order", "desc"),
    )


def _parse_ids(raw) -> list[int]:
    if not isinstance(raw, list) or not raw:
        raise ValidationError("verification_ids must be a non-empty list")
    try:
        return [int(v) for v in raw]
    except (TypeError, ValueError):
        raise ValidationError("verification_ids must contain integers")


def register(app: Flask, container: Container) -> None:
    verifications = container.verification_service

    # -------- End user --------
    @app.route("/api/verification/status", methods=["GET"], endpoint="verification_status")
    def verification_status():
        return jsonify(verifications.get_status(current_caller()).to_dict())

    @app.route("/api/verification/progress", methods=["GET"], endpoint="verification_progress")
    def verification_progress():
        return jsonify(verifications.get_progress(current_caller()).to_dict())

    @app.route("/api/verification/submit", methods=["POST"], endpoint="submit_verification")
    def submit_verification():
        data = json_body()
        verification_id = verifications.submit(
            current_caller(),
            document_type=data.get("document_type"),
            front_image_url=data.get("front_image_url") or "",
            back_image_url=data.get("back_image_url"),
        )
        return jsonify({"success": True, "verification_id": verification_id})

    # -------- Admin --------
    @app.route("/api/admin/verifications", methods=["GET"], endpoint="list_verifications")
    def list_verifications():
        page = verifications.list_submissions(
            current_caller(),
            _parse_filters(),
            page=query_int("page", 1),
            page_size=query_int("page_size", DEFAULT_PAGE_SIZE),
        )
        return jsonify(page.to_dict())

    @app.route("/api/admin/verifications/stats", methods=["GET"], endpoint="verification_stats")
    def verification_stats():
        return jsonify(verifications.get_stats(current_caller()).to_dict())

    @app.route("/api/admin/verifications/<int:verification_id>", methods=["GET"], endpoint="verification_detail")
    def verification_detail(verification_id: int):
        return jsonify(verifications.get_detail(current_caller(), verification_id))

    @app.route(
        "/api/admin/verifications/<int:verification_id>/approve",
        methods=["POST"],
        endpoint="approve_verification",
    )
    def approve_verification(verification_id: int):
        verifications.approve(current_caller(), verification_id, json_body().get("note"))
        return jsonify({"success": True})

    @app.route(
        "/api/admin/verifications/<int:verification_id>/reject",
        methods=["POST"],
        endpoint="reject_verification",
    )
    def reject_verification(verification_id: int):
        verifications.reject(current_caller(), verification_id, json_body().get("reason"))
        return jsonify({"success": True})

    @app.route(
        "/api/admin/verifications/<int:verification_id>/request-info",
        methods=["POST"],
        endpoint="request_info_verification",
    )
    def request_info_verification(verification_id: int):
        verifications.request_info(current_caller(), verification_id, json_body().get("reason"))
        return jsonify({"success": True})

    @app.route("/api/admin/verifications/bulk", methods=["POST"], endpoint="bulk_verification_action")
    def bulk_verification_action():
        data = json_body()
        result = verifications.bulk_action(
            current_caller(),
            _parse_ids(data.get("verification_ids")),
            data.get("action"),
            data.get("reason"),
        )
        return jsonify(result.to_dict())
