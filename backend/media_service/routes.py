"""
Media routes: evidence upload (any authenticated user) and review
(advocates only).
"""

import mimetypes
import os
from typing import Tuple

from flask import Blueprint, jsonify, request, send_file, Response

from backend.auth_service.gate import ADVOCATE, AUTHENTICATED, requires
from backend.context import get_context
from backend.errors import ValidationError

media_bp = Blueprint("media", __name__)


@media_bp.route("/events/<int:event_id>/media", methods=["POST"])
@requires(AUTHENTICATED)
def upload_media(event_id: int) -> Tuple[Response, int]:
    """
    Upload a photo or video for an event.

    Expects multipart form data:
    - file: the binary
    - type: "photo" or "video"

    Returns:
        201: The stored media record.
        400: Missing file or invalid type.
        404: Event not found.
        413: Body larger than the upload limit.
    """
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        raise ValidationError("file is required")

    media = get_context().media.upload(
        event_id,
        upload.stream,
        upload.filename,
        request.form.get("type", ""),
    )
    return jsonify({"message": "Media uploaded successfully", "media": media.to_dict()}), 201


@media_bp.route("/events/<int:event_id>/media", methods=["GET"])
@requires(ADVOCATE)
def list_media(event_id: int) -> Tuple[Response, int]:
    media = get_context().media.get_event_media(event_id)
    return jsonify([m.to_dict() for m in media]), 200


@media_bp.route("/events/<int:event_id>/media/<int:media_id>", methods=["GET"])
@requires(ADVOCATE)
def get_media(event_id: int, media_id: int) -> Tuple[Response, int]:
    media = get_context().media.get_media(media_id)
    return jsonify(media.to_dict()), 200


@media_bp.route("/events/<int:event_id>/media/<int:media_id>/file", methods=["GET"])
@requires(ADVOCATE)
def download_media(event_id: int, media_id: int) -> Response:
    """Stream the stored blob back to an advocate."""
    media = get_context().media.media_file(media_id)
    path = os.path.abspath(media.file_path)
    mimetype = mimetypes.guess_type(path)[0] or "application/octet-stream"
    return send_file(path, mimetype=mimetype)


@media_bp.route("/events/<int:event_id>/media/<int:media_id>", methods=["DELETE"])
@requires(ADVOCATE)
def delete_media(event_id: int, media_id: int) -> Tuple[Response, int]:
    get_context().media.delete(media_id)
    return jsonify({"message": "Media deleted successfully"}), 200
