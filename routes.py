from flask import Blueprint, current_app, jsonify, request, send_from_directory
from flask_login import login_required, login_user, logout_user

from errors import AuthError
from models.admin import AdminUser
from services import catalog, cleanup, queries, uploads

gallery_bp = Blueprint("gallery", __name__)
admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


# --------------------- GALLERY ---------------------
@gallery_bp.route("/photos")
def photos():
    return jsonify(queries.list_photos(
        category=request.args.get("category"),
        sort=request.args.get("sort"),
        search=request.args.get("search"),
    ))


@gallery_bp.route("/uploads/<path:filename>")
def uploaded_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)


# --------------------- LIKES & COMMENTS ---------------------
@gallery_bp.route("/comment/<int:photo_id>", methods=["POST"])
def add_comment(photo_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    comment = catalog.add_comment(photo_id, data.get("comment"))
    return jsonify({"id": comment.id, "message": "Comment added successfully"})


@gallery_bp.route("/comments/<int:photo_id>")
def comments(photo_id):
    return jsonify([c.to_dict() for c in catalog.list_comments(photo_id)])


@gallery_bp.route("/like/<int:photo_id>", methods=["POST"])
def like_photo(photo_id):
    catalog.add_like(photo_id)
    return jsonify({"message": "Like added successfully"})


@gallery_bp.route("/likes/<int:photo_id>")
def likes(photo_id):
    return jsonify({"count": catalog.count_likes(photo_id)})


# --------------------- ADMIN SESSION ---------------------
@admin_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        data = request.form
    if not AdminUser.check_password(data.get("password"), current_app.config["ADMIN_PASSWORD"]):
        raise AuthError("Invalid password. Please try again.")
    login_user(AdminUser())
    return jsonify({"message": "Logged in"})


@admin_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"message": "Logged out"})


# --------------------- ADMIN PHOTOS ---------------------
@admin_bp.route("/photos")
@login_required
def admin_photos():
    return jsonify(queries.list_admin_photos())


@admin_bp.route("/upload", methods=["POST"])
@login_required
def upload():
    photo = uploads.save_upload(
        request.form.get("title"),
        request.form.get("category"),
        request.files.get("image"),
    )
    return jsonify({"id": photo.id, "message": "Photo uploaded successfully", "filename": photo.filename})


@admin_bp.route("/delete/<int:photo_id>", methods=["DELETE"])
@login_required
def delete_photo(photo_id):
    catalog.delete_photo_and_file(photo_id, current_app.config["UPLOAD_FOLDER"])
    return jsonify({"message": "Photo deleted successfully"})


@admin_bp.route("/cleanup", methods=["DELETE"])
@login_required
def cleanup_orphans():
    if catalog.count_photos() == 0:
        return jsonify({"message": "No photos to check", "deletedCount": 0})
    deleted = cleanup.cleanup_missing_files()
    return jsonify({
        "message": f"Cleanup completed. Removed {deleted} orphaned records.",
        "deletedCount": deleted,
    })
