from datetime import datetime, timezone
from typing import Dict, Optional

from dotenv import load_dotenv
from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from sipbuddy.config.settings import Settings
from sipbuddy.pipelines.app_service import AppService
from sipbuddy.utils.exceptions import InvalidCategoryError, PersistenceError
from sipbuddy.utils.logger import logger

bp = Blueprint("sipbuddy", __name__)


def _service() -> AppService:
    return current_app.extensions["sipbuddy"]


def _parse_splits(raw: str) -> Dict[str, str]:
    """'Beer:60,Wine:40' -> {'Beer': '60', 'Wine': '40'}"""
    splits = {}
    for part in (raw or "").split(","):
        if ":" in part:
            name, pct = part.split(":", 1)
            splits[name.strip()] = pct.strip()
    return splits


# --- routes ---

@bp.get("/health")
def health():
    return jsonify({"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()})


@bp.get("/api/recommendations")
def recommendations():
    args = request.args
    logger.info(f"/api/recommendations called with {dict(args)}")
    views = _service().get_recommendations(
        args.get("category", ""),
        max_price=args.get("maxPrice"),
        tags=args.get("tags"),
        limit=args.get("limit"),
    )
    return jsonify([v.to_dict() for v in views])


@bp.get("/api/category-tags/<category>")
def category_tags(category):
    return jsonify({"category": category, "tags": _service().get_category_tags(category)})


@bp.get("/api/products")
def products():
    return jsonify(_service().list_products())


@bp.get("/estimate/quantity")
def estimate_quantity():
    return jsonify(_service().estimate_liters(
        request.args.get("guestCount"), request.args.get("duration")
    ))


@bp.get("/api/estimate/party")
def estimate_party():
    args = request.args
    categories = [c.strip() for c in args.get("categories", "").split(",") if c.strip()]
    return jsonify(_service().estimate_party(
        args.get("guests"),
        args.get("hours"),
        splits=_parse_splits(args.get("splits", "")),
        categories=categories or None,
    ))


# --- admin ---

@bp.get("/api/admin/items")
def admin_items():
    return jsonify(_service().list_admin_items())


@bp.post("/api/admin/item/<code>")
def admin_update_item(code):
    payload = request.get_json(force=True, silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Expected a JSON object of item settings"}), 400
    _service().update_item(code, payload)
    return "", 204


@bp.get("/api/admin/weights")
def admin_weights():
    return jsonify(_service().list_weights())


@bp.post("/api/admin/weights")
def admin_update_weights():
    payload = request.get_json(force=True, silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Expected a JSON object of weight values"}), 400
    _service().update_weights(payload)
    return "", 204


@bp.post("/api/admin/reload")
def admin_reload():
    snap = _service().reload()
    return jsonify({"products": len(snap), "source": snap.source})


# --- errors ---

def _invalid_category(e: InvalidCategoryError):
    logger.warning(str(e))
    return jsonify({"error": "Invalid category"}), 400


def _persistence_failure(e: PersistenceError):
    logger.error(f"Settings store failure: {e}")
    return jsonify({"error": "Settings store unavailable", "details": str(e)}), 500


def _unexpected(e: Exception):
    if isinstance(e, HTTPException):
        return e
    logger.exception(f"Unhandled error on {request.path}: {e}")
    return jsonify({"error": "Internal server error"}), 500


def create_app(service: Optional[AppService] = None, settings: Optional[Settings] = None) -> Flask:
    # load env vars before Settings reads them
    load_dotenv()
    settings = settings or (service.settings if service else Settings.from_env())

    app = Flask(__name__)
    CORS(app, origins=[settings.cors_origin])
    app.extensions["sipbuddy"] = service or AppService(settings)

    app.register_blueprint(bp)
    app.register_error_handler(InvalidCategoryError, _invalid_category)
    app.register_error_handler(PersistenceError, _persistence_failure)
    app.register_error_handler(Exception, _unexpected)
    return app


def main() -> None:
    app = create_app()
    port = app.extensions["sipbuddy"].settings.port
    logger.info(f"Backend listening on http://localhost:{port}")
    app.run(host="0.0.0.0", port=port, debug=False)


if __name__ == "__main__":
    main()
