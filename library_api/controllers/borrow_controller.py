from flask import Blueprint, current_app, jsonify, request

from library_api.errors import InvalidArgument, LibraryError, NotFound, StoreFailure, Unavailable
from library_api.extensions import get_service
from library_api.schemas import BorrowRecordOut, BorrowRequest, InsertedId, dump
from library_api.utils.responses import json_error

borrow_bp = Blueprint("borrow", __name__)


def _store_failure(e: StoreFailure):
    current_app.logger.error(f"[borrow] {e.message} (retryable={e.retryable})")
    return jsonify({"success": False, "message": e.message, "retryable": e.retryable}), 500


@borrow_bp.post("/borrow")
def borrow_book():
    try:
        req = BorrowRequest.from_body(request.get_json(silent=True) or {})
        inserted_id = get_service("borrows").borrow_book(
            req.book_id, req.requester_identity, req.caller_metadata
        )
        return jsonify({"success": True, "data": dump(InsertedId, {"inserted_id": inserted_id})}), 201
    except (InvalidArgument, NotFound, Unavailable) as e:
        return json_error(e.message, 400)
    except StoreFailure as e:
        return _store_failure(e)
    except LibraryError as e:
        return json_error(e.message, 409)


@borrow_bp.get("/borrowed-books")
def list_borrowed():
    email = (request.args.get("email") or "").strip() or None
    status = (request.args.get("status") or "").strip() or None
    try:
        records = get_service("borrow_queries").list_borrowed(email, status)
    except InvalidArgument as e:
        return json_error(e.message, 400)
    return jsonify({"success": True, "data": [dump(BorrowRecordOut, r) for r in records]})


@borrow_bp.get("/borrowed-books/<record_id>")
def get_borrowed(record_id: str):
    try:
        record = get_service("borrow_queries").get_borrowed(record_id)
        return jsonify({"success": True, "data": dump(BorrowRecordOut, record)})
    except InvalidArgument as e:
        return json_error(e.message, 400)
    except NotFound as e:
        return json_error(e.message, 404)


@borrow_bp.delete("/borrowed-books/<record_id>")
def return_book(record_id: str):
    try:
        record = get_service("borrows").return_book(record_id)
        return jsonify({"success": True, "data": dump(BorrowRecordOut, record)})
    except (InvalidArgument, NotFound) as e:
        return json_error(e.message, 400)
    except StoreFailure as e:
        return _store_failure(e)
    except LibraryError as e:
        return json_error(e.message, 409)
