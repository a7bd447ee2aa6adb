from flask import Blueprint, jsonify, request

from library_api.errors import Conflict, InvalidArgument, NotFound, StoreFailure
from library_api.extensions import get_service
from library_api.schemas import BookCreate, BookOut, BookUpdate, QuantityAdjustment, dump, parse
from library_api.utils.decorators import role_required
from library_api.utils.responses import json_error

book_bp = Blueprint("books", __name__, url_prefix="/books")


@book_bp.get("")
def list_books():
    books = get_service("books").list_books()
    return jsonify({"success": True, "data": [dump(BookOut, b) for b in books]})


@book_bp.get("/<book_id>")
def get_book(book_id: str):
    try:
        b = get_service("books").get_book(book_id)
        return jsonify({"success": True, "data": dump(BookOut, b)})
    except InvalidArgument as e:
        return json_error(e.message, 400)
    except NotFound as e:
        return json_error(e.message, 404)


@book_bp.post("")
@role_required("admin")
def create_book():
    try:
        data = parse(BookCreate, request.get_json(silent=True))
        b = get_service("books").create_book(data)
        return jsonify({"success": True, "data": dump(BookOut, b)}), 201
    except InvalidArgument as e:
        return json_error(e.message, 400)


@book_bp.put("/<book_id>")
@role_required("admin")
def update_book(book_id: str):
    try:
        data = parse(BookUpdate, request.get_json(silent=True))
        b = get_service("books").update_book(book_id, data)
        return jsonify({"success": True, "data": dump(BookOut, b)})
    except InvalidArgument as e:
        return json_error(e.message, 400)
    except NotFound as e:
        return json_error(e.message, 404)


@book_bp.post("/<book_id>/quantity")
@role_required("admin")
def adjust_quantity(book_id: str):
    try:
        data = parse(QuantityAdjustment, request.get_json(silent=True))
        b = get_service("books").adjust_stock(book_id, data.delta)
        return jsonify({"success": True, "data": dump(BookOut, b)})
    except InvalidArgument as e:
        return json_error(e.message, 400)
    except NotFound as e:
        return json_error(e.message, 404)
    except Conflict as e:
        return json_error(e.message, 409)
    except StoreFailure as e:
        return json_error(e.message, 500)


@book_bp.delete("/<book_id>")
@role_required("admin")
def delete_book(book_id: str):
    try:
        get_service("books").delete_book(book_id)
        return jsonify({"success": True})
    except InvalidArgument as e:
        return json_error(e.message, 400)
    except NotFound as e:
        return json_error(e.message, 404)
