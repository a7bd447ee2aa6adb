from flask import jsonify


def json_error(message, code=400):
    return jsonify({"success": False, "message": message}), code
