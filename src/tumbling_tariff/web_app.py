"""
Flask JSON API for the tumbling tariff: element catalog, track metadata and routine evaluation.
The page/PDF front end is a separate consumer of /api/evaluate.
"""
from flask import Flask, jsonify, request
from flask_cors import CORS
from loguru import logger

from .catalog import SORT_KEYS, list_elements
from .config import Config, setup_logging
from .pipeline import evaluate_tariff
from .routine import LEVELS_BY_TRACK, RoutineMeta, Track, pass_capacity, track_label

app = Flask(__name__)
CORS(app)


def _lang_arg(value) -> str:
    return value if value in ("he", "en") else Config.TARIFF_LANG


@app.route("/api/elements", methods=["GET"])
def api_elements():
    lang = _lang_arg(request.args.get("lang"))
    sort = request.args.get("sort", "difficulty")
    if sort not in SORT_KEYS:
        return jsonify({"error": f"Unknown sort key: {sort}"}), 400
    desc = request.args.get("desc", "").lower() in ("1", "true", "yes")
    items = [
        {
            "id": e.id,
            "name": e.name(lang),
            "symbol": e.symbol,
            "value": e.value,
            "direction": e.direction.value,
        }
        for e in list_elements(sort, descending=desc, lang=lang)
    ]
    return jsonify({"elements": items})


@app.route("/api/tracks", methods=["GET"])
def api_tracks():
    lang = _lang_arg(request.args.get("lang"))
    tracks = [
        {
            "key": t.value,
            "label": track_label(t, lang),
            "capacity": pass_capacity(t),
            "levels": LEVELS_BY_TRACK[t],
        }
        for t in Track
    ]
    return jsonify({"tracks": tracks})


def _pass_arg(data: dict, key: str):
    items = data.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        return None
    return [None if i in (None, "") else str(i) for i in items]


@app.route("/api/evaluate", methods=["POST"])
def api_evaluate():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    pass1 = _pass_arg(data, "pass1")
    pass2 = _pass_arg(data, "pass2")
    if pass1 is None or pass2 is None:
        return jsonify({"error": "pass1 and pass2 must be lists of element ids"}), 400
    meta = RoutineMeta.from_raw(data.get("track"), data.get("level"), data.get("gender"))
    sheet = evaluate_tariff(
        pass1,
        pass2,
        meta,
        lang=_lang_arg(data.get("lang")),
        auto_bonus=bool(data.get("auto_bonus", True)),
    )
    logger.info("Evaluated routine", track=meta.track, is_legal=sheet.is_legal)
    return jsonify(sheet.to_dict())


def main():
    Config.validate()
    setup_logging()
    logger.info(f"Tumbling tariff API on http://{Config.WEB_HOST}:{Config.WEB_PORT}")
    app.run(host=Config.WEB_HOST, port=int(Config.WEB_PORT), threaded=True)


if __name__ == "__main__":
    main()
