import datetime as dt
import logging
import threading
from typing import Optional

from flask import Flask, jsonify, request

from kartografi.cities import CityStore
from kartografi.config import Settings
from kartografi.country_cache import CountryCache
from kartografi.errors import QuizValidationError
from kartografi.logging_setup import configure_logging
from kartografi.mongo import connect
from kartografi.quiz import QuizService
from kartografi.restcountries import RestCountriesClient

settings = Settings.from_env()
configure_logging(settings.log_level)
log = logging.getLogger("kartografi.server")

server = Flask(__name__, static_folder="frontend/dist", static_url_path="")

countries_client = RestCountriesClient(
    base_url=settings.rest_countries_base,
    timeout_s=settings.upstream_timeout_s,
)
quiz_service = QuizService(
    client=countries_client,
    cache=CountryCache(countries_client, ttl_s=settings.country_cache_ttl_s),
)

_city_store: Optional[CityStore] = None
_city_store_lock = threading.Lock()


def get_city_store() -> CityStore:
    global _city_store
    with _city_store_lock:
        if _city_store is None:
            _city_store = CityStore(connect(settings.mongo_uri, settings.mongo_db))
        return _city_store


@server.route("/api/health")
def health():
    return jsonify({
        "ok": True,
        "service": "kartografi-backend",
        "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
    })


@server.route("/api/quiz", methods=["POST"])
def handle_quiz():
    body = request.get_json(silent=True) or {}
    try:
        return jsonify(quiz_service.handle(body))
    except QuizValidationError as e:
        log.warning("Rejected quiz request: %s", e)
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        log.exception("Quiz request failed")
        return jsonify({"error": "Failed to process quiz request"}), 500


@server.route("/api/cities/random", methods=["GET"])
def random_city():
    try:
        city = get_city_store().random_city()
    except Exception:
        log.exception("Random city lookup failed")
        return jsonify({"error": "Internal server error"}), 500
    if not city:
        return jsonify({"error": "No cities found"}), 404
    return jsonify({"city": city})


@server.route("/api/cities/coords", methods=["GET"])
def city_coordinates():
    name = (request.args.get("name") or "").strip()
    if not name:
        return jsonify({"error": "City name required"}), 400
    try:
        coords = get_city_store().coordinates(name)
    except Exception:
        log.exception("Coordinate lookup for %r failed", name)
        return jsonify({"error": "Internal server error"}), 500
    if not coords:
        return jsonify({"error": "City not found"}), 404
    return jsonify(coords)


@server.route("/", defaults={"path": ""})
@server.route("/<path:path>")
def spa(path):
    if path.startswith("api"):
        return jsonify({"error": "API route not found"}), 404

    return server.send_static_file("index.html")


if __name__ == '__main__':
    server.run(port=settings.port, threaded=True)
