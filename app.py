"""
StoryVermo web edge - Flask Application
Removed-URL gate, backend API proxies, crawler documents and the publish webhook
"""

import os
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from logging.handlers import RotatingFileHandler

from flask import Blueprint, Flask, Response, current_app, jsonify, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import RequestEntityTooLarge
import requests
import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration

from config import Config, Settings
from services import robots
from services.backend_proxy import BackendProxy
from services.deleted_paths import load_removed_paths
from services.edge_gate import EdgeGate
from services.publish_webhook import PublishWebhook
from services.sitemap import SitemapBuilder
from widgets.image_upload import validate_image_upload

SERVICE_NAME = 'storyvermo-web'

limiter = Limiter(
    key_func=get_remote_address,
    strategy='fixed-window',
    default_limits=["2000 per day", "500 per hour"],
)


@limiter.request_filter
def _rate_limit_exempt_for_tests():
    return current_app.config.get('TESTING', False)


bp = Blueprint('edge', __name__)


@dataclass(frozen=True)
class EdgeServices:
    settings: Settings
    proxy: BackendProxy
    sitemap: SitemapBuilder
    webhook: PublishWebhook


def edge_services() -> EdgeServices:
    return current_app.extensions['storyvermo']


def _stream_size(storage):
    stream = storage.stream
    try:
        position = stream.tell()
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(position)
        return size
    except (AttributeError, OSError):
        return storage.content_length or None


# ===== CRAWLER DOCUMENTS =====

@bp.route('/robots.txt')
@limiter.exempt
def robots_txt():
    body = robots.render_robots(edge_services().settings.site_url)
    resp = Response(body, content_type='text/plain; charset=utf-8')
    resp.headers['Cache-Control'] = robots.CACHE_CONTROL
    return resp


@bp.route('/sitemap.xml')
@limiter.exempt
def sitemap_xml():
    xml, cache_control = edge_services().sitemap.build()
    resp = Response(xml, content_type='application/xml; charset=utf-8')
    resp.headers['Cache-Control'] = cache_control
    return resp


# ===== API PROXIES =====

@bp.route('/api/images', methods=['POST'])
@limiter.limit('60 per hour')
def upload_image():
    """Validate the picked images and forward the multipart body to the backend."""
    files = []
    for field, storage in request.files.items(multi=True):
        message = validate_image_upload(storage.mimetype, _stream_size(storage))
        if message:
            return jsonify({'error': 'Invalid image', 'details': message}), 400
        files.append((field, (storage.filename, storage.stream, storage.mimetype)))

    result = edge_services().proxy.upload_image(
        files,
        list(request.form.items(multi=True)),
        request.headers,
    )
    return jsonify(result.body), result.status


@bp.route('/api/tags/popular')
def popular_tags():
    result = edge_services().proxy.popular_tags()
    return jsonify(result.body), result.status


@bp.route('/api/payments/verify')
@limiter.limit('30 per hour')
def verify_payment():
    # Paystack appends both reference and trxref to the callback URL
    reference = (request.args.get('reference') or request.args.get('trxref') or '').strip()
    if not reference:
        return jsonify({'error': 'Missing payment reference'}), 400
    result = edge_services().proxy.verify_payment(reference, request.headers)
    return jsonify(result.body), result.status


@bp.route('/api/publish-webhook', methods=['POST'])
@limiter.limit('120 per hour')
def publish_webhook():
    result = edge_services().webhook.handle(request.headers, request.get_json(silent=True))
    return jsonify(result.body), result.status


@bp.route('/health')
@limiter.exempt
def health():
    return jsonify({'status': 'ok', 'service': SERVICE_NAME}), 200


# ===== ERROR HANDLERS =====

@bp.app_errorhandler(429)
def rate_limited(error):
    reset_ts = int((datetime.now(timezone.utc) + timedelta(minutes=15)).timestamp())
    resp = jsonify({'error': 'Too many requests', 'details': 'Please retry in a few minutes.'})
    resp.status_code = 429
    resp.headers['X-RateLimit-Reset'] = str(reset_ts)
    return resp


@bp.app_errorhandler(404)
def not_found(error):
    return jsonify({'error': 'Not found'}), 404


@bp.app_errorhandler(500)
def internal_error(error):
    return jsonify({'error': 'Internal server error'}), 500


@bp.app_errorhandler(RequestEntityTooLarge)
def file_too_large(error):
    limit_mb = (current_app.config.get('MAX_CONTENT_LENGTH') or 0) // (1024 * 1024)
    return jsonify({
        'error': 'Upload failed',
        'details': f'Request exceeds the {limit_mb} MB limit.',
    }), 413


# ===== APPLICATION FACTORY =====

def _configure_logging(app):
    log_dir = app.config.get('LOG_DIR', 'logs')
    os.makedirs(log_dir, exist_ok=True)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    if any(isinstance(h, RotatingFileHandler) for h in app.logger.handlers):
        return
    file_handler = RotatingFileHandler(
        os.path.join(log_dir, 'app.log'),
        maxBytes=5 * 1024 * 1024,
        backupCount=5,
    )
    file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
    app.logger.addHandler(file_handler)
    # service modules log under their own names; route them to the same file
    services_logger = logging.getLogger('services')
    services_logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    if file_handler not in services_logger.handlers:
        services_logger.addHandler(file_handler)


def create_app(settings=None, session=None):
    """Build the Flask app around one immutable Settings instance."""
    settings = settings or Settings.from_env()
    session = session if session is not None else requests.Session()

    app = Flask(__name__)
    app.config.from_object(Config)
    _configure_logging(app)

    if app.config.get('SENTRY_DSN'):
        sentry_sdk.init(
            dsn=app.config.get('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=app.config.get('SENTRY_TRACES_SAMPLE_RATE', 0.1),
        )

    # the gate must run before the limiter so removed URLs always answer 410
    gate = EdgeGate(load_removed_paths(settings.deleted_paths_file))
    gate.init_app(app)

    limiter.init_app(app)

    app.extensions['storyvermo'] = EdgeServices(
        settings=settings,
        proxy=BackendProxy(settings, session),
        sitemap=SitemapBuilder(settings, session),
        webhook=PublishWebhook(settings),
    )
    app.register_blueprint(bp)

    if not settings.api_url:
        app.logger.warning('API_URL is not set; API proxies will answer with a configuration error')
    app.logger.info('Edge gate loaded %d removed-path entries', len(gate.entries))
    return app


app = create_app()

# ===== APPLICATION ENTRY POINT =====

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app.run(host='0.0.0.0', port=port, debug=app.config['DEBUG'])
