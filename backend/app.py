"""Flask server exposing host metrics and the push gateway for scraping."""

import logging
import atexit
from flask import Flask, Response, jsonify, request
from apscheduler.schedulers.background import BackgroundScheduler
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from config import Config
from collectors import ExporterCollector, enabled_collectors
from gateway import DEFAULT_GATEWAY

# Configure logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

LANDING_PAGE = '''<html>
<head><title>Host Exporter</title></head>
<body>
<h1>Host Exporter</h1>
<p><a href="{path}">Metrics</a></p>
</body>
</html>
'''


def create_app(gateway=None, scheduler=None, collector_names=None) -> Flask:
    """Build the Flask app with a registry of the enabled collectors.

    The gateway answers pushes on the metrics path and hands scrapes on to
    the registry; its pushed series are collected after every other
    collector so that the scrape interval is observed before expiry.
    """
    gateway = gateway or DEFAULT_GATEWAY
    if collector_names is None:
        collector_names = Config.get_collectors()
    collectors = enabled_collectors(collector_names)
    if 'gateway' in collectors:
        collectors['gateway'] = gateway.update

    registry = CollectorRegistry()
    registry.register(ExporterCollector(collectors))
    if 'gateway' in collectors:
        registry.register(gateway)

    app = Flask(__name__)
    app.config['METRICS_REGISTRY'] = registry

    def scrape_metrics():
        """Serve every collector in the text exposition format."""
        return Response(generate_latest(registry), content_type=CONTENT_TYPE_LATEST)

    gateway.set_next_handler(scrape_metrics)
    if scheduler is not None:
        gateway.set_scheduler(scheduler)

    @app.route(Config.METRICS_PATH, methods=['GET', 'POST'])
    def metrics():
        """Scrape metrics (GET) or push metrics (POST)."""
        return gateway.serve(request)

    @app.route('/')
    def index():
        """Serve the landing page."""
        return LANDING_PAGE.format(path=Config.METRICS_PATH)

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        return jsonify({'status': 'healthy'})

    logger.info(f"Enabled collectors: {sorted(collectors)}")
    return app


def start_scheduler() -> BackgroundScheduler:
    """Start the background scheduler running push ingestion jobs."""
    scheduler = BackgroundScheduler()
    scheduler.start()
    atexit.register(lambda: scheduler.shutdown(wait=False))

    return scheduler


def main():
    app = create_app(scheduler=start_scheduler())
    logger.info(f"Host exporter listening on {Config.HOST}:{Config.PORT}")
    app.run(
        host=Config.HOST,
        port=Config.PORT,
        debug=Config.DEBUG,
        use_reloader=False
    )


if __name__ == '__main__':
    main()
