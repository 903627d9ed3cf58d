"""Configuration settings for host exporter."""

import os


class Config:
    """Application configuration."""

    # Web server settings
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', 9100))
    DEBUG = os.environ.get('DEBUG', 'false').lower() == 'true'

    # Path answering scrapes (GET) and accepting pushed metrics (POST)
    METRICS_PATH = os.environ.get('METRICS_PATH', '/metrics')

    # Comma-separated collector names; empty means every default-enabled one
    COLLECTORS = os.environ.get('COLLECTORS', '')

    # supervisord XML-RPC endpoint
    SUPERVISORD_URL = os.environ.get('SUPERVISORD_URL', 'http://localhost:9001/RPC2')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'WARNING')

    @classmethod
    def get_collectors(cls) -> list:
        """Return the explicitly enabled collector names."""
        return [name.strip() for name in cls.COLLECTORS.split(',') if name.strip()]
