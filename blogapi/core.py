import os
from prometheus_client import Counter, start_http_server
import logging

logger = logging.getLogger(__name__)

METRICS_PORT = int(os.getenv('METRICS_PORT', '8001'))

COMMENTS_POSTED = Counter('blog_comments_posted_total', 'Comments created')
COMMENTS_DELETED = Counter('blog_comments_deleted_total', 'Comments removed, replies included')
COMMENT_LIKE_TOGGLES = Counter('blog_comment_like_toggles_total', 'Comment like toggles', ['action'])
NOTE_VIEWS = Counter('blog_note_views_total', 'Note view increments')

def init_metrics(port: int = METRICS_PORT):
    """Initialize Prometheus metrics server"""
    try:
        start_http_server(port)
        logger.info(f"Prometheus metrics server started on port {port}")
    except Exception as e:
        logger.warning(f'Prometheus start failed: {e}')
