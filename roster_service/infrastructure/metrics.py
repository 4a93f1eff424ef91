from prometheus_client import Counter, Histogram, generate_latest
from fastapi import Response

# HTTP
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# Database
db_queries_total = Counter('db_queries_total', 'Total database queries')

# Image storage
storage_uploads_total = Counter(
    'storage_uploads_total',
    'Image uploads to object storage',
    ['result']
)

def metrics_endpoint():
    """Prometheus scrape endpoint"""
    return Response(content=generate_latest(), media_type="text/plain")
