# promptshelf/lib/monitoring.py
from fastapi import FastAPI
from prometheus_client.registry import CollectorRegistry as Registry
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator
from promptshelf.core.logging import log

# Create a separate registry
registry = Registry()

prompt_writes = Counter(
    'promptshelf_prompt_writes_total',
    'Prompt writes by operation',
    ['operation'],
    registry=registry
)


def record_write(operation: str):
    """Count a successful create / update / delete / combine write."""
    prompt_writes.labels(operation=operation).inc()


def register_monitoring(app: FastAPI):
    """
    Registers Prometheus monitoring on the FastAPI app and exposes /metrics.
    """
    instrumentator = Instrumentator(
        excluded_handlers=["/metrics"],  # Don't monitor the metrics endpoint itself
        registry=registry  # Use our custom registry
    ).instrument(app)

    instrumentator.expose(app, include_in_schema=False, should_gzip=True)

    log("MONITORING", "Prometheus instrumentation registered at /metrics.")
