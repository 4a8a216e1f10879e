"""Custom metrics for the restaurant menu service."""

from opentelemetry import metrics

# Get meter for menu service
meter = metrics.get_meter("menu-svc")

# Store query duration histogram
store_query_duration_histogram = meter.create_histogram(
    name="store_query_duration_seconds",
    description="Duration of relational store calls by table and method",
    unit="s",
)

store_query_failure_counter = meter.create_counter(
    name="store_query_failure_total",
    description="Total number of failed relational store calls",
    unit="1",
)

# Allergen swap outcomes: swapped, not_needed or unavailable
allergen_swap_counter = meter.create_counter(
    name="allergen_swap_total",
    description="Allergen swap searches by outcome",
    unit="1",
)

# External service response time histogram
external_service_response_time = meter.create_histogram(
    name="external_service_response_time_seconds",
    description="Response time for translation and image service calls",
    unit="s",
)


def record_store_query(table: str, method: str, duration_seconds: float) -> None:
    """Record the duration of a store call.

    Args:
        table: Table the call targeted
        method: HTTP method used (GET, POST, PATCH, DELETE)
        duration_seconds: Duration in seconds
    """
    store_query_duration_histogram.record(duration_seconds, {"table": table, "method": method})


def record_store_query_failure(table: str, method: str, error_type: str) -> None:
    """Record a failed store call.

    Args:
        table: Table the call targeted
        method: HTTP method used
        error_type: Type of error that occurred
    """
    store_query_failure_counter.add(
        1, {"table": table, "method": method, "error_type": error_type}
    )


def record_allergen_swap(outcome: str) -> None:
    """Record the outcome of an allergen swap search."""
    allergen_swap_counter.add(1, {"outcome": outcome})


def record_external_call(service: str, operation: str, duration_seconds: float) -> None:
    """Record an external service call.

    Args:
        service: The external service called (e.g., "groq")
        operation: The operation performed (e.g., "translate")
        duration_seconds: Duration in seconds
    """
    external_service_response_time.record(
        duration_seconds, {"service": service, "operation": operation}
    )
