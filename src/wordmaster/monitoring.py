"""Monitoring configuration for wordmaster."""
from prometheus_client import Counter, Histogram, start_http_server

# Scheduling metrics
attempts_recorded = Counter(
    "wordmaster_attempts_total",
    "Total number of quiz attempts applied to mastery records",
    ["outcome"],
)

records_created = Counter(
    "wordmaster_records_created_total",
    "Total number of mastery records created on a first attempt",
)

due_word_queries = Counter(
    "wordmaster_due_word_queries_total",
    "Total number of due-word queries served",
)

due_words_returned = Histogram(
    "wordmaster_due_words_returned",
    "Number of words returned per due-word query",
    buckets=[0, 1, 5, 10, 20, 50],
)

# Database metrics
db_operations = Counter(
    "wordmaster_db_operations_total",
    "Total number of database operations",
    ["operation_type"],
)

db_errors = Counter(
    "wordmaster_db_errors_total",
    "Total number of database errors",
    ["error_type"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
