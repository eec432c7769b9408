"""Prometheus metrics for schedule, reconciliation and simulation activity"""

from prometheus_client import Counter, Histogram

# Schedule metrics
schedule_counter = Counter(
    "financing_schedule_generated_total",
    "Amortization tables generated",
    ["method"],  # SAC | Price
)

# Reconciliation metrics
reconciliation_counter = Counter(
    "financing_reconciliation_total",
    "Financing status reconciliations",
    ["outcome"],  # active | settled
)

balance_clamped_counter = Counter(
    "financing_balance_clamped_total",
    "Reconciliations where payments exceeded the outstanding balance",
)

# Simulation metrics
simulation_counter = Counter(
    "financing_simulation_total",
    "Early payment simulations",
    ["method", "preference"],
)

interest_saved_bucket_counter = Counter(
    "financing_interest_saved_bucket",
    "Simulated interest savings by bucket",
    ["bucket"],  # 0, 0-1k, 1k-10k, 10k+
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_reconciliation(fully_paid: bool, clamped: bool) -> None:
    """Record reconciliation outcome and underflow clamps"""
    reconciliation_counter.labels(outcome="settled" if fully_paid else "active").inc()
    if clamped:
        balance_clamped_counter.inc()


def record_simulation(method: str, preference: str, interest_saved: float) -> None:
    """Record simulation metrics for monitoring preference mix and savings distribution"""
    simulation_counter.labels(method=method, preference=preference).inc()

    if interest_saved <= 0:
        bucket = "0"
    elif interest_saved <= 1_000:
        bucket = "0-1k"
    elif interest_saved <= 10_000:
        bucket = "1k-10k"
    else:
        bucket = "10k+"

    interest_saved_bucket_counter.labels(bucket=bucket).inc()
