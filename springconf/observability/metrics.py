"""Prometheus metrics for configuration resolution."""

from prometheus_client import Counter, Histogram

# Resolution metrics
RESOLUTION_PASSES = Counter(
    "springconf_resolution_passes_total",
    "Total number of resolution passes",
    labelnames=["status"],
)

RESOLUTION_LATENCY = Histogram(
    "springconf_resolution_latency_seconds",
    "Resolution pass latency in seconds",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Degraded sources
REMOTE_FETCH_ERRORS = Counter(
    "springconf_remote_fetch_errors_total",
    "Remote config fetches that degraded to an empty property set",
)

PROFILE_OVERLAY_ERRORS = Counter(
    "springconf_profile_overlay_errors_total",
    "Profile-specific overlay files skipped because they could not be loaded",
    labelnames=["profile"],
)

# Watch metrics
WATCH_EVENTS = Counter(
    "springconf_watch_events_total",
    "Notifications raised by the config watcher",
    labelnames=["event"],
)
