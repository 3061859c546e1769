from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, PLATFORM_COLLECTOR, PROCESS_COLLECTOR

registry = CollectorRegistry()
try:
    registry.register(PROCESS_COLLECTOR)
    registry.register(PLATFORM_COLLECTOR)
except ValueError:
    pass

http_req_hist = Histogram(
    "http_request_duration_seconds", "Request duration",
    labelnames=("method", "route", "status"), registry=registry,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
http_req_count = Counter("http_requests_total", "Total HTTP requests", labelnames=("method", "route", "status"), registry=registry)
http_req_in_flight = Gauge("http_requests_in_progress", "Number of HTTP requests actively being processed", registry=registry)
mcp_tool_calls = Counter("mcp_tool_calls_total", "MCP tool invocations", labelnames=("tool", "status"), registry=registry)
