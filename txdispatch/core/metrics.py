from prometheus_client import Counter, generate_latest

# Counters
DISPATCH_TOTAL = Counter('txdispatch_dispatch_total', 'Dispatch calls by outcome', ['outcome'])
NONCE_RETRIES_TOTAL = Counter('txdispatch_nonce_retries_total', 'Sends retried after a nonce error')
NONCE_LOOKUPS_TOTAL = Counter('txdispatch_nonce_lookups_total', 'Pending nonce queries', ['reason'])
SINK_ERRORS_TOTAL = Counter('txdispatch_sink_errors_total', 'Non-fatal errors reported to the error sink')


def increment_dispatch(outcome: str):
    DISPATCH_TOTAL.labels(outcome).inc()

def increment_nonce_retry():
    NONCE_RETRIES_TOTAL.inc()

def increment_nonce_lookup(reason: str):
    NONCE_LOOKUPS_TOTAL.labels(reason).inc()

def increment_sink_error():
    SINK_ERRORS_TOTAL.inc()

def metrics_text() -> bytes:
    return generate_latest()
