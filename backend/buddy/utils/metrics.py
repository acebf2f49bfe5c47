# /buddy/utils/metrics.py

from prometheus_client import Counter, Histogram

# This file defines all Prometheus metrics used for application monitoring.
# Centralizing them here makes them easy to find and manage.

# Oracle Metrics
ai_requests_counter = Counter('ai_requests_total', 'Total AI requests', ['model', 'status'])
ai_fallback_counter = Counter('ai_fallback_total', 'Fallback retries against the opposite model pool', ['reason'])
extraction_counter = Counter('intent_extractions_total', 'Intent extractions', ['status'])

# Flow Metrics
flow_turns_counter = Counter('flow_turns_total', 'Flow turns processed', ['flow', 'next_step'])
actions_counter = Counter('actions_emitted_total', 'Actions handed to the caller', ['type', 'source'])
router_truncations_counter = Counter('router_truncated_actions_total', 'Creation actions dropped by the router guardrail')

# Performance Metrics
response_time_histogram = Histogram('response_time_seconds', 'Response time in seconds', ['endpoint'])
