"""
Foundry — Middleware
=====================

Cross-cutting concerns applied to every HTTP request.

Execution order (outermost first):
    Request → [Request ID] → [Request Logging] → [GZip] → [CORS] → route

    - Request ID runs first so every log line of the request, including the
      access log line, can carry the correlation id.
    - The access log measures the full duration of everything inside it.
"""
