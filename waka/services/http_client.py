"""
Outbound HTTP client for the chart feeds.

Each app builds one pooled client in `create_app` and keeps it on
`app.state`, so its timeout comes from that app's settings. A Last.fm
call that exceeds `chart_timeout_seconds` fails with an httpx timeout
error; requests are never retried.
"""
import httpx


def build_http_client(timeout: float) -> httpx.AsyncClient:
    """
    Create the pooled client used for chart fetches.

    `timeout` caps each phase of a request (connect is capped at 5s
    when `timeout` is larger).
    """
    return httpx.AsyncClient(
        limits=httpx.Limits(
            max_keepalive_connections=10,
            max_connections=20,
            keepalive_expiry=30.0,
        ),
        timeout=httpx.Timeout(timeout, connect=min(5.0, timeout)),
        http2=True,
        follow_redirects=True,
    )
