"""
HTTPS server for the DNS target webhook.

Serves the admission endpoint together with a liveness probe and the
Prometheus scrape endpoint on one aiohttp listener.
"""

import logging
import ssl

from aiohttp import hdrs
from aiohttp.web import (
    Application,
    AppRunner,
    Request,
    Response,
    TCPSite,
)
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from dns_target_webhook.constants import (
    DEFAULT_WEBHOOK_HOST,
    DEFAULT_WEBHOOK_PORT,
    HEALTHZ_PATH,
    JSON_CONTENT_TYPE,
    METRICS_PATH,
    WEBHOOK_PATH,
)
from dns_target_webhook.observability.metrics import get_metrics_registry
from dns_target_webhook.webhooks.handler import ReviewHandler

logger = logging.getLogger(__name__)


class WebhookServer:
    """aiohttp server exposing the mutating admission webhook."""

    def __init__(
        self,
        handler: ReviewHandler,
        port: int = DEFAULT_WEBHOOK_PORT,
        host: str = DEFAULT_WEBHOOK_HOST,
        ssl_context: ssl.SSLContext | None = None,
    ):
        """
        Initialize webhook server.

        Args:
            handler: Handler deciding admission reviews
            port: Port to listen on
            host: Host interface to bind to
            ssl_context: TLS context; plain HTTP when None
        """
        self.handler = handler
        self.port = port
        self.host = host
        self.ssl_context = ssl_context
        self.app = Application()
        self.runner: AppRunner | None = None
        self.site: TCPSite | None = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Set up HTTP routes for the webhook server."""
        self.app.router.add_post(WEBHOOK_PATH, self._webhook_handler)
        self.app.router.add_get(HEALTHZ_PATH, self._healthz_handler)
        self.app.router.add_get(METRICS_PATH, self._metrics_handler)

    async def _webhook_handler(self, request: Request) -> Response:
        """Handle POST /webhook admission reviews."""
        logger.info("Received request")

        body = await request.read()
        response_body, status = self.handler.handle(
            body,
            request.headers.get(hdrs.CONTENT_TYPE, ""),
            request.headers,
        )

        if status != 200:
            return Response(status=status)

        return Response(body=response_body, content_type=JSON_CONTENT_TYPE)

    async def _healthz_handler(self, request: Request) -> Response:
        """Handle /healthz endpoint for Kubernetes liveness probes."""
        return Response(status=200)

    async def _metrics_handler(self, request: Request) -> Response:
        """Handle /metrics endpoint for Prometheus scraping."""
        try:
            metrics_data = generate_latest(get_metrics_registry())
            return Response(body=metrics_data, headers={hdrs.CONTENT_TYPE: CONTENT_TYPE_LATEST})
        except Exception as e:
            logger.error(f"Failed to generate metrics: {e}")
            return Response(
                text=f"Error generating metrics: {type(e).__name__}. Check logs for details.",
                status=500,
            )

    async def start(self) -> None:
        """Start the webhook server."""
        try:
            self.runner = AppRunner(self.app)
            await self.runner.setup()

            self.site = TCPSite(
                self.runner, self.host, self.port, ssl_context=self.ssl_context
            )
            await self.site.start()

            scheme = "https" if self.ssl_context else "http"
            logger.info(
                f"Listening on {scheme}://{self.host}:{self.port}{WEBHOOK_PATH}"
            )

        except Exception as e:
            logger.error(f"Failed to start webhook server: {e}")
            raise

    async def stop(self) -> None:
        """Stop the webhook server."""
        try:
            if self.site:
                await self.site.stop()
                self.site = None

            if self.runner:
                await self.runner.cleanup()
                self.runner = None

            logger.info("Webhook server stopped")
        except Exception as e:
            logger.error(f"Error stopping webhook server: {e}")

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.stop()
