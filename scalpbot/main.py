"""ScalpBot — application entry point.

Boots the FastAPI internal server and provides the CLI entry point.  The
trade monitors run on the server's event loop.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from scalpbot.api.routers import router

logger = logging.getLogger("scalpbot")


def create_app(desk=None, analyzer=None, config=None) -> FastAPI:
    """Build the API application.

    Args:
        desk: A ``TradeDesk`` (or duck-type for tests).
        analyzer: A ``MarketAnalyzer`` (or duck-type for tests).
        config: Optional ``Config``; supplies the default trading style and
            exchange timezone.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if app.state.desk is not None:
            logger.info("Shutting down — cancelling trade monitors.")
            await app.state.desk.shutdown()

    application = FastAPI(title="ScalpBot Internal API", version="0.1.0", lifespan=lifespan)
    application.state.desk = desk
    application.state.analyzer = analyzer
    application.state.config = config
    application.include_router(router)

    @application.get("/health")
    async def health():
        """Liveness check."""
        return {"status": "ok"}

    return application


app = create_app()


# ── CLI ──────────────────────────────────────────────────────────────────


def _run_cli(argv: Optional[list[str]] = None) -> None:
    """Parse CLI arguments, wire the services and serve the API."""
    import argparse

    import uvicorn

    from scalpbot.broker.tradier_client import TradierClient
    from scalpbot.config import load_config
    from scalpbot.strategy.analyzer import MarketAnalyzer
    from scalpbot.trade_desk import TradeDesk

    parser = argparse.ArgumentParser(description="ScalpBot trade assistant API")
    parser.add_argument("--port", type=int, help="API port (default: API_PORT or 8080)")
    parser.add_argument("--log-level", help="Logging level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--env-file", help="Path to a .env file")
    args = parser.parse_args(argv)

    config = load_config(args.env_file)
    log_level = (args.log_level or config.log_level).upper()

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    broker = TradierClient(config)
    desk = TradeDesk(
        broker,
        poll_interval=config.poll_interval_seconds,
        time_stop_minutes=config.time_stop_minutes,
    )
    analyzer = MarketAnalyzer(broker, tz_name=config.exchange_timezone)
    application = create_app(desk=desk, analyzer=analyzer, config=config)

    port = args.port or config.api_port
    logger.info(
        "Starting ScalpBot (%s style, %s) on port %d.",
        config.trading_style,
        "sandbox" if config.tradier_sandbox else "production",
        port,
    )
    uvicorn.run(application, host="0.0.0.0", port=port, log_level=log_level.lower())


if __name__ == "__main__":
    _run_cli()
