"""FastAPI entrypoint: health, metrics and the Telegram webhook."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from aiogram import Bot, Dispatcher
from aiogram.types import Update
from fastapi import FastAPI, Header, HTTPException, Request
from prometheus_client import make_asgi_app

from routerbot.bot_service.bot import build_router, build_services
from routerbot.config.settings import get_settings, warn_missing
from routerbot.monitoring.logging import configure_logging

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def create_app(
    bot: Bot | None = None,
    dispatcher: Dispatcher | None = None,
    secret: str = "",
    lifespan=None,
) -> FastAPI:
    """Initialise the FastAPI application."""

    settings = get_settings()
    app = FastAPI(
        title="Web3 Assistant Bot",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=lifespan,
    )
    app.mount("/metrics", make_asgi_app())

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness checks."""

        return {"status": "ok"}

    @app.post("/webhook", tags=["telegram"])
    async def telegram_webhook(
        request: Request,
        secret_token: str | None = Header(default=None, alias=SECRET_HEADER),
    ) -> dict[str, bool]:
        """Feed a Telegram update into the dispatcher."""

        if bot is None or dispatcher is None:
            raise HTTPException(status_code=503, detail="Bot is not configured.")
        if secret and secret_token != secret:
            raise HTTPException(status_code=403, detail="Invalid secret token.")

        update = Update.model_validate(await request.json(), context={"bot": bot})
        await dispatcher.feed_update(bot, update)
        return {"ok": True}

    return app


def build_webhook_app() -> FastAPI:
    """Create the production app; services start and stop with the server."""

    configure_logging()
    settings = get_settings()
    if not settings.telegram_bot_token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not configured.")
    warn_missing(settings)

    bot = Bot(token=settings.telegram_bot_token)
    dispatcher = Dispatcher()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        services = await build_services(settings)
        dispatcher.include_router(build_router(services.context))
        if settings.webhook_url:
            await bot.set_webhook(
                f"{settings.webhook_url.rstrip('/')}/webhook",
                secret_token=settings.webhook_secret or None,
            )
            logger.info("Webhook registered at %s", settings.webhook_url)
        try:
            yield
        finally:
            await bot.session.close()
            await services.close()

    return create_app(bot, dispatcher, settings.webhook_secret, lifespan=lifespan)


def main() -> None:
    import uvicorn

    uvicorn.run(build_webhook_app(), host="0.0.0.0", port=get_settings().port)


if __name__ == "__main__":
    main()
