"""Entrypoint for the Telegram bot."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

from aiogram import Bot, Dispatcher, Router
from sqlalchemy.ext.asyncio import AsyncEngine

from routerbot.api import Web3Client
from routerbot.bot_service.context import BotContext
from routerbot.bot_service.handlers import setup_handlers
from routerbot.config.settings import Settings, get_settings, warn_missing
from routerbot.db import AnalyticsRecorder, create_engine, create_session_factory, init_db
from routerbot.logic import AssistantLogic
from routerbot.monitoring.logging import configure_logging
from routerbot.nlp import CategoryClassifier, IntentClassifier, KnowledgeStore, PriceQueryDetector
from routerbot.storage import FAQRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Services:
    """Long-lived objects created once per process."""

    context: BotContext
    client: Web3Client
    engine: AsyncEngine

    async def close(self) -> None:
        with suppress(Exception):
            await self.client.close()
        with suppress(Exception):
            await self.engine.dispose()


async def build_services(settings: Settings) -> Services:
    """Load the knowledge base and wire classifier, logic and analytics."""

    repository = FAQRepository(Path(settings.faq_path))
    store = KnowledgeStore.from_document(await repository.load(), repository=repository)
    classifier = IntentClassifier(store, CategoryClassifier.from_settings(settings), PriceQueryDetector())

    engine = create_engine(settings.database_url)
    await init_db(engine)
    analytics = AnalyticsRecorder(create_session_factory(engine))

    client = Web3Client(settings)
    logic = AssistantLogic(settings, classifier, store, client, analytics)
    context = BotContext(settings=settings, logic=logic, analytics=analytics)
    return Services(context=context, client=client, engine=engine)


def build_router(context: BotContext) -> Router:
    router = Router()
    setup_handlers(router, context)
    return router


def build_dispatcher(context: BotContext) -> Dispatcher:
    dispatcher = Dispatcher()
    dispatcher.include_router(build_router(context))
    return dispatcher


async def main() -> None:
    """Initialise dependencies and start polling Telegram."""

    configure_logging()
    settings = get_settings()
    if not settings.telegram_bot_token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not configured.")
    warn_missing(settings)

    services = await build_services(settings)
    bot = Bot(token=settings.telegram_bot_token)
    dispatcher = build_dispatcher(services.context)

    try:
        logger.info("Starting bot polling.")
        await dispatcher.start_polling(bot)
    finally:
        with suppress(Exception):
            await bot.session.close()
        await services.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
