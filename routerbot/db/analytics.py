"""Recording and summarising bot interactions."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from sqlalchemy import distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from routerbot.db.models import AdminAction, FAQQuery, ForwardedMessage, Interaction, Web3Query

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UserInfo:
    """The parts of a Telegram user the analytics tables keep."""

    id: int
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or "Unknown"


@dataclass(slots=True)
class AnalyticsStats:
    total_interactions: int = 0
    unique_users: int = 0
    faq_queries: int = 0
    web3_queries: int = 0
    forwarded: int = 0
    match_types: dict[str, int] = field(default_factory=dict)
    forward_reasons: dict[str, int] = field(default_factory=dict)

    def format(self) -> str:
        lines = [
            "Bot analytics",
            "",
            f"Interactions: {self.total_interactions}",
            f"Unique users: {self.unique_users}",
            f"FAQ queries: {self.faq_queries}",
            f"Web3 queries: {self.web3_queries}",
            f"Forwarded messages: {self.forwarded}",
        ]
        if self.match_types:
            lines.append("")
            lines.append("FAQ match types:")
            lines.extend(f"• {name}: {count}" for name, count in sorted(self.match_types.items()))
        if self.forward_reasons:
            lines.append("")
            lines.append("Forward reasons:")
            lines.extend(f"• {name}: {count}" for name, count in sorted(self.forward_reasons.items()))
        return "\n".join(lines)


class AnalyticsRecorder:
    """Writes analytics rows; failures are logged and never reach the user."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _add(self, row: Any) -> None:
        try:
            async with self._session_factory() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to record %s", type(row).__name__)

    async def log_interaction(
        self,
        user: UserInfo,
        message_type: str,
        content: str | None,
        response_type: str | None = None,
        confidence: float | None = None,
    ) -> None:
        await self._add(
            Interaction(
                user_id=user.id,
                username=user.username,
                first_name=user.first_name,
                message_type=message_type,
                message_content=content,
                response_type=response_type,
                confidence_score=confidence,
            ),
        )

    async def log_faq_query(
        self,
        user_id: int,
        question: str,
        faq_id: str | None,
        match_type: str,
        confidence: float,
        project_reference: str | None = None,
    ) -> None:
        await self._add(
            FAQQuery(
                user_id=user_id,
                question=question,
                faq_id=faq_id,
                match_type=match_type,
                confidence_score=confidence,
                project_reference=project_reference,
            ),
        )

    async def log_web3_query(
        self,
        user_id: int,
        query_type: str,
        params: str | None,
        success: bool,
        response_time_ms: int | None = None,
    ) -> None:
        await self._add(
            Web3Query(
                user_id=user_id,
                query_type=query_type,
                query_params=params,
                success=success,
                response_time_ms=response_time_ms,
            ),
        )

    async def log_forward(self, user_id: int, message: str, forwarded_to: str, reason: str, priority: str) -> None:
        await self._add(
            ForwardedMessage(
                user_id=user_id,
                original_message=message,
                forwarded_to=forwarded_to,
                forward_reason=reason,
                priority=priority,
            ),
        )

    async def log_admin_action(self, admin_id: int, action_type: str, details: Mapping[str, Any] | None = None) -> None:
        await self._add(
            AdminAction(
                admin_id=admin_id,
                action_type=action_type,
                action_details=json.dumps(details, ensure_ascii=False, default=str) if details else None,
            ),
        )

    async def get_stats(self) -> AnalyticsStats | None:
        """Aggregate the recorded rows, or ``None`` if the database cannot be read."""

        try:
            async with self._session_factory() as session:
                total = await session.scalar(select(func.count(Interaction.id)))
                users = await session.scalar(select(func.count(distinct(Interaction.user_id))))
                faq = await session.scalar(select(func.count(FAQQuery.id)))
                web3 = await session.scalar(select(func.count(Web3Query.id)))
                forwarded = await session.scalar(select(func.count(ForwardedMessage.id)))
                match_rows = (
                    await session.execute(
                        select(FAQQuery.match_type, func.count(FAQQuery.id)).group_by(FAQQuery.match_type),
                    )
                ).all()
                reason_rows = (
                    await session.execute(
                        select(ForwardedMessage.forward_reason, func.count(ForwardedMessage.id)).group_by(
                            ForwardedMessage.forward_reason,
                        ),
                    )
                ).all()
        except SQLAlchemyError:
            logger.exception("Failed to read analytics stats")
            return None
        return AnalyticsStats(
            total_interactions=total or 0,
            unique_users=users or 0,
            faq_queries=faq or 0,
            web3_queries=web3 or 0,
            forwarded=forwarded or 0,
            match_types={name: count for name, count in match_rows},
            forward_reasons={name: count for name, count in reason_rows},
        )
