"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter


messages_classified_total = Counter(
    "messages_classified_total",
    "Inbound text messages by routing action.",
    ["action"],
)

messages_forwarded_total = Counter(
    "messages_forwarded_total",
    "Messages escalated to the action group, by priority.",
    ["priority"],
)

provider_requests_total = Counter(
    "provider_requests_total",
    "Outbound Web3 data requests by kind and outcome.",
    ["kind", "outcome"],
)

faq_entries_added_total = Counter(
    "faq_entries_added_total",
    "FAQ entries added through admin commands.",
)
