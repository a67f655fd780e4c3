"""aiogram message handlers.

Every incoming text message is treated as a free-text course question and gets exactly one reply.
Internal error details are logged, never sent to the user.
"""

from __future__ import annotations

import logging
from time import monotonic

from aiogram.types import Message

from coursequest.app import App
from coursequest.intent.parser import parse_question
from coursequest.intent.validation import FilterValidationError
from coursequest.search.formatter import SearchResponse
from coursequest.search.service import search_courses

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Describe the course you are looking for, e.g. "
    "\"online postgraduate management courses rated above 4\"."
)
NO_RESULTS_TEXT = "No courses matched your question."
FAILURE_TEXT = "Something went wrong while searching. Please try again later."


def _is_command_text(text: str) -> bool:
    return text.lstrip().startswith("/")


def _format_fee(fee: int | None) -> str:
    return "fee n/a" if fee is None else f"{fee:,} INR"


def format_reply(response: SearchResponse) -> str:
    """Render one page of results as plain text lines."""

    if not response.data:
        return NO_RESULTS_TEXT

    meta = response.meta
    lines = [f"Found {meta.total_count} course(s), page {meta.page} of {meta.total_pages}:"]
    for course in response.data:
        rating = "n/a" if course.rating is None else f"{course.rating:.1f}"
        lines.append(
            f"{course.course_id} {course.course_name} (rating {rating}, "
            f"{_format_fee(course.tuition_fee_inr)})"
        )
    if meta.has_next_page:
        lines.append("Refine your question to narrow the results.")
    return "\n".join(lines)


async def handle_message(message: Message, app: App) -> None:
    """Handle any incoming Telegram message and reply exactly once."""

    started = monotonic()
    raw_text = message.text or message.caption or ""
    if not raw_text.strip() or _is_command_text(raw_text):
        await message.answer(HELP_TEXT)
        return

    # noinspection PyBroadException
    try:
        parsed = parse_question(raw_text)
        response = await search_courses(app.pool, parsed.request)
        reply = format_reply(response)

        latency_ms = int((monotonic() - started) * 1000)
        logger.info(
            "handled filters=%s total=%d latency_ms=%d",
            parsed.request.filters.as_dict(),
            response.meta.total_count,
            latency_ms,
        )
    except FilterValidationError as exc:
        reply = f"Sorry, I can't search for that. {exc}"
        latency_ms = int((monotonic() - started) * 1000)
        logger.info("rejected reason=%s latency_ms=%d", exc, latency_ms)
    except Exception:
        # Handler boundary: the user gets a generic notice, details stay in the log.
        logger.exception("handler failed")
        reply = FAILURE_TEXT

    await message.answer(reply)
