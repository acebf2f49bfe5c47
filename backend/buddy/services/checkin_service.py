# /buddy/services/checkin_service.py

import logging
import random
from typing import Optional

from buddy.config.persona import LANGUAGE_GUIDE, MOTIVATION_STYLES, MOTIVATION_SYSTEM_PROMPT, MOTIVATION_USER_PROMPT
from buddy.models.api import MessageResponse, TaskRef
from buddy.models.flow import QuickAction, TaskContext
from buddy.services.ai_service import SMART, AIService, ai_service
from buddy.services.string_service import StringService, normalize_language, string_service
from buddy.utils.errors import OracleFault

# Nudges the client shows around a task's start time and at fixed points of
# the day. All but the random motivation are plain templates; that one asks
# the oracle and falls back to a template.

logger = logging.getLogger(__name__)

PROACTIVE_KINDS = ("morning", "midday", "afternoon", "evening", "night")


class CheckinService:
    def __init__(self, strings: Optional[StringService] = None, ai: Optional[AIService] = None):
        self.strings = strings or string_service
        self.ai = ai or ai_service

    def task_reminder(self, task: TaskRef, language: Optional[str] = None) -> MessageResponse:
        """Sent shortly before a task starts."""
        message = self.strings.render(
            "task_reminder", normalize_language(language), title=task.title, start_time=task.start_time or "--:--"
        )
        return MessageResponse(message=message)

    def task_checkin(self, task: TaskRef, language: Optional[str] = None) -> MessageResponse:
        """Sent after a task's start time to ask whether it got done."""
        return MessageResponse(message=self.strings.render("task_checkin", normalize_language(language), title=task.title))

    def proactive_checkin(self, kind: str, task_context: TaskContext, language: Optional[str] = None) -> MessageResponse:
        language = normalize_language(language)
        if kind not in PROACTIVE_KINDS:
            logger.info(f"Unknown proactive check-in type '{kind}', using morning.")
            kind = "morning"

        message = self.strings.render(
            f"proactive_{kind}",
            language,
            total=task_context.total,
            completed=task_context.completed,
            pending=task_context.pending,
        )
        quick_actions = []
        if kind == "morning":
            quick_actions.append(QuickAction(label=self.strings.render("qa_lets_start", language), action="plan_day"))
        return MessageResponse(message=message, quick_actions=quick_actions)

    async def random_motivation(self, task_context: TaskContext, language: Optional[str] = None) -> MessageResponse:
        """A surprise pep talk in a randomly picked style, built from today's progress."""
        language = normalize_language(language)
        guide = LANGUAGE_GUIDE[language]
        style = random.choice(MOTIVATION_STYLES)
        try:
            message = await self.ai.generate_text(
                MOTIVATION_SYSTEM_PROMPT.format(language_rule=guide["rule"], language_tone=guide["tone"], style=style),
                MOTIVATION_USER_PROMPT.format(
                    completed=task_context.completed, total=task_context.total, pending=task_context.pending
                ),
                SMART,
                temperature=0.9,
                max_tokens=150,
            )
        except OracleFault as e:
            logger.warning(f"Motivation generation failed, using the template: {e}")
            message = self.strings.render(
                "motivation_fallback", language, completed=task_context.completed, total=task_context.total
            )
        return MessageResponse(message=message)


# Globally accessible instance
checkin_service = CheckinService()
