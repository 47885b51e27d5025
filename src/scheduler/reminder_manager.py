"""Reminder scheduler using Telegram JobQueue"""
import logging
from datetime import time
from typing import Optional
from zoneinfo import ZoneInfo
from telegram.ext import Application, ContextTypes

from src.config import MIDDAY_REMINDER_TIME, EVENING_REMINDER_TIME, parse_clock_time
from src.db import queries
from src.utils.datetime_helpers import reference_timezone, today_local

logger = logging.getLogger(__name__)

MIDDAY = "midday"
EVENING = "evening"


class ReminderManager:
    """
    Two daily reminders (midday and evening) for whoever hasn't completed today

    Both are ``run_daily`` jobs on the application's JobQueue with times in the
    reference timezone, so they keep their wall-clock time across DST changes
    and pick up again after downtime without any catch-up bookkeeping.
    """

    def __init__(
        self,
        application: Application,
        notifier,
        challenge_service,
        tz: Optional[ZoneInfo] = None,
        midday: Optional[time] = None,
        evening: Optional[time] = None
    ):
        self.application = application
        self.job_queue = application.job_queue
        self.notifier = notifier
        self.challenge_service = challenge_service
        self.tz = tz or reference_timezone()
        self.triggers = {
            MIDDAY: midday or parse_clock_time(MIDDAY_REMINDER_TIME),
            EVENING: evening or parse_clock_time(EVENING_REMINDER_TIME),
        }

    @staticmethod
    def job_name(kind: str) -> str:
        return f"challenge_reminder_{kind}"

    def scheduled_time(self, kind: str) -> time:
        """Timezone-aware trigger time for a reminder kind"""
        clock = self.triggers[kind]
        return time(hour=clock.hour, minute=clock.minute, tzinfo=self.tz)

    def run_reminder_loop(self) -> None:
        """
        Register both daily reminder jobs

        Re-registering replaces the existing jobs, so it is safe to call twice.
        """
        for kind in (MIDDAY, EVENING):
            self._remove_jobs(kind)
            self.job_queue.run_daily(
                callback=self._send_scheduled_reminder,
                time=self.scheduled_time(kind),
                data={"kind": kind},
                name=self.job_name(kind),
            )
            logger.info(
                f"Scheduled {kind} reminder at {self.triggers[kind].strftime('%H:%M')} {self.tz.key}"
            )

    def stop(self) -> None:
        """Remove the reminder jobs"""
        for kind in (MIDDAY, EVENING):
            self._remove_jobs(kind)

    def _remove_jobs(self, kind: str) -> None:
        for job in self.job_queue.get_jobs_by_name(self.job_name(kind)):
            job.schedule_removal()

    async def _send_scheduled_reminder(self, context: ContextTypes.DEFAULT_TYPE) -> None:
        """JobQueue callback: send one batch, never let a failure reach the scheduler"""
        kind = context.job.data["kind"]
        try:
            await self.send_reminders(kind)
        except Exception as e:
            logger.error(f"{kind} reminder batch failed: {e}", exc_info=True)

    async def send_reminders(self, kind: str) -> int:
        """
        Remind every participant without a completion for today

        A failure for one participant is logged and the batch continues.

        Returns:
            Number of reminders delivered
        """
        today = today_local(self.tz)
        board = await self.challenge_service.build_board(today=today)
        pending = [row for row in board.rows if not row.completed]
        if not pending:
            logger.info(f"{kind} reminder: everyone completed {today.isoformat()}")
            return 0

        participants = {p.user_id: p for p in await queries.list_participants()}

        sent = 0
        for row in pending:
            participant = participants.get(row.user_id)
            if participant is None:
                continue
            try:
                await self.notifier.send_reminder(participant.chat_id, kind, board)
                sent += 1
            except Exception as e:
                logger.error(
                    f"Failed to send {kind} reminder to user {row.user_id} in chat {participant.chat_id}: {e}",
                    exc_info=True
                )

        logger.info(f"{kind} reminder sent to {sent}/{len(pending)} participants")
        return sent
