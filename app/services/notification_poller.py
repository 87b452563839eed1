"""
File: app/services/notification_poller.py
Path: app/services/notification_poller.py

Project: GST WhatsApp Relay

Purpose:
Polling-mode dispatch loop.

Every tick:
1. receive at most one notification from the Green API queue
2. if it is a new incoming text message, hand it to the pipeline on a worker
   thread (fire-and-forget, never joined) and mark its id processed once the
   hand-off succeeded
3. delete the notification by receiptId, whatever happened in step 2

Design rules:
- Ticks never overlap: run() awaits each tick before sleeping
- The processed set is only touched inside tick()
- Fetch / delete failures are logged, not retried
- Pipeline failures are only visible in logs
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional

from app.gst.models import InboundMessage
from app.outbound.green_api import GreenApiClient, GreenApiError, GreenNotification
from app.services.dedup import ProcessedMessageSet
from app.services.gst_pipeline import GstPipeline

logger = logging.getLogger("notification_poller")

PIPELINE_WORKERS = 8


def _log_pipeline_failure(future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error("Pipeline task failed", exc_info=exc)


class NotificationPoller:
    def __init__(
        self,
        *,
        client: GreenApiClient,
        pipeline: GstPipeline,
        processed: Optional[ProcessedMessageSet] = None,
        interval_seconds: float = 5.0,
        executor: Optional[Executor] = None,
    ) -> None:
        self._client = client
        self._pipeline = pipeline
        self._processed = processed if processed is not None else ProcessedMessageSet()
        self._interval = interval_seconds
        self._executor = executor or ThreadPoolExecutor(
            max_workers=PIPELINE_WORKERS,
            thread_name_prefix="gst-pipeline",
        )
        self._stopping = asyncio.Event()

    # ------------------------------------------------------------------
    # One tick
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """
        Returns:
            True  -> a notification was fetched (and a delete was issued)
            False -> queue empty or fetch failed
        """
        try:
            notification = self._client.receive_notification()
        except GreenApiError:
            logger.exception("receiveNotification failed")
            return False

        if notification is None:
            return False

        try:
            self._dispatch(notification)
        finally:
            self._delete(notification)

        return True

    def _dispatch(self, notification: GreenNotification) -> None:
        text = notification.text
        chat_id = notification.chat_id
        message_id = notification.message_id

        if text is None or not chat_id:
            logger.debug(
                "Ignoring notification %s (%s)",
                notification.receipt_id,
                notification.type_webhook,
            )
            return

        if message_id and message_id in self._processed:
            logger.info("Duplicate message %s skipped", message_id)
            return

        message = InboundMessage(
            sender_address=chat_id,
            raw_text=text,
            message_id=message_id,
        )
        try:
            future = self._executor.submit(self._pipeline.handle, message)
        except RuntimeError:
            # executor already shut down by stop()
            logger.exception("Pipeline executor unavailable, message %s dropped", message_id)
            return

        if message_id:
            self._processed.add(message_id)
        future.add_done_callback(_log_pipeline_failure)

    def _delete(self, notification: GreenNotification) -> None:
        try:
            if not self._client.delete_notification(notification.receipt_id):
                logger.warning("deleteNotification %s returned false", notification.receipt_id)
        except GreenApiError:
            logger.exception("deleteNotification %s failed", notification.receipt_id)

    # ------------------------------------------------------------------
    # Timer loop
    # ------------------------------------------------------------------
    async def run(self) -> None:
        logger.info("Polling notifications every %ss", self._interval)
        while not self._stopping.is_set():
            try:
                await asyncio.to_thread(self.tick)
            except Exception:
                logger.exception("Poll tick failed")

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass

        logger.info("Notification poller stopped")

    def stop(self) -> None:
        self._stopping.set()
        self._executor.shutdown(wait=False)
