from __future__ import annotations

import asyncio
from concurrent.futures import Executor, Future

from app.outbound.green_api import GreenApiError, GreenNotification
from app.services.dedup import ProcessedMessageSet
from app.services.notification_poller import NotificationPoller

from tests.conftest import VALID_GST


class InlineExecutor(Executor):
    def submit(self, fn, *args, **kwargs):
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class FakePipeline:
    def __init__(self):
        self.handled = []

    def handle(self, message):
        self.handled.append(message)


class FakeGreenClient:
    def __init__(self, notifications, fail_receive=False, fail_delete=False):
        self.notifications = list(notifications)
        self.deleted: list[int] = []
        self.fail_receive = fail_receive
        self.fail_delete = fail_delete

    def receive_notification(self):
        if self.fail_receive:
            raise GreenApiError("down")
        return self.notifications.pop(0) if self.notifications else None

    def delete_notification(self, receipt_id):
        self.deleted.append(receipt_id)
        if self.fail_delete:
            raise GreenApiError("delete failed")
        return True


def _text_notification(receipt_id: int, message_id: str, text: str = VALID_GST) -> GreenNotification:
    return GreenNotification(
        receipt_id=receipt_id,
        body={
            "typeWebhook": "incomingMessageReceived",
            "idMessage": message_id,
            "senderData": {"chatId": "919800000000@c.us"},
            "messageData": {
                "typeMessage": "textMessage",
                "textMessageData": {"textMessage": text},
            },
        },
    )


def _poller(client, pipeline, processed=None) -> NotificationPoller:
    return NotificationPoller(
        client=client,
        pipeline=pipeline,
        processed=processed if processed is not None else ProcessedMessageSet(),
        interval_seconds=0.01,
        executor=InlineExecutor(),
    )


def test_duplicate_message_routed_once_and_deleted_twice() -> None:
    client = FakeGreenClient([_text_notification(1, "MSG-1"), _text_notification(2, "MSG-1")])
    pipeline = FakePipeline()
    poller = _poller(client, pipeline)

    assert poller.tick() is True
    assert poller.tick() is True

    assert len(pipeline.handled) == 1
    assert pipeline.handled[0].raw_text == VALID_GST
    assert pipeline.handled[0].sender_address == "919800000000@c.us"
    assert pipeline.handled[0].message_id == "MSG-1"
    assert client.deleted == [1, 2]


def test_empty_queue_does_nothing() -> None:
    client = FakeGreenClient([])
    pipeline = FakePipeline()

    assert _poller(client, pipeline).tick() is False
    assert client.deleted == []
    assert pipeline.handled == []


def test_non_text_notification_deleted_not_routed() -> None:
    status = GreenNotification(receipt_id=9, body={"typeWebhook": "stateInstanceChanged"})
    client = FakeGreenClient([status])
    pipeline = FakePipeline()
    processed = ProcessedMessageSet()

    assert _poller(client, pipeline, processed).tick() is True
    assert client.deleted == [9]
    assert pipeline.handled == []
    assert len(processed) == 0


def test_receive_failure_is_logged_not_raised() -> None:
    client = FakeGreenClient([], fail_receive=True)
    assert _poller(client, FakePipeline()).tick() is False


def test_delete_failure_is_logged_not_raised() -> None:
    client = FakeGreenClient([_text_notification(3, "MSG-3")], fail_delete=True)
    pipeline = FakePipeline()

    assert _poller(client, pipeline).tick() is True
    assert client.deleted == [3]
    assert len(pipeline.handled) == 1


def test_pipeline_failure_does_not_break_tick() -> None:
    class BrokenPipeline:
        def handle(self, message):
            raise RuntimeError("pipeline exploded")

    client = FakeGreenClient([_text_notification(4, "MSG-4")])
    assert _poller(client, BrokenPipeline()).tick() is True
    assert client.deleted == [4]


def test_submit_after_shutdown_does_not_mark_processed() -> None:
    class ShutDownExecutor(Executor):
        def submit(self, fn, *args, **kwargs):
            raise RuntimeError("cannot schedule new futures after shutdown")

    client = FakeGreenClient([_text_notification(5, "MSG-5")])
    pipeline = FakePipeline()
    processed = ProcessedMessageSet()
    poller = NotificationPoller(
        client=client,
        pipeline=pipeline,
        processed=processed,
        interval_seconds=0.01,
        executor=ShutDownExecutor(),
    )

    assert poller.tick() is True
    assert client.deleted == [5]
    assert pipeline.handled == []
    assert "MSG-5" not in processed
    assert len(processed) == 0


def test_run_loop_ticks_until_stopped() -> None:
    client = FakeGreenClient([_text_notification(1, "A"), _text_notification(2, "B")])
    pipeline = FakePipeline()
    poller = _poller(client, pipeline)

    async def scenario():
        task = asyncio.create_task(poller.run())
        for _ in range(200):
            if len(client.deleted) == 2:
                break
            await asyncio.sleep(0.01)
        poller.stop()
        await asyncio.wait_for(task, timeout=1)

    asyncio.run(scenario())

    assert [m.message_id for m in pipeline.handled] == ["A", "B"]
    assert client.deleted == [1, 2]
