"""
Kafka publishing for leave lifecycle events (confluent-kafka).

One producer per process, created lazily and shared across request
threads. Publishing is best-effort: it is skipped unless KAFKA_ENABLED,
and broker errors are logged rather than raised to the caller.
"""

import json
from threading import Lock
from typing import Optional

from confluent_kafka import KafkaException, Producer

from app.core.config import settings
from app.core.events import EventEnvelope
from app.core.logging import get_logger
from app.core.topics import KafkaTopics

logger = get_logger(__name__)

CLIENT_ID = "leave-request-service"


def _on_delivery(err, msg):
    if err is not None:
        logger.error(f"Event delivery failed: {err}")
    else:
        logger.debug(f"Event delivered to {msg.topic()} [{msg.partition()}]")


def _producer_config() -> dict:
    return {
        "bootstrap.servers": settings.KAFKA_BOOTSTRAP_SERVERS,
        "client.id": CLIENT_ID,
        "acks": "all",
        "enable.idempotence": True,
        "retries": 3,
        "retry.backoff.ms": 1000,
    }


class KafkaProducer:
    """Process-wide producer holder."""

    _instance: Optional[Producer] = None
    _lock: Lock = Lock()

    @classmethod
    def get_producer(cls) -> Producer:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = Producer(_producer_config())
        return cls._instance

    @classmethod
    def start(cls) -> None:
        """Create the producer at startup when publishing is enabled."""
        if not settings.KAFKA_ENABLED:
            logger.info("Kafka is disabled, leave events will not be published")
            return
        cls.get_producer()
        logger.info(f"Kafka producer ready: {settings.KAFKA_BOOTSTRAP_SERVERS}")

    @classmethod
    def stop(cls) -> None:
        """Deliver queued events, then drop the producer."""
        with cls._lock:
            if cls._instance is None:
                return
            remaining = cls._instance.flush(10)
            cls._instance = None
        if remaining:
            logger.warning(f"Kafka producer stopped with {remaining} undelivered event(s)")
        else:
            logger.info("Kafka producer stopped")


def publish_event(event: EventEnvelope) -> bool:
    """
    Queue an event on the topic for its type.

    Args:
        event: Event envelope to publish

    Returns:
        True if the event was queued, False if skipped or rejected
    """
    if not settings.KAFKA_ENABLED:
        logger.debug(f"Kafka disabled, skipping event: {event.event_type.value}")
        return False

    topic = KafkaTopics.for_event(event.event_type)
    try:
        producer = KafkaProducer.get_producer()
        producer.produce(
            topic=topic,
            key=event.event_id.encode("utf-8"),
            value=json.dumps(event.model_dump(mode="json")).encode("utf-8"),
            callback=_on_delivery,
        )
        producer.poll(0)
    except (KafkaException, BufferError) as e:
        logger.error(f"Failed to publish {event.event_type.value} to {topic}: {e}")
        return False

    logger.info(f"Published {event.event_type.value} to {topic} (event_id: {event.event_id})")
    return True
