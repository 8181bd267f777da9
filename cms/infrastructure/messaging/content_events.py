"""Post-save hook publishing content.inserted / content.updated to RabbitMQ."""

import uuid
from typing import List

from cms.application.hooks import StorageEvent, StorageEventName
from cms.core.context import correlation_id_ctx
from cms.infrastructure.messaging.rabbitmq_publisher import RabbitMQPublisher

ROUTING_INSERTED = "content.inserted"
ROUTING_UPDATED = "content.updated"


class ContentEventPublisher:
    """SaveHook: announces saved records. Broker failures are reported as a warning, not raised."""

    def __init__(self, publisher: RabbitMQPublisher, exchange: str) -> None:
        self._publisher = publisher
        self._exchange = exchange

    async def __call__(self, event: StorageEvent) -> List[str]:
        if event.name != StorageEventName.POST_SAVE:
            return []
        content = event.content
        message = {
            "contenttype": content.contenttype,
            "id": content.id,
            "status": content.status.value,
            "ownerid": content.ownerid,
            "correlation_id": correlation_id_ctx.get(),
        }
        routing_key = ROUTING_INSERTED if event.created else ROUTING_UPDATED
        try:
            await self._publisher.publish(self._exchange, routing_key, message, str(uuid.uuid4()))
        except Exception as e:
            return [f"The {content.contenttype} was saved, but listeners were not notified: {e}"]
        return []
