"""RabbitMQ publisher: one robust connection, topic exchanges declared once per name."""

import json
from typing import Any, Dict, Optional

import aio_pika

from cms.config.settings import settings


class RabbitMQPublisher:
    def __init__(self, url: Optional[str] = None) -> None:
        self._url = url or settings.rabbitmq_url
        self._connection: Optional[aio_pika.abc.AbstractRobustConnection] = None
        self._channel: Optional[aio_pika.abc.AbstractChannel] = None
        self._exchanges: Dict[str, aio_pika.abc.AbstractExchange] = {}

    async def connect(self) -> None:
        self._connection = await aio_pika.connect_robust(self._url)
        self._channel = await self._connection.channel()
        self._exchanges.clear()

    async def _exchange(self, name: str) -> aio_pika.abc.AbstractExchange:
        if name not in self._exchanges:
            self._exchanges[name] = await self._channel.declare_exchange(
                name,
                aio_pika.ExchangeType.TOPIC,
                durable=True,
            )
        return self._exchanges[name]

    async def publish(
        self,
        exchange_name: str,
        routing_key: str,
        message: Dict[str, Any],
        message_id: str,
    ) -> None:
        """Publish a persistent JSON message; connects lazily on first use."""
        if not self._channel:
            await self.connect()

        exchange = await self._exchange(exchange_name)
        msg = aio_pika.Message(
            body=json.dumps(message, default=str).encode(),
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
            content_type="application/json",
            message_id=message_id,
        )
        await exchange.publish(msg, routing_key=routing_key)

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.close()
        self._connection = None
        self._channel = None
        self._exchanges.clear()
