import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import aio_pika

logger = logging.getLogger("assignment.publisher")


class AssignmentPublisher:
    """
    Pubblica eventi delle atribuicoes su un exchange topic RabbitMQ.

    Con rabbitmq_url vuoto il publisher è disabilitato e ogni publish è un no-op.
    """

    def __init__(self, rabbitmq_url: str, heartbeat: int, exchange: str):
        self.rabbitmq_url = rabbitmq_url
        self.heartbeat = heartbeat
        self.exchange_name = exchange
        self._connection: Optional[aio_pika.abc.AbstractRobustConnection] = None
        self._channel: Optional[aio_pika.abc.AbstractChannel] = None
        self._exchange: Optional[aio_pika.abc.AbstractExchange] = None

    @property
    def enabled(self) -> bool:
        return bool(self.rabbitmq_url)

    async def connect(self, max_retries: int = 10, delay: float = 5) -> None:
        if not self.enabled:
            logger.info("RabbitMQ non configurato, eventi disabilitati")
            return

        for attempt in range(1, max_retries + 1):
            try:
                self._connection = await aio_pika.connect_robust(
                    self.rabbitmq_url, heartbeat=self.heartbeat
                )
                self._channel = await self._connection.channel()
                self._exchange = await self._channel.declare_exchange(
                    self.exchange_name, aio_pika.ExchangeType.TOPIC, durable=True
                )
                logger.info("Connesso a RabbitMQ (exchange=%s)", self.exchange_name)
                return
            except Exception as e:
                logger.warning("Connessione RabbitMQ fallita (%d/%d): %s", attempt, max_retries, e)
                if attempt == max_retries:
                    raise
                await asyncio.sleep(delay)

    async def publish(self, routing_key: str, payload: dict[str, Any]) -> None:
        if not self.enabled:
            logger.debug("Evento %s scartato (publisher disabilitato)", routing_key)
            return
        if self._exchange is None:
            raise RuntimeError("Publisher non connesso")

        body = {**payload, "event": routing_key, "ts": datetime.now(timezone.utc).isoformat()}
        message = aio_pika.Message(
            body=json.dumps(body, default=str).encode("utf-8"),
            content_type="application/json",
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
        )
        await self._exchange.publish(message, routing_key=routing_key)
        logger.debug("Evento %s pubblicato: %s", routing_key, body)

    async def publish_assignment_created(self, atribuicao_id: str, turma_id: str, teacher_id: str, alunos: int):
        await self.publish("assignment.created", {
            "atribuicao_id": atribuicao_id,
            "turma_id": turma_id,
            "teacher_id": teacher_id,
            "alunos": alunos,
        })

    async def publish_assignment_deleted(self, atribuicao_id: str, teacher_id: str):
        await self.publish("assignment.deleted", {
            "atribuicao_id": atribuicao_id,
            "teacher_id": teacher_id,
        })

    async def publish_assignment_completed(self, atribuicao_id: str, aluno_id: str, pontos_vale: int):
        # i punti li assegna il motore dell'economia, qui li annunciamo soltanto
        await self.publish("assignment.completed", {
            "atribuicao_id": atribuicao_id,
            "aluno_id": aluno_id,
            "pontos_vale": pontos_vale,
        })

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            self._channel = None
            self._exchange = None
