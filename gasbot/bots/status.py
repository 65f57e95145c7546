"""Discord presence publisher – one gateway connection per shard."""
from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Optional

import discord

from ..core.errors import ChatConnectionError, PublishError

log = logging.getLogger(__name__)


class StatusPublisher:
    """Own one Discord session and expose "set the bot's status text".

    The session is opened once with :meth:`open` and held until :meth:`close`.
    Use it as ``async with StatusPublisher(...) as pub:``.
    """

    def __init__(
        self,
        token: str,
        shard_id: int = 0,
        shard_count: int = 1,
        *,
        client: Optional[discord.Client] = None,
    ) -> None:
        self.shard_id = shard_id
        self.shard_count = shard_count
        self._token = token
        self._client = client or discord.Client(
            intents=discord.Intents.none(),
            shard_id=shard_id,
            shard_count=shard_count,
        )
        self._gateway: Optional[asyncio.Task] = None

    async def open(self) -> None:
        """Log in and wait until the gateway session is ready."""
        try:
            await self._client.login(self._token)
        except (discord.DiscordException, OSError) as e:
            await self._client.close()
            raise ChatConnectionError(f"Error creating Discord session: {e}") from e

        self._gateway = asyncio.create_task(
            self._client.connect(reconnect=True), name=f"discord-shard-{self.shard_id}"
        )
        ready = asyncio.create_task(self._client.wait_until_ready())
        done, _ = await asyncio.wait({self._gateway, ready}, return_when=asyncio.FIRST_COMPLETED)

        if self._gateway in done:
            ready.cancel()
            exc = self._gateway.exception()
            await self._client.close()
            raise ChatConnectionError(f"Error opening Discord ws: {exc or 'gateway closed'}") from exc

        log.info("🔌 shard %d/%d connected", self.shard_id, self.shard_count)

    async def publish(self, text: str) -> None:
        """Show *text* as the bot's "Watching …" activity."""
        if not self._client.is_ready() or self._client.is_closed():
            raise PublishError("Discord session is not ready")
        activity = discord.Activity(type=discord.ActivityType.watching, name=text)
        try:
            await self._client.change_presence(status=discord.Status.online, activity=activity)
        except (discord.DiscordException, OSError) as e:
            raise PublishError(f"Error updating Discord status: {e}") from e

    async def close(self) -> None:
        await self._client.close()
        if self._gateway is not None:
            self._gateway.cancel()
            with suppress(asyncio.CancelledError, discord.DiscordException, OSError):
                await self._gateway
            self._gateway = None

    async def __aenter__(self) -> "StatusPublisher":
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
