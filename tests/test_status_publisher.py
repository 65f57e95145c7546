import discord
import pytest

from gasbot.bots.status import StatusPublisher
from gasbot.core.errors import ChatConnectionError, PublishError


@pytest.mark.asyncio
async def test_open_publish_close(discord_client):
    client = discord_client()
    pub = StatusPublisher("tok", 0, 1, client=client)

    await pub.open()
    await pub.publish("🚀 12 | 🐦 10 | 🐌 7")
    await pub.close()

    assert client.token == "tok"
    assert client.closed
    (presence,) = client.presences
    assert presence["status"] is discord.Status.online
    assert presence["activity"].type is discord.ActivityType.watching
    assert presence["activity"].name == "🚀 12 | 🐦 10 | 🐌 7"


@pytest.mark.asyncio
async def test_context_manager_closes(discord_client):
    client = discord_client()
    async with StatusPublisher("tok", client=client) as pub:
        await pub.publish("x")
    assert client.closed


@pytest.mark.asyncio
async def test_login_failure_is_connection_error(discord_client):
    client = discord_client(login_exc=discord.LoginFailure("Improper token"))
    with pytest.raises(ChatConnectionError, match="Improper token"):
        await StatusPublisher("bad", client=client).open()
    assert client.closed


@pytest.mark.asyncio
async def test_gateway_failure_is_connection_error(discord_client):
    client = discord_client(connect_exc=discord.GatewayNotFound())
    with pytest.raises(ChatConnectionError, match="Discord ws"):
        await StatusPublisher("tok", client=client).open()
    assert client.closed


@pytest.mark.asyncio
async def test_publish_before_open_fails(discord_client):
    pub = StatusPublisher("tok", client=discord_client())
    with pytest.raises(PublishError, match="not ready"):
        await pub.publish("x")


@pytest.mark.asyncio
async def test_rejected_presence_is_publish_error(discord_client):
    client = discord_client(presence_exc=discord.ClientException("rate limited"))
    async with StatusPublisher("tok", client=client) as pub:
        with pytest.raises(PublishError, match="rate limited"):
            await pub.publish("x")
