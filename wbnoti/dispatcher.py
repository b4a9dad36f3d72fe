"""
Module: wbnoti/dispatcher.py

Defines the Dispatcher interface used by alarm tasks to deliver messages,
and ChannelDispatcher, which posts to a Discord channel through nextcord.
"""
from abc import ABC, abstractmethod

import nextcord

from wbnoti.errors import DispatchError


class Dispatcher(ABC):
    """Delivers a text message to a subscriber."""

    @abstractmethod
    async def send(self, subscriber_id, text):
        """
        Send `text` to `subscriber_id`.

        Raises:
            DispatchError: the message could not be delivered.
        """
        raise NotImplementedError


class ChannelDispatcher(Dispatcher):
    """
    Sends to the Discord channel whose ID is the subscriber ID.

    Attributes:
        bot: nextcord.Client used to resolve channels.
    """
    def __init__(self, bot):
        self.bot = bot

    async def send(self, subscriber_id, text):
        try:
            channel_id = int(subscriber_id)
        except ValueError:
            raise DispatchError(subscriber_id, "not a channel ID") from None

        channel = self.bot.get_channel(channel_id)
        try:
            if channel is None:
                channel = await self.bot.fetch_channel(channel_id)
            await channel.send(text)
        except (nextcord.HTTPException, nextcord.InvalidData) as e:
            raise DispatchError(subscriber_id, str(e)) from e
