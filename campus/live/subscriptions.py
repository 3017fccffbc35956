# live/subscriptions.py
import logging

logger = logging.getLogger(__name__)


class Subscription:
    """Membership of one channel in one channel group."""

    def __init__(self, channel_layer, group, channel_name):
        self.channel_layer = channel_layer
        self.group = group
        self.channel_name = channel_name
        self.active = False

    async def open(self):
        await self.channel_layer.group_add(self.group, self.channel_name)
        self.active = True
        logger.debug(f"{self.channel_name} subscribed to {self.group}")

    async def unsubscribe(self):
        if not self.active:
            return
        self.active = False
        await self.channel_layer.group_discard(self.group, self.channel_name)
        logger.debug(f"{self.channel_name} unsubscribed from {self.group}")


class SubscriptionSet:
    """Every group a session listens to, keyed by what it is for."""

    def __init__(self, channel_layer, channel_name):
        self.channel_layer = channel_layer
        self.channel_name = channel_name
        self._subscriptions = {}

    def __contains__(self, key):
        return key in self._subscriptions

    def __len__(self):
        return len(self._subscriptions)

    def groups(self):
        return sorted(s.group for s in self._subscriptions.values() if s.active)

    def group_for(self, key):
        subscription = self._subscriptions.get(key)
        return subscription.group if subscription else None

    async def subscribe(self, key, group):
        current = self._subscriptions.get(key)
        if current is not None and current.group == group and current.active:
            return current
        return await self.replace(key, group)

    async def replace(self, key, group):
        """Cancel whatever ``key`` was subscribed to, then subscribe it to ``group``."""
        await self.unsubscribe(key)
        subscription = Subscription(self.channel_layer, group, self.channel_name)
        await subscription.open()
        self._subscriptions[key] = subscription
        return subscription

    async def unsubscribe(self, key):
        subscription = self._subscriptions.pop(key, None)
        if subscription is not None:
            await subscription.unsubscribe()

    async def close_all(self):
        subscriptions, self._subscriptions = self._subscriptions, {}
        for subscription in subscriptions.values():
            try:
                await subscription.unsubscribe()
            except Exception as e:
                logger.error(f"Failed to release {subscription.group} for {self.channel_name}: {str(e)}")
