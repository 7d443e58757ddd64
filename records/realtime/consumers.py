import json
from channels.generic.websocket import AsyncWebsocketConsumer

from records.services.broadcast import UPDATES_GROUP


class DashboardUpdatesConsumer(AsyncWebsocketConsumer):
    """Pushes ``dashboard.refresh`` events to authenticated staff."""
    GROUP = UPDATES_GROUP

    async def connect(self):
        user = self.scope.get("user")
        if not (user and user.is_authenticated):
            await self.close(code=4401)
            return
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def dashboard_refresh(self, event):
        # event: {"type": "dashboard.refresh", "version": int, "ts": "...", "keys": [...]}
        await self.send(json.dumps(event))
