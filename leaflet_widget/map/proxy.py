"""
Live updates for a map that is already rendered.

A MapProxy exposes the same builders as Map, but instead of appending to a
widget payload each call is sent as a message to the rendering surface.
Sending is fire-and-forget: no acknowledgement is awaited and nothing can be
cancelled once sent; a later call (e.g. removing the same layer id) can only
counteract it. Messages for one map are delivered in the order they were sent.
Callers that need "clear then add" to appear atomic must issue both calls
from the same callback.
"""

import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from leaflet_widget.legend.legend import LegendMethods
from leaflet_widget.map.controls import ControlMethods
from leaflet_widget.map.layers import LayerMethods
from leaflet_widget.map.operations import HtmlDependency, make_operation, operation_to_dict
from leaflet_widget.providers.registry import ProviderRegistry
from leaflet_widget.providers.tiles import ProviderMethods
from leaflet_widget.utils.serialization import to_jsonable

logger = logging.getLogger(__name__)

MESSAGE_TYPE = "leaflet-calls"


class MessageChannel:
    """
    Ordered, per-map message queues between builders and the rendering host.

    When a host session is given, every message is forwarded to
    `session.send_custom_message(type, message)` as it is sent and nothing
    is queued; without a session messages wait in the queue until drained.
    """

    def __init__(self, session: Any = None):
        self.session = session
        self._queues: Dict[str, Deque[Dict[str, Any]]] = {}

    def send(self, map_id: str, message: Dict[str, Any], message_type: str = MESSAGE_TYPE):
        if self.session is not None:
            # forwarded messages are consumed by the host
            self.session.send_custom_message(message_type, message)
            logger.debug(f"Forwarded message for map '{map_id}'")
            return
        self._queues.setdefault(map_id, deque()).append(message)
        logger.debug(f"Queued message for map '{map_id}'")

    def pending(self, map_id: str) -> int:
        return len(self._queues.get(map_id, ()))

    def drain(self, map_id: str) -> List[Dict[str, Any]]:
        """Remove and return the queued messages of one map, oldest first."""
        queue = self._queues.get(map_id)
        if not queue:
            return []
        messages = list(queue)
        queue.clear()
        return messages


class MapProxy(LayerMethods, ControlMethods, LegendMethods, ProviderMethods):
    """
    Builder interface to a rendered map identified by map_id.

    Usage:
        channel = MessageChannel(session)
        proxy = MapProxy("map", channel, data=df)
        proxy.clear_markers().add_markers(lng=..., lat=...)
    """

    def __init__(
        self,
        map_id: str,
        channel: MessageChannel,
        data: Any = None,
        providers: Optional[ProviderRegistry] = None,
    ):
        self.map_id = map_id
        self.channel = channel
        self.data = data
        self.providers = providers
        self._pending_dependencies: List[HtmlDependency] = []
        self._sent_dependencies = set()

    def add_dependencies(self, *dependencies: HtmlDependency):
        """Dependencies ride along with the next call; each is sent at most once."""
        for dependency in dependencies:
            key = (dependency.name, dependency.version)
            if key in self._sent_dependencies:
                continue
            self._sent_dependencies.add(key)
            self._pending_dependencies.append(dependency)
        return self

    def invoke_method(self, data: Any, method: str, *args):
        call = operation_to_dict(make_operation(method, args, data))
        call["dependencies"] = [d._asdict() for d in self._pending_dependencies]
        self._pending_dependencies = []
        self.channel.send(self.map_id, to_jsonable({"id": self.map_id, "calls": [call]}))
        return self

    def __repr__(self):
        return f"MapProxy({self.map_id!r})"
