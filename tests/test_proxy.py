"""
Tests for live map updates and map events.
"""

import pytest

from leaflet_widget.map.events import MapEvents, event_name, map_event_name
from leaflet_widget.map.formula import Formula
from leaflet_widget.map.proxy import MESSAGE_TYPE, MapProxy, MessageChannel


class FakeSession:
    """Records custom messages like a host session would send them."""

    def __init__(self):
        self.sent = []

    def send_custom_message(self, message_type, message):
        self.sent.append((message_type, message))


class TestMessageChannel:

    def test_fifo_per_map(self):
        channel = MessageChannel()
        channel.send("a", {"n": 1})
        channel.send("b", {"n": 2})
        channel.send("a", {"n": 3})
        assert channel.pending("a") == 2
        assert channel.drain("a") == [{"n": 1}, {"n": 3}]
        assert channel.pending("a") == 0
        assert channel.drain("b") == [{"n": 2}]

    def test_drain_unknown_map(self):
        assert MessageChannel().drain("nothing") == []

    def test_forwards_to_session(self):
        session = FakeSession()
        channel = MessageChannel(session)
        channel.send("a", {"n": 1})
        assert session.sent == [(MESSAGE_TYPE, {"n": 1})]

    def test_forwarded_messages_are_not_kept(self):
        session = FakeSession()
        channel = MessageChannel(session)
        proxy = MapProxy("map", channel)
        for _ in range(1000):
            proxy.clear_markers()
        assert len(session.sent) == 1000
        assert channel.pending("map") == 0
        assert channel.drain("map") == []


class TestMapProxy:
    """Tests for MapProxy messages."""

    def test_one_message_per_call_in_order(self):
        channel = MessageChannel()
        proxy = MapProxy("map", channel)
        assert proxy.clear_markers().add_markers(lng=[1.0], lat=[2.0], layer_id=["X"]) is proxy
        messages = channel.drain("map")
        assert [m["calls"][0]["method"] for m in messages] == ["clearMarkers", "addMarkers"]
        assert all(m["id"] == "map" for m in messages)

    def test_message_shape(self):
        channel = MessageChannel()
        MapProxy("map", channel).remove_shape("s1")
        message = channel.drain("map")[0]
        assert message == {
            "id": "map",
            "calls": [{"method": "removeShape", "args": ["s1"], "dependencies": []}],
        }

    def test_formulas_use_proxy_data(self, city_data):
        channel = MessageChannel()
        MapProxy("map", channel, data=city_data).add_circles(radius=100)
        args = channel.drain("map")[0]["calls"][0]["args"]
        assert args[0] == city_data["lat"]
        assert args[1] == city_data["lng"]

    def test_provider_dependencies_sent_once(self, registry):
        channel = MessageChannel()
        proxy = MapProxy("map", channel, providers=registry)
        proxy.add_provider_tiles("CartoDB.Positron").add_provider_tiles("Esri.WorldImagery")
        first, second = channel.drain("map")
        names = [d["name"] for d in first["calls"][0]["dependencies"]]
        assert names == ["leaflet-providers", "leaflet-providers-plugin"]
        assert second["calls"][0]["dependencies"] == []

    def test_failed_provider_call_keeps_dependencies_pending(self, registry):
        channel = MessageChannel()
        proxy = MapProxy("map", channel, providers=registry)
        with pytest.raises(ValueError):
            proxy.add_provider_tiles("CartoDB.Positron", options={"opacity": Formula("alpha")})
        assert channel.pending("map") == 0
        proxy.add_provider_tiles("CartoDB.Positron")
        call = channel.drain("map")[0]["calls"][0]
        assert len(call["dependencies"]) == 2

    def test_live_legend(self):
        channel = MessageChannel()
        MapProxy("map", channel).add_legend(colors=["#000"], labels=["a"], position="topright")
        call = channel.drain("map")[0]["calls"][0]
        assert call["method"] == "addLegend"
        assert call["args"][0]["position"] == "topright"

    def test_maps_do_not_share_queues(self):
        channel = MessageChannel()
        MapProxy("one", channel).clear_shapes()
        MapProxy("two", channel).clear_tiles()
        assert channel.pending("one") == 1
        assert channel.pending("two") == 1


class TestEventNames:

    def test_object_event(self):
        assert event_name("map", "marker", "click") == "map_marker_click"
        assert event_name("m1", "geojson", "mouseover") == "m1_geojson_mouseover"

    def test_map_event(self):
        assert map_event_name("map", "bounds") == "map_bounds"

    def test_invalid_names(self):
        with pytest.raises(ValueError):
            event_name("map", "tile", "click")
        with pytest.raises(ValueError):
            event_name("map", "marker", "dblclick")
        with pytest.raises(ValueError):
            map_event_name("map", "drag")


class TestMapEvents:
    """Tests for reading event inputs."""

    def test_absent_events_are_none(self):
        events = MapEvents({}, "map")
        assert events.click() is None
        assert events.zoom() is None
        assert events.object_event("shape", "mouseout") is None

    def test_empty_payload_is_none(self):
        assert MapEvents({"map_bounds": {}}, "map").bounds() is None

    def test_values(self):
        inputs = {
            "map_marker_click": {"lat": 1.0, "lng": 2.0, "id": "X"},
            "map_zoom": 7.0,
            "map_center": {"lat": 40.0, "lng": -100.0},
        }
        events = MapEvents(inputs, "map")
        assert events.object_event("marker", "click")["id"] == "X"
        assert events.zoom() == 7
        assert isinstance(events.zoom(), int)
        assert events.center() == {"lat": 40.0, "lng": -100.0}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
