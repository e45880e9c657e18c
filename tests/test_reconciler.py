from dataclasses import dataclass

from globeview.models import AircraftState
from globeview.rendering.surface import EntityStyle, GeoPosition
from globeview.services.reconciler import EntityReconciler


@dataclass
class FakeHandle:
    entity_id: str
    style: EntityStyle


class RecordingSurface:
    """Render surface fake that records every mutation."""

    def __init__(self, fail_ids: set[str] | None = None):
        self.fail_ids = fail_ids or set()
        self.calls: list[tuple[str, str]] = []
        self.entities: dict[str, FakeHandle] = {}

    def create_entity(self, entity_id, position: GeoPosition, heading, style):
        if entity_id in self.fail_ids:
            raise RuntimeError("surface rejected entity")
        self.calls.append(("create", entity_id))
        handle = FakeHandle(entity_id=entity_id, style=style)
        self.entities[entity_id] = handle
        return handle

    def update_entity(self, handle, position, heading):
        self.calls.append(("update", handle.entity_id))

    def remove_entity(self, handle):
        self.calls.append(("remove", handle.entity_id))
        self.entities.pop(handle.entity_id, None)


def _flight(icao24: str, lon: float = 1.0, lat: float = 2.0, heading: float = 0.0):
    return AircraftState(icao24=icao24, longitude=lon, latitude=lat, true_track=heading)


def test_reconcile_creates_updates_and_removes():
    surface = RecordingSurface()
    reconciler = EntityReconciler(surface)

    result = reconciler.reconcile([_flight("aaa111"), _flight("bbb222")])
    assert result.created == 2
    assert reconciler.rendered_ids == {"aaa111", "bbb222"}

    surface.calls.clear()
    result = reconciler.reconcile([_flight("bbb222", lon=1.5), _flight("ccc333")])

    assert (result.created, result.updated, result.removed) == (1, 1, 1)
    assert sorted(surface.calls) == [
        ("create", "flight_ccc333"),
        ("remove", "flight_aaa111"),
        ("update", "flight_bbb222"),
    ]
    assert reconciler.rendered_ids == {"bbb222", "ccc333"}
    assert reconciler.get("bbb222").position.longitude == 1.5


def test_reconcile_is_idempotent():
    surface = RecordingSurface()
    reconciler = EntityReconciler(surface)
    flights = [_flight("aaa111", heading=45.0), _flight("bbb222")]

    reconciler.reconcile(flights)
    surface.calls.clear()
    result = reconciler.reconcile(flights)

    assert result.mutations == 0
    assert surface.calls == []


def test_heading_change_updates_in_place():
    surface = RecordingSurface()
    reconciler = EntityReconciler(surface)
    reconciler.reconcile([_flight("aaa111", heading=10.0)])
    handle = reconciler.get("aaa111").handle

    surface.calls.clear()
    reconciler.reconcile([_flight("aaa111", heading=20.0)])

    assert surface.calls == [("update", "flight_aaa111")]
    assert reconciler.get("aaa111").handle is handle
    assert reconciler.get("aaa111").heading == 20.0


def test_create_failure_does_not_abort_pass():
    surface = RecordingSurface(fail_ids={"flight_bad000"})
    reconciler = EntityReconciler(surface)

    result = reconciler.reconcile([_flight("aaa111"), _flight("bad000"), _flight("ccc333")])

    assert result.created == 2
    assert result.failed == 1
    assert reconciler.rendered_ids == {"aaa111", "ccc333"}


def test_style_switch_recreates_entities():
    surface = RecordingSurface()
    reconciler = EntityReconciler(surface, use_3d_models=False)
    flights = [_flight("aaa111")]
    reconciler.reconcile(flights)
    surface.calls.clear()

    assert reconciler.set_style(True) is True
    reconciler.reconcile(flights)

    assert surface.calls == [("remove", "flight_aaa111"), ("create", "flight_aaa111")]
    assert surface.entities["flight_aaa111"].style is EntityStyle.MODEL
    assert reconciler.set_style(True) is False


def test_clear_removes_everything():
    surface = RecordingSurface()
    reconciler = EntityReconciler(surface)
    reconciler.reconcile([_flight("aaa111"), _flight("bbb222")])

    assert reconciler.clear() == 2
    assert len(reconciler) == 0
    assert surface.entities == {}
