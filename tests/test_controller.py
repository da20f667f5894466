import pytest

from co2atlas.config import MapConfig, NO_DATA_COLOR
from co2atlas.controller import (
    InteractionController,
    PointerEntered,
    PointerLeft,
    PointerMoved,
    YearChanged,
    format_value,
)
from co2atlas.data import load_sources, normalize
from co2atlas.session import Session


@pytest.fixture()
def session(csv_path, geo_path, clock):
    data = normalize(load_sources(csv_path, geo_path))
    return Session.from_data(data, MapConfig(), clock=clock)


def _key(session, code):
    return next(s.key for s in session.renderer.shapes if s.country_code == code)


def test_starts_at_latest_year(session):
    ctl = session.controller
    assert ctl.view.selected_year == 2021
    assert ctl.year_label == "2021"
    assert ctl.view.active_index.year == 2021
    assert ctl.bounds == (1900, 2021)


def test_country_without_data_shows_no_data(session):
    ctl = session.controller
    afg = _key(session, "AFG")
    assert session.renderer.fill_at(afg) == NO_DATA_COLOR
    ctl.dispatch(PointerEntered(afg))
    ctl.dispatch(PointerMoved(afg, 200, 100))
    assert ctl.tooltip.visible
    assert ctl.tooltip.lines == ("Afghanistan", "Year: 2021", "No data")
    assert ctl.tooltip.lines[-1] == "No data"
    assert (ctl.tooltip.left, ctl.tooltip.top) == (210, 110)


def test_tooltip_value_follows_selected_year(session, clock):
    ctl = session.controller
    usa = _key(session, "USA")
    ctl.dispatch(YearChanged(2000))
    ctl.dispatch(PointerMoved(usa, 0, 0))
    assert ctl.tooltip.lines == ("United States of America", "Year: 2000", "15.00 t CO₂ per person")
    assert "<strong>United States of America</strong>" in ctl.tooltip.html
    ctl.dispatch(PointerLeft(usa))
    assert not ctl.tooltip.visible


def test_outliers_share_the_clamp_color(session, clock):
    ctl = session.controller
    qat, usa = _key(session, "QAT"), _key(session, "USA")
    assert session.scale.upper < 60.0
    ctl.dispatch(YearChanged(2021))
    clock.advance(1)
    assert session.renderer.fill_at(qat) == session.scale(session.scale.upper)
    # USA 2021 (17.1) also sits above the 99th percentile
    assert session.renderer.fill_at(usa) == session.renderer.fill_at(qat)


def test_year_change_keeps_scale_and_geometry(session, clock):
    scale, paths = session.scale, [s.path for s in session.renderer.shapes]
    domain = scale.domain
    for year in (1900, 1950, 2021, 1988):
        session.controller.dispatch(YearChanged(year))
        clock.advance(0.2)
    assert session.scale is scale and scale.domain == domain
    assert [s.path for s in session.renderer.shapes] == paths


def test_reselecting_a_year_is_idempotent(session, clock):
    ctl = session.controller
    ctl.dispatch(YearChanged(1960))
    clock.advance(1)
    once = (ctl.view.active_index, session.renderer.targets, session.renderer.fills())
    ctl.dispatch(YearChanged(1960))
    clock.advance(1)
    twice = (ctl.view.active_index, session.renderer.targets, session.renderer.fills())
    assert once == twice
    assert dict(once[0]) == dict(twice[0])


def test_shapes_without_ids_stay_no_data(session, clock):
    ctl = session.controller
    ctl.dispatch(YearChanged(1990))
    clock.advance(1)
    nameless = session.renderer.shapes[-1]
    assert nameless.country_code is None
    assert session.renderer.fill_at(nameless.key) == NO_DATA_COLOR
    ctl.dispatch(PointerMoved(nameless.key, 1, 1))
    assert ctl.tooltip.lines == ("Somaliland", "Year: 1990", "No data")


def test_year_outside_set_snaps_to_nearest(session):
    ctl = session.controller
    assert ctl.select_year(1850) == 1900
    assert ctl.select_year(2100) == 2021
    assert ctl.view.selected_year in ctl.years


def test_gappy_years_snap_to_nearest(session):
    ctl = InteractionController((2000, 2005, 2010), session.indexer, session.renderer)
    assert ctl.snap(2002) == 2000
    assert ctl.snap(2003) == 2005
    assert ctl.snap(2010) == 2010


def test_unknown_pointer_target_is_ignored(session):
    ctl = session.controller
    ctl.dispatch(PointerMoved("shape-999", 5, 5))
    assert ctl.tooltip.lines == ()


def test_unknown_event_type(session):
    with pytest.raises(TypeError):
        session.controller.dispatch(object())


def test_format_value():
    assert format_value(None) == "No data"
    assert format_value(3.14159) == "3.14 t CO₂ per person"
