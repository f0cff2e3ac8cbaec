import math

import pytest

from drag_chain_models import (
    CLEARANCE, DRAG_CHAIN_SPECS, ChainType, FabricationContext, LinkInstance,
    get_chain_type,
)


def make_test_chain(**overrides):
    params = dict(name="test", inner_size=(10.0, 8.0, 6.0), travel=100.0,
                  wall=1.6, bwall=1.5, twall=1.5)
    params.update(overrides)
    return ChainType(**params)


def test_outer_size_identities():
    chain = make_test_chain()
    sx, sy, sz = chain.inner_size
    os_x, os_y, os_z = chain.outer_size()

    assert os_z == sz + chain.bwall + chain.twall
    assert os_y == sy + 4 * chain.wall + 2 * CLEARANCE
    assert os_x == sx + os_z


def test_end_to_end_example_values():
    chain = make_test_chain()

    assert chain.outer_size() == pytest.approx((19.0, 14.6, 9.0))
    assert chain.radius() == pytest.approx(13.0656, abs=1e-4)
    assert chain.link_count() == 10
    assert chain.actual_travel() == pytest.approx(100.0)


def test_pivot_radius_and_bend():
    chain = make_test_chain()

    assert chain.radius() == (chain.inner_size[0] / 2) / math.sin(math.radians(22.5))
    assert chain.bend_outside_z() == 2 * chain.radius() + chain.outer_size()[2]


@pytest.mark.parametrize('travel', [1.0, 9.99, 10.0, 10.01, 99.0, 100.0, 123.4])
def test_actual_travel_covers_travel(travel):
    chain = make_test_chain(travel=travel)

    assert chain.link_count() == math.ceil(travel / chain.inner_size[0])
    assert chain.actual_travel() >= travel
    assert chain.actual_travel() - travel < chain.inner_size[0]


def test_cheek_and_pin_radius():
    chain = make_test_chain()

    assert chain.cheek_radius() == pytest.approx(4.5)
    assert chain.pin_radius() == pytest.approx(2.25)


def test_link_names():
    chain = make_test_chain(name="x")

    assert chain.link_name() == "x_drag_chain_link"
    assert chain.link_name(start=True) == "x_drag_chain_link_start"
    assert chain.link_name(end=True) == "x_drag_chain_link_end"
    assert chain.assembly_name() == "x_drag_chain_assembly"


def test_chain_type_is_immutable():
    chain = make_test_chain()

    with pytest.raises(Exception):
        chain.travel = 5.0


def test_from_spec_defaults_walls():
    chain = ChainType.from_spec("a", {'inner_size': [15, 15, 8], 'travel': 200})

    assert chain.inner_size == (15.0, 15.0, 8.0)
    assert (chain.wall, chain.bwall, chain.twall) == (1.6, 1.5, 1.5)


def test_presets_load():
    for name in DRAG_CHAIN_SPECS:
        chain = get_chain_type(name)
        assert chain.name == name
        assert chain.link_count() > 0


def test_fabrication_tints_alternate():
    fab = FabricationContext(tints=("#000000", "#FFFFFF"))

    assert [fab.tint(i) for i in range(4)] == ["#000000", "#FFFFFF", "#000000", "#FFFFFF"]
    assert fab.tint(-1) == "#FFFFFF"
    assert fab.support_width() == pytest.approx(2 * fab.extrusion_width)


def test_link_instance_color():
    inst = LinkInstance(index=0, role="link", name="n", tint="#FF8000", solid=None)
    rgba = inst.color().toTuple()

    assert rgba[:3] == pytest.approx((1.0, 128 / 255, 0.0), abs=1e-3)
