import pytest

from drag_chain_models import ChainType, FabricationContext
from drag_chain_renderer import DragChainRenderer


@pytest.fixture
def chain():
    return ChainType(name="test", inner_size=(10.0, 8.0, 6.0), travel=100.0)


def test_segments_include_start_link(chain):
    renderer = DragChainRenderer(chain)
    segments = renderer.segments()

    assert len(segments) == len(renderer.points)
    start, first_hinge, _ = segments[0]
    assert start[0] == pytest.approx(first_hinge[0] - chain.inner_size[0])


def test_segment_tints_alternate(chain):
    fab = FabricationContext(tints=("#000000", "#FFFFFF"))
    tints = [tint for _, _, tint in DragChainRenderer(chain, fab=fab).segments()]

    assert all(a != b for a, b in zip(tints, tints[1:]))


def test_total_angle_is_half_turn(chain):
    assert DragChainRenderer(chain).total_angle() == pytest.approx(180.0, abs=1e-6)


def test_render_writes_svg(chain, tmp_path, capsys):
    output = tmp_path / "chain.svg"
    DragChainRenderer(chain, offset=20.0).render(str(output))

    text = output.read_text()
    assert text.startswith("<?xml") or "<svg" in text
    assert text.count("<circle") == 15 + 1
    assert "SVG saved" in capsys.readouterr().out


def test_render_without_tracks(chain, tmp_path):
    output = tmp_path / "chain.svg"
    DragChainRenderer(chain).render(str(output), show_tracks=False, show_envelope=False)

    assert output.read_text().count("<circle") == 15
