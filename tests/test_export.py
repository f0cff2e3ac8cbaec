import json

import pytest

from drag_chain_models import ChainType
from export_models import export_chain, export_links, main


@pytest.fixture
def chain():
    return ChainType(name="test", inner_size=(10.0, 8.0, 6.0), travel=20.0)


def test_export_links_stl(chain, tmp_path):
    exported = export_links(chain, tmp_path, formats=('stl',))

    assert [p.name for p in exported] == [
        "test_drag_chain_link_start.stl",
        "test_drag_chain_link.stl",
        "test_drag_chain_link_end.stl",
    ]
    assert all(p.stat().st_size > 0 for p in exported)


def test_export_chain_skips_invalid(tmp_path, capsys):
    bad = ChainType(name="bad", inner_size=(6.0, 8.0, 6.0), travel=20.0)

    assert export_chain(bad, tmp_path) == []
    assert "Skipping bad" in capsys.readouterr().out
    assert not any(tmp_path.iterdir())


@pytest.mark.slow
def test_export_chain_with_assembly(chain, tmp_path):
    exported = export_chain(chain, tmp_path, formats=('step',))

    assert tmp_path / "test_drag_chain_assembly.step" in exported
    assert len(exported) == 4


def test_main_unknown_chain(tmp_path):
    assert main(['nope', '--output-dir', str(tmp_path)]) == 1


def test_main_from_json(tmp_path):
    config = tmp_path / "chains.json"
    config.write_text(json.dumps({
        "chains": [{"name": "mini", "inner_size": [10, 8, 6], "travel": 20}]
    }))
    out = tmp_path / "out"

    status = main(['mini', '--json', str(config), '--format', 'stl',
                   '--links-only', '--output-dir', str(out)])

    assert status == 0
    assert sorted(p.name for p in out.iterdir()) == [
        "mini_drag_chain_link.stl",
        "mini_drag_chain_link_end.stl",
        "mini_drag_chain_link_start.stl",
    ]
