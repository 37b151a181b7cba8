"""Tests for the starsystem-tools command line."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from starsystem_tools.cli.main import main, write_tree
from starsystem_tools.constants import STORAGE_FILE
from starsystem_tools.model import SystemData


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ('STARSYSTEM_WORLD_DIR', 'STARSYSTEM_SETTINGS', 'STARSYSTEM_DEFINITIONS', 'STARSYSTEM_TOOLS_LOG'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_files(tmp_path: Path) -> list[str]:
    """Settings and definition files for a small system."""
    settings = tmp_path / 'settings.json'
    settings.write_text(
        json.dumps(
            {
                'min_planets': 2,
                'max_planets': 2,
                'min_asteroid_objects': 1,
                'max_asteroid_objects': 1,
                'min_orbit_distance': 1000000,
                'max_orbit_distance': 2000000,
                'definition_lists': {'moons': ['Rock'], 'suns': ['Sun']},
            }
        ),
        encoding='utf-8',
    )
    definitions = tmp_path / 'definitions.json'
    definitions.write_text(
        json.dumps(
            {
                'definitions': [
                    {'subtype_id': 'Sun', 'surface_gravity': 2.0, 'display_name': 'Helios'},
                    {'subtype_id': 'Terra', 'surface_gravity': 1.0},
                    {'subtype_id': 'Ares', 'surface_gravity': 0.4},
                    {'subtype_id': 'Rock', 'surface_gravity': 0.01},
                ]
            }
        ),
        encoding='utf-8',
    )
    return ['--settings', str(settings), '--definitions', str(definitions)]


def _world(tmp_path: Path) -> list[str]:
    return ['--world-dir', str(tmp_path / 'world')]


def test_generate_and_show(tmp_path: Path, config_files: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    args = _world(tmp_path) + config_files
    assert main(['generate', '--seed', '3', '--salt', '4', *args]) == 0
    out = capsys.readouterr().out
    assert out.startswith('Generated ')
    assert (tmp_path / 'world' / STORAGE_FILE).exists()

    assert main(['show', *args]) == 0
    shown = capsys.readouterr().out.splitlines()
    assert shown[0].startswith('planet')
    assert 'Helios' in shown[0]
    assert shown[-1].endswith(' objects')
    assert any('AsteroidRing' in line for line in shown)


def test_generate_refuses_existing_system(
    tmp_path: Path, config_files: list[str], capsys: pytest.CaptureFixture[str]
) -> None:
    args = _world(tmp_path) + config_files
    assert main(['generate', '--salt', '1', *args]) == 0
    before = (tmp_path / 'world' / STORAGE_FILE).read_text(encoding='utf-8')
    assert main(['generate', '--salt', '2', *args]) == 1
    assert 'already has a star system' in capsys.readouterr().err
    assert (tmp_path / 'world' / STORAGE_FILE).read_text(encoding='utf-8') == before
    assert main(['generate', '--salt', '2', '--force', *args]) == 0
    assert (tmp_path / 'world' / STORAGE_FILE).read_text(encoding='utf-8') != before


def test_remove(tmp_path: Path, config_files: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    args = _world(tmp_path) + config_files
    assert main(['generate', '--salt', '1', *args]) == 0
    payload = json.loads((tmp_path / 'world' / STORAGE_FILE).read_text(encoding='utf-8'))
    root = payload['system']['center_object']
    child_id = root['children'][0]['id']

    assert main(['remove', root['id'], *args]) == 1
    assert main(['remove', 'not-a-uuid', *args]) == 1
    assert 'invalid object id' in capsys.readouterr().err
    assert main(['remove', child_id, *args]) == 0

    payload = json.loads((tmp_path / 'world' / STORAGE_FILE).read_text(encoding='utf-8'))
    ids = [c['id'] for c in payload['system']['center_object']['children']]
    assert child_id not in ids
    assert main(['remove', child_id, *args]) == 1


def test_show_empty_world(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(['show', *_world(tmp_path)]) == 0
    assert capsys.readouterr().out == 'No star system.\n'


def test_plot(tmp_path: Path, config_files: list[str]) -> None:
    args = _world(tmp_path) + config_files
    output = tmp_path / 'map.png'
    assert main(['plot', '--output', str(output), *args]) == 1
    assert not output.exists()
    assert main(['generate', '--salt', '1', *args]) == 0
    assert main(['plot', '--output', str(output), '--title', 'Home', *args]) == 0
    assert output.stat().st_size > 0


def test_invalid_settings_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    bad = tmp_path / 'bad.json'
    bad.write_text('{"min_planets": 5, "max_planets": 1}', encoding='utf-8')
    assert main(['generate', '--settings', str(bad), *_world(tmp_path)]) == 1
    assert 'Error:' in capsys.readouterr().err


def test_world_dir_from_env(
    tmp_path: Path, config_files: list[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv('STARSYSTEM_WORLD_DIR', str(tmp_path / 'envworld'))
    assert main(['generate', '--salt', '1', *config_files]) == 0
    assert (tmp_path / 'envworld' / STORAGE_FILE).exists()


def test_write_tree_empty() -> None:
    buf = io.StringIO()
    write_tree(buf, SystemData())
    assert buf.getvalue() == 'No star system.\n'
