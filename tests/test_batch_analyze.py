import sys

import pytest
from PIL import Image

import batch_analyze


def test_find_images(tmp_path):
    for name in ('b.png', 'a.jpg', 'c.webp', 'notes.txt'):
        (tmp_path / name).write_bytes(b'')

    found = [p.name for p in batch_analyze.find_images(tmp_path)]
    assert found == ['a.jpg', 'b.png', 'c.webp']


def test_batch_writes_reports(tmp_path, monkeypatch, capsys):
    src = tmp_path / 'in'
    out = tmp_path / 'out'
    src.mkdir()
    Image.new('RGB', (16, 16), (128, 128, 128)).save(src / 'gray.png')

    monkeypatch.setattr(sys, 'argv', ['batch_analyze.py', '-i', str(src), '-o', str(out)])
    batch_analyze.main()

    report = (out / 'gray-vibe.html').read_text()
    assert '<h1>Neutral</h1>' in report
    assert 'Top 50 Global' in report
    assert 'Vibes: Neutral 1' in capsys.readouterr().out


def test_batch_missing_input(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, 'argv', ['batch_analyze.py', '-i', str(tmp_path / 'nope'), '-o', str(tmp_path)])
    with pytest.raises(SystemExit) as exc:
        batch_analyze.main()
    assert exc.value.code == 2
