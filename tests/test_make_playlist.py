import pytest
import requests

import make_playlist
import spotify
from vibe import analyze_palette

HALLOWEEN = [(230, 130, 20), (10, 10, 10), (15, 15, 20), (120, 20, 140)]


@pytest.fixture(autouse=True)
def halloween_image(monkeypatch):
    monkeypatch.delenv('SPOTIFY_ACCESS_TOKEN', raising=False)
    monkeypatch.setattr(make_playlist, 'analyze_image', lambda path, n=5: analyze_palette(HALLOWEEN))


def _track(track_id):
    return {'id': track_id, 'uri': f'spotify:track:{track_id}', 'name': track_id.title(), 'artists': []}


def test_without_token_prints_search_terms(capsys):
    assert make_playlist.main(['--input', 'pumpkin.png']) == 0

    out = capsys.readouterr().out
    assert "Vibe: Halloween" in out
    assert "Spooky Hits" in out


def test_searches_and_creates_playlist(monkeypatch, capsys):
    seen = {}

    def fake_search(token, queries, **kwargs):
        seen['queries'] = queries
        return [_track('a'), _track('b')]

    def fake_create(token, name, uris):
        seen['create'] = (token, name, uris)
        return spotify.Playlist('pl1', 'https://open.spotify.com/playlist/pl1')

    monkeypatch.setattr(spotify, 'search_tracks', fake_search)
    monkeypatch.setattr(spotify, 'create_playlist', fake_create)

    code = make_playlist.main(['--input', 'pumpkin.png', '--token', 't', '--create'])

    assert code == 0
    assert seen['queries'][0] == "Halloween Party"
    assert seen['create'] == ('t', 'My Halloween Vibe', ['spotify:track:a', 'spotify:track:b'])
    assert "https://open.spotify.com/playlist/pl1" in capsys.readouterr().out


def test_no_tracks_found(monkeypatch, capsys):
    monkeypatch.setattr(spotify, 'search_tracks', lambda *a, **k: [])

    assert make_playlist.main(['--input', 'pumpkin.png', '--token', 't']) == 1
    assert "No songs found for Halloween" in capsys.readouterr().err


def test_expired_token(monkeypatch, capsys):
    def expired(*args, **kwargs):
        raise spotify.UnauthorizedError("Search failed with HTTP 401", status=401)

    monkeypatch.setattr(spotify, 'search_tracks', expired)

    assert make_playlist.main(['--input', 'pumpkin.png', '--token', 't']) == 1
    assert "Log in again" in capsys.readouterr().err


def test_authorize_prints_url(capsys):
    code = make_playlist.main(['--authorize', '--client-id', 'abc'])

    out = capsys.readouterr().out
    assert code == 0
    assert spotify.SPOTIFY_AUTHORIZE_URL in out
    assert "--verifier" in out


def test_pick_limits_playlist_to_chosen_tracks(monkeypatch, capsys):
    created = {}

    def fake_create(token, name, uris):
        created['uris'] = uris
        return spotify.Playlist('pl1', 'url')

    monkeypatch.setattr(spotify, 'search_tracks', lambda *a, **k: [_track(t) for t in 'abcde'])
    monkeypatch.setattr(spotify, 'create_playlist', fake_create)

    code = make_playlist.main(['--input', 'pumpkin.png', '--token', 't', '--create', '--pick', '1, 3,5'])

    assert code == 0
    assert created['uris'] == ['spotify:track:a', 'spotify:track:c', 'spotify:track:e']
    assert " 3. C" in capsys.readouterr().out


@pytest.mark.parametrize("picks", ["", " , ", "0", "6", "2,x"])
def test_bad_pick_refuses_to_create(monkeypatch, capsys, picks):
    def fail_create(*args):
        raise AssertionError("playlist should not be created")

    monkeypatch.setattr(spotify, 'search_tracks', lambda *a, **k: [_track(t) for t in 'abcde'])
    monkeypatch.setattr(spotify, 'create_playlist', fail_create)

    assert make_playlist.main(['--input', 'pumpkin.png', '--token', 't', '--create', '--pick', picks]) == 1
    assert "Error:" in capsys.readouterr().err


def test_parse_picks_drops_repeats():
    assert make_playlist.parse_picks('2,2,1', 3) == [1, 0]


def test_spotify_outage_is_not_reported_as_no_songs(monkeypatch, capsys):
    def outage(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(spotify.requests, 'request', outage)

    assert make_playlist.main(['--input', 'pumpkin.png', '--token', 't']) == 1
    err = capsys.readouterr().err
    assert "Could not reach Spotify" in err
    assert "No songs found" not in err


def test_exchanged_token_is_not_printed(monkeypatch, capsys):
    monkeypatch.setattr(spotify, 'exchange_token',
                        lambda *a: spotify.AccessToken('secret-token-value', expires_at=0.0))
    monkeypatch.setattr(spotify, 'search_tracks', lambda *a, **k: [_track('a')])

    code = make_playlist.main(['--input', 'pumpkin.png', '--code', 'c', '--verifier', 'v',
                               '--client-id', 'id'])

    assert code == 0
    assert 'secret-token-value' not in capsys.readouterr().out
