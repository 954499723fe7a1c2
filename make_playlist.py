#!/usr/bin/env python3
"""Turn an image into a Spotify playlist matching its vibe."""

import argparse
import logging
import os
import sys

import spotify
from search_terms import search_terms_for
from vibe import analyze_image


def authorize(client_id: str, redirect_uri: str) -> int:
    """Print the authorize URL and the verifier to use with --code."""
    verifier = spotify.generate_code_verifier()
    url = spotify.build_authorize_url(client_id, redirect_uri, spotify.code_challenge(verifier))
    print("Open this URL and approve access:")
    print(f"  {url}")
    print()
    print("Then rerun with --code <code from the redirect> and:")
    print(f"  --verifier {verifier}")
    return 0


def parse_picks(picks: str, count: int) -> list[int]:
    """
    Parse a 1-based, comma-separated selection like '1,3,5' into list indices.

    Raises:
        ValueError: If an entry is not a number, is out of range, or nothing is picked
    """
    indices = []
    for part in picks.split(','):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit():
            raise ValueError(f"Invalid track number: {part!r}")
        number = int(part)
        if not 1 <= number <= count:
            raise ValueError(f"Track number {number} out of range 1-{count}")
        if number - 1 not in indices:
            indices.append(number - 1)

    if not indices:
        raise ValueError("No tracks selected for the playlist")
    return indices


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Classify an image and find (or create) a matching Spotify playlist.'
    )
    parser.add_argument('--input', '-i', help='Path to the image file')
    parser.add_argument('--colors', '-n', type=int, default=5,
                        help='Number of palette colors to extract (default: 5)')
    parser.add_argument('--token', default=os.environ.get('SPOTIFY_ACCESS_TOKEN'),
                        help='Spotify access token (default: $SPOTIFY_ACCESS_TOKEN)')
    parser.add_argument('--create', action='store_true',
                        help='Create a private playlist from the found tracks')
    parser.add_argument('--pick', metavar='N[,N...]',
                        help='Only add these tracks, by number in the printed list (e.g. 1,3,5)')
    parser.add_argument('--name', help='Playlist name (default: "My <Vibe> Vibe")')
    parser.add_argument('--market', default=spotify.DEFAULT_MARKET)
    parser.add_argument('--max-tracks', type=int, default=spotify.MAX_TRACKS)

    auth = parser.add_argument_group('authorization')
    auth.add_argument('--authorize', action='store_true',
                      help='Print a PKCE authorize URL and exit')
    auth.add_argument('--client-id', default=os.environ.get('SPOTIFY_CLIENT_ID'))
    auth.add_argument('--redirect-uri', default=os.environ.get('SPOTIFY_REDIRECT_URI', 'http://127.0.0.1:8888/'))
    auth.add_argument('--code', help='Authorization code to exchange for a token')
    auth.add_argument('--verifier', help='PKCE verifier printed by --authorize')

    parser.add_argument('--verbose', '-v', action='store_true')

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.authorize:
        if not args.client_id:
            parser.error('--authorize needs --client-id or $SPOTIFY_CLIENT_ID')
        return authorize(args.client_id, args.redirect_uri)

    if not args.input:
        parser.error('--input is required')

    token = args.token
    try:
        if args.code:
            access = spotify.exchange_token(args.code, args.verifier, args.redirect_uri, args.client_id)
            token = access.access_token
            print("Logged in to Spotify (session valid for about an hour).")
            print()

        analysis = analyze_image(args.input, args.colors)
        queries = search_terms_for(analysis.vibe)
        print(f"Vibe: {analysis.vibe} (score {analysis.score:.1f})")

        if not token:
            print("No Spotify token; search terms would be:")
            for q in queries:
                print(f"  - {q}")
            return 0

        tracks = spotify.search_tracks(token, queries, market=args.market, max_tracks=args.max_tracks)
        if not tracks:
            print(f"No songs found for {analysis.vibe}.", file=sys.stderr)
            return 1

        print(f"Tracks ({len(tracks)}):")
        for i, track in enumerate(tracks, 1):
            print(f"  {i:>2}. {spotify.describe_track(track)}")

        if args.create:
            selected = tracks
            if args.pick is not None:
                selected = [tracks[i] for i in parse_picks(args.pick, len(tracks))]

            name = args.name or spotify.playlist_name_for(analysis.vibe)
            playlist = spotify.create_playlist(token, name, [t['uri'] for t in selected])
            print()
            print(f"Created {name}: {playlist.url}")

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except spotify.UnauthorizedError:
        print("Error: Spotify session expired or token invalid. Log in again.", file=sys.stderr)
        return 1
    except spotify.RateLimitedError as e:
        wait = f" Retry after {e.retry_after}s." if e.retry_after else ""
        print(f"Error: Rate limited by Spotify.{wait}", file=sys.stderr)
        return 1
    except spotify.TransientNetworkError as e:
        print(f"Error: Could not reach Spotify ({e}). Try again later.", file=sys.stderr)
        return 1
    except (spotify.SpotifyError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
