import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from concert_query.core.deps import get_musicbrainz_rate_limiter
from concert_query.core.environment import get_settings
from concert_query.core.exceptions import MissingTokenError, TokenRelayError
from concert_query.core.logging import setup_logging
from concert_query.models.music import EnrichmentOptions, SearchResults
from concert_query.services.archive_service import ArchiveService
from concert_query.services.lyrics_service import LyricsService
from concert_query.services.musicbrainz_service import MusicBrainzService
from concert_query.services.search_service import SEARCH_MODES, SPOTIFY_MODES, SearchService
from concert_query.services.spotify_service import SpotifyService
from concert_query.services.token_service import TokenService
from concert_query.utils.formatting import render_concert, render_live, render_tracks


def render_results(results: SearchResults) -> str:
    """把搜索结果渲染为文本"""
    if results.message:
        return results.message
    blocks = [render_concert(concert) for concert in results.concerts]
    if results.tracks:
        blocks.append(render_tracks(results.tracks))
    if results.live_recordings:
        blocks.append(render_live(results.live_recordings))
    return "\n\n".join(blocks)


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"必须是正整数: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description='查询艺术家、曲目及其补充信息')

    parser.add_argument('query', help='搜索关键词')
    parser.add_argument(
        '-m', '--mode',
        choices=SEARCH_MODES,
        default='artist',
        help='搜索模式 (默认: artist)'
    )
    parser.add_argument(
        '-l', '--limit',
        type=positive_int,
        default=settings.RESULT_LIMIT,
        help=f'结果数量上限 (默认: {settings.RESULT_LIMIT})'
    )
    parser.add_argument('-t', '--token', help='Spotify访问令牌，不提供时使用服务端凭证获取')
    parser.add_argument('--json', action='store_true', help='以JSON格式输出')
    for name in ('audio-features', 'credits', 'lyrics', 'live', 'related'):
        parser.add_argument(f'--no-{name}', action='store_true', help=f'跳过{name}查询')
    return parser


async def run_search(args: argparse.Namespace) -> SearchResults:
    settings = get_settings()

    token = args.token
    if not token and args.mode in SPOTIFY_MODES:
        token = (await asyncio.to_thread(TokenService(settings).fetch_token)).get("access_token")

    service = SearchService(
        settings=settings,
        spotify_factory=lambda: SpotifyService(token, settings),
        musicbrainz=MusicBrainzService(settings),
        musicbrainz_limiter=get_musicbrainz_rate_limiter(),
        archive=ArchiveService(settings),
        lyrics=LyricsService(settings),
    )
    options = EnrichmentOptions(
        audio_features=not args.no_audio_features,
        credits=not args.no_credits,
        lyrics=not args.no_lyrics,
        live=not args.no_live,
        related=not args.no_related,
    )
    return await service.search(args.query, mode=args.mode, limit=args.limit, options=options)


def main(argv: Optional[List[str]] = None) -> int:
    """命令行入口点"""
    args = build_parser().parse_args(argv)
    setup_logging(sys.stderr)

    try:
        results = asyncio.run(run_search(args))
    except TokenRelayError as e:
        logging.error(f"获取Spotify令牌失败: {e}")
        return 1
    except MissingTokenError as e:
        logging.error(str(e))
        return 1

    if args.json:
        print(results.model_dump_json(indent=2))
    else:
        print(render_results(results))
    return 0


if __name__ == "__main__":
    sys.exit(main())
