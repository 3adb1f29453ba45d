import json

import pytest

from concert_query import cli
from concert_query.core.exceptions import TokenRelayError
from concert_query.models.music import ArtistInfo, Concert, SearchResults, Track


def _results() -> SearchResults:
    return SearchResults(
        query="radiohead",
        mode="artist",
        concerts=[Concert(
            date="2024-01-01",
            venue="Radiohead Top Tracks",
            setlist=[Track(title=f"Song {i}", duration="1:01") for i in range(5)],
            artist_info=ArtistInfo(name="Radiohead"),
        )],
    )


def test_render_results_message():
    results = SearchResults(query="x", mode="artist", message="Artist not found on Spotify")

    assert cli.render_results(results) == "Artist not found on Spotify"


def test_render_results_concert():
    output = cli.render_results(_results())

    assert output.startswith("Radiohead")
    assert output.count("Duration: 1:01") == 5


def test_parser_defaults():
    args = cli.build_parser().parse_args(["radiohead"])

    assert args.mode == "artist"
    assert args.limit == 5
    assert args.no_lyrics is False


@pytest.mark.parametrize("limit", ["0", "-2", "abc"])
def test_parser_rejects_non_positive_limit(limit, capsys):
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["radiohead", "--limit", limit])
    assert "--limit" in capsys.readouterr().err


def test_main_prints_json(monkeypatch, capsys):
    async def fake_run_search(args):
        assert args.token == "abc"
        return _results()

    monkeypatch.setattr(cli, "run_search", fake_run_search)

    assert cli.main(["radiohead", "--token", "abc", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert len(payload["concerts"][0]["setlist"]) == 5


def test_main_token_failure(monkeypatch):
    async def fake_run_search(args):
        raise TokenRelayError("未配置 Spotify client credentials")

    monkeypatch.setattr(cli, "run_search", fake_run_search)

    assert cli.main(["radiohead"]) == 1
