from concert_query.services.archive_service import ArchiveService
from conftest import FakeResponse, FakeSession

SEARCH_PAYLOAD = {
    "response": {
        "numFound": 2,
        "docs": [
            {
                "identifier": "rh1997-05-01",
                "title": "Radiohead Live at Avalon",
                "date": "1997-05-01T00:00:00Z",
                "venue": "Avalon",
                "coverage": "Boston, MA",
            },
            {"identifier": "rh1996", "title": ["Radiohead 1996"], "coverage": ["Tokyo"]},
            {"title": "missing identifier"},
        ],
    }
}


def test_search_live_recordings_parses_docs(settings):
    session = FakeSession(lambda method, url, kwargs: FakeResponse(200, SEARCH_PAYLOAD))
    service = ArchiveService(settings, session=session)

    recordings = service.search_live_recordings("Radiohead")

    assert [r.identifier for r in recordings] == ["rh1997-05-01", "rh1996"]
    assert recordings[0].date == "1997-05-01"
    assert recordings[0].url == "https://archive.org/details/rh1997-05-01"
    assert recordings[1].title == "Radiohead 1996"
    assert recordings[1].coverage == "Tokyo"

    params = dict(session.calls[0]["params"])
    assert params["q"] == 'creator:"Radiohead" AND mediatype:etree'
    assert params["rows"] == 5
    assert params["output"] == "json"


def test_first_audio_file_picks_streamable_format(settings):
    payload = {"files": [
        {"name": "rh1997.txt", "format": "Text"},
        {"name": "01 Airbag.mp3", "format": "VBR MP3"},
        {"name": "02 Paranoid.mp3", "format": "VBR MP3"},
    ]}
    service = ArchiveService(settings, session=FakeSession(lambda m, u, k: FakeResponse(200, payload)))

    url = service.first_audio_file("rh1997-05-01")

    assert url == "https://archive.org/download/rh1997-05-01/01%20Airbag.mp3"


def test_first_audio_file_none_when_no_audio(settings):
    payload = {"files": [{"name": "info.txt", "format": "Text"}]}
    service = ArchiveService(settings, session=FakeSession(lambda m, u, k: FakeResponse(200, payload)))

    assert service.first_audio_file("rh1997-05-01") is None
