import httpx
import pytest

from favactors.errors import RemoteServiceError
from favactors.infrastructure.services.tmdb_client import TMDbClient


def _client(handler, api_key="secret"):
    return TMDbClient(api_key, api_url="https://api.test/3/", transport=httpx.MockTransport(handler))


def test_search_person_sends_the_key_and_parses_results():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "results": [
                    {"id": 1, "name": "Anna", "profile_path": "/anna.jpg"},
                    {"id": 2, "name": "Zed", "profile_path": None},
                    {"name": "No id"},
                ]
            },
        )

    client = _client(handler)
    results = client.search_person("  anna ")

    assert [(r.id, r.name, r.image_path) for r in results] == [(1, "Anna", "/anna.jpg"), (2, "Zed", None)]
    request = seen[0]
    assert request.url.path == "/3/search/person"
    assert request.url.params["query"] == "anna"
    assert request.url.params["api_key"] == "secret"


def test_blank_query_does_not_hit_the_network():
    def handler(request):
        raise AssertionError("unexpected request")

    assert _client(handler).search_person("   ") == []


def test_movie_credits_newest_first():
    def handler(request):
        assert request.url.path == "/3/person/7/movie_credits"
        return httpx.Response(
            200,
            json={
                "cast": [
                    {"id": 1, "title": "Old", "release_date": "1990-01-01"},
                    {"id": 2, "title": "New", "release_date": "2020-05-01", "character": "Hero"},
                    {"id": 3, "title": "Unreleased", "release_date": ""},
                ]
            },
        )

    movies = _client(handler).movie_credits(7)

    assert [m.title for m in movies] == ["New", "Old", "Unreleased"]
    assert movies[0].character == "Hero"


def test_image_url_uses_remote_configuration():
    def handler(request):
        if request.url.path == "/3/configuration":
            return httpx.Response(
                200,
                json={"images": {"secure_base_url": "https://img.test/p/", "profile_sizes": ["w45", "w185"]}},
            )
        assert str(request.url) == "https://img.test/p/w185/anna.jpg"
        return httpx.Response(200, content=b"jpeg")

    client = _client(handler)

    assert client.image_url("w185", "/anna.jpg") == "https://img.test/p/w185/anna.jpg"
    assert client.fetch_image("w185", "/anna.jpg") == b"jpeg"
    assert client.image_config().profile_sizes == ["w45", "w185"]


def test_fetch_without_size_uses_the_second_remote_profile_size():
    requested = []

    def handler(request):
        if request.url.path == "/3/configuration":
            return httpx.Response(
                200,
                json={"images": {"base_url": "https://img.test/p/", "profile_sizes": ["w45", "w92", "original"]}},
            )
        requested.append(str(request.url))
        return httpx.Response(200, content=b"jpeg")

    client = _client(handler)

    assert client.image_config().row_profile_size == "w92"
    assert client.fetch_image(None, "/anna.jpg") == b"jpeg"
    assert requested == ["https://img.test/p/w92/anna.jpg"]


def test_row_profile_size_falls_back_to_the_only_size():
    client = _client(
        lambda request: httpx.Response(200, json={"images": {"profile_sizes": ["original"]}})
    )

    assert client.image_config().row_profile_size == "original"


def test_without_key_images_use_default_configuration():
    def handler(request):
        assert "configuration" not in request.url.path
        return httpx.Response(200, content=b"jpeg")

    client = _client(handler, api_key=None)

    assert client.image_url("w185", "/a.jpg") == "https://image.tmdb.org/t/p/w185/a.jpg"
    with pytest.raises(RemoteServiceError):
        client.search_person("anna")


@pytest.mark.parametrize("status", [401, 404, 500])
def test_http_errors_become_remote_service_errors(status):
    client = _client(lambda request: httpx.Response(status, json={"status_message": "nope"}))
    with pytest.raises(RemoteServiceError):
        client.movie_credits(1)


def test_network_failures_become_remote_service_errors():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    client = _client(handler)
    with pytest.raises(RemoteServiceError):
        client.fetch_image("w185", "/a.jpg")
    with pytest.raises(RemoteServiceError):
        client.search_person("anna")


def test_invalid_json_is_reported():
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(RemoteServiceError):
        client.search_person("anna")
