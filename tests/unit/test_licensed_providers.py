from __future__ import annotations

import pytest

from services.licensed import (
    AssetState,
    GitHubClient,
    GitHubReleaseCatalog,
    Release,
    ReleaseAsset,
    StaticReleaseCatalog,
    get_releases,
)
from tests.unit.licensed_test_utils import (
    install_urlopen,
    json_response,
    make_release,
    primary_rate_limit,
    release_payload,
)


API = "https://api.example.invalid"
RELEASES_URL = f"{API}/repos/licensee/licensed/releases?per_page=100"


def test_github_catalog_projects_releases_and_drops_empty_ones(monkeypatch: pytest.MonkeyPatch) -> None:
    page_two = f"{API}/repositories/99/releases?per_page=100&page=2"
    fake = install_urlopen(
        monkeypatch,
        [
            json_response(
                [
                    release_payload(
                        "v4.3.0",
                        [
                            (11, "licensed-4.3.0-darwin-x64.tar.gz", "uploaded"),
                            (12, "licensed-4.3.0-linux-x64.tar.gz", "uploaded"),
                        ],
                    ),
                    release_payload("v4.2.1", []),
                ],
                headers={"Link": f'<{page_two}>; rel="next"'},
            ),
            json_response([release_payload("v3.9.0", [(7, "licensed-3.9.0-linux-x64.tar.gz", "starter")])]),
        ],
    )

    catalog = GitHubReleaseCatalog(GitHubClient("token", api_url=API))
    releases = catalog.list_releases()

    assert fake.urls == [RELEASES_URL, page_two]
    assert [release.tag_name for release in releases] == ["v4.3.0", "v3.9.0"]
    assert releases[0].assets == (
        ReleaseAsset(id=11, name="licensed-4.3.0-darwin-x64.tar.gz", state=AssetState.UPLOADED),
        ReleaseAsset(id=12, name="licensed-4.3.0-linux-x64.tar.gz", state=AssetState.UPLOADED),
    )
    assert releases[1].assets[0].state is AssetState.OTHER


def test_get_releases_retries_rate_limited_listing(monkeypatch: pytest.MonkeyPatch) -> None:
    install_urlopen(
        monkeypatch,
        [
            primary_rate_limit(RELEASES_URL),
            json_response([release_payload("v4.3.0", [(1, "licensed-4.3.0-linux-x64.tar.gz", "uploaded")])]),
        ],
    )
    sleeps: list[float] = []
    client = GitHubClient(api_url=API, sleep=sleeps.append, now=lambda: 1000.0)

    releases = get_releases(client)

    assert [release.tag_name for release in releases] == ["v4.3.0"]
    assert sleeps == [3.0]


def test_release_from_payload_tolerates_missing_fields() -> None:
    release = Release.from_payload({"tag_name": "v1.0.0", "assets": None})

    assert release == Release(tag_name="v1.0.0", assets=())


def test_static_catalog_filters_releases_without_assets() -> None:
    with_assets = make_release("v4.3.0", "licensed-4.3.0-linux-x64.tar.gz")
    catalog = StaticReleaseCatalog([with_assets, Release(tag_name="v4.2.0")])

    assert catalog.list_releases() == [with_assets]


def test_release_from_payload_skips_assets_without_usable_id() -> None:
    release = Release.from_payload(
        {
            "tag_name": "v4.3.0",
            "assets": [
                {"name": "licensed-4.3.0-darwin-x64.tar.gz", "state": "uploaded"},
                {"id": None, "name": "licensed-4.3.0-win32-x64.tar.gz", "state": "uploaded"},
                {"id": "17", "name": "licensed-4.3.0-linux-x64.tar.gz", "state": "uploaded"},
                "not-an-asset",
            ],
        }
    )

    assert release.assets == (
        ReleaseAsset(id=17, name="licensed-4.3.0-linux-x64.tar.gz", state=AssetState.UPLOADED),
    )
    assert ReleaseAsset.from_payload({"id": "abc", "name": "x"}) is None
