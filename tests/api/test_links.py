import uuid

from device_api.api.links import build_link, build_page_link


def test_build_link_substitutes_id() -> None:
    device_id = uuid.UUID("8c5d9a52-2b0e-4a5d-9d0e-3f3c1c3e6b11")

    link = build_link(
        "http://testserver/api/v1", "/devices/{id}", id=device_id
    )

    assert link == (
        "http://testserver/api/v1/devices/8c5d9a52-2b0e-4a5d-9d0e-3f3c1c3e6b11"
    )


def test_build_link_strips_trailing_slash() -> None:
    assert (
        build_link("http://testserver/", "/devices")
        == "http://testserver/devices"
    )


def test_build_link_quotes_path_parameters() -> None:
    link = build_link(
        "http://testserver", "/devices/brand/{brand}", brand="A&B/C D"
    )

    assert link == "http://testserver/devices/brand/A%26B%2FC%20D"


def test_build_page_link() -> None:
    link = build_page_link(
        "http://testserver", "/devices/brand/{brand}", 2, 5, brand="Google"
    )

    assert link == "http://testserver/devices/brand/Google?page=2&size=5"
