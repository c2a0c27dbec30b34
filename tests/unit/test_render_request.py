"""Unit tests for render request validation and poster URL building."""

import pytest

from app.domain.entities import BoundingBox, RenderEnvironment, RenderRequest
from app.domain.exceptions import ClientInputError

_ENV = RenderEnvironment(is_production=False, base_url="http://localhost:3000")


@pytest.mark.parametrize("markdown", [None, "", "  ", 42])
def test_invalid_markdown_is_a_client_error(markdown):
    with pytest.raises(ClientInputError):
        RenderRequest.create(markdown, _ENV)


def test_poster_url_matches_encode_uri_component():
    request = RenderRequest.create("# Hi (there)!\n- *a* ~b~ 'c' 中文/?", _ENV)

    assert request.poster_url() == (
        "http://localhost:3000/poster?content="
        "%23%20Hi%20(there)!%0A-%20*a*%20~b~%20'c'%20%E4%B8%AD%E6%96%87%2F%3F"
    )


def test_poster_url_strips_trailing_slash():
    env = RenderEnvironment(is_production=True, base_url="https://posters.example.com/")

    assert RenderRequest.create("x", env).poster_url() == "https://posters.example.com/poster?content=x"


def test_bounding_box_area():
    assert BoundingBox(0, 0, 10, 10).has_area
    assert not BoundingBox(0, 0, 0, 10).has_area
    assert not BoundingBox(0, 0, 10, -1).has_area
