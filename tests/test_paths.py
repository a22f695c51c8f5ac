"""Tests for remote path joining."""
import pytest

from puter_deploy.utils.paths import join_remote_path


@pytest.mark.parametrize("base, relative, expected", [
    ("a/b/", "c.txt", "a/b/c.txt"),
    ("a/b", "c.txt", "a/b/c.txt"),
    ("/me/site//", "//css/site.css", "/me/site/css/site.css"),
    ("/me//site", "img//logo.png", "/me/site/img/logo.png"),
    ("/me/site", "assets\\app.js", "/me/site/assets/app.js"),
    ("/me/site/", "", "/me/site"),
    ("", "index.html", "index.html"),
    ("/", "index.html", "/index.html"),
])
def test_join_remote_path(base, relative, expected):
    assert join_remote_path(base, relative) == expected
