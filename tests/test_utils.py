import logging

import pytest

from labkey_query.utils import build_url, enable_debug_logging, normalize_slash


def test_normalize_slash_adds_trailing():
    assert normalize_slash("myFolder") == "myFolder/"


def test_normalize_slash_strips_leading_and_keeps_one_trailing():
    assert normalize_slash("/home/sub/") == "home/sub/"


@pytest.mark.parametrize("container", ["myFolder", "/myFolder", "myFolder/", "/myFolder/"])
def test_build_url_normalizes_each_segment(container):
    url = build_url("http://h/labkey", "query", container, "getQuery.api")
    assert url == "http://h/labkey/query/myFolder/getQuery.api?"


def test_build_url_with_trailing_slash_on_base():
    url = build_url("http://h/labkey/", "login", "a/b", "whoAmI.api")
    assert url == "http://h/labkey/login/a/b/whoAmI.api?"


def test_enable_debug_logging_attaches_single_handler(package_logger):
    package_logger.handlers[:] = []

    enable_debug_logging()
    logger = enable_debug_logging()

    assert logger is package_logger
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.StreamHandler)
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
