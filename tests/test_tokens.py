"""
Tests for token classification.
"""

import pytest

from extdeps.core.services.ext_install.domain.tokens import (
    Token,
    TokenKind,
    classify,
    classify_tokens,
    is_remote,
)


class TestIsRemote:
    @pytest.mark.parametrize("location", [
        "https://host/x.tar.gz",
        "http://host/x",
        "HTTPS://HOST/x",
        "s3://bucket/key",
        "ftp://mirror/file",
        "file:///tmp/x.tar.gz",
    ])
    def test_schemes(self, location):
        assert is_remote(location)

    @pytest.mark.parametrize("location", [
        "/abs/path.tar.gz",
        "relative/path",
        "a://too-short-scheme",
        "toolongx://host",
        "1http://host",
        "C:/windows/path",
    ])
    def test_not_schemes(self, location):
        assert not is_remote(location)


class TestClassify:
    def test_wildcard_is_extension(self):
        assert classify("*") == Token(TokenKind.EXTENSION, "*")
        assert classify("vendor/*").kind is TokenKind.EXTENSION

    def test_url_is_extension(self):
        assert classify("https://host/pg.tar.gz").kind is TokenKind.EXTENSION
        assert classify("https://host/download?id=3").kind is TokenKind.EXTENSION

    def test_tarball_suffix_is_extension(self):
        assert classify("/opt/ext/pg-1.0.tar.gz").kind is TokenKind.EXTENSION

    def test_plain_name_is_os_package(self):
        assert classify("libpq5") == Token(TokenKind.OS_PACKAGE, "libpq5")

    def test_tar_gz_in_middle_is_not_extension(self):
        assert classify("foo.tar.gz.sig").kind is TokenKind.OS_PACKAGE

    def test_dev_package_strips_plus(self):
        assert classify("+libpq-dev") == Token(TokenKind.DEV_PACKAGE, "libpq-dev")

    def test_build_arg_keeps_dash(self):
        token = classify("--with-pg-config=/usr/bin/pg_config")
        assert token == Token(TokenKind.BUILD_ARG, "--with-pg-config=/usr/bin/pg_config")

    def test_extension_rules_win_over_prefixes(self):
        assert classify("+vendor/*").kind is TokenKind.EXTENSION
        assert classify("-x.tar.gz").kind is TokenKind.EXTENSION

    def test_classification_is_pure(self):
        assert classify("libxml2") == classify("libxml2")


class TestClassifyTokens:
    def test_dev_override_and_plain_package(self):
        tokens = classify_tokens("+pkg-a pkg-b")
        assert tokens == [
            Token(TokenKind.DEV_PACKAGE, "pkg-a"),
            Token(TokenKind.OS_PACKAGE, "pkg-b"),
        ]

    def test_list_input_keeps_order(self):
        kinds = [t.kind for t in classify_tokens(["-O2", "*", "libfoo", "+libfoo-dev"])]
        assert kinds == [
            TokenKind.BUILD_ARG,
            TokenKind.EXTENSION,
            TokenKind.OS_PACKAGE,
            TokenKind.DEV_PACKAGE,
        ]
