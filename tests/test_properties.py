import textwrap

import pytest

from androidsign.exceptions import ConfigFileError, PropertiesFormatError
from androidsign.properties import load_properties, parse_properties


@pytest.mark.unit
def test_parse_key_properties_file():
    text = textwrap.dedent(
        """
        # Release signing, do not commit
        storePassword=hunter2
        keyPassword=hunter3
        keyAlias=upload
        storeFile=../upload-keystore.jks
        """
    )
    assert parse_properties(text) == {
        "storePassword": "hunter2",
        "keyPassword": "hunter3",
        "keyAlias": "upload",
        "storeFile": "../upload-keystore.jks",
    }


@pytest.mark.unit
@pytest.mark.parametrize(
    "line",
    [
        "key=value",
        "key = value",
        "key:value",
        "key : value",
        "key value",
        "   key\t=\tvalue",
    ],
)
def test_separators_and_whitespace(line):
    assert parse_properties(line) == {"key": "value"}


@pytest.mark.unit
def test_comments_and_blank_lines_are_skipped():
    text = "! bang comment\n# hash comment\n\n   \nkey=value\n"
    assert parse_properties(text) == {"key": "value"}


@pytest.mark.unit
def test_value_keeps_inner_separators_and_trailing_text():
    assert parse_properties("url=https://example.com/a=b") == {
        "url": "https://example.com/a=b"
    }


@pytest.mark.unit
def test_key_without_value_is_empty_string():
    assert parse_properties("keyAlias\nother=") == {"keyAlias": "", "other": ""}


@pytest.mark.unit
def test_line_continuation_strips_leading_whitespace():
    text = "storeFile=/very/long/\\\n        path/keystore.jks\n"
    assert parse_properties(text) == {"storeFile": "/very/long/path/keystore.jks"}


@pytest.mark.unit
def test_even_backslashes_do_not_continue():
    text = "path=C:\\\\\nnext=1\n"
    assert parse_properties(text) == {"path": "C:\\", "next": "1"}


@pytest.mark.unit
def test_continuation_at_end_of_file():
    assert parse_properties("key=abc\\") == {"key": "abc"}


@pytest.mark.unit
def test_escaped_separators_in_key():
    assert parse_properties("a\\=b\\:c\\ d=value") == {"a=b:c d": "value"}


@pytest.mark.unit
def test_escape_sequences():
    props = parse_properties("tabs=a\\tb\\nc\nuni=caf\\u00e9\nother=\\q")
    assert props == {"tabs": "a\tb\nc", "uni": "caf\u00e9", "other": "q"}


@pytest.mark.unit
def test_windows_path_escaping_from_local_properties():
    props = parse_properties("sdk.dir=C\\:\\\\Users\\\\me\\\\Android\\\\sdk")
    assert props["sdk.dir"] == "C:\\Users\\me\\Android\\sdk"


@pytest.mark.unit
def test_later_duplicates_override():
    assert parse_properties("keyAlias=first\nkeyAlias=second") == {
        "keyAlias": "second"
    }


@pytest.mark.unit
def test_crlf_line_endings():
    assert parse_properties("a=1\r\nb=2\r\n") == {"a": "1", "b": "2"}


@pytest.mark.unit
def test_malformed_unicode_escape_reports_line():
    with pytest.raises(PropertiesFormatError) as exc_info:
        parse_properties("ok=1\nbad=\\u12G4\n", path="key.properties")
    assert exc_info.value.line == 2
    assert exc_info.value.path == "key.properties"


@pytest.mark.unit
def test_load_properties_reads_latin1(tmp_path):
    path = tmp_path / "key.properties"
    path.write_bytes("keyPassword=p\xe4ss\n".encode("latin-1"))
    assert load_properties(path) == {"keyPassword": "p\xe4ss"}


@pytest.mark.unit
def test_load_properties_unreadable_raises_config_file_error(tmp_path):
    with pytest.raises(ConfigFileError) as exc_info:
        load_properties(tmp_path)
    assert exc_info.value.path == str(tmp_path)
