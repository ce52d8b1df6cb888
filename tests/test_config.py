"""TOML configuration decoding tests."""

import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated

import httpx
import pytest
from pydantic import AliasChoices, Field

from pyfunks import (
    MILLISECOND,
    SECOND,
    ConfigDecodeError,
    Duration,
    DurationParseError,
    HTTPClientConfig,
    decode_toml,
    load_toml,
)


@dataclass
class ConfigDuration:
    some_duration: Annotated[
        Duration, Field(validation_alias=AliasChoices("SomeDuration", "someduration"))
    ]


@dataclass
class Loose:
    port: int | str
    when: datetime
    limits: tuple[int, int]


@dataclass
class ServiceConfig:
    name: str
    http: HTTPClientConfig = field(default_factory=HTTPClientConfig)
    retry_delays: list[Duration] = field(default_factory=list)
    grace: Duration | None = None
    ratio: float = 1.0


class TestDurationField:
    def test_decode(self):
        str_duration = f"{random.randint(0, 58)}s"
        c = decode_toml(f'SomeDuration = "{str_duration}"', ConfigDuration)
        assert str(c.some_duration) == str_duration

    def test_alternate_alias(self):
        c = decode_toml('someduration = "1m30s"', ConfigDuration)
        assert c.some_duration == Duration(90 * SECOND)

    def test_invalid_duration_propagates_parse_error(self):
        with pytest.raises(DurationParseError):
            decode_toml('SomeDuration = "5xyz"', ConfigDuration)

    def test_parse_error_keeps_its_cause(self):
        with pytest.raises(DurationParseError) as excinfo:
            decode_toml('SomeDuration = "5"', ConfigDuration)
        assert excinfo.value.wrapped is not None
        assert excinfo.value.__cause__ is excinfo.value.wrapped

    def test_number_is_a_type_mismatch(self):
        with pytest.raises(ConfigDecodeError, match="wrong type"):
            decode_toml("SomeDuration = 5", ConfigDuration)

    def test_missing_required_field(self):
        with pytest.raises(ConfigDecodeError) as excinfo:
            decode_toml("", ConfigDuration)
        assert "SomeDuration" in excinfo.value.internal()

    def test_bytes_document(self):
        c = decode_toml(b'SomeDuration = "300ms"', ConfigDuration)
        assert c.some_duration == Duration(300 * MILLISECOND)


class TestNestedConfig:
    def test_full_document(self):
        document = """
name = "api"
ratio = 2
retry_delays = ["100ms", "1s", "1m"]
grace = "5s"
unknown_key = true

[http]
timeout = "2s"
insecure_skip_verify = true
max_conns_per_host = 4
"""
        c = decode_toml(document, ServiceConfig)
        assert c.name == "api"
        assert c.ratio == 2.0
        assert c.retry_delays == [
            Duration(100 * MILLISECOND),
            Duration(SECOND),
            Duration(60 * SECOND),
        ]
        assert c.grace == Duration(5 * SECOND)
        assert c.http == HTTPClientConfig(
            timeout=Duration(2 * SECOND),
            insecure_skip_verify=True,
            max_conns_per_host=4,
        )

    def test_defaults(self):
        c = decode_toml('name = "api"', ServiceConfig)
        assert c.http == HTTPClientConfig()
        assert c.http.timeout == Duration(30 * SECOND)
        assert c.retry_delays == []
        assert c.grace is None

    def test_error_path_names_nested_key(self):
        with pytest.raises(ConfigDecodeError) as excinfo:
            decode_toml('name = "api"\n[http]\nmax_conns_per_host = "four"', ServiceConfig)
        assert "http.max_conns_per_host" in excinfo.value.internal()

    def test_boolean_is_not_an_integer(self):
        with pytest.raises(ConfigDecodeError):
            decode_toml("max_conns_per_host = true", HTTPClientConfig)

    def test_invalid_list_item(self):
        with pytest.raises(DurationParseError):
            decode_toml('name = "api"\nretry_delays = ["1s", "oops"]', ServiceConfig)


class TestDocumentErrors:
    def test_syntax_error(self):
        with pytest.raises(ConfigDecodeError) as excinfo:
            decode_toml("timeout = ", HTTPClientConfig)
        assert str(excinfo.value) == "invalid TOML document"
        assert excinfo.value.wrapped is not None

    def test_target_must_be_dataclass(self):
        with pytest.raises(TypeError):
            decode_toml("", dict)


class TestLoadTOML:
    def test_load_file(self, tmp_path):
        path = tmp_path / "client.toml"
        path.write_text('timeout = "1.5s"\nmax_conns_per_host = 2\n', encoding="utf-8")
        c = load_toml(path, HTTPClientConfig)
        assert c.timeout == Duration(1500 * MILLISECOND)
        assert c.max_conns_per_host == 2
        assert c.insecure_skip_verify is False


class TestHTTPClientConfig:
    def test_create_client(self):
        config = decode_toml('timeout = "2s"', HTTPClientConfig)
        with config.create_client() as client:
            assert isinstance(client, httpx.Client)
            assert client.timeout.read == 2.0


class TestFieldTypes:
    def test_wrong_types_are_rejected(self):
        with pytest.raises(ConfigDecodeError, match="wrong type"):
            decode_toml('port = [1, 2]\nwhen = "yesterday"\nlimits = "oops"', Loose)

    def test_union_tuple_and_datetime(self):
        c = decode_toml(
            'port = "http"\nwhen = 2024-05-01T12:00:00\nlimits = [1, 2]',
            Loose,
        )
        assert c.port == "http"
        assert c.when == datetime(2024, 5, 1, 12, 0, 0)
        assert c.limits == (1, 2)

    def test_integer_is_not_a_boolean(self):
        with pytest.raises(ConfigDecodeError):
            decode_toml("insecure_skip_verify = 1", HTTPClientConfig)

    def test_duration_table_is_a_type_mismatch(self):
        with pytest.raises(ConfigDecodeError) as excinfo:
            decode_toml("[timeout]\nseconds = 5", HTTPClientConfig)
        assert excinfo.value.internal().startswith("timeout:")

    def test_decoded_config_is_frozen_dataclass(self):
        c = decode_toml('timeout = "1s"', HTTPClientConfig)
        assert type(c) is HTTPClientConfig
