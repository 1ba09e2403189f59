import pytest

from chwire.options import (
    ClientOptions,
    CompressionMethod,
    Endpoint,
    SSLCommand,
    SSLOptions,
)


@pytest.mark.parametrize(
    "value, member, label",
    [
        (-1, CompressionMethod.NONE, "None"),
        (1, CompressionMethod.LZ4, "LZ4"),
        (2, CompressionMethod.ZSTD, "ZSTD"),
    ],
)
def test_compression_method_values(value, member, label):
    method = CompressionMethod(value)
    assert method is member
    assert str(ClientOptions(compression_method=method)).endswith(f"compression_method:{label})")


def test_client_option_defaults():
    opts = ClientOptions()
    assert opts.host == ""
    assert opts.port == 9000
    assert opts.endpoints == []
    assert opts.default_database == "default"
    assert opts.user == "default"
    assert opts.rethrow_exceptions is True
    assert opts.ping_before_query is False
    assert opts.send_retries == 1
    assert opts.retry_timeout == 5
    assert opts.compression_method is CompressionMethod.NONE
    assert opts.tcp_nodelay is True
    assert opts.tcp_keepalive_cnt == 3
    assert opts.max_compression_chunk_size == 65535
    assert opts.ssl_options is None


def test_endpoint_default_port_and_str():
    ep = Endpoint("db.example.com")
    assert ep.port == 9000
    assert str(ep) == "db.example.com:9000"


def test_endpoint_equality_and_hash():
    assert Endpoint("a", 1) == Endpoint("a", 1)
    assert Endpoint("a", 1) != Endpoint("a", 2)
    assert len({Endpoint("a", 1), Endpoint("a", 1)}) == 1


def test_all_endpoints_prepends_host():
    extra = [Endpoint("b", 9001), Endpoint("c")]
    opts = ClientOptions(host="a", port=9100, endpoints=extra)
    assert opts.all_endpoints() == [Endpoint("a", 9100)] + extra
    assert opts.endpoints == extra


def test_all_endpoints_without_host():
    extra = [Endpoint("b", 9001)]
    opts = ClientOptions(endpoints=extra)
    assert opts.all_endpoints() == extra


def test_all_endpoints_empty():
    assert ClientOptions().all_endpoints() == []


def test_str_single_host():
    opts = ClientOptions(host="localhost")
    assert str(opts) == (
        "Client( Endpoints : [default@localhost:9000] (1 items )"
        " ping_before_query:0 send_retries:1 retry_timeout:5 compression_method:None)"
    )


def test_str_lists_every_endpoint_with_user():
    opts = ClientOptions(
        host="a",
        endpoints=[Endpoint("b", 1), Endpoint("c", 2)],
        user="reader",
        compression_method=CompressionMethod.LZ4,
        ping_before_query=True,
    )
    text = str(opts)
    assert "[reader@a:9000, reader@b:1, reader@c:2]" in text
    assert "(3 items )" in text
    assert "ping_before_query:1" in text
    assert "compression_method:LZ4" in text


def test_str_zstd():
    assert "compression_method:ZSTD" in str(ClientOptions(compression_method=CompressionMethod.ZSTD))


def test_str_with_ssl_options():
    opts = ClientOptions(host="h", ssl_options=SSLOptions(path_to_ca_files=["x", "y"]))
    text = str(opts)
    assert "ssl_context: created internally" in text
    assert "path_to_ca_files: 2 items" in text
    assert text.endswith(")")


def test_ssl_option_defaults():
    ssl = SSLOptions()
    assert SSLOptions.DEFAULT_VALUE == -1
    assert ssl.min_protocol_version == SSLOptions.DEFAULT_VALUE
    assert ssl.max_protocol_version == SSLOptions.DEFAULT_VALUE
    assert ssl.context_options == SSLOptions.DEFAULT_VALUE
    assert ssl.host_flags == SSLOptions.DEFAULT_VALUE
    assert ssl.use_default_ca_locations is True
    assert ssl.use_sni is True
    assert ssl.skip_verification is False
    assert ssl.configuration == []


def test_ssl_command_value_optional():
    assert SSLCommand("sigalgs").value is None
    assert SSLCommand("sigalgs", "x").value == "x"


def test_options_lists_are_independent():
    a = ClientOptions()
    b = ClientOptions()
    a.endpoints.append(Endpoint("x"))
    assert b.endpoints == []