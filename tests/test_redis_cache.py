import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from timeline.errors import CacheDecodeError, CacheIOError
from timeline.stores.redis import RedisCache, comment_count_key, comment_list_key

from tests.fakes import StubRedis


def test_key_naming():
    assert comment_count_key(42) == "comments.42.count"
    assert comment_list_key(42) == "comments.42"


async def test_get_multi_returns_present_keys_only():
    cache = RedisCache(StubRedis({"a": "1", "c": "3"}))
    assert await cache.get_multi(["a", "b", "c"]) == {"a": "1", "c": "3"}


async def test_get_multi_with_no_keys_skips_round_trip():
    client = StubRedis()
    assert await RedisCache(client).get_multi([]) == {}
    assert client.calls == []


async def test_set_uses_setex_with_ttl():
    client = StubRedis()
    await RedisCache(client).set("comments.1", "[]", 10)
    assert client.calls == [("setex", "comments.1", 10, "[]")]


async def test_unacknowledged_set_is_an_error():
    with pytest.raises(CacheIOError):
        await RedisCache(StubRedis(ack=False)).set("k", "v", 10)


@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.get("k"),
        lambda c: c.get_multi(["k"]),
        lambda c: c.set("k", "v", 10),
    ],
)
async def test_transport_errors_become_cache_io_errors(call):
    with pytest.raises(CacheIOError) as excinfo:
        await call(RedisCache(StubRedis(fail=True)))
    assert isinstance(excinfo.value.__cause__, RedisConnectionError)


async def test_undecodable_value_becomes_cache_decode_error():
    cache = RedisCache(StubRedis({"comments.1": b"\xff\xfe[]"}))
    with pytest.raises(CacheDecodeError) as excinfo:
        await cache.get("comments.1")
    assert excinfo.value.key == "comments.1"
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


async def test_undecodable_value_in_mget_reply_becomes_cache_decode_error():
    cache = RedisCache(StubRedis({"comments.1.count": "3", "comments.2.count": b"\xff"}))
    with pytest.raises(CacheDecodeError) as excinfo:
        await cache.get_multi(["comments.1.count", "comments.2.count"])
    assert "comments.2.count" in excinfo.value.key
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)
