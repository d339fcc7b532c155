import pytest

from ofwire.meter import (
    Meter,
    MeterBandDrop,
    MeterBandDSCPRemark,
    MeterBandExperimenter,
    MeterBandStats,
    MeterBandType,
    MeterCommand,
    MeterConfig,
    MeterConfigRequest,
    MeterFeatures,
    MeterFlag,
    MeterMod,
    MeterStats,
    MeterStatsRequest,
    encode_meter_bands,
    read_meter_bands,
)
from ofwire.wire import DecodeError, Reader

METER_MOD_BYTES = bytes([
    0x00, 0x01,
    0x00, 0x0c,
    0x00, 0x00, 0x00, 0x2a,
    0x00, 0x01,
    0x00, 0x10,
    0x00, 0x00, 0x00, 0x40,
    0x00, 0x00, 0x00, 0x80,
    0x00, 0x00, 0x00, 0x00,
    0x00, 0x02,
    0x00, 0x10,
    0x00, 0x00, 0x00, 0x80,
    0x00, 0x00, 0x01, 0x00,
    0x06,
    0x00, 0x00, 0x00,
    0xff, 0xff,
    0x00, 0x10,
    0x00, 0x00, 0x01, 0x00,
    0x00, 0x00, 0x02, 0x00,
    0x00, 0x00, 0x00, 0x2a,
])


def _meter_mod():
    return MeterMod(
        command=MeterCommand.MODIFY,
        flags=MeterFlag.STATS | MeterFlag.BURST,
        meter=42,
        bands=[
            MeterBandDrop(64, 128),
            MeterBandDSCPRemark(128, 256, 6),
            MeterBandExperimenter(256, 512, 42),
        ],
    )


def test_meter_mod_encode():
    assert _meter_mod().encode() == METER_MOD_BYTES


def test_meter_mod_decode():
    assert MeterMod.decode(METER_MOD_BYTES) == _meter_mod()


def test_meter_config_request():
    data = bytes([0x00, 0x00, 0x00, 0x02, 0x00, 0x00, 0x00, 0x00])
    assert MeterConfigRequest(2).encode() == data
    assert MeterConfigRequest.decode(data) == MeterConfigRequest(2)


def test_meter_config():
    config = MeterConfig(
        flags=MeterFlag.KBIT_PER_SEC | MeterFlag.BURST,
        meter=42,
        bands=[MeterBandDrop(64, 128)],
    )
    data = bytes([
        0x00, 0x18,
        0x00, 0x05,
        0x00, 0x00, 0x00, 0x2a,
        0x00, 0x01,
        0x00, 0x10,
        0x00, 0x00, 0x00, 0x40,
        0x00, 0x00, 0x00, 0x80,
        0x00, 0x00, 0x00, 0x00,
    ])
    assert config.encode() == data
    assert MeterConfig.decode(data) == config


def test_meter_config_stops_at_its_length():
    config = MeterConfig(flags=MeterFlag.STATS, meter=7, bands=[MeterBandDrop(1, 2)])
    reader = Reader(config.encode() + b"\xaa\xbb")
    assert MeterConfig.read(reader) == config
    assert reader.read_all() == b"\xaa\xbb"


def test_meter_features():
    types = (1 << MeterBandType.DROP) | (1 << MeterBandType.DSCP_REMARK)
    features = MeterFeatures(
        max_meter=45,
        band_types=types,
        capabilities=1 << MeterFlag.BURST,
        max_bands=128,
        max_color=16,
    )
    data = bytes([
        0x00, 0x00, 0x00, 0x2d,
        0x00, 0x00, 0x00, 0x06,
        0x00, 0x00, 0x00, 0x10,
        0x80,
        0x10,
        0x00, 0x00,
    ])
    assert features.encode() == data
    assert MeterFeatures.decode(data) == features


def test_meter_stats():
    stats = MeterStats(
        meter=42,
        flow_count=2716600054,
        packet_in_count=3600438613393559849,
        byte_in_count=7110296996057607002,
        duration_sec=50,
        duration_nsec=10,
        band_stats=[
            MeterBandStats(1413263059007179439, 7830709349700751879),
            MeterBandStats(15621460444570393343, 13154395619072477107),
        ],
    )
    data = bytes([
        0x00, 0x00, 0x00, 0x2a,
        0x00, 0x48,
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
        0xa1, 0xec, 0x06, 0xf6,
        0x31, 0xf7, 0x53, 0xd7, 0xca, 0xec, 0x51, 0x29,
        0x62, 0xac, 0xd9, 0x72, 0x29, 0x8a, 0x6b, 0x5a,
        0x00, 0x00, 0x00, 0x32,
        0x00, 0x00, 0x00, 0x0a,
        0x13, 0x9c, 0xeb, 0x43, 0xae, 0x4e, 0x0a, 0xaf,
        0x6c, 0xac, 0x44, 0xaa, 0x28, 0x3e, 0x52, 0x07,
        0xd8, 0xca, 0x93, 0x82, 0x1f, 0x6f, 0x1a, 0xff,
        0xb6, 0x8d, 0xcd, 0x1e, 0xdd, 0xc5, 0x07, 0xb3,
    ])
    assert stats.encode() == data
    assert MeterStats.decode(data) == stats


def test_meter_stats_request_with_reserved_meter():
    data = bytes([0xff, 0xff, 0xff, 0xff, 0x00, 0x00, 0x00, 0x00])
    assert MeterStatsRequest(Meter.ALL).encode() == data
    decoded = MeterStatsRequest.decode(data)
    assert decoded.meter is Meter.ALL


def test_meter_band_stats_round_trip():
    stats = MeterBandStats(1, 2)
    assert MeterBandStats.decode(stats.encode()) == stats
    assert len(stats.encode()) == 16


@pytest.mark.parametrize("band", [
    MeterBandDrop(10, 20),
    MeterBandDSCPRemark(30, 40, 3),
    MeterBandExperimenter(50, 60, 70),
])
def test_each_band_is_sixteen_bytes_and_round_trips(band):
    data = encode_meter_bands([band])
    assert len(data) == 16
    assert read_meter_bands(Reader(data)) == [band]


def test_unknown_band_type_raises():
    data = bytes([0x00, 0x07, 0x00, 0x10]) + bytes(12)
    with pytest.raises(DecodeError):
        read_meter_bands(Reader(data))


def test_truncated_meter_features_raises():
    with pytest.raises(DecodeError):
        MeterFeatures.decode(bytes(10))


def test_empty_meter_mod_has_no_bands():
    mod = MeterMod(MeterCommand.DELETE, MeterFlag(0), 5, [])
    data = mod.encode()
    assert data == bytes([0x00, 0x02, 0x00, 0x00, 0x00, 0x00, 0x00, 0x05])
    assert MeterMod.decode(data).bands == []