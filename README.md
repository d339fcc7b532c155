# ofwire

`ofwire` turns OpenFlow 1.3 switch protocol message bodies into Python
objects and back into their exact wire bytes. Each structure is a
dataclass with an `encode()` method that returns `bytes`. Top-level
structures also have a `decode(data)` class method, and every structure
has a `read(reader)` class method that consumes bytes from an
`ofwire.wire.Reader`. Numeric fields use `enum.IntEnum` and
`enum.IntFlag` types where the protocol defines names for the values;
values without a name are kept as plain integers.

## Installation

```
pip install .
```

Python 3.10 or later is required. The package has no runtime dependencies.

## Modules

| Module               | Contents                                                                                              |
|----------------------|-------------------------------------------------------------------------------------------------------|
| `ofwire.wire`        | `Reader`, `DecodeError`, `pad_len`, `make_pad`                                                        |
| `ofwire.match`       | `XM`, `XMValue`, `Match`, `XMType`, `XMClass`, `MatchType`, `VlanID`, `IPv6ExtensionHeader`           |
| `ofwire.switch`      | `SwitchFeatures`, `SwitchConfig`, `Capability`, `ConfigFlag`                                          |
| `ofwire.port`        | `Port`, `PortMod`, `PortStatus`, `PortStatsRequest`, `PortStats`, `read_ports`, `PortNo`, `PortFeature`, `PortConfig`, `PortState`, `PortReason` |
| `ofwire.packet`      | `PacketIn`, `PacketInReason`, `NO_BUFFER`                                                             |
| `ofwire.handshake`   | `Hello`, `HelloElemVersionBitmap`, `encode_hello_elems`, `read_hello_elems`, `Experimenter`, `RoleRequest`, `ControllerRole`, `AsyncConfig` |
| `ofwire.multipart`   | `MultipartRequest`, `new_multipart_request`, `MultipartReply`, `ExperimenterMultipartHeader`, `MultipartType` |
| `ofwire.meter`       | `MeterMod`, `MeterBandDrop`, `MeterBandDSCPRemark`, `MeterBandExperimenter`, `encode_meter_bands`, `read_meter_bands`, `MeterConfigRequest`, `MeterConfig`, `MeterFeatures`, `MeterStatsRequest`, `MeterStats`, `MeterBandStats` |
| `ofwire.queue`       | `PacketQueue`, `QueuePropMinRate`, `QueuePropMaxRate`, `QueuePropExperimenter`, `encode_queue_props`, `read_queue_props`, `QueueStatsRequest`, `QueueStats`, `QueueGetConfigRequest`, `QueueGetConfigReply` |
| `ofwire.instruction` | `InstructionGotoTable`, `InstructionWriteMetadata`, `InstructionClearActions`, `InstructionMeter`, `encode_instructions`, `read_instructions`, `InstructionType` |
| `ofwire.group`       | `GroupStatsRequest`, `GroupStats`, `BucketCounter`, `GroupFeatures`, `GroupCommand`, `GroupType`, `Group`, `GroupCapability` |

## Usage

Encode a match on the input port and read it back:

```python
from ofwire.match import Match, MatchType, XM, XMClass, XMType, XMValue

match = Match(MatchType.XM, [
    XM(XMClass.OPENFLOW_BASIC, XMType.IN_PORT, XMValue(b"\x00\x00\x00\x03")),
])
data = match.encode()          # 16 bytes, padded to a multiple of eight
assert Match.decode(data) == match
assert match.field(XMType.IN_PORT).value.uint32() == 3
```

An `XM` with a non-empty `mask` sets the mask bit in the field byte; on
decoding, the payload is split evenly between value and mask.

Decode a switch features reply:

```python
from ofwire.switch import SwitchFeatures

features = SwitchFeatures.decode(payload)
print(features.datapath_id, features.num_tables, features.capabilities)
```

Build a multipart request for the statistics of all ports:

```python
from ofwire.multipart import MultipartType, new_multipart_request
from ofwire.port import PortNo, PortStatsRequest

request = new_multipart_request(
    MultipartType.PORT_STATS, PortStatsRequest(PortNo.ANY)
)
body = request.encode()
```

`new_multipart_request` takes `None`, raw bytes, or any object with an
`encode()` method as the body. A decoded `MultipartRequest` keeps the
rest of the bytes as its `body`.

Read a list of meter bands from a `Reader`:

```python
from ofwire.meter import MeterBandDrop, encode_meter_bands, read_meter_bands
from ofwire.wire import Reader

data = encode_meter_bands([MeterBandDrop(rate=100, burst_size=150)])
bands = read_meter_bands(Reader(data))
```

`read_ports`, `read_queue_props`, `read_instructions` and
`read_hello_elems` work the same way: they read elements until the
reader is exhausted.

Port features, configuration and state render as text with `str()`, for
example `str(PortFeature.RATE_1GB_HD | PortFeature.COPPER)` gives
`"1 Gbps half-duplex copper"`, and `str(PortConfig(0))` gives `"up"`.

## Errors

Truncated input raises `ofwire.wire.DecodeError`, a subclass of
`ValueError`. So does an unknown element type inside a list of meter
bands, queue properties, hello elements or instructions. Encoding a
structure whose length field would not fit in its wire field raises
`ValueError`.

## What it does not do

- There are no flow actions. As a result there are no apply-actions or
  write-actions instructions, no group buckets, no group modification or
  group description messages, no packet-out message and no flow
  modification or flow statistics.
- It handles message bodies only: there is no OpenFlow message header, no
  framing of a byte stream into messages, and no connection handling,
  controller or command-line tool.

## Running the tests

```
pip install .[test]
pytest
```