# milighthub

Core logic of a MiLight (LimitlessLED) hub: the value types used across the
hub, the UDP gateway protocols (v5 and v6) that the phone apps speak, a
gateway discovery responder, and a transition engine that fades brightness
and colour over time.

The package has no dependencies outside the standard library.

## Install

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## What is inside

- `milighthub.remote_type` – `RemoteType`, plus `remote_type_from_string`
  (case-insensitive, accepts aliases such as `fut096`, `fut007`, `fut092`,
  `fut098`, `v2_cct`) and `remote_type_to_string`.
- `milighthub.group_state_field` – `GroupStateField` with
  `get_field_by_name`, `get_field_name` and `is_brightness_field`.
- `milighthub.status` – `MiLightStatus`, `CommandName` and `parse_status`.
- `milighthub.bulb_id` – `BulbId` (device id, group id, remote type) with
  `compact_id`, `hex_device_id`, `to_dict` and `to_list`.
- `milighthub.int_parsing` – `str_to_hex`, `parse_int`, `hex_str_to_bytes`,
  `bytes_to_hex_str` and `convert_unique`.
- `milighthub.units` – `rescale`, `mireds_to_white_val` and
  `white_val_to_mireds`.
- `milighthub.rf24` – `RF24Channel` and `RF24PowerLevel` with name lookups
  and defaults.
- `milighthub.parsed_color` – `ParsedColor`, built by
  `parsed_color_from_rgb` or by `parsed_color_from_json` from a
  `{"r": …, "g": …, "b": …}` dict, a `#RRGGBB` string or an `"r,g,b"`
  string (other values raise `ValueError`).
- `milighthub.transition` – the `Transition` and `TransitionBuilder` bases,
  `calculate_period` and `step_value`.
- `milighthub.field_transition`, `milighthub.color_transition`,
  `milighthub.change_field_transition` – the concrete transitions and their
  builders.
- `milighthub.transition_controller` – `TransitionController`, which creates
  and runs transitions and passes their changes to listeners.
- `milighthub.udp_server` – `MiLightUdpServer`, the base of the UDP servers.
- `milighthub.v5_server` – `V5MiLightUdpServer` and `V5Command`.
- `milighthub.v6_handlers` – per-remote-type v6 command handlers and
  `V6CommandDemuxer`.
- `milighthub.v6_server` – `V6MiLightUdpServer`, with session handling.
- `milighthub.udp_factory` – `udp_server_from_version`.
- `milighthub.discovery_server` – `MiLightDiscoveryServer`, `GatewayConfig`
  and `discovery_responses`.

## Transitions

```python
from milighthub.bulb_id import BulbId
from milighthub.group_state_field import GroupStateField
from milighthub.remote_type import RemoteType
from milighthub.transition_controller import TransitionController

controller = TransitionController()
controller.add_listener(lambda bulb, field, value: print(bulb, field, value))

bulb = BulbId(0x1234, 1, RemoteType.RGB_CCT)
builder = controller.build_field_transition(bulb, GroupStateField.LEVEL, 0, 100)
builder.set_duration(5)          # seconds
controller.add_transition(builder.build())

# call periodically with the current time in milliseconds
controller.loop(now=1000)
```

Each listener receives the bulb, the field being changed and the new value.
`build_status_transition` fades a group on (switching it on first, then
raising the level to 100) or off (lowering the level to 0, then switching
it off). Finished transitions are dropped by `loop`; `transitions`,
`get_transition` and `delete_transition` give access to the active ones.

## UDP gateway servers

```python
from milighthub.udp_factory import udp_server_from_version

server = udp_server_from_version(6, client, 5987, 0x1234)
with server:
    while True:
        server.handle_client()
```

`client` is any object offering the light-control methods the servers call
(`prepare`, `update_status`, `update_brightness`, `update_color_raw`,
`set_held`, …). Protocol version 0 or 5 gives the v5 server, 6 gives the
v6 server, and any other version raises `ValueError`.

`V6MiLightUdpServer.handle_packet` also returns the replies it sent, which
makes it usable without a socket.

## Discovery

```python
from milighthub.discovery_server import GatewayConfig, MiLightDiscoveryServer

gateways = [GatewayConfig(device_id=0x1234, port=5987, protocol_version=6)]
with MiLightDiscoveryServer(48899, gateways) as discovery:
    while True:
        discovery.handle_client()
```

The server answers `Link_Wi-Fi` searches with the version 5 gateways and
`HF-A11ASSISTHREAD` searches with the version 6 gateways.

## What this package does not do

It does not talk to the 2.4 GHz radio, encode radio packets, keep group
state, store settings, or offer an HTTP, WebSocket or MQTT interface, and it
has no command to run. The UDP servers only translate protocol packets into
calls on the `client` object you supply; sending anything to the lights is
up to that object.