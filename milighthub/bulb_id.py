"""Identity of a bulb group: remote id, group number and remote type."""

from __future__ import annotations

from dataclasses import dataclass

from milighthub.group_state_field import GroupStateField, get_field_name
from milighthub.remote_type import RemoteType, remote_type_to_string


@dataclass(frozen=True)
class BulbId:
    """A bulb group addressed by remote id, group id and remote type."""

    device_id: int = 0
    group_id: int = 0
    device_type: RemoteType = RemoteType.UNKNOWN

    def compact_id(self) -> int:
        """Pack the identity into a single 32-bit integer."""
        packed = (self.device_id << 24) | (int(self.device_type) << 8) | self.group_id
        return packed & 0xFFFFFFFF

    def hex_device_id(self) -> str:
        """Return the device id as upper-case hex with a ``0x`` prefix."""
        return f"0x{self.device_id:X}"

    def to_dict(self) -> dict:
        """Serialise as a JSON object."""
        return {
            get_field_name(GroupStateField.DEVICE_ID): self.device_id,
            get_field_name(GroupStateField.GROUP_ID): self.group_id,
            get_field_name(GroupStateField.DEVICE_TYPE): remote_type_to_string(self.device_type),
        }

    def to_list(self) -> list:
        """Serialise as a JSON array: device id, type name, group id."""
        return [self.device_id, remote_type_to_string(self.device_type), self.group_id]