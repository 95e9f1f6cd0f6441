"""smaps parsing: headers, detail blocks, VM flags, and whole reports.

Re-exports public symbols so callers can write::

    from py_smaps.maps import SMap, from_pid
"""

from py_smaps.maps.errors import HeaderError, SmapsError, SourceError, ValueFormatError
from py_smaps.maps.mapping import Device, Mapping, parse_mapping
from py_smaps.maps.permissions import Permissions
from py_smaps.maps.reader import from_path, from_pid, from_str, parse_smaps, read_report
from py_smaps.maps.smap import SMap, parse_details
from py_smaps.maps.summary import Rollup, rollup
from py_smaps.maps.vmflags import VmFlag, VmFlags

__all__ = [
    "Device",
    "HeaderError",
    "Mapping",
    "Permissions",
    "Rollup",
    "SMap",
    "SmapsError",
    "SourceError",
    "ValueFormatError",
    "VmFlag",
    "VmFlags",
    "from_path",
    "from_pid",
    "from_str",
    "parse_details",
    "parse_mapping",
    "parse_smaps",
    "read_report",
    "rollup",
]
