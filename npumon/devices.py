"""PCI device discovery — find the Intel NPU and its counter file."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

# ---- config ----
SYSFS_PCI_ROOT = Path("/sys/bus/pci/devices")
PCI_IDS_PATHS = (
    Path("/usr/share/hwdata/pci.ids"),
    Path("/usr/share/misc/pci.ids"),
    Path("/usr/share/pci.ids"),
)
INTEL_VENDOR_NAME = "Intel Corporation"
NPU_DRIVER = "intel_vpu"
COUNTER_FILE = "power/runtime_active_time"

_ADDRESS_RE = re.compile(
    r"^(?P<domain>[0-9a-f]{4}):(?P<bus>[0-9a-f]{2}):(?P<slot>[0-9a-f]{2})\.(?P<function>[0-7])$"
)


class DeviceNotFoundError(RuntimeError):
    pass


@dataclass(frozen=True)
class PciDevice:
    domain: int
    bus: int
    slot: int
    function: int
    vendor_id: int
    device_id: int
    vendor_name: str = ""
    product_name: str = ""
    driver: str = ""

    # Names for when pci.ids is missing or older than the hardware.
    _KNOWN_NAMES: ClassVar[dict[tuple[int, int], tuple[str, str]]] = {
        (0x8086, 0x7D1D): (INTEL_VENDOR_NAME, "Meteor Lake NPU"),
        (0x8086, 0xAD1D): (INTEL_VENDOR_NAME, "Arrow Lake NPU"),
        (0x8086, 0x643E): (INTEL_VENDOR_NAME, "Lunar Lake NPU"),
        (0x8086, 0xB03E): (INTEL_VENDOR_NAME, "Panther Lake NPU"),
    }

    @property
    def address(self) -> str:
        return f"{self.domain:04x}:{self.bus:02x}:{self.slot:02x}.{self.function}"

    @property
    def display_name(self) -> str:
        return self.product_name or f"PCI {self.vendor_id:04x}:{self.device_id:04x}"

    @classmethod
    def known_names(cls, vendor_id: int, device_id: int) -> tuple[str, str] | None:
        return cls._KNOWN_NAMES.get((vendor_id, device_id))


# ---- pci.ids ----

def load_pci_ids(paths=PCI_IDS_PATHS) -> dict[tuple[int, int | None], str]:
    """Parse the first readable pci.ids database.

    Returns {(vendor, None): vendor_name, (vendor, device): device_name}.
    Only vendor and device lines are kept; subsystems and classes are skipped.
    """
    for path in paths:
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError:
            continue
        return parse_pci_ids(text)
    return {}


def parse_pci_ids(text: str) -> dict[tuple[int, int | None], str]:
    names: dict[tuple[int, int | None], str] = {}
    vendor = None
    for line in text.splitlines():
        if not line or line.startswith("#"):
            continue
        if line.startswith("C "):
            # Class list runs to the end of the file.
            break
        if line.startswith("\t\t"):
            continue
        if line.startswith("\t"):
            if vendor is None:
                continue
            ident, _, name = line.strip().partition(" ")
            try:
                names[(vendor, int(ident, 16))] = name.strip()
            except ValueError:
                pass
            continue
        ident, _, name = line.partition(" ")
        try:
            vendor = int(ident, 16)
        except ValueError:
            vendor = None
            continue
        names[(vendor, None)] = name.strip()
    return names


# ---- sysfs ----

def _read_hex(path: Path) -> int | None:
    try:
        return int(path.read_text().strip(), 16)
    except (OSError, ValueError):
        return None


def enumerate_pci(root: Path = SYSFS_PCI_ROOT,
                  pci_ids: dict[tuple[int, int | None], str] | None = None) -> list[PciDevice]:
    """List PCI functions under ``root`` with vendor and product names."""
    root = Path(root)
    if pci_ids is None:
        pci_ids = load_pci_ids()
    try:
        entries = sorted(root.iterdir())
    except OSError as exc:
        raise DeviceNotFoundError(f"Cannot list PCI devices under {root}: {exc}") from exc

    devices = []
    for entry in entries:
        m = _ADDRESS_RE.match(entry.name)
        if not m:
            continue
        vendor_id = _read_hex(entry / "vendor")
        device_id = _read_hex(entry / "device")
        if vendor_id is None or device_id is None:
            continue

        vendor_name = pci_ids.get((vendor_id, None), "")
        product_name = pci_ids.get((vendor_id, device_id), "")
        known = PciDevice.known_names(vendor_id, device_id)
        if known and not product_name:
            vendor_name = vendor_name or known[0]
            product_name = known[1]

        driver_link = entry / "driver"
        driver = driver_link.resolve().name if driver_link.is_symlink() else ""

        devices.append(PciDevice(
            domain=int(m["domain"], 16),
            bus=int(m["bus"], 16),
            slot=int(m["slot"], 16),
            function=int(m["function"]),
            vendor_id=vendor_id,
            device_id=device_id,
            vendor_name=vendor_name,
            product_name=product_name,
            driver=driver,
        ))
    return devices


def find_npu(devices: list[PciDevice]) -> PciDevice | None:
    for device in devices:
        if device.vendor_name == INTEL_VENDOR_NAME and "NPU" in device.product_name:
            return device
        if device.driver == NPU_DRIVER:
            return device
    return None


def sysfs_path(bus: int, slot: int, function: int) -> str:
    return f"/sys/devices/pci0000:00/0000:{bus:02x}:{slot:02x}.{function}"


def counter_path(device: PciDevice) -> str:
    return f"{sysfs_path(device.bus, device.slot, device.function)}/{COUNTER_FILE}"


def resolve_npu(root: Path = SYSFS_PCI_ROOT) -> tuple[PciDevice, str]:
    """Return the NPU and the path of its active-time counter."""
    device = find_npu(enumerate_pci(root))
    if device is None:
        raise DeviceNotFoundError("Cannot get any NPU device.")
    return device, counter_path(device)
