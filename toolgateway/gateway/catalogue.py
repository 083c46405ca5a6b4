"""
Static tool catalogue built once from the enabled vendor plugins.

Both protocol surfaces render their tool lists from ToolCatalogue.payload(), so the streaming
tools/list answer and GET /tools cannot drift apart.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from toolgateway.errors import ConfigError
from toolgateway.gateway.plugin import ToolSpec, VendorPlugin
from toolgateway.models.schemas import ToolDescriptor


@dataclass(frozen=True)
class CatalogueEntry:
    descriptor: ToolDescriptor
    vendor: str
    spec: ToolSpec

    @property
    def name(self) -> str:
        return self.descriptor.name


class ToolCatalogue:
    """Immutable, ordered list of tools"""

    def __init__(self, entries: Iterable[CatalogueEntry]):
        self._entries: Tuple[CatalogueEntry, ...] = tuple(entries)
        self._by_name: Dict[str, CatalogueEntry] = {}
        for entry in self._entries:
            if entry.name in self._by_name:
                raise ConfigError(f"duplicate tool name '{entry.name}' in catalogue")
            self._by_name[entry.name] = entry

    @classmethod
    def from_plugins(cls, plugins: Sequence[VendorPlugin]) -> "ToolCatalogue":
        # Tool names are only unique within a vendor, so prefix them when serving several
        qualify = len(plugins) > 1
        entries = []
        for plugin in plugins:
            for spec in plugin.tools:
                name = f"{plugin.name}_{spec.name}" if qualify else spec.name
                entries.append(CatalogueEntry(spec.descriptor(name), plugin.name, spec))
        return cls(entries)

    def list(self) -> List[ToolDescriptor]:
        return [entry.descriptor for entry in self._entries]

    def entries(self) -> List[CatalogueEntry]:
        return list(self._entries)

    def find(self, name: str) -> Optional[CatalogueEntry]:
        return self._by_name.get(name)

    def categories(self) -> List[str]:
        return list(dict.fromkeys(entry.vendor for entry in self._entries))

    def payload(self, categories: Optional[Iterable[str]] = None) -> List[Dict[str, Any]]:
        """JSON-ready descriptors, optionally filtered by vendor"""
        wanted = set(categories) if categories else None
        return [
            entry.descriptor.to_payload()
            for entry in self._entries
            if wanted is None or entry.vendor in wanted
        ]

    def __len__(self) -> int:
        return len(self._entries)
