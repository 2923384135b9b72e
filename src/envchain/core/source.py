"""Property sources and the ordered chain they form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Sequence

COMMAND_LINE_SOURCE_NAME = "commandLine"
COMMAND_LINE_ARGS_SOURCE_NAME = "commandLineArgs"
COMMAND_LINE_SOURCE_NAMES = (COMMAND_LINE_SOURCE_NAME, COMMAND_LINE_ARGS_SOURCE_NAME)
SYSTEM_PROPERTIES_SOURCE_NAME = "systemProperties"
SYSTEM_ENVIRONMENT_SOURCE_NAME = "systemEnvironment"
DEFAULT_PROPERTIES_SOURCE_NAME = "defaultProperties"
VERSIONED_SOURCE_NAME = "versioned"

NON_OPTION_ARGS_KEY = "nonOptionArgs"


@dataclass
class PropertySource:
    """A named map of configuration keys to values."""

    name: str
    properties: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str) -> Optional[Any]:
        return self.properties.get(key)

    def contains(self, key: str) -> bool:
        return key in self.properties

    def keys(self) -> List[str]:
        return list(self.properties.keys())


class CommandLinePropertySource(PropertySource):
    """Options of the form ``--key=value`` taken from program arguments."""

    @classmethod
    def from_args(
        cls, args: Sequence[str], name: str = COMMAND_LINE_SOURCE_NAME
    ) -> "CommandLinePropertySource":
        options: Dict[str, List[str]] = {}
        positional: List[str] = []
        for arg in args:
            if not arg.startswith("--") or arg == "--":
                positional.append(arg)
                continue
            body = arg[2:]
            key, _, value = body.partition("=")
            if not key:
                raise ValueError(f"Invalid command line option: {arg!r}")
            options.setdefault(key, []).append(value)

        properties: Dict[str, Any] = {
            key: values[0] if len(values) == 1 else values
            for key, values in options.items()
        }
        if positional:
            properties[NON_OPTION_ARGS_KEY] = positional
        return cls(name, properties)


class SystemEnvironmentPropertySource(PropertySource):
    """Process environment variables with relaxed key matching.

    ``server.port`` resolves ``server.port``, then ``server_port`` and
    ``SERVER_PORT``; dashes are treated like dots.
    """

    def __init__(
        self,
        environ: Mapping[str, str],
        name: str = SYSTEM_ENVIRONMENT_SOURCE_NAME,
    ):
        super().__init__(name, dict(environ))

    def _resolve_key(self, key: str) -> Optional[str]:
        if key in self.properties:
            return key
        underscored = key.replace(".", "_").replace("-", "_")
        for candidate in (underscored, underscored.upper()):
            if candidate in self.properties:
                return candidate
        return None

    def get(self, key: str) -> Optional[Any]:
        resolved = self._resolve_key(key)
        return None if resolved is None else self.properties[resolved]

    def contains(self, key: str) -> bool:
        return self._resolve_key(key) is not None


class PropertySourceOrderRule(Protocol):
    def apply(self, sources: List[PropertySource]) -> List[PropertySource]:
        ...


class PropertySources:
    """Ordered chain of property sources; earlier sources win lookups."""

    def __init__(self, sources: Optional[Iterable[PropertySource]] = None):
        self._sources: List[PropertySource] = []
        for source in sources or ():
            self.add_last(source)

    def __iter__(self) -> Iterator[PropertySource]:
        return iter(list(self._sources))

    def __len__(self) -> int:
        return len(self._sources)

    def names(self) -> List[str]:
        return [source.name for source in self._sources]

    def contains(self, name: str) -> bool:
        return any(source.name == name for source in self._sources)

    def get(self, name: str) -> Optional[PropertySource]:
        for source in self._sources:
            if source.name == name:
                return source
        return None

    def add_first(self, source: PropertySource) -> None:
        self._remove_if_present(source.name)
        self._sources.insert(0, source)

    def add_last(self, source: PropertySource) -> None:
        self._remove_if_present(source.name)
        self._sources.append(source)

    def remove(self, name: str) -> Optional[PropertySource]:
        return self._remove_if_present(name)

    def replace(self, name: str, source: PropertySource) -> None:
        for index, existing in enumerate(self._sources):
            if existing.name == name:
                self._sources[index] = source
                return
        raise KeyError(f"No property source named {name!r}")

    def set_order(self, sources: List[PropertySource]) -> None:
        self._sources = list(sources)

    def reorder(self, rules: Iterable[PropertySourceOrderRule]) -> None:
        ordered = list(self._sources)
        for rule in rules:
            ordered = rule.apply(ordered)
        self._sources = ordered

    def get_property(self, key: str) -> Optional[Any]:
        source = self.find_source(key)
        return None if source is None else source.get(key)

    def find_source(self, key: str) -> Optional[PropertySource]:
        for source in self._sources:
            if source.contains(key):
                return source
        return None

    def _remove_if_present(self, name: str) -> Optional[PropertySource]:
        for index, existing in enumerate(self._sources):
            if existing.name == name:
                return self._sources.pop(index)
        return None
