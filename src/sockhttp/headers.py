from typing import Iterable, Iterator, Mapping


class Headers:
    """Ordered header multimap with case-insensitive names.

    The first spelling seen for a name is the one written to the wire.
    """

    def __init__(self, headers: "Headers | Mapping[str, str] | Iterable[tuple[str, str]] | None" = None) -> None:
        self._names: dict[str, str] = {}
        self._values: dict[str, list[str]] = {}

        if headers is None:
            return
        if isinstance(headers, Headers):
            for name, values in headers.items():
                for value in values:
                    self.add(name, value)
            return
        if isinstance(headers, Mapping):
            headers = headers.items()
        for name, value in headers:
            self.add(name, value)

    def add(self, name: str, value: str) -> None:
        key = name.lower()
        if key not in self._names:
            self._names[key] = name
            self._values[key] = []
        self._values[key].append(str(value))

    def set(self, name: str, value: str) -> None:
        self.remove(name)
        self.add(name, value)

    def remove(self, name: str) -> None:
        key = name.lower()
        self._names.pop(key, None)
        self._values.pop(key, None)

    def get(self, name: str, default: str | None = None) -> str | None:
        values = self._values.get(name.lower())
        if not values:
            return default
        return values[0]

    def get_all(self, name: str) -> list[str]:
        return list(self._values.get(name.lower(), []))

    def get_line(self, name: str) -> str:
        return ", ".join(self._values.get(name.lower(), []))

    def items(self) -> list[tuple[str, list[str]]]:
        return [(self._names[key], list(values)) for key, values in self._values.items()]

    def copy(self) -> "Headers":
        return Headers(self)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"Headers({self.items()!r})"
