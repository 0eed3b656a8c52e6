import re
from dataclasses import dataclass
from functools import cached_property

# Matches "{name}" and "{name:regex}" path variables. The regex may contain
# one level of braces, i.e. "{id:[0-9]{3}}".
_VARIABLE_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)(?::((?:[^{}]|\{[^{}]*\})+))?\}")


@dataclass(frozen=True)
class Route:
    verb: str
    path: str

    @cached_property
    def _pattern(self) -> re.Pattern:
        parts: list[str] = []
        position: int = 0
        for match in _VARIABLE_RE.finditer(self.path):
            parts.append(re.escape(self.path[position : match.start()]))
            name, regex = match.group(1), match.group(2) or "[^/]+"
            parts.append(f"(?P<{name}>{regex})")
            position = match.end()
        parts.append(re.escape(self.path[position:]))
        return re.compile("".join(parts))

    def __post_init__(self):
        # Invalid patterns fail here, at registration.
        try:
            self._pattern
        except re.error as e:
            raise ValueError(f"Invalid path pattern {self.path!r}: {e}") from e

    def match(self, path: str) -> dict[str, str] | None:
        """Matches the URL path against the route's path pattern.

        Returns the path variables if the whole path matches, None otherwise.
        """
        match = self._pattern.fullmatch(path)
        if match is None:
            return None
        return match.groupdict()
