"""Route templates and their compiled matching state.

A route template is a path such as ``/users/{id}`` or
``/users/{<[0-9]+>id}``, optionally prefixed with a host template
(``{client}.example.com/users``). ``compile_route`` turns it into a
``CompiledRoute``: a path pattern with one named group per argument,
a host pattern, and an action pattern for reverse lookups.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from switchyard.errors import RouteFileParsingError
from switchyard.media import MediaType, find_format, format_list

logger = logging.getLogger("switchyard.routing")

# Bare placeholder: {id}
_BARE_ARG = re.compile(r"\{([a-zA-Z_][a-zA-Z_0-9]*)\}")
# Constrained placeholder: {<[0-9]+>id}
_CONSTRAINED_ARG = re.compile(r"\{<([^>]+)>([a-zA-Z_0-9]+)\}")
# Any host placeholder region, including regex ones like {(.*)}
_HOST_PLACEHOLDER = re.compile(r"\{[^}]*\}")

DEFAULT_PATH_CONSTRAINT = "[^/]+"
ANY = re.compile(".*")


@dataclass(frozen=True, slots=True)
class Arg:
    """A named template variable and the pattern its value must satisfy.

    ``default_value`` is only set on the synthetic host argument, where
    it holds the raw host template. Path arguments never have one.
    """

    name: str
    constraint: re.Pattern[str]
    default_value: str | None = None
    optional: bool = False

    @property
    def from_host(self) -> bool:
        return self.default_value is not None

    def accepts(self, value: str) -> bool:
        """True if *value* satisfies the whole constraint."""
        return self.constraint.fullmatch(value) is not None


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """Everything ``compile_route`` derives from a template. Never mutated."""

    path: str
    host: str
    pattern: re.Pattern[str]
    host_pattern: re.Pattern[str]
    action_pattern: re.Pattern[str]
    args: tuple[Arg, ...]
    action_args: tuple[str, ...]
    host_arg: Arg | None = None


def _compile(pattern: str, flags: int = 0, *, what: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        msg = f"Invalid {what} pattern {pattern!r}: {exc}"
        raise RouteFileParsingError(msg) from exc


def split_host(path: str) -> tuple[str, str]:
    """Split ``"{client}.example.com/users"`` into host and path parts.

    Paths starting with ``/`` have no host part.
    """
    if path.startswith("/"):
        return "", path
    slash = path.find("/")
    if slash == -1:
        msg = f"Route path {path!r} has no '/' separating host and path"
        raise RouteFileParsingError(msg)
    return path[:slash], path[slash:]


def _compile_host(host: str) -> tuple[re.Pattern[str], Arg | None]:
    if not host:
        return ANY, None

    placeholders = _HOST_PLACEHOLDER.findall(host)
    if len(placeholders) > 1:
        msg = f"Host template {host!r} has more than one placeholder"
        raise RouteFileParsingError(msg)

    pattern = _HOST_PLACEHOLDER.sub("(.*)", host.replace(".", r"\."))
    logger.debug("host [%s] pattern [%s]", host, pattern)
    host_pattern = _compile(pattern, what="host")

    if not placeholders:
        return host_pattern, None

    name = placeholders[0].replace("{", "").replace("}", "")
    host_arg = Arg(name=name, constraint=ANY, default_value=host)
    logger.debug("adding host arg [%s]", name)
    return host_pattern, host_arg


def normalize_path(path: str) -> str:
    """Rewrite every bare ``{name}`` to ``{<[^/]+>name}``."""
    return _BARE_ARG.sub(lambda m: "{<" + DEFAULT_PATH_CONSTRAINT + ">" + m[1] + "}", path)


def compile_route(method: str, path: str, action: str, *, host: str = "") -> CompiledRoute:
    """Compile a route template. Pure: same input, same output.

    When *host* is empty and *path* does not start with ``/``, the text
    before the first ``/`` is taken as the host template.

    Raises ``RouteFileParsingError`` on an invalid constraint or action
    pattern.
    """
    if not host:
        host, path = split_host(path)

    host_pattern, host_arg = _compile_host(host)
    args: list[Arg] = [host_arg] if host_arg is not None else []

    normalized = normalize_path(path)
    for m in _CONSTRAINED_ARG.finditer(normalized):
        args.append(Arg(name=m[2], constraint=_compile(m[1], what=f"constraint for {m[2]!r}")))

    pattern = _compile(
        _CONSTRAINED_ARG.sub(lambda m: f"(?P<{m[2]}>{m[1]})", normalized),
        what="path",
    )

    action_source = action.replace(".", "[.]")
    action_args: list[str] = []
    for arg in args:
        token = "{" + arg.name + "}"
        if token in action_source:
            action_source = action_source.replace(token, f"(?P<{arg.name}>{arg.constraint.pattern})")
            action_args.append(arg.name)
    action_pattern = _compile(action_source, re.IGNORECASE, what="action")

    logger.debug("compiled %s %s -> %s as %s", method, path, action, pattern.pattern)
    return CompiledRoute(
        path=path,
        host=host,
        pattern=pattern,
        host_pattern=host_pattern,
        action_pattern=action_pattern,
        args=tuple(args),
        action_args=tuple(action_args),
        host_arg=host_arg,
    )


@dataclass(frozen=True, slots=True)
class Route:
    """One routing rule: ``METHOD [host]/path -> Action``.

    Compiled once at construction. ``path`` and ``host`` hold the split
    templates, so ``Route("GET", "api.example.com/users", "Users.list")``
    ends up with ``host="api.example.com"`` and ``path="/users"``.
    """

    method: str
    path: str
    action: str
    host: str = ""
    static_args: Mapping[str, str] = field(default_factory=dict, hash=False)
    formats: tuple[MediaType, ...] = ()
    source: str | None = None
    line: int | None = None
    compiled: CompiledRoute = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        compiled = compile_route(self.method, self.path, self.action, host=self.host)
        object.__setattr__(self, "host", compiled.host)
        object.__setattr__(self, "path", compiled.path)
        object.__setattr__(self, "static_args", dict(self.static_args))
        formats = tuple(self.formats)
        if not formats and "format" in self.static_args:
            media_type = find_format(self.static_args["format"])
            if media_type is not None:
                formats = (media_type,)
        object.__setattr__(self, "formats", formats)
        object.__setattr__(self, "compiled", compiled)

    @property
    def args(self) -> tuple[Arg, ...]:
        return self.compiled.args

    @property
    def is_wildcard(self) -> bool:
        return self.method == "*"

    def accepts_method(self, method: str | None) -> bool:
        """Exact match, wildcard route, or HEAD against a GET route."""
        if method is None or self.method == "*":
            return True
        method = method.upper()
        return method == self.method or (method == "HEAD" and self.method == "GET")

    def accepts_format(self, format: MediaType | None) -> bool:
        if format is None or not self.formats:
            return True
        return any(format.is_compatible_with(mt) for mt in self.formats)

    def matches(
        self,
        method: str | None,
        path: str,
        format: MediaType | None = None,
        host: str | None = None,
    ) -> dict[str, str] | None:
        """Match a request against this route.

        Returns the extracted arguments merged with the static ones, or
        ``None`` when the route does not apply.
        """
        if not self.accepts_method(method):
            return None

        match = self.compiled.pattern.fullmatch(path)
        if match is None or not self.accepts_format(format):
            return None
        if host is not None and self.compiled.host_pattern.fullmatch(host) is None:
            return None

        result: dict[str, str] = {}
        for arg in self.compiled.args:
            if arg.from_host:
                continue
            value = match.group(arg.name)
            if value is not None:
                result[arg.name] = value

        host_arg = self.compiled.host_arg
        if host_arg is not None and host is not None:
            static_part = _HOST_PLACEHOLDER.sub("", host_arg.default_value or "")
            result[host_arg.name] = host.replace(static_part, "")

        result.update(self.static_args)
        return result

    def action_match(self, action: str) -> re.Match[str] | None:
        """Match an action id against this route's action pattern."""
        return self.compiled.action_pattern.fullmatch(action)

    def to_fixed_length_string(self) -> str:
        return f"{self.method:<8}{self.path:<60}{self.action:<60}{format_list(self.formats):<22}"

    def __str__(self) -> str:
        return f"{self.method} {self.path} -> {self.action}"
