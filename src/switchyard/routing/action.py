"""ActionDefinition — the result of reverse resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from switchyard.errors import ConfigurationError
from switchyard.http.request import RequestContext

if TYPE_CHECKING:
    from switchyard.routing.router import Router


@dataclass(slots=True)
class ActionDefinition:
    """A concrete URL for an action invocation.

    ``args`` is a copy of what the caller passed to ``reverse()``, so
    ``add()`` and ``remove()`` re-resolve against the caller's intent
    rather than against values derived during resolution::

        url = router.reverse("Users.list", {}).add("page", 2)
        str(url)  # "/users?page=2"
    """

    method: str
    url: str
    action: str
    args: dict[str, Any]
    host: str = ""
    star: bool = False
    router: Router | None = field(default=None, repr=False, compare=False)
    context: RequestContext | None = field(default=None, repr=False, compare=False)

    def _reresolve(self) -> ActionDefinition:
        if self.router is None:
            msg = "ActionDefinition is not bound to a router"
            raise ConfigurationError(msg)
        return self.router.reverse(self.action, self.args, context=self.context)

    def add(self, key: str, value: Any) -> ActionDefinition:
        """Add or replace an argument and resolve again."""
        self.args[key] = value
        return self._reresolve()

    def remove(self, key: str) -> ActionDefinition:
        """Drop an argument and resolve again."""
        self.args.pop(key, None)
        return self._reresolve()

    def add_ref(self, fragment: str) -> ActionDefinition:
        """Append a ``#fragment`` to the URL."""
        self.url += "#" + fragment
        return self

    def absolute(self, context: RequestContext | None = None) -> ActionDefinition:
        """Make the URL absolute.

        Uses the route's own host when it has one, otherwise the base
        URL of the current request.
        """
        context = context or self.context
        if self.url.startswith("http"):
            return self
        if self.host:
            secure = context.secure if context is not None else False
            self.url = ("https://" if secure else "http://") + self.host + self.url
            return self
        if context is None or not context.base:
            msg = f"Cannot make {self.url!r} absolute without a request base URL"
            raise ConfigurationError(msg)
        self.url = context.base + self.url
        return self

    def secure(self, context: RequestContext | None = None) -> ActionDefinition:
        """Make the URL absolute and force ``https``."""
        if "http://" not in self.url and "https://" not in self.url:
            self.absolute(context)
        if self.url.startswith("http:"):
            self.url = "https:" + self.url[len("http:") :]
        return self

    def __str__(self) -> str:
        return self.url
