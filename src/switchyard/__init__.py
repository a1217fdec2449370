"""Switchyard — bidirectional HTTP routing.

Maps requests to actions, and actions back to URLs, from one ordered
table of route templates.

Basic usage::

    from switchyard import Router, RoutingRequest

    router = Router()
    router.load(["conf/routes"])

    request = RoutingRequest(method="GET", path="/users/42")
    router.route(request)
    request.action      # "Users.show"
    request.route_args  # {"id": "42"}

    router.reverse("Users.show", {"id": 42}).url  # "/users/42"
"""

__version__ = "0.1.0-dev"
__all__ = [
    "ActionDefinition",
    "Arg",
    "ConfigurationError",
    "HTTPError",
    "MediaType",
    "NoHandlerFound",
    "NoRouteFound",
    "RequestContext",
    "Route",
    "RouteFileParsingError",
    "Router",
    "RouterConfig",
    "RoutingRequest",
    "SwitchyardError",
    "compile_route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from switchyard.routing.router import Router

        return Router

    if name in ("Arg", "Route", "compile_route"):
        from switchyard.routing import route as _route

        return getattr(_route, name)

    if name == "ActionDefinition":
        from switchyard.routing.action import ActionDefinition

        return ActionDefinition

    if name == "RouterConfig":
        from switchyard.config import RouterConfig

        return RouterConfig

    if name in ("RoutingRequest", "RequestContext"):
        from switchyard.http import request as _request

        return getattr(_request, name)

    if name == "MediaType":
        from switchyard.media import MediaType

        return MediaType

    if name in (
        "SwitchyardError",
        "ConfigurationError",
        "HTTPError",
        "NoHandlerFound",
        "NoRouteFound",
        "RouteFileParsingError",
    ):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
