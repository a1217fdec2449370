"""Tests for switchyard.routing.route — compile_route, Arg, Route.matches."""

import pytest

from switchyard.errors import RouteFileParsingError
from switchyard.media import MediaType
from switchyard.routing.route import Arg, Route, compile_route, normalize_path, split_host

JSON = MediaType("application", "json")
HTML = MediaType("text", "html")


class TestNormalizePath:
    def test_bare_placeholder(self) -> None:
        assert normalize_path("/users/{id}") == "/users/{<[^/]+>id}"

    def test_constrained_placeholder_untouched(self) -> None:
        assert normalize_path("/users/{<[0-9]+>id}") == "/users/{<[0-9]+>id}"

    def test_quantifier_not_mistaken_for_placeholder(self) -> None:
        assert normalize_path("/codes/{<[0-9]{3}>code}") == "/codes/{<[0-9]{3}>code}"


class TestSplitHost:
    def test_no_host(self) -> None:
        assert split_host("/users") == ("", "/users")

    def test_host(self) -> None:
        assert split_host("{client}.example.com/users") == ("{client}.example.com", "/users")

    def test_no_slash(self) -> None:
        with pytest.raises(RouteFileParsingError):
            split_host("example.com")


class TestCompileRoute:
    def test_args_in_template_order(self) -> None:
        compiled = compile_route("GET", "/users/{user_id}/posts/{<[0-9]+>post_id}", "Posts.show")
        assert [a.name for a in compiled.args] == ["user_id", "post_id"]
        assert compiled.args[0].constraint.pattern == "[^/]+"
        assert compiled.args[1].constraint.pattern == "[0-9]+"

    def test_path_pattern_has_named_groups(self) -> None:
        compiled = compile_route("GET", "/users/{id}", "Users.show")
        assert compiled.pattern.pattern == "/users/(?P<id>[^/]+)"

    def test_quantified_constraint(self) -> None:
        compiled = compile_route("GET", "/codes/{<[0-9]{3}>code}", "Codes.show")
        assert compiled.pattern.fullmatch("/codes/123") is not None
        assert compiled.pattern.fullmatch("/codes/12") is None

    def test_host_arg(self) -> None:
        compiled = compile_route("GET", "{client}.example.com/home", "Clients.home")
        assert compiled.host == "{client}.example.com"
        assert compiled.path == "/home"
        assert compiled.host_arg is not None
        assert compiled.host_arg.name == "client"
        assert compiled.host_arg.default_value == "{client}.example.com"
        assert compiled.args[0] is compiled.host_arg
        assert compiled.host_pattern.pattern == r"(.*)\.example\.com"

    def test_literal_host_has_no_arg(self) -> None:
        compiled = compile_route("GET", "api.example.com/users", "Users.list")
        assert compiled.host_arg is None
        assert compiled.args == ()
        assert compiled.host_pattern.fullmatch("api.example.com") is not None
        assert compiled.host_pattern.fullmatch("apixexample.com") is None

    def test_multiple_host_placeholders_rejected(self) -> None:
        with pytest.raises(RouteFileParsingError, match="more than one placeholder"):
            compile_route("GET", "{a}.{b}.example.com/", "X.y")

    def test_action_args(self) -> None:
        compiled = compile_route("*", "/admin/{controller}", "Admin.{controller}")
        assert compiled.action_args == ("controller",)
        match = compiled.action_pattern.fullmatch("admin.Users")
        assert match is not None
        assert match["controller"] == "Users"

    def test_action_dots_are_literal(self) -> None:
        compiled = compile_route("GET", "/", "Home.index")
        assert compiled.action_pattern.fullmatch("HomeXindex") is None
        assert compiled.action_pattern.fullmatch("home.INDEX") is not None

    def test_invalid_constraint(self) -> None:
        with pytest.raises(RouteFileParsingError, match="constraint"):
            compile_route("GET", "/x/{<[0-9>id}", "X.show")

    def test_pure(self) -> None:
        a = compile_route("GET", "/users/{id}", "Users.show")
        b = compile_route("GET", "/users/{id}", "Users.show")
        assert a == b


class TestArg:
    def test_accepts_full_match_only(self) -> None:
        arg = compile_route("GET", "/{<[0-9]+>id}", "X.y").args[0]
        assert arg.accepts("42")
        assert not arg.accepts("42a")

    def test_path_arg_is_not_from_host(self) -> None:
        arg = compile_route("GET", "/{id}", "X.y").args[0]
        assert arg.from_host is False
        assert arg.optional is False

    def test_frozen(self) -> None:
        arg = compile_route("GET", "/{id}", "X.y").args[0]
        assert isinstance(arg, Arg)
        with pytest.raises(AttributeError):
            arg.name = "other"  # type: ignore[misc]


class TestRoute:
    def test_method_upper_cased(self) -> None:
        assert Route("get", "/", "Home.index").method == "GET"

    def test_host_split_from_path(self) -> None:
        route = Route("GET", "api.example.com/users", "Users.list")
        assert route.host == "api.example.com"
        assert route.path == "/users"

    def test_str(self) -> None:
        assert str(Route("GET", "/users/{id}", "Users.show")) == "GET /users/{id} -> Users.show"

    def test_fixed_length_string(self) -> None:
        line = Route("GET", "/users", "Users.list", formats=(JSON,)).to_fixed_length_string()
        assert line.startswith("GET     /users")
        assert line.rstrip().endswith("application/json")

    def test_static_format_becomes_format(self) -> None:
        route = Route("GET", "/feed", "Feed.show", static_args={"format": "json"})
        assert route.formats == (JSON,)

    def test_frozen(self) -> None:
        route = Route("GET", "/", "Home.index")
        with pytest.raises(AttributeError):
            route.path = "/other"  # type: ignore[misc]


class TestRouteMatchesMethod:
    def test_exact(self) -> None:
        assert Route("GET", "/users", "Users.list").matches("GET", "/users") == {}

    def test_case_insensitive(self) -> None:
        assert Route("GET", "/users", "Users.list").matches("get", "/users") == {}

    def test_other_method(self) -> None:
        assert Route("GET", "/users", "Users.list").matches("POST", "/users") is None

    def test_wildcard(self) -> None:
        assert Route("*", "/users", "Users.any").matches("DELETE", "/users") == {}

    def test_head_matches_get(self) -> None:
        assert Route("GET", "/users", "Users.list").matches("HEAD", "/users") == {}

    def test_head_does_not_match_post(self) -> None:
        assert Route("POST", "/users", "Users.create").matches("HEAD", "/users") is None


class TestRouteMatchesPath:
    def test_captures(self) -> None:
        route = Route("GET", "/users/{id}", "Users.show")
        assert route.matches("GET", "/users/42") == {"id": "42"}

    def test_full_match_only(self) -> None:
        route = Route("GET", "/users/{id}", "Users.show")
        assert route.matches("GET", "/users/42/edit") is None
        assert route.matches("GET", "/users") is None

    def test_constraint(self) -> None:
        route = Route("GET", "/users/{<[0-9]+>id}", "Users.show")
        assert route.matches("GET", "/users/abc") is None

    def test_optional_trailing_slash(self) -> None:
        route = Route("GET", "/users/?", "Users.list")
        assert route.matches("GET", "/users") == {}
        assert route.matches("GET", "/users/") == {}

    def test_static_args_win(self) -> None:
        route = Route("GET", "/items/{format}", "Items.list", static_args={"format": "json"})
        assert route.matches("GET", "/items/xml") == {"format": "json"}


class TestRouteMatchesFormat:
    def test_declared_format(self) -> None:
        route = Route("GET", "/feed", "Feed.show", formats=(JSON,))
        assert route.matches("GET", "/feed", JSON) == {}
        assert route.matches("GET", "/feed", HTML) is None

    def test_no_requested_format(self) -> None:
        route = Route("GET", "/feed", "Feed.show", formats=(JSON,))
        assert route.matches("GET", "/feed", None) == {}

    def test_wildcard_request(self) -> None:
        route = Route("GET", "/feed", "Feed.show", formats=(JSON,))
        assert route.matches("GET", "/feed", MediaType("*", "*")) == {}

    def test_no_declared_formats(self) -> None:
        route = Route("GET", "/feed", "Feed.show")
        assert route.matches("GET", "/feed", HTML) == {}


class TestRouteMatchesHost:
    def test_host_arg_extracted(self) -> None:
        route = Route("GET", "{client}.example.com/home", "Clients.home")
        assert route.matches("GET", "/home", host="acme.example.com") == {"client": "acme"}

    def test_host_mismatch(self) -> None:
        route = Route("GET", "{client}.example.com/home", "Clients.home")
        assert route.matches("GET", "/home", host="acme.other.org") is None

    def test_no_host_supplied(self) -> None:
        route = Route("GET", "{client}.example.com/home", "Clients.home")
        assert route.matches("GET", "/home") == {}

    def test_host_agnostic_route(self) -> None:
        route = Route("GET", "/home", "Home.index")
        assert route.matches("GET", "/home", host="anything.test") == {}
