"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(route_files=("conf/routes",), detect_changes=True)
    """

    # Route definition files, loaded in order by Router.from_config()
    route_files: tuple[str | Path, ...] = ()

    # Development mode: re-check route_files for changes before each dispatch
    detect_changes: bool = False

    # Honour ?x-http-method-override=VERB in the query string
    method_override: bool = True

    # Retry unmatched HEAD requests as GET
    head_fallback: bool = True
