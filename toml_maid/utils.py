from typing import Mapping, TypedDict, TypeVar

Options = TypeVar("Options", bound=TypedDict("Options", {}))


def resolve_config(config: Mapping | None, default_config: Options) -> Options:
    """Overlay the known keys of ``config`` on a copy of ``default_config``.

    Keys missing from the defaults are ignored.
    """
    resolved = default_config.copy()
    for key, value in (config or {}).items():
        if key in resolved:
            resolved[key] = value
    return resolved
