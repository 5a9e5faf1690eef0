"""Resolve ``assessor.adapter`` config values to adapter instances.

A value is either a builtin provider name ("openai", "anthropic") or a
dotted path to a custom BaseAdapter subclass ("my.module.MyAdapter").
"""

from __future__ import annotations

import importlib

from imgscore.adapters.base import BaseAdapter

# Provider name -> (dotted class path, optional dependency extra)
BUILTIN_ADAPTERS: dict[str, tuple[str, str]] = {
    "openai": ("imgscore.adapters.openai_adapter.OpenAIAdapter", "openai"),
    "anthropic": ("imgscore.adapters.anthropic_adapter.AnthropicAdapter", "anthropic"),
}


def _dotted_path(name: str) -> str:
    if name in BUILTIN_ADAPTERS:
        return BUILTIN_ADAPTERS[name][0]
    if "." in name:
        return name
    available = ", ".join(sorted(BUILTIN_ADAPTERS))
    raise ValueError(
        f"Unknown adapter '{name}'. Available builtin adapters: {available}. "
        f"Custom adapters need a dotted path such as 'my.module.MyAdapter'."
    )


def get_adapter(name: str) -> BaseAdapter:
    """Instantiate the adapter configured as ``name``.

    Raises:
        ValueError: Unknown builtin name or malformed dotted path.
        ImportError: The module (or a builtin's provider SDK) is missing.
        TypeError: The resolved object is not a BaseAdapter subclass.
    """
    dotted_path = _dotted_path(name)
    module_path, _, class_name = dotted_path.rpartition(".")
    if not module_path or not class_name:
        raise ValueError(f"Invalid adapter path '{dotted_path}'")

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        if name in BUILTIN_ADAPTERS:
            extra = BUILTIN_ADAPTERS[name][1]
            raise ImportError(
                f"The '{name}' adapter needs its provider SDK: "
                f"pip install imgscore[{extra}]"
            ) from exc
        raise

    cls = getattr(module, class_name, None)
    if cls is None:
        raise ImportError(f"Module '{module_path}' has no attribute '{class_name}'")
    if not (isinstance(cls, type) and issubclass(cls, BaseAdapter)):
        raise TypeError(f"'{dotted_path}' is not a subclass of BaseAdapter")
    return cls()
