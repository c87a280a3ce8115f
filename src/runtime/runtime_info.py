import importlib.util


class RuntimeInfo:
    """Probes for optional audio backends"""

    @classmethod
    def has_sounddevice(cls) -> bool:
        return cls.has_module("sounddevice") and cls.has_module("numpy")

    @classmethod
    def has_module(cls, module_name: str) -> bool:
        try:
            return importlib.util.find_spec(module_name) is not None
        except (ImportError, ValueError):
            return False
