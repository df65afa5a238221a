__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .loader import BACKENDS, MimicConfig, load_config_from_path

__all__ = ["BACKENDS", "MimicConfig", "load_config_from_path"]
