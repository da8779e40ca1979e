"""
Configuration Management
========================

This module provides TOML-based configuration file support for the incepta CLI.

Configuration files are searched in the following order (highest to lowest priority):
1. Path specified via --config option
2. ./incepta.toml (current directory)
3. ~/.config/incepta/config.toml (user config)
4. /etc/incepta/config.toml (system config)
5. Built-in defaults

Example configuration file (incepta.toml):

    [paths]
    assets_dir = "./assets"
    models_folder = "DNNModels"
    images_folder = "ImagesForInference"

    [image]
    width = 224
    height = 224
    mean = 117.0
    scale = 1.0
    channels_last = true
    use_alpha = false
    resizing = "iso_crop"

    [inception]
    model_file = "tensorflow_inception_graph.pb"
    input_tensor = "input"
    output_tensor = "softmax2_pre_activation"

    [training]
    l2_regularization = 0.0001
    max_iterations = 1000
    tolerance = 0.0001
    seed = 0

    [classify]
    input_tensor = "input"
    output_tensor = "output"
    labels_file = "imagenet_comp_graph_label_strings.txt"
    threshold = 0.3

    [api]
    timeout = 30
    download_chunk_size = 8192

    [logging]
    level = "WARNING"
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

# Use tomli for Python < 3.11, tomllib for Python >= 3.11
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


DEFAULT_CONFIG: Dict[str, Any] = {
    "paths": {
        "assets_dir": None,  # None = "assets" beside the installed package
        "models_folder": "DNNModels",
        "images_folder": "ImagesForInference",
        "model_output": "imageClassifier.zip",
    },
    "image": {
        "width": 224,
        "height": 224,
        "mean": 117.0,
        "scale": 1.0,
        "channels_last": True,
        "use_alpha": False,
        "convert_to_float": True,
        "resizing": "iso_crop",  # "iso_crop", "iso_pad", "fill"
    },
    "inception": {
        "model_file": "tensorflow_inception_graph.pb",
        "input_tensor": "input",
        "output_tensor": "softmax2_pre_activation",
    },
    "training": {
        "l2_regularization": 1.0e-4,
        "max_iterations": 1000,
        "tolerance": 1.0e-4,
        "seed": 0,
    },
    "classify": {
        "input_tensor": "input",
        "output_tensor": "output",
        "model_file": "tensorflow_inception_graph.pb",
        "labels_file": "imagenet_comp_graph_label_strings.txt",
        "threshold": 0.3,
        "download_url": "https://storage.googleapis.com/download.tensorflow.org/models/inception5h.zip",
    },
    "api": {
        "timeout": 30,
        "download_chunk_size": 8192,
        "max_retries": 3,
    },
    "logging": {
        "level": "WARNING",
    },
}

# Standard config file locations, highest priority first
CONFIG_LOCATIONS = [
    Path("incepta.toml"),
    Path("~/.config/incepta/config.toml").expanduser(),
    Path("/etc/incepta/config.toml"),
]


@dataclass
class Config:
    """
    Configuration container for incepta settings.

    Attributes:
        paths: Assets root and folder names
        image: Image resizing and pixel normalization settings
        inception: Frozen graph file and tensor names used for featurization
        training: Linear classifier hyperparameters
        classify: Standalone classifier settings (labels, threshold, download URL)
        api: HTTP settings used when downloading model archives
        logging: Logging settings
        _source: Path to the config file that was loaded
    """

    paths: Dict[str, Any] = field(default_factory=dict)
    image: Dict[str, Any] = field(default_factory=dict)
    inception: Dict[str, Any] = field(default_factory=dict)
    training: Dict[str, Any] = field(default_factory=dict)
    classify: Dict[str, Any] = field(default_factory=dict)
    api: Dict[str, Any] = field(default_factory=dict)
    logging: Dict[str, Any] = field(default_factory=dict)
    _source: Optional[str] = None

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        section_dict = getattr(self, section, {})
        if section_dict is None:
            return default
        return section_dict.get(key, default)

    def set(self, section: str, key: str, value: Any) -> None:
        """Set a configuration value."""
        section_dict = getattr(self, section, None)
        if section_dict is not None:
            section_dict[key] = value

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "paths": self.paths,
            "image": self.image,
            "inception": self.inception,
            "training": self.training,
            "classify": self.classify,
            "api": self.api,
            "logging": self.logging,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "Config":
        """Create Config from dictionary."""
        return cls(
            paths=data.get("paths", {}),
            image=data.get("image", {}),
            inception=data.get("inception", {}),
            training=data.get("training", {}),
            classify=data.get("classify", {}),
            api=data.get("api", {}),
            logging=data.get("logging", {}),
            _source=source,
        )


def load_toml(filepath: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a TOML configuration file.

    Args:
        filepath: Path to the TOML file

    Returns:
        Dictionary with configuration values

    Raises:
        FileNotFoundError: If file doesn't exist
        tomllib.TOMLDecodeError: If TOML parsing fails
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    with open(path, "rb") as f:
        return tomllib.load(f)


def _format_toml_value(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, list):
        return "[" + ", ".join(_format_toml_value(v) for v in value) + "]"
    return str(value)


def save_toml(config: Dict[str, Any], filepath: Union[str, Path]) -> str:
    """
    Save configuration to a TOML file.

    Keys whose value is None are written as comments, since TOML has no null.

    Args:
        config: Configuration dictionary
        filepath: Path to save the file

    Returns:
        Path to the saved file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    lines = []
    for section, values in config.items():
        if isinstance(values, dict) and values:
            lines.append(f"[{section}]")
            for key, value in values.items():
                if value is None:
                    lines.append(f"# {key} =")
                else:
                    lines.append(f"{key} = {_format_toml_value(value)}")
            lines.append("")

    path.write_text("\n".join(lines), encoding="utf-8")
    return str(path)


def get_default_config() -> Config:
    """Get the default configuration."""
    return Config.from_dict(_deep_copy_dict(DEFAULT_CONFIG))


def create_default_config_file(filepath: Optional[str] = None) -> str:
    """
    Create a default configuration file.

    Args:
        filepath: Path to create the file (default: ./incepta.toml)

    Returns:
        Path to the created file
    """
    if filepath is None:
        filepath = "incepta.toml"

    return save_toml(DEFAULT_CONFIG, filepath)


def _deep_copy_dict(d: Dict[str, Any]) -> Dict[str, Any]:
    """Create a deep copy of a dictionary."""
    result = {}
    for key, value in d.items():
        if isinstance(value, dict):
            result[key] = _deep_copy_dict(value)
        elif isinstance(value, list):
            result[key] = value.copy()
        else:
            result[key] = value
    return result


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two dictionaries, with override taking precedence."""
    result = _deep_copy_dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


# Global configuration instance
_global_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = load_config_cascade()
    return _global_config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration to None (will reload on next access)."""
    global _global_config
    _global_config = None


def get_config_locations() -> List[Path]:
    """
    Get configuration file search locations in priority order.

    Returns:
        List of paths to search, in priority order (highest first)
    """
    return CONFIG_LOCATIONS.copy()


def load_config_cascade(explicit_path: Optional[str] = None) -> Config:
    """
    Load configuration with full cascade support.

    Merges configs from all levels in priority order:
    defaults -> system -> user -> current dir -> explicit

    Args:
        explicit_path: Explicit config file path (highest priority)

    Returns:
        Config object with merged settings from all sources
    """
    config_data = _deep_copy_dict(DEFAULT_CONFIG)
    source = "defaults"

    candidates = list(reversed(get_config_locations()))
    if explicit_path:
        if Path(explicit_path).exists():
            candidates.append(Path(explicit_path))
        else:
            logger.warning(f"Specified config file not found: {explicit_path}")

    for location in candidates:
        if not location.exists():
            continue
        try:
            config_data = _merge_dicts(config_data, load_toml(location))
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Skipping unreadable config {location}: {e}")
            continue
        source = str(location)
        logger.debug(f"Merged configuration from {location}")

    return Config.from_dict(config_data, source=source)
