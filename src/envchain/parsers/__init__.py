from .base import EnvironmentParser
from .dotenv import DotEnvParser
from .json_file import JsonParser
from .properties_file import PropertiesParser
from .python_config import PythonConfigParser
from .registry import ParserRegistry, default_parsers
from .yaml_file import YamlParser

__all__ = [
    "EnvironmentParser",
    "DotEnvParser",
    "JsonParser",
    "PropertiesParser",
    "PythonConfigParser",
    "YamlParser",
    "ParserRegistry",
    "default_parsers",
]
