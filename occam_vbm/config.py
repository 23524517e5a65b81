"""Configuration loading: variable definitions and option settings from YAML"""

import logging
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import yaml

from .definitions import Options, VariableList

logger = logging.getLogger(__name__)

# Default option settings
DEFAULT_OPTIONS = {
    'palpha': 0.0,        # Significance threshold for the power critical value
    'ipf-maxit': 266,     # Maximum IPF iterations
    'ipf-maxdev': 0.25,   # IPF convergence threshold, in counts
}


class OptionsImplementation:
    """Implementation class for Options operations"""

    @staticmethod
    def get_option(options: Options, name: str, default: Any = None) -> Any:
        """Get an option, falling back to default if given and then to the built-in default"""
        if name in options.values:
            return options.values[name]
        if default is not None:
            return default
        return DEFAULT_OPTIONS.get(name)

    @staticmethod
    def get_option_float(options: Options, name: str, default: Optional[float] = None) -> float:
        """Get an option as a float"""
        value = OptionsImplementation.get_option(options, name, default)
        if value is None:
            raise ValueError(f"Option {name} is not set")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Option {name} must be numeric, got {value!r}") from None


def load_config(yaml_path: Union[str, Path]) -> Tuple[VariableList, Options]:
    """Load variable definitions and options from a YAML config file"""
    with open(yaml_path) as f:
        config = yaml.safe_load(f)

    if not config or 'variables' not in config:
        raise ValueError(f"No variables section in {yaml_path}")

    varlist = VariableList.from_dict(config['variables'])
    options = Options(dict(config.get('options') or {}))
    logger.debug("Loaded %d variables and %d options from %s",
                 varlist.get_var_count(), len(options.values), yaml_path)
    return varlist, options


# Add implementation methods to Options class
def _options_get_option(self, name, default=None):
    """Get option"""
    return OptionsImplementation.get_option(self, name, default)


def _options_get_option_float(self, name, default=None):
    """Get option as float"""
    return OptionsImplementation.get_option_float(self, name, default)


def _options_set_option(self, name, value):
    """Set option"""
    self.values[name] = value


Options.get_option = _options_get_option
Options.get_option_float = _options_get_option_float
Options.set_option = _options_set_option
