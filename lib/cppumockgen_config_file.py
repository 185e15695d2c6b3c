# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import logging
import os

import yaml

from cppumockgen_config import OptionError

log = logging.getLogger(__name__)

CONFIG_ROOT_KEY = ':cppumockgen'

# YAML key -> command line flag
FLAG_KEYS = {
    ':cpp': '-x',
    ':underlying_typedef': '-u',
}
VALUE_KEYS = {
    ':std': '-s',
    ':base_directory': '-B',
}
LIST_KEYS = {
    ':include_path': '-I',
    ':type_override': '-t',
}
CONFIG_FILE_KEY = ':config_file'


def load_config_file_from_yaml(yaml_filename):
    try:
        with open(yaml_filename, 'r') as file:
            data = yaml.safe_load(file)
    except OSError:
        raise OptionError(f"Configuration file '{yaml_filename}' could not be opened.")
    except yaml.YAMLError as e:
        raise OptionError(f"Error parsing YAML file {yaml_filename}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict) or not isinstance(data.get(CONFIG_ROOT_KEY, {}), dict):
        raise OptionError(f"Configuration file '{yaml_filename}' must contain a '{CONFIG_ROOT_KEY}' mapping.")
    return data.get(CONFIG_ROOT_KEY) or {}


def _as_list(value):
    if value is None:
        return []
    return [str(v) for v in value] if isinstance(value, list) else [str(value)]


def config_to_arguments(options, yaml_filename):
    """Translates the options of one configuration file into command line arguments."""
    arguments = []
    for key, value in options.items():
        if key in FLAG_KEYS:
            if value:
                arguments.append(FLAG_KEYS[key])
        elif key in VALUE_KEYS:
            arguments += [VALUE_KEYS[key], str(value)]
        elif key in LIST_KEYS:
            for item in _as_list(value):
                arguments += [LIST_KEYS[key], item]
        elif key != CONFIG_FILE_KEY:
            raise OptionError(f"Unknown option '{key}' in configuration file '{yaml_filename}'.")
    return arguments


def process_config_files(config_files, base_path, processed=None):
    """
    Loads the given configuration files, and the ones they include, returning
    their options as command line arguments. Relative paths are resolved
    against ``base_path`` for the top level files and against the including
    file's directory for nested ones. Each file is processed only once.
    """
    if processed is None:
        processed = set()

    arguments = []
    for config_file in config_files:
        filepath = config_file if os.path.isabs(config_file) else os.path.join(base_path, config_file)
        filepath = os.path.normpath(filepath)
        if filepath in processed:
            continue
        processed.add(filepath)

        log.debug("loading configuration file %s", filepath)
        options = load_config_file_from_yaml(filepath)
        nested = _as_list(options.get(CONFIG_FILE_KEY))
        arguments += process_config_files(nested, os.path.dirname(filepath), processed)
        arguments += config_to_arguments(options, filepath)
    return arguments
