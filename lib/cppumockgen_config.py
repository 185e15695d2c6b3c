# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import logging
from enum import Enum

from cppumockgen_string_helper import trim_string, string_count

log = logging.getLogger(__name__)


class OptionError(ValueError):
    """Malformed command line option, override or configuration file."""


class MockedType(Enum):
    BOOL = "Bool"
    INT = "Int"
    UNSIGNED_INT = "UnsignedInt"
    LONG = "LongInt"
    UNSIGNED_LONG = "UnsignedLongInt"
    DOUBLE = "Double"
    STRING = "String"
    POINTER = "Pointer"
    CONST_POINTER = "ConstPointer"
    OUTPUT = "Output"
    INPUT_POD = "InputPOD"
    OUTPUT_POD = "OutputPOD"
    INPUT_OF_TYPE = "InputOfType"
    OUTPUT_OF_TYPE = "OutputOfType"
    MEMORY_BUFFER = "MemoryBuffer"
    SKIP = "Skip"

    @property
    def runtime_suffix(self):
        """Suffix of the CppUTest ``with<X>Parameter`` / ``return<X>Value`` calls."""
        return self.value


# C type used to carry each simple mocked type through the expectation helpers
RUNTIME_C_TYPES = {
    MockedType.BOOL: "bool",
    MockedType.INT: "int",
    MockedType.UNSIGNED_INT: "unsigned int",
    MockedType.LONG: "long",
    MockedType.UNSIGNED_LONG: "unsigned long",
    MockedType.DOUBLE: "double",
    MockedType.STRING: "const char*",
    MockedType.POINTER: "void*",
    MockedType.CONST_POINTER: "const void*",
}

RETURN_OVERRIDE_TYPES = {
    "Bool": MockedType.BOOL,
    "Int": MockedType.INT,
    "UnsignedInt": MockedType.UNSIGNED_INT,
    "LongInt": MockedType.LONG,
    "UnsignedLongInt": MockedType.UNSIGNED_LONG,
    "Double": MockedType.DOUBLE,
    "String": MockedType.STRING,
    "Pointer": MockedType.POINTER,
    "ConstPointer": MockedType.CONST_POINTER,
    "Output": MockedType.OUTPUT,
}

PARAMETER_OVERRIDE_TYPES = {
    **RETURN_OVERRIDE_TYPES,
    "InputPOD": MockedType.INPUT_POD,
    "OutputPOD": MockedType.OUTPUT_POD,
    "Skip": MockedType.SKIP,
}

PARAMETER_OVERRIDE_TYPED_PREFIXES = {
    "InputOfType:": MockedType.INPUT_OF_TYPE,
    "OutputOfType:": MockedType.OUTPUT_OF_TYPE,
    "MemoryBuffer:": MockedType.MEMORY_BUFFER,
}


class CppUMockGenOverrideSpec:
    """
    One override rule, parsed from the value part of a ``KEY=VALUE`` option:

        TYPE[~EXPR]

    where TYPE is a simple type name (``Int``, ``String``, ...) or, for
    parameters, one of ``InputOfType:EXPOSED[<EXPECT]``, ``OutputOfType:EXPOSED[<EXPECT]``
    or ``MemoryBuffer:SIZE``. EXPR must contain ``$``, which stands for the
    original argument expression.
    """

    def __init__(self, value, option, is_return):
        self.type = None
        self.exposed_type_name = ""
        self.expectation_arg_type_name = ""
        self.expr_mod_front = ""
        self.expr_mod_back = ""
        self.has_expr_mod = False
        self.size_expr_front = ""
        self.size_expr_back = ""
        self.has_size_expr_placeholder = False

        if not value:
            raise OptionError(f"Override option spec cannot be empty <{option}>")

        type_name, sep, expr_mod = value.partition('~')
        type_name = trim_string(type_name)
        if sep:
            if not type_name:
                raise OptionError(f"Override option type cannot be empty <{option}>")
            if not expr_mod:
                raise OptionError(f"Override option argument expression cannot be empty if specified <{option}>")
            self.expr_mod_front, self.expr_mod_back = self._split_placeholder(
                expr_mod, option, "argument expression")
            self.has_expr_mod = True

        if is_return:
            self._parse_return_type(type_name, option)
        else:
            self._parse_parameter_type(type_name, option)

    @staticmethod
    def _split_placeholder(expr, option, what):
        count = string_count(expr, '$')
        if count == 0:
            raise OptionError(f"Override option {what} does not contain parameter name placeholder ($) <{option}>")
        if count > 1:
            raise OptionError(f"Override option {what} contains more than one parameter name placeholder ($) <{option}>")
        front, _, back = expr.partition('$')
        return front, back

    def _parse_return_type(self, type_name, option):
        if type_name not in RETURN_OVERRIDE_TYPES:
            raise OptionError(f"Invalid override option type <{option}>.")
        self.type = RETURN_OVERRIDE_TYPES[type_name]

    def _parse_parameter_type(self, type_name, option):
        if type_name in PARAMETER_OVERRIDE_TYPES:
            self.type = PARAMETER_OVERRIDE_TYPES[type_name]
            if self.type is MockedType.SKIP and self.has_expr_mod:
                raise OptionError(f"Override option argument expression cannot be used with Skip type <{option}>")
            return

        for prefix, mocked_type in PARAMETER_OVERRIDE_TYPED_PREFIXES.items():
            if type_name.startswith(prefix):
                self.type = mocked_type
                argument = type_name[len(prefix):]
                if mocked_type is MockedType.MEMORY_BUFFER:
                    self._parse_size_expr(argument, option)
                else:
                    self._parse_type_names(argument, option)
                return

        raise OptionError(f"Invalid override option type <{option}>.")

    def _parse_type_names(self, argument, option):
        exposed, sep, expectation = argument.partition('<')
        exposed = trim_string(exposed)
        expectation = trim_string(expectation) if sep else exposed
        if not exposed:
            raise OptionError(f"Override option exposed type cannot be empty <{option}>")
        if not expectation:
            raise OptionError(f"Override option expectation argument type cannot be empty <{option}>")
        self.exposed_type_name = exposed
        self.expectation_arg_type_name = expectation

    def _parse_size_expr(self, argument, option):
        argument = trim_string(argument)
        if not argument:
            # MemoryBuffer:~SIZE form, the modifier is the size and the argument passes as is
            if not self.has_expr_mod:
                raise OptionError(f"Override option memory buffer size expression cannot be empty <{option}>")
            self.size_expr_front, self.size_expr_back = self.expr_mod_front, self.expr_mod_back
            self.has_size_expr_placeholder = True
            self.expr_mod_front = self.expr_mod_back = ""
            self.has_expr_mod = False
        elif '$' in argument:
            self.size_expr_front, self.size_expr_back = self._split_placeholder(
                argument, option, "size expression")
            self.has_size_expr_placeholder = True
        else:
            self.size_expr_front = argument

    def update_arg_expr(self, arg_expr):
        if self.has_expr_mod:
            return self.expr_mod_front + arg_expr + self.expr_mod_back
        return arg_expr

    def get_size_expr(self, arg_name):
        if self.has_size_expr_placeholder:
            return self.size_expr_front + arg_name + self.size_expr_back
        return self.size_expr_front


class CppUMockGenOverrideMap:
    def __init__(self, options):
        self._map = {}
        for option in options:
            key, sep, value = option.partition('=')
            if not sep:
                raise OptionError(f"Invalid override option <{option}>.")

            key = trim_string(key)
            value = trim_string(value)
            if not key:
                raise OptionError(f"Override option key cannot be empty <{option}>.")

            is_return = self._classify_key(key, option)
            spec = CppUMockGenOverrideSpec(value, option, is_return)

            if key in self._map:
                raise OptionError(f"Override option key <{key}> can only be passed once.")
            self._map[key] = spec
            log.debug("override %s -> %s", key, spec.type)

    @staticmethod
    def _classify_key(key, option):
        hashes = string_count(key, '#')
        ats = string_count(key, '@')
        if hashes == 1 and ats == 0:
            return False
        if ats == 1 and hashes == 0 and (key[0] == '@' or key[-1] == '@'):
            return True
        raise OptionError(f"Invalid override option key format <{option}>.")

    def get(self, key):
        return self._map.get(key)

    def __len__(self):
        return len(self._map)


class CppUMockGenConfig:
    def __init__(self, use_underlying_typedef=False, override_options=None):
        self.use_underlying_typedef = use_underlying_typedef
        self.overrides = CppUMockGenOverrideMap(override_options or [])

    def get_parameter_override(self, function_name, param_name, type_spelling):
        for key in (f"{function_name}#{param_name}", f"#{param_name}", f"#{type_spelling}"):
            spec = self.overrides.get(key)
            if spec is not None:
                return spec
        return None

    def get_return_override(self, function_name, type_spelling):
        for key in (f"{function_name}@", f"@{type_spelling}"):
            spec = self.overrides.get(key)
            if spec is not None:
                return spec
        return None
