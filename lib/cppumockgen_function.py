# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import logging
from enum import Enum

from clang.cindex import CursorKind, TypeKind

from cppumockgen_clang_helper import (get_exception_specifier, get_method_class_name,
                                      get_qualified_name, get_scope_names, is_cursor_non_private,
                                      is_cursor_public, is_in_template, is_member_in_public_class,
                                      resolve_type)
from cppumockgen_config import RUNTIME_C_TYPES, MockedType
from cppumockgen_type_classifier import ARRAY_KINDS, ParameterModel, UnsupportedTypeError

log = logging.getLogger(__name__)

SIMPLE_TYPES = tuple(RUNTIME_C_TYPES)
BYTE_BUFFER_CAST = "static_cast<const unsigned char *>(static_cast<const void *>({}))"
NON_IGNORABLE_TYPES = (MockedType.SKIP, MockedType.OUTPUT, MockedType.OUTPUT_OF_TYPE, MockedType.OUTPUT_POD)


class RecordKind(Enum):
    FUNCTION = "function"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    DESTRUCTOR = "destructor"


class Argument:
    """
    One parameter of a mocked callable, with its effective marshalling: the
    matching override when there is one, otherwise the classifier result.
    """

    def __init__(self, name, type_spelling, model, override=None, array_suffix=""):
        self.name = name
        self.type_spelling = type_spelling
        self.model = model
        self.override = override
        self.array_suffix = array_suffix

    @property
    def mocked_type(self):
        return self.override.type if self.override is not None else self.model.mocked_type

    @property
    def is_skipped(self):
        return self.mocked_type is MockedType.SKIP

    @property
    def is_ignorable(self):
        return self.mocked_type not in NON_IGNORABLE_TYPES

    def _default_expr(self):
        expr = f"&{self.name}" if self.model.pass_address else self.name
        if self.model.int_cast and self.override is None:
            expr = f"static_cast<int>({expr})"
        return expr

    def _arg_expr(self):
        if self.override is not None and self.override.has_expr_mod:
            return self.override.update_arg_expr(self.name)
        return self._default_expr()

    def _type_name(self):
        if self.override is not None:
            return self.override.exposed_type_name
        return self.model.exposed_type_name

    # Mock

    def get_signature(self):
        if self.is_skipped:
            return f"{self.type_spelling} {self.array_suffix}" if self.array_suffix else self.type_spelling
        if "(*)" in self.type_spelling:
            # Function pointer, the name goes inside the declarator
            return self.type_spelling.replace("(*)", f"(*{self.name})", 1)
        return f"{self.type_spelling} {self.name}{self.array_suffix}"

    def get_mock_call(self):
        mocked_type = self.mocked_type
        expr = self._arg_expr()

        if mocked_type is MockedType.SKIP:
            return ""
        if mocked_type in SIMPLE_TYPES or mocked_type is MockedType.OUTPUT:
            return f'.with{mocked_type.runtime_suffix}Parameter("{self.name}", {expr})'
        if mocked_type is MockedType.INPUT_OF_TYPE:
            return f'.withParameterOfType("{self._type_name()}", "{self.name}", {expr})'
        if mocked_type is MockedType.OUTPUT_OF_TYPE:
            return f'.withOutputParameterOfType("{self._type_name()}", "{self.name}", {expr})'
        if mocked_type is MockedType.INPUT_POD:
            return (f'.withMemoryBufferParameter("{self.name}", {BYTE_BUFFER_CAST.format(expr)}, '
                    f'sizeof(*({expr})))')
        if mocked_type is MockedType.OUTPUT_POD:
            return f'.withOutputParameter("{self.name}", {expr})'
        if mocked_type is MockedType.MEMORY_BUFFER:
            if not (self.model.is_byte_buffer and not self.override.has_expr_mod):
                expr = BYTE_BUFFER_CAST.format(expr)
            return (f'.withMemoryBufferParameter("{self.name}", {expr}, '
                    f'{self.override.get_size_expr(self.name)})')
        raise ValueError(f"Unexpected mocked type {mocked_type}")

    # Expectation

    def _sizeof_name(self):
        return f"__sizeof_{self.name}"

    def get_expectation_args(self):
        """Declarations of the helper arguments for this parameter."""
        mocked_type = self.mocked_type
        name = self.name

        if mocked_type is MockedType.SKIP:
            return []
        if self.override is None:
            if self.model.expect_wrapped:
                return [f"CppUMockGen::Parameter<{self.model.expect_type}> {name}"]
            return [f"{self.model.expect_type} {name}"]
        if mocked_type in SIMPLE_TYPES:
            return [f"CppUMockGen::Parameter<{RUNTIME_C_TYPES[mocked_type]}> {name}"]
        if mocked_type is MockedType.OUTPUT:
            return [f"const void * {name}", f"size_t {self._sizeof_name()}"]
        if mocked_type is MockedType.INPUT_OF_TYPE:
            return [f"CppUMockGen::Parameter<const {self.override.expectation_arg_type_name} *> {name}"]
        if mocked_type is MockedType.OUTPUT_OF_TYPE:
            return [f"const {self.override.expectation_arg_type_name} * {name}"]
        if mocked_type is MockedType.INPUT_POD:
            return [f"CppUMockGen::Parameter<const {self.model.pod_type} *> {name}"]
        if mocked_type is MockedType.OUTPUT_POD:
            return [f"const {self.model.pod_type} * {name}"]
        if mocked_type is MockedType.MEMORY_BUFFER:
            return [f"CppUMockGen::Parameter<const void *> {name}", f"size_t {self._sizeof_name()}"]
        raise ValueError(f"Unexpected mocked type {mocked_type}")

    def get_expectation_arg_names(self):
        if self.is_skipped:
            return []
        if self.mocked_type in (MockedType.OUTPUT, MockedType.MEMORY_BUFFER) and self.override is not None:
            return [self.name, self._sizeof_name()]
        return [self.name]

    def _wrapped_value(self):
        value = f"{self.name}.getValue()"
        if self.override is None:
            if self.model.expect_by_address:
                value = f"&{value}"
            elif self.model.int_cast:
                value = f"static_cast<int>({value})"
        return value

    def _ignorable(self, call):
        return (f"    if({self.name}.isIgnored()) {{ __ignoreOtherParams__ = true; }} "
                f"else {{ __expectedCall__{call}; }}\n")

    def get_expectation_body(self):
        mocked_type = self.mocked_type
        name = self.name

        if mocked_type is MockedType.SKIP:
            return ""

        if mocked_type is MockedType.OUTPUT:
            if self.override is not None:
                size = self._sizeof_name()
                value = name
            else:
                value = f"&{name}" if self.model.pass_address else name
                size = self.model.output_size_fmt.format(name)
            return f'    __expectedCall__.withOutputParameterReturning("{name}", {value}, {size});\n'
        if mocked_type is MockedType.OUTPUT_OF_TYPE:
            value = f"&{name}" if self.override is None and self.model.pass_address else name
            return (f'    __expectedCall__.withOutputParameterOfTypeReturning('
                    f'"{self._type_name()}", "{name}", {value});\n')
        if mocked_type is MockedType.OUTPUT_POD:
            return f'    __expectedCall__.withOutputParameterReturning("{name}", {name}, sizeof(*{name}));\n'

        value = self._wrapped_value()
        if mocked_type in SIMPLE_TYPES:
            return self._ignorable(f'.with{mocked_type.runtime_suffix}Parameter("{name}", {value})')
        if mocked_type is MockedType.INPUT_OF_TYPE:
            return self._ignorable(f'.withParameterOfType("{self._type_name()}", "{name}", {value})')
        if mocked_type is MockedType.INPUT_POD:
            return self._ignorable(f'.withMemoryBufferParameter("{name}", {BYTE_BUFFER_CAST.format(value)}, '
                                   f'sizeof(*{value}))')
        if mocked_type is MockedType.MEMORY_BUFFER:
            return self._ignorable(f'.withMemoryBufferParameter("{name}", '
                                   f'static_cast<const unsigned char *>({value}), {self._sizeof_name()})')
        raise ValueError(f"Unexpected mocked type {mocked_type}")


class ReturnValue:
    def __init__(self, type_spelling, model, override=None):
        self.type_spelling = type_spelling
        self.model = model
        self.override = override

    @property
    def is_void(self):
        return self.model is None and self.override is None

    @property
    def mocked_type(self):
        return self.override.type if self.override is not None else self.model.mocked_type

    @property
    def _override_runtime_type(self):
        # An output return hands back the pointer passed to the expectation
        if self.override.type is MockedType.OUTPUT:
            return MockedType.POINTER
        return self.override.type

    def get_mock_return(self, call):
        """Wraps the actual call chain into the return statement."""
        if self.is_void:
            return call
        if self.override is not None:
            call += f".return{self._override_runtime_type.runtime_suffix}Value()"
            return f"return {self.override.expr_mod_front}{call}{self.override.expr_mod_back}"
        call += f".return{self.mocked_type.runtime_suffix}Value()"
        return f"return {self.model.mock_fmt.format(call)}"

    def get_expectation_arg(self):
        if self.is_void:
            return None
        if self.override is not None:
            return f"{RUNTIME_C_TYPES[self._override_runtime_type]} __return__"
        return f"{self.model.expect_type} __return__"

    def get_expectation_body(self):
        if self.is_void:
            return ""
        value = "__return__" if self.override is not None else self.model.expect_fmt.format("__return__")
        return f"    __expectedCall__.andReturnValue({value});\n"


class Function:
    """
    A mockable free function. Subclasses specialise naming and the implicit
    object for methods, constructors and destructors.
    """
    kind = RecordKind.FUNCTION

    def __init__(self):
        self.qualified_name = ""
        self.name = ""
        self.scope_names = []
        self.return_value = None
        self.arguments = []
        self.is_const = False
        self.exception_specifier = ""
        self.class_name = ""

    @property
    def has_object(self):
        return False

    @property
    def expectation_function_name(self):
        return self.name

    def is_mockable(self, cursor):
        # A definition in the header means the function is inline
        if cursor.get_definition() is not None:
            return False
        # Declarations repeated in the file are only mocked once
        if cursor != cursor.canonical:
            return False
        if cursor.type.kind == TypeKind.FUNCTIONPROTO and cursor.type.is_function_variadic():
            return False
        if cursor.kind == CursorKind.FUNCTION_DECL and cursor.spelling.startswith("operator"):
            return False
        return not is_in_template(cursor) and not cursor.is_deleted_method()

    def parse(self, cursor, config, classifier):
        """
        Builds the record from the cursor. Returns False, leaving the record
        unusable, if the callable cannot be mocked.
        """
        if not self.is_mockable(cursor):
            log.debug("skipping %s", cursor.spelling)
            return False

        self.qualified_name = get_qualified_name(cursor)
        self.name = cursor.spelling
        self.scope_names = get_scope_names(cursor)
        self.exception_specifier = get_exception_specifier(cursor)

        self._parse_return(cursor, config, classifier)
        for index, arg_cursor in enumerate(cursor.get_arguments()):
            self.arguments.append(self._parse_argument(index, arg_cursor, config, classifier))
        return True

    def _parse_return(self, cursor, config, classifier):
        if self.kind in (RecordKind.CONSTRUCTOR, RecordKind.DESTRUCTOR):
            self.return_value = ReturnValue("", None)
            return

        return_type = cursor.result_type
        override = None
        if return_type.kind != TypeKind.VOID:
            override = config.get_return_override(self.qualified_name, return_type.spelling)
        try:
            model = classifier.classify_return(return_type)
        except UnsupportedTypeError:
            if override is None:
                raise
            model = None
        self.return_value = ReturnValue(return_type.spelling, model, override)

    def _parse_argument(self, index, arg_cursor, config, classifier):
        name = arg_cursor.spelling or f"_unnamedArg{index}"
        arg_type = arg_cursor.type
        resolved = resolve_type(arg_type)

        type_spelling = arg_type.spelling
        array_suffix = ""
        if resolved.kind in ARRAY_KINDS:
            type_spelling = resolved.element_type.spelling
            size = resolved.get_array_size() if resolved.kind == TypeKind.CONSTANTARRAY else -1
            array_suffix = f"[{size}]" if size >= 0 else "[]"

        override = config.get_parameter_override(self.qualified_name, name, arg_type.spelling)
        try:
            model = classifier.classify_parameter(arg_type)
        except UnsupportedTypeError:
            if override is None:
                raise
            model = ParameterModel(override.type, arg_type.spelling, pod_type=arg_type.spelling)
        return Argument(name, type_spelling, model, override, array_suffix)


class Method(Function):
    kind = RecordKind.METHOD

    @property
    def has_object(self):
        return True

    def is_mockable(self, cursor):
        if cursor.spelling.startswith("operator"):
            return False
        if cursor.is_pure_virtual_method():
            return False
        # Non-public methods are only reachable through virtual dispatch
        if not is_cursor_public(cursor) and not cursor.is_virtual_method():
            return False
        return super().is_mockable(cursor) and is_member_in_public_class(cursor)

    def parse(self, cursor, config, classifier):
        if not super().parse(cursor, config, classifier):
            return False
        self.is_const = cursor.is_const_method()
        self.class_name = get_method_class_name(cursor)
        return True


class Constructor(Method):
    kind = RecordKind.CONSTRUCTOR

    @property
    def has_object(self):
        return False

    @property
    def expectation_function_name(self):
        return f"{self.name}$ctor"

    def is_mockable(self, cursor):
        return (Function.is_mockable(self, cursor) and is_cursor_non_private(cursor)
                and is_member_in_public_class(cursor))


class Destructor(Method):
    kind = RecordKind.DESTRUCTOR

    @property
    def expectation_function_name(self):
        return f"{self.name[1:]}$dtor"

    def is_mockable(self, cursor):
        return Function.is_mockable(self, cursor) and is_member_in_public_class(cursor)


RECORD_TYPES = {
    CursorKind.FUNCTION_DECL: Function,
    CursorKind.CXX_METHOD: Method,
    CursorKind.CONSTRUCTOR: Constructor,
    CursorKind.DESTRUCTOR: Destructor,
}
