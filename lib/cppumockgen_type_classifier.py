# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import logging

from clang.cindex import TypeKind

from cppumockgen_clang_helper import get_bare_type_spelling, resolve_type
from cppumockgen_config import RUNTIME_C_TYPES, MockedType

log = logging.getLogger(__name__)

# TypeKind -> (mocked type, needs cast to/from the mock runtime type)
PRIMITIVE_TYPES = {
    TypeKind.BOOL: (MockedType.BOOL, False),
    TypeKind.INT: (MockedType.INT, False),
    TypeKind.SHORT: (MockedType.INT, True),
    TypeKind.CHAR_S: (MockedType.INT, True),
    TypeKind.SCHAR: (MockedType.INT, True),
    TypeKind.WCHAR: (MockedType.INT, True),
    TypeKind.UINT: (MockedType.UNSIGNED_INT, False),
    TypeKind.USHORT: (MockedType.UNSIGNED_INT, True),
    TypeKind.CHAR_U: (MockedType.UNSIGNED_INT, True),
    TypeKind.UCHAR: (MockedType.UNSIGNED_INT, True),
    TypeKind.CHAR16: (MockedType.UNSIGNED_INT, True),
    TypeKind.LONG: (MockedType.LONG, False),
    TypeKind.LONGLONG: (MockedType.LONG, True),
    TypeKind.ULONG: (MockedType.UNSIGNED_LONG, False),
    TypeKind.ULONGLONG: (MockedType.UNSIGNED_LONG, True),
    TypeKind.CHAR32: (MockedType.UNSIGNED_LONG, True),
    TypeKind.FLOAT: (MockedType.DOUBLE, True),
    TypeKind.DOUBLE: (MockedType.DOUBLE, False),
    TypeKind.LONGDOUBLE: (MockedType.DOUBLE, True),
}

# Template instances are reported as UNEXPOSED
RECORD_KINDS = (TypeKind.RECORD, TypeKind.UNEXPOSED)
REFERENCE_KINDS = (TypeKind.LVALUEREFERENCE, TypeKind.RVALUEREFERENCE)
ARRAY_KINDS = (TypeKind.CONSTANTARRAY, TypeKind.INCOMPLETEARRAY)
POINTER_LIKE_KINDS = (TypeKind.POINTER,) + REFERENCE_KINDS
BYTE_KINDS = (TypeKind.UCHAR, TypeKind.CHAR_U)


class UnsupportedTypeError(ValueError):
    def __init__(self, spelling):
        super().__init__(f"Unsupported type '{spelling}'")
        self.spelling = spelling


def unconst(spelling):
    return spelling[6:] if spelling.startswith("const ") else spelling


def add_const(spelling, type_):
    """Const-qualifies a type spelling, after the star for pointer types."""
    if type_.get_canonical().kind == TypeKind.POINTER:
        return f"{spelling} const"
    return f"const {spelling}"


class ParameterModel:
    """
    How one parameter crosses the mock boundary.

    ``expect_type`` is the type of the expectation helper argument, wrapped in
    ``CppUMockGen::Parameter<>`` unless ``expect_wrapped`` is false (outputs,
    which cannot be ignored). ``output_size_fmt`` gives the size of the data
    returned through an output argument.
    """

    def __init__(self, mocked_type, expect_type, pass_address=False, int_cast=False,
                 exposed_type_name="", expect_wrapped=True, expect_by_address=False,
                 output_size_fmt="", pod_type="", is_byte_buffer=False):
        self.mocked_type = mocked_type
        self.expect_type = expect_type
        self.pass_address = pass_address
        self.int_cast = int_cast
        self.exposed_type_name = exposed_type_name
        self.expect_wrapped = expect_wrapped
        self.expect_by_address = expect_by_address
        self.output_size_fmt = output_size_fmt
        self.pod_type = pod_type
        self.is_byte_buffer = is_byte_buffer


class ReturnModel:
    """
    How a return value crosses the mock boundary. ``mock_fmt`` wraps the
    ``return<X>Value()`` call in the mock; ``expect_fmt`` wraps the helper
    argument passed to ``andReturnValue()``.
    """

    def __init__(self, mocked_type, expect_type, mock_fmt="{}", expect_fmt="{}"):
        self.mocked_type = mocked_type
        self.expect_type = expect_type
        self.mock_fmt = mock_fmt
        self.expect_fmt = expect_fmt


def _void_ptr_cast(is_const):
    return "static_cast<const void*>({})" if is_const else "static_cast<void*>({})"


class CppUMockGenTypeClassifier:
    def __init__(self, config):
        self.config = config

    def _record_name(self, record_type, orig_type):
        return get_bare_type_spelling(record_type if self.config.use_underlying_typedef else orig_type)

    # Parameters

    def classify_parameter(self, type_):
        orig = type_
        type_ = resolve_type(type_)
        kind = type_.kind

        if kind in PRIMITIVE_TYPES or kind == TypeKind.ENUM:
            return self._classify_scalar(type_, orig.spelling)
        if kind in RECORD_KINDS:
            return ParameterModel(MockedType.INPUT_OF_TYPE, f"const {unconst(orig.spelling)} &",
                                  pass_address=True, expect_by_address=True,
                                  exposed_type_name=self._record_name(type_, orig),
                                  pod_type=unconst(orig.spelling))
        if kind == TypeKind.POINTER:
            return self._classify_pointed(type_.get_pointee(), orig, False)
        if kind in ARRAY_KINDS:
            return self._classify_pointed(type_.element_type, orig, False)
        if kind == TypeKind.LVALUEREFERENCE:
            return self._classify_pointed(type_.get_pointee(), orig, True)
        if kind == TypeKind.RVALUEREFERENCE:
            return self._classify_rvalue_reference(type_, orig)
        if kind == TypeKind.TYPEDEF:
            return self._classify_typedef(type_, orig)

        raise UnsupportedTypeError(orig.spelling)

    def _classify_scalar(self, type_, spelling):
        canonical = type_.get_canonical()
        if canonical.kind == TypeKind.ENUM:
            return ParameterModel(MockedType.INT, spelling, int_cast=True, pod_type=unconst(spelling))
        if canonical.kind not in PRIMITIVE_TYPES:
            raise UnsupportedTypeError(spelling)
        mocked_type, _ = PRIMITIVE_TYPES[canonical.kind]
        return ParameterModel(mocked_type, spelling, pod_type=unconst(spelling))

    def _classify_pointed(self, pointee, orig, is_reference):
        """Pointers, arrays and lvalue references, classified by what they refer to."""
        canonical = pointee.get_canonical()
        is_const = pointee.is_const_qualified() or canonical.is_const_qualified()
        base = unconst(pointee.spelling) if pointee.is_const_qualified() else pointee.spelling
        orig_kind = resolve_type(orig).kind
        is_array = orig_kind in ARRAY_KINDS

        if canonical.kind in (TypeKind.FUNCTIONPROTO, TypeKind.FUNCTIONNOPROTO):
            raise UnsupportedTypeError(orig.spelling)

        if is_reference:
            wrapped_type = orig.spelling
            plain_type = f"{add_const(base, pointee)} &"
            size_fmt = "sizeof({})"
        else:
            wrapped_type = f"{pointee.spelling} *" if is_array else orig.spelling
            plain_type = f"{add_const(base, pointee)} *"
            size_fmt = "sizeof(*{})"

        if canonical.kind in RECORD_KINDS:
            name = self._record_name(canonical, orig)
            if is_const:
                return ParameterModel(MockedType.INPUT_OF_TYPE, wrapped_type, pass_address=is_reference,
                                      exposed_type_name=name, expect_by_address=is_reference, pod_type=base)
            return ParameterModel(MockedType.OUTPUT_OF_TYPE, plain_type, pass_address=is_reference,
                                  exposed_type_name=name, expect_wrapped=False, pod_type=base)

        is_byte = canonical.kind in BYTE_KINDS and not is_reference
        if is_const:
            if canonical.kind == TypeKind.CHAR_S and canonical.is_const_qualified() and not is_reference:
                mocked_type = MockedType.STRING
            else:
                mocked_type = MockedType.CONST_POINTER
            return ParameterModel(mocked_type, wrapped_type, pass_address=is_reference,
                                  expect_by_address=is_reference, pod_type=base, is_byte_buffer=is_byte)
        if canonical.kind == TypeKind.VOID and not is_reference:
            return ParameterModel(MockedType.POINTER, wrapped_type, pod_type=base)
        # Pointers to pointers or references have no size to copy out
        if canonical.kind in POINTER_LIKE_KINDS:
            return ParameterModel(MockedType.POINTER, wrapped_type, pass_address=is_reference,
                                  expect_by_address=is_reference, pod_type=base)
        return ParameterModel(MockedType.OUTPUT, plain_type, pass_address=is_reference,
                              expect_wrapped=False, output_size_fmt=size_fmt, pod_type=base,
                              is_byte_buffer=is_byte)

    def _classify_rvalue_reference(self, type_, orig):
        referent = type_.get_pointee()
        canonical = referent.get_canonical()
        if canonical.kind in RECORD_KINDS:
            return self._classify_pointed(referent, orig, True)
        model = self.classify_parameter(referent)
        model.expect_type = referent.spelling
        return model

    def _classify_typedef(self, type_, orig):
        canonical = type_.get_canonical()
        is_typedef_const = type_.is_const_qualified()

        if canonical.kind in POINTER_LIKE_KINDS:
            pointee = canonical.get_pointee()
            is_pointee_const = pointee.is_const_qualified()
            is_reference = canonical.kind != TypeKind.POINTER
            if not is_reference and pointee.kind == TypeKind.CHAR_S and is_pointee_const:
                mocked_type = MockedType.STRING
            elif is_pointee_const or is_typedef_const:
                mocked_type = MockedType.CONST_POINTER
            else:
                mocked_type = MockedType.POINTER
            return ParameterModel(mocked_type, orig.spelling, pass_address=is_reference,
                                  expect_by_address=is_reference, pod_type=unconst(pointee.spelling))

        if canonical.kind in ARRAY_KINDS:
            element = canonical.element_type
            base = unconst(element.spelling)
            if element.is_const_qualified() or is_typedef_const:
                return ParameterModel(MockedType.CONST_POINTER, f"const {base} *", pod_type=base)
            return ParameterModel(MockedType.OUTPUT, f"const {base} *", expect_wrapped=False,
                                  output_size_fmt="sizeof(*{})", pod_type=base)

        if canonical.kind in RECORD_KINDS:
            return ParameterModel(MockedType.INPUT_OF_TYPE, f"const {unconst(orig.spelling)} &",
                                  pass_address=True, expect_by_address=True,
                                  exposed_type_name=self._record_name(canonical, orig),
                                  pod_type=unconst(orig.spelling))

        return self._classify_scalar(type_, orig.spelling)

    # Return values

    def classify_return(self, type_):
        """Returns None for ``void``."""
        orig = type_
        type_ = resolve_type(type_)
        kind = type_.kind
        spelling = orig.spelling

        if kind == TypeKind.VOID:
            return None
        if kind in PRIMITIVE_TYPES or kind == TypeKind.ENUM:
            return self._classify_scalar_return(type_, spelling)
        if kind in RECORD_KINDS:
            return ReturnModel(MockedType.CONST_POINTER, f"const {unconst(spelling)} &",
                               mock_fmt=f"*static_cast<const {unconst(spelling)}*>({{}})",
                               expect_fmt="static_cast<const void*>(&{})")
        if kind == TypeKind.POINTER:
            return self._classify_pointer_return(type_, spelling)
        if kind in REFERENCE_KINDS:
            referent = type_.get_pointee()
            if referent.get_canonical().kind in (TypeKind.FUNCTIONPROTO, TypeKind.FUNCTIONNOPROTO):
                raise UnsupportedTypeError(spelling)
            is_const = referent.is_const_qualified()
            mocked_type = MockedType.CONST_POINTER if is_const else MockedType.POINTER
            deref = f"*static_cast<{referent.spelling}*>({{}})"
            if kind == TypeKind.RVALUEREFERENCE:
                return ReturnModel(mocked_type, f"{unconst(referent.spelling)} &",
                                   mock_fmt=f"std::move({deref})",
                                   expect_fmt=_void_ptr_cast(False).format("&{}"))
            return ReturnModel(mocked_type, spelling, mock_fmt=deref,
                               expect_fmt=_void_ptr_cast(is_const).format("&{}"))
        if kind == TypeKind.TYPEDEF:
            return self._classify_typedef_return(type_, spelling)

        raise UnsupportedTypeError(spelling)

    def _classify_scalar_return(self, type_, spelling):
        canonical = type_.get_canonical()
        if canonical.kind == TypeKind.ENUM:
            return ReturnModel(MockedType.INT, spelling, mock_fmt=f"static_cast<{spelling}>({{}})",
                               expect_fmt="static_cast<int>({})")
        if canonical.kind not in PRIMITIVE_TYPES:
            raise UnsupportedTypeError(spelling)
        mocked_type, needs_cast = PRIMITIVE_TYPES[canonical.kind]
        if needs_cast or type_.kind == TypeKind.TYPEDEF:
            return ReturnModel(mocked_type, spelling, mock_fmt=f"static_cast<{spelling}>({{}})",
                               expect_fmt=f"static_cast<{RUNTIME_C_TYPES[mocked_type]}>({{}})")
        return ReturnModel(mocked_type, spelling)

    def _classify_pointer_return(self, type_, spelling):
        pointee = type_.get_pointee()
        canonical = pointee.get_canonical()
        is_const = pointee.is_const_qualified()

        if canonical.kind in (TypeKind.FUNCTIONPROTO, TypeKind.FUNCTIONNOPROTO):
            raise UnsupportedTypeError(spelling)
        if resolve_type(pointee).kind == TypeKind.CHAR_S and is_const:
            return ReturnModel(MockedType.STRING, spelling)

        mocked_type = MockedType.CONST_POINTER if is_const else MockedType.POINTER
        if resolve_type(pointee).kind == TypeKind.VOID:
            return ReturnModel(mocked_type, spelling)
        return ReturnModel(mocked_type, spelling, mock_fmt=f"static_cast<{pointee.spelling}*>({{}})",
                           expect_fmt=_void_ptr_cast(is_const))

    def _classify_typedef_return(self, type_, spelling):
        canonical = type_.get_canonical()
        is_typedef_const = type_.is_const_qualified()

        if canonical.kind in RECORD_KINDS:
            return ReturnModel(MockedType.CONST_POINTER, f"const {unconst(spelling)} &",
                               mock_fmt=f"*static_cast<const {unconst(spelling)}*>({{}})",
                               expect_fmt="static_cast<const void*>(&{})")
        if canonical.kind in REFERENCE_KINDS:
            referent = canonical.get_pointee()
            is_const = referent.is_const_qualified() or is_typedef_const
            mocked_type = MockedType.CONST_POINTER if is_const else MockedType.POINTER
            return ReturnModel(mocked_type, spelling,
                               mock_fmt=f"static_cast<{spelling}>(*static_cast<{referent.spelling}*>({{}}))",
                               expect_fmt=_void_ptr_cast(is_const).format("&{}"))
        if canonical.kind == TypeKind.POINTER:
            pointee = canonical.get_pointee()
            is_pointee_const = pointee.is_const_qualified()
            if pointee.kind == TypeKind.CHAR_S and is_pointee_const:
                return ReturnModel(MockedType.STRING, spelling, mock_fmt=f"static_cast<{spelling}>({{}})")
            is_const = is_pointee_const or is_typedef_const
            mocked_type = MockedType.CONST_POINTER if is_const else MockedType.POINTER
            return ReturnModel(mocked_type, spelling, mock_fmt=f"static_cast<{spelling}>({{}})",
                               expect_fmt=_void_ptr_cast(is_const))

        return self._classify_scalar_return(type_, spelling)
