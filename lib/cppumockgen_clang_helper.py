# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import logging

from clang.cindex import (AccessSpecifier, Config, CursorKind,
                          ExceptionSpecificationKind, TypeKind)

log = logging.getLogger(__name__)

CLASS_CURSOR_KINDS = (
    CursorKind.CLASS_DECL,
    CursorKind.STRUCT_DECL,
    CursorKind.UNION_DECL,
)

TEMPLATE_CURSOR_KINDS = (
    CursorKind.CLASS_TEMPLATE,
    CursorKind.CLASS_TEMPLATE_PARTIAL_SPECIALIZATION,
    CursorKind.FUNCTION_TEMPLATE,
)

EXCEPTION_SPECIFIERS = {
    ExceptionSpecificationKind.BASIC_NOEXCEPT: "noexcept",
    ExceptionSpecificationKind.DYNAMIC_NONE: "throw()",
    ExceptionSpecificationKind.MS_ANY: "throw(...)",
    ExceptionSpecificationKind.DYNAMIC: "throw(__put_exception_types_manually_here__)",
}


def configure_library(library_file):
    """
    Points clang.cindex at a specific libclang shared library. Must happen
    before the first index is created.
    """
    if not library_file or Config.loaded:
        return
    log.debug("using libclang from %s", library_file)
    Config.set_library_file(library_file)


def resolve_type(type_):
    """Strips the sugar of elaborated types (``struct S``, ``ns::T``)."""
    while type_.kind == TypeKind.ELABORATED:
        type_ = type_.get_named_type()
    return type_


def get_qualified_name(cursor):
    names = get_scope_names(cursor)
    names.append(cursor.spelling)
    return "::".join(names)


def get_scope_names(cursor):
    """Names of the namespaces and classes enclosing the cursor, outermost first."""
    names = []
    parent = cursor.semantic_parent
    while parent is not None and parent.kind != CursorKind.TRANSLATION_UNIT:
        if parent.spelling:
            names.insert(0, parent.spelling)
        parent = parent.semantic_parent
    return names


def get_method_class_name(cursor):
    parent = cursor.semantic_parent
    return get_qualified_name(parent) if parent is not None else ""


def get_bare_type_spelling(type_):
    """
    Returns the last word of the type spelling, once any trailing pointer or
    reference is dropped: ``const struct Struct1 *`` gives ``Struct1``.
    """
    full_name = type_.spelling
    sep_idx = full_name.rfind(' ')
    if sep_idx >= 0 and full_name[sep_idx + 1] in ('*', '&'):
        full_name = full_name[:sep_idx]
        sep_idx = full_name.rfind(' ')
    return full_name[sep_idx + 1:] if sep_idx >= 0 else full_name


def is_cursor_non_private(cursor):
    return cursor.access_specifier != AccessSpecifier.PRIVATE


def is_cursor_public(cursor):
    return cursor.access_specifier in (AccessSpecifier.PUBLIC, AccessSpecifier.INVALID)


def is_member_in_public_class(cursor):
    """True if every class enclosing the cursor is reachable from the outside."""
    parent = cursor.semantic_parent
    while parent is not None and parent.kind in CLASS_CURSOR_KINDS:
        if not is_cursor_public(parent):
            return False
        parent = parent.semantic_parent
    return True


def is_in_template(cursor):
    parent = cursor.semantic_parent
    while parent is not None and parent.kind != CursorKind.TRANSLATION_UNIT:
        if parent.kind in TEMPLATE_CURSOR_KINDS:
            return True
        parent = parent.semantic_parent
    return False


def get_exception_specifier(cursor):
    return EXCEPTION_SPECIFIERS.get(cursor.exception_specification_kind, "")
