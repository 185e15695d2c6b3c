# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

from cppumockgen_function import RecordKind

OBJECT_ARG = "__object__"
NUM_CALLS_ARG = "unsigned int __numCalls__"
IGNORE_OBJECT_DEFAULT = " = ::CppUMockGen::IgnoreParameter::YES"


class CppUMockGenExpectationGenerator:
    """
    Generates the expectation helpers of one callable: a prototype pair for
    the header and the matching definitions for the implementation file.
    Both overloads are emitted, the one without call count forwarding to the
    other with a count of 1.
    """

    def _open_namespaces(self, record):
        return " ".join(["namespace expect {"] + [f"namespace {name}$ {{" for name in record.scope_names]) + "\n"

    def _close_namespaces(self, record):
        return " ".join(["}"] * (len(record.scope_names) + 1)) + "\n"

    def _args(self, record, proto):
        args = []
        if record.has_object:
            object_arg = f"CppUMockGen::Parameter<const {record.class_name}*> {OBJECT_ARG}"
            if proto and record.kind == RecordKind.DESTRUCTOR:
                object_arg += IGNORE_OBJECT_DEFAULT
            args.append(object_arg)
        for arg in record.arguments:
            args.extend(arg.get_expectation_args())
        return_arg = record.return_value.get_expectation_arg()
        if return_arg:
            args.append(return_arg)
        return args

    def _arg_names(self, record):
        names = [OBJECT_ARG] if record.has_object else []
        for arg in record.arguments:
            names.extend(arg.get_expectation_arg_names())
        if not record.return_value.is_void:
            names.append("__return__")
        return names

    def _declarations(self, record, proto):
        name = record.expectation_function_name
        args = self._args(record, proto)
        return (f"MockExpectedCall& {name}({', '.join(args)})",
                f"MockExpectedCall& {name}({', '.join([NUM_CALLS_ARG] + args)})")

    def generate_prototype(self, record):
        single, multiple = self._declarations(record, True)
        return f"{self._open_namespaces(record)}{single};\n{multiple};\n{self._close_namespaces(record)}"

    def generate_impl(self, record):
        single, multiple = self._declarations(record, False)
        forward_args = ", ".join(["1"] + self._arg_names(record))
        has_ignorable_args = any(arg.is_ignorable for arg in record.arguments)

        lines = self._open_namespaces(record)
        lines += f"{single}\n{{\n"
        lines += f"    return {record.expectation_function_name}({forward_args});\n"
        lines += "}\n"
        lines += f"{multiple}\n{{\n"
        if has_ignorable_args:
            lines += "    bool __ignoreOtherParams__ = false;\n"
        lines += f'    MockExpectedCall& __expectedCall__ = mock().expectNCalls(__numCalls__, "{record.qualified_name}");\n'
        if record.has_object:
            lines += (f"    if(!{OBJECT_ARG}.isIgnored()) {{ __expectedCall__.onObject("
                      f"const_cast<{record.class_name}*>({OBJECT_ARG}.getValue())); }}\n")
        for arg in record.arguments:
            lines += arg.get_expectation_body()
        lines += record.return_value.get_expectation_body()
        if has_ignorable_args:
            lines += "    if(__ignoreOtherParams__) { __expectedCall__.ignoreOtherParameters(); }\n"
        lines += "    return __expectedCall__;\n"
        lines += "}\n"
        lines += self._close_namespaces(record)
        return lines
