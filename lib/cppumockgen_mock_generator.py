# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

from cppumockgen_function import RecordKind


class CppUMockGenMockGenerator:
    """Generates the mock implementation of one callable."""

    def generate_signature(self, record):
        params = ", ".join(arg.get_signature() for arg in record.arguments)
        signature = f"{record.qualified_name}({params})"
        if record.kind not in (RecordKind.CONSTRUCTOR, RecordKind.DESTRUCTOR):
            signature = f"{record.return_value.type_spelling} {signature}"
        if record.is_const:
            signature += " const"
        if record.exception_specifier:
            signature += f" {record.exception_specifier}"
        return signature

    def generate_call(self, record):
        call = f'mock().actualCall("{record.qualified_name}")'
        if record.has_object:
            call += ".onObject(this)"
        for arg in record.arguments:
            call += arg.get_mock_call()
        return record.return_value.get_mock_return(call)

    def generate(self, record):
        return f"{self.generate_signature(record)}\n{{\n    {self.generate_call(record)};\n}}\n"
