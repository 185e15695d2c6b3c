# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import logging
import os

from clang.cindex import Diagnostic, Index, TranslationUnitLoadError

from cppumockgen_console_colorizer import Color, ConsoleColorizer
from cppumockgen_expectation_generator import CppUMockGenExpectationGenerator
from cppumockgen_function import RECORD_TYPES
from cppumockgen_mock_generator import CppUMockGenMockGenerator
from cppumockgen_output_file_parser import GENERATION_OPTIONS_LABEL, USER_CODE_BEGIN, USER_CODE_END
from cppumockgen_string_helper import get_extension, get_filename_from_path, to_lower
from cppumockgen_type_classifier import CppUMockGenTypeClassifier, UnsupportedTypeError
from cppumockgen_version import CPPUMOCKGEN_VERSION

log = logging.getLogger(__name__)

CPP_EXTENSIONS = ("hpp", "hxx", "hh")
CPP_STANDARD_PREFIXES = ("c++", "gnu++")

INPUT_ERROR = "input"
PARSE_ERROR = "parse"


def generate_heading(gen_opts):
    lines = "/*\n"
    lines += f" * This file has been auto-generated by CppUTestMock v{CPPUMOCKGEN_VERSION}.\n"
    lines += " *\n"
    lines += " * Contents will NOT be preserved if it is regenerated!!!\n"
    if gen_opts:
        lines += " *\n"
        lines += f" * {GENERATION_OPTIONS_LABEL}{gen_opts}\n"
    lines += " */\n"
    lines += "\n"
    return lines


def get_header_include(input_filepath, base_directory):
    """Path used to include the input header, relative to the base directory if given."""
    if not base_directory:
        return get_filename_from_path(input_filepath)
    return os.path.relpath(input_filepath, base_directory).replace(os.sep, '/')


def is_cpp_input(input_filepath, interpret_as_cpp, language_standard):
    if interpret_as_cpp:
        return True
    if language_standard and to_lower(language_standard).startswith(CPP_STANDARD_PREFIXES):
        return True
    return to_lower(get_extension(input_filepath)) in CPP_EXTENSIONS


class CppUMockGenParser:
    """
    Parses a C/C++ header with libclang, collects the mockable functions and
    methods it declares, and generates mocks and expectations from them.
    """

    def __init__(self, error):
        self.error = error
        self.colorizer = ConsoleColorizer(error)
        self.functions = []
        self.input_filepath = ""
        self.interpret_as_cpp = False
        self.error_kind = None
        self.mock_generator = CppUMockGenMockGenerator()
        self.expectation_generator = CppUMockGenExpectationGenerator()

    def _input_error(self, message):
        self.colorizer.write("INPUT ERROR: ", Color.LIGHT_RED, message)
        self.error_kind = INPUT_ERROR

    def parse(self, input_filepath, config, interpret_as_cpp=False, language_standard="", include_paths=()):
        self.input_filepath = input_filepath
        self.interpret_as_cpp = is_cpp_input(input_filepath, interpret_as_cpp, language_standard)
        self.functions = []
        self.error_kind = None

        if not os.path.isfile(input_filepath):
            self._input_error(f"Input file '{input_filepath}' does not exist.")
            return False

        args = ["-xc++" if self.interpret_as_cpp else "-xc"]
        if language_standard:
            args.append(f"-std={language_standard}")
        args.extend(f"-I{path}" for path in include_paths)
        log.debug("parsing %s with %s", input_filepath, args)

        index = Index.create()
        try:
            tu = index.parse(input_filepath, args=args)
        except TranslationUnitLoadError:
            self._input_error(f"Unable to parse input file '{input_filepath}'.")
            return False

        if not self._report_diagnostics(tu):
            self.error_kind = PARSE_ERROR
            return False

        classifier = CppUMockGenTypeClassifier(config)
        main_file = os.path.realpath(input_filepath)
        try:
            self._visit(tu.cursor, config, classifier, main_file)
        except UnsupportedTypeError as e:
            self._input_error(str(e))
            return False

        if not self.functions:
            self._input_error("The input file does not contain any mockable function or method.")
            return False

        return True

    def _report_diagnostics(self, tu):
        num_errors = 0
        for diag in tu.diagnostics:
            if diag.severity in (Diagnostic.Error, Diagnostic.Fatal):
                num_errors += 1
                self.colorizer.write("PARSE ERROR: ", Color.LIGHT_RED, diag.format())
            elif diag.severity == Diagnostic.Warning:
                self.colorizer.write("PARSE WARNING: ", Color.YELLOW, diag.format())
        return num_errors == 0

    def _visit(self, cursor, config, classifier, main_file):
        for child in cursor.get_children():
            location_file = child.location.file
            if location_file is None or os.path.realpath(location_file.name) != main_file:
                continue

            record_type = RECORD_TYPES.get(child.kind)
            if record_type is None:
                self._visit(child, config, classifier, main_file)
                continue

            record = record_type()
            if record.parse(child, config, classifier):
                log.debug("mocking %s", record.qualified_name)
                self.functions.append(record)

    # Generation

    def _write_input_include(self, output, base_directory):
        include = get_header_include(self.input_filepath, base_directory)
        if self.interpret_as_cpp:
            output.write(f'#include "{include}"\n')
        else:
            output.write('extern "C" {\n')
            output.write(f'#include "{include}"\n')
            output.write("}\n")
        output.write("\n")

    def generate_mock(self, gen_opts, user_code, base_directory, output):
        output.write(generate_heading(gen_opts))
        self._write_input_include(output, base_directory)
        output.write("#include <CppUTestExt/MockSupport.h>\n")
        output.write("\n")
        for function in self.functions:
            output.write(self.mock_generator.generate(function))
            output.write("\n")
        output.write(f"// {USER_CODE_BEGIN}\n")
        output.write(user_code)
        output.write(f"// {USER_CODE_END}\n")

    def generate_expectation_header(self, gen_opts, base_directory, output):
        output.write(generate_heading(gen_opts))
        output.write("#include <CppUMockGen.hpp>\n")
        output.write("\n")
        self._write_input_include(output, base_directory)
        output.write("#include <CppUTestExt/MockSupport.h>\n")
        output.write("\n")
        for function in self.functions:
            output.write(self.expectation_generator.generate_prototype(function))
            output.write("\n")

    def generate_expectation_impl(self, gen_opts, header_filepath, output):
        output.write(generate_heading(gen_opts))
        output.write(f'#include "{get_filename_from_path(header_filepath)}"\n')
        output.write("\n")
        for function in self.functions:
            output.write(self.expectation_generator.generate_impl(function))
            output.write("\n")
