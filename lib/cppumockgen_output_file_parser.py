# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import re

USER_CODE_BEGIN = "CPPUMOCKGEN_USER_CODE_BEGIN"
USER_CODE_END = "CPPUMOCKGEN_USER_CODE_END"
GENERATION_OPTIONS_LABEL = "Generation options: "


class CppUMockGenOutputFileParser:
    """
    Re-reads a previously generated file to recover the block of user code
    and the generation options recorded in its heading.
    """
    USER_CODE_BEGIN_REGEX = re.compile(r'(?:\/\/|\/\*)\s*' + USER_CODE_BEGIN)
    USER_CODE_END_REGEX = re.compile(r'(?:\/\/|\/\*)\s*' + USER_CODE_END)
    GENERATION_OPTIONS_REGEX = re.compile(GENERATION_OPTIONS_LABEL + r'(.*)')

    def __init__(self):
        self.user_code = ""
        self.generation_options = ""
        self._capturing = False

    def parse(self, filepath):
        try:
            with open(filepath, 'r') as file:
                for line in file:
                    self.parse_line(line.rstrip('\r\n'))
        except FileNotFoundError:
            return

        if self._capturing:
            # Not properly delimited
            self.user_code = ""
            self._capturing = False

    def parse_line(self, line):
        if self.USER_CODE_BEGIN_REGEX.search(line):
            self._capturing = True
        elif self.USER_CODE_END_REGEX.search(line):
            self._capturing = False
        elif self._capturing:
            self.user_code += line + "\n"
        else:
            match = self.GENERATION_OPTIONS_REGEX.search(line)
            if match and not self.generation_options:
                self.generation_options = match.group(1).rstrip()
