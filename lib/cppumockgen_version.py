# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import re
from importlib import metadata
from pathlib import Path


class CppUMockGenVersion:
    """
    CppUMockGen Version - Taken from the installed distribution, or from the
    project file when running from a source checkout.
    """
    DISTRIBUTION = "cppumockgen"

    @staticmethod
    def get_version():
        try:
            return metadata.version(CppUMockGenVersion.DISTRIBUTION)
        except metadata.PackageNotFoundError:
            pass

        path = Path(__file__).parent.parent / "pyproject.toml"
        try:
            with path.open("r") as file:
                for line in file:
                    match = re.match(r'\s*version\s*=\s*"(\d+(?:\.\d+)*)"', line)
                    if match:
                        return match.group(1)
        except OSError as e:
            raise RuntimeError("Can't find or read the project file.") from e

        raise RuntimeError("Project file does not declare a version.")


CPPUMOCKGEN_VERSION = CppUMockGenVersion.get_version()

if __name__ == "__main__":
    print(f"CppUMockGen Version: {CPPUMOCKGEN_VERSION}")
