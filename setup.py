"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/bindbuild/bindbuild"
KEYWORDS = "ffi bindings build-script native-library version-resolution cargo"
HERE = os.path.dirname(os.path.abspath(__file__))

INSTALL_REQUIRES = [
    "semantic_version>=2.10",
]

EXTRAS_REQUIRE = {
    "test": ["pytest>=7.0"],
}


if __name__ == "__main__":
    setup(
        name="bindbuild",
        version="0.1.0",
        description="Build-time configuration selection for generated native-library bindings",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=INSTALL_REQUIRES,
        extras_require=EXTRAS_REQUIRE,
        entry_points={"console_scripts": ["bindbuild=bindbuild.cli:main"]},
        include_package_data=True)
