"""
Setup file.
"""

import os

from setuptools import setup

URL = "https://github.com/gbuild/gbuild"
KEYWORDS = "groovy java jvm build compiler groovyc jar incremental classpath"
HERE = os.path.dirname(os.path.abspath(__file__))



if __name__ == "__main__":
    setup(
        keywords=KEYWORDS,
        url=URL,
        include_package_data=True)
